"""Retention Policy — tests for config parsing, legacy migration, and invariants.

Tests cover:
    - Blank / missing strings disable the condition (0)
    - Malformed strings fall back to 15 minutes with a warning
    - Cycle values stored as absolute values
    - Negative legacy idle value moves its magnitude into the cycle field
    - Direct construction with negative values is rejected
    - Convenience properties (enabled flags, timedeltas)
"""

from datetime import timedelta

import pytest

from node_retention.core.domain_types import DEFAULT_TERMINATION_MINUTES
from node_retention.core.errors import InvalidPolicyError
from node_retention.core.retention_policy import (
    RetentionPolicy,
    parse_termination_minutes,
    parse_retention_config,
)


# ─── parse_termination_minutes ───────────────────────────────────

def test_empty_string_is_disabled():
    assert parse_termination_minutes("", "idle_termination_minutes") == (0, None)


def test_whitespace_only_is_disabled():
    assert parse_termination_minutes("   ", "idle_termination_minutes") == (0, None)


def test_none_is_disabled():
    assert parse_termination_minutes(None, "idle_termination_minutes") == (0, None)


def test_decimal_string_parsed():
    assert parse_termination_minutes("30", "idle_termination_minutes") == (30, None)


def test_surrounding_whitespace_ignored():
    assert parse_termination_minutes(" 7 ", "cycle_termination_minutes") == (7, None)


def test_malformed_string_uses_default_with_warning():
    value, warning = parse_termination_minutes("abc", "idle_termination_minutes")
    assert value == DEFAULT_TERMINATION_MINUTES == 15
    assert warning is not None
    assert "idle_termination_minutes" in warning
    assert "'abc'" in warning


def test_negative_sign_preserved_by_field_parser():
    assert parse_termination_minutes("-10", "idle_termination_minutes") == (-10, None)


# ─── parse_retention_config ──────────────────────────────────────

def test_both_blank_never_terminates():
    policy, warnings = parse_retention_config("", "")
    assert policy == RetentionPolicy(0, 0)
    assert policy.never_terminates
    assert warnings == []


def test_idle_and_cycle_parsed():
    policy, warnings = parse_retention_config("15", "5")
    assert policy.idle_termination_minutes == 15
    assert policy.cycle_termination_minutes == 5
    assert warnings == []


def test_malformed_idle_records_one_warning():
    policy, warnings = parse_retention_config("abc", "")
    assert policy.idle_termination_minutes == 15
    assert policy.cycle_termination_minutes == 0
    assert len(warnings) == 1


def test_malformed_cycle_uses_same_default():
    policy, warnings = parse_retention_config("", "soon")
    assert policy.cycle_termination_minutes == 15
    assert len(warnings) == 1
    assert "cycle_termination_minutes" in warnings[0]


def test_negative_cycle_stored_as_magnitude():
    policy, _ = parse_retention_config("", "-5")
    assert policy.cycle_termination_minutes == 5


def test_negative_idle_migrates_magnitude_to_cycle():
    """Legacy "-10" idle means: terminate 10 minutes before the billing boundary."""
    policy, warnings = parse_retention_config("-10", "")
    assert policy.idle_termination_minutes == 0
    assert policy.cycle_termination_minutes == 10
    assert warnings == []


def test_negative_idle_replaces_configured_cycle():
    policy, _ = parse_retention_config("-10", "3")
    assert policy == RetentionPolicy(
        idle_termination_minutes=0, cycle_termination_minutes=10,
    )


# ─── RetentionPolicy ─────────────────────────────────────────────

def test_direct_negative_idle_rejected():
    with pytest.raises(InvalidPolicyError) as exc:
        RetentionPolicy(idle_termination_minutes=-1)
    assert exc.value.code == "INVALID_POLICY"
    assert exc.value.context.field_name == "idle_termination_minutes"


def test_direct_negative_cycle_rejected():
    with pytest.raises(InvalidPolicyError):
        RetentionPolicy(cycle_termination_minutes=-3)


def test_policy_is_immutable():
    policy = RetentionPolicy(15, 5)
    with pytest.raises(AttributeError):
        policy.idle_termination_minutes = 20


def test_enabled_flags_and_durations():
    policy = RetentionPolicy(idle_termination_minutes=15, cycle_termination_minutes=5)
    assert policy.idle_enabled
    assert policy.cycle_enabled
    assert not policy.never_terminates
    assert policy.idle_timeout == timedelta(minutes=15)
    assert policy.cycle_lead_time == timedelta(minutes=5)


def test_cycle_only_policy_is_not_never_terminates():
    policy = RetentionPolicy(idle_termination_minutes=0, cycle_termination_minutes=5)
    assert not policy.idle_enabled
    assert not policy.never_terminates
