"""Domain Types — verifies constants and enum values.

Tests:
    - Billing cycle and startup grace durations
    - Recheck interval hint is a positive constant
    - Enums serialize to stable strings
"""

from datetime import timedelta

from node_retention.core.domain_types import (
    BILLING_CYCLE, STARTUP_TIMEOUT, DEFAULT_TERMINATION_MINUTES,
    RECHECK_INTERVAL_MINUTES,
    DecisionKind, SkipReason, TerminationTrigger,
)


def test_timing_constants():
    assert BILLING_CYCLE == timedelta(minutes=60)
    assert STARTUP_TIMEOUT == timedelta(minutes=30)
    assert DEFAULT_TERMINATION_MINUTES == 15
    assert RECHECK_INTERVAL_MINUTES == 1


def test_decision_kind_has_two_outcomes():
    assert {k.value for k in DecisionKind} == {"no_action", "terminate"}


def test_trigger_values():
    assert {t.value for t in TerminationTrigger} == {"idle", "cycle", "idle_and_cycle"}


def test_skip_reasons_are_strings():
    assert SkipReason.FETCH_FAILED == "fetch_failed"
    assert len(SkipReason) == 7
