"""Policy Snapshot — serialization / deserialization for RetentionPolicy.

Invariants:
    - to_snapshot produces a JSON-safe dict holding only the two minute values
    - from_snapshot reconstructs a RetentionPolicy from any valid snapshot dict
    - Missing keys fall back to 0 (disabled); negative stored values are
      migrated the same way as config strings
    - Guard state is never part of a snapshot

Design Decisions:
    - Stored values reuse parse_retention_config: one migration path for
      fresh config and rehydrated records
"""

from node_retention.core.retention_policy import (
    RetentionPolicy, parse_retention_config, IDLE_FIELD, CYCLE_FIELD,
)


def policy_to_snapshot(policy: RetentionPolicy) -> dict:
    """Serialize RetentionPolicy to JSON-safe dict. Pure, no IO."""
    return {
        IDLE_FIELD: policy.idle_termination_minutes,
        CYCLE_FIELD: policy.cycle_termination_minutes,
    }


def policy_from_snapshot(data: dict | None) -> tuple[RetentionPolicy, list[str]]:
    """Reconstruct RetentionPolicy from snapshot dict. Pure, no IO.

    Values may be ints (written by policy_to_snapshot) or strings (older
    records that stored the raw form fields).
    """
    if not data:
        return RetentionPolicy(), []
    return parse_retention_config(
        _as_text(data.get(IDLE_FIELD)), _as_text(data.get(CYCLE_FIELD)),
    )


def _as_text(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
