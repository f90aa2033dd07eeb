"""Diagnostic Messages — human-readable lines for retention decisions.

Invariants:
    - All functions are pure (no IO, no logging)
    - Durations are reported in whole minutes, truncated
    - A termination message names every condition that fired, once
"""

from datetime import timedelta

from node_retention.core.evaluate_retention import RetentionDecision


def whole_minutes(duration: timedelta) -> int:
    """Truncate a duration to whole minutes."""
    return int(duration.total_seconds() // 60)


def build_timeout_message(node_name: str, decision: RetentionDecision) -> str:
    """Describe why `node_name` is being terminated."""
    message = f"Idle timeout of {node_name}"
    if decision.idle_duration is not None:
        message += f" after {whole_minutes(decision.idle_duration)} idle minutes"
    if decision.cycle_remaining is not None:
        message += (
            f" with {whole_minutes(decision.cycle_remaining)} minutes"
            f" remaining in the billing cycle"
        )
    return message


def build_decision_log_fields(node_name: str, decision: RetentionDecision) -> dict:
    """Structured `extra` fields for a decision log record."""
    fields = {
        "node_name": node_name,
        "decision": decision.kind.value,
        "trigger": decision.trigger.value if decision.trigger else None,
        "skip_reason": decision.skip_reason.value if decision.skip_reason else None,
        "idle_minutes": (
            whole_minutes(decision.idle_duration)
            if decision.idle_duration is not None else None
        ),
        "cycle_remaining_minutes": (
            whole_minutes(decision.cycle_remaining)
            if decision.cycle_remaining is not None else None
        ),
    }
    return {k: v for k, v in fields.items() if v is not None}
