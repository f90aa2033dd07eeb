"""Domain Types — constants and enums shared by the retention core.

Invariants:
    - Billing cycle is one hour; startup grace is 30 minutes
    - Malformed termination-minutes strings fall back to DEFAULT_TERMINATION_MINUTES
    - All decision outcomes encoded as Enums — no raw string matching

Design Decisions:
    - timedelta constants over millisecond ints: unit mistakes become type errors
    - str Enums: serialize into JSON log records without custom encoders
"""

from datetime import timedelta
from enum import Enum


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_TERMINATION_MINUTES = 15
STARTUP_TIMEOUT = timedelta(minutes=30)
BILLING_CYCLE = timedelta(hours=1)

# Returned by every check(); the host re-polls after this many minutes.
RECHECK_INTERVAL_MINUTES = 1


# ─── Enums ───────────────────────────────────────────────────────

class DecisionKind(str, Enum):
    """Outcome of one retention evaluation."""
    NO_ACTION = "no_action"
    TERMINATE = "terminate"


class TerminationTrigger(str, Enum):
    """Which enabled condition(s) fired a termination."""
    IDLE = "idle"
    CYCLE = "cycle"
    IDLE_AND_CYCLE = "idle_and_cycle"


class SkipReason(str, Enum):
    """Why an evaluation ended without action."""
    NODE_ABSENT = "node_absent"
    POLICY_DISABLED = "policy_disabled"
    NOT_IDLE = "not_idle"
    EVALUATION_DISABLED = "evaluation_disabled"
    FETCH_FAILED = "fetch_failed"
    STARTUP_GRACE = "startup_grace"
    CONDITIONS_NOT_MET = "conditions_not_met"
