"""Retention Policy — immutable idle/cycle termination settings and their parsing.

Invariants:
    - idle_termination_minutes >= 0 and cycle_termination_minutes >= 0 (always)
    - Blank or missing config string -> 0 (disabled)
    - Malformed config string -> DEFAULT_TERMINATION_MINUTES plus one warning
    - Cycle value stored as its absolute value
    - Negative (legacy) idle value -> idle 0, its magnitude becomes the cycle value

Design Decisions:
    - Parsing never raises: warnings are returned, the shell decides how to log them
    - Frozen dataclass: a strategy's policy cannot drift after construction
"""

from dataclasses import dataclass
from datetime import timedelta

from node_retention.core.domain_types import DEFAULT_TERMINATION_MINUTES
from node_retention.core.errors import InvalidPolicyError

IDLE_FIELD = "idle_termination_minutes"
CYCLE_FIELD = "cycle_termination_minutes"


@dataclass(frozen=True)
class RetentionPolicy:
    """When a node may be reaped: after idling, near a billing boundary, or both."""

    # Minutes of idleness before termination. 0 = never, unless a cycle
    # policy is set.
    idle_termination_minutes: int = 0

    # Lead time (minutes) before the next billing-cycle boundary inside
    # which termination may happen. 0 = disabled.
    cycle_termination_minutes: int = 0

    def __post_init__(self):
        if self.idle_termination_minutes < 0:
            raise InvalidPolicyError(IDLE_FIELD, self.idle_termination_minutes)
        if self.cycle_termination_minutes < 0:
            raise InvalidPolicyError(CYCLE_FIELD, self.cycle_termination_minutes)

    @property
    def idle_enabled(self) -> bool:
        return self.idle_termination_minutes > 0

    @property
    def cycle_enabled(self) -> bool:
        return self.cycle_termination_minutes > 0

    @property
    def never_terminates(self) -> bool:
        """Neither condition enabled — evaluation can stop early."""
        return not (self.idle_enabled or self.cycle_enabled)

    @property
    def idle_timeout(self) -> timedelta:
        return timedelta(minutes=self.idle_termination_minutes)

    @property
    def cycle_lead_time(self) -> timedelta:
        return timedelta(minutes=self.cycle_termination_minutes)


def parse_termination_minutes(
    raw: str | None, field_name: str,
) -> tuple[int, str | None]:
    """Parse one free-text minutes field. Returns (value, warning_or_None).

    Sign is preserved; callers normalize negatives.
    """
    if raw is None or not raw.strip():
        return 0, None
    try:
        return int(raw.strip()), None
    except ValueError:
        return DEFAULT_TERMINATION_MINUTES, (
            f"Malformed {field_name} value: {raw!r}, "
            f"using default of {DEFAULT_TERMINATION_MINUTES} minutes"
        )


def parse_retention_config(
    idle_raw: str | None, cycle_raw: str | None,
) -> tuple[RetentionPolicy, list[str]]:
    """Build a RetentionPolicy from the two node-definition strings.

    Returns the policy and any warnings produced while parsing.
    """
    warnings = []

    idle, warning = parse_termination_minutes(idle_raw, IDLE_FIELD)
    if warning:
        warnings.append(warning)

    cycle, warning = parse_termination_minutes(cycle_raw, CYCLE_FIELD)
    if warning:
        warnings.append(warning)
    cycle = abs(cycle)

    # Legacy encoding: a negative idle value meant "terminate this many
    # minutes before the billing boundary".
    if idle < 0:
        cycle = abs(idle)
        idle = 0

    return RetentionPolicy(
        idle_termination_minutes=idle, cycle_termination_minutes=cycle,
    ), warnings
