"""Node Timing Facts — the observations one evaluation is decided on.

Invariants:
    - Gathered once per evaluation, never refreshed mid-decision
    - Durations are non-negative timedeltas
"""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class NodeTimingFacts:
    """Snapshot of a node's connectivity and timing at evaluation time."""

    is_offline: bool

    # Since the compute instance was launched.
    uptime: timedelta

    # Since the instance entered the provider's running state.
    running_duration: timedelta

    # Since the node last had work assigned.
    idle_duration: timedelta
