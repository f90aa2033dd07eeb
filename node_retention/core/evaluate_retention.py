"""Retention Evaluation — pure decision rules for idle and billing-cycle termination.

Invariants:
    - All functions are PURE: no IO, no async, no logging, no side effects
    - Precondition checks return a SkipReason on violation, None on success
    - Startup grace wins over every termination rule
    - Idle signal trusted only when running_duration >= idle_duration
    - When idle and cycle are both enabled, BOTH must have elapsed
    - At most one TerminationTrigger per decision

Design Decisions:
    - One table-driven trigger selection instead of a branch per combination:
      a single call site logs and triggers
    - Return decisions (not exceptions): NoAction is the normal outcome
"""

from dataclasses import dataclass
from datetime import timedelta

from node_retention.core.domain_types import (
    BILLING_CYCLE, STARTUP_TIMEOUT,
    DecisionKind, SkipReason, TerminationTrigger,
)
from node_retention.core.node_facts import NodeTimingFacts
from node_retention.core.retention_policy import RetentionPolicy


@dataclass(frozen=True)
class RetentionDecision:
    """Result of one evaluation — NoAction (with reason) or Terminate (with trigger)."""

    kind: DecisionKind
    trigger: TerminationTrigger | None = None
    skip_reason: SkipReason | None = None

    # Reported in the diagnostic; None when the condition is not enabled.
    idle_duration: timedelta | None = None
    cycle_remaining: timedelta | None = None

    @classmethod
    def no_action(cls, reason: SkipReason) -> "RetentionDecision":
        return cls(kind=DecisionKind.NO_ACTION, skip_reason=reason)

    @property
    def should_terminate(self) -> bool:
        return self.kind == DecisionKind.TERMINATE


# Keyed by (idle_enabled, cycle_enabled) -> trigger fired when every
# enabled condition has elapsed.
_TRIGGERS: dict[tuple[bool, bool], TerminationTrigger | None] = {
    (True, True): TerminationTrigger.IDLE_AND_CYCLE,
    (True, False): TerminationTrigger.IDLE,
    (False, True): TerminationTrigger.CYCLE,
    (False, False): None,
}


# === Preconditions ============================================================

def check_node_present(node_present: bool) -> SkipReason | None:
    """Rule 1a: a deleted/deconstructed node is never evaluated."""
    if not node_present:
        return SkipReason.NODE_ABSENT
    return None


def check_policy_enabled(policy: RetentionPolicy) -> SkipReason | None:
    """Rule 1b: with idle and cycle both disabled nothing can fire."""
    if policy.never_terminates:
        return SkipReason.POLICY_DISABLED
    return None


def check_node_idle(node_idle: bool, evaluation_disabled: bool) -> SkipReason | None:
    """Rule 2: busy nodes are kept; the global switch turns evaluation off."""
    if not node_idle:
        return SkipReason.NOT_IDLE
    if evaluation_disabled:
        return SkipReason.EVALUATION_DISABLED
    return None


def check_preconditions(
    policy: RetentionPolicy, *,
    node_present: bool, node_idle: bool, evaluation_disabled: bool,
) -> SkipReason | None:
    """Chain the pre-fetch checks. Returns first SkipReason or None."""
    return (
        check_node_present(node_present)
        or check_policy_enabled(policy)
        or check_node_idle(node_idle, evaluation_disabled)
    )


def check_startup_grace(facts: NodeTimingFacts) -> SkipReason | None:
    """An unreachable node younger than STARTUP_TIMEOUT is assumed to be booting."""
    if facts.is_offline and facts.uptime < STARTUP_TIMEOUT:
        return SkipReason.STARTUP_GRACE
    return None


# === Sub-decisions ============================================================

def cycle_remaining(uptime: timedelta, cycle: timedelta = BILLING_CYCLE) -> timedelta:
    """Time left until the next billing boundary. In (0, cycle]."""
    return cycle - (uptime % cycle)


def is_idle_elapsed(policy: RetentionPolicy, facts: NodeTimingFacts) -> bool:
    if not policy.idle_enabled:
        return False
    if facts.running_duration < facts.idle_duration:
        return False
    return facts.idle_duration > policy.idle_timeout


def is_cycle_elapsed(policy: RetentionPolicy, remaining: timedelta) -> bool:
    if not policy.cycle_enabled:
        return False
    return remaining <= policy.cycle_lead_time


def select_trigger(
    idle_enabled: bool, idle_elapsed: bool,
    cycle_enabled: bool, cycle_elapsed: bool,
) -> TerminationTrigger | None:
    """Combine the sub-decisions: every enabled condition must have elapsed."""
    trigger = _TRIGGERS[(idle_enabled, cycle_enabled)]
    if trigger is None:
        return None
    if idle_enabled and not idle_elapsed:
        return None
    if cycle_enabled and not cycle_elapsed:
        return None
    return trigger


# === Public API ===============================================================

def decide_retention(
    policy: RetentionPolicy, facts: NodeTimingFacts,
) -> RetentionDecision:
    """Decide whether a node that passed the preconditions should be terminated."""
    grace = check_startup_grace(facts)
    if grace:
        return RetentionDecision.no_action(grace)

    remaining = cycle_remaining(facts.uptime)
    trigger = select_trigger(
        policy.idle_enabled, is_idle_elapsed(policy, facts),
        policy.cycle_enabled, is_cycle_elapsed(policy, remaining),
    )
    if trigger is None:
        return RetentionDecision.no_action(SkipReason.CONDITIONS_NOT_MET)

    return RetentionDecision(
        kind=DecisionKind.TERMINATE,
        trigger=trigger,
        idle_duration=facts.idle_duration if policy.idle_enabled else None,
        cycle_remaining=remaining if policy.cycle_enabled else None,
    )
