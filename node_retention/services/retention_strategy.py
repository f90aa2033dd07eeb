"""Retention Strategy — per-node periodic check that decides when to fire idle timeout.

Invariants:
    - check() always returns RECHECK_INTERVAL_MINUTES, whatever happened
    - At most one evaluation in flight per strategy (EvaluationGuard)
    - Fact-fetch failures (FactFetchError, OSError, a cancelled fetch) -> NoAction,
      logged at DEBUG; cancelling the calling task still propagates
    - trigger_idle_timeout() awaited at most once per evaluation, from one call site
    - A node deleted mid-evaluation is never triggered
    - Guard is rebuilt on every construction path (init, snapshot, copy)

Design Decisions:
    - Imperative shell around core/evaluate_retention: gather facts, call the
      pure rules, apply the one side effect
    - evaluation_disabled passed in at construction (from Settings) rather
      than read from process state during evaluation
    - evaluate() and try_evaluate() let unexpected collaborator exceptions
      propagate (guard released on the way out); check() logs them and
      never crashes the scheduler tick
"""

import asyncio
import logging

from node_retention.config import Settings, get_settings
from node_retention.core.domain_types import RECHECK_INTERVAL_MINUTES, SkipReason
from node_retention.core.errors import ErrorContext, FactFetchError
from node_retention.core.evaluate_retention import (
    RetentionDecision, check_preconditions, decide_retention,
)
from node_retention.core.format_messages import (
    build_decision_log_fields, build_timeout_message,
)
from node_retention.core.node_facts import NodeTimingFacts
from node_retention.core.policy_snapshot import policy_from_snapshot, policy_to_snapshot
from node_retention.core.retention_policy import RetentionPolicy, parse_retention_config
from node_retention.schemas.node_definition import RetentionDefinition
from node_retention.services.evaluation_guard import EvaluationGuard, GuardOutcome
from node_retention.services.node_handle import NodeHandle

logger = logging.getLogger(__name__)


class RetentionStrategy:
    """Decides, once per tick, whether an idle cloud node should be torn down."""

    display_name = "Cloud"

    def __init__(
        self, policy: RetentionPolicy, *, evaluation_disabled: bool = False,
    ):
        self.policy = policy
        self.evaluation_disabled = evaluation_disabled
        self._guard = EvaluationGuard()

    # --- Construction / rehydration -------------------------------------------

    @classmethod
    def from_config(
        cls, idle_termination_minutes: str | None,
        cycle_termination_minutes: str | None,
        settings: Settings | None = None,
    ) -> "RetentionStrategy":
        """Build from the two free-text node-definition fields. Never raises."""
        policy, warnings = parse_retention_config(
            idle_termination_minutes, cycle_termination_minutes,
        )
        return cls._with_warnings(policy, warnings, settings)

    @classmethod
    def from_definition(
        cls, definition: RetentionDefinition, settings: Settings | None = None,
    ) -> "RetentionStrategy":
        policy, warnings = definition.to_policy()
        return cls._with_warnings(policy, warnings, settings)

    @classmethod
    def from_snapshot(
        cls, data: dict | None, settings: Settings | None = None,
    ) -> "RetentionStrategy":
        """Restore a persisted strategy. The guard is always fresh."""
        policy, warnings = policy_from_snapshot(data)
        return cls._with_warnings(policy, warnings, settings)

    def to_snapshot(self) -> dict:
        """Persisted form: policy values only, never guard state."""
        return policy_to_snapshot(self.policy)

    @classmethod
    def _with_warnings(
        cls, policy: RetentionPolicy, warnings: list[str],
        settings: Settings | None,
    ) -> "RetentionStrategy":
        for warning in warnings:
            logger.warning(warning)
        settings = settings or get_settings()
        return cls(policy, evaluation_disabled=settings.retention_disabled)

    def __copy__(self) -> "RetentionStrategy":
        return type(self)(
            self.policy, evaluation_disabled=self.evaluation_disabled,
        )

    def __deepcopy__(self, memo) -> "RetentionStrategy":
        return self.__copy__()

    # --- Host operations ------------------------------------------------------

    async def check(self, node: NodeHandle | None) -> int:
        """Per-tick entry point. Returns minutes until the next check."""
        try:
            await self.try_evaluate(node)
        except Exception as e:
            logger.error(
                f"Retention check failed for {_name_of(node)}: {e}",
                extra={"node_name": _name_of(node)}, exc_info=True,
            )
        return RECHECK_INTERVAL_MINUTES

    async def try_evaluate(self, node: NodeHandle | None) -> GuardOutcome:
        """Evaluate unless another evaluation of this node is in flight."""
        return await self._guard.run(
            lambda: self.evaluate(node), node_name=_name_of(node),
        )

    async def start(self, node: NodeHandle) -> None:
        """Ask the node to come online as soon as possible."""
        logger.info(
            f"Start requested for {node.name}", extra={"node_name": node.name},
        )
        await node.connect(force=False)

    # --- Evaluation -----------------------------------------------------------

    async def evaluate(self, node: NodeHandle | None) -> RetentionDecision:
        """Gather facts, apply the retention rules, trigger idle timeout if due."""
        node_present = node is not None and node.is_provisioned()
        skip = check_preconditions(
            self.policy,
            node_present=node_present,
            node_idle=node_present and node.is_idle(),
            evaluation_disabled=self.evaluation_disabled,
        )
        if skip:
            return RetentionDecision.no_action(skip)

        facts = await self._gather_facts(node)
        if facts is None:
            return RetentionDecision.no_action(SkipReason.FETCH_FAILED)

        decision = decide_retention(self.policy, facts)
        if decision.should_terminate:
            return await self._terminate(node, decision)
        return decision

    async def _gather_facts(self, node: NodeHandle) -> NodeTimingFacts | None:
        """Collect timing facts. None when uptime could not be fetched."""
        try:
            uptime = await node.uptime_duration()
        except FactFetchError as e:
            return self._fetch_failed(node, e)
        except OSError as e:
            # TimeoutError, ConnectionError and friends
            reason = "timeout" if isinstance(e, TimeoutError) else "io_error"
            return self._fetch_failed(node, FactFetchError(
                str(e) or type(e).__name__, reason=reason,
                context=ErrorContext(node_name=node.name),
            ))
        except asyncio.CancelledError:
            # Only the collaborator's own fetch was cancelled; a cancelled
            # caller task must still unwind.
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            return self._fetch_failed(node, FactFetchError(
                "uptime request cancelled", reason="interrupted",
                context=ErrorContext(node_name=node.name),
            ))

        return NodeTimingFacts(
            is_offline=node.is_offline(),
            uptime=uptime,
            running_duration=node.running_duration(),
            idle_duration=node.idle_duration(),
        )

    @staticmethod
    def _fetch_failed(node: NodeHandle, err: FactFetchError) -> None:
        err.context.node_name = err.context.node_name or node.name
        logger.debug(
            f"Exception while checking host uptime for {node.name}, "
            f"will retry next check: {err.message}",
            extra=err.to_log_fields(),
        )
        return None

    async def _terminate(
        self, node: NodeHandle, decision: RetentionDecision,
    ) -> RetentionDecision:
        """Single log-and-trigger call site."""
        if not node.is_provisioned():
            return RetentionDecision.no_action(SkipReason.NODE_ABSENT)
        logger.info(
            build_timeout_message(node.name, decision),
            extra=build_decision_log_fields(node.name, decision),
        )
        await node.trigger_idle_timeout()
        return decision


def _name_of(node: NodeHandle | None) -> str | None:
    return node.name if node is not None else None
