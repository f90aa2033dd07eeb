"""Evaluation Guard — at most one in-flight evaluation per strategy, overlaps dropped.

Invariants:
    - Acquire is non-blocking: a held guard returns Skipped immediately
    - The lock is released on every exit path (return, exception, cancellation)
    - Overlapping requests are dropped, never queued or merged

Design Decisions:
    - threading.Lock over asyncio.Lock: try-acquire is safe whether the host
      drives checks from asyncio tasks or from worker threads with their own loops
    - Guard is never persisted: strategies build a fresh one on construction
      and on every rehydration path
"""

import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from node_retention.core.evaluate_retention import RetentionDecision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardOutcome:
    """Skipped (another evaluation in progress) or Evaluated(decision)."""
    skipped: bool
    decision: RetentionDecision | None = None

    @classmethod
    def skip(cls) -> "GuardOutcome":
        return cls(skipped=True)

    @classmethod
    def evaluated(cls, decision: RetentionDecision) -> "GuardOutcome":
        return cls(skipped=False, decision=decision)


class EvaluationGuard:
    """Non-blocking mutual exclusion around one node's evaluation."""

    def __init__(self):
        self._lock = threading.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    async def run(
        self,
        evaluation: Callable[[], Awaitable[RetentionDecision]],
        node_name: str | None = None,
    ) -> GuardOutcome:
        """Run `evaluation` if no other evaluation holds the guard."""
        if not self._lock.acquire(blocking=False):
            logger.debug(
                "Evaluation already in progress, skipping",
                extra={"node_name": node_name},
            )
            return GuardOutcome.skip()
        try:
            return GuardOutcome.evaluated(await evaluation())
        finally:
            self._lock.release()
