"""Cascades: secondary mutations triggered by a primary one.

Creating a product consumes nameset and badge stock, recording a sale or
reservation consumes product stock, deleting a pending reservation gives
it back.  None of these span a transaction, so each dependent mutation is
modelled as a ``CascadeStep`` with a forward action and an optional
compensating action, and ``Cascade`` runs them under one of two policies:

``BEST_EFFORT``
    Run every step.  A failing step is logged and reported, the remaining
    steps still run and nothing is undone.

``COMPENSATE``
    Stop at the first failing step and undo the steps already applied, in
    reverse order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from kitstock.domain.exceptions import DomainException

logger = logging.getLogger(__name__)


class CascadePolicy(Enum):
    BEST_EFFORT = "best_effort"
    COMPENSATE = "compensate"


@dataclass(frozen=True)
class CascadeStep:
    name: str
    forward: Callable[[], None]
    compensate: Callable[[], None] | None = None


@dataclass(frozen=True)
class CascadeFailure:
    step: str
    reason: str


@dataclass
class CascadeOutcome:
    """What happened to each step of a cascade."""

    applied: list[str] = field(default_factory=list)
    failures: list[CascadeFailure] = field(default_factory=list)
    compensated: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def rolled_back(self) -> bool:
        return bool(self.compensated)

    def failed_steps(self) -> list[str]:
        return [f.step for f in self.failures]


class Cascade:

    def __init__(self, policy: CascadePolicy = CascadePolicy.BEST_EFFORT) -> None:
        self._policy = policy

    @property
    def policy(self) -> CascadePolicy:
        return self._policy

    def run(self, steps: list[CascadeStep]) -> CascadeOutcome:
        outcome = CascadeOutcome()
        applied: list[CascadeStep] = []

        for step in steps:
            try:
                step.forward()
            except DomainException as exc:
                logger.warning("Cascade step %s failed: %s", step.name, exc)
                outcome.failures.append(CascadeFailure(step.name, str(exc)))
                if self._policy is CascadePolicy.COMPENSATE:
                    self._unwind(applied, outcome)
                    break
                continue
            applied.append(step)
            outcome.applied.append(step.name)

        return outcome

    def rollback(self, steps: list[CascadeStep], outcome: CascadeOutcome) -> None:
        """Undo the applied steps of a finished cascade.

        Used when the primary mutation that follows a cascade fails.
        """
        applied = [s for s in steps if s.name in outcome.applied and s.name not in outcome.compensated]
        self._unwind(applied, outcome)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _unwind(applied: list[CascadeStep], outcome: CascadeOutcome) -> None:
        for step in reversed(applied):
            if step.compensate is None:
                continue
            try:
                step.compensate()
            except DomainException as exc:
                # Nothing left to fall back on; surface it on the outcome.
                logger.error("Compensation of %s failed: %s", step.name, exc)
                outcome.failures.append(
                    CascadeFailure(step.name, f"compensation failed: {exc}")
                )
                continue
            outcome.compensated.append(step.name)
            logger.info("Compensated cascade step %s", step.name)
