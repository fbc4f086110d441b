"""Ordered resolution chains.

A chain is a list of named steps. Each step inspects one candidate source
and either accepts a value, skips with a reason, or fails. The first
accepted value wins; a failure stops the chain.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

logger = logging.getLogger("wcls_launcher.chain")

T = TypeVar("T")


class Outcome(Enum):
    ACCEPT = "accept"
    SKIP = "skip"
    FAIL = "fail"


@dataclass(frozen=True)
class StepResult(Generic[T]):
    """Result of one resolution step."""
    outcome: Outcome
    value: Optional[T] = None
    reason: str = ""
    error: Optional[Exception] = None

    @classmethod
    def accept(cls, value: T, reason: str = "") -> "StepResult[T]":
        return cls(Outcome.ACCEPT, value=value, reason=reason)

    @classmethod
    def skip(cls, reason: str) -> "StepResult[T]":
        return cls(Outcome.SKIP, reason=reason)

    @classmethod
    def fail(cls, error: Exception) -> "StepResult[T]":
        return cls(Outcome.FAIL, reason=str(error), error=error)


Step = Callable[[], StepResult]


@dataclass
class ChainResult(Generic[T]):
    """Final outcome of a chain run."""
    value: Optional[T] = None
    step: Optional[str] = None
    skipped: List[Tuple[str, str]] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def accepted(self) -> bool:
        return self.step is not None and self.error is None


class ResolutionChain(Generic[T]):
    """Runs steps in order until one accepts or fails."""

    def __init__(self, name: str, steps: Optional[List[Tuple[str, Step]]] = None):
        self._name = name
        self._steps: List[Tuple[str, Step]] = list(steps or [])

    @property
    def step_names(self) -> List[str]:
        return [name for name, _ in self._steps]

    def add_step(self, name: str, step: Step) -> "ResolutionChain[T]":
        self._steps.append((name, step))
        return self

    def run(self) -> ChainResult:
        """Evaluate steps in order."""
        result: ChainResult = ChainResult()
        for name, step in self._steps:
            step_result = step()
            if step_result.outcome is Outcome.ACCEPT:
                logger.debug(f"{self._name}: '{name}' accepted {step_result.value!r}")
                result.value = step_result.value
                result.step = name
                return result
            if step_result.outcome is Outcome.FAIL:
                logger.debug(f"{self._name}: '{name}' failed: {step_result.reason}")
                result.step = name
                result.error = step_result.error
                return result
            logger.debug(f"{self._name}: '{name}' skipped: {step_result.reason}")
            result.skipped.append((name, step_result.reason))
        return result

