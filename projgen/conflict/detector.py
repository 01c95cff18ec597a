"""
Conflict Detector

Evaluates a conflict matrix against the signals of one invocation.

A rule triggers only when EVERY flag in it is active at the same time.
All triggered rules are returned in matrix order, never just the first.
"""

import logging
from typing import Iterable, Optional

from ..errors import UninitializedHandlerError
from .matrix import ConflictMatrix, ConflictRule, default_matrix
from .signals import FlagSignal, SignalSet

logger = logging.getLogger(__name__)


def is_active(signal: FlagSignal, signals: SignalSet) -> bool:
    """
    Check whether a signal is active.

    Plain signals are a simple lookup. A value-qualified signal
    (``--mode=interactive``) needs both the presence signal of its flag
    and the qualified signal itself.
    """
    if not signal.is_qualified:
        return signals.is_set(signal)
    return signals.is_set(signal.base) and signals.is_set(signal)


def is_fatal(rules: Iterable[ConflictRule]) -> bool:
    """True if any rule in the list halts execution."""
    return any(rule.severity.halts_execution for rule in rules)


class ConflictDetector:
    """Finds every conflict rule whose flags are all active."""

    def __init__(self, matrix: Optional[ConflictMatrix] = None):
        self.matrix = matrix if matrix is not None else default_matrix()

    def matches(self, rule: ConflictRule, signals: SignalSet) -> bool:
        return all(is_active(flag, signals) for flag in rule.flags)

    def detect(self, signals: Optional[SignalSet]) -> list[ConflictRule]:
        """
        Evaluate every rule against the given signals.

        Args:
            signals: Signal set for this invocation; None or empty means
                nothing is active

        Returns:
            Triggered rules in matrix order (empty if none)
        """
        if self.matrix is None:
            raise UninitializedHandlerError("ConflictDetector")
        if not signals:
            return []

        triggered = [rule for rule in self.matrix if self.matches(rule, signals)]
        if triggered:
            logger.debug(
                "Detected %d flag conflict(s): %s",
                len(triggered),
                "; ".join(", ".join(rule.flag_names) for rule in triggered),
            )
        return triggered
