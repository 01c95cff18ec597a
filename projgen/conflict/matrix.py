"""
Flag Conflict Matrix

Immutable table of flag combinations that must never be active together,
with the diagnostics shown to the user when one is hit.
"""

from enum import Enum
from typing import Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .signals import FlagSignal


class Severity(str, Enum):
    """Severity of a conflict rule."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def halts_execution(self) -> bool:
        return _HALTS_EXECUTION[self]


_HALTS_EXECUTION = {
    Severity.INFO: False,
    Severity.WARNING: False,
    Severity.ERROR: True,
}


class RuleCategory(str, Enum):
    """Which group of flags a rule governs."""
    OUTPUT = "output"
    GENERATION = "generation"
    MODE_SPECIFICATION = "mode_specification"


MODE_CATEGORIES = frozenset({RuleCategory.GENERATION, RuleCategory.MODE_SPECIFICATION})


class ConflictRule(BaseModel):
    """A set of two or more flag signals that must not all be active."""
    model_config = ConfigDict(frozen=True)

    flags: tuple[FlagSignal, ...]
    description: str
    suggestion: str
    examples: tuple[str, ...]
    severity: Severity = Severity.ERROR
    category: RuleCategory

    @field_validator('flags', mode='before')
    @classmethod
    def parse_flag_strings(cls, v):
        if isinstance(v, str):
            raise ValueError('flags must be a sequence, not a single string')
        return tuple(FlagSignal.parse(f) if isinstance(f, str) else f for f in v)

    @field_validator('flags')
    @classmethod
    def at_least_two_distinct_flags(cls, v):
        if len(set(v)) < 2 or len(set(v)) != len(v):
            raise ValueError('a conflict rule needs at least two distinct flags')
        return v

    @field_validator('description', 'suggestion')
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError('must not be empty')
        return v

    @field_validator('examples')
    @classmethod
    def examples_not_empty(cls, v):
        if not v or any(not example.strip() for example in v):
            raise ValueError('at least one non-empty example is required')
        return v

    @property
    def flag_names(self) -> list[str]:
        return [str(flag) for flag in self.flags]


class ConflictMatrix:
    """
    Ordered, read-only collection of conflict rules.

    Order decides report order only; every rule is evaluated.
    """

    def __init__(self, rules: Iterable[ConflictRule]):
        rules = tuple(rules)
        for rule in rules:
            if not isinstance(rule, ConflictRule):
                raise TypeError(f"Expected ConflictRule, got {type(rule).__name__}")
        self._rules = rules

    @property
    def rules(self) -> tuple[ConflictRule, ...]:
        return self._rules

    def __iter__(self) -> Iterator[ConflictRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"ConflictMatrix({len(self._rules)} rules)"

    def filter(self, categories: Iterable[RuleCategory]) -> "ConflictMatrix":
        """Sub-matrix with only the given categories, order preserved."""
        wanted = frozenset(categories)
        return ConflictMatrix(rule for rule in self._rules if rule.category in wanted)

    def mode_rules(self) -> "ConflictMatrix":
        return self.filter(MODE_CATEGORIES)

    def output_rules(self) -> "ConflictMatrix":
        return self.filter({RuleCategory.OUTPUT})


DEFAULT_RULES = (
    # Output mode conflicts
    ConflictRule(
        flags=["--verbose", "--quiet"],
        description="Verbose and quiet modes are mutually exclusive",
        suggestion="Choose either verbose output for detailed information OR quiet mode for minimal output",
        examples=["--verbose", "--quiet", "--debug (implies verbose)"],
        category=RuleCategory.OUTPUT,
    ),
    ConflictRule(
        flags=["--debug", "--quiet"],
        description="Debug and quiet modes are mutually exclusive",
        suggestion="Choose either debug mode for detailed debugging OR quiet mode for minimal output",
        examples=["--debug", "--quiet"],
        category=RuleCategory.OUTPUT,
    ),
    # Generation mode conflicts
    ConflictRule(
        flags=["--interactive", "--non-interactive"],
        description="Interactive and non-interactive modes cannot be used together",
        suggestion="Choose either interactive mode for guided setup OR non-interactive for automated generation",
        examples=["--interactive", "--non-interactive", "--mode=interactive"],
        category=RuleCategory.GENERATION,
    ),
    ConflictRule(
        flags=["--force-interactive", "--force-non-interactive"],
        description="Force interactive and force non-interactive modes are mutually exclusive",
        suggestion="Choose either --force-interactive to override detection OR --force-non-interactive for automation",
        examples=["--force-interactive", "--force-non-interactive"],
        category=RuleCategory.GENERATION,
    ),
    ConflictRule(
        flags=["--interactive", "--force-non-interactive"],
        description="Interactive mode conflicts with forced non-interactive mode",
        suggestion="Use either --interactive for guided setup OR --force-non-interactive for automation",
        examples=["--interactive", "--force-non-interactive"],
        category=RuleCategory.GENERATION,
    ),
    ConflictRule(
        flags=["--non-interactive", "--force-interactive"],
        description="Non-interactive mode conflicts with forced interactive mode",
        suggestion="Use either --non-interactive for automation OR --force-interactive for guided setup",
        examples=["--non-interactive", "--force-interactive"],
        category=RuleCategory.GENERATION,
    ),
    # Mode flag with explicit mode conflicts
    ConflictRule(
        flags=["--interactive", "--mode"],
        description="Interactive flag conflicts with explicit mode specification",
        suggestion="Use either --interactive flag OR --mode=interactive, not both",
        examples=["--interactive", "--mode=interactive", "--mode=non-interactive"],
        category=RuleCategory.MODE_SPECIFICATION,
    ),
    ConflictRule(
        flags=["--non-interactive", "--mode"],
        description="Non-interactive flag conflicts with explicit mode specification",
        suggestion="Use either --non-interactive flag OR --mode=non-interactive, not both",
        examples=["--non-interactive", "--mode=non-interactive", "--mode=interactive"],
        category=RuleCategory.MODE_SPECIFICATION,
    ),
    ConflictRule(
        flags=["--force-interactive", "--mode"],
        description="Force-interactive flag conflicts with explicit mode specification",
        suggestion="Use either --force-interactive flag OR --mode=interactive, not both",
        examples=["--force-interactive", "--mode=interactive"],
        category=RuleCategory.MODE_SPECIFICATION,
    ),
    ConflictRule(
        flags=["--force-non-interactive", "--mode"],
        description="Force-non-interactive flag conflicts with explicit mode specification",
        suggestion="Use either --force-non-interactive flag OR --mode=non-interactive, not both",
        examples=["--force-non-interactive", "--mode=non-interactive"],
        category=RuleCategory.MODE_SPECIFICATION,
    ),
)

_DEFAULT_MATRIX = ConflictMatrix(DEFAULT_RULES)


def default_matrix(categories: Optional[Iterable[RuleCategory]] = None) -> ConflictMatrix:
    """
    The built-in conflict matrix.

    Args:
        categories: Optional category filter

    Returns:
        Shared read-only matrix, or a filtered copy
    """
    if categories is None:
        return _DEFAULT_MATRIX
    return _DEFAULT_MATRIX.filter(categories)
