"""
Flag Conflict Module

Detects flag combinations that must not be used together and resolves
generation-mode conflicts that a force flag settles.
"""

from .signals import (
    FlagSignal,
    SignalSet,
    SignalCollector,
)

from .matrix import (
    Severity,
    RuleCategory,
    ConflictRule,
    ConflictMatrix,
    default_matrix,
)

from .detector import (
    ConflictDetector,
    is_active,
    is_fatal,
)

from .recovery import (
    ResolutionContext,
    RecoveryResolver,
)

__all__ = [
    # Signals
    "FlagSignal",
    "SignalSet",
    "SignalCollector",

    # Rules
    "Severity",
    "RuleCategory",
    "ConflictRule",
    "ConflictMatrix",
    "default_matrix",

    # Detection
    "ConflictDetector",
    "is_active",
    "is_fatal",

    # Recovery
    "ResolutionContext",
    "RecoveryResolver",
]
