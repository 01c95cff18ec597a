"""
Project Generator - flag conflict detection and generation mode resolution

Turns possibly contradictory command-line signals into exactly one
generation mode, and reports flag combinations that must never coexist.
"""

__version__ = "1.0.0"

from .errors import (
    ExitCode,
    GeneratorError,
    ConflictError,
    CommandNotProvidedError,
    UninitializedHandlerError,
    InvalidModeError,
    InvalidFlagValueError,
    ConfigurationError,
    exit_code_for,
)

from .mode_detection import (
    GenerationMode,
    normalize_mode,
    detect_generation_mode,
)

# Flag conflict system
from .conflict import (
    FlagSignal,
    SignalSet,
    SignalCollector,
    Severity,
    RuleCategory,
    ConflictRule,
    ConflictMatrix,
    default_matrix,
    ConflictDetector,
    ResolutionContext,
    RecoveryResolver,
)

from .resolver import (
    ModeResolver,
    ModeResolutionResult,
)

__all__ = [
    # Errors
    "ExitCode",
    "GeneratorError",
    "ConflictError",
    "CommandNotProvidedError",
    "UninitializedHandlerError",
    "InvalidModeError",
    "InvalidFlagValueError",
    "ConfigurationError",
    "exit_code_for",

    # Modes
    "GenerationMode",
    "normalize_mode",
    "detect_generation_mode",

    # Conflicts
    "FlagSignal",
    "SignalSet",
    "SignalCollector",
    "Severity",
    "RuleCategory",
    "ConflictRule",
    "ConflictMatrix",
    "default_matrix",
    "ConflictDetector",
    "ResolutionContext",
    "RecoveryResolver",

    # Resolution
    "ModeResolver",
    "ModeResolutionResult",
]
