"""
Error Handling

Exception taxonomy for flag processing and mode resolution, plus the
mapping from errors to process exit codes.
"""

from enum import IntEnum
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from .conflict.matrix import ConflictRule


# ============================================================================
# EXIT CODES
# ============================================================================

class ExitCode(IntEnum):
    """Process exit codes, stable for automation."""
    SUCCESS = 0
    CONFIG_ERROR = 1
    TOOLS_MISSING = 2
    GENERATION_FAILED = 3
    FILESYSTEM_ERROR = 4
    USER_CANCELLED = 5


EXIT_CODE_REASONS = {
    ExitCode.SUCCESS: "Success",
    ExitCode.CONFIG_ERROR: "Configuration or flag validation failed",
    ExitCode.TOOLS_MISSING: "Required tools are missing",
    ExitCode.GENERATION_FAILED: "Component generation failed",
    ExitCode.FILESYSTEM_ERROR: "File system operation failed",
    ExitCode.USER_CANCELLED: "User cancelled the operation",
}


# ============================================================================
# EXCEPTIONS
# ============================================================================

class GeneratorError(Exception):
    """Base exception for generator errors"""
    exit_code = ExitCode.GENERATION_FAILED


class ConflictError(GeneratorError):
    """
    One or more flag conflict rules triggered and could not be recovered.

    Carries every triggered rule, in matrix order, so the caller can show
    the complete picture in one pass.
    """
    exit_code = ExitCode.CONFIG_ERROR

    def __init__(self, rules: Iterable["ConflictRule"]):
        self.rules = tuple(rules)
        if not self.rules:
            raise ValueError("ConflictError requires at least one rule")
        super().__init__(self._summary())

    def _summary(self) -> str:
        lines = ["Flag conflicts detected"]
        for index, rule in enumerate(self.rules, start=1):
            lines.append(f"{index}. {rule.description} ({rule.suggestion})")
        return "\n".join(lines)

    @property
    def fatal(self) -> bool:
        """True if any triggered rule halts execution."""
        return any(rule.severity.halts_execution for rule in self.rules)


class CommandNotProvidedError(GeneratorError):
    """The parsed flag source was missing at collection time"""
    exit_code = ExitCode.CONFIG_ERROR

    def __init__(self, message: str = "command not provided"):
        super().__init__(message)


class UninitializedHandlerError(GeneratorError):
    """A component was used without being constructed with its collaborators"""

    def __init__(self, component: str):
        self.component = component
        super().__init__(f"{component} not initialized")


class InvalidModeError(GeneratorError):
    """Explicit mode value is not recognised (strict mode only)"""
    exit_code = ExitCode.CONFIG_ERROR

    def __init__(self, value: str, valid_modes: Optional[Iterable[str]] = None):
        self.value = value
        self.valid_modes = tuple(valid_modes or ())
        message = f"'{value}' is not a valid mode"
        if self.valid_modes:
            message += f". Available modes: {', '.join(self.valid_modes)}"
        super().__init__(message)


class InvalidFlagValueError(GeneratorError):
    """A string flag carries a value outside its allowed set"""
    exit_code = ExitCode.CONFIG_ERROR

    def __init__(self, flag: str, value: str, allowed: Iterable[str]):
        self.flag = flag
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"'{value}' isn't a valid {flag}. Available options: {', '.join(self.allowed)}"
        )


class ConfigurationError(GeneratorError):
    """Configuration is invalid"""
    exit_code = ExitCode.CONFIG_ERROR


def exit_code_for(error: Optional[BaseException]) -> ExitCode:
    """
    Determine the process exit code for an error.

    Args:
        error: The error that ended the run, or None on success

    Returns:
        Exit code; OS-level errors count as file system failures and
        anything else unknown as a generation failure
    """
    if error is None:
        return ExitCode.SUCCESS
    if isinstance(error, KeyboardInterrupt):
        return ExitCode.USER_CANCELLED
    if isinstance(error, GeneratorError):
        return error.exit_code
    if isinstance(error, OSError):
        return ExitCode.FILESYSTEM_ERROR
    return ExitCode.GENERATION_FAILED
