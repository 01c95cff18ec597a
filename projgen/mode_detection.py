"""
Generation mode detection.

Determines how the generator obtains its project configuration:
interactively, from a config file, or fully automated.

Detection priority (first match wins):
1. Explicit mode (--mode) - normalised via the alias table
2. Force flags (--force-non-interactive, --force-interactive)
3. Direct flags (--non-interactive, --interactive)
4. Configuration file path (--config)
5. Environment detection (CI system or no TTY)
6. Default: interactive
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .environment import is_non_interactive_environment
from .errors import InvalidModeError

logger = logging.getLogger(__name__)


class GenerationMode(Enum):
    """How the generation workflow obtains its configuration."""
    INTERACTIVE = "interactive"
    NON_INTERACTIVE = "non-interactive"
    CONFIG_FILE = "config-file"
    AUTO = "auto"  # unresolved


MODE_ALIASES = {
    "interactive": GenerationMode.INTERACTIVE,
    "i": GenerationMode.INTERACTIVE,
    "non-interactive": GenerationMode.NON_INTERACTIVE,
    "noninteractive": GenerationMode.NON_INTERACTIVE,
    "ni": GenerationMode.NON_INTERACTIVE,
    "auto": GenerationMode.NON_INTERACTIVE,
    "config-file": GenerationMode.CONFIG_FILE,
    "config": GenerationMode.CONFIG_FILE,
    "cf": GenerationMode.CONFIG_FILE,
}

VALID_MODES = ("interactive", "non-interactive", "config-file")


def is_recognized_mode(value: str) -> bool:
    return value.strip().lower() in MODE_ALIASES


def normalize_mode(value: str, strict: bool = False) -> GenerationMode:
    """
    Map an explicit mode string to a GenerationMode.

    Matching is case-insensitive and ignores surrounding whitespace.
    Unrecognised values fall back to interactive unless strict is set.

    Raises:
        InvalidModeError: If strict and the value is not recognised
    """
    normalized = value.strip().lower()
    mode = MODE_ALIASES.get(normalized)
    if mode is not None:
        return mode

    if strict:
        raise InvalidModeError(value, VALID_MODES)
    logger.warning("Unrecognized mode '%s', falling back to interactive", value)
    return GenerationMode.INTERACTIVE


@dataclass
class ModeInputs:
    """Everything the precedence cascade looks at."""
    config_path: str = ""
    non_interactive: bool = False
    interactive: bool = False
    explicit_mode: str = ""
    force_interactive: bool = False
    force_non_interactive: bool = False
    strict: bool = False
    environment_check: Optional[Callable[[], bool]] = None


@dataclass
class ModeDetectionResult:
    """Result of mode detection with explanation."""
    mode: GenerationMode
    reason: str


@dataclass(frozen=True)
class PrecedenceStep:
    """One step of the cascade: applies when predicate holds."""
    name: str
    predicate: Callable[[ModeInputs], bool]
    resolve: Callable[[ModeInputs], GenerationMode]


def _force_mode(inputs: ModeInputs) -> GenerationMode:
    if inputs.force_non_interactive:
        return GenerationMode.NON_INTERACTIVE
    return GenerationMode.INTERACTIVE


def _direct_mode(inputs: ModeInputs) -> GenerationMode:
    if inputs.non_interactive:
        return GenerationMode.NON_INTERACTIVE
    return GenerationMode.INTERACTIVE


def _non_interactive_environment(inputs: ModeInputs) -> bool:
    check = inputs.environment_check or is_non_interactive_environment
    return check()


PRECEDENCE = (
    PrecedenceStep(
        "explicit mode",
        lambda i: bool(i.explicit_mode),
        lambda i: normalize_mode(i.explicit_mode, strict=i.strict),
    ),
    PrecedenceStep(
        "force flag",
        lambda i: i.force_non_interactive or i.force_interactive,
        _force_mode,
    ),
    PrecedenceStep(
        "direct flag",
        lambda i: i.non_interactive or i.interactive,
        _direct_mode,
    ),
    PrecedenceStep(
        "config file",
        lambda i: bool(i.config_path),
        lambda i: GenerationMode.CONFIG_FILE,
    ),
    PrecedenceStep(
        "non-interactive environment",
        _non_interactive_environment,
        lambda i: GenerationMode.NON_INTERACTIVE,
    ),
    PrecedenceStep(
        "default",
        lambda i: True,
        lambda i: GenerationMode.INTERACTIVE,
    ),
)


def explain_generation_mode(inputs: ModeInputs, steps: tuple[PrecedenceStep, ...] = PRECEDENCE) -> ModeDetectionResult:
    """Run the cascade and report which step decided."""
    for step in steps:
        if step.predicate(inputs):
            mode = step.resolve(inputs)
            logger.debug("Generation mode %s (decided by %s)", mode.value, step.name)
            return ModeDetectionResult(mode=mode, reason=step.name)
    return ModeDetectionResult(mode=GenerationMode.INTERACTIVE, reason="default")


def detect_generation_mode(
    config_path: str,
    non_interactive: bool,
    interactive: bool,
    explicit_mode: str,
    force_interactive: bool = False,
    force_non_interactive: bool = False,
    strict: bool = False,
    environment_check: Optional[Callable[[], bool]] = None,
) -> GenerationMode:
    """
    Resolve the generation mode from flag values.

    Args:
        config_path: Value of --config ("" when unset)
        non_interactive: --non-interactive
        interactive: --interactive
        explicit_mode: Value of --mode ("" when unset)
        force_interactive: --force-interactive
        force_non_interactive: --force-non-interactive
        strict: Reject unrecognised explicit modes instead of falling back
        environment_check: Returns True for a non-interactive environment.
            Defaults to CI / TTY detection.

    Returns:
        The resolved GenerationMode (never AUTO)
    """
    inputs = ModeInputs(
        config_path=config_path or "",
        non_interactive=non_interactive,
        interactive=interactive,
        explicit_mode=explicit_mode or "",
        force_interactive=force_interactive,
        force_non_interactive=force_non_interactive,
        strict=strict,
        environment_check=environment_check,
    )
    return explain_generation_mode(inputs).mode
