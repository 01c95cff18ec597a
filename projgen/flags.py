"""
Global flag handling.

Validates the flags shared by every command before any work starts:
output-mode conflicts (verbose / quiet / debug), log level and output
format values. Derives the effective log level.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .conflict.detector import ConflictDetector, is_fatal
from .conflict.matrix import ConflictMatrix, ConflictRule, default_matrix
from .conflict.signals import SignalCollector
from .errors import CommandNotProvidedError, ConflictError, InvalidFlagValueError
from .report import OUTPUT_FORMATS

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("debug", "info", "warn", "error", "fatal")


@dataclass
class GlobalFlags:
    """Processed global flags."""
    verbose: bool = False
    quiet: bool = False
    debug: bool = False
    log_level: str = "warning"
    output_format: str = "text"
    triggered_rules: list[ConflictRule] = field(default_factory=list)


def validate_log_level(level: str) -> str:
    if level.lower() not in VALID_LOG_LEVELS:
        raise InvalidFlagValueError("log level", level, VALID_LOG_LEVELS)
    return level.lower()


def validate_output_format(output_format: str, source: str = "output format") -> str:
    """Lower-case and check an output format; source names where it came from."""
    if output_format.lower() not in OUTPUT_FORMATS:
        raise InvalidFlagValueError(source, output_format, OUTPUT_FORMATS)
    return output_format.lower()


def effective_log_level(debug: bool, verbose: bool, quiet: bool, explicit: Optional[str], default: str = "warning") -> str:
    """Priority: debug > verbose > explicit --log-level > quiet > default."""
    if debug or verbose:
        return "debug"
    if explicit:
        return explicit
    if quiet:
        return "error"
    return default


def process_global_flags(
    args: Any,
    matrix: Optional[ConflictMatrix] = None,
    default_log_level: str = "warning",
    default_output_format: str = "text",
) -> GlobalFlags:
    """
    Validate global flags and derive settings from them.

    Args:
        args: Parsed arguments (argparse.Namespace or mapping)
        matrix: Conflict rules; only output-mode rules are checked here
        default_log_level: Level used when no flag sets one
        default_output_format: Format used when --output-format is absent
            (settings file or GENERATOR_OUTPUT_FORMAT)

    Raises:
        CommandNotProvidedError: If args is None
        ConflictError: If output-mode flags conflict and a triggered rule
            halts execution
        InvalidFlagValueError: For bad --log-level / --output-format values
    """
    if args is None:
        raise CommandNotProvidedError()

    signals = SignalCollector().collect(args)
    matrix = matrix if matrix is not None else default_matrix()
    triggered = ConflictDetector(matrix.output_rules()).detect(signals)
    if is_fatal(triggered):
        raise ConflictError(triggered)
    for rule in triggered:
        logger.warning("%s (%s)", rule.description, rule.suggestion)

    explicit_level = _get(args, "log-level")
    if explicit_level:
        explicit_level = validate_log_level(explicit_level)

    if explicit_format := signals.value("output-format"):
        output_format = validate_output_format(explicit_format, "--output-format value")
    else:
        output_format = validate_output_format(
            default_output_format, "default output format (settings file or GENERATOR_OUTPUT_FORMAT)"
        )

    flags = GlobalFlags(
        verbose=signals.flag("verbose"),
        quiet=signals.flag("quiet"),
        debug=signals.flag("debug"),
        output_format=output_format,
        triggered_rules=triggered,
    )
    flags.log_level = effective_log_level(
        flags.debug, flags.verbose, flags.quiet, explicit_level, default=default_log_level
    )
    return flags


def _get(args: Any, name: str) -> Any:
    attr = name.replace("-", "_")
    if isinstance(args, dict):
        return args.get(name, args.get(attr))
    return getattr(args, attr, None)
