"""
Mode Resolver

Turns the signals of one invocation into exactly one GenerationMode:

    collect signals -> detect mode conflicts
        no conflict          -> precedence cascade -> mode
        advisory rules only  -> logged, then cascade -> mode
        recoverable conflict -> force flag wins    -> mode
        otherwise            -> ConflictError (halts the invocation)

Stateless; the same signals always give the same answer.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .conflict.detector import ConflictDetector, is_fatal
from .conflict.matrix import ConflictMatrix, ConflictRule, default_matrix
from .conflict.recovery import RecoveryResolver, ResolutionContext
from .conflict.signals import SignalCollector, SignalSet
from .errors import CommandNotProvidedError, ConflictError, UninitializedHandlerError
from .mode_detection import GenerationMode, detect_generation_mode

logger = logging.getLogger(__name__)


@dataclass
class ModeResolutionResult:
    """Outcome of mode resolution."""
    mode: GenerationMode
    triggered_rules: list[ConflictRule] = field(default_factory=list)
    recovered: bool = False


class ModeResolver:
    """Resolves the generation mode for one invocation."""

    def __init__(
        self,
        matrix: Optional[ConflictMatrix] = None,
        recovery: Optional[RecoveryResolver] = None,
        strict: bool = False,
        environment_check: Optional[Callable[[], bool]] = None,
    ):
        """
        Args:
            matrix: Conflict rules; only the mode-related rules are used
            recovery: Recovery resolver for force-flag overrides
            strict: Raise InvalidModeError for unrecognised --mode values
            environment_check: Non-interactive environment detector
        """
        matrix = matrix if matrix is not None else default_matrix()
        self.detector = ConflictDetector(matrix.mode_rules())
        self.recovery = recovery or RecoveryResolver()
        self.strict = strict
        self.environment_check = environment_check

    def _require_initialized(self) -> None:
        if getattr(self, "detector", None) is None or getattr(self, "recovery", None) is None:
            raise UninitializedHandlerError(type(self).__name__)

    def detect_generation_mode(
        self,
        config_path: str,
        non_interactive: bool,
        interactive: bool,
        explicit_mode: str,
        force_interactive: bool = False,
        force_non_interactive: bool = False,
    ) -> GenerationMode:
        """Precedence cascade with this resolver's strictness and environment check."""
        return detect_generation_mode(
            config_path,
            non_interactive,
            interactive,
            explicit_mode,
            force_interactive=force_interactive,
            force_non_interactive=force_non_interactive,
            strict=self.strict,
            environment_check=self.environment_check,
        )

    def get_mode_from_flags(self, signals: Optional[SignalSet]) -> ModeResolutionResult:
        """
        Resolve the generation mode from collected signals.

        Returns:
            ModeResolutionResult carrying every triggered rule; recovered
            is True only when a halting conflict was overridden by a force flag

        Raises:
            CommandNotProvidedError: If signals is None
            ConflictError: With every triggered rule, if a halting conflict
                cannot be recovered
            InvalidModeError: For an unrecognised --mode in strict mode
        """
        self._require_initialized()
        if signals is None:
            raise CommandNotProvidedError()

        triggered = self.detector.detect(signals)
        ctx = ResolutionContext.from_signals(signals)

        if is_fatal(triggered):
            if not self.recovery.is_recoverable(ctx):
                raise ConflictError(triggered)
            mode = self.recovery.resolve(ctx)
            return ModeResolutionResult(mode=mode, triggered_rules=triggered, recovered=True)

        for rule in triggered:
            logger.warning("%s (%s)", rule.description, rule.suggestion)

        mode = self.detect_generation_mode(
            signals.value("config"),
            ctx.non_interactive,
            ctx.interactive,
            ctx.explicit_mode,
            force_interactive=ctx.force_interactive,
            force_non_interactive=ctx.force_non_interactive,
        )
        return ModeResolutionResult(mode=mode, triggered_rules=triggered)

    def resolve(self, parsed_flags: Any, collector: Optional[SignalCollector] = None) -> ModeResolutionResult:
        """Collect signals from parsed flags and resolve the mode."""
        signals = (collector or SignalCollector()).collect(parsed_flags)
        return self.get_mode_from_flags(signals)
