"""
Recovery of generation-mode conflicts.

A direct mode flag contradicted by the opposite force flag is not an
error: the force flag wins and the run continues. Every other mode
conflict is reported to the user.
"""

import logging
from dataclasses import dataclass

from ..mode_detection import GenerationMode
from .signals import SignalSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionContext:
    """The five generation-mode signals of one invocation."""
    non_interactive: bool = False
    interactive: bool = False
    force_interactive: bool = False
    force_non_interactive: bool = False
    explicit_mode: str = ""

    @classmethod
    def from_signals(cls, signals: SignalSet) -> "ResolutionContext":
        explicit_mode = signals.value("mode") if signals.flag("mode") else ""
        return cls(
            non_interactive=signals.flag("non-interactive"),
            interactive=signals.flag("interactive"),
            force_interactive=signals.flag("force-interactive"),
            force_non_interactive=signals.flag("force-non-interactive"),
            explicit_mode=explicit_mode,
        )

    def mirrored(self) -> "ResolutionContext":
        """Swap the interactive and non-interactive sides."""
        return ResolutionContext(
            non_interactive=self.interactive,
            interactive=self.non_interactive,
            force_interactive=self.force_non_interactive,
            force_non_interactive=self.force_interactive,
            explicit_mode=self.explicit_mode,
        )

    @property
    def active_count(self) -> int:
        return sum([
            self.non_interactive,
            self.interactive,
            self.force_interactive,
            self.force_non_interactive,
            bool(self.explicit_mode),
        ])


class RecoveryResolver:
    """Resolves direct-vs-force mode conflicts in favour of the force flag."""

    def is_recoverable(self, ctx: ResolutionContext) -> bool:
        """
        True for exactly two shapes:
        --non-interactive with --force-interactive, or
        --interactive with --force-non-interactive,
        with nothing else set (including --mode).
        """
        if ctx.explicit_mode:
            return False
        forced_interactive = (
            ctx.non_interactive and ctx.force_interactive
            and not ctx.interactive and not ctx.force_non_interactive
        )
        forced_non_interactive = (
            ctx.interactive and ctx.force_non_interactive
            and not ctx.non_interactive and not ctx.force_interactive
        )
        return forced_interactive or forced_non_interactive

    def resolve(self, ctx: ResolutionContext) -> GenerationMode:
        """
        Pick the mode demanded by the force flag.

        Raises:
            ValueError: If the context is not recoverable
        """
        if not self.is_recoverable(ctx):
            raise ValueError(f"Mode conflict is not recoverable: {ctx}")

        if ctx.force_interactive:
            mode, overridden = GenerationMode.INTERACTIVE, "--non-interactive"
        else:
            mode, overridden = GenerationMode.NON_INTERACTIVE, "--interactive"

        logger.info("Resolved mode conflict: using %s mode (overriding %s)", mode.value, overridden)
        return mode
