"""
Tests for end-to-end mode resolution:
collect -> detect -> recover or fail -> cascade.
"""

import logging

import pytest

from projgen.conflict.matrix import ConflictMatrix, ConflictRule, RuleCategory, Severity, default_matrix
from projgen.conflict.signals import SignalCollector
from projgen.errors import (
    CommandNotProvidedError,
    ConflictError,
    ExitCode,
    InvalidModeError,
    UninitializedHandlerError,
)
from projgen.mode_detection import GenerationMode
from projgen.resolver import ModeResolutionResult, ModeResolver


def signals(**flags):
    return SignalCollector().collect({name.replace("_", "-"): value for name, value in flags.items()})


@pytest.fixture
def resolver():
    """Resolver that never sees a real terminal or CI."""
    return ModeResolver(environment_check=lambda: False)


class TestNoConflict:
    """Signals without conflicts go straight to the cascade."""

    def test_explicit_mode_alias(self, resolver):
        result = resolver.get_mode_from_flags(signals(mode="ni"))
        assert result == ModeResolutionResult(mode=GenerationMode.NON_INTERACTIVE)

    def test_default_interactive(self, resolver):
        result = resolver.get_mode_from_flags(signals())
        assert result.mode == GenerationMode.INTERACTIVE
        assert result.recovered is False
        assert result.triggered_rules == []

    def test_config_path(self, resolver):
        result = resolver.get_mode_from_flags(signals(config="cfg.yaml"))
        assert result.mode == GenerationMode.CONFIG_FILE

    def test_interactive_beats_config(self, resolver):
        result = resolver.get_mode_from_flags(signals(config="x.yaml", interactive=True))
        assert result.mode == GenerationMode.INTERACTIVE

    def test_same_direction_force_flag(self, resolver):
        result = resolver.get_mode_from_flags(signals(interactive=True, force_interactive=True))
        assert result.mode == GenerationMode.INTERACTIVE
        assert result.recovered is False

    def test_output_conflicts_are_not_mode_conflicts(self, resolver):
        result = resolver.get_mode_from_flags(signals(verbose=True, quiet=True, mode="cf"))
        assert result.mode == GenerationMode.CONFIG_FILE

    def test_environment_fallback(self):
        resolver = ModeResolver(environment_check=lambda: True)
        assert resolver.get_mode_from_flags(signals()).mode == GenerationMode.NON_INTERACTIVE

    def test_idempotent(self, resolver):
        s = signals(non_interactive=True)
        assert resolver.get_mode_from_flags(s) == resolver.get_mode_from_flags(s)


class TestRecoverableConflict:
    """Direct flag contradicted by the opposite force flag."""

    def test_force_interactive_overrides(self, resolver):
        result = resolver.get_mode_from_flags(signals(non_interactive=True, force_interactive=True))

        assert result.mode == GenerationMode.INTERACTIVE
        assert result.recovered is True
        assert [r.flag_names for r in result.triggered_rules] == [["--non-interactive", "--force-interactive"]]

    def test_force_non_interactive_overrides(self, resolver):
        result = resolver.get_mode_from_flags(signals(interactive=True, force_non_interactive=True))

        assert result.mode == GenerationMode.NON_INTERACTIVE
        assert result.recovered is True


class TestUnrecoverableConflict:
    """Everything else fails with every triggered rule."""

    def test_direct_flags_with_explicit_mode(self, resolver):
        with pytest.raises(ConflictError) as exc_info:
            resolver.get_mode_from_flags(signals(interactive=True, non_interactive=True, mode="config"))

        error = exc_info.value
        assert len(error.rules) == 3
        assert error.fatal is True
        assert error.exit_code == ExitCode.CONFIG_ERROR
        assert "1. " in str(error)
        assert error.rules[0].suggestion in str(error)

    def test_force_pair(self, resolver):
        with pytest.raises(ConflictError) as exc_info:
            resolver.get_mode_from_flags(signals(force_interactive=True, force_non_interactive=True))
        assert len(exc_info.value.rules) == 1

    def test_recoverable_pair_plus_mode(self, resolver):
        with pytest.raises(ConflictError) as exc_info:
            resolver.get_mode_from_flags(signals(non_interactive=True, force_interactive=True, mode="i"))
        assert len(exc_info.value.rules) == 3


class TestResolverErrors:
    """Defensive checks."""

    def test_none_signals(self, resolver):
        with pytest.raises(CommandNotProvidedError):
            resolver.get_mode_from_flags(None)

    def test_none_parsed_flags(self, resolver):
        with pytest.raises(CommandNotProvidedError):
            resolver.resolve(None)

    def test_uninitialized(self):
        resolver = ModeResolver.__new__(ModeResolver)
        with pytest.raises(UninitializedHandlerError):
            resolver.get_mode_from_flags(signals())

    def test_strict_unknown_mode(self):
        resolver = ModeResolver(strict=True, environment_check=lambda: False)
        with pytest.raises(InvalidModeError):
            resolver.get_mode_from_flags(signals(mode="bogus"))

    def test_lenient_unknown_mode(self, resolver):
        assert resolver.get_mode_from_flags(signals(mode="bogus")).mode == GenerationMode.INTERACTIVE


class TestCustomMatrix:
    """Injected rule sets replace the built-in table."""

    def test_empty_matrix_disables_conflicts(self):
        resolver = ModeResolver(matrix=ConflictMatrix([]), environment_check=lambda: False)
        result = resolver.get_mode_from_flags(signals(interactive=True, non_interactive=True))
        assert result.mode == GenerationMode.NON_INTERACTIVE

    def test_resolve_from_parsed_flags(self, resolver):
        result = resolver.resolve({"force_non_interactive": True})
        assert result.mode == GenerationMode.NON_INTERACTIVE


ADVISORY_MODE_RULE = ConflictRule(
    flags=["--interactive", "--mode"],
    description="Interactive flag duplicates the explicit mode",
    suggestion="Drop one of them",
    examples=["--interactive", "--mode=interactive"],
    severity=Severity.WARNING,
    category=RuleCategory.MODE_SPECIFICATION,
)


class TestAdvisoryRules:
    """Rules whose severity does not halt execution."""

    @pytest.fixture
    def advisory_resolver(self):
        return ModeResolver(matrix=ConflictMatrix([ADVISORY_MODE_RULE]), environment_check=lambda: False)

    def test_warning_rule_does_not_halt(self, advisory_resolver):
        result = advisory_resolver.get_mode_from_flags(signals(interactive=True, mode="ni"))

        assert result.mode == GenerationMode.NON_INTERACTIVE
        assert result.triggered_rules == [ADVISORY_MODE_RULE]
        assert result.recovered is False

    def test_warning_rule_is_logged(self, advisory_resolver, caplog):
        with caplog.at_level(logging.WARNING, logger="projgen.resolver"):
            advisory_resolver.get_mode_from_flags(signals(interactive=True, mode="i"))

        assert "Interactive flag duplicates the explicit mode" in caplog.text

    def test_error_rule_alongside_warning_still_halts(self):
        matrix = ConflictMatrix([ADVISORY_MODE_RULE, *default_matrix().rules])
        resolver = ModeResolver(matrix=matrix, environment_check=lambda: False)

        with pytest.raises(ConflictError) as exc_info:
            resolver.get_mode_from_flags(signals(interactive=True, mode="i"))

        assert exc_info.value.rules[0] == ADVISORY_MODE_RULE
        assert exc_info.value.fatal is True
