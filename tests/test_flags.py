"""Tests for global flag processing."""

import argparse
import logging

import pytest

from projgen.conflict.matrix import ConflictMatrix, ConflictRule, RuleCategory, Severity
from projgen.errors import CommandNotProvidedError, ConflictError, InvalidFlagValueError
from projgen.flags import effective_log_level, process_global_flags


def global_args(**overrides):
    values = dict(verbose=False, quiet=False, debug=False, log_level=None, output_format=None)
    values.update(overrides)
    return argparse.Namespace(**values)


class TestProcessGlobalFlags:
    """process_global_flags()"""

    def test_defaults(self):
        flags = process_global_flags(global_args())
        assert flags.log_level == "warning"
        assert flags.output_format == "text"

    def test_verbose_and_quiet_conflict(self):
        with pytest.raises(ConflictError) as exc_info:
            process_global_flags(global_args(verbose=True, quiet=True))
        assert [r.flag_names for r in exc_info.value.rules] == [["--verbose", "--quiet"]]

    def test_debug_verbose_quiet_reports_both(self):
        with pytest.raises(ConflictError) as exc_info:
            process_global_flags(global_args(verbose=True, debug=True, quiet=True))
        assert len(exc_info.value.rules) == 2

    def test_mode_conflicts_are_left_to_resolver(self):
        args = global_args(interactive=True, non_interactive=True)
        assert process_global_flags(args).log_level == "warning"

    def test_debug_sets_debug_level(self):
        assert process_global_flags(global_args(debug=True)).log_level == "debug"

    def test_quiet_sets_error_level(self):
        assert process_global_flags(global_args(quiet=True)).log_level == "error"

    def test_explicit_level_beats_quiet(self):
        assert process_global_flags(global_args(quiet=True, log_level="info")).log_level == "info"

    def test_invalid_log_level(self):
        with pytest.raises(InvalidFlagValueError) as exc_info:
            process_global_flags(global_args(log_level="chatty"))
        assert "debug, info, warn, error, fatal" in str(exc_info.value)

    def test_invalid_output_format(self):
        with pytest.raises(InvalidFlagValueError):
            process_global_flags(global_args(output_format="xml"))

    def test_output_format_default_from_config(self):
        flags = process_global_flags(global_args(), default_output_format="yaml")
        assert flags.output_format == "yaml"

    def test_none_args(self):
        with pytest.raises(CommandNotProvidedError):
            process_global_flags(None)

    def test_output_format_is_case_insensitive(self):
        assert process_global_flags(global_args(output_format="JSON")).output_format == "json"

    def test_bad_output_format_names_flag(self):
        with pytest.raises(InvalidFlagValueError) as exc_info:
            process_global_flags(global_args(output_format="xml"))
        assert "--output-format" in str(exc_info.value)

    def test_bad_default_output_format_names_source(self):
        with pytest.raises(InvalidFlagValueError) as exc_info:
            process_global_flags(global_args(), default_output_format="xml")
        assert "GENERATOR_OUTPUT_FORMAT" in str(exc_info.value)


QUIET_VERBOSE_ADVISORY = ConflictRule(
    flags=["--verbose", "--quiet"],
    description="Verbose output is mostly hidden by quiet mode",
    suggestion="Pick one output mode",
    examples=["--verbose"],
    severity=Severity.WARNING,
    category=RuleCategory.OUTPUT,
)


class TestAdvisoryOutputRules:
    """Output rules that warn instead of halting."""

    def test_warning_rule_does_not_halt(self, caplog):
        matrix = ConflictMatrix([QUIET_VERBOSE_ADVISORY])
        with caplog.at_level(logging.WARNING, logger="projgen.flags"):
            flags = process_global_flags(global_args(verbose=True, quiet=True), matrix=matrix)

        assert flags.log_level == "debug"
        assert flags.triggered_rules == [QUIET_VERBOSE_ADVISORY]
        assert "Verbose output is mostly hidden by quiet mode" in caplog.text

    def test_no_rules_triggered_by_default(self):
        assert process_global_flags(global_args(verbose=True)).triggered_rules == []


class TestEffectiveLogLevel:
    """Priority: debug > verbose > explicit > quiet > default."""

    def test_verbose_beats_explicit(self):
        assert effective_log_level(False, True, False, "error") == "debug"

    def test_default(self):
        assert effective_log_level(False, False, False, None, default="INFO") == "INFO"
