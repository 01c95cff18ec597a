"""Tests for CI and terminal detection."""

import os
import sys
from unittest.mock import patch

import pytest

from projgen.environment import (
    CIEnvironment,
    detect_ci_environment,
    is_non_interactive_environment,
    is_terminal,
    parse_bool,
    parse_bool_env,
)


class TestDetectCIEnvironment:
    """detect_ci_environment()"""

    @pytest.mark.parametrize("env,provider", [
        ({'GITHUB_ACTIONS': 'true'}, 'github-actions'),
        ({'GITLAB_CI': 'true'}, 'gitlab-ci'),
        ({'JENKINS_URL': 'https://ci.example.com/'}, 'jenkins'),
        ({'TRAVIS': 'true'}, 'travis-ci'),
        ({'CIRCLECI': 'true'}, 'circleci'),
        ({'TF_BUILD': 'True'}, 'azure-devops'),
        ({'BITBUCKET_BUILD_NUMBER': '42'}, 'bitbucket-pipelines'),
        ({'CODEBUILD_BUILD_ID': 'build:1'}, 'aws-codebuild'),
    ])
    def test_providers(self, env, provider):
        with patch.dict(os.environ, env, clear=True):
            assert detect_ci_environment() == CIEnvironment(is_ci=True, provider=provider)

    def test_generic_ci(self):
        with patch.dict(os.environ, {'CI': 'true'}, clear=True):
            assert detect_ci_environment() == CIEnvironment(is_ci=True, provider=None)

    def test_continuous_integration_var(self):
        with patch.dict(os.environ, {'CONTINUOUS_INTEGRATION': 'true'}, clear=True):
            assert detect_ci_environment().is_ci is True

    def test_provider_wins_over_generic(self):
        with patch.dict(os.environ, {'CI': 'true', 'GITLAB_CI': 'true'}, clear=True):
            assert detect_ci_environment().provider == 'gitlab-ci'

    def test_ci_false_is_not_ci(self):
        with patch.dict(os.environ, {'CI': 'false'}, clear=True):
            assert detect_ci_environment().is_ci is False

    def test_azure_value_is_case_sensitive(self):
        with patch.dict(os.environ, {'TF_BUILD': 'true'}, clear=True):
            assert detect_ci_environment().is_ci is False

    def test_no_ci(self):
        with patch.dict(os.environ, {}, clear=True):
            assert detect_ci_environment() == CIEnvironment()


class TestParseBoolEnv:
    """parse_bool_env()"""

    @pytest.mark.parametrize("value", ["true", "1", "YES", "on"])
    def test_true_values(self, value):
        with patch.dict(os.environ, {'FLAG': value}, clear=True):
            assert parse_bool_env('FLAG') is True

    @pytest.mark.parametrize("value", ["false", "0", "No", "off"])
    def test_false_values(self, value):
        with patch.dict(os.environ, {'FLAG': value}, clear=True):
            assert parse_bool_env('FLAG', default=True) is False

    def test_junk_keeps_default(self):
        with patch.dict(os.environ, {'FLAG': 'maybe'}, clear=True):
            assert parse_bool_env('FLAG', default=True) is True
            assert parse_bool_env('FLAG') is False

    def test_unset_keeps_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert parse_bool_env('FLAG', default=True) is True

    def test_parse_bool_words(self):
        assert parse_bool(" On ") is True
        assert parse_bool("FALSE") is False
        assert parse_bool("sometimes") is None


class TestIsTerminal:
    """is_terminal()"""

    def test_tty(self):
        with patch.object(sys.stdin, 'isatty', return_value=True):
            assert is_terminal() is True

    def test_pipe(self):
        with patch.object(sys.stdin, 'isatty', return_value=False):
            assert is_terminal() is False

    def test_missing_stdin(self):
        with patch.object(sys, 'stdin', None):
            assert is_terminal() is False

    def test_closed_stdin(self):
        with patch.object(sys.stdin, 'isatty', side_effect=ValueError("I/O operation on closed file")):
            assert is_terminal() is False


class TestIsNonInteractiveEnvironment:
    """is_non_interactive_environment()"""

    def test_interactive_terminal(self):
        with patch.dict(os.environ, {}, clear=True), \
             patch.object(sys.stdin, 'isatty', return_value=True):
            assert is_non_interactive_environment() is False

    def test_override_var(self):
        with patch.dict(os.environ, {'GENERATOR_NON_INTERACTIVE': 'true'}, clear=True), \
             patch.object(sys.stdin, 'isatty', return_value=True):
            assert is_non_interactive_environment() is True

    def test_override_var_false_still_checks_ci(self):
        with patch.dict(os.environ, {'GENERATOR_NON_INTERACTIVE': 'false', 'GITHUB_ACTIONS': 'true'}, clear=True), \
             patch.object(sys.stdin, 'isatty', return_value=True):
            assert is_non_interactive_environment() is True

    def test_no_tty(self):
        with patch.dict(os.environ, {}, clear=True), \
             patch.object(sys.stdin, 'isatty', return_value=False):
            assert is_non_interactive_environment() is True
