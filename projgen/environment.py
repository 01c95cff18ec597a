"""Environment detection for generation mode resolution.

Decides whether the generator runs somewhere a human can answer prompts:
- CI: a known continuous-integration system is detected
- NON_TTY: standard input is piped or closed
- OVERRIDE: GENERATOR_NON_INTERACTIVE is set to a true value
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

NON_INTERACTIVE_ENV_VAR = "GENERATOR_NON_INTERACTIVE"

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")

# (environment variable, required value or None for "any non-empty", provider)
CI_PROVIDERS = [
    ("GITHUB_ACTIONS", "true", "github-actions"),
    ("GITLAB_CI", "true", "gitlab-ci"),
    ("JENKINS_URL", None, "jenkins"),
    ("TRAVIS", "true", "travis-ci"),
    ("CIRCLECI", "true", "circleci"),
    ("TF_BUILD", "True", "azure-devops"),
    ("BITBUCKET_BUILD_NUMBER", None, "bitbucket-pipelines"),
    ("CODEBUILD_BUILD_ID", None, "aws-codebuild"),
]

GENERIC_CI_VARS = ("CI", "CONTINUOUS_INTEGRATION")


@dataclass
class CIEnvironment:
    """Detected continuous-integration context."""
    is_ci: bool = False
    provider: Optional[str] = None


def parse_bool(value: str) -> Optional[bool]:
    """True/False for a recognised boolean word, None otherwise."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def parse_bool_env(key: str, default: bool = False) -> bool:
    """Parse a boolean environment variable, keeping default for junk values."""
    value = os.environ.get(key, "")
    if not value:
        return default

    parsed = parse_bool(value)
    return default if parsed is None else parsed


def detect_ci_environment() -> CIEnvironment:
    """Auto-detect a CI system from its environment variables.

    Provider-specific variables win over the generic CI flag so the
    provider name is filled in when known.

    Returns:
        CIEnvironment: is_ci and provider (None for generic CI).
    """
    for var, expected, provider in CI_PROVIDERS:
        value = os.environ.get(var)
        if not value:
            continue
        if expected is None or value == expected:
            return CIEnvironment(is_ci=True, provider=provider)

    for var in GENERIC_CI_VARS:
        if os.environ.get(var, "").lower() == "true":
            return CIEnvironment(is_ci=True)

    return CIEnvironment()


def is_terminal() -> bool:
    """Check whether stdin is an interactive terminal."""
    stdin = sys.stdin
    if stdin is None:
        return False
    try:
        return stdin.isatty()
    except (ValueError, AttributeError):
        # closed or replaced stream
        return False


def is_non_interactive_environment() -> bool:
    """True when prompting the user is not possible or not wanted."""
    if parse_bool_env(NON_INTERACTIVE_ENV_VAR):
        logger.debug("%s set, treating environment as non-interactive", NON_INTERACTIVE_ENV_VAR)
        return True

    ci = detect_ci_environment()
    if ci.is_ci:
        logger.debug("CI environment detected (%s)", ci.provider or "generic")
        return True

    if not is_terminal():
        logger.debug("stdin is not a TTY, treating environment as non-interactive")
        return True

    return False
