"""
Conflict and mode reporting.

Renders triggered conflict rules and resolution results for the terminal
(text) or for machines (json / yaml).
"""

import json
from typing import Any, Iterable

import yaml

from .conflict.detector import is_fatal
from .conflict.matrix import ConflictRule
from .resolver import ModeResolutionResult

OUTPUT_FORMATS = ("text", "json", "yaml")


def rule_to_dict(rule: ConflictRule) -> dict[str, Any]:
    data = rule.model_dump(mode="json")
    data["flags"] = rule.flag_names
    return data


def format_conflict_report(rules: Iterable[ConflictRule]) -> str:
    """
    Human-readable report of triggered conflicts.

    Example:
        Flag conflicts detected

        Conflict #1: Verbose and quiet modes are mutually exclusive
        Conflicting flags: --verbose, --quiet
        Suggestion: Choose either ...
        Examples: --verbose, --quiet
    """
    lines = ["Flag conflicts detected", ""]
    for index, rule in enumerate(rules, start=1):
        if index > 1:
            lines.append("")
        lines.append(f"Conflict #{index}: {rule.description}")
        lines.append(f"Conflicting flags: {', '.join(rule.flag_names)}")
        lines.append(f"Suggestion: {rule.suggestion}")
        lines.append(f"Examples: {', '.join(rule.examples)}")
    return "\n".join(lines) + "\n"


def conflicts_payload(rules: Iterable[ConflictRule]) -> dict[str, Any]:
    rules = list(rules)
    return {
        "fatal": is_fatal(rules),
        "conflicts": [rule_to_dict(rule) for rule in rules],
    }


def mode_payload(result: ModeResolutionResult) -> dict[str, Any]:
    return {
        "mode": result.mode.value,
        "recovered": result.recovered,
        "triggered_rules": [rule_to_dict(rule) for rule in result.triggered_rules],
    }


def render(payload: dict[str, Any], output_format: str = "json") -> str:
    """Serialize a payload as json or yaml."""
    if output_format == "yaml":
        return yaml.safe_dump(payload, default_flow_style=False, sort_keys=False)
    return json.dumps(payload, indent=2)


def format_mode_result(result: ModeResolutionResult, output_format: str = "text") -> str:
    if output_format != "text":
        return render(mode_payload(result), output_format)

    text = f"Generation mode: {result.mode.value}\n"
    if result.recovered:
        overridden = ", ".join(
            flag for rule in result.triggered_rules for flag in rule.flag_names
        )
        text += f"Resolved conflicting flags ({overridden}) in favour of the force flag\n"
    else:
        for rule in result.triggered_rules:
            text += f"Warning: {rule.description}\n"
    return text


def format_matrix(rules: Iterable[ConflictRule], output_format: str = "text") -> str:
    rules = list(rules)
    if output_format != "text":
        return render({"rules": [rule_to_dict(rule) for rule in rules]}, output_format)

    lines = []
    for rule in rules:
        lines.append(f"[{rule.severity.value}] {' + '.join(rule.flag_names)} ({rule.category.value})")
        lines.append(f"    {rule.description}")
        lines.append(f"    Suggestion: {rule.suggestion}")
    return "\n".join(lines) + "\n"
