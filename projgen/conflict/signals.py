"""
Flag signals.

Turns parsed command-line flags into a flat set of boolean signals that
the conflict detector and mode resolver evaluate. Value-carrying flags
produce a presence signal plus, for recognised values, a value-qualified
signal such as ``--mode=interactive``.
"""

import argparse
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from ..errors import CommandNotProvidedError
from ..mode_detection import MODE_ALIASES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlagSignal:
    """A single flag signal, optionally qualified by a value."""
    name: str
    value: Optional[str] = None

    @property
    def is_qualified(self) -> bool:
        return self.value is not None

    @property
    def base(self) -> "FlagSignal":
        """Presence signal of the underlying flag."""
        return FlagSignal(self.name)

    @classmethod
    def parse(cls, text: str) -> "FlagSignal":
        """
        Parse ``--name`` or ``--name=value`` into a signal.

        Only the first ``=`` separates name from value, so values may
        themselves contain ``=``.
        """
        text = text.strip()
        if not text.lstrip("-"):
            raise ValueError(f"Invalid flag signal: {text!r}")
        name, sep, value = text.lstrip("-").partition("=")
        return cls(name, value if sep else None)

    def __str__(self) -> str:
        if self.value is None:
            return f"--{self.name}"
        return f"--{self.name}={self.value}"


class SignalSet(Mapping):
    """
    Mapping of FlagSignal -> bool built once per invocation.

    Also keeps the raw string values of value-carrying flags, because the
    mode resolver needs the explicit mode text even when it is not a
    recognised keyword.
    """

    def __init__(self, states: Optional[Mapping] = None, values: Optional[Mapping[str, str]] = None):
        self._states: dict[FlagSignal, bool] = {}
        for key, state in (states or {}).items():
            signal = key if isinstance(key, FlagSignal) else FlagSignal.parse(key)
            self._states[signal] = bool(state)
        self._values: dict[str, str] = dict(values or {})

    def __getitem__(self, signal: FlagSignal) -> bool:
        return self._states[signal]

    def __iter__(self) -> Iterator[FlagSignal]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def is_set(self, signal: FlagSignal) -> bool:
        """Simple lookup; unknown signals are inactive."""
        return self._states.get(signal, False)

    def flag(self, name: str) -> bool:
        return self.is_set(FlagSignal(name))

    def value(self, name: str, default: str = "") -> str:
        """Raw value of a value-carrying flag."""
        return self._values.get(name, default)

    def active(self) -> list[FlagSignal]:
        return [signal for signal, state in self._states.items() if state]

    def __repr__(self) -> str:
        active = ", ".join(str(s) for s in self.active())
        return f"SignalSet({active})"


# Boolean flags: active iff the parsed value is true
BOOLEAN_FLAGS = (
    "verbose",
    "quiet",
    "debug",
    "interactive",
    "non-interactive",
    "force-interactive",
    "force-non-interactive",
)

# Value flags: (default value, recognised keywords for value-qualified signals)
VALUE_FLAGS = {
    "mode": ("", tuple(MODE_ALIASES)),
    "output-format": ("text", ("text", "json", "yaml")),
}

# Presence-only flags: active iff carrying a non-default value
PRESENCE_FLAGS = {
    "config": "",
}


class SignalCollector:
    """Extracts a SignalSet from parsed command input."""

    def __init__(
        self,
        boolean_flags: tuple[str, ...] = BOOLEAN_FLAGS,
        value_flags: Optional[Mapping[str, tuple[str, tuple[str, ...]]]] = None,
        presence_flags: Optional[Mapping[str, str]] = None,
    ):
        self.boolean_flags = tuple(boolean_flags)
        self.value_flags = dict(VALUE_FLAGS if value_flags is None else value_flags)
        self.presence_flags = dict(PRESENCE_FLAGS if presence_flags is None else presence_flags)

    def collect(self, parsed_flags: Any) -> SignalSet:
        """
        Build the signal set for one invocation.

        Args:
            parsed_flags: argparse.Namespace, a mapping of flag name to value
                (hyphen or underscore spelling), or any object exposing the
                flags as attributes

        Returns:
            SignalSet with every known flag that was found

        Raises:
            CommandNotProvidedError: If parsed_flags is None
        """
        if parsed_flags is None:
            raise CommandNotProvidedError()

        source = self._as_mapping(parsed_flags)
        states: dict[FlagSignal, bool] = {}
        values: dict[str, str] = {}

        for name in self.boolean_flags:
            found, raw = _lookup(source, name)
            if found:
                states[FlagSignal(name)] = bool(raw)

        for name, (default, keywords) in self.value_flags.items():
            found, raw = _lookup(source, name)
            if not found:
                continue
            text = "" if raw is None else str(raw)
            values[name] = text
            present = text != default and text != ""
            states[FlagSignal(name)] = present
            if present:
                normalized = text.strip().lower()
                if normalized in keywords:
                    states[FlagSignal(name, normalized)] = True

        for name, default in self.presence_flags.items():
            found, raw = _lookup(source, name)
            if not found:
                continue
            text = "" if raw is None else str(raw)
            values[name] = text
            states[FlagSignal(name)] = text != default and text != ""

        signals = SignalSet(states, values)
        logger.debug("Collected flag signals: %r", signals)
        return signals

    @staticmethod
    def _as_mapping(parsed_flags: Any) -> Mapping:
        if isinstance(parsed_flags, Mapping):
            return parsed_flags
        if isinstance(parsed_flags, argparse.Namespace):
            return vars(parsed_flags)
        return getattr(parsed_flags, "__dict__", {})


def _lookup(source: Mapping, name: str) -> tuple[bool, Any]:
    """Find a flag by its hyphenated or underscored spelling."""
    for key in (name, name.replace("-", "_")):
        if key in source:
            return True, source[key]
    return False, None
