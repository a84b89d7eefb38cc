"""Display events."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LogEntry:
    """A protocol log line translated into a display key and its arguments.

    An empty header means "print the single raw argument as-is".
    """

    header: str
    args: tuple[str, ...] = field(default_factory=tuple)
