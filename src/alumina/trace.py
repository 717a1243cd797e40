"""
Trace sinks for evaluation progress.

The evaluator reports what it does through a sink passed in by the host
rather than writing to a module logger. Tests attach a
:class:`RecordingTrace` to check call order; hosts that want log lines
attach a :class:`LoggingTrace`.
"""

from dataclasses import dataclass
from typing import Any, List, Optional
import logging

EVALUATE = "evaluate"
CACHE_HIT = "cache_hit"
ENTER = "enter"
EXIT = "exit"
ERROR = "error"


@dataclass(frozen=True)
class TraceEvent:
    """One step of an evaluation."""
    kind: str
    output: str
    node: Optional[str] = None
    node_kind: Any = None
    detail: Optional[str] = None

    def describe(self) -> str:
        parts = [self.kind, self.output]
        if self.node is not None:
            parts.append(f"node={self.node}")
        if self.node_kind is not None:
            parts.append(f"kind={self.node_kind}")
        if self.detail:
            parts.append(self.detail)
        return " ".join(parts)


class NullTrace:
    """Discards every event."""

    def emit(self, event: TraceEvent) -> None:
        pass


class RecordingTrace:
    """Keeps every event in :attr:`events`."""

    def __init__(self):
        self.events: List[TraceEvent] = []

    def emit(self, event: TraceEvent) -> None:
        self.events.append(event)

    def kinds(self) -> List[str]:
        return [e.kind for e in self.events]

    def of_kind(self, kind: str) -> List[TraceEvent]:
        return [e for e in self.events if e.kind == kind]

    def clear(self) -> None:
        self.events.clear()


class LoggingTrace:
    """Forwards events to a :mod:`logging` logger; errors log at WARNING."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG):
        self.logger = logger or logging.getLogger("alumina.trace")
        self.level = level

    def emit(self, event: TraceEvent) -> None:
        level = logging.WARNING if event.kind == ERROR else self.level
        if self.logger.isEnabledFor(level):
            self.logger.log(level, "%s", event.describe())
