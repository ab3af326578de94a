"""Observation events.

A tree reports what it decided (ticks starting and ending, nodes entered and
left, conditions checked, running work interrupted) to whatever emitter its
ExecutionContext carries. arbor.telemetry.TraceCollector is one consumer.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Protocol

from .status import NodeState


class EventEmitter(Protocol):
    """Anything with emit(event) can observe a tree.

    Implementations log, buffer or forward events as they like; emit should
    not raise, since it runs in the middle of a tick.
    """

    def emit(self, event: "Event") -> None: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class Event:
    """Fields shared by every event.

    tick_id ties the event to a BehaviorTree tick. Node events also name the
    node, its concrete class and its path, which is enough to rebuild the
    shape of the tree from the event stream alone. payload holds whatever
    a subclass adds, as plain JSON-friendly values.
    """

    event_type: ClassVar[str] = "event"

    tick_id: int
    node_id: str = ""
    node_type: str = ""
    path_in_tree: str = ""
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def payload(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True, kw_only=True)
class _Outcome(Event):
    result: NodeState

    @property
    def payload(self) -> dict[str, Any]:
        return {"result": self.result.value}


@dataclass(frozen=True, kw_only=True)
class TickStarted(Event):
    event_type: ClassVar[str] = "tick_started"

    delta_time: float = 0.0

    @property
    def payload(self) -> dict[str, Any]:
        return {"delta_time": self.delta_time}


@dataclass(frozen=True, kw_only=True)
class TickCompleted(_Outcome):
    """The root returned result for this tick."""

    event_type: ClassVar[str] = "tick_completed"


@dataclass(frozen=True, kw_only=True)
class NodeEntered(Event):
    event_type: ClassVar[str] = "node_entered"


@dataclass(frozen=True, kw_only=True)
class NodeExited(_Outcome):
    """A node returned result to its parent."""

    event_type: ClassVar[str] = "node_exited"


@dataclass(frozen=True, kw_only=True)
class ConditionEvaluated(Event):
    """A Conditional checked its predicate; result is the predicate's answer."""

    event_type: ClassVar[str] = "condition_evaluated"

    result: bool

    @property
    def payload(self) -> dict[str, Any]:
        return {"result": self.result}


@dataclass(frozen=True, kw_only=True)
class NodeAborted(Event):
    """A running child was interrupted by a higher-priority sibling.

    node_id and path_in_tree identify the interrupted child; interrupted_by
    names the sibling whose condition triggered the interruption.
    """

    event_type: ClassVar[str] = "node_aborted"

    interrupted_by: str = ""

    @property
    def payload(self) -> dict[str, Any]:
        return {"interrupted_by": self.interrupted_by}


class ListEventEmitter:
    """Keeps every emitted event in memory, in order. Handy in tests."""

    def __init__(self):
        self.events: list[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()

    @property
    def event_types(self) -> list[str]:
        return [event.event_type for event in self.events]
