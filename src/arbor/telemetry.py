"""Per-tick execution traces built from tree events.

- NodeExecution: one node visited during a tick, with its result and timing
- ExecutionTrace: everything one tick did, in tree order
- TraceCollector: an EventEmitter turning the event stream into traces
"""

from __future__ import annotations

import json
import uuid
from collections import deque
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any

from arbor.core import Event


def _iso(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment is not None else None


def _parse_iso(text: str | None) -> datetime | None:
    return datetime.fromisoformat(text) if text else None


@dataclass
class NodeExecution:
    """One node visited during a tick.

    Attributes:
        node_id: Name of the node.
        node_type: Concrete class name (e.g., "Selector", "Wait").
        path_in_tree: Location in the tree (e.g., "guard/patrol[2]/walk[0]").
        timestamp: When the node returned, or when it was interrupted.
        status: "success", "failure", "running", or "aborted" when a
            higher-priority sibling interrupted it.
        duration_ms: Time spent inside the node, in milliseconds.
    """

    node_id: str
    node_type: str
    path_in_tree: str
    timestamp: datetime
    status: str
    duration_ms: float

    @property
    def depth(self) -> int:
        """Nesting depth derived from the path; the root is at depth 0."""
        return self.path_in_tree.count("/") if self.path_in_tree else 0

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "timestamp": _iso(self.timestamp)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NodeExecution:
        return cls(**{**data, "timestamp": _parse_iso(data["timestamp"])})

    def __repr__(self) -> str:
        return (
            f"NodeExecution(id={self.node_id!r}, type={self.node_type!r}, "
            f"path={self.path_in_tree!r}, status={self.status!r}, "
            f"duration={self.duration_ms:.2f}ms)"
        )


@dataclass
class ExecutionTrace:
    """Everything one tick of a BehaviorTree did.

    Executions are kept in the order nodes were entered, so parents come
    before their children and the list reads like the tree itself.

    Attributes:
        trace_id: Random identifier, unique per trace.
        tick_id: BehaviorTree.tick_count of the traced tick.
        delta_time: Seconds passed to the tick.
        start_time: Timestamp of the TickStarted event.
        end_time: Timestamp of the TickCompleted event.
        status: Root result ("success", "failure" or "running").
        executions: Visited nodes in tree order.
        metadata: Free-form data attached by the host.
    """

    trace_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    tick_id: int = 0
    delta_time: float = 0.0
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: str = ""
    executions: list[NodeExecution] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds() * 1000

    def find(self, node_id: str) -> list[NodeExecution]:
        """Return every execution of the node named node_id."""
        return [e for e in self.executions if e.node_id == node_id]

    def to_dict(self) -> dict[str, Any]:
        data = {
            name: getattr(self, name)
            for name in ("trace_id", "tick_id", "delta_time", "status", "metadata")
        }
        data["start_time"] = _iso(self.start_time)
        data["end_time"] = _iso(self.end_time)
        data["executions"] = [e.to_dict() for e in self.executions]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExecutionTrace:
        return cls(
            trace_id=data["trace_id"],
            tick_id=data["tick_id"],
            delta_time=data.get("delta_time", 0.0),
            start_time=_parse_iso(data.get("start_time")),
            end_time=_parse_iso(data.get("end_time")),
            status=data.get("status", ""),
            executions=[NodeExecution.from_dict(e) for e in data.get("executions", [])],
            metadata=dict(data.get("metadata", {})),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, text: str) -> ExecutionTrace:
        return cls.from_dict(json.loads(text))


class TraceCollector:
    """Turns tree events into one ExecutionTrace per tick.

    Pass it as the emitter of a BehaviorTree:

        collector = TraceCollector()
        tree = BehaviorTree(owner=agent, root=root, emitter=collector)
        tree.start()
        tree.tick(0.016)
        print_trace(collector.get_trace())

    Entering a node opens an execution keyed by its path; leaving it closes
    that execution with the node's result and the time spent. An interrupted
    node gets an execution of its own with status "aborted". Events arriving
    outside a tick are ignored.

    Attributes:
        max_traces: How many finished traces to keep; None keeps all.
    """

    def __init__(self, max_traces: int | None = None):
        self.max_traces = max_traces
        self._traces: deque[ExecutionTrace] = deque(maxlen=max_traces)
        self._building: ExecutionTrace | None = None
        self._open: dict[str, tuple[datetime, NodeExecution]] = {}

    def emit(self, event: Event) -> None:
        match event.event_type:
            case "tick_started":
                self._begin_tick(event)
            case "tick_completed":
                self._end_tick(event)
            case "node_entered":
                self._enter(event)
            case "node_exited":
                self._exit(event)
            case "node_aborted":
                self._append(event, "aborted")

    def _begin_tick(self, event: Event) -> None:
        self._open.clear()
        self._building = ExecutionTrace(
            tick_id=event.tick_id,
            delta_time=event.payload.get("delta_time", 0.0),
            start_time=event.timestamp,
        )

    def _end_tick(self, event: Event) -> None:
        trace, self._building = self._building, None
        if trace is None:
            return
        self._traces.append(
            replace(trace, end_time=event.timestamp, status=event.payload["result"])
        )

    def _enter(self, event: Event) -> None:
        execution = self._append(event, "running")
        if execution is not None:
            self._open[event.path_in_tree] = (event.timestamp, execution)

    def _exit(self, event: Event) -> None:
        result = event.payload["result"]
        opened = self._open.pop(event.path_in_tree, None)
        if opened is None:
            self._append(event, result)
            return
        entered_at, execution = opened
        execution.status = result
        execution.timestamp = event.timestamp
        execution.duration_ms = (event.timestamp - entered_at).total_seconds() * 1000

    def _append(self, event: Event, status: str) -> NodeExecution | None:
        if self._building is None:
            return None
        execution = NodeExecution(
            node_id=event.node_id,
            node_type=event.node_type,
            path_in_tree=event.path_in_tree,
            timestamp=event.timestamp,
            status=status,
            duration_ms=0.0,
        )
        self._building.executions.append(execution)
        return execution

    def get_trace(self) -> ExecutionTrace | None:
        """The trace of the last finished tick, or None."""
        return self._traces[-1] if self._traces else None

    def get_traces(self) -> list[ExecutionTrace]:
        """Finished traces, oldest first."""
        return list(self._traces)

    def get_executions(self) -> list[NodeExecution]:
        """Executions of every kept trace, flattened in tick order."""
        return [e for trace in self._traces for e in trace.executions]

    def clear(self) -> None:
        self._traces.clear()
        self._building = None
        self._open.clear()
