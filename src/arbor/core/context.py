"""Execution context threaded through one tick of a behavior tree.

The ExecutionContext bundles what every node needs during a tick: the agent
that owns the tree, the shared blackboard and the time elapsed since the last
tick. It is immutable - creating a child context returns a new instance.
"""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .blackboard import BaseBlackboard
    from .events import EventEmitter


@dataclass(frozen=True)
class ExecutionContext:
    """Immutable per-tick context.

    Attributes:
        owner: Opaque handle of the agent whose behavior this is. Never
            inspected by the engine.
        blackboard: Blackboard shared by the whole tree (not owned).
        delta_time: Seconds elapsed since the previous tick.
        tick_id: Current tick number.
        path: Path to the current node (e.g., "root/selector[0]/attack[1]").
            Only maintained while an emitter is attached.
        emitter: Optional event emitter for observation.
    """

    owner: Any
    blackboard: "BaseBlackboard"
    delta_time: float = 0.0
    tick_id: int = 0
    path: str = ""
    emitter: "EventEmitter | None" = None

    @property
    def observed(self) -> bool:
        return self.emitter is not None

    def child(self, node_name: str, child_index: int | None = None) -> "ExecutionContext":
        """Create a context for a nested node.

        Args:
            node_name: The name of the child node.
            child_index: Index of the child in its parent's children list.

        Returns:
            A new ExecutionContext with the child's segment appended to path.
        """
        if child_index is not None:
            segment = f"{node_name}[{child_index}]"
        else:
            segment = node_name

        if self.path:
            new_path = f"{self.path}/{segment}"
        else:
            new_path = segment

        return replace(self, path=new_path)
