from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .events import NodeEntered, NodeExited
from .status import AbortMode, NodeState

if TYPE_CHECKING:
    from .context import ExecutionContext


class Node(ABC):
    """Abstract base class for behavior tree nodes.

    execute() is the public entry point and owns the node lifecycle: the first
    call of a run fires on_start(), every call runs on_execute(), and a
    terminal result fires on_stop() and ends the run so the next call starts
    a fresh one. Subclasses implement on_execute and override the hooks they
    need.

    Attributes:
        name: Identifier for this node, used in paths and events.
        abort_mode: Which running behaviors this node may interrupt.
        state: The last state produced by execute(), or None if the node has
            not run since construction or reset.
    """

    def __init__(self, name: str, abort_mode: AbortMode = AbortMode.NONE):
        """Initialize the node.

        Args:
            name: Identifier for this node.
            abort_mode: Interruption behavior, see AbortMode.
        """
        self.name = name
        self.abort_mode = abort_mode
        self.state: NodeState | None = None
        self._started = False

    @property
    def node_type(self) -> str:
        return type(self).__name__

    @property
    def is_started(self) -> bool:
        """True between on_start and the end of the run (terminal result or abort)."""
        return self._started

    def get_children(self) -> list["Node"]:
        """Return the direct children of this node."""
        return []

    def execute(self, context: "ExecutionContext") -> NodeState:
        """Execute one tick of this node's behavior.

        Args:
            context: The execution context for the current tick.

        Returns:
            RUNNING, SUCCESS or FAILURE.
        """
        emitter = context.emitter
        if emitter is not None:
            emitter.emit(
                NodeEntered(
                    tick_id=context.tick_id,
                    node_id=self.name,
                    node_type=self.node_type,
                    path_in_tree=context.path,
                )
            )

        if not self._started:
            self._started = True
            self.on_start(context)

        state = self.on_execute(context)
        self.state = state

        if state is not NodeState.RUNNING:
            self._started = False
            self.on_stop(context)

        if emitter is not None:
            emitter.emit(
                NodeExited(
                    tick_id=context.tick_id,
                    node_id=self.name,
                    node_type=self.node_type,
                    path_in_tree=context.path,
                    result=state,
                )
            )
        return state

    def abort(self) -> None:
        """Force-terminate this node if it is mid-run.

        Propagates to the active children first, then fires on_abort(). By the
        time abort() returns the whole subtree is terminated. A node that is
        not mid-run is left untouched.
        """
        if not self._started:
            return
        self._abort_active()
        self._started = False
        self.state = NodeState.FAILURE
        self.on_abort()

    def reset(self) -> None:
        """Clear per-run bookkeeping so the next execute() starts a new run."""
        self._started = False
        self.state = None

    @abstractmethod
    def on_execute(self, context: "ExecutionContext") -> NodeState:
        """Run the node's own logic for one tick."""
        pass  # pragma: no cover

    def on_start(self, context: "ExecutionContext") -> None:
        """Called before on_execute on the first tick of a run."""

    def on_stop(self, context: "ExecutionContext") -> None:
        """Called after on_execute when the run ends with SUCCESS or FAILURE."""

    def on_abort(self) -> None:
        """Called when a running node is aborted."""

    def _abort_active(self) -> None:
        """Abort whichever children are currently running."""

    def __repr__(self) -> str:
        state = self.state.value if self.state is not None else None
        return f"{self.node_type}(name={self.name!r}, state={state!r})"


@runtime_checkable
class ConditionCheck(Protocol):
    """Capability of nodes whose condition composites can re-check.

    Composites consult it while scanning higher-priority children for
    LOWER_PRIORITY interruptions.
    """

    abort_mode: AbortMode

    def check_condition(self, context: "ExecutionContext") -> bool:
        ...
