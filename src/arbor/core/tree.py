"""Behavior tree controller.

The BehaviorTree owns the root node and the blackboard, and drives execution
one tick at a time from the host's update loop:

    tree = BehaviorTree(owner=agent, root=build_guard_tree())
    tree.start()
    while tree.is_running:
        tree.tick(frame_delta)
"""

import logging
from typing import Any

from .blackboard import BaseBlackboard, Blackboard
from .context import ExecutionContext
from .events import Event, EventEmitter, TickCompleted, TickStarted
from .node import Node
from .status import NodeState, TreeStatus

logger = logging.getLogger(__name__)


class BehaviorTree:
    """Controller for behavior tree execution.

    Lifecycle: CREATED --start()--> RUNNING --stop() or terminal root
    result--> STOPPED --start()/restart()--> RUNNING.

    The blackboard lives as long as the tree and survives restart(); node
    bookkeeping (cursors, per-child results, timers) does not.

    Attributes:
        owner: Opaque handle passed to every node through the context.
        blackboard: Blackboard shared by every node of the tree.
        root: The root node, or None until set.
        status: Lifecycle state of the controller.
        current_state: Last state produced by the root, or None.
        tick_count: Number of ticks executed since construction.
    """

    def __init__(
        self,
        owner: Any = None,
        root: Node | None = None,
        blackboard: BaseBlackboard | None = None,
        emitter: EventEmitter | None = None,
    ):
        """Initialize the tree.

        Args:
            owner: Whose behavior this is; never inspected.
            root: Optional root node, can be set later with set_root().
            blackboard: Shared blackboard. A new Blackboard is created if None.
            emitter: Optional event emitter for observation.
        """
        self.owner = owner
        self.root = root
        self.blackboard = blackboard if blackboard is not None else Blackboard()
        self.status = TreeStatus.CREATED
        self.current_state: NodeState | None = None
        self.tick_count: int = 0
        self._emitter = emitter

    @property
    def is_running(self) -> bool:
        return self.status is TreeStatus.RUNNING

    def set_root(self, root: Node) -> "BehaviorTree":
        """Set the root node. Returns self for chaining."""
        self.root = root
        return self

    def _emit(self, event: Event) -> None:
        """Emit an event if an emitter is configured."""
        if self._emitter is not None:
            self._emitter.emit(event)

    def start(self) -> None:
        """Begin a new run.

        Resets every node; the root's on_start fires on the next tick. A tree
        that is already running is stopped first, so running nodes see their
        abort hooks. Without a root this logs a warning and leaves the tree as
        it is.
        """
        if self.root is None:
            logger.warning("BehaviorTree has no root node; not starting")
            return
        if self.is_running:
            self.stop()
        self.root.reset()
        self.current_state = None
        self.status = TreeStatus.RUNNING
        logger.debug("BehaviorTree started with root %r", self.root.name)

    def stop(self) -> None:
        """Abort the running root and move to STOPPED."""
        if self.root is not None:
            self.root.abort()
        self.status = TreeStatus.STOPPED
        logger.debug("BehaviorTree stopped")

    def restart(self) -> None:
        """Stop, then start again. The blackboard keeps its contents."""
        self.stop()
        self.start()

    def tick(self, delta_time: float = 0.0) -> NodeState | None:
        """Execute one tick of the behavior tree.

        Does nothing unless the tree is running.

        Args:
            delta_time: Seconds elapsed since the previous tick.

        Returns:
            The state produced by the root, or the last known state when the
            tree is not running.
        """
        if not self.is_running or self.root is None:
            return self.current_state

        self.tick_count += 1
        self._emit(TickStarted(tick_id=self.tick_count, delta_time=delta_time))

        context = ExecutionContext(
            owner=self.owner,
            blackboard=self.blackboard,
            delta_time=delta_time,
            tick_id=self.tick_count,
            path=self.root.name if self._emitter is not None else "",
            emitter=self._emitter,
        )
        result = self.root.execute(context)
        self.current_state = result

        if result.is_terminal:
            self.status = TreeStatus.STOPPED

        self._emit(TickCompleted(tick_id=self.tick_count, result=result))
        return result
