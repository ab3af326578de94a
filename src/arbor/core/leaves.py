"""Leaf nodes for behavior trees.

Leaves have no children. They perform the actual work of the agent: calling
game code, waiting, or tracing. Leaves are the only nodes that touch the
blackboard or the outside world directly.
"""

import logging
from abc import abstractmethod
from collections.abc import Callable

from .context import ExecutionContext
from .node import Node
from .status import NodeState

logger = logging.getLogger(__name__)

ActionFunc = Callable[[ExecutionContext], "NodeState | bool"]


class Leaf(Node):
    """Abstract base class for leaf nodes."""

    @abstractmethod
    def on_execute(self, context: ExecutionContext) -> NodeState:
        pass  # pragma: no cover


class Action(Leaf):
    """Leaf wrapping a function of the execution context.

    The function returns a NodeState. A bool is accepted as a shortcut for
    SUCCESS (True) or FAILURE (False).

    Examples:
        >>> def attack(ctx):
        ...     ctx.blackboard.increment("attacks")
        ...     return NodeState.SUCCESS
        >>> node = Action("attack", attack)

    Attributes:
        func: The wrapped function.
        abort_callback: Optional function called when the action is aborted
            while running.
    """

    def __init__(
        self,
        name: str,
        func: ActionFunc,
        on_abort: Callable[[], None] | None = None,
    ):
        """Initialize the Action.

        Args:
            name: A unique identifier for this action.
            func: Function called with the context on every tick.
            on_abort: Optional cleanup called when a running action is aborted.
        """
        super().__init__(name)
        self.func = func
        self.abort_callback = on_abort

    def on_execute(self, context: ExecutionContext) -> NodeState:
        """Call the wrapped function and normalize its result.

        Raises:
            TypeError: If the function returns neither a NodeState nor a bool.
        """
        result = self.func(context)
        if isinstance(result, NodeState):
            return result
        if isinstance(result, bool):
            return NodeState.SUCCESS if result else NodeState.FAILURE
        raise TypeError(
            f"Action '{self.name}' returned {result!r}; "
            f"expected a NodeState or bool."
        )

    def on_abort(self) -> None:
        if self.abort_callback is not None:
            self.abort_callback()


class Wait(Leaf):
    """Returns RUNNING until the given number of seconds has elapsed.

    Time only advances through the delta_time of each tick's context.

    Attributes:
        seconds: How long to wait.
        elapsed: Seconds accumulated in the current run.
    """

    def __init__(self, name: str, seconds: float):
        """Initialize the Wait.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError(f"Wait '{name}' duration must be >= 0, got {seconds}")
        super().__init__(name)
        self.seconds = seconds
        self.elapsed = 0.0

    def on_start(self, context: ExecutionContext) -> None:
        self.elapsed = 0.0

    def on_execute(self, context: ExecutionContext) -> NodeState:
        self.elapsed += context.delta_time
        if self.elapsed >= self.seconds:
            return NodeState.SUCCESS
        return NodeState.RUNNING

    def reset(self) -> None:
        super().reset()
        self.elapsed = 0.0


class Log(Leaf):
    """Writes a message to the arbor.core.leaves logger and succeeds.

    message may be a string or a function of the context returning one, which
    is handy for tracing blackboard values.
    """

    def __init__(
        self,
        name: str,
        message: str | Callable[[ExecutionContext], str],
        level: int = logging.INFO,
    ):
        super().__init__(name)
        self.message = message
        self.level = level

    def on_execute(self, context: ExecutionContext) -> NodeState:
        text = self.message(context) if callable(self.message) else self.message
        logger.log(self.level, "[%s] %s", self.name, text)
        return NodeState.SUCCESS
