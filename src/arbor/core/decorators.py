"""Decorator nodes for behavior trees.

Decorators are nodes with a single child that modify the child's result or
gate whether it runs at all. A decorator without a child fails closed: it
returns FAILURE.

- Inverter: Negates the child's result (SUCCESS <-> FAILURE)
- AlwaysSucceed / AlwaysFail: Force a terminal result
- Repeater: Repeats the child a fixed number of times or indefinitely
- Conditional: Runs the child only while a predicate holds, and can
  interrupt lower-priority siblings when it starts holding
"""

from collections.abc import Callable

from .context import ExecutionContext
from .events import ConditionEvaluated
from .node import Node
from .status import AbortMode, NodeState

Predicate = Callable[[ExecutionContext], bool]

REPEAT_FOREVER = -1


class Decorator(Node):
    """Abstract base class for decorator nodes.

    Attributes:
        name: A unique identifier for this node.
        child: The single child node being decorated, or None.
    """

    def __init__(
        self,
        name: str,
        child: Node | None = None,
        abort_mode: AbortMode = AbortMode.NONE,
    ):
        """Initialize the decorator with a name and child node.

        Args:
            name: A unique identifier for this node.
            child: The child node to decorate. Can be set later with set_child().
            abort_mode: Interruption behavior of this node within its parent.
        """
        super().__init__(name, abort_mode)
        self.child = child

    def set_child(self, child: Node) -> "Decorator":
        """Replace the decorated child. Returns self for chaining."""
        self.child = child
        return self

    def get_children(self) -> list[Node]:
        return [self.child] if self.child is not None else []

    def _execute_child(self, context: ExecutionContext) -> NodeState:
        if self.child is None:
            return NodeState.FAILURE
        if context.observed:
            context = context.child(self.child.name)
        return self.child.execute(context)

    def _abort_active(self) -> None:
        if self.child is not None:
            self.child.abort()

    def reset(self) -> None:
        """Reset this node and the child to initial state."""
        super().reset()
        if self.child is not None:
            self.child.reset()


class Inverter(Decorator):
    """Inverts the child's result.

    SUCCESS becomes FAILURE, FAILURE becomes SUCCESS.
    RUNNING passes through unchanged.
    """

    def on_execute(self, context: ExecutionContext) -> NodeState:
        status = self._execute_child(context)
        if status is NodeState.SUCCESS:
            return NodeState.FAILURE
        if status is NodeState.FAILURE:
            return NodeState.SUCCESS
        return status


class AlwaysSucceed(Decorator):
    """Runs the child for its side effects and reports SUCCESS once it finishes.

    RUNNING passes through unchanged. A missing child still fails closed.
    """

    def on_execute(self, context: ExecutionContext) -> NodeState:
        if self.child is None:
            return NodeState.FAILURE
        status = self._execute_child(context)
        if status is NodeState.RUNNING:
            return status
        return NodeState.SUCCESS


class AlwaysFail(Decorator):
    """Runs the child for its side effects and reports FAILURE once it finishes.

    RUNNING passes through unchanged.
    """

    def on_execute(self, context: ExecutionContext) -> NodeState:
        status = self._execute_child(context)
        if status is NodeState.RUNNING:
            return status
        return NodeState.FAILURE


class Repeater(Decorator):
    """Repeats the child a fixed number of times or indefinitely.

    The child is executed once per tick. Each SUCCESS completes one
    iteration; the Repeater returns RUNNING until count iterations are done
    and then SUCCESS. With count=-1 it repeats forever. If the child returns
    FAILURE the Repeater immediately returns FAILURE and its run ends.

    Attributes:
        count: Number of iterations, or -1 to repeat forever.
        current_count: Iterations completed in the current run.
    """

    def __init__(
        self,
        name: str,
        child: Node | None = None,
        count: int = REPEAT_FOREVER,
        abort_mode: AbortMode = AbortMode.NONE,
    ):
        """Initialize the Repeater.

        Args:
            name: A unique identifier for this node.
            child: The child node to repeat.
            count: Iterations to complete; -1 repeats forever.
            abort_mode: Interruption behavior of this node within its parent.

        Raises:
            ValueError: If count is below -1.
        """
        if count < REPEAT_FOREVER:
            raise ValueError(f"Repeater '{name}' count must be >= -1, got {count}")
        super().__init__(name, child, abort_mode)
        self.count = count
        self.current_count: int = 0

    def on_start(self, context: ExecutionContext) -> None:
        self.current_count = 0

    def on_execute(self, context: ExecutionContext) -> NodeState:
        """Execute the child once and count completed iterations.

        Returns:
            FAILURE if the child fails.
            RUNNING if the child is running or more iterations remain.
            SUCCESS once count iterations have succeeded.
        """
        if self.count == 0:
            return NodeState.SUCCESS

        status = self._execute_child(context)
        if status is not NodeState.SUCCESS:
            return status

        self.current_count += 1
        if self.count != REPEAT_FOREVER and self.current_count >= self.count:
            return NodeState.SUCCESS
        return NodeState.RUNNING

    def reset(self) -> None:
        super().reset()
        self.current_count = 0


class Conditional(Decorator):
    """Runs the child only while a predicate holds.

    The predicate is evaluated on every tick. If it is false the Conditional
    returns FAILURE without executing the child, aborting the child first when
    it is still running from an earlier tick. SELF adds nothing on top of
    this; the running subtree is always guarded by its own condition.

    With LOWER_PRIORITY, the parent composite re-checks the predicate through
    check_condition() while a later sibling runs, and interrupts that sibling
    as soon as the predicate holds.

    Attributes:
        predicate: Callable taking the ExecutionContext and returning a bool.
    """

    def __init__(
        self,
        name: str,
        predicate: Predicate,
        child: Node | None = None,
        abort_mode: AbortMode = AbortMode.NONE,
    ):
        """Initialize the Conditional.

        Args:
            name: A unique identifier for this node.
            predicate: Condition gating the child.
            child: The child node to run while the predicate holds.
            abort_mode: See class docstring.
        """
        super().__init__(name, child, abort_mode)
        self.predicate = predicate

    def check_condition(self, context: ExecutionContext) -> bool:
        """Evaluate the predicate without executing anything."""
        return bool(self.predicate(context))

    def _evaluate(self, context: ExecutionContext) -> bool:
        result = self.check_condition(context)
        if context.emitter is not None:
            context.emitter.emit(
                ConditionEvaluated(
                    tick_id=context.tick_id,
                    node_id=self.name,
                    node_type=self.node_type,
                    path_in_tree=context.path,
                    result=result,
                )
            )
        return result

    def on_execute(self, context: ExecutionContext) -> NodeState:
        if not self._evaluate(context):
            if self.child is not None and self.child.is_started:
                self.child.abort()
            return NodeState.FAILURE
        return self._execute_child(context)
