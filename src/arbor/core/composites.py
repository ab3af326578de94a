import logging

from .context import ExecutionContext
from .events import NodeAborted
from .node import ConditionCheck, Node
from .status import AbortMode, NodeState, ParallelPolicy

logger = logging.getLogger(__name__)


class Composite(Node):
    """Base class for nodes that own an ordered list of children.

    Insertion order is priority order: index 0 is the highest priority
    child. The composite remembers which child it is evaluating across ticks
    in current_index (the cursor).

    A None entry in children is treated as a child that always fails.

    Attributes:
        name: A unique identifier for this node.
        children: Child nodes in priority order.
        current_index: Index of the child currently being evaluated.
    """

    def __init__(
        self,
        name: str,
        children: list[Node | None] | None = None,
        abort_mode: AbortMode = AbortMode.NONE,
    ):
        """Initialize the composite.

        Args:
            name: A unique identifier for this node.
            children: Optional list of child nodes in priority order.
            abort_mode: Interruption behavior of this node within its parent.
        """
        super().__init__(name, abort_mode)
        self.children: list[Node | None] = list(children) if children is not None else []
        self.current_index: int = 0

    def add_child(self, child: Node) -> "Composite":
        """Append a child with the lowest priority so far. Returns self for chaining."""
        self.children.append(child)
        return self

    def add_children(self, *children: Node) -> "Composite":
        """Append several children in order. Returns self for chaining."""
        for child in children:
            self.add_child(child)
        return self

    def get_children(self) -> list[Node]:
        return [child for child in self.children if child is not None]

    def on_start(self, context: ExecutionContext) -> None:
        self.current_index = 0

    def reset(self) -> None:
        """Reset this node and all children to their initial state."""
        super().reset()
        self.current_index = 0
        for child in self.get_children():
            child.reset()

    def _abort_active(self) -> None:
        if self.current_index < len(self.children):
            child = self.children[self.current_index]
            if child is not None:
                child.abort()

    def _execute_child(self, index: int, context: ExecutionContext) -> NodeState:
        """Execute the child at index, failing closed if the slot is empty."""
        child = self.children[index]
        if child is None:
            return NodeState.FAILURE
        if context.observed:
            context = context.child(child.name, index)
        return child.execute(context)

    def _check_abort_conditions(self, context: ExecutionContext) -> bool:
        """Let a higher-priority child interrupt the child at the cursor.

        Scans the children before the cursor. The first one whose abort_mode
        includes LOWER_PRIORITY and whose condition now holds aborts the
        running child and moves the cursor back to itself.

        Returns:
            True if the cursor was moved.
        """
        for i in range(min(self.current_index, len(self.children))):
            candidate = self.children[i]
            if candidate is None or not (candidate.abort_mode & AbortMode.LOWER_PRIORITY):
                continue
            if not isinstance(candidate, ConditionCheck):
                continue
            if not candidate.check_condition(context):
                continue

            if self.current_index < len(self.children):
                interrupted = self.children[self.current_index]
                if interrupted is not None and interrupted.is_started:
                    interrupted.abort()
                    self._emit_aborted(interrupted, candidate, context)
                    logger.debug(
                        "%s: %r interrupted by higher-priority %r",
                        self.name,
                        interrupted.name,
                        candidate.name,
                    )
            self.current_index = i
            return True
        return False

    def _emit_aborted(self, interrupted: Node, by: Node, context: ExecutionContext) -> None:
        if context.emitter is None:
            return
        path = context.child(interrupted.name, self.current_index).path
        context.emitter.emit(
            NodeAborted(
                tick_id=context.tick_id,
                node_id=interrupted.name,
                node_type=interrupted.node_type,
                path_in_tree=path,
                interrupted_by=by.name,
            )
        )


class Sequence(Composite):
    """A composite node that executes children in order until one fails.

    The Sequence ticks its children from left to right, starting at the
    cursor. If a child returns SUCCESS, it moves on to the next child within
    the same tick. If a child returns FAILURE, the sequence immediately fails.
    If a child returns RUNNING, the sequence returns RUNNING and resumes from
    that child on the next tick.

    Note on empty Sequence: Returns SUCCESS (vacuously true - all zero children
    succeeded).
    """

    def on_execute(self, context: ExecutionContext) -> NodeState:
        """Execute children in order until one fails or returns RUNNING.

        Returns:
            FAILURE if any child fails.
            RUNNING if a child is still running.
            SUCCESS if all children succeed.
        """
        if self.current_index > 0:
            self._check_abort_conditions(context)

        while self.current_index < len(self.children):
            status = self._execute_child(self.current_index, context)
            if status is not NodeState.SUCCESS:
                return status
            self.current_index += 1

        return NodeState.SUCCESS


class Selector(Composite):
    """A composite node that tries children until one succeeds.

    The Selector ticks its children from left to right, starting at the
    cursor. If a child returns FAILURE, it moves on to the next child within
    the same tick. If a child returns SUCCESS, the selector immediately
    succeeds. If a child returns RUNNING, the selector returns RUNNING and
    resumes from that child on the next tick.

    Note on empty Selector: Returns FAILURE (no child succeeded).
    """

    def on_execute(self, context: ExecutionContext) -> NodeState:
        """Try children in order until one succeeds or returns RUNNING.

        Returns:
            SUCCESS if any child succeeds.
            RUNNING if a child is still running.
            FAILURE if all children fail.
        """
        if self.current_index > 0:
            self._check_abort_conditions(context)

        while self.current_index < len(self.children):
            status = self._execute_child(self.current_index, context)
            if status is not NodeState.FAILURE:
                return status
            self.current_index += 1

        return NodeState.FAILURE


class Parallel(Composite):
    """A composite node that executes all children every tick.

    Each tick the Parallel executes every child that has not yet resolved in
    the current run. Once a child returns SUCCESS or FAILURE it is not
    executed again until the Parallel starts a new run, which prevents side
    effects from being repeated.

    The result is decided by two policies, failure first:

    - failure_policy REQUIRE_ONE: any failure fails the Parallel and aborts
      the children still running. REQUIRE_ALL: every child must fail.
    - success_policy REQUIRE_ONE: any success succeeds the Parallel and aborts
      the children still running. REQUIRE_ALL: every child must succeed.

    If no policy is satisfied the Parallel is RUNNING while any child runs,
    and FAILURE once every child has resolved.

    An empty Parallel goes through the same checks with zero counts. With the
    default policies it succeeds; REQUIRE_ALL failure makes it fail first,
    and REQUIRE_ONE success with nothing to succeed falls through to FAILURE.

    Attributes:
        success_policy: Policy that decides overall SUCCESS.
        failure_policy: Policy that decides overall FAILURE.
    """

    def __init__(
        self,
        name: str,
        children: list[Node | None] | None = None,
        success_policy: ParallelPolicy = ParallelPolicy.REQUIRE_ALL,
        failure_policy: ParallelPolicy = ParallelPolicy.REQUIRE_ONE,
        abort_mode: AbortMode = AbortMode.NONE,
    ):
        """Initialize the Parallel node.

        Args:
            name: A unique identifier for this node.
            children: Optional list of child nodes to execute in parallel.
            success_policy: Defaults to every child succeeding.
            failure_policy: Defaults to any child failing.
            abort_mode: Interruption behavior of this node within its parent.
        """
        super().__init__(name, children, abort_mode)
        self.success_policy = success_policy
        self.failure_policy = failure_policy
        self._child_states: list[NodeState] = [NodeState.RUNNING] * len(self.children)

    @property
    def child_states(self) -> list[NodeState]:
        """Per-child results of the current run, RUNNING for unresolved children."""
        return list(self._child_states)

    def add_child(self, child: Node) -> "Parallel":
        super().add_child(child)
        self._child_states.append(NodeState.RUNNING)
        return self

    def _ensure_state_list_size(self) -> None:
        """Grow the per-child results when children were appended directly."""
        missing = len(self.children) - len(self._child_states)
        if missing > 0:
            logger.debug("%s: adding %d missing child slots", self.name, missing)
            self._child_states.extend([NodeState.RUNNING] * missing)

    def on_start(self, context: ExecutionContext) -> None:
        super().on_start(context)
        self._child_states = [NodeState.RUNNING] * len(self.children)

    def on_execute(self, context: ExecutionContext) -> NodeState:
        """Execute unresolved children and apply the policies.

        Returns:
            FAILURE or SUCCESS when a policy is satisfied, otherwise RUNNING
            while children are running and FAILURE when none are.
        """
        self._ensure_state_list_size()

        success_count = 0
        failure_count = 0
        running_count = 0

        for i in range(len(self.children)):
            if self._child_states[i] is NodeState.RUNNING:
                self._child_states[i] = self._execute_child(i, context)

            status = self._child_states[i]
            if status is NodeState.SUCCESS:
                success_count += 1
            elif status is NodeState.FAILURE:
                failure_count += 1
            else:
                running_count += 1

        total = len(self.children)

        if self.failure_policy is ParallelPolicy.REQUIRE_ONE and failure_count > 0:
            self._abort_running_children()
            return NodeState.FAILURE
        if self.failure_policy is ParallelPolicy.REQUIRE_ALL and failure_count == total:
            return NodeState.FAILURE

        if self.success_policy is ParallelPolicy.REQUIRE_ONE and success_count > 0:
            self._abort_running_children()
            return NodeState.SUCCESS
        if self.success_policy is ParallelPolicy.REQUIRE_ALL and success_count == total:
            return NodeState.SUCCESS

        return NodeState.RUNNING if running_count > 0 else NodeState.FAILURE

    def _abort_running_children(self) -> None:
        for child, status in zip(self.children, self._child_states):
            if child is not None and status is NodeState.RUNNING:
                child.abort()

    def _abort_active(self) -> None:
        self._ensure_state_list_size()
        self._abort_running_children()

    def reset(self) -> None:
        """Reset this node, its children and every per-child result."""
        super().reset()
        self._child_states = [NodeState.RUNNING] * len(self.children)
