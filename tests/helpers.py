"""Shared test helpers for arbor tests.

This module provides reusable node implementations for testing behavior trees.
These are intentionally simple implementations that make tests readable and
self-documenting.
"""

from arbor.core import Action, Blackboard, ExecutionContext, Node, NodeState

# =============================================================================
# Contexts
# =============================================================================


def make_context(
    blackboard=None, delta_time: float = 0.0, owner=None, emitter=None, tick_id: int = 1
) -> ExecutionContext:
    """Build a context the way BehaviorTree.tick does."""
    return ExecutionContext(
        owner=owner,
        blackboard=blackboard if blackboard is not None else Blackboard(),
        delta_time=delta_time,
        tick_id=tick_id,
        path="root" if emitter is not None else "",
        emitter=emitter,
    )


# =============================================================================
# Generic Mock Nodes
# =============================================================================


class MockNode(Node):
    """A node that returns a configurable state and counts lifecycle calls."""

    def __init__(self, name: str, status: NodeState = NodeState.SUCCESS):
        super().__init__(name)
        self.status = status
        self.execute_count = 0
        self.start_count = 0
        self.stop_count = 0
        self.abort_count = 0
        self.reset_count = 0

    def on_start(self, context):
        self.start_count += 1

    def on_execute(self, context) -> NodeState:
        self.execute_count += 1
        return self.status

    def on_stop(self, context):
        self.stop_count += 1

    def on_abort(self):
        self.abort_count += 1

    def reset(self):
        super().reset()
        self.reset_count += 1


class ScriptedNode(MockNode):
    """A node that returns the given states in order, repeating the last one."""

    def __init__(self, name: str, script: list[NodeState]):
        super().__init__(name, script[-1])
        self._script = list(script)

    def on_execute(self, context) -> NodeState:
        self.execute_count += 1
        index = min(self.execute_count, len(self._script)) - 1
        return self._script[index]


class OrderTrackingNode(Node):
    """A node that records its execution order to a shared list."""

    def __init__(
        self,
        name: str,
        execution_order: list[str],
        status: NodeState = NodeState.SUCCESS,
    ):
        super().__init__(name)
        self._execution_order = execution_order
        self.status = status

    def on_execute(self, context) -> NodeState:
        self._execution_order.append(self.name)
        return self.status


# =============================================================================
# Simple Actions
# =============================================================================


def success_action(name: str = "success") -> Action:
    return Action(name, lambda ctx: NodeState.SUCCESS)


def failure_action(name: str = "failure") -> Action:
    return Action(name, lambda ctx: NodeState.FAILURE)


def running_action(name: str = "running") -> Action:
    return Action(name, lambda ctx: NodeState.RUNNING)


def set_value_action(name: str, key: str, value) -> Action:
    """An action that writes value to the blackboard and succeeds."""

    def write(ctx):
        ctx.blackboard.set_value(key, value)
        return NodeState.SUCCESS

    return Action(name, write)


def flag_is_set(key: str):
    """A predicate that is true while a boolean blackboard flag is set."""
    return lambda ctx: ctx.blackboard.get_bool(key)
