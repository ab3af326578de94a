"""Bridges between behavior trees and an external state machine module.

The state machine is an external collaborator. The engine only relies on
the small protocols below:

- StateHolder: anything storing named values through
  get_blackboard_value / set_blackboard_value.
- StateMachine: a StateHolder that can be stepped with update() and reports
  the name of its current state.
"""

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from .blackboard import BaseBlackboard
from .context import ExecutionContext
from .leaves import Leaf
from .status import NodeState

logger = logging.getLogger(__name__)


@runtime_checkable
class StateHolder(Protocol):
    def get_blackboard_value(self, key: str) -> Any:
        ...

    def set_blackboard_value(self, key: str, value: Any) -> None:
        ...


@runtime_checkable
class StateMachine(Protocol):
    current_state: str | None

    def update(self) -> None:
        ...


class StateMachineBlackboard(BaseBlackboard):
    """Blackboard backed by an external state holder.

    Lets a tree share its blackboard with a state machine: every read and
    write goes straight to the holder, so both sides see the same values.

    Differences from Blackboard, by contract of the backing store:

    - remove_key() stores None in the holder, which the blackboard contract
      already treats as absent.
    - clear() does nothing. The holder has no way to drop every key, so the
      stored values are left in place.
    - keys() only knows keys written through this adapter.
    """

    def __init__(self, holder: StateHolder):
        super().__init__()
        self.holder = holder
        self._known_keys: dict[str, None] = {}

    def _read(self, key: str) -> Any:
        return self.holder.get_blackboard_value(key)

    def _write(self, key: str, value: Any) -> None:
        self.holder.set_blackboard_value(key, value)
        self._known_keys[key] = None

    def _delete(self, key: str) -> bool:
        had_value = self._read(key) is not None
        if had_value:
            self.holder.set_blackboard_value(key, None)
        self._known_keys.pop(key, None)
        return had_value

    def keys(self) -> list[str]:
        return [key for key in self._known_keys if self._read(key) is not None]

    def clear(self) -> None:
        logger.debug("clear() ignored: %s cannot remove keys", type(self.holder).__name__)


MachineFactory = Callable[[ExecutionContext], StateMachine]
CompletionCheck = Callable[[ExecutionContext, StateMachine], bool]


class RunStateMachine(Leaf):
    """Leaf that runs a state machine as part of the tree.

    On start a fresh machine is built by factory(context). Every tick the
    machine is stepped with update(); the node succeeds once the machine
    reaches target_state or completion(context, machine) returns True, and is
    RUNNING otherwise. The machine is dropped when the run ends or is aborted.

    With share_blackboard, every blackboard write made while the node runs
    is mirrored into the machine (when it is a StateHolder), and the values
    already on the blackboard are copied over on start.

    Attributes:
        machine: The machine of the current run, or None.
    """

    def __init__(
        self,
        name: str,
        factory: MachineFactory | None,
        completion: CompletionCheck | None = None,
        target_state: str | None = None,
        share_blackboard: bool = True,
    ):
        super().__init__(name)
        self.factory = factory
        self.completion = completion
        self.target_state = target_state
        self.share_blackboard = share_blackboard
        self.machine: StateMachine | None = None
        self._blackboard: BaseBlackboard | None = None

    def on_start(self, context: ExecutionContext) -> None:
        if self.factory is None:
            self.machine = None
            return
        self.machine = self.factory(context)
        if self.share_blackboard and isinstance(self.machine, StateHolder):
            for key, value in context.blackboard.to_dict().items():
                self.machine.set_blackboard_value(key, value)
            context.blackboard.subscribe(self._mirror)
            self._blackboard = context.blackboard

    def _mirror(self, key: str, value: Any) -> None:
        if isinstance(self.machine, StateHolder):
            self.machine.set_blackboard_value(key, value)

    def _is_complete(self, context: ExecutionContext) -> bool:
        if self.target_state is not None and self.machine.current_state == self.target_state:
            return True
        if self.completion is not None:
            return bool(self.completion(context, self.machine))
        return False

    def on_execute(self, context: ExecutionContext) -> NodeState:
        if self.machine is None:
            return NodeState.FAILURE
        self.machine.update()
        if self._is_complete(context):
            return NodeState.SUCCESS
        return NodeState.RUNNING

    def _release(self) -> None:
        if self._blackboard is not None:
            self._blackboard.unsubscribe(self._mirror)
            self._blackboard = None
        self.machine = None

    def on_stop(self, context: ExecutionContext) -> None:
        self._release()

    def on_abort(self) -> None:
        self._release()

    def reset(self) -> None:
        super().reset()
        self._release()
