from .blackboard import BaseBlackboard, Blackboard
from .composites import Composite, Parallel, Selector, Sequence
from .context import ExecutionContext
from .decorators import (
    AlwaysFail,
    AlwaysSucceed,
    Conditional,
    Decorator,
    Inverter,
    Repeater,
)
from .events import (
    ConditionEvaluated,
    Event,
    EventEmitter,
    ListEventEmitter,
    NodeAborted,
    NodeEntered,
    NodeExited,
    TickCompleted,
    TickStarted,
)
from .integration import RunStateMachine, StateHolder, StateMachine, StateMachineBlackboard
from .leaves import Action, Leaf, Log, Wait
from .node import ConditionCheck, Node
from .status import AbortMode, NodeState, ParallelPolicy, TreeStatus
from .tree import BehaviorTree

__all__ = [
    "AbortMode",
    "Action",
    "AlwaysFail",
    "AlwaysSucceed",
    "BaseBlackboard",
    "BehaviorTree",
    "Blackboard",
    "Composite",
    "ConditionCheck",
    "ConditionEvaluated",
    "Conditional",
    "Decorator",
    "Event",
    "EventEmitter",
    "ExecutionContext",
    "Inverter",
    "Leaf",
    "ListEventEmitter",
    "Log",
    "Node",
    "NodeAborted",
    "NodeEntered",
    "NodeExited",
    "NodeState",
    "Parallel",
    "ParallelPolicy",
    "Repeater",
    "RunStateMachine",
    "Selector",
    "Sequence",
    "StateHolder",
    "StateMachine",
    "StateMachineBlackboard",
    "TickCompleted",
    "TickStarted",
    "TreeStatus",
    "Wait",
]
