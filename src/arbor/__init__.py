"""arbor: a tick-driven behavior tree engine for game agents."""

__version__ = "0.1.0"

from arbor.core import (
    AbortMode,
    Action,
    AlwaysFail,
    AlwaysSucceed,
    BaseBlackboard,
    BehaviorTree,
    Blackboard,
    Composite,
    ConditionCheck,
    ConditionEvaluated,
    Conditional,
    Decorator,
    Event,
    EventEmitter,
    ExecutionContext,
    Inverter,
    Leaf,
    ListEventEmitter,
    Log,
    Node,
    NodeAborted,
    NodeEntered,
    NodeExited,
    NodeState,
    Parallel,
    ParallelPolicy,
    Repeater,
    RunStateMachine,
    Selector,
    Sequence,
    StateHolder,
    StateMachine,
    StateMachineBlackboard,
    TickCompleted,
    TickStarted,
    TreeStatus,
    Wait,
)
from arbor.debugging import NodeSnapshot, TreeInspector
from arbor.telemetry import ExecutionTrace, NodeExecution, TraceCollector
from arbor.visualization import format_trace, format_tree, print_trace, print_tree

__all__ = [
    "__version__",
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
    "ExecutionTrace",
    "Inverter",
    "Leaf",
    "ListEventEmitter",
    "Log",
    "Node",
    "NodeAborted",
    "NodeEntered",
    "NodeExecution",
    "NodeExited",
    "NodeSnapshot",
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
    "TraceCollector",
    "TreeInspector",
    "TreeStatus",
    "Wait",
    "format_trace",
    "format_tree",
    "print_trace",
    "print_tree",
]
