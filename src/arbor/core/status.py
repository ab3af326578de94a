"""Status values and policy flags for behavior tree execution."""

from enum import Enum, Flag


class NodeState(Enum):
    """Result of executing a behavior tree node for one tick.

    Attributes:
        RUNNING: The node needs more ticks to complete.
        SUCCESS: The node completed its task successfully.
        FAILURE: The node failed to complete its task.
    """

    RUNNING = "running"
    SUCCESS = "success"
    FAILURE = "failure"

    @property
    def is_terminal(self) -> bool:
        return self is not NodeState.RUNNING


class AbortMode(Flag):
    """Which running behaviors a node may interrupt.

    Attributes:
        NONE: Never interrupts anything.
        SELF: Guards its own running subtree with its condition. A Conditional
            always does this, so the flag is informational there.
        LOWER_PRIORITY: Interrupts running siblings that come after it in
            its parent composite when its condition becomes true.
        BOTH: SELF and LOWER_PRIORITY.
    """

    NONE = 0
    SELF = 1
    LOWER_PRIORITY = 2
    BOTH = SELF | LOWER_PRIORITY


class ParallelPolicy(Enum):
    """How many children of a Parallel must agree on a result."""

    REQUIRE_ONE = "require_one"
    REQUIRE_ALL = "require_all"


class TreeStatus(Enum):
    """Lifecycle of a BehaviorTree controller."""

    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"
