"""Runtime inspection of behavior trees.

TreeInspector follows any number of BehaviorTree instances. Each update()
walks every tracked tree, records a NodeSnapshot per node and appends the
running nodes to a bounded history, which is what an in-game debug overlay
needs to show "what is this agent doing right now".
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from arbor.core import BehaviorTree, Composite, Decorator, Leaf, Node, NodeState

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 100


def node_kind(node: Node) -> str:
    """Classify a node as "Composite", "Decorator", "Leaf" or plain "Node"."""
    if isinstance(node, Composite):
        return "Composite"
    if isinstance(node, Decorator):
        return "Decorator"
    if isinstance(node, Leaf):
        return "Leaf"
    return "Node"


@dataclass(frozen=True)
class NodeSnapshot:
    """State of one node at the time of an inspector update.

    Attributes:
        name: Node name.
        node_type: Concrete class name (e.g., "Sequence").
        kind: "Composite", "Decorator", "Leaf" or "Node".
        state: Last state the node produced, or None if it has not run.
        depth: Distance from the root (root is 0).
        update_id: Counter of the inspector update that took the snapshot.
    """

    name: str
    node_type: str
    kind: str
    state: NodeState | None
    depth: int
    update_id: int

    @property
    def is_active(self) -> bool:
        return self.state is NodeState.RUNNING

    def __str__(self) -> str:
        state = self.state.value if self.state is not None else "idle"
        return f"{'  ' * self.depth}{self.name} [{self.node_type}] {state}"


class TreeInspector:
    """Collects node snapshots and a running-node history for tracked trees.

    Attributes:
        enabled: When False, update() does nothing.
        history_size: Maximum number of history lines kept.
    """

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE):
        self.enabled = True
        self.history_size = history_size
        self._trees: list[BehaviorTree] = []
        self._snapshots: list[NodeSnapshot] = []
        self._history: deque[str] = deque(maxlen=history_size)
        self._listeners: list[Callable[[NodeSnapshot], None]] = []
        self._update_id = 0

    @property
    def tracked_trees(self) -> list[BehaviorTree]:
        return list(self._trees)

    def track(self, tree: BehaviorTree) -> None:
        """Start following tree. Tracking the same tree twice has no effect."""
        if tree not in self._trees:
            self._trees.append(tree)

    def untrack(self, tree: BehaviorTree) -> None:
        if tree in self._trees:
            self._trees.remove(tree)

    def on_snapshot(self, callback: Callable[[NodeSnapshot], None]) -> None:
        """Register a callback invoked with every snapshot taken by update()."""
        self._listeners.append(callback)

    def update(self) -> list[NodeSnapshot]:
        """Snapshot every node of every tracked tree.

        Returns:
            The snapshots taken, in depth-first order.
        """
        if not self.enabled:
            return self.get_snapshots()

        self._update_id += 1
        self._snapshots = []
        for tree in self._trees:
            if tree.root is None:
                continue
            self._collect(tree.root, 0)
        return self.get_snapshots()

    def _collect(self, node: Node, depth: int) -> None:
        snapshot = NodeSnapshot(
            name=node.name,
            node_type=node.node_type,
            kind=node_kind(node),
            state=node.state,
            depth=depth,
            update_id=self._update_id,
        )
        self._snapshots.append(snapshot)
        for listener in self._listeners:
            listener(snapshot)

        if snapshot.is_active:
            self._history.append(f"[{self._update_id}] {snapshot.name} -> running")

        for child in node.get_children():
            self._collect(child, depth + 1)

    def get_snapshots(self) -> list[NodeSnapshot]:
        return list(self._snapshots)

    def get_history(self) -> list[str]:
        """Return history lines, oldest first."""
        return list(self._history)

    def summary(self) -> str:
        running = sum(1 for snapshot in self._snapshots if snapshot.is_active)
        return (
            f"Trees: {len(self._trees)}, Nodes: {len(self._snapshots)}, "
            f"Running: {running}"
        )

    def clear(self) -> None:
        """Drop snapshots and history; tracked trees are kept."""
        self._snapshots.clear()
        self._history.clear()
        logger.debug("TreeInspector cleared")
