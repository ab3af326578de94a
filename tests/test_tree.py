import logging

import pytest

from arbor.core import (
    AbortMode,
    Action,
    BehaviorTree,
    Blackboard,
    Conditional,
    ListEventEmitter,
    NodeState,
    Parallel,
    Selector,
    Sequence,
    TickCompleted,
    TickStarted,
    TreeStatus,
    Wait,
)

from .helpers import MockNode, flag_is_set, set_value_action


class TestBehaviorTreeCreation:
    """Test creating BehaviorTree with different arguments."""

    def test_defaults(self):
        tree = BehaviorTree()
        assert tree.root is None
        assert tree.owner is None
        assert isinstance(tree.blackboard, Blackboard)
        assert tree.status is TreeStatus.CREATED
        assert tree.current_state is None
        assert tree.tick_count == 0

    def test_uses_given_blackboard(self):
        bb = Blackboard({"health": 10})
        tree = BehaviorTree(root=MockNode("root"), blackboard=bb)
        assert tree.blackboard is bb

    def test_set_root_chains(self):
        tree = BehaviorTree()
        root = MockNode("root")
        assert tree.set_root(root) is tree
        assert tree.root is root


class TestBehaviorTreeLifecycle:
    def test_tick_before_start_does_nothing(self):
        root = MockNode("root")
        tree = BehaviorTree(root=root)

        assert tree.tick(0.1) is None
        assert root.execute_count == 0
        assert tree.tick_count == 0

    def test_start_without_root_warns(self, caplog):
        tree = BehaviorTree()
        with caplog.at_level(logging.WARNING, logger="arbor.core.tree"):
            tree.start()
        assert tree.status is TreeStatus.CREATED
        assert "no root node" in caplog.text

    def test_start_sets_running(self):
        tree = BehaviorTree(root=MockNode("root"))
        tree.start()
        assert tree.status is TreeStatus.RUNNING
        assert tree.is_running is True

    def test_start_while_running_aborts_the_running_root(self):
        aborted = []
        root = Action(
            "dig", lambda ctx: NodeState.RUNNING, on_abort=lambda: aborted.append("dig")
        )
        tree = BehaviorTree(root=root)
        tree.start()
        tree.tick()

        tree.start()

        assert aborted == ["dig"]
        assert tree.is_running is True
        assert root.is_started is False
        assert root.state is None

    def test_terminal_result_stops_tree(self):
        tree = BehaviorTree(root=MockNode("root", NodeState.SUCCESS))
        tree.start()

        assert tree.tick() is NodeState.SUCCESS
        assert tree.status is TreeStatus.STOPPED
        assert tree.current_state is NodeState.SUCCESS

    def test_running_result_keeps_tree_running(self):
        tree = BehaviorTree(root=MockNode("root", NodeState.RUNNING))
        tree.start()
        assert tree.tick() is NodeState.RUNNING
        assert tree.is_running is True

    def test_tick_after_stop_returns_last_state(self):
        root = MockNode("root", NodeState.FAILURE)
        tree = BehaviorTree(root=root)
        tree.start()
        tree.tick()

        assert tree.tick() is NodeState.FAILURE
        assert root.execute_count == 1
        assert tree.tick_count == 1

    def test_stop_aborts_running_root(self):
        leaf = MockNode("leaf", NodeState.RUNNING)
        tree = BehaviorTree(root=Sequence("root", [leaf]))
        tree.start()
        tree.tick()

        tree.stop()

        assert tree.status is TreeStatus.STOPPED
        assert leaf.abort_count == 1
        assert tree.tick() is NodeState.RUNNING
        assert leaf.execute_count == 1

    def test_stop_before_start(self):
        tree = BehaviorTree(root=MockNode("root"))
        tree.stop()
        assert tree.status is TreeStatus.STOPPED

    def test_stopped_tree_can_start_again(self):
        root = MockNode("root", NodeState.SUCCESS)
        tree = BehaviorTree(root=root)
        tree.start()
        tree.tick()

        tree.start()

        assert tree.current_state is None
        assert tree.tick() is NodeState.SUCCESS
        assert root.execute_count == 2

    def test_tick_count_increments(self):
        tree = BehaviorTree(root=MockNode("root", NodeState.RUNNING))
        tree.start()
        for _ in range(3):
            tree.tick()
        assert tree.tick_count == 3

    def test_context_carries_owner_blackboard_and_delta(self):
        seen = []
        owner = object()

        def record(ctx):
            seen.append((ctx.owner, ctx.blackboard, ctx.delta_time, ctx.tick_id))
            return NodeState.SUCCESS

        tree = BehaviorTree(owner=owner, root=Action("record", record))
        tree.start()
        tree.tick(0.25)

        assert seen == [(owner, tree.blackboard, 0.25, 1)]


class TestBehaviorTreeRestart:
    def test_restart_keeps_blackboard(self):
        tree = BehaviorTree(root=set_value_action("write", "seen", True))
        tree.start()
        tree.tick()

        tree.restart()

        assert tree.blackboard.get_bool("seen") is True
        assert tree.is_running is True

    def test_restart_rewinds_cursor(self):
        first = MockNode("first", NodeState.SUCCESS)
        second = MockNode("second", NodeState.RUNNING)
        root = Sequence("root", [first, second])
        tree = BehaviorTree(root=root)
        tree.start()
        tree.tick()
        assert root.current_index == 1

        tree.restart()

        assert root.current_index == 0
        assert second.abort_count == 1
        tree.tick()
        assert first.execute_count == 2

    def test_restart_clears_parallel_slots(self):
        done = MockNode("done", NodeState.SUCCESS)
        busy = MockNode("busy", NodeState.RUNNING)
        root = Parallel("root", [done, busy])
        tree = BehaviorTree(root=root)
        tree.start()
        tree.tick()
        assert root.child_states == [NodeState.SUCCESS, NodeState.RUNNING]

        tree.restart()

        assert root.child_states == [NodeState.RUNNING, NodeState.RUNNING]
        tree.tick()
        assert done.execute_count == 2


class TestBehaviorTreeEvents:
    def test_tick_events_bracket_node_events(self):
        emitter = ListEventEmitter()
        tree = BehaviorTree(root=MockNode("root"), emitter=emitter)
        tree.start()
        tree.tick(0.5)

        assert emitter.event_types == [
            "tick_started",
            "node_entered",
            "node_exited",
            "tick_completed",
        ]
        started, completed = emitter.events[0], emitter.events[-1]
        assert isinstance(started, TickStarted)
        assert started.delta_time == 0.5
        assert isinstance(completed, TickCompleted)
        assert completed.result is NodeState.SUCCESS
        assert completed.tick_id == 1

    def test_root_path_is_root_name(self):
        emitter = ListEventEmitter()
        tree = BehaviorTree(root=Sequence("guard", [MockNode("patrol")]), emitter=emitter)
        tree.start()
        tree.tick()

        paths = [e.path_in_tree for e in emitter.events if e.event_type == "node_entered"]
        assert paths == ["guard", "guard/patrol[0]"]

    def test_no_events_when_not_running(self):
        emitter = ListEventEmitter()
        tree = BehaviorTree(root=MockNode("root"), emitter=emitter)
        tree.tick()
        assert emitter.events == []


@pytest.mark.integration
class TestGuardScenario:
    """A guard patrols, and drops everything to investigate a noise."""

    def _build(self):
        patrol = Sequence(
            "patrol",
            [
                Wait("walk_to_a", 1.0),
                set_value_action("arrive_a", "waypoint", "a"),
                Wait("walk_to_b", 1.0),
                set_value_action("arrive_b", "waypoint", "b"),
            ],
        )
        investigate = Conditional(
            "investigate",
            flag_is_set("noise"),
            child=Sequence(
                "check_noise",
                [
                    Wait("look_around", 0.5),
                    set_value_action("calm_down", "noise", False),
                ],
            ),
            abort_mode=AbortMode.LOWER_PRIORITY,
        )
        return Selector("guard", [investigate, patrol]), patrol

    def test_patrol_completes_without_noise(self):
        root, _ = self._build()
        tree = BehaviorTree(root=root)
        tree.start()

        results = []
        while tree.is_running:
            results.append(tree.tick(0.5))

        assert results[-1] is NodeState.SUCCESS
        assert tree.blackboard.get_str("waypoint") == "b"
        assert tree.tick_count == 3

    def test_noise_interrupts_patrol(self):
        root, patrol = self._build()
        tree = BehaviorTree(root=root)
        tree.start()

        assert tree.tick(0.5) is NodeState.RUNNING
        assert patrol.is_started is True

        tree.blackboard.set_value("noise", True)
        assert tree.tick(0.25) is NodeState.RUNNING
        assert patrol.is_started is False
        assert patrol.state is NodeState.FAILURE

        assert tree.tick(0.25) is NodeState.SUCCESS
        assert tree.blackboard.get_bool("noise") is False
        assert not tree.blackboard.has_key("waypoint")

    def test_restart_mid_patrol_walks_from_the_first_waypoint(self):
        root, patrol = self._build()
        tree = BehaviorTree(root=root)
        tree.start()
        tree.tick(0.5)
        tree.tick(0.5)
        assert patrol.current_index == 2

        tree.restart()
        assert tree.tick(0.5) is NodeState.RUNNING

        assert patrol.current_index == 0
        assert tree.blackboard.get_str("waypoint") == "a"
