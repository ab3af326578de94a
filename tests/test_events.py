"""Tests for observation events and emitters."""

import dataclasses

import pytest

from arbor.core import (
    ConditionEvaluated,
    Event,
    EventEmitter,
    ListEventEmitter,
    NodeAborted,
    NodeEntered,
    NodeExited,
    NodeState,
    TickCompleted,
    TickStarted,
)


class TestEventFields:
    def test_base_event_carries_node_identity(self):
        event = Event(tick_id=1, node_id="attack", node_type="Action", path_in_tree="root/attack")

        assert event.event_type == "event"
        assert (event.tick_id, event.node_id, event.node_type, event.path_in_tree) == (
            1,
            "attack",
            "Action",
            "root/attack",
        )
        assert event.timestamp.tzinfo is not None
        assert event.payload == {}

    def test_tick_events_leave_node_fields_empty(self):
        event = TickStarted(tick_id=3, delta_time=0.016)
        assert event.node_id == "" and event.path_in_tree == ""

    def test_frozen(self):
        event = NodeEntered(tick_id=1, node_id="attack")
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.node_id = "flee"


class TestEventPayloads:
    @pytest.mark.parametrize(
        "event, event_type, payload",
        [
            (TickStarted(tick_id=3, delta_time=0.016), "tick_started", {"delta_time": 0.016}),
            (
                TickCompleted(tick_id=1, result=NodeState.RUNNING),
                "tick_completed",
                {"result": "running"},
            ),
            (NodeEntered(tick_id=1, node_id="attack"), "node_entered", {}),
            (
                NodeExited(tick_id=1, node_id="attack", result=NodeState.FAILURE),
                "node_exited",
                {"result": "failure"},
            ),
            (
                ConditionEvaluated(tick_id=1, node_id="has_target", result=True),
                "condition_evaluated",
                {"result": True},
            ),
            (
                NodeAborted(tick_id=2, node_id="patrol", interrupted_by="flee"),
                "node_aborted",
                {"interrupted_by": "flee"},
            ),
        ],
    )
    def test_type_and_payload(self, event, event_type, payload):
        assert event.event_type == event_type
        assert event.payload == payload


class TestEmitters:
    def test_list_emitter_records_in_order(self):
        emitter = ListEventEmitter()
        emitter.emit(TickStarted(tick_id=1))
        emitter.emit(TickCompleted(tick_id=1, result=NodeState.SUCCESS))

        assert emitter.event_types == ["tick_started", "tick_completed"]

    def test_list_emitter_clear(self):
        emitter = ListEventEmitter()
        emitter.emit(TickStarted(tick_id=1))

        emitter.clear()

        assert emitter.events == []

    def test_any_object_with_emit_is_an_emitter(self):
        seen = []

        class Forwarder:
            def emit(self, event: Event) -> None:
                seen.append(event.tick_id)

        emitter: EventEmitter = Forwarder()
        emitter.emit(TickStarted(tick_id=7))

        assert seen == [7]
