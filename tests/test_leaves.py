import logging

import pytest

from arbor.core import Action, Blackboard, Log, NodeState, Wait

from .helpers import make_context


class TestAction:
    def test_returns_function_result(self):
        action = Action("attack", lambda ctx: NodeState.RUNNING)
        assert action.execute(make_context()) is NodeState.RUNNING

    @pytest.mark.parametrize(
        "value, expected",
        [(True, NodeState.SUCCESS), (False, NodeState.FAILURE)],
    )
    def test_bool_result_is_normalized(self, value, expected):
        action = Action("check", lambda ctx: value)
        assert action.execute(make_context()) is expected

    def test_invalid_result_raises_type_error(self):
        action = Action("broken", lambda ctx: "done")
        with pytest.raises(TypeError, match="Action 'broken' returned 'done'"):
            action.execute(make_context())

    def test_function_receives_context(self):
        bb = Blackboard()

        def shoot(ctx):
            ctx.blackboard.increment("shots")
            return NodeState.SUCCESS

        action = Action("shoot", shoot)
        action.execute(make_context(bb))
        action.execute(make_context(bb))

        assert bb.get_int("shots") == 2

    def test_abort_callback_runs_when_aborted(self):
        aborted = []
        action = Action("aim", lambda ctx: NodeState.RUNNING, on_abort=lambda: aborted.append(True))
        action.execute(make_context())

        action.abort()

        assert aborted == [True]

    def test_abort_callback_not_called_when_idle(self):
        aborted = []
        action = Action("aim", lambda ctx: NodeState.RUNNING, on_abort=lambda: aborted.append(True))
        action.abort()
        assert aborted == []


class TestWait:
    def test_runs_until_time_elapsed(self):
        wait = Wait("wait", 1.0)
        ctx = make_context(delta_time=0.4)

        assert wait.execute(ctx) is NodeState.RUNNING
        assert wait.execute(ctx) is NodeState.RUNNING
        assert wait.execute(ctx) is NodeState.SUCCESS

    def test_zero_duration_succeeds_immediately(self):
        assert Wait("wait", 0).execute(make_context()) is NodeState.SUCCESS

    def test_zero_delta_time_never_finishes(self):
        wait = Wait("wait", 0.5)
        ctx = make_context(delta_time=0.0)
        for _ in range(10):
            assert wait.execute(ctx) is NodeState.RUNNING

    def test_negative_duration_raises(self):
        with pytest.raises(ValueError):
            Wait("wait", -1.0)

    def test_new_run_restarts_timer(self):
        wait = Wait("wait", 0.5)
        ctx = make_context(delta_time=0.5)

        assert wait.execute(ctx) is NodeState.SUCCESS
        assert wait.execute(make_context(delta_time=0.1)) is NodeState.RUNNING
        assert wait.elapsed == pytest.approx(0.1)

    def test_abort_then_execute_restarts_timer(self):
        wait = Wait("wait", 1.0)
        wait.execute(make_context(delta_time=0.9))
        wait.abort()

        assert wait.execute(make_context(delta_time=0.2)) is NodeState.RUNNING

    def test_reset_clears_elapsed(self):
        wait = Wait("wait", 1.0)
        wait.execute(make_context(delta_time=0.5))
        wait.reset()
        assert wait.elapsed == 0.0


class TestLog:
    def test_logs_message_and_succeeds(self, caplog):
        log = Log("greet", "hello")
        with caplog.at_level(logging.INFO, logger="arbor.core.leaves"):
            assert log.execute(make_context()) is NodeState.SUCCESS
        assert "[greet] hello" in caplog.text

    def test_callable_message_reads_context(self, caplog):
        log = Log("hp", lambda ctx: f"health={ctx.blackboard.get_int('health')}")
        with caplog.at_level(logging.INFO, logger="arbor.core.leaves"):
            log.execute(make_context(Blackboard({"health": 42})))
        assert "[hp] health=42" in caplog.text

    def test_level_is_respected(self, caplog):
        log = Log("quiet", "detail", level=logging.DEBUG)
        with caplog.at_level(logging.INFO, logger="arbor.core.leaves"):
            log.execute(make_context())
        assert "detail" not in caplog.text
