# tests/unit/runtime/test_executor.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from unittest.mock import MagicMock, call

import pytest

from objstate.core.builder import MachineBuilder
from objstate.core.errors import EventNotFired, PersistenceVeto, UnknownEvent, UnknownHook
from objstate.core.registry import MachineBinding, MachineOptions
from objstate.runtime.executor import EventExecutor, state_store


class Recorder:
    """Host object recording every hook call on a shared mock so order can be asserted."""

    def __init__(self, tracker=None):
        self.tracker = tracker if tracker is not None else MagicMock()
        self.allow = True

    def leave_open(self):
        self.tracker.exit_open()

    def enter_closed(self):
        self.tracker.enter_closed()

    def on_close(self, *args, **kwargs):
        self.tracker.callback(*args, **kwargs)

    def closed_ok(self):
        self.tracker.success()

    def can_close(self):
        return self.allow


class RecordingPersistence:
    def __init__(self, tracker, accept=True, stored=None):
        self.tracker = tracker
        self.accept = accept
        self.stored = stored

    def read_state(self, instance, machine_name):
        return self.stored

    def write_state(self, instance, machine_name, new_state):
        self.tracker.write(machine_name, new_state)
        return self.accept


@pytest.fixture
def machine():
    with MachineBuilder("door") as m:
        m.state("open", exit="leave_open")
        m.state("closed", enter="enter_closed")
        m.event("close", success="closed_ok").transition(
            from_="open", to="closed", guard="can_close", callback="on_close"
        )
        m.event("reopen").transition(from_="closed", to="open")
    return m.machine


def executor_for(machine, persistence=None, listeners=()):
    return EventExecutor(MachineBinding(machine, MachineOptions(persistence=persistence, listeners=tuple(listeners))))


def test_current_state_defaults_to_initial(machine):
    host = Recorder()
    executor = executor_for(machine)
    assert executor.current_state(host) == "open"
    assert executor.in_state(host, "open")
    assert state_store(host) == {}


def test_fire_runs_hooks_in_order(machine):
    tracker = MagicMock()
    host = Recorder(tracker)
    executor = executor_for(machine, persistence=RecordingPersistence(tracker))

    assert executor.fire(host, "close", ("gently",), {"speed": 2}) is True

    assert tracker.mock_calls == [
        call.exit_open(),
        call.callback("gently", speed=2),
        call.write("door", "closed"),
        call.enter_closed(),
        call.success(),
    ]
    assert executor.current_state(host) == "closed"


def test_state_is_set_before_persistence_write(machine):
    host = Recorder()
    seen = []

    class Peek:
        def read_state(self, instance, machine_name):
            return None

        def write_state(self, instance, machine_name, new_state):
            seen.append(state_store(instance)[machine_name])
            return True

    executor_for(machine, persistence=Peek()).fire(host, "close")
    assert seen == ["closed"]


def test_guard_rejection_leaves_state(machine):
    tracker = MagicMock()
    host = Recorder(tracker)
    host.allow = False
    executor = executor_for(machine)

    assert executor.fire(host, "close") is False
    assert executor.current_state(host) == "open"
    assert tracker.mock_calls == []


def test_strict_guard_rejection_raises(machine):
    host = Recorder()
    host.allow = False
    with pytest.raises(EventNotFired) as info:
        executor_for(machine).fire(host, "close", strict=True)
    assert info.value.outcome == "guard_rejected"
    assert info.value.current_state == "open"
    assert info.value.event == "close"
    assert info.value.machine == "door"


def test_no_matching_transition(machine):
    host = Recorder()
    executor = executor_for(machine)
    assert executor.fire(host, "reopen") is False
    with pytest.raises(EventNotFired) as info:
        executor.fire(host, "reopen", strict=True)
    assert info.value.outcome == "no_matching_transition"


def test_unknown_event_propagates_in_both_modes(machine):
    executor = executor_for(machine)
    with pytest.raises(UnknownEvent):
        executor.fire(Recorder(), "explode")
    with pytest.raises(UnknownEvent):
        executor.fire(Recorder(), "explode", strict=True)


def test_persistence_veto_rolls_back(machine):
    tracker = MagicMock()
    host = Recorder(tracker)
    executor = executor_for(machine, persistence=RecordingPersistence(tracker, accept=False))

    assert executor.fire(host, "close") is False
    assert executor.current_state(host) == "open"
    assert "door" not in state_store(host)
    # exit and callback ran before the veto, enter and success did not
    assert tracker.mock_calls == [call.exit_open(), call.callback(), call.write("door", "closed")]


def test_persistence_veto_restores_previous_memory_value(machine):
    host = Recorder()
    accepting = executor_for(machine)
    accepting.fire(host, "close")
    accepting.fire(host, "reopen")
    assert state_store(host) == {"door": "open"}

    vetoing = executor_for(machine, persistence=RecordingPersistence(MagicMock(), accept=False))
    with pytest.raises(PersistenceVeto) as info:
        vetoing.fire(host, "close", strict=True)
    assert info.value.target == "closed"
    assert state_store(host) == {"door": "open"}


def test_writer_returning_none_accepts(machine):
    tracker = MagicMock()
    host = Recorder()
    executor = executor_for(machine, persistence=RecordingPersistence(tracker, accept=None))
    assert executor.fire(host, "close") is True
    assert executor.current_state(host) == "closed"


def test_reader_value_is_used_and_cached(machine):
    persistence = RecordingPersistence(MagicMock(), stored="closed")
    host = Recorder()
    executor = executor_for(machine, persistence=persistence)
    assert executor.current_state(host) == "closed"
    persistence.stored = "open"
    assert executor.current_state(host) == "closed"


def test_reader_returning_none_falls_back_to_initial(machine):
    executor = executor_for(machine, persistence=RecordingPersistence(MagicMock(), stored=None))
    assert executor.current_state(Recorder()) == "open"


def test_exit_hook_exception_leaves_state_untouched(machine):
    host = Recorder()
    host.leave_open = MagicMock(side_effect=RuntimeError("exit failed"))
    executor = executor_for(machine)
    with pytest.raises(RuntimeError, match="exit failed"):
        executor.fire(host, "close")
    assert executor.current_state(host) == "open"


def test_enter_hook_exception_keeps_new_state(machine):
    tracker = MagicMock()
    host = Recorder(tracker)
    host.enter_closed = MagicMock(side_effect=RuntimeError("enter failed"))
    executor = executor_for(machine)
    with pytest.raises(RuntimeError, match="enter failed"):
        executor.fire(host, "close")
    assert executor.current_state(host) == "closed"
    tracker.success.assert_not_called()


def test_missing_hook_raises_unknown_hook():
    with MachineBuilder() as m:
        m.state("a", exit="gone")
        m.state("b")
        m.event("go").transition(from_="a", to="b")
    with pytest.raises(UnknownHook):
        executor_for(m.machine).fire(Recorder(), "go")


def test_listeners_notified(machine, mock_listener):
    host = Recorder()
    executor = executor_for(machine, listeners=[mock_listener])

    executor.fire(host, "close")
    mock_listener.on_event_fired.assert_called_once_with(host, "door", "close", "open", "closed")

    executor.fire(host, "close")
    mock_listener.on_event_failed.assert_called_once_with(host, "door", "close", "no_matching_transition")


def test_listener_without_methods_is_skipped(machine):
    executor = executor_for(machine, listeners=[object()])
    assert executor.fire(Recorder(), "close") is True


def test_available_events(machine):
    host = Recorder()
    executor = executor_for(machine)
    assert executor.available_events(host) == ["close"]
    executor.fire(host, "close")
    assert executor.available_events(host) == ["reopen"]


def test_logging(machine, caplog):
    host = Recorder()
    executor = executor_for(machine)
    with caplog.at_level(logging.INFO, logger="objstate.runtime.executor"):
        executor.fire(host, "close")
        executor.fire(host, "close")
    messages = [r.getMessage() for r in caplog.records]
    assert "Recorder fired 'close' on machine 'door': open -> closed" in messages
    assert any("could not fire 'close'" in m for m in messages)


def test_callback_keywords_are_never_read_as_options(machine):
    tracker = MagicMock()
    host = Recorder(tracker)
    executor = executor_for(machine)

    kwargs = {"strict": "yes", "instance": "other", "event_name": "reopen", "args": 1, "kwargs": 2}
    assert executor.fire(host, "close", (), kwargs) is True
    tracker.callback.assert_called_once_with(strict="yes", instance="other", event_name="reopen", args=1, kwargs=2)

    assert executor.fire(host, "close", (), {"strict": True}) is False
