# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from objstate.core.registry import MachineRegistry
from objstate.mixin import StateMachineMixin


@pytest.fixture
def registry():
    """A private registry so host types declared in one test never leak into another."""
    return MachineRegistry()


@pytest.fixture
def host_base(registry):
    """A mixin base bound to the private registry."""

    class Host(StateMachineMixin):
        _objstate_registry = registry

    return Host


@pytest.fixture
def subject_class(host_base):
    """
    The door-like subject: a default machine with open/closed states and a
    second machine "bar" with read/ended. Every hook records its call in
    ``self.calls`` so tests can check ordering.
    """

    class Subject(host_base):
        def __init__(self):
            self.calls = []

        def always_false(self):
            self.calls.append("always_false")
            return False

        def success_callback(self):
            self.calls.append("success_callback")

        def enter(self):
            self.calls.append("enter")

        def exit(self):
            self.calls.append("exit")

    with Subject.declare_state_machine() as m:
        m.state("open", exit="exit")
        m.state("closed", enter="enter")
        with m.event("close", success="success_callback") as e:
            e.transition(from_=["open"], to="closed")
        m.event("null").transition(from_=["open"], to="closed", guard="always_false")

    with Subject.declare_state_machine("bar") as m:
        m.state("read")
        m.state("ended")
        m.event("foo").transition(from_=["read"], to="ended")

    return Subject


@pytest.fixture
def subject(subject_class):
    return subject_class()


@pytest.fixture
def subject_subclass(subject_class):
    class SubjectSubclass(subject_class):
        pass

    return SubjectSubclass


@pytest.fixture
def mock_listener():
    """A listener mock exposing both notification methods."""
    listener = MagicMock()
    listener.on_event_fired = MagicMock()
    listener.on_event_failed = MagicMock()
    return listener


@pytest.fixture
def error_classes():
    """Provides a tuple of error classes for quick reference."""
    from objstate.core.errors import DefinitionError, ObjstateError, TransitionRejected, UnknownEvent

    return (ObjstateError, DefinitionError, TransitionRejected, UnknownEvent)
