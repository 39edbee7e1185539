# objstate/core/builder.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Union

from objstate.core.errors import DefinitionError
from objstate.core.events import Event
from objstate.core.machine import Machine
from objstate.core.states import State
from objstate.core.transitions import Transition
from objstate.core.validations import Validator
from objstate.interfaces.types import DEFAULT_MACHINE, EventName, HookRef, Labeler, MachineName, StateName

logger = logging.getLogger(__name__)


def to_name(value: Any) -> str:
    """Normalize a state, event or machine name. Enum members use their value."""
    if isinstance(value, Enum):
        value = value.value
    return str(value)


class EventBuilder:
    """
    Collects the transitions of one event. Returned by MachineBuilder.event;
    usable as a context manager or by chaining ``transition`` calls.
    """

    def __init__(self, owner: "MachineBuilder", name: EventName, success: Optional[HookRef] = None) -> None:
        self._owner = owner
        self._name = name
        self._success = success
        self._transitions: List[Transition] = []

    @property
    def name(self) -> EventName:
        return self._name

    def transition(
        self,
        from_: Union[StateName, Iterable[StateName]],
        to: StateName,
        guard: Optional[HookRef] = None,
        callback: Optional[HookRef] = None,
    ) -> "EventBuilder":
        """
        Append a transition to the event. Transitions are tried in the order
        they are declared.

        :param from_: A source state or an iterable of source states.
        :param to: The destination state.
        :param guard: Optional predicate hook.
        :param callback: Optional hook run with the event's arguments.
        """
        self._owner._check_open()
        if isinstance(from_, (str, Enum)):
            sources = [to_name(from_)]
        else:
            sources = [to_name(s) for s in from_]
        self._transitions.append(Transition(sources, to_name(to), guard=guard, callback=callback))
        return self

    def build(self) -> Event:
        return Event(self._name, self._transitions, success=self._success)

    def __enter__(self) -> "EventBuilder":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


class MachineBuilder:
    """Builds a frozen Machine from state and event declarations.

    Declarations are validated together when ``build`` runs, so a malformed
    machine raises DefinitionError before any instance can use it. Used as a
    context manager, the builder builds on a clean exit and hands the machine
    to ``on_build`` (the registry, when declared through a host type).

    Example::

        with MachineBuilder("door") as m:
            m.state("open", exit="on_leave_open")
            m.state("closed")
            m.event("close").transition(from_="open", to="closed")
        door = m.machine
    """

    def __init__(
        self,
        name: MachineName = DEFAULT_MACHINE,
        initial: Optional[StateName] = None,
        labeler: Optional[Labeler] = None,
        validator: Optional[Validator] = None,
        on_build: Optional[Callable[[Machine], None]] = None,
    ) -> None:
        """
        :param name: Name of the machine.
        :param initial: Explicit initial state; defaults to the first declared state.
        :param labeler: Turns state names into display labels.
        :param validator: Validator applied on build.
        :param on_build: Called with the machine after a successful build.
        """
        self._name = to_name(name)
        self._initial = to_name(initial) if initial is not None else None
        self._labeler = labeler
        self._validator = validator or Validator()
        self._on_build = on_build
        self._states: List[State] = []
        self._events: List[EventBuilder] = []
        self._machine: Optional[Machine] = None
        self._build_lock = threading.Lock()

    @property
    def name(self) -> MachineName:
        return self._name

    @property
    def machine(self) -> Optional[Machine]:
        """The built machine, or None until ``build`` has run."""
        return self._machine

    def _check_open(self) -> None:
        if self._machine is not None:
            raise DefinitionError(f"Machine '{self._name}' has already been built")

    def initial(self, name: StateName) -> "MachineBuilder":
        """Declare the initial state explicitly."""
        self._check_open()
        self._initial = to_name(name)
        return self

    def state(self, name: StateName, enter: Optional[HookRef] = None, exit: Optional[HookRef] = None) -> "MachineBuilder":
        """
        Declare a state. The first declared state is the initial state unless
        one was given explicitly.
        """
        self._check_open()
        self._states.append(State(to_name(name), enter=enter, exit=exit))
        return self

    def event(self, name: EventName, success: Optional[HookRef] = None) -> EventBuilder:
        """Declare an event and return the builder for its transitions."""
        self._check_open()
        builder = EventBuilder(self, to_name(name), success=success)
        self._events.append(builder)
        return builder

    def build(self) -> Machine:
        """
        Validate the declarations and build the machine.

        :raises DefinitionError: If the declaration is malformed or was already built.
        """
        with self._build_lock:
            self._check_open()
            events = [e.build() for e in self._events]
            self._validator.validate_definition(self._name, self._states, events, self._initial)
            machine = Machine(self._name, self._states, events, initial_state=self._initial, labeler=self._labeler)
            if self._on_build is not None:
                self._on_build(machine)
            self._machine = machine

        logger.debug("Built machine %r", machine)
        return machine

    def __enter__(self) -> "MachineBuilder":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.build()
