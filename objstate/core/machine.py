# objstate/core/machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from objstate.core.errors import FrozenMachineError, UnknownEvent, UnknownState
from objstate.core.events import Event
from objstate.core.hooks import HookInvoker
from objstate.core.states import State
from objstate.core.transitions import Transition
from objstate.interfaces.types import EventName, Labeler, MachineName, StateName

logger = logging.getLogger(__name__)


def humanize(name: StateName) -> str:
    """Turn a state name into a display label: ``"in_progress"`` becomes ``"In progress"``."""
    text = str(name).replace("_", " ").strip()
    return text[:1].upper() + text[1:]


class Outcome(Enum):
    """Result of resolving an event against the current state."""

    SELECTED = "selected"
    NO_MATCHING_TRANSITION = "no_matching_transition"
    GUARD_REJECTED = "guard_rejected"


class Resolution(NamedTuple):
    transition: Optional[Transition]
    outcome: Outcome

    @property
    def found(self) -> bool:
        return self.outcome is Outcome.SELECTED


class Machine:
    """
    Immutable definition of the states and events for one named state-tracking
    concern on a host type. A single Machine is shared by every instance of the
    type (and by subtypes that inherit it), so nothing here holds per-instance
    data; the current state is passed in by the caller.
    """

    __slots__ = ("_name", "_states", "_events", "_initial_state", "_labeler")

    def __init__(
        self,
        name: MachineName,
        states: Iterable[State],
        events: Iterable[Event],
        initial_state: Optional[StateName] = None,
        labeler: Optional[Labeler] = None,
    ) -> None:
        """
        Machines are normally produced by MachineBuilder, which validates the
        definition first. Constructing one directly performs no validation.

        :param name: Name of the machine on its host type.
        :param states: States in declaration order.
        :param events: Events in declaration order.
        :param initial_state: Starting state; defaults to the first state.
        :param labeler: Turns state names into display labels.
        """
        states = tuple(states)
        if initial_state is None and states:
            initial_state = states[0].name
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_states", MappingProxyType({s.name: s for s in states}))
        object.__setattr__(self, "_events", MappingProxyType({e.name: e for e in events}))
        object.__setattr__(self, "_initial_state", initial_state)
        object.__setattr__(self, "_labeler", labeler or humanize)

    def __setattr__(self, key: str, value: Any) -> None:
        raise FrozenMachineError(f"Machine '{self._name}' is frozen and cannot be modified")

    def __delattr__(self, key: str) -> None:
        raise FrozenMachineError(f"Machine '{self._name}' is frozen and cannot be modified")

    @property
    def name(self) -> MachineName:
        return self._name

    @property
    def states(self) -> Mapping[StateName, State]:
        """Read-only mapping of state name to State, in declaration order."""
        return self._states

    @property
    def events(self) -> Mapping[EventName, Event]:
        """Read-only mapping of event name to Event, in declaration order."""
        return self._events

    @property
    def initial_state(self) -> Optional[StateName]:
        return self._initial_state

    @property
    def state_names(self) -> Tuple[StateName, ...]:
        return tuple(self._states)

    @property
    def event_names(self) -> Tuple[EventName, ...]:
        return tuple(self._events)

    def state(self, name: StateName) -> State:
        """
        Look up a state by name.

        :raises UnknownState: If the machine does not declare the state.
        """
        try:
            return self._states[name]
        except KeyError:
            raise UnknownState(f"Machine '{self._name}' has no state '{name}'") from None

    def event(self, name: EventName) -> Event:
        """
        Look up an event by name.

        :raises UnknownEvent: If the machine does not declare the event.
        """
        try:
            return self._events[name]
        except KeyError:
            raise UnknownEvent(f"Machine '{self._name}' has no event '{name}'") from None

    def has_state(self, name: StateName) -> bool:
        return name in self._states

    def has_event(self, name: EventName) -> bool:
        return name in self._events

    def resolve(self, event_name: EventName, current_state: StateName, instance: Any) -> Resolution:
        """
        Select the transition ``event_name`` takes from ``current_state``.

        Transitions are scanned in declaration order and the first one whose
        sources include the current state and whose guard passes is selected.
        Guards run against ``instance`` and may raise; such errors propagate.

        :raises UnknownEvent: If the machine does not declare the event.
        """
        event = self.event(event_name)
        invoker = HookInvoker(instance)
        matched = False
        for transition in event.transitions_from(current_state):
            matched = True
            if transition.evaluate_guard(invoker):
                logger.debug(
                    "Machine '%s' resolved event '%s' from '%s' to '%s'",
                    self._name,
                    event_name,
                    current_state,
                    transition.to,
                )
                return Resolution(transition, Outcome.SELECTED)

        outcome = Outcome.GUARD_REJECTED if matched else Outcome.NO_MATCHING_TRANSITION
        logger.debug("Machine '%s' could not fire '%s' from '%s': %s", self._name, event_name, current_state, outcome.value)
        return Resolution(None, outcome)

    def events_for_state(self, state: StateName) -> List[EventName]:
        """Return the events with at least one transition out of ``state``, ignoring guards."""
        return [e.name for e in self._events.values() if any(t.matches(state) for t in e.transitions)]

    def states_for_select(self) -> List[Tuple[str, StateName]]:
        """Return ``(label, name)`` pairs for every state, in declaration order."""
        return [(self._labeler(name), name) for name in self._states]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Machine):
            return NotImplemented
        return (
            self._name == other._name
            and dict(self._states) == dict(other._states)
            and dict(self._events) == dict(other._events)
            and self._initial_state == other._initial_state
        )

    def __hash__(self) -> int:
        return hash((self._name, tuple(self._states), tuple(self._events)))

    def __repr__(self) -> str:
        return (
            f"Machine({self._name!r}, states={list(self._states)!r}, "
            f"events={list(self._events)!r}, initial_state={self._initial_state!r})"
        )
