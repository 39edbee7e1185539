# objstate/core/events.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional, Tuple

from objstate.core.errors import FrozenMachineError
from objstate.core.transitions import Transition
from objstate.interfaces.types import EventName, HookRef, StateName


class Event:
    """
    Represents a named trigger on a machine. An event holds its candidate
    transitions in declaration order and an optional hook that runs once the
    event has successfully moved the instance.
    """

    __slots__ = ("_name", "_transitions", "_success")

    def __init__(self, name: EventName, transitions: Iterable[Transition] = (), success: Optional[HookRef] = None) -> None:
        """
        :param name: A string identifying this event.
        :param transitions: Candidate transitions, evaluated in order.
        :param success: Hook run on the instance after a successful transition.
        """
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_transitions", tuple(transitions))
        object.__setattr__(self, "_success", success)

    def __setattr__(self, key: str, value: Any) -> None:
        raise FrozenMachineError(f"Event '{self._name}' is immutable")

    def __delattr__(self, key: str) -> None:
        raise FrozenMachineError(f"Event '{self._name}' is immutable")

    @property
    def name(self) -> EventName:
        """The name of the event."""
        return self._name

    @property
    def transitions(self) -> Tuple[Transition, ...]:
        return self._transitions

    @property
    def success(self) -> Optional[HookRef]:
        return self._success

    def transitions_from(self, state: StateName) -> Iterator[Transition]:
        """Yield the transitions whose sources include ``state``, in declaration order."""
        return (t for t in self._transitions if t.matches(state))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return (self._name, self._transitions, self._success) == (other._name, other._transitions, other._success)

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return f"Event({self._name!r}, transitions={len(self._transitions)}, success={self._success!r})"
