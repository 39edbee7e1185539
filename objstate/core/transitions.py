# objstate/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, FrozenSet, Iterable, Optional, Tuple

from objstate.core.errors import FrozenMachineError
from objstate.core.hooks import HookInvoker
from objstate.interfaces.types import HookRef, StateName


class Transition:
    """
    Defines a possible path from one or more source states to a destination
    state, optionally guarded by a predicate and carrying a callback that runs
    while the instance moves between the two.
    """

    __slots__ = ("_sources", "_source_set", "_to", "_guard", "_callback")

    def __init__(
        self,
        sources: Iterable[StateName],
        to: StateName,
        guard: Optional[HookRef] = None,
        callback: Optional[HookRef] = None,
    ) -> None:
        """
        :param sources: States this transition may be taken from.
        :param to: The destination state.
        :param guard: Predicate evaluated on the instance; a falsy result blocks the transition.
        :param callback: Hook run on the instance with the event's arguments.
        """
        sources = tuple(dict.fromkeys(sources))
        object.__setattr__(self, "_sources", sources)
        object.__setattr__(self, "_source_set", frozenset(sources))
        object.__setattr__(self, "_to", to)
        object.__setattr__(self, "_guard", guard)
        object.__setattr__(self, "_callback", callback)

    def __setattr__(self, key: str, value: Any) -> None:
        raise FrozenMachineError("Transitions are immutable")

    def __delattr__(self, key: str) -> None:
        raise FrozenMachineError("Transitions are immutable")

    @property
    def sources(self) -> Tuple[StateName, ...]:
        """Source states in declaration order."""
        return self._sources

    @property
    def source_set(self) -> FrozenSet[StateName]:
        return self._source_set

    @property
    def to(self) -> StateName:
        """The destination state of the transition."""
        return self._to

    @property
    def guard(self) -> Optional[HookRef]:
        return self._guard

    @property
    def callback(self) -> Optional[HookRef]:
        return self._callback

    def matches(self, state: StateName) -> bool:
        """Return True if the transition can be taken from ``state``."""
        return state in self._source_set

    def evaluate_guard(self, invoker: HookInvoker) -> bool:
        """
        Evaluate the guard against the invoker's instance.

        :return: True if there is no guard or the guard returned a truthy value.
        """
        if self._guard is None:
            return True
        return bool(invoker.invoke(self._guard))

    def execute_callback(self, invoker: HookInvoker, /, *args: Any, **kwargs: Any) -> None:
        """Run the transition callback, forwarding the event's arguments."""
        invoker.invoke_optional(self._callback, *args, **kwargs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transition):
            return NotImplemented
        return (self._source_set, self._to, self._guard, self._callback) == (
            other._source_set,
            other._to,
            other._guard,
            other._callback,
        )

    def __hash__(self) -> int:
        return hash((self._source_set, self._to))

    def __repr__(self) -> str:
        return f"Transition(sources={list(self._sources)!r}, to={self._to!r}, guard={self._guard!r})"
