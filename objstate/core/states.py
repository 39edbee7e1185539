# objstate/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Optional

from objstate.core.errors import FrozenMachineError
from objstate.interfaces.types import HookRef, StateName


class State:
    """
    Represents a named state in a machine along with the hooks run when an
    instance enters or leaves it.

    States are immutable once created; the builder creates them and the
    machine shares them between every instance of the host type.
    """

    __slots__ = ("_name", "_enter", "_exit")

    def __init__(self, name: StateName, enter: Optional[HookRef] = None, exit: Optional[HookRef] = None) -> None:
        """
        :param name: Name identifying this state within its machine.
        :param enter: Hook run on the instance after it enters this state.
        :param exit: Hook run on the instance before it leaves this state.
        """
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_enter", enter)
        object.__setattr__(self, "_exit", exit)

    def __setattr__(self, key: str, value: Any) -> None:
        raise FrozenMachineError(f"State '{self._name}' is immutable")

    def __delattr__(self, key: str) -> None:
        raise FrozenMachineError(f"State '{self._name}' is immutable")

    @property
    def name(self) -> StateName:
        """The name of the state."""
        return self._name

    @property
    def enter(self) -> Optional[HookRef]:
        """Hook invoked when entering the state, if any."""
        return self._enter

    @property
    def exit(self) -> Optional[HookRef]:
        """Hook invoked when exiting the state, if any."""
        return self._exit

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return (self._name, self._enter, self._exit) == (other._name, other._enter, other._exit)

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return f"State({self._name!r}, enter={self._enter!r}, exit={self._exit!r})"
