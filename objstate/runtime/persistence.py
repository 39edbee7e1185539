# objstate/runtime/persistence.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Optional

from objstate.interfaces.types import MachineName, StateName


class AttributePersistence:
    """
    Stores the current state in an attribute of the instance, the way an ORM
    model keeps it in a column. Reads of an unset or None attribute report no
    stored state.
    """

    def __init__(self, attribute: str = "state") -> None:
        """
        :param attribute: Name of the instance attribute holding the state.
        """
        if not attribute:
            raise ValueError("Attribute name must be a non-empty string")
        self._attribute = attribute

    @property
    def attribute(self) -> str:
        return self._attribute

    def read_state(self, instance: Any, machine_name: MachineName) -> Optional[StateName]:
        return getattr(instance, self._attribute, None)

    def write_state(self, instance: Any, machine_name: MachineName, new_state: StateName) -> bool:
        setattr(instance, self._attribute, new_state)
        return True


class MethodPersistence:
    """
    Delegates to reader and writer methods defined on the instance itself:
    ``read_state(machine_name)`` and ``write_state(machine_name, new_state)``.
    An instance lacking one of the methods is treated as having no such hook.
    """

    def __init__(self, reader: str = "read_state", writer: str = "write_state") -> None:
        self._reader = reader
        self._writer = writer

    def read_state(self, instance: Any, machine_name: MachineName) -> Optional[StateName]:
        reader = getattr(instance, self._reader, None)
        if reader is None:
            return None
        return reader(machine_name)

    def write_state(self, instance: Any, machine_name: MachineName, new_state: StateName) -> Optional[bool]:
        writer = getattr(instance, self._writer, None)
        if writer is None:
            return True
        return writer(machine_name, new_state)
