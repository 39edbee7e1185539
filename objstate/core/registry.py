# objstate/core/registry.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

from objstate.core.errors import DefinitionError, UnknownMachine
from objstate.core.machine import Machine
from objstate.interfaces.protocols import StatePersistence, TransitionListener
from objstate.interfaces.types import MachineName

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MachineOptions:
    """Runtime options a host type supplies when it declares a machine."""

    persistence: Optional[StatePersistence] = None
    listeners: Tuple[TransitionListener, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MachineBinding:
    """A machine together with the options its host type declared it with."""

    machine: Machine
    options: MachineOptions = field(default_factory=MachineOptions)

    @property
    def name(self) -> MachineName:
        return self.machine.name


class MachineRegistry:
    """
    Maps host types to the machines declared on them.

    A type's entry is created the first time it is read or registered to, as a
    shallow copy of the nearest ancestor's entry in method resolution order.
    Machines declared on a parent after a subtype's entry exists do not show
    up on that subtype.

    Threading/Concurrency Guarantees:
    1. Materializing a type's entry happens once, under a lock
    2. Registration is serialized with materialization
    3. Reads of an already materialized entry take no lock
    """

    def __init__(self) -> None:
        self._bindings: Dict[type, Dict[MachineName, MachineBinding]] = {}
        self._declared: Dict[type, Set[MachineName]] = {}
        self._lock = threading.RLock()

    def _materialize(self, host_type: type) -> Dict[MachineName, MachineBinding]:
        bindings = self._bindings.get(host_type)
        if bindings is not None:
            return bindings

        with self._lock:
            # Another thread may have materialized the entry while we waited
            bindings = self._bindings.get(host_type)
            if bindings is not None:
                return bindings

            bindings = {}
            for ancestor in host_type.__mro__[1:]:
                inherited = self._bindings.get(ancestor)
                if inherited is not None:
                    bindings = dict(inherited)
                    logger.debug(
                        "%s inherits machines %s from %s", host_type.__name__, list(bindings), ancestor.__name__
                    )
                    break
            self._bindings[host_type] = bindings
            return bindings

    def register(self, host_type: type, machine: Machine, options: Optional[MachineOptions] = None) -> MachineBinding:
        """
        Register a machine on a host type. A subtype may replace a machine it
        inherited, but a type may declare each machine name only once.

        :raises DefinitionError: If ``host_type`` already declared the name.
        """
        binding = MachineBinding(machine, options or MachineOptions())
        with self._lock:
            bindings = self._materialize(host_type)
            declared = self._declared.setdefault(host_type, set())
            if machine.name in declared:
                raise DefinitionError(f"{host_type.__name__} already declares a state machine named '{machine.name}'")
            declared.add(machine.name)
            bindings[machine.name] = binding

        logger.debug("Registered machine '%s' on %s", machine.name, host_type.__name__)
        return binding

    def binding(self, host_type: type, name: MachineName) -> MachineBinding:
        """
        Return the binding for ``name`` on ``host_type``.

        :raises UnknownMachine: If no such machine is registered or inherited.
        """
        try:
            return self._materialize(host_type)[name]
        except KeyError:
            raise UnknownMachine(f"{host_type.__name__} has no state machine named '{name}'") from None

    def get(self, host_type: type, name: MachineName) -> Machine:
        """Return the machine named ``name`` on ``host_type``."""
        return self.binding(host_type, name).machine

    def machines(self, host_type: type) -> Dict[MachineName, Machine]:
        """Return every machine of ``host_type`` keyed by name, in declaration order."""
        return {name: b.machine for name, b in self._materialize(host_type).items()}

    def bindings(self, host_type: type) -> Tuple[MachineBinding, ...]:
        return tuple(self._materialize(host_type).values())

    def is_materialized(self, host_type: type) -> bool:
        return host_type in self._bindings

    def clear(self, host_type: Optional[type] = None) -> None:
        """Forget one host type's entry, or every entry."""
        with self._lock:
            if host_type is None:
                self._bindings.clear()
                self._declared.clear()
            else:
                self._bindings.pop(host_type, None)
                self._declared.pop(host_type, None)


default_registry = MachineRegistry()
