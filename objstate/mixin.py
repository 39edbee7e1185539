# objstate/mixin.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Runtime adapter that attaches state machines to host types.

Host types inherit ``StateMachineMixin`` and declare machines after the class
body::

    class Door(StateMachineMixin):
        def on_close(self):
            ...

    with Door.declare_state_machine() as m:
        m.state("open")
        m.state("closed", enter="on_close")
        m.event("close").transition(from_="open", to="closed")

    door = Door()
    door.close()          # True
    door.is_closed()      # True
    door.close_strict()   # raises EventNotFired

Event and predicate names are not generated as methods. They are looked up in
the registry when normal attribute lookup fails, so attributes defined on the
host always win; ``fire`` and ``in_state`` reach any event or state by name.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Optional, Tuple

from objstate.core.builder import MachineBuilder, to_name
from objstate.core.machine import Machine
from objstate.core.registry import MachineOptions, MachineRegistry, default_registry
from objstate.core.validations import Validator
from objstate.interfaces.protocols import StatePersistence, TransitionListener
from objstate.interfaces.types import DEFAULT_MACHINE, EventName, Labeler, MachineName, StateName
from objstate.runtime.executor import EventExecutor

logger = logging.getLogger(__name__)

STRICT_SUFFIX = "_strict"
PREDICATE_PREFIX = "is_"


class StateMachineMixin:
    """
    Gives instances of the host type one or more independently tracked state
    machines. Machines are stored in ``_objstate_registry``; subtypes inherit
    the machines their parent had declared when the subtype is first used.
    """

    _objstate_registry: ClassVar[MachineRegistry] = default_registry

    @classmethod
    def declare_state_machine(
        cls,
        name: MachineName = DEFAULT_MACHINE,
        *,
        initial: Optional[StateName] = None,
        persistence: Optional[StatePersistence] = None,
        listeners: Iterable[TransitionListener] = (),
        labeler: Optional[Labeler] = None,
    ) -> MachineBuilder:
        """
        Start declaring a machine on this type. The machine is registered when
        the returned builder is built, normally on leaving its ``with`` block.

        :param name: Name of the machine; "default" if omitted.
        :param initial: Explicit initial state.
        :param persistence: Reads and writes the current state for an instance.
        :param listeners: Notified after each fired or failed event.
        :param labeler: Turns state names into display labels.
        """
        options = MachineOptions(persistence=persistence, listeners=tuple(listeners))

        def register(machine: Machine) -> None:
            cls._objstate_registry.register(cls, machine, options)
            cls._warn_unresolved_names(machine)

        return MachineBuilder(name, initial=initial, labeler=labeler, on_build=register)

    @classmethod
    def _warn_unresolved_names(cls, machine: Machine) -> None:
        for hook in Validator().missing_hooks(cls, machine):
            logger.warning(
                "%s does not define hook '%s' used by machine '%s'; "
                "an instance attribute of that name must be set before the hook runs",
                cls.__name__,
                hook,
                machine.name,
            )
        for event_name in machine.event_names:
            for generated in (event_name, event_name + STRICT_SUFFIX):
                if hasattr(cls, generated):
                    logger.warning(
                        "Event method '%s' of machine '%s' is shadowed by an attribute of %s; use fire() instead",
                        generated,
                        machine.name,
                        cls.__name__,
                    )
        for state_name in machine.state_names:
            predicate = PREDICATE_PREFIX + state_name
            if hasattr(cls, predicate):
                logger.warning(
                    "State predicate '%s' of machine '%s' is shadowed by an attribute of %s; use in_state() instead",
                    predicate,
                    machine.name,
                    cls.__name__,
                )

    @classmethod
    def state_machine(cls, name: MachineName = DEFAULT_MACHINE) -> Machine:
        """
        Return the machine named ``name``.

        :raises UnknownMachine: If the type has no such machine.
        """
        return cls._objstate_registry.get(cls, to_name(name))

    @classmethod
    def state_machines(cls) -> Dict[MachineName, Machine]:
        return cls._objstate_registry.machines(cls)

    @classmethod
    def states_for_select(cls, name: MachineName = DEFAULT_MACHINE) -> List[Tuple[str, StateName]]:
        return cls.state_machine(name).states_for_select()

    def _executor(self, machine: MachineName) -> EventExecutor:
        return EventExecutor(self._objstate_registry.binding(type(self), to_name(machine)))

    def current_state(self, machine: MachineName = DEFAULT_MACHINE) -> StateName:
        """Return the current state of ``machine`` for this instance."""
        return self._executor(machine).current_state(self)

    def in_state(self, state: StateName, machine: MachineName = DEFAULT_MACHINE) -> bool:
        return self._executor(machine).in_state(self, to_name(state))

    def available_events(self, machine: MachineName = DEFAULT_MACHINE) -> List[EventName]:
        """Return the events that have a transition out of the current state."""
        return self._executor(machine).available_events(self)

    def fire(self, event: EventName, /, *args: Any, machine: MachineName = DEFAULT_MACHINE, **kwargs: Any) -> bool:
        """
        Fire ``event`` and report whether the instance transitioned. Extra
        arguments are passed to the transition callback. ``machine`` selects
        the machine; the generated ``<event>()`` methods forward every keyword,
        ``machine`` included.

        :raises UnknownMachine: If the machine is not declared.
        :raises UnknownEvent: If the event is not declared on the machine.
        """
        return self._trigger(machine, event, False, args, kwargs)

    def fire_strict(
        self, event: EventName, /, *args: Any, machine: MachineName = DEFAULT_MACHINE, **kwargs: Any
    ) -> None:
        """
        Fire ``event``, raising if the instance could not transition.

        :raises EventNotFired: If no transition matched or every guard rejected it.
        :raises PersistenceVeto: If persistence declined the new state.
        """
        self._trigger(machine, event, True, args, kwargs)

    def _trigger(
        self, machine: MachineName, event: EventName, strict: bool, args: Tuple[Any, ...], kwargs: Dict[str, Any]
    ) -> bool:
        return self._executor(machine).fire(self, to_name(event), args, kwargs, strict=strict)

    def _event_method(self, machine: MachineName, event: EventName, strict: bool) -> Callable[..., Any]:
        def fire_event(*args: Any, **kwargs: Any) -> Any:
            fired = self._trigger(machine, event, strict, args, kwargs)
            return None if strict else fired

        fire_event.__name__ = event + STRICT_SUFFIX if strict else event
        return fire_event

    def _dispatch(self, attr: str) -> Optional[Callable[..., Any]]:
        machines = self._objstate_registry.machines(type(self))
        for machine in machines.values():
            if machine.has_event(attr):
                return self._event_method(machine.name, attr, False)
        if attr.endswith(STRICT_SUFFIX):
            event = attr[: -len(STRICT_SUFFIX)]
            for machine in machines.values():
                if machine.has_event(event):
                    return self._event_method(machine.name, event, True)
        if attr.startswith(PREDICATE_PREFIX):
            state = attr[len(PREDICATE_PREFIX):]
            for machine in machines.values():
                if machine.has_state(state):
                    return functools.partial(self.in_state, state, machine=machine.name)
        return None

    def __getattr__(self, attr: str) -> Any:
        if attr.startswith("_"):
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{attr}'")
        method = self._dispatch(attr)
        if method is None:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{attr}'")
        return method
