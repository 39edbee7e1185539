# objstate/runtime/executor.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from objstate.core.errors import EventNotFired, PersistenceVeto
from objstate.core.hooks import HookInvoker
from objstate.core.machine import Machine
from objstate.core.registry import MachineBinding
from objstate.interfaces.types import EventName, StateName

logger = logging.getLogger(__name__)

_STATES_ATTR = "_objstate_states"
_MISSING = object()


def state_store(instance: Any) -> Dict[str, StateName]:
    """
    Return the per-instance mapping of machine name to in-memory current state,
    creating it on first use.
    """
    return vars(instance).setdefault(_STATES_ATTR, {})


class EventExecutor:
    """
    Runs events of one machine against host instances. For each event the
    executor reads the current state, resolves the transition and then runs,
    in this fixed order: the exit hook of the old state, the transition
    callback, the state update and persistence write, the enter hook of the
    new state and the event's success hook.

    Exceptions raised by hooks propagate and leave the instance wherever the
    sequence had got to. The only rollback is the persistence veto: a writer
    returning False restores the previous in-memory state and fails the event.
    """

    def __init__(self, binding: MachineBinding) -> None:
        """
        :param binding: The machine to run and the options it was declared with.
        """
        self._binding = binding

    @property
    def machine(self) -> Machine:
        return self._binding.machine

    def current_state(self, instance: Any) -> Optional[StateName]:
        """
        Return the instance's current state: the in-memory value if set, else
        the persisted value (which is then kept in memory), else the machine's
        initial state.
        """
        name = self.machine.name
        store = state_store(instance)
        if name in store:
            return store[name]

        persistence = self._binding.options.persistence
        if persistence is not None:
            stored = persistence.read_state(instance, name)
            if stored is not None:
                store[name] = stored
                return stored

        return self.machine.initial_state

    def in_state(self, instance: Any, state: StateName) -> bool:
        return self.current_state(instance) == state

    def available_events(self, instance: Any) -> List[EventName]:
        return self.machine.events_for_state(self.current_state(instance))

    def fire(
        self,
        instance: Any,
        event_name: EventName,
        args: Tuple[Any, ...] = (),
        kwargs: Optional[Dict[str, Any]] = None,
        strict: bool = False,
    ) -> bool:
        """
        Fire an event on the instance.

        :param instance: The host object.
        :param event_name: Name of the event to fire.
        :param args: Positional arguments for the transition callback.
        :param kwargs: Keyword arguments for the transition callback, passed
            through as given; no key is interpreted by the executor.
        :param strict: Raise instead of returning False when the event cannot fire.
        :return: True if the instance transitioned, False otherwise.
        :raises UnknownEvent: If the machine does not declare the event.
        :raises EventNotFired: In strict mode, if no transition was selected.
        :raises PersistenceVeto: In strict mode, if the writer declined the new state.
        """
        machine = self.machine
        invoker = HookInvoker(instance)
        from_state = self.current_state(instance)

        resolution = machine.resolve(event_name, from_state, instance)
        if not resolution.found:
            reason = resolution.outcome.value
            logger.info(
                "%s could not fire '%s' on machine '%s' from '%s': %s",
                type(instance).__name__,
                event_name,
                machine.name,
                from_state,
                reason,
            )
            self._notify_failed(instance, event_name, reason)
            if strict:
                raise EventNotFired(
                    f"Event '{event_name}' cannot fire from state '{from_state}' on machine '{machine.name}' ({reason})",
                    machine=machine.name,
                    event=event_name,
                    current_state=from_state,
                    outcome=reason,
                )
            return False

        transition = resolution.transition
        event = machine.event(event_name)

        invoker.invoke_optional(machine.state(from_state).exit)
        transition.execute_callback(invoker, *args, **(kwargs or {}))

        if not self._persist(instance, transition.to):
            logger.info(
                "Persistence declined state '%s' for %s on machine '%s'; staying in '%s'",
                transition.to,
                type(instance).__name__,
                machine.name,
                from_state,
            )
            self._notify_failed(instance, event_name, "persistence_veto")
            if strict:
                raise PersistenceVeto(
                    f"Persistence declined state '{transition.to}' for event '{event_name}' on machine '{machine.name}'",
                    machine=machine.name,
                    event=event_name,
                    current_state=from_state,
                    target=transition.to,
                )
            return False

        invoker.invoke_optional(machine.state(transition.to).enter)
        invoker.invoke_optional(event.success)

        logger.info(
            "%s fired '%s' on machine '%s': %s -> %s",
            type(instance).__name__,
            event_name,
            machine.name,
            from_state,
            transition.to,
        )
        self._notify_fired(instance, event_name, from_state, transition.to)
        return True

    def _persist(self, instance: Any, new_state: StateName) -> bool:
        """Set the in-memory state and write it through; roll back on a veto."""
        name = self.machine.name
        store = state_store(instance)
        previous = store.get(name, _MISSING)
        store[name] = new_state

        persistence = self._binding.options.persistence
        if persistence is None:
            return True
        if persistence.write_state(instance, name, new_state) is False:
            if previous is _MISSING:
                del store[name]
            else:
                store[name] = previous
            return False
        return True

    def _notify_fired(self, instance: Any, event_name: EventName, from_state: StateName, to_state: StateName) -> None:
        for listener in self._binding.options.listeners:
            if hasattr(listener, "on_event_fired"):
                listener.on_event_fired(instance, self.machine.name, event_name, from_state, to_state)

    def _notify_failed(self, instance: Any, event_name: EventName, reason: str) -> None:
        for listener in self._binding.options.listeners:
            if hasattr(listener, "on_event_failed"):
                listener.on_event_failed(instance, self.machine.name, event_name, reason)
