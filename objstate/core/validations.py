# objstate/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from objstate.core.errors import DefinitionError
from objstate.core.events import Event
from objstate.core.states import State
from objstate.core.transitions import Transition

if TYPE_CHECKING:
    from objstate.core.machine import Machine


class Validator:
    """
    Performs definition-time validation of machines, so that malformed
    declarations fail when the host type is defined rather than when an
    event is first fired.
    """

    def __init__(self) -> None:
        self._rules_engine = _ValidationRulesEngine()

    def validate_definition(
        self,
        machine_name: str,
        states: Sequence[State],
        events: Sequence[Event],
        initial_state: Optional[str] = None,
    ) -> None:
        """
        Check a machine's declared parts before the Machine is built.

        :raises DefinitionError: If validation fails.
        """
        self._rules_engine.validate_states(machine_name, states)
        state_names = {s.name for s in states}
        self._rules_engine.validate_initial_state(machine_name, state_names, initial_state)
        self._rules_engine.validate_events(machine_name, events, state_names)

    def validate_transition(self, machine_name: str, event_name: str, transition: Transition, state_names: Iterable[str]) -> None:
        """
        Check that a transition references declared states and valid hooks.

        :raises DefinitionError: If validation fails.
        """
        self._rules_engine.validate_transition(machine_name, event_name, transition, set(state_names))

    def missing_hooks(self, host_type: type, machine: "Machine") -> List[str]:
        """
        Return the hook method names the machine refers to that ``host_type``
        does not define. Callable hooks are never reported.
        """
        return _DefaultValidationRules.missing_hooks(host_type, machine)


class _ValidationRulesEngine:
    """
    Internal engine applying the validation rules to states, events and
    transitions. Centralizes validation logic for easier maintenance.
    """

    def __init__(self) -> None:
        self._default_rules = _DefaultValidationRules

    def validate_states(self, machine_name: str, states: Sequence[State]) -> None:
        self._default_rules.validate_states(machine_name, states)

    def validate_initial_state(self, machine_name: str, state_names: set, initial_state: Optional[str]) -> None:
        self._default_rules.validate_initial_state(machine_name, state_names, initial_state)

    def validate_events(self, machine_name: str, events: Sequence[Event], state_names: set) -> None:
        self._default_rules.validate_events(machine_name, events, state_names)

    def validate_transition(self, machine_name: str, event_name: str, transition: Transition, state_names: set) -> None:
        self._default_rules.validate_transition(machine_name, event_name, transition, state_names)


class _DefaultValidationRules:
    """
    Built-in rules ensuring basic correctness of a machine definition.
    """

    @staticmethod
    def validate_hook_ref(hook, what: str) -> None:
        if hook is None or callable(hook):
            return
        if not isinstance(hook, str) or not hook:
            raise DefinitionError(f"{what} must be a method name or a callable, got {hook!r}")

    @staticmethod
    def validate_states(machine_name: str, states: Sequence[State]) -> None:
        if not states:
            raise DefinitionError(f"Machine '{machine_name}' declares no states")
        seen = set()
        for state in states:
            if not state.name:
                raise DefinitionError(f"Machine '{machine_name}' has a state with an empty name")
            if state.name in seen:
                raise DefinitionError(f"Machine '{machine_name}' declares state '{state.name}' more than once")
            seen.add(state.name)
            _DefaultValidationRules.validate_hook_ref(state.enter, f"Enter hook of state '{state.name}'")
            _DefaultValidationRules.validate_hook_ref(state.exit, f"Exit hook of state '{state.name}'")

    @staticmethod
    def validate_initial_state(machine_name: str, state_names: set, initial_state: Optional[str]) -> None:
        if initial_state is not None and initial_state not in state_names:
            raise DefinitionError(f"Initial state '{initial_state}' of machine '{machine_name}' is not a declared state")

    @staticmethod
    def validate_events(machine_name: str, events: Sequence[Event], state_names: set) -> None:
        seen = set()
        for event in events:
            if not event.name:
                raise DefinitionError(f"Machine '{machine_name}' has an event with an empty name")
            if event.name in seen:
                raise DefinitionError(f"Machine '{machine_name}' declares event '{event.name}' more than once")
            seen.add(event.name)
            if not event.transitions:
                raise DefinitionError(f"Event '{event.name}' of machine '{machine_name}' has no transitions")
            _DefaultValidationRules.validate_hook_ref(event.success, f"Success hook of event '{event.name}'")
            for transition in event.transitions:
                _DefaultValidationRules.validate_transition(machine_name, event.name, transition, state_names)

    @staticmethod
    def validate_transition(machine_name: str, event_name: str, transition: Transition, state_names: set) -> None:
        if not transition.sources:
            raise DefinitionError(f"A transition of event '{event_name}' has no source states")
        for source in transition.sources:
            if source not in state_names:
                raise DefinitionError(
                    f"Event '{event_name}' of machine '{machine_name}' transitions from undeclared state '{source}'"
                )
        if transition.to not in state_names:
            raise DefinitionError(
                f"Event '{event_name}' of machine '{machine_name}' transitions to undeclared state '{transition.to}'"
            )
        _DefaultValidationRules.validate_hook_ref(transition.guard, f"Guard of event '{event_name}'")
        _DefaultValidationRules.validate_hook_ref(transition.callback, f"Callback of event '{event_name}'")

    @staticmethod
    def missing_hooks(host_type: type, machine: "Machine") -> List[str]:
        refs = []
        for state in machine.states.values():
            refs.extend([state.enter, state.exit])
        for event in machine.events.values():
            refs.append(event.success)
            for transition in event.transitions:
                refs.extend([transition.guard, transition.callback])

        missing = []
        for ref in refs:
            if isinstance(ref, str) and not hasattr(host_type, ref) and ref not in missing:
                missing.append(ref)
        return missing
