# objstate/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Optional


class ObjstateError(Exception):
    """
    Base exception class for errors raised by the state machine engine.
    """


class DefinitionError(ObjstateError):
    """
    Raised when a machine declaration is malformed: an undeclared state is
    referenced, a name is declared twice, or an event has no transitions.
    """


class FrozenMachineError(DefinitionError):
    """
    Raised when code attempts to mutate a machine after it has been built.
    """


class UnknownMachine(ObjstateError, LookupError):
    """
    Raised when a requested machine name is not registered for a host type.
    """


class UnknownEvent(ObjstateError, LookupError):
    """
    Raised when a requested event name is not declared on a machine.
    """


class UnknownState(ObjstateError, LookupError):
    """
    Raised when a requested state name is not declared on a machine.
    """


class UnknownHook(ObjstateError, AttributeError):
    """
    Raised when a guard or callback refers to a method the instance does not have.
    """


class TransitionRejected(ObjstateError):
    """
    An event could not move the instance out of its current state.

    :param machine: Name of the machine the event was fired on.
    :param event: Name of the fired event.
    :param current_state: State the instance was in when the event fired.
    """

    def __init__(self, message: str = "", machine: Optional[str] = None,
                 event: Optional[str] = None, current_state: Optional[str] = None) -> None:
        super().__init__(message)
        self.machine = machine
        self.event = event
        self.current_state = current_state


class EventNotFired(TransitionRejected):
    """
    Raised by strict event calls when no transition matches the current state
    or every matching transition was rejected by its guard.
    """

    def __init__(self, message: str = "", machine: Optional[str] = None, event: Optional[str] = None,
                 current_state: Optional[str] = None, outcome: Optional[str] = None) -> None:
        super().__init__(message, machine=machine, event=event, current_state=current_state)
        self.outcome = outcome


class PersistenceVeto(TransitionRejected):
    """
    Raised by strict event calls when the persistence writer declined the new
    state. The in-memory state has already been rolled back when this is raised.
    """

    def __init__(self, message: str = "", machine: Optional[str] = None, event: Optional[str] = None,
                 current_state: Optional[str] = None, target: Optional[str] = None) -> None:
        super().__init__(message, machine=machine, event=event, current_state=current_state)
        self.target = target
