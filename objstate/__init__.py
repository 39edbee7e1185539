"""objstate: finite state machines attached to plain Python objects

This package lets a host type declare one or more named state machines and
gives each instance of the type its own current state per machine.

Responsibilities:
    - Declarative machine definition with definition-time validation
    - Transition resolution with guards, in declaration order
    - Ordered lifecycle hooks: exit, transition callback, persist, enter, success
    - Inheritance of machine definitions from a base type to its subtypes
    - Optional persistence of the current state through a host-supplied hook

Interactions:
    - Host types through StateMachineMixin
    - Storage layers through the StatePersistence protocol
    - Logging system for diagnostics

Cross-cutting Concerns:
    Thread Safety:
        - Built machines are immutable and safe to share between threads
        - Registry inheritance happens once per type under a lock
        - Event invocation on a single instance must be serialized by the caller

    Error Handling:
        - Definition errors raised when a machine is declared
        - Rejected events reported as False or as EventNotFired
        - Hook exceptions propagate unchanged

    Logging:
        - Module level loggers under the "objstate" namespace
        - No handlers installed by the library
"""

from objstate.core.builder import EventBuilder, MachineBuilder
from objstate.core.errors import (
    DefinitionError,
    EventNotFired,
    FrozenMachineError,
    ObjstateError,
    PersistenceVeto,
    TransitionRejected,
    UnknownEvent,
    UnknownHook,
    UnknownMachine,
    UnknownState,
)
from objstate.core.events import Event
from objstate.core.machine import Machine, Outcome, Resolution
from objstate.core.registry import MachineBinding, MachineOptions, MachineRegistry, default_registry
from objstate.core.states import State
from objstate.core.transitions import Transition
from objstate.interfaces.protocols import StatePersistence, TransitionListener
from objstate.interfaces.types import DEFAULT_MACHINE
from objstate.mixin import StateMachineMixin
from objstate.runtime.executor import EventExecutor
from objstate.runtime.persistence import AttributePersistence, MethodPersistence

__version__ = "0.1.0"

__all__ = [
    "AttributePersistence",
    "DEFAULT_MACHINE",
    "DefinitionError",
    "Event",
    "EventBuilder",
    "EventExecutor",
    "EventNotFired",
    "FrozenMachineError",
    "Machine",
    "MachineBinding",
    "MachineBuilder",
    "MachineOptions",
    "MachineRegistry",
    "MethodPersistence",
    "ObjstateError",
    "Outcome",
    "PersistenceVeto",
    "Resolution",
    "State",
    "StateMachineMixin",
    "StatePersistence",
    "Transition",
    "TransitionListener",
    "TransitionRejected",
    "UnknownEvent",
    "UnknownHook",
    "UnknownMachine",
    "UnknownState",
    "default_registry",
]
