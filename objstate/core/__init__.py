"""
Core package providing machine definitions and transition resolution.

Architecture:
- States, events and transitions form an immutable machine definition
- The builder validates declarations and produces frozen machines
- The registry maps host types to their machines, with inheritance

Design Patterns:
- Builder Pattern for machine declaration
- Registry Pattern for per-type machine lookup
- Strategy Pattern for guard and hook references
"""

from .errors import DefinitionError, EventNotFired, ObjstateError, TransitionRejected
from .states import State
from .events import Event
from .transitions import Transition
from .machine import Machine, Outcome, Resolution
from .builder import EventBuilder, MachineBuilder
from .registry import MachineBinding, MachineOptions, MachineRegistry, default_registry

__all__ = [
    "DefinitionError",
    "EventNotFired",
    "ObjstateError",
    "TransitionRejected",
    "State",
    "Event",
    "Transition",
    "Machine",
    "Outcome",
    "Resolution",
    "EventBuilder",
    "MachineBuilder",
    "MachineBinding",
    "MachineOptions",
    "MachineRegistry",
    "default_registry",
]
