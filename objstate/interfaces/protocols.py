# objstate/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Optional, Protocol, runtime_checkable

from objstate.interfaces.types import EventName, MachineName, StateName


@runtime_checkable
class StatePersistence(Protocol):
    """
    Persistence protocol a host supplies when declaring a machine.

    Methods:
        read_state(): Returns the stored state for the instance, or None if unset.
        write_state(): Stores the new state; returning False vetoes the transition.

    Runtime Invariants:
    - write_state is called at most once per successful event, after the
      transition callback and before the destination's enter hook.
    - A veto rolls the instance's in-memory state back to its previous value.

    Error Handling:
    - Exceptions raised by either method propagate to the caller of the event.
    """

    def read_state(self, instance: Any, machine_name: MachineName) -> Optional[StateName]:
        """Return the persisted state for ``instance`` or None."""
        ...

    def write_state(self, instance: Any, machine_name: MachineName, new_state: StateName) -> Optional[bool]:
        """Persist ``new_state``. False declines it; True or None accepts it."""
        ...


@runtime_checkable
class TransitionListener(Protocol):
    """
    Listener protocol notified about the outcome of every event on a machine.
    Listeners may implement either method; missing methods are skipped.

    Methods:
        on_event_fired(): Called after the event's success hook.
        on_event_failed(): Called when the event was rejected or vetoed.
    """

    def on_event_fired(
        self, instance: Any, machine_name: MachineName, event: EventName, from_state: StateName, to_state: StateName
    ) -> None:
        ...

    def on_event_failed(self, instance: Any, machine_name: MachineName, event: EventName, reason: str) -> None:
        ...
