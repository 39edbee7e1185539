"""
Runtime package running events against host instances.

Architecture:
- Executes the event invocation protocol for one machine
- Keeps per-instance current state in memory
- Writes state through optional persistence hooks
"""

from .executor import EventExecutor
from .persistence import AttributePersistence, MethodPersistence

__all__ = ["EventExecutor", "AttributePersistence", "MethodPersistence"]
