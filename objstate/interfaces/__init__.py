"""
Protocols and type aliases shared by the core and runtime packages.
"""

from .protocols import StatePersistence, TransitionListener

__all__ = ["StatePersistence", "TransitionListener"]
