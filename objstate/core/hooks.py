# objstate/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, Optional

from objstate.core.errors import UnknownHook
from objstate.interfaces.types import HookRef

logger = logging.getLogger(__name__)


def describe_hook(hook: HookRef) -> str:
    """Return a readable name for a hook reference, for log and error messages."""
    if isinstance(hook, str):
        return hook
    return getattr(hook, "__qualname__", None) or getattr(hook, "__name__", None) or repr(hook)


class HookInvoker:
    """
    Invokes guards and callbacks on a host instance. A hook is either the name
    of a method on the instance or a callable that takes the instance as its
    first argument.
    """

    def __init__(self, instance: Any) -> None:
        """
        :param instance: The host object hooks are run against.
        """
        self._instance = instance

    @property
    def instance(self) -> Any:
        return self._instance

    def invoke(self, hook: HookRef, /, *args: Any, **kwargs: Any) -> Any:
        """
        Call the hook and return its result. Exceptions raised by the hook
        propagate unchanged.

        :raises UnknownHook: If a named hook does not exist on the instance.
        """
        if callable(hook):
            logger.debug("Invoking callable hook %s", describe_hook(hook))
            return hook(self._instance, *args, **kwargs)

        try:
            method = getattr(self._instance, hook)
        except AttributeError:
            method = None
        if method is None or not callable(method):
            raise UnknownHook(f"{type(self._instance).__name__} has no hook method '{hook}'")

        logger.debug("Invoking hook %s.%s", type(self._instance).__name__, hook)
        return method(*args, **kwargs)

    def invoke_optional(self, hook: Optional[HookRef], /, *args: Any, **kwargs: Any) -> Any:
        """Invoke the hook if one is set, otherwise do nothing."""
        if hook is None:
            return None
        return self.invoke(hook, *args, **kwargs)
