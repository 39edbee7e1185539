# objstate/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Union

StateName = str
EventName = str
MachineName = str

DEFAULT_MACHINE: MachineName = "default"

# Hooks are either a method name looked up on the instance or a callable
# taking the instance as its first argument.
HookRef = Union[str, Callable[..., Any]]
Labeler = Callable[[StateName], str]
