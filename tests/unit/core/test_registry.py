# tests/unit/core/test_registry.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from objstate.core.builder import MachineBuilder
from objstate.core.errors import DefinitionError, UnknownMachine
from objstate.core.registry import MachineBinding, MachineOptions, MachineRegistry
from objstate.runtime.persistence import AttributePersistence


def make_machine(name="default", *states):
    builder = MachineBuilder(name)
    for state in states or ("a", "b"):
        builder.state(state)
    return builder.build()


class Parent:
    pass


class Child(Parent):
    pass


class GrandChild(Child):
    pass


def test_register_and_get(registry):
    machine = make_machine()
    binding = registry.register(Parent, machine)
    assert isinstance(binding, MachineBinding)
    assert binding.name == "default"
    assert registry.get(Parent, "default") is machine
    assert registry.machines(Parent) == {"default": machine}


def test_unknown_machine(registry):
    with pytest.raises(UnknownMachine, match="Parent has no state machine named 'nope'"):
        registry.get(Parent, "nope")


def test_duplicate_registration_on_same_type(registry):
    registry.register(Parent, make_machine())
    with pytest.raises(DefinitionError):
        registry.register(Parent, make_machine())


def test_machines_keep_declaration_order(registry):
    registry.register(Parent, make_machine("default"))
    registry.register(Parent, make_machine("bar"))
    assert list(registry.machines(Parent)) == ["default", "bar"]


def test_subtype_inherits_on_first_read(registry):
    machine = make_machine()
    registry.register(Parent, machine)
    assert not registry.is_materialized(Child)
    assert registry.get(Child, "default") is machine
    assert registry.is_materialized(Child)


def test_inherits_from_nearest_ancestor(registry):
    registry.register(Parent, make_machine())
    child_machine = make_machine("default", "x", "y")
    registry.register(Child, child_machine)
    assert registry.get(GrandChild, "default") is child_machine


def test_later_parent_declarations_do_not_reach_materialized_subtype(registry):
    registry.register(Parent, make_machine())
    registry.machines(Child)
    registry.register(Parent, make_machine("bar"))
    assert "bar" in registry.machines(Parent)
    assert "bar" not in registry.machines(Child)
    assert "bar" not in registry.machines(GrandChild)


def test_subtype_may_redeclare_inherited_name(registry):
    parent_machine = make_machine()
    registry.register(Parent, parent_machine)
    child_machine = make_machine("default", "c")
    registry.register(Child, child_machine)
    assert registry.get(Parent, "default") is parent_machine
    assert registry.get(Child, "default") is child_machine


def test_options_travel_with_machine(registry):
    persistence = AttributePersistence("status")
    registry.register(Parent, make_machine(), MachineOptions(persistence=persistence))
    assert registry.binding(Child, "default").options.persistence is persistence
    assert registry.bindings(Child)[0].options.listeners == ()


def test_clear(registry):
    registry.register(Parent, make_machine())
    registry.clear(Parent)
    assert registry.machines(Parent) == {}
    registry.register(Parent, make_machine())
    registry.clear()
    assert not registry.is_materialized(Parent)


def test_registries_are_independent():
    first, second = MachineRegistry(), MachineRegistry()
    first.register(Parent, make_machine())
    assert second.machines(Parent) == {}
