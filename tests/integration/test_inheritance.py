# tests/integration/test_inheritance.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details


def test_subclass_has_same_states(subject_class, subject_subclass):
    assert subject_class.state_machine().states == subject_subclass.state_machine().states


def test_subclass_has_same_events(subject_class, subject_subclass):
    assert subject_class.state_machine().events == subject_subclass.state_machine().events


def test_subclass_has_every_machine(subject_class, subject_subclass):
    for name, machine in subject_class.state_machines().items():
        assert subject_subclass.state_machine(name) == machine


def test_subclass_instances_fire_events(subject_subclass):
    sub = subject_subclass()
    assert sub.is_open()
    assert sub.close() is True
    assert sub.calls == ["exit", "enter", "success_callback"]


def test_subclass_can_add_its_own_machine(subject_class, subject_subclass):
    with subject_subclass.declare_state_machine("audit") as m:
        m.state("unchecked")
        m.state("checked")
        m.event("check").transition(from_="unchecked", to="checked")

    assert "audit" in subject_subclass.state_machines()
    assert "audit" not in subject_class.state_machines()
    assert subject_subclass().current_state("audit") == "unchecked"


def test_parent_declarations_after_subclass_use_are_not_inherited(subject_class, subject_subclass):
    subject_subclass.state_machines()

    with subject_class.declare_state_machine("late") as m:
        m.state("x")

    assert "late" in subject_class.state_machines()
    assert "late" not in subject_subclass.state_machines()


def test_subclass_override_of_hooks(subject_class):
    class Quieter(subject_class):
        def success_callback(self):
            self.calls.append("quiet success")

    q = Quieter()
    q.close()
    assert q.calls == ["exit", "enter", "quiet success"]
