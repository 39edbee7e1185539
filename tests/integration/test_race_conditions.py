# tests/integration/test_race_conditions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
import threading

from objstate.core.builder import MachineBuilder
from objstate.core.registry import MachineRegistry
from objstate.mixin import StateMachineMixin


def test_concurrent_first_reads_materialize_once(caplog):
    registry = MachineRegistry()

    class Parent:
        pass

    class Child(Parent):
        pass

    registry.register(Parent, MachineBuilder().state("a").build())

    barrier = threading.Barrier(8)
    results = []
    results_lock = threading.Lock()

    def reader():
        barrier.wait()
        machines = registry.machines(Child)
        bindings = registry.bindings(Child)
        with results_lock:
            results.append((machines, bindings))

    with caplog.at_level(logging.DEBUG, logger="objstate.core.registry"):
        threads = [threading.Thread(target=reader) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5.0)

    assert len(results) == 8
    parent_binding = registry.bindings(Parent)[0]
    for machines, bindings in results:
        assert list(machines) == ["default"]
        assert len(bindings) == 1
        assert bindings[0] is parent_binding
    inherited = [r for r in caplog.records if r.getMessage().startswith("Child inherits machines")]
    assert len(inherited) == 1


def test_shared_machine_used_from_many_threads():
    class Job(StateMachineMixin):
        _objstate_registry = MachineRegistry()

    with Job.declare_state_machine() as m:
        m.state("queued")
        m.state("running")
        m.state("done")
        m.event("start").transition(from_="queued", to="running")
        m.event("finish").transition(from_="running", to="done")

    jobs = [Job() for _ in range(50)]
    errors = []

    def work(job):
        try:
            assert job.start()
            assert job.finish()
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=work, args=(job,)) for job in jobs]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5.0)

    assert errors == []
    assert all(job.is_done() for job in jobs)
