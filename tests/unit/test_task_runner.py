"""
Unit tests for the task runners
"""
import threading
import time

from PyQt6.QtCore import QCoreApplication

from core.task_runner import ImmediateTaskRunner, ThreadedTaskRunner


def _wait_for(condition, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not condition() and time.monotonic() < deadline:
        QCoreApplication.processEvents()
        time.sleep(0.01)
    return condition()


def test_immediate_runner_is_synchronous():
    results = []
    ImmediateTaskRunner().submit(lambda: 42, results.append)
    assert results == [42]


def test_threaded_runner_delivers_on_owner_thread():
    runner = ThreadedTaskRunner()
    main_thread = threading.current_thread()
    delivered = []

    def work():
        return threading.current_thread() is not main_thread

    runner.submit(work, lambda ran_elsewhere: delivered.append(
        (ran_elsewhere, threading.current_thread() is main_thread)))

    assert _wait_for(lambda: delivered)
    assert delivered == [(True, True)]
    assert _wait_for(lambda: runner.active_count() == 0)


def test_threaded_results_arrive_in_completion_order():
    runner = ThreadedTaskRunner()
    release = threading.Event()
    order = []

    runner.submit(lambda: release.wait(5) and "slow", order.append)
    runner.submit(lambda: "fast", order.append)
    assert _wait_for(lambda: order == ["fast"])
    release.set()
    assert _wait_for(lambda: order == ["fast", "slow"])
