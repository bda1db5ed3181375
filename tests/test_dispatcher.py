"""Tests for the crack dispatcher worker pool."""

import asyncio
import threading
import time

import pytest

from app.services.dispatch.dispatcher import (
    CrackDispatcher,
    TaskError,
    TaskErrorKind,
    execute_task,
)
from app.services.engines.vigenere import encrypt_with_key
from app.services.pipeline import CrackMethod, CrackResult, CrackTask


@pytest.fixture
def brute_force_task(english_text):
    return CrackTask(
        encrypt_with_key(english_text, "LEMON"),
        use_brute_force=True,
        known_keys=("KEY", "LEMON"),
        seed=1,
    )


@pytest.fixture
def short_task():
    return CrackTask("LXFOPVEFRNHR")


class TestExecuteTask:
    """Test suite for running a single task in-process."""

    def test_returns_crack_result(self, brute_force_task, dictionary):
        outcome = execute_task(brute_force_task, dictionary)

        assert isinstance(outcome, CrackResult)
        assert outcome.best.key == "LEMON"

    def test_insufficient_data_becomes_task_error(self, short_task, dictionary):
        outcome = execute_task(short_task, dictionary)

        assert isinstance(outcome, TaskError)
        assert outcome.error is True
        assert outcome.kind == TaskErrorKind.INSUFFICIENT_DATA
        assert "too short" in outcome.message

    def test_unexpected_failure_becomes_task_error(self, english_text, dictionary):
        task = CrackTask(english_text, max_key_length=0)
        outcome = execute_task(task, dictionary)

        assert isinstance(outcome, TaskError)
        assert outcome.kind == TaskErrorKind.WORKER_FAILURE
        assert outcome.message.startswith("ValueError")


class TestCrackDispatcher:
    """Test suite for CrackDispatcher."""

    def test_default_worker_count(self):
        assert CrackDispatcher.default_worker_count() >= 4

    def test_explicit_worker_count(self, dictionary):
        assert CrackDispatcher(dictionary, max_workers=2).max_workers == 2

    def test_submit_requires_start(self, dictionary, short_task):
        dispatcher = CrackDispatcher(dictionary, max_workers=1, backend="thread")
        with pytest.raises(RuntimeError):
            dispatcher.submit(short_task)

    def test_thread_backend_runs_tasks(self, dictionary, brute_force_task):
        with CrackDispatcher(dictionary, max_workers=2, backend="thread") as dispatcher:
            assert dispatcher.running
            outcome = dispatcher.result(brute_force_task)

        assert isinstance(outcome, CrackResult)
        assert outcome.method == CrackMethod.BRUTE_FORCE
        assert outcome.best.key == "LEMON"
        assert not dispatcher.running

    def test_failed_task_does_not_affect_pool(self, dictionary, brute_force_task, short_task):
        with CrackDispatcher(dictionary, max_workers=2, backend="thread") as dispatcher:
            failed = dispatcher.result(short_task)
            succeeded = dispatcher.result(brute_force_task)

        assert isinstance(failed, TaskError)
        assert isinstance(succeeded, CrackResult)

        status = dispatcher.status()
        assert status.completed_tasks == 1
        assert status.failed_tasks == 1
        assert status.active_tasks == 0

    def test_concurrent_tasks(self, dictionary, brute_force_task):
        with CrackDispatcher(dictionary, max_workers=2, backend="thread") as dispatcher:
            futures = [dispatcher.submit(brute_force_task) for _ in range(4)]
            outcomes = [future.result() for future in futures]

        assert all(outcome.best.key == "LEMON" for outcome in outcomes)
        assert dispatcher.status().completed_tasks == 4

    def test_async_run(self, dictionary, brute_force_task):
        async def crack(dispatcher):
            return await dispatcher.run(brute_force_task)

        with CrackDispatcher(dictionary, max_workers=1, backend="thread") as dispatcher:
            outcome = asyncio.run(crack(dispatcher))

        assert outcome.best.key == "LEMON"

    def test_status_snapshot(self, dictionary):
        dispatcher = CrackDispatcher(dictionary, max_workers=3, backend="thread")
        assert dispatcher.status().running is False
        assert dispatcher.status().uptime_seconds == 0.0

        dispatcher.start()
        try:
            status = dispatcher.status()
            assert status.running is True
            assert status.workers == 3
            assert status.uptime_seconds >= 0.0
        finally:
            dispatcher.shutdown()

    def test_start_is_idempotent(self, dictionary):
        dispatcher = CrackDispatcher(dictionary, max_workers=1, backend="thread")
        try:
            executor = dispatcher.start()._executor
            assert dispatcher.start()._executor is executor
        finally:
            dispatcher.shutdown()

    def test_process_backend_smoke(self, dictionary, brute_force_task, short_task):
        with CrackDispatcher(dictionary, max_workers=1, backend="process") as dispatcher:
            outcome = dispatcher.result(brute_force_task)
            failed = dispatcher.result(short_task)

        assert isinstance(outcome, CrackResult)
        assert outcome.best.key == "LEMON"
        assert isinstance(failed, TaskError)
        assert failed.kind == TaskErrorKind.INSUFFICIENT_DATA


class _GatedDictionary(dict):
    """Dictionary whose lookups block until released."""

    def __init__(self, words, release: threading.Event):
        super().__init__(words)
        self.release = release

    def get(self, key, default=None):
        self.release.wait(timeout=30)
        return super().get(key, default)


class TestDispatcherQueue:
    """Test suite for running and queued task counts."""

    def test_status_counts_running_and_pending_tasks(self, dictionary, brute_force_task):
        release = threading.Event()
        gated = _GatedDictionary(dictionary, release)

        with CrackDispatcher(gated, max_workers=1, backend="thread") as dispatcher:
            futures = [dispatcher.submit(brute_force_task) for _ in range(3)]
            try:
                deadline = time.monotonic() + 10
                while not futures[0].running() and time.monotonic() < deadline:
                    time.sleep(0.01)
                busy = dispatcher.status()
            finally:
                release.set()
            outcomes = [future.result(timeout=60) for future in futures]

        assert busy.active_tasks == 3
        assert busy.active_workers == 1
        assert busy.pending_tasks == 2
        assert all(outcome.best.key == "LEMON" for outcome in outcomes)

        idle = dispatcher.status()
        assert idle.active_tasks == idle.active_workers == idle.pending_tasks == 0
        assert idle.completed_tasks == 3
