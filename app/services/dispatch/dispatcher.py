"""
Crack dispatcher - a fixed-size worker pool for crack tasks.

Each submitted CrackTask runs the full orchestrator strategy on one worker.
Tasks queue FIFO when every worker is busy. A task that fails is reported
as a TaskError value and never takes the pool down; if a worker process
dies the pool is rebuilt for the tasks that follow.
"""

import asyncio
import logging
import os
import random
import threading
import time
from concurrent.futures import (
    BrokenExecutor,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
)
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Literal, Union

from app.core.exceptions import InsufficientDataError, InvalidInputError
from app.core.logging import configure_logging
from app.services.analysis.words import Dictionary
from app.services.pipeline.orchestrator import CrackOrchestrator, CrackResult, CrackTask

logger = logging.getLogger(__name__)


class TaskErrorKind(str, Enum):
    """Why a task produced no result."""

    INVALID_INPUT = "invalid_input"
    INSUFFICIENT_DATA = "insufficient_data"
    WORKER_FAILURE = "worker_failure"


@dataclass(frozen=True)
class TaskError:
    """Structured error returned in place of a CrackResult."""

    message: str
    kind: TaskErrorKind = TaskErrorKind.WORKER_FAILURE
    error: bool = True


TaskOutcome = Union[CrackResult, TaskError]


@dataclass(frozen=True)
class DispatcherStatus:
    """Snapshot of dispatcher counters."""

    running: bool
    workers: int
    active_tasks: int
    active_workers: int
    pending_tasks: int
    completed_tasks: int
    failed_tasks: int
    uptime_seconds: float


# Dictionary snapshot installed once per worker process
_worker_dictionary: Dictionary = MappingProxyType({})


def _worker_initializer(dictionary: dict[str, float], log_level: int) -> None:
    global _worker_dictionary
    _worker_dictionary = MappingProxyType(dictionary)
    configure_logging(log_level)


def execute_task(task: CrackTask, dictionary: Dictionary) -> TaskOutcome:
    """Run one crack task to completion, converting failures to TaskError."""
    try:
        orchestrator = CrackOrchestrator(rng=random.Random(task.seed))
        return orchestrator.crack(task, dictionary)
    except InsufficientDataError as e:
        return TaskError(e.message, TaskErrorKind.INSUFFICIENT_DATA)
    except InvalidInputError as e:
        return TaskError(e.message, TaskErrorKind.INVALID_INPUT)
    except Exception as e:
        logger.exception("Crack task failed")
        return TaskError(f"{type(e).__name__}: {e}", TaskErrorKind.WORKER_FAILURE)


def run_crack_task(task: CrackTask) -> TaskOutcome:
    """Process-pool entry point using the worker's dictionary snapshot."""
    return execute_task(task, _worker_dictionary)


class CrackDispatcher:
    """
    Owns the worker pool and its task counters.

    Lifecycle: construct, start(), submit()/run() tasks, shutdown(). Also
    usable as a context manager.
    """

    def __init__(
        self,
        dictionary: Dictionary,
        max_workers: int | None = None,
        backend: Literal["process", "thread"] = "process",
    ):
        self.dictionary = dictionary
        self.max_workers = max_workers or self.default_worker_count()
        self.backend = backend

        self._executor: Executor | None = None
        self._lock = threading.Lock()
        self._inflight: set["Future[TaskOutcome]"] = set()
        self._completed = 0
        self._failed = 0
        self._started_at: float | None = None

    @staticmethod
    def default_worker_count() -> int:
        """One less than the CPU count, but never fewer than four."""
        return max(4, (os.cpu_count() or 1) - 1)

    def start(self) -> "CrackDispatcher":
        with self._lock:
            if self._executor is None:
                self._executor = self._create_executor()
                self._started_at = time.monotonic()
                logger.info(
                    "Started %s worker pool with %d workers",
                    self.backend,
                    self.max_workers,
                )
        return self

    def shutdown(self, wait: bool = True) -> None:
        """Release the worker pool; queued tasks are cancelled."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait, cancel_futures=True)
            logger.info("Worker pool shut down")

    def __enter__(self) -> "CrackDispatcher":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    @property
    def running(self) -> bool:
        return self._executor is not None

    def submit(self, task: CrackTask) -> "Future[TaskOutcome]":
        """Queue a task and return its future."""
        future, _ = self._dispatch(task)
        return future

    def result(self, task: CrackTask) -> TaskOutcome:
        """Submit a task and block until its outcome is available."""
        future, executor = self._dispatch(task)
        try:
            return future.result()
        except BrokenExecutor as e:
            return self._broken_pool_error(executor, e)

    async def run(self, task: CrackTask) -> TaskOutcome:
        """Submit a task and await its outcome without blocking the loop."""
        future, executor = self._dispatch(task)
        try:
            return await asyncio.wrap_future(future)
        except BrokenExecutor as e:
            return self._broken_pool_error(executor, e)

    def status(self) -> DispatcherStatus:
        """
        Snapshot the counters.

        Active tasks are submitted but not finished; of those, tasks a worker
        has picked up count as active workers and the rest as pending.
        """
        with self._lock:
            running = sum(1 for future in self._inflight if future.running())
            uptime = time.monotonic() - self._started_at if self._started_at else 0.0
            return DispatcherStatus(
                running=self._executor is not None,
                workers=self.max_workers,
                active_tasks=len(self._inflight),
                active_workers=running,
                pending_tasks=len(self._inflight) - running,
                completed_tasks=self._completed,
                failed_tasks=self._failed,
                uptime_seconds=uptime,
            )

    def _dispatch(self, task: CrackTask) -> tuple["Future[TaskOutcome]", Executor]:
        with self._lock:
            if self._executor is None:
                raise RuntimeError("Dispatcher is not running")
            executor = self._executor

        logger.info("Submitting crack task (%d letters)", len(task.ciphertext))
        try:
            try:
                future = self._submit_to(executor, task)
            except BrokenExecutor:
                executor = self._rebuild(executor)
                future = self._submit_to(executor, task)
        except Exception:
            with self._lock:
                self._failed += 1
            raise

        with self._lock:
            self._inflight.add(future)
        future.add_done_callback(self._on_done)
        return future, executor

    def _create_executor(self) -> Executor:
        if self.backend == "thread":
            return ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="crack-worker",
            )
        return ProcessPoolExecutor(
            max_workers=self.max_workers,
            initializer=_worker_initializer,
            initargs=(dict(self.dictionary), logging.getLogger().level),
        )

    def _submit_to(self, executor: Executor, task: CrackTask) -> "Future[TaskOutcome]":
        if self.backend == "thread":
            return executor.submit(execute_task, task, self.dictionary)
        return executor.submit(run_crack_task, task)

    def _rebuild(self, broken: Executor) -> Executor:
        with self._lock:
            if self._executor is broken:
                logger.error("Worker pool is broken, starting a new one")
                self._executor = self._create_executor()
            if self._executor is None:
                raise RuntimeError("Dispatcher is not running")
            executor = self._executor
        broken.shutdown(wait=False, cancel_futures=True)
        return executor

    def _broken_pool_error(self, executor: Executor, error: BaseException) -> TaskError:
        if self.running:
            self._rebuild(executor)
        return TaskError(f"Worker pool failure: {error}", TaskErrorKind.WORKER_FAILURE)

    def _on_done(self, future: "Future[TaskOutcome]") -> None:
        failed = future.cancelled() or future.exception() is not None
        if not failed and isinstance(future.result(), TaskError):
            failed = True

        with self._lock:
            self._inflight.discard(future)
            if failed:
                self._failed += 1
            else:
                self._completed += 1

        if failed:
            logger.warning("Crack task finished with an error")
        else:
            logger.info("Crack task completed")
