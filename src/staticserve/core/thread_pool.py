"""
=============================================================================
THREAD POOL
=============================================================================

Runs connection handlers on worker threads so the accept loop never
waits for a client to be served.

=============================================================================
WHY A POOL AND NOT ONE THREAD PER CONNECTION?
=============================================================================

    Acceptor thread                     Worker threads
    ───────────────                     ──────────────
    accept() ──► submit(conn) ──┐
    accept() ──► submit(conn) ──┼──► [ task queue ] ──► Worker-0 handles
    accept() ──► submit(conn) ──┘                   ──► Worker-1 handles
                                                    ──► Worker-2 idle

A bare thread per connection is "fire and forget": nobody knows how many
handlers are still running, so nobody can wait for them at shutdown.
The pool keeps track of its workers and of queued work:

    - submit() returns immediately; the acceptor keeps accepting
    - a handler that raises is logged and its worker carries on
    - shutdown() drains the queue, then stops every worker

=============================================================================
POISON PILL SHUTDOWN
=============================================================================

Workers block on queue.get(). To stop them, shutdown() puts one None
(the "poison pill") per worker on the queue. A worker that pulls None
exits its loop.

=============================================================================
"""

import threading
import queue
import time
import logging
from typing import Callable, Optional, Any
from dataclasses import dataclass, field
from enum import Enum


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    IDLE = "idle"        # Waiting for task
    BUSY = "busy"        # Executing task
    STOPPED = "stopped"  # Thread exited


@dataclass
class Task:
    """
    A deferred function call: "call func(*args, **kwargs) later".

    Attributes:
        func: The function to execute.
        args: Positional arguments for the function.
        kwargs: Keyword arguments for the function.
        submitted_at: Time the task was queued (for latency logging).
    """

    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.time)


class Worker(threading.Thread):
    """
    Worker thread that processes tasks from the shared queue.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        Worker Loop                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Wait for task from queue (with idle timeout)                    │
    │   2. None? → poison pill, exit                                       │
    │   3. Run the task, logging any exception (worker survives)           │
    │   4. task_done(), back to 1                                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘
    """

    def __init__(
        self,
        task_queue: queue.Queue,
        worker_id: int,
        idle_timeout: float = 60.0
    ):
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

        self.task_queue = task_queue
        self.worker_id = worker_id
        self.idle_timeout = idle_timeout

        self.state = WorkerState.IDLE
        self._shutdown = threading.Event()

        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while not self._shutdown.is_set():
            try:
                task = self.task_queue.get(timeout=self.idle_timeout)
            except queue.Empty:
                continue

            try:
                if task is None:
                    break
                self._execute_task(task)
            finally:
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        """
        Execute a single task.

        Exceptions are logged and counted, never re-raised: one failing
        handler must not take a worker (and its future tasks) down with it.
        """
        self.state = WorkerState.BUSY
        start_time = time.time()

        try:
            task.func(*task.args, **task.kwargs)

            elapsed = time.time() - start_time
            waited = start_time - task.submitted_at
            logger.debug(
                f"Worker {self.worker_id} completed task in {elapsed:.3f}s "
                f"(queued {waited:.3f}s)"
            )
            self.tasks_completed += 1

        except Exception as e:
            elapsed = time.time() - start_time
            logger.exception(
                f"Worker {self.worker_id} task failed after {elapsed:.3f}s: {e}"
            )
            self.tasks_failed += 1

        finally:
            self.state = WorkerState.IDLE

    def shutdown(self):
        """Signal the worker to stop."""
        self._shutdown.set()


class ThreadPool:
    """
    Thread pool for concurrent connection handling.

    Usage:
        pool = ThreadPool(min_workers=4, max_workers=16)
        pool.start()
        pool.submit(handle_connection, args=(conn,))
        pool.shutdown(wait=True)

    Features:
    - min_workers started up front, more added while all are busy
    - unbounded task queue by default (max_pending=0)
    - graceful shutdown that waits for queued work
    """

    def __init__(
        self,
        min_workers: int = 4,
        max_workers: int = 16,
        max_pending: int = 0,
        idle_timeout: float = 60.0
    ):
        """
        Args:
            min_workers: Worker threads created at start().
            max_workers: Upper bound when scaling up under load.
            max_pending: Maximum queued tasks. 0 = unbounded.
            idle_timeout: Seconds an idle worker waits before re-checking
                          its shutdown flag.
        """
        self.min_workers = min_workers
        self.max_workers = max_workers
        self.idle_timeout = idle_timeout

        self._task_queue: queue.Queue = queue.Queue(maxsize=max_pending)
        self._workers: list = []
        self._lock = threading.Lock()  # Protects _workers

        self._started = False
        self._shutdown = False
        self._next_worker_id = 0

    def start(self):
        """Start the pool with min_workers threads."""
        if self._started:
            return

        logger.info(f"Starting thread pool with {self.min_workers} workers")

        with self._lock:
            for _ in range(self.min_workers):
                self._add_worker()

        self._started = True

    def _add_worker(self) -> Worker:
        # Caller holds self._lock
        worker = Worker(
            task_queue=self._task_queue,
            worker_id=self._next_worker_id,
            idle_timeout=self.idle_timeout
        )
        self._next_worker_id += 1
        self._workers.append(worker)
        worker.start()
        return worker

    def submit(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        block: bool = True,
        queue_timeout: Optional[float] = None
    ) -> bool:
        """
        Submit a task for execution.

        Args:
            func: The function to execute.
            args: Positional arguments for the function.
            kwargs: Keyword arguments for the function.
            block: Whether to wait if a bounded queue is full.
            queue_timeout: How long to wait for queue space.

        Returns:
            True if the task was queued, False if the queue was full.

        Raises:
            RuntimeError: If the pool is not started or is shutting down.
        """
        if not self._started:
            raise RuntimeError("Thread pool not started")

        if self._shutdown:
            raise RuntimeError("Thread pool is shutting down")

        task = Task(func=func, args=args, kwargs=kwargs or {})

        try:
            self._task_queue.put(task, block=block, timeout=queue_timeout)
        except queue.Full:
            return False

        self._maybe_scale_up()
        return True

    def _maybe_scale_up(self):
        """Add a worker if every worker is busy and tasks are waiting."""
        with self._lock:
            busy_count = sum(1 for w in self._workers if w.state == WorkerState.BUSY)

            if busy_count == len(self._workers) and len(self._workers) < self.max_workers:
                if self._task_queue.qsize() > 0:
                    logger.debug(
                        f"Scaling up: {len(self._workers)} -> {len(self._workers) + 1} workers"
                    )
                    self._add_worker()

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Shutdown the thread pool.

            1. Reject new tasks
            2. If wait: let queued tasks finish (up to timeout)
            3. Poison pill every worker and join it

        Args:
            wait: Whether to wait for queued tasks to complete.
            timeout: Maximum seconds to wait for the queue to drain.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutdown = True

        if wait:
            deadline = time.time() + timeout if timeout else None
            while self._task_queue.unfinished_tasks:
                if deadline and time.time() > deadline:
                    logger.warning("Shutdown timeout, forcing stop")
                    break
                time.sleep(0.05)

        for worker in self._workers:
            worker.shutdown()
            try:
                self._task_queue.put(None, block=False)
            except queue.Full:
                pass  # Worker exits on its idle timeout instead

        for worker in self._workers:
            worker.join(timeout=2.0)

        self._workers.clear()
        self._started = False
        logger.info("Thread pool shutdown complete")

    @property
    def worker_count(self) -> int:
        return len(self._workers)

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.BUSY)

    @property
    def pending(self) -> int:
        """Tasks queued but not yet picked up."""
        return self._task_queue.qsize()

    @property
    def stats(self) -> dict:
        """Worker and task counts, for logging."""
        return {
            "workers": {
                "total": len(self._workers),
                "busy": self.busy_workers,
            },
            "tasks": {
                "queued": self._task_queue.qsize(),
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
            },
        }
