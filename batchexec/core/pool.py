"""
Worker pool: one thread slot per command, one handle per submission.
"""

from __future__ import annotations

import concurrent.futures
import logging
import time
from typing import Callable, Optional

from .errors import BatchExecError, ErrorKind, wait_failure
from .models import TerminationOutcome

logger = logging.getLogger(__name__)


class TaskHandle:
    """Handle on one submitted command.

    Resolves exactly once, to a TerminationOutcome or a LaunchFailure.
    """

    def __init__(self, index: int, command: str):
        self.index = index
        self.command = command
        self._future: Optional[concurrent.futures.Future] = None
        self.submitted_at = time.time()
        self.finished_at: Optional[float] = None

    def _run(self, fn: Callable[[str], TerminationOutcome]) -> TerminationOutcome:
        # stamped on the worker, before the future resolves and wakes waiters
        try:
            return fn(self.command)
        finally:
            self.finished_at = time.time()

    @property
    def duration(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return self.finished_at - self.submitted_at

    def done(self) -> bool:
        return self._future.done()

    def add_done_callback(self, fn: Callable[["TaskHandle"], None]) -> None:
        """Call ``fn(handle)`` once resolved; immediately if already resolved."""
        self._future.add_done_callback(lambda _fut: fn(self))

    def exception(self) -> Optional[BaseException]:
        return self._future.exception()

    def wait(self, timeout: Optional[float] = None) -> TerminationOutcome:
        """Block until the command finished and return its outcome.

        A LaunchFailure raised by the task is re-raised unchanged. Anything
        else that goes wrong while observing the result becomes a
        WAIT_FAILURE error chained to the original exception.
        """
        try:
            return self._future.result(timeout=timeout)
        except BatchExecError as e:
            if e.kind is ErrorKind.LAUNCH_FAILURE:
                raise
            raise wait_failure(f"Unable to wait for [{self.command}]", self.command) from e
        except concurrent.futures.CancelledError as e:
            raise wait_failure(f"Task for [{self.command}] was cancelled", self.command) from e
        except concurrent.futures.TimeoutError as e:
            raise wait_failure(f"Timed out waiting for [{self.command}]", self.command) from e
        except Exception as e:
            raise wait_failure(f"Unable to wait for [{self.command}]", self.command) from e


class WorkerPool:
    """Fixed-size thread pool.

    The size is the number of commands in the batch, so every command gets
    its own thread and nothing waits in a backlog. A pool of size 0 accepts
    no submissions.
    """

    def __init__(self, size: int, thread_name_prefix: str = "batchexec"):
        if size < 0:
            raise ValueError(f"pool size must be >= 0, got {size}")
        self.size = size
        self._submitted = 0
        self._executor: Optional[concurrent.futures.ThreadPoolExecutor] = None
        if size > 0:
            self._executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=size, thread_name_prefix=thread_name_prefix
            )
        logger.debug(f"WorkerPool started with {size} slots")

    @property
    def submitted(self) -> int:
        return self._submitted

    def submit(self, command: str, fn: Callable[[str], TerminationOutcome]) -> TaskHandle:
        """Schedule ``fn(command)`` on a worker and return its handle at once."""
        if self._executor is None:
            raise ValueError("cannot submit to a pool of size 0")
        if self._submitted >= self.size:
            raise ValueError(f"pool of size {self.size} is full")
        handle = TaskHandle(self._submitted, command)
        handle._future = self._executor.submit(handle._run, fn)
        self._submitted += 1
        return handle

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)
