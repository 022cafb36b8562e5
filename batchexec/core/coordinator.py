"""
Batch coordinator: fan every command out to the worker pool, then wait on
each handle in submission order.

A failing command (non-zero exit, launch failure) or a failing wait never
stops the remaining handles from being waited on and logged.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import List, Optional, Sequence, TextIO

from .errors import BatchExecError, ErrorKind, wait_failure
from .models import BatchResult, CommandReport
from .pool import TaskHandle, WorkerPool
from .runner import CommandRunner

LOGGER_NAME = "batchexec"


class BatchCoordinator:
    """Runs a batch of mutually independent shell commands in parallel."""

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        logger: Optional[logging.Logger] = None,
        err_stream: Optional[TextIO] = None,
    ):
        self.runner = runner or CommandRunner()
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self._err_stream = err_stream

    @property
    def err_stream(self) -> TextIO:
        # resolved lazily so pytest's capsys sees the writes
        return self._err_stream or sys.stderr

    def _log_outcome(self, handle: TaskHandle) -> None:
        exc = handle.exception()
        if exc is None:
            outcome = handle.wait()
            self.logger.info(f"Shell terminated [{handle.command}], exit code: {outcome}")
        elif isinstance(exc, BatchExecError) and exc.kind is ErrorKind.LAUNCH_FAILURE:
            self.logger.error(f"Shell error [{handle.command}]: {exc.describe()}")
        # anything else surfaces when the handle is waited on

    def run(self, commands: Sequence[str]) -> BatchResult:
        """Launch all ``commands`` concurrently and wait for every one."""
        commands = list(commands)
        result = BatchResult()
        started = time.time()

        with WorkerPool(len(commands)) as pool:
            handles: List[TaskHandle] = []
            for command in commands:
                handle = pool.submit(command, self.runner.run)
                handle.add_done_callback(self._log_outcome)
                handles.append(handle)
            result.handles_created = len(handles)
            if handles:
                self.logger.info(f"Launched {len(handles)} processes")

            for handle in handles:
                report = CommandReport(index=handle.index, command=handle.command)
                try:
                    report.outcome = handle.wait()
                except BatchExecError as e:
                    if e.kind is not ErrorKind.LAUNCH_FAILURE:
                        print(f"Error waiting for child future: {e.describe()}", file=self.err_stream)
                    report.error = e
                except Exception as e:
                    err = wait_failure(f"Unable to wait for [{handle.command}]", handle.command)
                    err.__cause__ = e
                    print(f"Error waiting for child future: {err.describe()}", file=self.err_stream)
                    report.error = err
                report.duration = handle.duration
                result.handles_waited += 1
                result.reports.append(report)

        result.elapsed = time.time() - started
        if result.total:
            self.logger.info(
                f"Batch completed: {result.succeeded}/{result.total} exited with code 0, "
                f"{result.failed} failed, {result.launch_failures} launch failures, "
                f"{result.wait_failures} wait failures in {result.elapsed:.1f}s"
            )
        return result


def run_batch(
    commands: Sequence[str],
    *,
    shell: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> BatchResult:
    """Convenience wrapper: run ``commands`` with a fresh coordinator."""
    return BatchCoordinator(CommandRunner(shell=shell), logger=logger).run(commands)
