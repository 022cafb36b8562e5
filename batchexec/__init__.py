"""
batchexec: run a batch of shell commands in parallel and report each exit status.
"""

from .core import (
    BatchCoordinator,
    BatchExecError,
    BatchResult,
    CommandReport,
    CommandRunner,
    ErrorKind,
    FileConfig,
    TerminationOutcome,
    WorkerPool,
    run_batch,
)

__version__ = "0.1.0"

__all__ = [
    "BatchCoordinator",
    "BatchExecError",
    "BatchResult",
    "CommandReport",
    "CommandRunner",
    "ErrorKind",
    "FileConfig",
    "TerminationOutcome",
    "WorkerPool",
    "run_batch",
]
