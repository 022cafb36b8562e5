"""
Core modules: command runner, worker pool, batch coordinator and their models.
"""

from .errors import BatchExecError, ErrorKind
from .models import FileConfig, TerminationOutcome, OutcomeKind, CommandReport, BatchResult
from .runner import CommandRunner
from .pool import WorkerPool, TaskHandle
from .coordinator import BatchCoordinator, run_batch
from .configuration import ConfigurationLoader, load_file_config

__all__ = [
    "BatchExecError",
    "ErrorKind",
    "FileConfig",
    "TerminationOutcome",
    "OutcomeKind",
    "CommandReport",
    "BatchResult",
    "CommandRunner",
    "WorkerPool",
    "TaskHandle",
    "BatchCoordinator",
    "run_batch",
    "ConfigurationLoader",
    "load_file_config",
]
