"""
Data models: the process list file schema and per-command results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import BatchExecError, ErrorKind


class FileConfig(BaseModel):
    """Schema of the process list file."""
    model_config = ConfigDict(extra="ignore")

    processes: List[str]

    @field_validator("processes", mode="before")
    @classmethod
    def processes_are_strings(cls, v):
        if isinstance(v, list):
            for i, item in enumerate(v):
                if not isinstance(item, str):
                    raise ValueError(f"processes[{i}] must be a string, got {type(item).__name__}")
        return v


class OutcomeKind(Enum):
    EXITED = "exited"
    SIGNALED = "signaled"
    OTHER = "other"


@dataclass(frozen=True)
class TerminationOutcome:
    """How a child process terminated."""
    kind: OutcomeKind
    code: Optional[int] = None

    @classmethod
    def from_returncode(cls, returncode: Optional[int]) -> "TerminationOutcome":
        # subprocess reports death by signal N as -N on POSIX
        if returncode is None:
            return cls(OutcomeKind.OTHER, None)
        if returncode < 0:
            return cls(OutcomeKind.SIGNALED, -returncode)
        return cls(OutcomeKind.EXITED, returncode)

    @property
    def success(self) -> bool:
        return self.kind is OutcomeKind.EXITED and self.code == 0

    def __str__(self) -> str:
        return f"{self.kind.value.capitalize()}({self.code})"


@dataclass
class CommandReport:
    """Result of one command in a batch."""
    index: int
    command: str
    outcome: Optional[TerminationOutcome] = None
    error: Optional[BatchExecError] = None
    duration: Optional[float] = None

    @property
    def status(self) -> str:
        if self.outcome is not None:
            return "succeeded" if self.outcome.success else "failed"
        if self.error is not None and self.error.kind is ErrorKind.WAIT_FAILURE:
            return "wait_failure"
        return "launch_failure"


@dataclass
class BatchResult:
    """All command reports of one batch, in submission order."""
    reports: List[CommandReport] = field(default_factory=list)
    handles_created: int = 0
    handles_waited: int = 0
    elapsed: float = 0.0

    @property
    def total(self) -> int:
        return len(self.reports)

    def _count(self, status: str) -> int:
        return sum(1 for r in self.reports if r.status == status)

    @property
    def succeeded(self) -> int:
        return self._count("succeeded")

    @property
    def failed(self) -> int:
        return self._count("failed")

    @property
    def launch_failures(self) -> int:
        return self._count("launch_failure")

    @property
    def wait_failures(self) -> int:
        return self._count("wait_failure")
