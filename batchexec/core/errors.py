"""
Error model for the batch launcher.

Every failure the launcher reports is a BatchExecError tagged with an
ErrorKind. Underlying exceptions are attached with ``raise ... from exc`` so
the top-level handler can walk and print the whole cause chain.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, List, Optional


class ErrorKind(Enum):
    """Where in the lifecycle an error happened."""
    SETUP = "setup"
    LAUNCH_FAILURE = "launch_failure"
    WAIT_FAILURE = "wait_failure"


class BatchExecError(Exception):
    """Launcher error with a kind and an optional command it belongs to."""

    def __init__(self, message: str, kind: ErrorKind, *, command: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.command = command

    def __str__(self) -> str:
        return self.message

    def iter_chain(self) -> Iterator[BaseException]:
        """Yield this error followed by each exception in its cause chain."""
        seen = set()
        exc: Optional[BaseException] = self
        while exc is not None and id(exc) not in seen:
            seen.add(id(exc))
            yield exc
            exc = exc.__cause__ or (None if exc.__suppress_context__ else exc.__context__)

    def causes(self) -> List[BaseException]:
        return list(self.iter_chain())[1:]

    def describe(self) -> str:
        """Single-line form: message followed by each cause, colon separated."""
        return ": ".join(_exc_text(e) for e in self.iter_chain())

    def render(self) -> str:
        """Multi-line form written to stderr by the CLI."""
        lines = [f"Error: {self}"]
        for cause in self.causes():
            lines.append(f"- Caused by: {_exc_text(cause)}")
        return "\n".join(lines)


def _exc_text(exc: BaseException) -> str:
    text = str(exc)
    return text if text else type(exc).__name__


def setup_error(message: str) -> BatchExecError:
    return BatchExecError(message, ErrorKind.SETUP)


def launch_failure(message: str, command: str) -> BatchExecError:
    return BatchExecError(message, ErrorKind.LAUNCH_FAILURE, command=command)


def wait_failure(message: str, command: Optional[str] = None) -> BatchExecError:
    return BatchExecError(message, ErrorKind.WAIT_FAILURE, command=command)


def render_exception(exc: BaseException) -> str:
    """Render any exception in the ``Error: / - Caused by:`` layout."""
    if isinstance(exc, BatchExecError):
        return exc.render()
    wrapper = BatchExecError(_exc_text(exc), ErrorKind.SETUP)
    wrapper.__cause__ = exc.__cause__ or exc.__context__
    return wrapper.render()
