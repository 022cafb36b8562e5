import io
import logging
import sys
import time

from batchexec.core.coordinator import BatchCoordinator, run_batch
from batchexec.core.errors import ErrorKind
from batchexec.core.models import TerminationOutcome
from batchexec.core.runner import CommandRunner
import pytest

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX /bin/sh")


def _messages(caplog, level=None):
    return [
        r.getMessage() for r in caplog.records
        if r.name == "batchexec" and (level is None or r.levelno == level)
    ]


def _outcome_lines(caplog):
    return [m for m in _messages(caplog) if m.startswith(("Shell terminated", "Shell error"))]


@pytest.fixture
def coordinator(caplog):
    caplog.set_level(logging.DEBUG, logger="batchexec")
    return BatchCoordinator(err_stream=io.StringIO())


@posix_only
def test_handle_count_matches_commands(coordinator):
    commands = ["exit 0", "exit 1", "exit 2", "exit 3"]
    result = coordinator.run(commands)
    assert result.handles_created == 4
    assert result.handles_waited == 4
    assert [r.command for r in result.reports] == commands
    assert [r.index for r in result.reports] == [0, 1, 2, 3]


@posix_only
def test_exit_codes_are_logged(coordinator, caplog):
    result = coordinator.run(["exit 0", "exit 7"])
    assert [r.outcome.code for r in result.reports] == [0, 7]
    info = _messages(caplog, logging.INFO)
    assert "Shell terminated [exit 0], exit code: Exited(0)" in info
    assert "Shell terminated [exit 7], exit code: Exited(7)" in info
    assert result.succeeded == 1 and result.failed == 1


@posix_only
def test_launch_failure_does_not_stop_others(coordinator, caplog):
    result = coordinator.run(["exit 3", "", "exit 0"])
    assert result.handles_waited == 3
    assert result.launch_failures == 1
    assert result.reports[1].error.kind is ErrorKind.LAUNCH_FAILURE
    assert result.reports[0].outcome.code == 3
    assert result.reports[2].outcome.code == 0
    errors = _messages(caplog, logging.ERROR)
    assert len(errors) == 1
    assert errors[0].startswith("Shell error []: Unable to launch an empty command")
    # launch failures are logged, not printed as wait failures
    assert coordinator.err_stream.getvalue() == ""


@posix_only
def test_missing_shell_fails_every_command(caplog, tmp_path):
    caplog.set_level(logging.INFO, logger="batchexec")
    runner = CommandRunner(shell=str(tmp_path / "nope"))
    result = BatchCoordinator(runner, err_stream=io.StringIO()).run(["exit 0", "exit 1"])
    assert result.launch_failures == 2
    errors = _messages(caplog, logging.ERROR)
    assert len(errors) == 2
    assert all("Unable to join shell process" in m for m in errors)


@posix_only
def test_slow_and_fast_commands_are_both_logged(coordinator, caplog):
    result = coordinator.run(["sleep 2", "exit 0"])
    assert len(_outcome_lines(caplog)) == 2
    assert [r.outcome.code for r in result.reports] == [0, 0]
    # the fast command finishes (and logs) before the slow one
    lines = _outcome_lines(caplog)
    assert lines[0] == "Shell terminated [exit 0], exit code: Exited(0)"


@posix_only
def test_commands_run_concurrently(coordinator):
    started = time.time()
    result = coordinator.run(["sleep 1"] * 4)
    assert time.time() - started < 3.5
    assert result.succeeded == 4


def test_empty_command_list(coordinator, caplog):
    result = coordinator.run([])
    assert result.handles_created == 0
    assert result.handles_waited == 0
    assert result.reports == []
    assert _messages(caplog) == []


@posix_only
def test_duplicates_are_independent(coordinator, caplog):
    result = coordinator.run(["exit 5", "exit 5"])
    assert result.handles_created == 2
    assert [r.outcome.code for r in result.reports] == [5, 5]
    assert len(_outcome_lines(caplog)) == 2


@posix_only
def test_repeated_runs_log_same_structure(coordinator, caplog):
    commands = ["exit 0", "", "exit 2"]
    coordinator.run(commands)
    first = [(r.levelno, " ".join(r.getMessage().split()[:2])) for r in caplog.records if r.name == "batchexec"]
    caplog.clear()
    coordinator.run(commands)
    second = [(r.levelno, " ".join(r.getMessage().split()[:2])) for r in caplog.records if r.name == "batchexec"]
    assert sorted(first) == sorted(second)


class _CrashingRunner:
    """Raises something other than a launch failure for selected commands."""

    def run(self, command):
        if command == "crash":
            raise RuntimeError("worker crashed")
        return TerminationOutcome.from_returncode(0)


def test_wait_failure_is_printed_and_waiting_continues(caplog):
    caplog.set_level(logging.INFO, logger="batchexec")
    err = io.StringIO()
    result = BatchCoordinator(_CrashingRunner(), err_stream=err).run(["ok", "crash", "ok"])
    assert result.handles_waited == 3
    assert result.wait_failures == 1
    assert result.succeeded == 2
    assert result.reports[1].error.kind is ErrorKind.WAIT_FAILURE
    printed = err.getvalue()
    assert printed.startswith("Error waiting for child future: Unable to wait for [crash]")
    assert "worker crashed" in printed


def test_wait_failure_defaults_to_stderr(capsys):
    BatchCoordinator(_CrashingRunner()).run(["crash"])
    assert "Error waiting for child future" in capsys.readouterr().err


def test_summary_line_is_logged(caplog):
    caplog.set_level(logging.INFO, logger="batchexec")
    BatchCoordinator(_CrashingRunner(), err_stream=io.StringIO()).run(["ok", "crash"])
    summary = [m for m in _messages(caplog) if m.startswith("Batch completed")]
    assert len(summary) == 1
    assert "1/2 exited with code 0" in summary[0]
    assert "1 wait failures" in summary[0]


@posix_only
def test_run_batch_helper(caplog):
    caplog.set_level(logging.INFO, logger="batchexec")
    result = run_batch(["exit 0", "exit 9"], shell="/bin/sh")
    assert [r.outcome.code for r in result.reports] == [0, 9]


@posix_only
def test_unspawnable_command_is_logged_as_launch_failure(coordinator, caplog):
    result = coordinator.run(["echo a\x00b", "exit 0"])
    assert result.reports[0].status == "launch_failure"
    assert result.reports[0].error.kind is ErrorKind.LAUNCH_FAILURE
    assert result.reports[1].outcome.code == 0
    assert result.launch_failures == 1
    assert result.wait_failures == 0
    errors = _messages(caplog, logging.ERROR)
    assert len(errors) == 1
    assert errors[0].startswith("Shell error [echo a\x00b]: Unable to join shell process")
    assert coordinator.err_stream.getvalue() == ""


def test_every_report_has_a_duration():
    result = BatchCoordinator(_CrashingRunner(), err_stream=io.StringIO()).run(["ok"] * 20 + ["crash"])
    assert all(r.duration is not None for r in result.reports)
