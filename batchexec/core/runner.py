"""
Command runner: execute one shell command line and wait for it.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Optional

from .errors import launch_failure
from .models import TerminationOutcome

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs a single command through a shell, synchronously.

    stdin is closed (``/dev/null``); stdout and stderr are inherited from the
    launcher. Only the exit status is captured.
    """

    def __init__(self, shell: Optional[str] = None):
        # None -> subprocess default (/bin/sh on POSIX, COMSPEC on Windows)
        self.shell = shell

    def run(self, command: str) -> TerminationOutcome:
        """Run ``command`` to completion and return how it terminated.

        Raises:
            BatchExecError: kind LAUNCH_FAILURE if the command is blank, the
                shell cannot be spawned or the wait on the child fails.
        """
        if not command or not command.strip():
            raise launch_failure("Unable to launch an empty command", command)

        logger.debug(f"spawn shell={self.shell or 'default'} cmd={command}")
        try:
            res = subprocess.run(
                command,
                shell=True,
                executable=self.shell,
                stdin=subprocess.DEVNULL,
            )
        except (OSError, ValueError, subprocess.SubprocessError) as ex:
            raise launch_failure("Unable to join shell process", command) from ex

        logger.debug(f"reaped rc={res.returncode} cmd={command}")
        return TerminationOutcome.from_returncode(res.returncode)
