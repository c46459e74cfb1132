"""External tool execution on top of invoke."""

import contextlib
import os
import platform
import shutil
from pathlib import Path

from invoke import Config, Context, Local, Result
from invoke.exceptions import CommandTimedOut

from hostmend.core.errors import ToolLaunchFailure
from hostmend.core.log import logger
from hostmend.core.result import ToolInvocationResult


class LocalRunner(Local):
    """invoke's local runner with a kill() that works on Windows.

    invoke kills timed-out processes with signal.SIGKILL, which the
    signal module does not define on Windows. os.kill() there takes a
    plain number and hands it to TerminateProcess() as the exit code.
    """

    def kill(self) -> None:
        if platform.system() == "Windows":
            pid = self.pid if self.using_pty else self.process.pid
            with contextlib.suppress(ProcessLookupError):
                os.kill(pid, 9)
            return
        super().kill()


class Runner(Context):
    """invoke.Context whose execute() never raises on exit status."""

    def __init__(self):
        super().__init__(
            config=Config(overrides={"runners": {"local": LocalRunner}})
        )

    def execute(
        self,
        command: str,
        timeout: int | None = None,
        log_level: str | None = None,
    ) -> Result:
        """Run a shell command and capture its output.

        Args:
            command: Command line to execute
            timeout: Seconds before the process is killed; None waits
                forever
            log_level: Echo captured lines to the logger at this level

        Returns:
            invoke.Result; a timed-out command reports exited == -1
        """
        kwargs = {
            "hide": True,
            "warn": True,
            "in_stream": False,
        }
        if timeout:
            kwargs["timeout"] = timeout

        try:
            result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            logger.error(
                "Command timed out", command=command, timeout=timeout
            )
            result = e.result
            result.exited = -1

        if log_level:
            for line in result.stdout.splitlines():
                logger.log(log_level, line.rstrip())
            for line in result.stderr.splitlines():
                logger.log(log_level, line.rstrip())

        return result


class ToolInvoker:
    """Runs one maintenance tool to completion per call.

    Holds only settings; each run() gets its own Runner, so one
    invoker can be shared between threads.
    """

    def __init__(self, timeout: int | None = None):
        """Initialize ToolInvoker.

        Args:
            timeout: Optional per-tool timeout in seconds
        """
        self.timeout = timeout

    def run(
        self, executable: Path | str, arguments: str = ""
    ) -> ToolInvocationResult:
        """Run executable with arguments and wait for it to exit.

        A non-zero exit status is returned, never raised.

        Raises:
            ToolLaunchFailure: If the executable cannot be found or the
                OS refuses to start it
        """
        resolved = shutil.which(str(executable))
        if resolved is None:
            raise ToolLaunchFailure(str(executable), "executable not found")

        command = f'"{resolved}" {arguments}'.rstrip()
        logger.debug("Launching tool", command=command)
        try:
            result = Runner().execute(
                command, timeout=self.timeout, log_level="debug"
            )
        except OSError as e:
            raise ToolLaunchFailure(str(executable), str(e)) from e

        return ToolInvocationResult(
            command=command,
            output=tuple(result.stdout.splitlines()),
            exit_status=result.exited,
        )
