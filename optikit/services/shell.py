"""Shell command execution for optikit.

All external tools (flutter, fvm, pod, open) go through `ShellExecutor`.
Commands are run one at a time through the platform shell and waited on;
there is no timeout. Failures surface as `CommandFailedError` (non-zero
exit) or `CommandNotFoundError` (could not start, or the shell reported
the command missing). The executor never exits the process itself.
"""

import logging
import re
import subprocess
import sys
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from ..exceptions import CommandError, CommandFailedError, CommandNotFoundError
from ..utils import output
from ..utils.dry_run import DryRunJournal
from ..utils.retry import retry_call

logger = logging.getLogger(__name__)

# Shell exit statuses meaning "no such command" (sh/bash, cmd.exe)
COMMAND_NOT_FOUND_CODES = (127, 9009)

PathLike = Union[str, Path]


def flutter_command(base_command: str, use_fvm: bool) -> str:
    """Prefix a `flutter ...` command line with `fvm` when FVM is in use.

    >>> flutter_command("flutter clean", True)
    'fvm flutter clean'
    >>> flutter_command("flutter pub get", False)
    'flutter pub get'
    """
    if use_fvm:
        return re.sub(r"^flutter\s", "fvm flutter ", base_command)
    return base_command


class ShellExecutor:
    """Runs external commands sequentially and returns their stdout."""

    def __init__(
        self,
        cwd: Optional[PathLike] = None,
        dry_run: bool = False,
        journal: Optional[DryRunJournal] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.cwd = Path(cwd) if cwd is not None else None
        self.dry_run = dry_run
        self.journal = journal if journal is not None else DryRunJournal()
        self._sleep = sleep

    def run(self, command: str, cwd: Optional[PathLike] = None) -> str:
        """Run a command, streaming its output, and return the trimmed stdout.

        In dry-run mode the command is recorded in the journal and "" is returned.
        """
        if self.dry_run:
            details = f"in {cwd}" if cwd is not None else None
            self.journal.log_command("Run command", command, details)
            return ""
        return self._execute(command, cwd, stream=True)

    def run_silent(self, command: str, cwd: Optional[PathLike] = None) -> str:
        """Run a command without echoing its output.

        Used for read-only queries (tool presence, device lists), so it runs
        even in dry-run mode.
        """
        return self._execute(command, cwd, stream=False)

    def run_with_retry(
        self,
        command: str,
        max_attempts: int,
        delay_ms: int,
        cwd: Optional[PathLike] = None,
    ) -> str:
        """Run a command up to `max_attempts` times with a fixed pause between tries.

        Every failure is retried identically. If all attempts fail the last
        error propagates unchanged.
        """

        def report(exc: Exception, attempt: int) -> None:
            detail = _failure_text(exc)
            if attempt < max_attempts:
                output.warning(
                    f"Attempt {attempt}/{max_attempts} of '{command}' failed: {detail}. "
                    f"Retrying in {delay_ms / 1000:g}s..."
                )
            else:
                output.warning(f"Attempt {attempt}/{max_attempts} of '{command}' failed: {detail}")

        return retry_call(
            lambda: self.run(command, cwd=cwd),
            max_attempts=max_attempts,
            delay_seconds=delay_ms / 1000,
            on_failure=report,
            sleep=self._sleep,
        )

    def _execute(self, command: str, cwd: Optional[PathLike], stream: bool) -> str:
        workdir = Path(cwd) if cwd is not None else self.cwd
        logger.debug(f"Running: {command} (cwd={workdir})")

        try:
            process = subprocess.Popen(
                command,
                shell=True,
                cwd=workdir,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise CommandNotFoundError(str(e), command=command, stderr=str(e)) from e

        if stream:
            stdout, stderr = _stream(process)
        else:
            stdout, stderr = process.communicate()

        exit_code = process.returncode
        logger.debug(f"Exit code {exit_code}: {command}")

        if exit_code in COMMAND_NOT_FOUND_CODES:
            raise CommandNotFoundError(
                stderr.strip() or f"Command not found: {command}",
                command=command,
                stderr=stderr.strip(),
            )
        if exit_code != 0:
            raise CommandFailedError(
                stderr.strip() or f"Command exited with status {exit_code}",
                command=command,
                exit_code=exit_code,
                stderr=stderr.strip(),
            )

        return stdout.strip()


def _stream(process: "subprocess.Popen[str]") -> Tuple[str, str]:
    """Echo stdout and stderr while collecting both."""
    stderr_lines: List[str] = []

    def drain_stderr() -> None:
        assert process.stderr is not None
        for line in process.stderr:
            sys.stderr.write(line)
            stderr_lines.append(line)

    reader = threading.Thread(target=drain_stderr, daemon=True)
    reader.start()

    stdout_lines: List[str] = []
    assert process.stdout is not None
    for line in process.stdout:
        sys.stdout.write(line)
        sys.stdout.flush()
        stdout_lines.append(line)

    process.wait()
    reader.join()
    return "".join(stdout_lines), "".join(stderr_lines)


def _failure_text(exc: Exception) -> str:
    if isinstance(exc, CommandError):
        return exc.message
    return str(exc)
