"""Command execution, with and without privilege escalation."""

from __future__ import annotations

import logging
import platform
import shutil
import subprocess
from abc import ABC, abstractmethod

from cachesweep.errors import CommandFailed

log = logging.getLogger(__name__)

SHELL = "/bin/sh"
OSASCRIPT = "/usr/bin/osascript"


class Executor(ABC):
    """Runs a shell command line and returns its combined output."""

    @abstractmethod
    def run(self, command: str) -> str:
        """Run *command*.

        Raises:
            CommandFailed: If the command could not be started or exited
                non-zero. Carries the combined stdout/stderr verbatim.
        """


def _run_combined(argv: list[str]) -> str:
    """Run *argv* with stderr folded into stdout; raise on non-zero exit."""
    try:
        proc = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise CommandFailed(str(e)) from e

    if proc.returncode != 0:
        raise CommandFailed(proc.stdout or f"exit status {proc.returncode}")
    return proc.stdout


class ShellExecutor(Executor):
    """Runs commands through ``/bin/sh -c`` as the current user."""

    def run(self, command: str) -> str:
        log.debug("Running: %s", command)
        return _run_combined([SHELL, "-c", command])


class ElevatedExecutor(Executor):
    """Runs commands with administrator rights after an interactive prompt.

    Cancelling the prompt or failing authentication surfaces as
    ``CommandFailed`` like any other non-zero exit.
    """

    @abstractmethod
    def available(self) -> bool:
        """Whether the escalation mechanism exists on this system."""


def applescript_quote(text: str) -> str:
    """Escape *text* for use inside an AppleScript string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


class OsascriptExecutor(ElevatedExecutor):
    """macOS: ``do shell script ... with administrator privileges``."""

    def available(self) -> bool:
        return shutil.which(OSASCRIPT) is not None

    def run(self, command: str) -> str:
        log.debug("Running with administrator privileges: %s", command)
        script = f'do shell script "{applescript_quote(command)}" with administrator privileges'
        return _run_combined([OSASCRIPT, "-e", script])


class PkexecExecutor(ElevatedExecutor):
    """Linux: run the command through polkit's ``pkexec``."""

    # pkexec exit statuses for a dismissed dialog and a failed authentication
    DISMISSED = 126
    DENIED = 127

    def available(self) -> bool:
        return shutil.which("pkexec") is not None

    def run(self, command: str) -> str:
        log.debug("Running through pkexec: %s", command)
        try:
            proc = subprocess.run(
                ["pkexec", SHELL, "-c", command],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            raise CommandFailed(str(e)) from e

        if proc.returncode == self.DISMISSED:
            raise CommandFailed(proc.stdout or "Authentication dismissed by user")
        if proc.returncode == self.DENIED:
            raise CommandFailed(proc.stdout or "Authentication denied")
        if proc.returncode != 0:
            raise CommandFailed(proc.stdout or f"exit status {proc.returncode}")
        return proc.stdout


def default_elevated_executor() -> ElevatedExecutor:
    """Pick the escalation mechanism for the running platform."""
    if platform.system() == "Darwin":
        return OsascriptExecutor()
    return PkexecExecutor()
