"""OS-level deferred tasks.

Detached mode registers one-shot tasks that re-invoke this program at the
start and end times, then exits. Registering a task replaces any earlier
task with the same name, so repeated scheduling never fires twice.

- POSIX: crontab lines tagged with ``# TASK:<name>``
- Windows: Task Scheduler via ``schtasks``
"""

import logging
import shlex
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path

from streamlauncher.utils.errors import TaskRegistrationError

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


def build_program_command(
    action: str,
    broadcast_id: str,
    config_dir: Path | None = None,
    python: str | None = None,
) -> list[str]:
    """Command line that re-invokes this program for ``stream <action>``.

    Args:
        action: "start" or "end"
        broadcast_id: Broadcast to act on
        config_dir: Custom config directory to pass along
        python: Interpreter (default: the running one)
    """
    command = [python or sys.executable, "-m", "streamlauncher"]
    if config_dir is not None:
        command += ["--config-dir", str(config_dir)]
    command += ["stream", action, "--id", broadcast_id, "--unattended"]
    return command


class DeferredTaskRegistry(ABC):
    """Registers commands to run once at a local wall-clock time."""

    def __init__(self, runner: Runner = subprocess.run):
        self._runner = runner

    def _run(self, args: list[str], stdin: str | None = None) -> subprocess.CompletedProcess:
        try:
            return self._runner(args, input=stdin, capture_output=True, text=True, check=False)
        except OSError as e:
            raise TaskRegistrationError(f"Failed to run {args[0]}: {e}") from e

    @abstractmethod
    def upsert(self, name: str, command: Sequence[str], when: datetime) -> None:
        """Register ``command`` to run at ``when``, replacing a task of the same name.

        Raises:
            TaskRegistrationError: If the OS scheduler rejects the task
        """

    @abstractmethod
    def remove(self, name: str) -> bool:
        """Remove a task. Returns False if no such task existed."""


class CronTaskRegistry(DeferredTaskRegistry):
    """Per-user crontab."""

    @staticmethod
    def tag(name: str) -> str:
        return f"# TASK:{name}"

    @classmethod
    def entry(cls, name: str, command: Sequence[str], when: datetime) -> str:
        """Crontab line firing once a year at ``when`` (local time)."""
        local = when.astimezone()
        return (
            f"{local.minute} {local.hour} {local.day} {local.month} * "
            f"{shlex.join(command)} {cls.tag(name)}"
        )

    def _read(self) -> list[str]:
        result = self._run(["crontab", "-l"])
        if result.returncode != 0:
            # No crontab for this user yet
            return []
        return [line for line in result.stdout.splitlines() if line.strip()]

    def _write(self, lines: list[str]) -> None:
        content = "\n".join(lines) + "\n" if lines else ""
        result = self._run(["crontab", "-"], stdin=content)
        if result.returncode != 0:
            raise TaskRegistrationError(
                f"Failed to update crontab: {result.stderr.strip() or result.returncode}"
            )

    def _without(self, lines: list[str], name: str) -> list[str]:
        tag = self.tag(name)
        return [line for line in lines if not line.rstrip().endswith(tag)]

    def upsert(self, name: str, command: Sequence[str], when: datetime) -> None:
        lines = self._without(self._read(), name)
        lines.append(self.entry(name, command, when))
        self._write(lines)
        logger.debug(f"Registered cron task {name} for {when:%Y-%m-%d %H:%M}")

    def remove(self, name: str) -> bool:
        current = self._read()
        remaining = self._without(current, name)
        if len(remaining) == len(current):
            return False
        self._write(remaining)
        return True


class WindowsTaskRegistry(DeferredTaskRegistry):
    """Windows Task Scheduler.

    Tasks run once, today, at the given HH:MM.
    """

    def _exists(self, name: str) -> bool:
        return self._run(["schtasks", "/query", "/tn", name]).returncode == 0

    def _delete(self, name: str) -> None:
        result = self._run(["schtasks", "/delete", "/tn", name, "/f"])
        if result.returncode != 0:
            raise TaskRegistrationError(
                f"Failed to delete task {name}: {result.stderr.strip() or result.returncode}"
            )

    def upsert(self, name: str, command: Sequence[str], when: datetime) -> None:
        if self._exists(name):
            self._delete(name)

        result = self._run(
            [
                "schtasks", "/create",
                "/tn", name,
                "/tr", subprocess.list2cmdline(list(command)),
                "/sc", "once",
                "/st", when.astimezone().strftime("%H:%M"),
                "/f",
            ]
        )
        if result.returncode != 0:
            raise TaskRegistrationError(
                f"Failed to create task {name}: {result.stderr.strip() or result.returncode}"
            )
        logger.debug(f"Registered scheduled task {name} for {when:%H:%M}")

    def remove(self, name: str) -> bool:
        if not self._exists(name):
            return False
        self._delete(name)
        return True


def get_task_registry(
    platform: str | None = None, runner: Runner = subprocess.run
) -> DeferredTaskRegistry:
    """Registry for the host operating system."""
    if (platform or sys.platform).startswith("win"):
        return WindowsTaskRegistry(runner)
    return CronTaskRegistry(runner)
