"""Launching the local broadcasting software (OBS Studio).

Launching is fire-and-forget: the outcome is returned so the caller can
report it, and a failure never aborts the stream workflow because the
operator may start OBS by hand.
"""

import logging
import subprocess
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

WINDOWS_OBS_PATH = Path(r"C:\Program Files\obs-studio\bin\64bit\obs64.exe")
MACOS_OBS_PATH = Path("/Applications/OBS.app/Contents/MacOS/OBS")


def default_obs_path(platform: str | None = None) -> Path:
    """Default OBS executable for the host platform."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return WINDOWS_OBS_PATH
    if platform == "darwin":
        return MACOS_OBS_PATH
    return Path("obs")


@dataclass(frozen=True)
class LaunchResult:
    """Outcome of a launch attempt."""

    path: Path
    started: bool
    pid: int | None = None
    error: str | None = None


class ProcessLauncher:
    """Starts a program detached from the current process."""

    def __init__(self, popen: Callable[..., subprocess.Popen] = subprocess.Popen):
        self._popen = popen

    def start(self, path: Path, args: Sequence[str] = ()) -> LaunchResult:
        """Start ``path`` with ``args`` in the executable's own directory.

        OBS on Windows fails to find its data files when launched from
        another working directory.

        Returns:
            LaunchResult; never raises for launch failures
        """
        cwd = str(path.parent) if path.parent != Path(".") else None
        logger.debug(f"Starting {path} {' '.join(args)}")
        try:
            process = self._popen(
                [str(path), *args],
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, ValueError) as e:
            return LaunchResult(path=path, started=False, error=str(e))
        return LaunchResult(path=path, started=True, pid=process.pid)
