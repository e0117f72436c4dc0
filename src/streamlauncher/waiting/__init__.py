"""Waiting for the activation time: in-process or via the OS scheduler."""

from streamlauncher.waiting.countdown import Countdown, format_remaining
from streamlauncher.waiting.tasks import (
    CronTaskRegistry,
    DeferredTaskRegistry,
    WindowsTaskRegistry,
    build_program_command,
    get_task_registry,
)

__all__ = [
    "Countdown",
    "CronTaskRegistry",
    "DeferredTaskRegistry",
    "WindowsTaskRegistry",
    "build_program_command",
    "format_remaining",
    "get_task_registry",
]
