"""Exceptions raised by the scheduled-task adapter."""

from __future__ import annotations


class CronError(Exception):
    """Base class for scheduled-task errors."""


class UnsupportedOperatingSystem(CronError):
    def __init__(self, os_name: str) -> None:
        super().__init__(f"Unsupported operating system: {os_name}")
        self.os_name = os_name


class InvalidScheduleFormat(CronError, ValueError):
    pass


class TaskParseFailure(CronError):
    """A listing entry that could not be turned into a task.

    Never raised out of a listing; collected as a warning instead.
    """

    informational = False

    def __init__(self, message: str, source: str | dict[str, str] = "") -> None:
        super().__init__(message)
        self.source = source


class NoAccessToScheduleFolder(TaskParseFailure):
    informational = True

    def __init__(self, folder: str) -> None:
        super().__init__(f"You don't have access to the tasks in folder {folder}", folder)
        self.folder = folder


class SubprocessExecutionFailure(CronError):
    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output
