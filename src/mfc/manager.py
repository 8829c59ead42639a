"""Cross-platform adapter over the host's native task scheduler.

Unix-like hosts are driven through ``crontab``, Windows hosts through
``schtasks``. The adapter keeps no state of its own: every call reads from or
writes to the native scheduler.
"""

from __future__ import annotations

import logging
import os
import platform
from abc import ABC, abstractmethod
from typing import Sequence

from mfc.config import (
    OS_NAME_ENV,
    REBOOT_MARKER,
    UNIX_LIST_COMMAND,
    UNIX_WRITE_COMMAND,
    WINDOWS_LIST_COMMAND,
    WINDOWS_NO_ACCESS_NOTICE,
    WINDOWS_REQUIRED_FIELDS,
)
from mfc.errors import (
    InvalidScheduleFormat,
    NoAccessToScheduleFolder,
    SubprocessExecutionFailure,
    TaskParseFailure,
    UnsupportedOperatingSystem,
)
from mfc.executor import ExecutionResult, Runner, execute_command
from mfc.models import OSFamily, ParseResult, ScheduleSpec, UnixTask, WindowsTask
from mfc.render import render_unix_tasks, render_windows_tasks

logger = logging.getLogger(__name__)


def detect_os_name() -> str:
    """Return the host OS name, honoring the MFC_OS_NAME override."""
    override = os.environ.get(OS_NAME_ENV)
    if override:
        return override

    system = platform.system()
    if system == "Darwin":
        return "Mac OS X"
    return system


def _cmd_quote(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


def classify_os(os_name: str) -> OSFamily:
    name = os_name.lower()
    # Unix markers are checked first: "darwin" also contains "win".
    if any(marker in name for marker in ("nix", "nux", "mac", "darwin")):
        return OSFamily.UNIX_LIKE
    if "win" in name:
        return OSFamily.WINDOWS
    raise UnsupportedOperatingSystem(os_name)


class SystemCronManager(ABC):
    """Lists, adds and deletes tasks in one platform's native scheduler."""

    family: OSFamily
    list_command: Sequence[str]

    def __init__(self, os_name: str = "", runner: Runner | None = None) -> None:
        self.os_name = os_name
        self.runner = runner or execute_command

    def __repr__(self) -> str:
        return f"{type(self).__name__}(os_name={self.os_name!r}, family={self.family.value})"

    def list_tasks(self) -> list[str]:
        """Return the native listing, one entry per line, unfiltered."""
        result = self.runner(self.list_command, merge_stderr=True)
        return result.output.splitlines()

    def list_parsed(self) -> ParseResult:
        return self.parse(self.list_tasks())

    def table_tasks(self, color: bool = True) -> str:
        return self.render(self.list_parsed().tasks, color=color)

    @abstractmethod
    def parse(self, lines: list[str]) -> ParseResult:
        ...

    @abstractmethod
    def render(self, tasks: list, color: bool = True) -> str:
        ...

    @abstractmethod
    def add_task(
        self,
        command: str,
        schedule: str | ScheduleSpec | None = None,
        on_startup: bool = False,
        name: str | None = None,
    ) -> list[str]:
        ...

    @abstractmethod
    def delete_task(self, name: str) -> list[str]:
        ...

    @abstractmethod
    def deletion_candidates(self) -> list[str]:
        """Values that can be passed to delete_task."""

    @staticmethod
    def _resolve_schedule(
        schedule: str | ScheduleSpec | None, on_startup: bool
    ) -> ScheduleSpec | None:
        if isinstance(schedule, str):
            schedule = ScheduleSpec.parse(schedule)

        if schedule is None and not on_startup:
            raise InvalidScheduleFormat("Nothing to schedule: give a schedule or on_startup")

        if schedule is not None and schedule.is_sub_minute:
            logger.warning(
                f"Schedule '{schedule.raw}' is shorter than one minute and yields a zero interval"
            )

        return schedule

    @staticmethod
    def _check(result: ExecutionResult, action: str) -> None:
        if not result.success:
            output = result.output.strip()
            raise SubprocessExecutionFailure(
                f"Failed to {action} (exit code {result.exit_code}): {output}", output
            )


class UnixCronManager(SystemCronManager):
    """Scheduler adapter backed by the user's crontab.

    Writes rewrite the whole crontab (read, modify, pipe into ``crontab -``).
    The rewrite is not atomic: an edit made by someone else between the read
    and the write is lost.
    """

    family = OSFamily.UNIX_LIKE
    list_command = UNIX_LIST_COMMAND

    def parse(self, lines: list[str]) -> ParseResult[UnixTask]:
        result: ParseResult[UnixTask] = ParseResult()

        for line in lines:
            if not line.strip():
                continue

            parts = line.split(None, 5)
            if len(parts) != 6:
                failure = TaskParseFailure(f"Failed to parse cron job: {line}", line)
                logger.warning(str(failure))
                result.warnings.append(failure)
                continue

            result.tasks.append(
                UnixTask(schedule=" ".join(parts[:5]), command=parts[5].rstrip())
            )

        return result

    def render(self, tasks: list[UnixTask], color: bool = True) -> str:
        return render_unix_tasks(tasks, color=color)

    def read_crontab(self) -> list[str]:
        """Current crontab lines; empty when the user has no crontab."""
        result = self.runner(UNIX_LIST_COMMAND)
        if not result.success:
            return []
        return result.lines()

    def write_crontab(self, lines: list[str]) -> None:
        content = "\n".join(lines) + "\n" if lines else ""
        result = self.runner(UNIX_WRITE_COMMAND, input=content)
        self._check(result, "update crontab")

    def add_task(
        self,
        command: str,
        schedule: str | ScheduleSpec | None = None,
        on_startup: bool = False,
        name: str | None = None,
    ) -> list[str]:
        spec = self._resolve_schedule(schedule, on_startup)

        entries = []
        if on_startup:
            entries.append(f"{REBOOT_MARKER} {command}")
        if spec is not None:
            entries.append(f"{spec.to_cron()} {command}")

        self.write_crontab(self.read_crontab() + entries)
        logger.info(f"Added {len(entries)} crontab entries on {self.os_name} for: {command}")
        return entries

    def delete_task(self, name: str) -> list[str]:
        """Remove every crontab line containing ``name``.

        Matching is by substring, so deleting ``backup`` also removes a
        ``backup-old`` entry.
        """
        current = self.read_crontab()
        kept = [line for line in current if name not in line]
        removed = [line for line in current if name in line]

        self.write_crontab(kept)
        logger.info(f"Removed {len(removed)} crontab entries matching: {name}")
        return removed

    def deletion_candidates(self) -> list[str]:
        return [line for line in self.read_crontab() if line.strip()]


class WindowsCronManager(SystemCronManager):
    """Scheduler adapter backed by Windows Task Scheduler."""

    family = OSFamily.WINDOWS
    list_command = WINDOWS_LIST_COMMAND

    def parse(self, lines: list[str]) -> ParseResult[WindowsTask]:
        result: ParseResult[WindowsTask] = ParseResult()

        for block in self._split_blocks(lines):
            try:
                result.tasks.append(self._parse_block(block))
            except NoAccessToScheduleFolder as e:
                logger.info(str(e))
                result.warnings.append(e)
            except TaskParseFailure as e:
                logger.warning(str(e))
                result.warnings.append(e)

        return result

    @staticmethod
    def _split_blocks(lines: list[str]) -> list[dict[str, str]]:
        blocks: list[dict[str, str]] = []
        current: dict[str, str] = {}

        for line in lines:
            if not line.strip():
                if current:
                    blocks.append(current)
                    current = {}
                continue

            key, sep, value = line.partition(":")
            if sep:
                current[key.strip()] = value.strip()

        if current:
            blocks.append(current)

        return blocks

    @staticmethod
    def _parse_block(fields: dict[str, str]) -> WindowsTask:
        missing = [key for key in WINDOWS_REQUIRED_FIELDS if key not in fields]
        if missing:
            if fields.get("INFO") == WINDOWS_NO_ACCESS_NOTICE:
                raise NoAccessToScheduleFolder(fields.get("Folder", ""))
            raise TaskParseFailure(
                f"Failed to map task: missing {', '.join(missing)} for task {fields}", fields
            )

        return WindowsTask(
            folder=fields.get("Folder", ""),
            host_name=fields.get("HostName", ""),
            task_name=fields["TaskName"],
            next_run_time=fields["Next Run Time"],
            status=fields["Status"],
            logon_mode=fields["Logon Mode"],
        )

    def render(self, tasks: list[WindowsTask], color: bool = True) -> str:
        return render_windows_tasks(tasks, color=color)

    @staticmethod
    def create_command(name: str, command: str, trigger: Sequence[str]) -> list[str]:
        return ["schtasks", "/create", "/tn", name, "/tr", command, *trigger]

    @staticmethod
    def create_shell_command(name: str, command: str, trigger: Sequence[str]) -> str:
        """The /create call as cmd.exe text, with /tn and /tr always quoted."""
        return (
            f"schtasks /create /tn {_cmd_quote(name)} /tr {_cmd_quote(command)} "
            + " ".join(trigger)
        )

    def add_task(
        self,
        command: str,
        schedule: str | ScheduleSpec | None = None,
        on_startup: bool = False,
        name: str | None = None,
    ) -> list[str]:
        spec = self._resolve_schedule(schedule, on_startup)
        task_name = name or command

        triggers = []
        if on_startup:
            triggers.append(["/sc", "ONSTART"])
        if spec is not None:
            triggers.append(spec.to_windows().split())

        entries = [self.create_shell_command(task_name, command, t) for t in triggers]
        if len(triggers) == 1:
            result = self.runner(self.create_command(task_name, command, triggers[0]), merge_stderr=True)
        else:
            result = self.runner(" && ".join(entries), merge_stderr=True, shell=True)

        self._check(result, f"create task '{task_name}'")
        logger.info(f"Created scheduled task on {self.os_name}: {task_name}")
        return entries

    def delete_task(self, name: str) -> list[str]:
        result = self.runner(["schtasks", "/delete", "/tn", name, "/f"], merge_stderr=True)
        self._check(result, f"delete task '{name}'")
        logger.info(f"Deleted scheduled task: {name}")
        return [name]

    def deletion_candidates(self) -> list[str]:
        return [task.task_name for task in self.list_parsed().tasks]


def get_manager(os_name: str | None = None, runner: Runner | None = None) -> SystemCronManager:
    """Build the adapter for ``os_name`` (the host OS by default)."""
    if os_name is None:
        os_name = detect_os_name()

    family = classify_os(os_name)
    logger.info(f"Using the {family.value} scheduler for {os_name}")
    if family is OSFamily.WINDOWS:
        return WindowsCronManager(os_name, runner)
    return UnixCronManager(os_name, runner)
