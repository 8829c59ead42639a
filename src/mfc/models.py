"""Data models for the scheduled-task adapter."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, field_validator

from mfc.config import SCHEDULE_PREFIX
from mfc.errors import InvalidScheduleFormat, TaskParseFailure


class OSFamily(str, Enum):
    UNIX_LIKE = "unix-like"
    WINDOWS = "windows"


_UNIT_SECONDS = {
    "d": 86400.0,
    "h": 3600.0,
    "m": 60.0,
    "s": 1.0,
    "ms": 1e-3,
    "us": 1e-6,
    "ns": 1e-9,
}

_COMPACT_PART = r"(\d+(?:\.\d+)?)\s*(ms|us|ns|d|h|m|s)"
_COMPACT_RE = re.compile(rf"(?:\s*{_COMPACT_PART})+\s*")
_COMPACT_PART_RE = re.compile(_COMPACT_PART)
_UNIT_ORDER = list(_UNIT_SECONDS)
_ISO_RE = re.compile(
    r"P(?:(\d+)D)?"
    r"(?:T(?:(\d+(?:\.\d+)?)H)?(?:(\d+(?:\.\d+)?)M)?(?:(\d+(?:\.\d+)?)S)?)?",
    re.IGNORECASE,
)


def parse_duration(text: str) -> timedelta:
    """Parse a duration like ``30m``, ``1h 30m``, ``1.5h`` or ``PT30M``.

    Compact units must run from largest to smallest, each used once.
    """
    value = text.strip()

    try:
        iso = _ISO_RE.fullmatch(value)
        if iso and any(iso.groups()) and not value.upper().endswith("T"):
            days, hours, minutes, seconds = (float(g) if g else 0.0 for g in iso.groups())
            return timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds)

        if value and _COMPACT_RE.fullmatch(value):
            parts = _COMPACT_PART_RE.findall(value)
            ranks = [_UNIT_ORDER.index(unit) for _, unit in parts]
            if all(a < b for a, b in zip(ranks, ranks[1:])):
                total = sum(float(amount) * _UNIT_SECONDS[unit] for amount, unit in parts)
                return timedelta(seconds=total)
    except (OverflowError, ValueError) as e:
        raise InvalidScheduleFormat(f"Invalid duration: '{text}'") from e

    raise InvalidScheduleFormat(f"Invalid duration: '{text}'")


def duration_to_cron(duration: timedelta) -> str:
    # Minutes above 59 are written verbatim; nothing rolls over into the hour field.
    minutes = int(duration.total_seconds() // 60)
    return f"*/{minutes} * * * *"


def duration_to_windows(duration: timedelta) -> str:
    minutes = int(duration.total_seconds() // 60)
    return f"/sc MINUTE /mo {minutes}"


class ScheduleSpec(BaseModel):
    raw: str
    interval: timedelta

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v: timedelta) -> timedelta:
        if v <= timedelta(0):
            raise ValueError("Schedule interval must be positive")
        return v

    @classmethod
    def parse(cls, text: str) -> ScheduleSpec:
        """Parse ``every:<duration>`` into a schedule."""
        if not text.startswith(SCHEDULE_PREFIX):
            raise InvalidScheduleFormat(
                f"Invalid schedule format '{text}'. Use '{SCHEDULE_PREFIX}<duration>'."
            )

        remainder = text[len(SCHEDULE_PREFIX):]
        if not remainder.strip():
            raise InvalidScheduleFormat(
                f"Missing duration in '{text}'. Use '{SCHEDULE_PREFIX}<duration>'."
            )

        interval = parse_duration(remainder)
        if interval <= timedelta(0):
            raise InvalidScheduleFormat(f"Schedule duration must be positive: '{remainder}'")

        return cls(raw=text, interval=interval)

    @property
    def minutes(self) -> int:
        return int(self.interval.total_seconds() // 60)

    @property
    def is_sub_minute(self) -> bool:
        return self.minutes < 1

    def to_cron(self) -> str:
        return duration_to_cron(self.interval)

    def to_windows(self) -> str:
        return duration_to_windows(self.interval)


class UnixTask(BaseModel):
    schedule: str
    command: str

    def get_next_run(self, base_time: datetime | None = None) -> datetime | None:
        from croniter import croniter

        try:
            itr = croniter(self.schedule, base_time or datetime.now())
            return itr.get_next(datetime)
        except Exception:
            return None

    def to_dict(self) -> dict[str, Any]:
        next_run = self.get_next_run()
        return {
            "schedule": self.schedule,
            "command": self.command,
            "next_run": next_run.isoformat() if next_run else None,
        }


class WindowsTask(BaseModel):
    folder: str = ""
    host_name: str = ""
    task_name: str
    next_run_time: str
    status: str
    logon_mode: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "folder": self.folder,
            "host_name": self.host_name,
            "task_name": self.task_name,
            "next_run_time": self.next_run_time,
            "status": self.status,
            "logon_mode": self.logon_mode,
        }


T = TypeVar("T", UnixTask, WindowsTask)


@dataclass
class ParseResult(Generic[T]):
    tasks: list[T] = field(default_factory=list)
    warnings: list[TaskParseFailure] = field(default_factory=list)
