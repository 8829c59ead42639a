"""mfc - personal command-line assistant with a cross-platform cron adapter."""

__version__ = "0.1.0"

from mfc.errors import (
    CronError,
    InvalidScheduleFormat,
    NoAccessToScheduleFolder,
    SubprocessExecutionFailure,
    TaskParseFailure,
    UnsupportedOperatingSystem,
)
from mfc.models import OSFamily, ParseResult, ScheduleSpec, UnixTask, WindowsTask
from mfc.manager import (
    SystemCronManager,
    UnixCronManager,
    WindowsCronManager,
    classify_os,
    detect_os_name,
    get_manager,
)

__all__ = [
    "CronError",
    "InvalidScheduleFormat",
    "NoAccessToScheduleFolder",
    "SubprocessExecutionFailure",
    "TaskParseFailure",
    "UnsupportedOperatingSystem",
    "OSFamily",
    "ParseResult",
    "ScheduleSpec",
    "UnixTask",
    "WindowsTask",
    "SystemCronManager",
    "UnixCronManager",
    "WindowsCronManager",
    "classify_os",
    "detect_os_name",
    "get_manager",
]
