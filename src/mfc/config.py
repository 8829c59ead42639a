"""Configuration and constants for mfc."""

OS_NAME_ENV = "MFC_OS_NAME"

UNIX_LIST_COMMAND = ["crontab", "-l"]
UNIX_WRITE_COMMAND = ["crontab", "-"]
WINDOWS_LIST_COMMAND = ["schtasks", "/query", "/fo", "LIST"]

SCHEDULE_PREFIX = "every:"
REBOOT_MARKER = "@reboot"

WINDOWS_REQUIRED_FIELDS = ("TaskName", "Next Run Time", "Status", "Logon Mode")
WINDOWS_NO_ACCESS_NOTICE = (
    "There are no scheduled tasks presently available at your access level."
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
