"""Shared fakes for the native scheduler tools."""

import pytest

from mfc.executor import ExecutionResult
from mfc.manager import UnixCronManager, WindowsCronManager


def ok(stdout: str = "") -> ExecutionResult:
    return ExecutionResult(success=True, exit_code=0, stdout=stdout, stderr="")


def failed(message: str, exit_code: int = 1) -> ExecutionResult:
    return ExecutionResult(success=False, exit_code=exit_code, stdout=message, stderr="")


class FakeCrontab:
    """Stands in for ``crontab -l`` / ``crontab -`` with an in-memory table."""

    def __init__(self, lines=None, installed=True):
        self.lines = list(lines or [])
        self.installed = installed
        self.fail_writes = False
        self.calls = []

    def __call__(self, command, input=None, merge_stderr=False, shell=False):
        self.calls.append({"command": command, "input": input, "merge_stderr": merge_stderr, "shell": shell})
        args = list(command)

        if args == ["crontab", "-l"]:
            if not self.installed:
                message = "no crontab for tester\n"
                if merge_stderr:
                    return ExecutionResult(success=False, exit_code=1, stdout=message, stderr="")
                return ExecutionResult(success=False, exit_code=1, stdout="", stderr=message)
            return ok("".join(f"{line}\n" for line in self.lines))

        if args == ["crontab", "-"]:
            if self.fail_writes:
                return failed("crontab: installing new crontab failed\n")
            self.lines = input.splitlines()
            self.installed = True
            return ok()

        raise AssertionError(f"unexpected command: {command}")

    @property
    def writes(self):
        return [c for c in self.calls if list(c["command"]) == ["crontab", "-"]]


class FakeRunner:
    """Records every invocation and answers from a canned response table."""

    def __init__(self, responses=None, default=None):
        self.responses = responses or {}
        self.default = default or ok()
        self.calls = []

    def __call__(self, command, input=None, merge_stderr=False, shell=False):
        self.calls.append({"command": command, "input": input, "merge_stderr": merge_stderr, "shell": shell})
        key = command if isinstance(command, str) else " ".join(command)
        response = self.responses.get(key, self.default)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def crontab():
    return FakeCrontab()


@pytest.fixture
def unix_manager(crontab):
    return UnixCronManager("Linux", crontab)


@pytest.fixture
def windows_runner():
    return FakeRunner()


@pytest.fixture
def windows_manager(windows_runner):
    return WindowsCronManager("Windows 11", windows_runner)
