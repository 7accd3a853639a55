"""
Branch visit recorders.

A recorder takes the short name of a branch that was just checked out and
records the visit somewhere durable. The post-checkout hook only depends on
the BranchVisitRecorder protocol, so the backend can be:
- TimesheetRecorder: writes straight into the repository timesheet
- CommandRecorder: runs ``trk branch <name>`` as an external process
- InMemoryRecorder: keeps visits in a list, for tests
"""

import logging
import re
import subprocess
from typing import Protocol, runtime_checkable

from trk.core.timesheet import TimesheetError, TimesheetStore
from trk.models.visit import VisitEvent

logger = logging.getLogger(__name__)

DETACHED_HEAD = "HEAD"

# Characters git refuses anywhere in a ref name (see git-check-ref-format).
_FORBIDDEN_CHARS = re.compile(r"[\x00-\x20\x7f~^:?*\[\\]")


class RecorderError(Exception):
    """Base exception for recorder failures."""


class InvalidBranchNameError(RecorderError):
    """Raised when the branch name is empty or not a valid git branch name."""


class RecorderUnavailableError(RecorderError):
    """Raised when the recording backend cannot be reached."""


def validate_branch_name(name: str) -> str:
    """
    Check ``name`` against git's rules for branch short names.

    Args:
        name: Candidate branch name, e.g. ``feature/login``.

    Returns:
        The name, unchanged.

    Raises:
        InvalidBranchNameError: If the name is empty, the detached-HEAD
            sentinel, or not a valid ref name.
    """
    if not name:
        raise InvalidBranchNameError("Branch name must not be empty")
    if name == DETACHED_HEAD:
        raise InvalidBranchNameError("HEAD is not a branch (detached HEAD?)")

    problem = None
    if name.startswith("-"):
        problem = "must not start with '-'"
    elif name == "@":
        problem = "must not be '@'"
    elif _FORBIDDEN_CHARS.search(name):
        problem = "contains a forbidden character"
    elif ".." in name or "@{" in name:
        problem = "must not contain '..' or '@{'"
    elif name.startswith("/") or name.endswith("/") or "//" in name:
        problem = "has an empty path component"
    elif name.endswith("."):
        problem = "must not end with '.'"
    else:
        for component in name.split("/"):
            if component.startswith(".") or component.endswith(".lock"):
                problem = f"has an invalid component '{component}'"
                break

    if problem:
        raise InvalidBranchNameError(f"Invalid branch name '{name}': {problem}")
    return name


@runtime_checkable
class BranchVisitRecorder(Protocol):
    """Anything that can durably record a branch visit."""

    def record_visit(self, branch_name: str) -> VisitEvent:
        """
        Record that ``branch_name`` was just checked out.

        Raises:
            InvalidBranchNameError: If the name is not a valid branch name.
            RecorderUnavailableError: If the backend cannot be reached.
        """
        ...


class TimesheetRecorder:
    """Records visits into the repository's timesheet in-process."""

    def __init__(self, store: TimesheetStore):
        self.store = store

    def record_visit(self, branch_name: str) -> VisitEvent:
        validate_branch_name(branch_name)
        try:
            return self.store.add_branch(branch_name)
        except TimesheetError as e:
            raise RecorderUnavailableError(str(e)) from e


class CommandRecorder:
    """Records visits by running ``<command> branch <name>``."""

    def __init__(self, command: str = "trk", timeout_seconds: int = 10):
        self.command = command
        self.timeout_seconds = timeout_seconds

    def record_visit(self, branch_name: str) -> VisitEvent:
        validate_branch_name(branch_name)
        visit = VisitEvent(branch_name=branch_name)
        args = [self.command, "branch", branch_name]

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as e:
            raise RecorderUnavailableError(f"'{self.command}' was not found on PATH") from e
        except subprocess.TimeoutExpired as e:
            raise RecorderUnavailableError(
                f"'{' '.join(args)}' timed out after {self.timeout_seconds}s"
            ) from e

        if result.returncode != 0:
            detail = result.stderr.strip() or result.stdout.strip() or "command failed"
            raise RecorderUnavailableError(
                f"'{' '.join(args)}' exited with {result.returncode}: {detail}"
            )

        logger.debug(f"'{' '.join(args)}' succeeded")
        return visit


class InMemoryRecorder:
    """Keeps visits in memory."""

    def __init__(self) -> None:
        self.visits: list[VisitEvent] = []

    def record_visit(self, branch_name: str) -> VisitEvent:
        validate_branch_name(branch_name)
        visit = VisitEvent(branch_name=branch_name)
        self.visits.append(visit)
        return visit

    @property
    def branch_names(self) -> list[str]:
        return [v.branch_name for v in self.visits]
