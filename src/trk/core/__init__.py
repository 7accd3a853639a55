"""
Core modules for trk.

This package contains the core business logic for:
- Resolving the checked-out branch
- Recording branch visits
- The post-checkout hook
- Timesheet persistence
"""

from trk.core.hook import PostCheckoutHook
from trk.core.recorder import (
    BranchVisitRecorder,
    CommandRecorder,
    InMemoryRecorder,
    InvalidBranchNameError,
    RecorderError,
    RecorderUnavailableError,
    TimesheetRecorder,
    validate_branch_name,
)
from trk.core.refs import (
    DetachedHeadError,
    NotAGitRepositoryError,
    RefResolutionError,
    RefResolver,
)
from trk.core.timesheet import (
    SessionError,
    TimesheetError,
    TimesheetExistsError,
    TimesheetNotInitializedError,
    TimesheetStore,
)

__all__ = [
    "PostCheckoutHook",
    "BranchVisitRecorder",
    "CommandRecorder",
    "InMemoryRecorder",
    "InvalidBranchNameError",
    "RecorderError",
    "RecorderUnavailableError",
    "TimesheetRecorder",
    "validate_branch_name",
    "DetachedHeadError",
    "NotAGitRepositoryError",
    "RefResolutionError",
    "RefResolver",
    "SessionError",
    "TimesheetError",
    "TimesheetExistsError",
    "TimesheetNotInitializedError",
    "TimesheetStore",
]
