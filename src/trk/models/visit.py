"""
Pydantic models for branch visits and post-checkout hook outcomes.

This module provides data models for:
- A single recorded visit of a branch
- The kind of checkout git reports to the hook
- The tagged result of running the hook
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class CheckoutKind(str, Enum):
    """Value of the third post-checkout argument."""

    FILE = "0"
    BRANCH = "1"


class HookStatus(str, Enum):
    """What the post-checkout hook ended up doing."""

    SKIPPED = "skipped"
    RECORDED = "recorded"
    FAILED = "failed"


class SkipReason(str, Enum):
    """Why the hook returned without recording anything."""

    FILE_CHECKOUT = "file_checkout"
    DETACHED_HEAD = "detached_head"


class VisitEvent(BaseModel):
    """Record of a branch being checked out."""

    branch_name: str = Field(..., min_length=1, description="Short name of the branch")
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the branch was checked out",
    )


class HookOutcome(BaseModel):
    """Result of a single post-checkout hook run."""

    status: HookStatus = Field(..., description="Skipped, recorded or failed")
    reason: SkipReason | None = Field(
        default=None,
        description="Why the hook skipped (None unless skipped)",
    )
    branch_name: str | None = Field(
        default=None,
        description="Branch handed to the recorder, if any",
    )
    error: str | None = Field(
        default=None,
        description="Recorder error message (None unless failed)",
    )
    exit_code: int = Field(default=0, description="Process exit code for the hook")

    @classmethod
    def skipped(cls, reason: SkipReason, exit_code: int = 0) -> "HookOutcome":
        return cls(status=HookStatus.SKIPPED, reason=reason, exit_code=exit_code)

    @classmethod
    def recorded(cls, branch_name: str) -> "HookOutcome":
        return cls(status=HookStatus.RECORDED, branch_name=branch_name)

    @classmethod
    def failed(cls, branch_name: str, error: str) -> "HookOutcome":
        return cls(
            status=HookStatus.FAILED,
            branch_name=branch_name,
            error=error,
            exit_code=1,
        )
