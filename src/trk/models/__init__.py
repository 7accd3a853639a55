"""
Pydantic models for trk.

This package contains data models for:
- Branch visits and post-checkout hook outcomes
- The persisted timesheet and its sessions
"""

from trk.models.timesheet import Session, Timesheet
from trk.models.visit import (
    CheckoutKind,
    HookOutcome,
    HookStatus,
    SkipReason,
    VisitEvent,
)

__all__ = [
    "CheckoutKind",
    "HookOutcome",
    "HookStatus",
    "SkipReason",
    "VisitEvent",
    "Session",
    "Timesheet",
]
