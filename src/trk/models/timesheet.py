"""
Pydantic models for the persisted timesheet.

A timesheet belongs to one repository and one user. It is split into
sessions of work; each session collects the set of branches checked out
while it was running. Every branch visit is also appended to a flat log.
"""

from datetime import datetime, timedelta

from pydantic import BaseModel, Field, field_serializer

from trk.models.visit import VisitEvent

# Sessions and timesheets always span at least one second.
MIN_SPAN = timedelta(seconds=1)


class Session(BaseModel):
    """A span of work on the repository."""

    start: datetime = Field(default_factory=datetime.now)
    end: datetime | None = Field(default=None, description="Last known activity")
    running: bool = Field(default=True)
    branches: set[str] = Field(
        default_factory=set,
        description="Branches checked out while the session ran",
    )

    def model_post_init(self, __context) -> None:
        if self.end is None:
            self.end = self.start + MIN_SPAN

    def add_branch(self, name: str, when: datetime | None = None) -> bool:
        """Add a branch if the session is running. Returns True if added."""
        if not self.running:
            return False
        self.branches.add(name)
        self.end = max(self.end, when or datetime.now())
        return True

    def finalize(self, when: datetime | None = None) -> None:
        """Stop the session. Finalizing twice keeps the first end time."""
        if not self.running:
            return
        self.running = False
        self.end = (when or datetime.now()) + MIN_SPAN

    @field_serializer("branches")
    def _sorted_branches(self, branches: set[str]) -> list[str]:
        return sorted(branches)


class Timesheet(BaseModel):
    """Persistent storage for sessions and branch visits."""

    version: str = Field(default="1.0", description="Storage format version")
    user: str = Field(..., min_length=1, description="Author the sheet belongs to")
    start: datetime = Field(default_factory=datetime.now)
    end: datetime | None = Field(default=None)
    sessions: list[Session] = Field(default_factory=list)
    visits: list[VisitEvent] = Field(
        default_factory=list,
        description="Every recorded branch visit, oldest first",
    )

    def model_post_init(self, __context) -> None:
        if self.end is None:
            self.end = self.start + MIN_SPAN

    @property
    def last_session(self) -> Session | None:
        return self.sessions[-1] if self.sessions else None

    def record_visit(self, visit: VisitEvent, max_visits: int | None = None) -> None:
        """Log a visit and attach the branch to the running session, if any."""
        self.visits.append(visit)
        if max_visits is not None and len(self.visits) > max_visits:
            self.visits = self.visits[-max_visits:]

        session = self.last_session
        if session is not None:
            session.add_branch(visit.branch_name, visit.timestamp)

        # A backdated visit never moves the end of the sheet backwards.
        self.end = max(self.end, visit.timestamp + MIN_SPAN)
