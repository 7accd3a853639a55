"""
Timesheet service backing ``trk``.

This module provides functionality to:
- Initialize a per-repository timesheet under ``.trk/``
- Begin and end work sessions
- Record branch visits into the running session and the visit log
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from trk.config import StorageConfig
from trk.core.refs import NotAGitRepositoryError, RefResolver
from trk.models.timesheet import Session, Timesheet
from trk.models.visit import VisitEvent
from trk.utils.io import atomic_write_text, locked_path

logger = logging.getLogger(__name__)


class TimesheetError(Exception):
    """Base exception for timesheet operations."""


class TimesheetNotInitializedError(TimesheetError):
    """Raised when no timesheet exists for the repository."""


class TimesheetExistsError(TimesheetError):
    """Raised when initializing a repository that already has a timesheet."""


class SessionError(TimesheetError):
    """Raised when a session cannot be started or ended."""


class TimesheetStore:
    """
    Loads and persists the timesheet of one repository.

    Every mutating operation runs as a locked read-modify-write, so hooks
    firing at the same time in several worktrees do not lose visits.
    """

    def __init__(self, root: Path, config: StorageConfig | None = None):
        self.config = config or StorageConfig()
        self.root = Path(root)
        self._path = self.root / self.config.directory / self.config.filename

    @classmethod
    def for_repository(
        cls,
        path: Optional[Path] = None,
        config: StorageConfig | None = None,
    ) -> "TimesheetStore":
        """
        Create a store rooted at the repository containing ``path``.

        Falls back to ``path`` itself (or the current directory) when it is
        not inside a git repository.
        """
        start = path or Path.cwd()
        try:
            root = RefResolver(start).repo_root
        except NotAGitRepositoryError:
            logger.debug(f"{start} is not in a git repository, using it as root")
            root = start
        return cls(root, config)

    @property
    def path(self) -> Path:
        return self._path

    def is_initialized(self) -> bool:
        return self._path.exists()

    def load(self) -> Timesheet:
        """
        Read the timesheet from disk.

        Raises:
            TimesheetNotInitializedError: If the file does not exist.
            TimesheetError: If the file cannot be read or parsed.
        """
        self._require_initialized()
        with locked_path(self._path):
            return self._read()

    def init(self, user: str | None = None) -> Timesheet:
        """
        Create an empty timesheet.

        Args:
            user: Author name. Defaults to ``git config user.name``.

        Raises:
            TimesheetExistsError: If a timesheet is already present.
            TimesheetError: If no user name is available.
        """
        name = user or self._git_author()
        if not name:
            raise TimesheetError(
                "No user name given and none found in git config. "
                "Run 'trk init <name>'."
            )

        with locked_path(self._path, exclusive=True):
            if self.is_initialized():
                raise TimesheetExistsError(
                    f"Timesheet is already initialized at {self._path}"
                )

            sheet = Timesheet(user=name)
            self._write(sheet)

        logger.info(f"Initialized timesheet for {name} at {self._path}")
        return sheet

    def begin_session(self) -> Session:
        """
        Start a new session.

        Raises:
            SessionError: If the last session is still running.
        """
        with self._transaction() as sheet:
            last = sheet.last_session
            if last is not None and last.running:
                raise SessionError("Last session is still running.")

            session = Session()
            sheet.sessions.append(session)

        logger.info(f"Began session at {session.start:%Y-%m-%d %H:%M}")
        return session

    def end_session(self) -> Session:
        """
        Finalize the last session.

        Ending a session that was already ended leaves it unchanged.

        Raises:
            SessionError: If there is no session yet.
        """
        with self._transaction() as sheet:
            session = sheet.last_session
            if session is None:
                raise SessionError("No session to finalize.")
            session.finalize()

        logger.info(f"Ended session started at {session.start:%Y-%m-%d %H:%M}")
        return session

    def add_branch(self, name: str, when: datetime | None = None) -> VisitEvent:
        """
        Record that ``name`` was checked out.

        The visit is always logged. The branch is also added to the last
        session when that session is running.

        Raises:
            TimesheetNotInitializedError: If no timesheet exists.
        """
        visit = VisitEvent(branch_name=name, timestamp=when or datetime.now())

        with self._transaction() as sheet:
            sheet.record_visit(visit, max_visits=self.config.max_visits)
            session = sheet.last_session

        if session is not None and session.running:
            logger.info(f"Recorded visit of {name} in running session")
        else:
            logger.debug(f"Recorded visit of {name} outside of a session")
        return visit

    @contextmanager
    def _transaction(self) -> Iterator[Timesheet]:
        """Load under an exclusive lock, yield, and save if no error was raised."""
        self._require_initialized()
        with locked_path(self._path, exclusive=True):
            sheet = self._read()
            yield sheet
            self._write(sheet)

    def _require_initialized(self) -> None:
        # Checked before locking so an untracked repository gets no .trk/ directory.
        if not self.is_initialized():
            raise TimesheetNotInitializedError(
                f"No timesheet at {self._path}. Run 'trk init' first."
            )

    def _read(self) -> Timesheet:
        self._require_initialized()
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
            return Timesheet.model_validate(data)
        except OSError as e:
            raise TimesheetError(f"Could not read {self._path}: {e}") from e
        except (json.JSONDecodeError, ValidationError) as e:
            raise TimesheetError(f"Timesheet at {self._path} is corrupt: {e}") from e

    def _write(self, sheet: Timesheet) -> None:
        """Persist the timesheet using an atomic write."""
        data = json.dumps(sheet.model_dump(mode="json"), indent=2)
        try:
            atomic_write_text(self._path, data)
        except OSError as e:
            raise TimesheetError(f"Could not write {self._path}: {e}") from e

    def _git_author(self) -> str | None:
        try:
            return RefResolver(self.root).author_name()
        except NotAGitRepositoryError:
            return None
