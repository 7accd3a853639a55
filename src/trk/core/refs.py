"""Symbolic ref resolution for the checked-out repository."""

import logging
from pathlib import Path
from typing import Optional

from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError

logger = logging.getLogger(__name__)


class RefResolutionError(Exception):
    """Raised when HEAD does not point at a branch."""


class NotAGitRepositoryError(RefResolutionError):
    """Raised when the path is not inside a git repository."""


class DetachedHeadError(RefResolutionError):
    """Raised when HEAD points at a commit rather than a branch."""


class RefResolver:
    """Resolves HEAD of a repository to its branch short name."""

    def __init__(self, repo_path: Optional[Path] = None):
        """
        Initialize the RefResolver.

        Args:
            repo_path: Path inside the git repository. Defaults to current directory.

        Raises:
            NotAGitRepositoryError: If the path is not a git repository.
        """
        self.repo_path = repo_path or Path.cwd()
        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotAGitRepositoryError(
                f"Not a git repository: {self.repo_path}"
            ) from e

    @property
    def repo_root(self) -> Path:
        """Working tree root, or the git directory for a bare repository."""
        return Path(self.repo.working_tree_dir or self.repo.git_dir)

    def resolve_branch(self) -> str:
        """
        Resolve HEAD to the short name of the checked-out branch.

        Returns:
            Branch name, e.g. ``feature/login`` for ``refs/heads/feature/login``.

        Raises:
            DetachedHeadError: If HEAD is detached.
        """
        if self.repo.head.is_detached:
            raise DetachedHeadError(f"HEAD is detached in {self.repo_root}")

        try:
            branch = self.repo.active_branch.name
        except TypeError as e:
            raise DetachedHeadError(str(e)) from e

        logger.debug(f"HEAD resolves to {branch}")
        return branch

    def author_name(self) -> str | None:
        """Return ``user.name`` from git config, if set."""
        try:
            with self.repo.config_reader() as reader:
                name = reader.get_value("user", "name", default="")
        except OSError as e:
            logger.warning(f"Could not read git config: {e}")
            return None
        name = str(name).strip()
        return name or None
