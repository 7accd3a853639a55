"""
Pytest configuration and shared fixtures for trk tests.
"""

import subprocess
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from trk.config import StorageConfig
from trk.core.recorder import InMemoryRecorder
from trk.core.timesheet import TimesheetStore


def git(repo_path: Path, *args: str) -> subprocess.CompletedProcess:
    """Run a git command inside repo_path."""
    return subprocess.run(
        ["git", *args],
        cwd=repo_path,
        capture_output=True,
        text=True,
        check=True,
    )


@pytest.fixture
def temp_directory() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir).resolve()


@pytest.fixture
def git_repo(temp_directory: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository with one commit on 'main'."""
    repo_path = temp_directory / "test-repo"
    repo_path.mkdir()

    git(repo_path, "init")
    git(repo_path, "config", "user.email", "test@example.com")
    git(repo_path, "config", "user.name", "Test User")
    git(repo_path, "config", "commit.gpgsign", "false")

    readme = repo_path / "README.md"
    readme.write_text("# Test Repository\n")

    git(repo_path, "add", ".")
    git(repo_path, "commit", "-m", "Initial commit")
    git(repo_path, "branch", "-M", "main")

    yield repo_path


@pytest.fixture
def detached_repo(git_repo: Path) -> Path:
    """A git repository whose HEAD is detached at the initial commit."""
    git(git_repo, "checkout", "--detach")
    return git_repo


@pytest.fixture
def in_repo(git_repo: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from inside git_repo."""
    monkeypatch.chdir(git_repo)
    return git_repo


@pytest.fixture
def store(git_repo: Path) -> TimesheetStore:
    """An uninitialized timesheet store for git_repo."""
    return TimesheetStore(git_repo, StorageConfig())


@pytest.fixture
def initialized_store(store: TimesheetStore) -> TimesheetStore:
    """A timesheet store initialized for 'Test User'."""
    store.init("Test User")
    return store


@pytest.fixture
def recorder() -> InMemoryRecorder:
    """An in-memory recorder to observe hook calls."""
    return InMemoryRecorder()
