"""Small IO helpers for the timesheet store.

Provides atomic_write_text() which writes to a temp file in the same
filesystem and atomically replaces the destination.

Also provides cross-platform advisory locking via file_lock(), used to
serialize hooks firing concurrently in several worktrees of one repository.
"""
from __future__ import annotations

import logging
import os
import sys
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

logger = logging.getLogger(__name__)


@contextmanager
def file_lock(file_handle: IO, exclusive: bool = False) -> Iterator[None]:
    """Cross-platform advisory file lock context manager.

    On Unix, uses fcntl.flock with LOCK_SH or LOCK_EX.
    On Windows, uses msvcrt.locking on the first byte; msvcrt has no
    shared mode, so every lock is exclusive there.
    If locking is unavailable or fails, continues without locking.

    Usage:
        with open(lock_path, "a") as f:
            with file_lock(f, exclusive=True):
                ...
    """
    locked = False

    try:
        if sys.platform == "win32":
            try:
                import msvcrt

                msvcrt.locking(file_handle.fileno(), msvcrt.LK_LOCK, 1)
                locked = True
            except OSError:
                logger.debug(f"Could not lock {getattr(file_handle, 'name', file_handle)}")
        else:
            try:
                import fcntl

                fcntl.flock(file_handle, fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
                locked = True
            except OSError:
                logger.debug(f"Could not lock {getattr(file_handle, 'name', file_handle)}")

        yield

    finally:
        if locked:
            try:
                if sys.platform == "win32":
                    import msvcrt

                    msvcrt.locking(file_handle.fileno(), msvcrt.LK_UNLCK, 1)
                else:
                    import fcntl

                    fcntl.flock(file_handle, fcntl.LOCK_UN)
            except OSError:
                pass


@contextmanager
def locked_path(path: str | Path, exclusive: bool = False) -> Iterator[None]:
    """Hold a lock on a sidecar ``<path>.lock`` file.

    The data file itself is swapped out by os.replace() on every write, so
    the lock lives on a separate file that is never replaced.
    """
    lock_path = Path(f"{path}.lock")
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path, "a+") as handle:
        with file_lock(handle, exclusive=exclusive):
            yield


def atomic_write_text(path: str | Path, data: str, perms: int = 0o644) -> None:
    """Atomically write text content to path.

    Steps:
    - Ensure parent directory exists
    - Write to a NamedTemporaryFile in the same directory
    - fsync the temp file
    - os.replace() to move into place atomically
    - chmod the target path to perms

    If os.replace() fails, the temp file is cleaned up before re-raising.
    """
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)

    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            dir=str(dest.parent),
            prefix=f".{dest.name}.",
            delete=False,
            encoding="utf-8",
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())

        os.replace(tmp_name, dest)
        tmp_name = None

        try:
            os.chmod(dest, perms)
        except PermissionError:
            logger.warning(
                f"Could not set permissions {oct(perms)} on {dest}. "
                f"File was written with default permissions."
            )
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
