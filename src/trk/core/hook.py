"""
git post-checkout hook.

git runs ``post-checkout <previous-ref> <new-ref> <flag>`` after every
checkout. Only branch checkouts (flag ``1``) that leave HEAD on a branch
are forwarded to the recorder; everything else is a silent no-op.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from trk.core.recorder import BranchVisitRecorder, RecorderError
from trk.core.refs import RefResolutionError, RefResolver
from trk.models.visit import CheckoutKind, HookOutcome, SkipReason

logger = logging.getLogger(__name__)


class PostCheckoutHook:
    """Forwards branch checkouts to a BranchVisitRecorder."""

    def __init__(
        self,
        recorder: BranchVisitRecorder,
        resolve_branch: Optional[Callable[[], str]] = None,
        repo_path: Optional[Path] = None,
    ):
        """
        Args:
            recorder: Where branch visits go.
            resolve_branch: Returns the checked-out branch or raises
                RefResolutionError. Defaults to resolving HEAD of the
                repository at ``repo_path`` with GitPython.
            repo_path: Repository to inspect. Defaults to current directory.
        """
        self.recorder = recorder
        self.repo_path = repo_path
        self._resolve_branch = resolve_branch or self._resolve_head

    def _resolve_head(self) -> str:
        return RefResolver(self.repo_path).resolve_branch()

    def handle(self, previous_ref: str, new_ref: str, flag: str) -> HookOutcome:
        """
        Run the hook for one checkout.

        Args:
            previous_ref: Ref of the previous HEAD.
            new_ref: Ref of the new HEAD.
            flag: ``1`` for a branch checkout, ``0`` for a file checkout.

        Returns:
            HookOutcome: skipped for file checkouts (exit 0) and detached
            HEAD (exit 1), recorded on success, failed if the recorder raised.
        """
        if flag != CheckoutKind.BRANCH.value:
            logger.debug(f"File checkout ({previous_ref[:7]}..{new_ref[:7]}), nothing to record")
            return HookOutcome.skipped(SkipReason.FILE_CHECKOUT, exit_code=0)

        try:
            branch = self._resolve_branch()
        except RefResolutionError as e:
            logger.debug(f"No symbolic ref for HEAD: {e}")
            return HookOutcome.skipped(SkipReason.DETACHED_HEAD, exit_code=1)

        try:
            self.recorder.record_visit(branch)
        except RecorderError as e:
            logger.debug(f"Could not record visit of {branch}: {e}")
            return HookOutcome.failed(branch, str(e))

        logger.info(f"Recorded checkout of {branch}")
        return HookOutcome.recorded(branch)
