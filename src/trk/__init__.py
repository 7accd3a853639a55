"""
trk - branch visit tracking for git repositories.

This package records which branches are checked out, driven by a git
post-checkout hook, into a per-repository timesheet.
"""

__version__ = "0.1.0"

from trk.config import Config, load_config

__all__ = [
    "__version__",
    "Config",
    "load_config",
]
