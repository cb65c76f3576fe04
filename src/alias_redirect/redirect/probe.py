"""Existence checks for candidate alias targets."""

from __future__ import annotations

import os


def target_exists(path: str) -> bool:
    """Return whether ``path`` currently exists, following symlinks."""

    return os.path.exists(path)
