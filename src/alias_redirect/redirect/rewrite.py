"""Root prefix substitution for alias target paths."""

from __future__ import annotations

from alias_redirect.models import RewriteOutcome, Rewritten, Unchanged


def rewrite_path(path: str, search: str, replace: str) -> RewriteOutcome:
    """Replace the first literal, case-sensitive occurrence of ``search`` in ``path``."""

    if search == "" or search not in path:
        return Unchanged()
    return Rewritten(new_path=path.replace(search, replace, 1))
