"""Best-effort Finder label triage markers."""

from __future__ import annotations

import logging
from pathlib import Path

from alias_redirect.codec.base import ReferenceCodec
from alias_redirect.errors import ReferenceCodecError
from alias_redirect.models import LabelCode
from alias_redirect.redirect.report import RunReporter

LOGGER = logging.getLogger(__name__)


def set_label(
    path: Path,
    code: LabelCode,
    codec: ReferenceCodec,
    *,
    reporter: RunReporter | None = None,
    logger: logging.Logger | None = None,
) -> bool:
    """Attach ``code`` to ``path``; failures are reported and return False."""

    effective_logger = logger or LOGGER
    try:
        codec.set_label(path, code)
    except (ReferenceCodecError, OSError) as exc:
        reason = exc.reason if isinstance(exc, ReferenceCodecError) else str(exc)
        effective_logger.warning("labels.set_failed path=%s label=%s reason=%s", path, code.name, reason)
        if reporter is not None:
            reporter.diagnostic(f"{path}: failed to set label index to {int(code)} - {reason}")
        return False
    effective_logger.debug("labels.set path=%s label=%s", path, code.name)
    return True
