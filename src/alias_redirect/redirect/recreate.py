"""Replace an alias file with a verified record bound to a new target."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from alias_redirect.codec.base import ReferenceCodec
from alias_redirect.errors import ReferenceCodecError, ResolutionTimeoutError
from alias_redirect.redirect.resolve import call_with_timeout
from alias_redirect.utils.paths import atomic_temp_path

LOGGER = logging.getLogger(__name__)


def _same_location(left: str, right: str) -> bool:
    return os.path.realpath(left) == os.path.realpath(right)


def recreate_alias(
    alias_path: Path,
    new_target: str,
    codec: ReferenceCodec,
    *,
    timeout_sec: float | None = None,
    logger: logging.Logger | None = None,
) -> Path:
    """Write a record for ``new_target`` beside ``alias_path`` and rename it into place.

    The original file is only replaced once the new record has been read
    back and resolved to ``new_target``. On any failure the temporary file
    is removed, the original is left as it was, and ``ReferenceCodecError``
    is raised.
    """

    effective_logger = logger or LOGGER
    record = codec.create_record(new_target)

    temp_path = atomic_temp_path(alias_path)
    try:
        codec.write_record(record, temp_path)
        written = codec.read_record(temp_path)
        try:
            resolved, _ = call_with_timeout(lambda: codec.resolve_record(written), timeout_sec, temp_path)
        except ResolutionTimeoutError as exc:
            raise ReferenceCodecError(alias_path, "verify new alias", str(exc)) from exc
        if not _same_location(resolved, new_target):
            raise ReferenceCodecError(
                alias_path,
                "verify new alias",
                f"new record resolves to {resolved} instead of {new_target}",
            )
        try:
            os.replace(temp_path, alias_path)
        except OSError as exc:
            raise ReferenceCodecError(alias_path, "replace alias file", str(exc)) from exc
    finally:
        if os.path.lexists(temp_path):
            temp_path.unlink()

    effective_logger.info("recreate.replaced alias=%s new_target=%s", alias_path, new_target)
    return alias_path
