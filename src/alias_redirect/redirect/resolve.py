"""Turn an alias file into one of the four resolution qualities."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, TypeVar

from alias_redirect.codec.base import ReferenceCodec
from alias_redirect.errors import ReferenceCodecError, ResolutionTimeoutError
from alias_redirect.models import (
    CodecDiagnostic,
    PartialHint,
    Resolved,
    ResolutionResult,
    Undecodable,
    Unresolved,
)
from alias_redirect.redirect.report import RunReporter

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def call_with_timeout(func: Callable[[], T], timeout_sec: float | None, path: Path) -> T:
    """Run ``func`` on a daemon thread and give up after ``timeout_sec``.

    A call that overruns keeps running in the background; its result is discarded.
    """

    if timeout_sec is None:
        return func()

    outcome: dict[str, Any] = {}

    def _target() -> None:
        try:
            outcome["value"] = func()
        except BaseException as exc:  # re-raised on the calling thread
            outcome["error"] = exc

    worker = threading.Thread(target=_target, name=f"alias-resolve:{path.name}", daemon=True)
    worker.start()
    worker.join(timeout_sec)
    if worker.is_alive():
        raise ResolutionTimeoutError(path, timeout_sec)
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


def _diagnostic(alias_path: Path, operation: str, reason: str) -> CodecDiagnostic:
    return CodecDiagnostic(path=alias_path, operation=operation, reason=reason)


def resolve_alias(
    alias_path: Path,
    codec: ReferenceCodec,
    *,
    timeout_sec: float | None = None,
    reporter: RunReporter | None = None,
    logger: logging.Logger | None = None,
) -> ResolutionResult:
    """Decode ``alias_path`` and resolve it without mounting or prompting.

    When live resolution fails, the last-known path stored in the record is
    returned as a ``PartialHint``. Every non-``Resolved`` result, and every
    stale resolution, is reported as a diagnostic.
    """

    effective_logger = logger or LOGGER

    try:
        record = codec.read_record(alias_path)
    except ReferenceCodecError as exc:
        diagnostic = _diagnostic(alias_path, "get bookmark data", exc.reason)
        effective_logger.info("resolve.undecodable alias=%s reason=%s", alias_path, exc.reason)
        if reporter is not None:
            reporter.diagnostic(diagnostic.render())
        return Undecodable(diagnostic=diagnostic)

    try:
        target, stale = call_with_timeout(lambda: codec.resolve_record(record), timeout_sec, alias_path)
    except (ReferenceCodecError, ResolutionTimeoutError) as exc:
        reason = exc.reason if isinstance(exc, ReferenceCodecError) else f"timed out after {exc.timeout_sec:g}s"
        resolve_diagnostic = _diagnostic(alias_path, "resolve alias", reason)
        if reporter is not None:
            reporter.diagnostic(resolve_diagnostic.render())
    else:
        if stale:
            effective_logger.info("resolve.stale alias=%s target=%s", alias_path, target)
            if reporter is not None:
                reporter.diagnostic(f"{alias_path}: stale alias")
        return Resolved(path=target, stale=stale)

    try:
        hint = codec.path_hint(record)
    except ReferenceCodecError as exc:
        effective_logger.info("resolve.hint_failed alias=%s reason=%s", alias_path, exc.reason)
        hint = None

    if hint:
        effective_logger.info("resolve.partial_hint alias=%s hint=%s", alias_path, hint)
        return PartialHint(path=hint, diagnostic=resolve_diagnostic)

    hint_diagnostic = _diagnostic(alias_path, "get target path", resolve_diagnostic.reason)
    effective_logger.info("resolve.unresolved alias=%s reason=%s", alias_path, resolve_diagnostic.reason)
    if reporter is not None:
        reporter.diagnostic(hint_diagnostic.render())
    return Unresolved(diagnostic=hint_diagnostic)
