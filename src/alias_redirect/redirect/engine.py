"""Per-alias redirect workflow and whole-tree run orchestration."""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4

from alias_redirect.codec.base import ReferenceCodec
from alias_redirect.errors import ReferenceCodecError
from alias_redirect.models import (
    OUTCOME_STATUS_VALUES,
    AliasOutcome,
    LabelCode,
    OutcomeStatus,
    RedirectConfig,
    Resolved,
    ScanConfig,
    Undecodable,
    Unchanged,
    Unresolved,
)
from alias_redirect.redirect.labels import set_label
from alias_redirect.redirect.probe import target_exists
from alias_redirect.redirect.recreate import recreate_alias
from alias_redirect.redirect.report import (
    RunReporter,
    attempt_message,
    dry_run_message,
    missing_target_message,
    recreate_failed_message,
    redirected_message,
    unresolvable_message,
)
from alias_redirect.redirect.resolve import resolve_alias
from alias_redirect.redirect.rewrite import rewrite_path
from alias_redirect.scan.discover import check_root, scan_candidates
from alias_redirect.utils.paths import write_json_atomically

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RedirectRunOptions:
    """Runtime options for a redirect run."""

    dry_run: bool = False
    resolution_timeout_sec: float | None = 30.0
    summary_dir: Path | None = None
    progress_every: int = 100


@dataclass(frozen=True, slots=True)
class RedirectRunResult:
    """Return object for redirect run outcomes."""

    run_id: str
    outcomes: tuple[AliasOutcome, ...]
    summary: dict[str, Any]
    summary_path: Path | None

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)


def redirect_alias(
    alias_path: Path,
    config: RedirectConfig,
    codec: ReferenceCodec,
    *,
    reporter: RunReporter,
    timeout_sec: float | None = None,
    dry_run: bool = False,
    logger: logging.Logger | None = None,
) -> AliasOutcome:
    """Run resolve, rewrite, probe, and recreate-or-label for one alias file."""

    effective_logger = logger or LOGGER
    resolution = resolve_alias(
        alias_path,
        codec,
        timeout_sec=timeout_sec,
        reporter=reporter,
        logger=effective_logger,
    )

    if isinstance(resolution, (Unresolved, Undecodable)):
        reason = resolution.diagnostic.reason
        label_applied = None if dry_run else set_label(alias_path, LabelCode.GRAY, codec, reporter=reporter)
        reporter.failure(unresolvable_message(alias_path, reason))
        return AliasOutcome(
            alias_path=alias_path,
            status="labeled_unresolvable",
            detail=resolution.diagnostic.render(),
            label=LabelCode.GRAY,
            label_applied=label_applied,
            dry_run=dry_run,
        )

    old_target = resolution.path
    stale = isinstance(resolution, Resolved) and resolution.stale
    rewrite = rewrite_path(old_target, config.search_prefix, config.replace_prefix)
    if isinstance(rewrite, Unchanged) or rewrite.new_path == old_target:
        effective_logger.debug("redirect.skipped alias=%s target=%s", alias_path, old_target)
        return AliasOutcome(
            alias_path=alias_path,
            status="skipped",
            old_target=old_target,
            stale=stale,
            dry_run=dry_run,
        )

    new_target = rewrite.new_path
    reporter.success(attempt_message(alias_path, old_target, new_target))

    if not target_exists(new_target):
        label_applied = None if dry_run else set_label(alias_path, LabelCode.RED, codec, reporter=reporter)
        reporter.failure(missing_target_message(alias_path, new_target))
        return AliasOutcome(
            alias_path=alias_path,
            status="labeled_missing_target",
            old_target=old_target,
            new_target=new_target,
            detail=f"new target does not exist: {new_target}",
            label=LabelCode.RED,
            label_applied=label_applied,
            stale=stale,
            dry_run=dry_run,
        )

    if dry_run:
        reporter.success(dry_run_message(alias_path, old_target, new_target))
        return AliasOutcome(
            alias_path=alias_path,
            status="redirected",
            old_target=old_target,
            new_target=new_target,
            stale=stale,
            dry_run=True,
        )

    try:
        recreate_alias(alias_path, new_target, codec, timeout_sec=timeout_sec, logger=effective_logger)
    except (ReferenceCodecError, OSError) as exc:
        reason = exc.reason if isinstance(exc, ReferenceCodecError) else str(exc)
        effective_logger.warning("redirect.recreate_failed alias=%s new_target=%s reason=%s", alias_path, new_target, reason)
        reporter.failure(recreate_failed_message(alias_path, new_target, reason))
        return AliasOutcome(
            alias_path=alias_path,
            status="codec_error",
            old_target=old_target,
            new_target=new_target,
            detail=reason,
            stale=stale,
        )

    reporter.success(redirected_message(alias_path, old_target, new_target))
    return AliasOutcome(
        alias_path=alias_path,
        status="redirected",
        old_target=old_target,
        new_target=new_target,
        stale=stale,
    )


def _status_counts(outcomes: list[AliasOutcome]) -> dict[str, int]:
    counts = Counter(outcome.status for outcome in outcomes)
    return {status: counts.get(status, 0) for status in OUTCOME_STATUS_VALUES}


def run_redirect(
    scan_config: ScanConfig,
    redirect_config: RedirectConfig,
    codec: ReferenceCodec,
    *,
    options: RedirectRunOptions | None = None,
    reporter: RunReporter | None = None,
    logger: logging.Logger | None = None,
) -> RedirectRunResult:
    """Redirect every alias found under the configured root.

    Raises ``RootNotScannableError`` before any work when the root cannot
    produce candidates. Individual alias failures never stop the run.
    """

    effective_logger = logger or LOGGER
    run_options = options or RedirectRunOptions()
    run_reporter = reporter or RunReporter()
    progress_every = max(1, run_options.progress_every)

    if scan_config.root_path != redirect_config.root_path:
        raise ValueError(
            f"Scan root ({scan_config.root_path}) and redirect root ({redirect_config.root_path}) must match."
        )
    check_root(scan_config.root_path, codec)

    run_id = f"redirect-run-{uuid4().hex[:12]}"
    started_ts = datetime.now(timezone.utc)
    started_mono = time.monotonic()
    effective_logger.info(
        "redirect_run.start run_id=%s root=%s search=%s replace=%s include_packages=%s dry_run=%s",
        run_id,
        scan_config.root_path,
        redirect_config.search_prefix,
        redirect_config.replace_prefix,
        scan_config.include_package_contents,
        run_options.dry_run,
    )

    scan_errors: list[dict[str, str]] = []

    def _on_scan_error(directory: Path, error: OSError) -> None:
        scan_errors.append({"directory": str(directory), "error": str(error)})
        run_reporter.scan_error(directory, error)

    outcomes: list[AliasOutcome] = []
    for processed_idx, alias_path in enumerate(
        scan_candidates(scan_config, codec, on_error=_on_scan_error, logger=effective_logger),
        start=1,
    ):
        try:
            outcome = redirect_alias(
                alias_path,
                redirect_config,
                codec,
                reporter=run_reporter,
                timeout_sec=run_options.resolution_timeout_sec,
                dry_run=run_options.dry_run,
                logger=effective_logger,
            )
        except Exception as exc:
            effective_logger.exception("redirect_run.alias_failed alias=%s", alias_path)
            run_reporter.failure(f"{alias_path}: failed to redirect alias - {exc}")
            outcome = AliasOutcome(
                alias_path=alias_path,
                status="codec_error",
                detail=str(exc),
                dry_run=run_options.dry_run,
            )
        outcomes.append(outcome)

        if processed_idx % progress_every == 0:
            effective_logger.info(
                "redirect_run.progress processed=%s counts=%s elapsed_sec=%.2f",
                processed_idx,
                _status_counts(outcomes),
                time.monotonic() - started_mono,
            )

    finished_ts = datetime.now(timezone.utc)
    status_counts = _status_counts(outcomes)
    summary: dict[str, Any] = {
        "run_id": run_id,
        "started_ts": started_ts.isoformat(),
        "finished_ts": finished_ts.isoformat(),
        "duration_sec": round(time.monotonic() - started_mono, 3),
        "root_path": str(scan_config.root_path),
        "search_prefix": redirect_config.search_prefix,
        "replace_prefix": redirect_config.replace_prefix,
        "include_package_contents": scan_config.include_package_contents,
        "dry_run": run_options.dry_run,
        "aliases_found_total": len(outcomes),
        "status_counts": status_counts,
        "scan_errors": scan_errors,
        "needs_triage": [outcome.as_dict() for outcome in outcomes if outcome.status not in ("redirected", "skipped")],
    }

    summary_path: Path | None = None
    if run_options.summary_dir is not None:
        summary_path = write_json_atomically(
            summary,
            run_options.summary_dir / f"{run_id}_redirect_summary.json",
        )

    effective_logger.info(
        "redirect_run.complete run_id=%s found=%s counts=%s summary_path=%s",
        run_id,
        len(outcomes),
        status_counts,
        summary_path,
    )

    return RedirectRunResult(
        run_id=run_id,
        outcomes=tuple(outcomes),
        summary=summary,
        summary_path=summary_path,
    )
