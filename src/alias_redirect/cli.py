"""Typer CLI entrypoint for alias_redirect."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
import yaml

from alias_redirect.codec import ReferenceCodec, build_platform_codec
from alias_redirect.config import AppSettings, load_settings
from alias_redirect.errors import RootNotScannableError, UnsupportedPlatformError
from alias_redirect.logging_utils import configure_logging
from alias_redirect.models import PartialHint, Resolved, Undecodable, Unresolved
from alias_redirect.redirect.engine import RedirectRunOptions, run_redirect
from alias_redirect.redirect.report import RunReporter
from alias_redirect.redirect.resolve import resolve_alias
from alias_redirect.scan.discover import check_root, scan_candidates

app = typer.Typer(
    add_completion=False,
    help="Redirect Finder aliases whose targets moved to a new root path.",
    no_args_is_help=True,
)

CONFIG_FILE_OPTION = typer.Option(
    None,
    "--config-file",
    help="Optional settings YAML path.",
    exists=False,
    file_okay=True,
    dir_okay=False,
    readable=True,
)


def _load_and_optionally_configure_logger(
    config_file: Path | None,
    configure: bool,
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file)
    if configure:
        logger = configure_logging(settings.paths.logs_root / "alias_redirect.log")
    else:
        logger = logging.getLogger("alias_redirect")
    return settings, logger


def _build_codec(logger: logging.Logger) -> ReferenceCodec:
    try:
        return build_platform_codec(logger=logger)
    except UnsupportedPlatformError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command("show-config")
def show_config(config_file: Path | None = CONFIG_FILE_OPTION) -> None:
    """Print the effective configuration after env overrides."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    rendered = yaml.safe_dump(settings.as_dict(), sort_keys=False)
    typer.echo(rendered)


@app.command("scan")
def scan(
    root: Path | None = typer.Argument(None, help="Directory or alias file; defaults to the configured root."),
    include_packages: bool | None = typer.Option(
        None,
        "--include-packages/--skip-packages",
        help="Descend into package directories such as .app bundles.",
    ),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """List alias files under the root without changing anything."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    scan_config = settings.scan_config(root_path=root, include_package_contents=include_packages)
    codec = _build_codec(logger)
    try:
        check_root(scan_config.root_path, codec)
    except RootNotScannableError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    reporter = RunReporter()
    found = 0
    for alias_path in scan_candidates(scan_config, codec, on_error=reporter.scan_error, logger=logger):
        typer.echo(str(alias_path))
        found += 1
    logger.info("scan.complete root=%s found=%s", scan_config.root_path, found)


@app.command("resolve")
def resolve(
    alias_file: Path = typer.Argument(..., help="Alias file to resolve."),
    timeout: float | None = typer.Option(None, "--timeout", min=0.001, help="Resolution timeout in seconds."),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Show how a single alias file currently resolves."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    codec = _build_codec(logger)
    result = resolve_alias(
        alias_file,
        codec,
        timeout_sec=timeout or settings.resolution.timeout_sec,
        logger=logger,
    )
    if isinstance(result, Resolved):
        typer.echo(f"resolved: {result.path}")
        typer.echo(f"stale: {str(result.stale).lower()}")
    elif isinstance(result, PartialHint):
        typer.echo(f"partial_hint: {result.path}")
        typer.echo(f"reason: {result.diagnostic.reason}")
    elif isinstance(result, Unresolved):
        typer.echo("unresolved")
        typer.echo(f"reason: {result.diagnostic.reason}")
    elif isinstance(result, Undecodable):
        typer.echo("undecodable")
        typer.echo(f"reason: {result.diagnostic.reason}")


@app.command("redirect")
def redirect(
    root: Path | None = typer.Argument(None, help="Directory or alias file; defaults to the configured root."),
    search: str | None = typer.Argument(None, help="Old target root to search for in alias targets."),
    replace: str | None = typer.Argument(None, help="New target root to substitute."),
    include_packages: bool | None = typer.Option(
        None,
        "--include-packages/--skip-packages",
        help="Descend into package directories such as .app bundles.",
    ),
    quiet: bool | None = typer.Option(None, "--quiet/--verbose", help="Suppress codec diagnostics."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report outcomes without writing aliases or labels."),
    timeout: float | None = typer.Option(None, "--timeout", min=0.001, help="Resolution timeout in seconds."),
    summary_dir: Path | None = typer.Option(
        None,
        "--summary-dir",
        file_okay=False,
        dir_okay=True,
        help="Write a JSON run summary into this directory.",
    ),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Redirect aliases whose targets live under SEARCH to REPLACE."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    if search is not None and search == "":
        raise typer.BadParameter("search must not be empty.", param_hint="SEARCH")

    scan_config = settings.scan_config(root_path=root, include_package_contents=include_packages)
    redirect_config = settings.redirect_config(
        root_path=root,
        search_prefix=search,
        replace_prefix=replace,
    )
    options = RedirectRunOptions(
        dry_run=dry_run,
        resolution_timeout_sec=timeout or settings.resolution.timeout_sec,
        summary_dir=summary_dir or settings.reporting.summary_dir,
    )
    reporter = RunReporter(quiet=settings.reporting.quiet if quiet is None else quiet)
    codec = _build_codec(logger)

    try:
        result = run_redirect(
            scan_config,
            redirect_config,
            codec,
            options=options,
            reporter=reporter,
            logger=logger,
        )
    except RootNotScannableError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not reporter.quiet:
        counts = result.summary["status_counts"]
        typer.echo(
            "run_id: {run_id} found: {found} redirected: {redirected} skipped: {skipped} "
            "unresolvable: {unresolvable} missing_target: {missing} errors: {errors}".format(
                run_id=result.run_id,
                found=result.summary["aliases_found_total"],
                redirected=counts["redirected"],
                skipped=counts["skipped"],
                unresolvable=counts["labeled_unresolvable"],
                missing=counts["labeled_missing_target"],
                errors=counts["codec_error"],
            )
        )
    if result.summary_path is not None:
        typer.echo(f"summary_path: {result.summary_path}")


def main() -> None:
    """CLI script entrypoint."""

    app()


if __name__ == "__main__":
    main()
