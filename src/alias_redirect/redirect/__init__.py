"""Alias redirect workflow."""

from alias_redirect.redirect.engine import RedirectRunOptions, RedirectRunResult, redirect_alias, run_redirect
from alias_redirect.redirect.labels import set_label
from alias_redirect.redirect.probe import target_exists
from alias_redirect.redirect.recreate import recreate_alias
from alias_redirect.redirect.report import RunReporter
from alias_redirect.redirect.resolve import call_with_timeout, resolve_alias
from alias_redirect.redirect.rewrite import rewrite_path

__all__ = [
    "RedirectRunOptions",
    "RedirectRunResult",
    "redirect_alias",
    "run_redirect",
    "set_label",
    "target_exists",
    "recreate_alias",
    "RunReporter",
    "call_with_timeout",
    "resolve_alias",
    "rewrite_path",
]
