"""Operator-facing outcome lines for the success and error streams."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO


@dataclass
class RunReporter:
    """Writes one line per meaningful outcome.

    ``failure`` lines are always written. ``diagnostic`` lines carry codec
    detail and are dropped in quiet mode.
    """

    out: TextIO = field(default_factory=lambda: sys.stdout)
    err: TextIO = field(default_factory=lambda: sys.stderr)
    quiet: bool = False

    def success(self, message: str) -> None:
        print(message, file=self.out, flush=True)

    def failure(self, message: str) -> None:
        print(message, file=self.err, flush=True)

    def diagnostic(self, message: str) -> None:
        if not self.quiet:
            print(message, file=self.err, flush=True)

    def scan_error(self, directory: Path, error: OSError) -> None:
        self.failure(f"{directory}: failed to scan directory - {error}")


def attempt_message(alias_path: Path, old_target: str, new_target: str) -> str:
    return f"{alias_path}: redirecting alias - old target ({old_target}) -> new target ({new_target})"


def redirected_message(alias_path: Path, old_target: str, new_target: str) -> str:
    return f"{alias_path}: alias redirected - old target ({old_target}), new target ({new_target})"


def dry_run_message(alias_path: Path, old_target: str, new_target: str) -> str:
    return f"{alias_path}: would redirect alias - old target ({old_target}), new target ({new_target})"


def missing_target_message(alias_path: Path, new_target: str) -> str:
    return f"{alias_path}: failed to redirect alias - new target ({new_target}) does not exist"


def unresolvable_message(alias_path: Path, reason: str) -> str:
    return f"{alias_path}: failed to redirect alias - unable to resolve or extract existing target ({reason})"


def recreate_failed_message(alias_path: Path, new_target: str, reason: str) -> str:
    return f"{alias_path}: failed to recreate alias for new target ({new_target}) - {reason}; original alias kept"
