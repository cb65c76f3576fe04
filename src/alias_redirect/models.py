"""Value objects shared by the scanner, the codec boundary, and the engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Literal, Union

OutcomeStatus = Literal[
    "redirected",
    "skipped",
    "labeled_unresolvable",
    "labeled_missing_target",
    "codec_error",
]
OUTCOME_STATUS_VALUES: tuple[OutcomeStatus, ...] = (
    "redirected",
    "skipped",
    "labeled_unresolvable",
    "labeled_missing_target",
    "codec_error",
)


class LabelCode(IntEnum):
    """Finder label index used as a triage marker."""

    NONE = 0
    GRAY = 1
    GREEN = 2
    PURPLE = 3
    BLUE = 4
    YELLOW = 5
    RED = 6
    ORANGE = 7


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Tree scan parameters for one run."""

    root_path: Path
    include_package_contents: bool = False


@dataclass(frozen=True, slots=True)
class RedirectConfig:
    """Root substitution parameters for one run."""

    root_path: Path
    search_prefix: str
    replace_prefix: str

    def __post_init__(self) -> None:
        if self.search_prefix == "":
            raise ValueError("search_prefix must not be empty.")


@dataclass(frozen=True, slots=True)
class CodecDiagnostic:
    """Structured description of a codec failure for one file."""

    path: Path
    operation: str
    reason: str

    def render(self) -> str:
        return f"{self.path}: {self.operation} failed - {self.reason}"


@dataclass(frozen=True, slots=True)
class Resolved:
    """The record resolved to a live target."""

    path: str
    stale: bool = False


@dataclass(frozen=True, slots=True)
class PartialHint:
    """Resolution failed but the record still stores a last-known path."""

    path: str
    diagnostic: CodecDiagnostic


@dataclass(frozen=True, slots=True)
class Unresolved:
    """Resolution failed and no path could be recovered."""

    diagnostic: CodecDiagnostic


@dataclass(frozen=True, slots=True)
class Undecodable:
    """The file could not be read as an alias record."""

    diagnostic: CodecDiagnostic


ResolutionResult = Union[Resolved, PartialHint, Unresolved, Undecodable]


@dataclass(frozen=True, slots=True)
class Unchanged:
    """The search prefix does not occur in the target path."""


@dataclass(frozen=True, slots=True)
class Rewritten:
    """The target path after prefix substitution."""

    new_path: str


RewriteOutcome = Union[Unchanged, Rewritten]


@dataclass(frozen=True, slots=True)
class AliasOutcome:
    """Terminal state of one candidate alias after the redirect workflow."""

    alias_path: Path
    status: OutcomeStatus
    old_target: str | None = None
    new_target: str | None = None
    detail: str | None = None
    label: LabelCode | None = None
    label_applied: bool | None = None
    stale: bool = False
    dry_run: bool = False

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""

        return {
            "alias_path": str(self.alias_path),
            "status": self.status,
            "old_target": self.old_target,
            "new_target": self.new_target,
            "detail": self.detail,
            "label": int(self.label) if self.label is not None else None,
            "label_applied": self.label_applied,
            "stale": self.stale,
            "dry_run": self.dry_run,
        }
