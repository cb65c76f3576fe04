"""Contract for the platform service that reads and writes alias records."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Protocol

from alias_redirect.models import LabelCode

EntryKind = Literal["directory", "volume", "package", "indirection_record", "regular_file", "other"]
SCANNABLE_ROOT_KINDS: tuple[EntryKind, ...] = ("directory", "volume")
CONTAINER_KINDS: tuple[EntryKind, ...] = ("directory", "volume", "package")


class ReferenceCodec(Protocol):
    """Opaque alias record capability.

    Every method that can fail raises ``ReferenceCodecError`` carrying the
    file path and the underlying reason. Resolution must never mount
    volumes or prompt the user.
    """

    def classify(self, path: Path) -> EntryKind:
        """Return the platform type of a filesystem entry without following symlinks."""
        ...

    def read_record(self, path: Path) -> bytes:
        """Return the raw record stored in an alias file."""
        ...

    def resolve_record(self, record: bytes) -> tuple[str, bool]:
        """Resolve a record to ``(target_path, is_stale)``."""
        ...

    def path_hint(self, record: bytes) -> str | None:
        """Return the last-known target path stored in the record, if any."""
        ...

    def create_record(self, target: str) -> bytes:
        """Build a new record bound to an existing target."""
        ...

    def write_record(self, record: bytes, path: Path) -> None:
        """Write a record to ``path`` as an alias file."""
        ...

    def set_label(self, path: Path, code: LabelCode) -> None:
        """Attach a Finder label index to ``path``."""
        ...
