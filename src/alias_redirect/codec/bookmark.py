"""macOS alias codec backed by NSURL bookmark data (pyobjc bridges)."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

import AppKit
import Foundation

from alias_redirect.codec.base import EntryKind
from alias_redirect.errors import ReferenceCodecError
from alias_redirect.models import LabelCode

LOGGER = logging.getLogger(__name__)

ALIAS_FILE_UTI = "com.apple.alias-file"
FOLDER_UTI = "public.folder"
VOLUME_UTI = "public.volume"

RESOLUTION_OPTIONS = (
    Foundation.NSURLBookmarkResolutionWithoutMounting | Foundation.NSURLBookmarkResolutionWithoutUI
)
CREATION_OPTIONS = Foundation.NSURLBookmarkCreationSuitableForBookmarkFile


@dataclass(frozen=True, slots=True)
class CodecCapabilities:
    """Platform capabilities chosen once when the codec is built."""

    path_hint_key: str
    path_hint_key_name: str


def probe_capabilities(logger: logging.Logger | None = None) -> CodecCapabilities:
    """Pick the resource key used to read stored paths out of bookmark data."""

    effective_logger = logger or LOGGER
    path_key = getattr(Foundation, "NSURLPathKey", None)
    if path_key is not None:
        capabilities = CodecCapabilities(path_hint_key=path_key, path_hint_key_name="NSURLPathKey")
    else:
        # NSURLPathKey only exists on 10.8+; the name key carries the stored path before that.
        capabilities = CodecCapabilities(
            path_hint_key=Foundation.NSURLNameKey,
            path_hint_key_name="NSURLNameKey",
        )
    effective_logger.info("codec.capabilities path_hint_key=%s", capabilities.path_hint_key_name)
    return capabilities


def _error_text(error: object) -> str:
    if error is None:
        return "unknown error"
    description = getattr(error, "localizedDescription", None)
    return str(description()) if callable(description) else str(error)


class BookmarkCodec:
    """Reads, resolves, and writes Finder alias files through NSURL."""

    def __init__(self, capabilities: CodecCapabilities | None = None) -> None:
        self.capabilities = capabilities or probe_capabilities()
        self._workspace = AppKit.NSWorkspace.sharedWorkspace()

    def classify(self, path: Path) -> EntryKind:
        try:
            mode = os.lstat(path).st_mode
        except OSError:
            return "other"
        if stat.S_ISDIR(mode):
            if self._workspace.isFilePackageAtPath_(str(path)):
                return "package"
            uti, _ = self._workspace.typeOfFile_error_(str(path), None)
            return "volume" if uti == VOLUME_UTI else "directory"
        if stat.S_ISREG(mode):
            uti, _ = self._workspace.typeOfFile_error_(str(path), None)
            return "indirection_record" if uti == ALIAS_FILE_UTI else "regular_file"
        return "other"

    def read_record(self, path: Path) -> bytes:
        url = Foundation.NSURL.fileURLWithPath_(str(path))
        data, error = Foundation.NSURL.bookmarkDataWithContentsOfURL_error_(url, None)
        if data is None:
            raise ReferenceCodecError(path, "get bookmark data", _error_text(error))
        return bytes(data)

    def resolve_record(self, record: bytes) -> tuple[str, bool]:
        data = Foundation.NSData.dataWithBytes_length_(record, len(record))
        url, is_stale, error = Foundation.NSURL.URLByResolvingBookmarkData_options_relativeToURL_bookmarkDataIsStale_error_(
            data, RESOLUTION_OPTIONS, None, None, None
        )
        if url is None:
            raise ReferenceCodecError(None, "resolve alias", _error_text(error))
        return str(url.path()), bool(is_stale)

    def path_hint(self, record: bytes) -> str | None:
        data = Foundation.NSData.dataWithBytes_length_(record, len(record))
        key = self.capabilities.path_hint_key
        values = Foundation.NSURL.resourceValuesForKeys_fromBookmarkData_([key], data)
        if values is None:
            return None
        hint = values.get(key)
        return str(hint) if hint else None

    def create_record(self, target: str) -> bytes:
        url = Foundation.NSURL.fileURLWithPath_(target)
        data, error = url.bookmarkDataWithOptions_includingResourceValuesForKeys_relativeToURL_error_(
            CREATION_OPTIONS, [], None, None
        )
        if data is None:
            raise ReferenceCodecError(target, "create bookmark data", _error_text(error))
        return bytes(data)

    def write_record(self, record: bytes, path: Path) -> None:
        data = Foundation.NSData.dataWithBytes_length_(record, len(record))
        url = Foundation.NSURL.fileURLWithPath_(str(path))
        ok, error = Foundation.NSURL.writeBookmarkData_toURL_options_error_(data, url, CREATION_OPTIONS, None)
        if not ok:
            raise ReferenceCodecError(path, "write bookmark data", _error_text(error))

    def set_label(self, path: Path, code: LabelCode) -> None:
        url = Foundation.NSURL.fileURLWithPath_(str(path))
        ok, error = url.setResourceValue_forKey_error_(
            Foundation.NSNumber.numberWithInt_(int(code)),
            Foundation.NSURLLabelNumberKey,
            None,
        )
        if not ok:
            raise ReferenceCodecError(path, f"set label index to {int(code)}", _error_text(error))
