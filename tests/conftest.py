# File: tests/conftest.py

import json
import os
import time
from pathlib import Path

import pytest

from alias_redirect.errors import ReferenceCodecError
from alias_redirect.models import LabelCode, RedirectConfig, ScanConfig
from alias_redirect.redirect.report import RunReporter

ALIAS_SUFFIX = ".alias"
PACKAGE_SUFFIXES = {".app", ".bundle"}


class FakeAliasCodec:
    """
    In-memory stand-in for the Finder alias codec.
    Alias files are JSON documents with a ".alias" suffix:
        {"target": "/abs/path", "hint": "/abs/path" | null, "stale": false}
    Directories ending in .app/.bundle are packages.
    """

    def __init__(self):
        self.labels = {}
        self.fail_labels = False
        self.fail_create = False
        self.fail_write = False
        self.resolve_delay_sec = 0.0
        self.created_target_override = None
        self.resolve_calls = 0

    def classify(self, path):
        path = Path(path)
        if path.is_symlink():
            return "other"
        if path.is_dir():
            return "package" if path.suffix in PACKAGE_SUFFIXES else "directory"
        if path.is_file():
            return "indirection_record" if path.suffix == ALIAS_SUFFIX else "regular_file"
        return "other"

    def read_record(self, path):
        try:
            raw = Path(path).read_bytes()
        except OSError as exc:
            raise ReferenceCodecError(path, "read", str(exc)) from exc
        try:
            payload = json.loads(raw)
            if not isinstance(payload, dict) or "target" not in payload:
                raise ValueError("missing target")
        except ValueError as exc:
            raise ReferenceCodecError(path, "read", "not an alias record") from exc
        return raw

    def resolve_record(self, record):
        self.resolve_calls += 1
        if self.resolve_delay_sec:
            time.sleep(self.resolve_delay_sec)
        payload = json.loads(record)
        target = payload.get("target")
        if target and os.path.exists(target):
            return target, bool(payload.get("stale", False))
        raise ReferenceCodecError(None, "resolve", "target volume not mounted")

    def path_hint(self, record):
        return json.loads(record).get("hint")

    def create_record(self, target):
        if self.fail_create or not os.path.exists(target):
            raise ReferenceCodecError(target, "create bookmark data", "no such file")
        stored = self.created_target_override or target
        return json.dumps({"target": stored, "hint": stored, "stale": False}).encode()

    def write_record(self, record, path):
        if self.fail_write:
            raise ReferenceCodecError(path, "write bookmark data", "disk full")
        Path(path).write_bytes(record)

    def set_label(self, path, code):
        if self.fail_labels:
            raise ReferenceCodecError(path, f"set label index to {int(code)}", "read-only volume")
        self.labels[Path(path)] = LabelCode(code)


class CapturingStream:
    def __init__(self):
        self.lines = []

    def write(self, text):
        self.lines.extend(line for line in text.splitlines() if line)

    def flush(self):
        pass

    @property
    def text(self):
        return "\n".join(self.lines)


def make_alias(path, target, hint="same", stale=False):
    """Writes a fake alias file; hint defaults to the target itself."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "target": str(target) if target is not None else None,
        "hint": str(target) if hint == "same" and target is not None else hint,
        "stale": stale,
    }
    path.write_text(json.dumps(payload))
    return path


@pytest.fixture
def codec():
    return FakeAliasCodec()


@pytest.fixture
def reporter():
    return RunReporter(out=CapturingStream(), err=CapturingStream())


@pytest.fixture
def volumes(tmp_path):
    """
    Creates:
      Old/file.txt      (old target root, still mounted)
      New/file.txt      (new target root)
      R/                (scan root)
    """
    old_root = tmp_path / "Old"
    new_root = tmp_path / "New"
    scan_root = tmp_path / "R"
    for directory in (old_root, new_root, scan_root):
        directory.mkdir()
    (old_root / "file.txt").write_text("old copy")
    (new_root / "file.txt").write_text("new copy")
    return {
        "old": old_root,
        "new": new_root,
        "root": scan_root,
        "search": f"{old_root}{os.sep}",
        "replace": f"{new_root}{os.sep}",
    }


@pytest.fixture
def configs(volumes):
    scan_config = ScanConfig(root_path=volumes["root"])
    redirect_config = RedirectConfig(
        root_path=volumes["root"],
        search_prefix=volumes["search"],
        replace_prefix=volumes["replace"],
    )
    return scan_config, redirect_config
