"""Filesystem helpers for atomic replacement."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any
from uuid import uuid4


def atomic_temp_path(target_path: Path) -> Path:
    """Create a hidden temp path beside ``target_path`` for atomic replacement."""

    return target_path.parent / f".{target_path.name}.{uuid4().hex}.tmp"


def write_json_atomically(payload: dict[str, Any], output_path: Path) -> Path:
    """Write JSON payload atomically to output path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = atomic_temp_path(output_path)
    try:
        temp_path.write_text(json.dumps(payload, indent=2, sort_keys=True, default=str) + "\n", encoding="utf-8")
        os.replace(temp_path, output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return output_path
