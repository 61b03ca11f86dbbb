"""
Shared YAML file writing for the file-backed stores.
"""

import contextlib
from pathlib import Path
from typing import Any

import yaml


def write_yaml(path: Path, payload: Any) -> None:
    """
    Dump payload to a sibling temp file, then swap it over path.

    The target is either the old content or the complete new content, never a
    partial dump.

    Raises:
        OSError: If the file cannot be written or replaced
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as file_handle:
            yaml.safe_dump(payload, file_handle, sort_keys=False, allow_unicode=True)
        tmp_path.replace(path)
    except (OSError, yaml.YAMLError):
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise
