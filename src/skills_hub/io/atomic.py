"""Atomic file writes.

Content is written to a sibling temporary file first and then renamed over
the target, so readers never observe a partially written file.
"""

import json
from pathlib import Path
from typing import Any


def write_text_atomic(path: Path, content: str) -> None:
    """Write text to path atomically, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f"{path.name}.tmp")
    temp_path.write_text(content, encoding="utf-8")
    temp_path.replace(path)


def write_json_atomic(path: Path, data: Any) -> None:
    """Write pretty-printed JSON with sorted keys and a trailing newline."""
    write_text_atomic(path, json.dumps(data, indent=2, sort_keys=True) + "\n")
