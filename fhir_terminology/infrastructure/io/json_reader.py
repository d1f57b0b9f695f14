from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from .exceptions import DataParseError, DataSourceNotFoundError

if TYPE_CHECKING:
    from pathlib import Path


def read_json_object(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise DataSourceNotFoundError(f"File not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise DataParseError(f"Invalid JSON in {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise DataParseError(f"Encoding error reading {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise DataParseError(
            f"Expected a JSON object in {path}, got {type(data).__name__}"
        )
    return data
