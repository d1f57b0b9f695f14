"""Flat CSV code system loader (infrastructure).

A CSV code system lists one concept per row with the columns ``Code``,
``Display``, ``Parent Code`` and ``Abstract``. Every other column becomes a
concept property. The canonical URL and version come from the caller, or
from ``System`` and ``Version`` columns when present.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

import pandas as pd

from ...domain.entities.code_system import CodeSystem, Concept
from ..io.csv_reader import CSVReader
from .resource_loader import ResourceLoadError

if TYPE_CHECKING:
    from pathlib import Path

CODE_COLUMN = "Code"
DISPLAY_COLUMN = "Display"
PARENT_COLUMN = "Parent Code"
ABSTRACT_COLUMN = "Abstract"
SYSTEM_COLUMN = "System"
VERSION_COLUMN = "Version"
_RESERVED_COLUMNS = frozenset(
    {
        CODE_COLUMN,
        DISPLAY_COLUMN,
        PARENT_COLUMN,
        ABSTRACT_COLUMN,
        SYSTEM_COLUMN,
        VERSION_COLUMN,
    }
)
_TRUE_VALUES = frozenset({"true", "yes", "y", "1"})


def _clean_value(raw: object) -> str:
    if raw is None:
        return ""
    if isinstance(raw, float) and math.isnan(raw):
        return ""
    try:
        if pd.isna(raw):  # type: ignore[arg-type]
            return ""
    except (TypeError, ValueError):
        pass
    return str(raw).strip()


def _first_value(df: pd.DataFrame, column: str) -> str:
    if column not in df.columns:
        return ""
    for raw in df[column]:
        value = _clean_value(raw)
        if value:
            return value
    return ""


def _build_concepts(rows: list[dict[str, Any]]) -> tuple[Concept, ...]:
    by_parent: dict[str, list[dict[str, Any]]] = {}
    codes: set[str] = set()
    for row in rows:
        code = _clean_value(row.get(CODE_COLUMN))
        if not code:
            continue
        if code in codes:
            raise ResourceLoadError(f"Duplicate code '{code}' in CSV code system")
        codes.add(code)
        parent = _clean_value(row.get(PARENT_COLUMN))
        by_parent.setdefault(parent, []).append(row)

    orphans = [parent for parent in by_parent if parent and parent not in codes]
    if orphans:
        missing = ", ".join(sorted(orphans))
        raise ResourceLoadError(
            f"Parent codes not defined in CSV code system: {missing}"
        )

    def _build(row: dict[str, Any]) -> Concept:
        code = _clean_value(row.get(CODE_COLUMN))
        properties = {
            str(key): _clean_value(value)
            for key, value in row.items()
            if key not in _RESERVED_COLUMNS and _clean_value(value)
        }
        children = by_parent.get(code, [])
        return Concept(
            code=code,
            display=_clean_value(row.get(DISPLAY_COLUMN)) or None,
            abstract=_clean_value(row.get(ABSTRACT_COLUMN)).lower() in _TRUE_VALUES,
            properties=properties,
            children=tuple(_build(child) for child in children),
        )

    concepts = tuple(_build(row) for row in by_parent.get("", []))
    # Rows on a parent cycle are never reached from a root.
    reached = sum(1 for concept in concepts for _ in concept.iter_tree())
    if reached != len(codes):
        raise ResourceLoadError("CSV code system contains a cyclic parent chain")
    return concepts


def code_system_from_frame(
    df: pd.DataFrame, *, url: str | None = None, version: str | None = None
) -> CodeSystem:
    if CODE_COLUMN not in df.columns:
        raise ResourceLoadError(
            f"CSV code system is missing the '{CODE_COLUMN}' column"
        )
    system_url = url or _first_value(df, SYSTEM_COLUMN)
    if not system_url:
        raise ResourceLoadError(
            f"CSV code system needs a URL argument or a '{SYSTEM_COLUMN}' column"
        )
    records = df.to_dict(orient="records")
    rows: list[dict[str, Any]] = [
        {str(key): value for key, value in row.items()} for row in records
    ]
    return CodeSystem(
        url=system_url,
        version=version or _first_value(df, VERSION_COLUMN) or None,
        concepts=_build_concepts(rows),
    )


def load_csv_code_system(
    path: Path,
    *,
    url: str | None = None,
    version: str | None = None,
    reader: CSVReader | None = None,
) -> CodeSystem:
    df = (reader or CSVReader()).read(path)
    try:
        return code_system_from_frame(df, url=url, version=version)
    except ResourceLoadError as exc:
        raise ResourceLoadError(f"{path}: {exc}") from exc
