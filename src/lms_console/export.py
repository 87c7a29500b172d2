from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Sequence

from .models import field_value

EMPTY_VALUE = ""
SENSITIVE_KEYS = {"token", "password", "secret"}


@dataclass(frozen=True)
class ExportResult:
    path: Path
    size_bytes: int
    source: str


def export_filename(resource: str, today: date | None = None) -> str:
    day = today or date.today()
    return f"{resource}-export-{day.isoformat()}.csv"


def save_export(resource: str, content: bytes, output_dir: str | Path, *, today: date | None = None) -> ExportResult:
    destination = Path(output_dir)
    destination.mkdir(parents=True, exist_ok=True)
    path = destination / export_filename(resource, today)
    path.write_bytes(content)
    return ExportResult(path=path, size_bytes=len(content), source="server")


def export_rows(
    resource: str,
    rows: Iterable[Any],
    columns: Sequence[str],
    output_dir: str | Path,
    *,
    today: date | None = None,
) -> ExportResult:
    """Write already-derived rows when the view has no server export endpoint."""
    destination = Path(output_dir)
    destination.mkdir(parents=True, exist_ok=True)
    path = destination / export_filename(resource, today)
    with path.open("w", newline="", encoding="utf-8-sig") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(columns), extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow({column: _cell(column, field_value(row, column)) for column in columns})
    return ExportResult(path=path, size_bytes=path.stat().st_size, source="local")


def _cell(column: str, value: Any) -> str:
    if any(token in column.lower() for token in SENSITIVE_KEYS):
        return EMPTY_VALUE
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)
