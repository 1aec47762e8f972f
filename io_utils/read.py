from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pyexcel

from dwc.schema import SOURCE_FIELDS, SOURCE_PREFIX, SourceRow
from errors import ChecklistError

logger = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(r"[\s\-]+")

# Formats whose cells pyexcel would otherwise type-guess from text
TEXT_SUFFIXES = {".csv", ".tsv"}


def normalize_header(name: Any) -> str:
    """Return ``name`` lower-cased with spaces and dashes folded to ``_``."""
    return _SEPARATOR_RE.sub("_", str(name or "").strip()).lower()


def normalize_cell(value: Any) -> str:
    """Return the cell ``value`` as a stripped string; ``None`` becomes ``""``."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _load_sheet(path: Path, sheet_name: Optional[str]) -> List[List[Any]]:
    kwargs: Dict[str, Any] = {"file_name": str(path)}
    if sheet_name:
        kwargs["sheet_name"] = sheet_name
    if path.suffix.lower() in TEXT_SUFFIXES:
        # keep cell text exactly as written, e.g. "0012" or "2001.10"
        kwargs.update(auto_detect_int=False, auto_detect_float=False, auto_detect_datetime=False)
    try:
        return pyexcel.get_array(**kwargs)
    except Exception as exc:
        raise ChecklistError("unreadable_input", f"{path}: {exc}") from exc
    finally:
        pyexcel.free_resources()


def read_checklist(
    path: Path,
    sheet_name: Optional[str] = None,
    column_map: Optional[Dict[str, str]] = None,
    prefix: str = SOURCE_PREFIX,
) -> tuple[SourceRow, ...]:
    """Read a checklist spreadsheet into a tuple of :class:`SourceRow`.

    The first row is the header.  Header names are normalised, optionally
    renamed through ``column_map`` (source column -> semantic field) and
    prefixed with ``prefix``.  Rows whose cells are all empty are dropped.

    Parameters
    ----------
    path:
        Spreadsheet file; any format supported by the installed pyexcel
        plugins (xlsx, xls, ods, csv).
    sheet_name:
        Sheet to read.  Defaults to the first sheet.
    column_map:
        Mapping of source-specific column names to the semantic field names
        in :data:`dwc.schema.SOURCE_FIELDS`.
    prefix:
        Namespace prepended to every column name.

    Raises
    ------
    ChecklistError
        When the file is missing, cannot be parsed, or lacks a required column.
    """

    if not path.exists():
        raise ChecklistError("missing_input", f"checklist not found: {path}")

    sheet = _load_sheet(path, sheet_name)
    if not sheet:
        raise ChecklistError("unreadable_input", f"{path}: no header row")

    renames = {normalize_header(k): normalize_header(v) for k, v in (column_map or {}).items()}
    header = []
    for raw in sheet[0]:
        name = normalize_header(raw)
        header.append(prefix + renames.get(name, name))

    missing = [field for field in SOURCE_FIELDS if prefix + field not in header]
    if missing:
        raise ChecklistError("missing_columns", f"{path}: missing columns {', '.join(missing)}")

    rows: List[SourceRow] = []
    blank = 0
    for values in sheet[1:]:
        cells = [normalize_cell(v) for v in values]
        cells += [""] * (len(header) - len(cells))
        if not any(cells):
            blank += 1
            continue
        record = {name: cell for name, cell in zip(header, cells) if name != prefix}
        rows.append(SourceRow.model_validate(record))

    logger.info("Loaded %d rows from %s (%d blank rows dropped)", len(rows), path, blank)
    return tuple(rows)


__all__ = ["read_checklist", "normalize_header", "normalize_cell"]
