"""
BOQ spreadsheet import.

Turns an uploaded CSV, Excel or Word document into normalized BOQ rows. Header cells
are matched against a table of aliases so that sheets exported from
different estimating tools ("Particulars", "Qty", "UOM", "Unit Rate" ...)
import without manual mapping.

Parsing never writes to the database; the preview is returned to the client
which then submits the (possibly edited) rows for import.
"""

from __future__ import annotations

import csv
import io
import re
from pathlib import PurePath
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from docx import Document

from interior_manager.core.errors import ImportFileError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.io.boq import BoqImportPreview, BoqImportRow

logger = get_logger(__name__)

# Checked in order: a header is claimed by the first field whose aliases
# contain it and that no earlier column has claimed yet.
COLUMN_ALIASES: Dict[str, List[str]] = {
    "item_name": ["item_name", "item name", "name", "element", "element name", "description", "particular", "particulars"],
    "category": ["category", "section", "group"],
    "description": ["description", "desc", "details", "specification"],
    "unit": ["unit", "uom", "unit of measure"],
    "quantity": ["quantity", "qty", "no", "nos", "count", "quantity/unit"],
    "rate": ["rate", "price", "unit rate", "unit price", "cost"],
    "item_type": ["item_type", "type", "item type"],
    "source": ["source", "procurement source"],
}

REQUIRED_COLUMNS = ["item_name", "quantity"]
MAX_REPORTED_ERRORS = 5

CSV_EXTENSIONS = {".csv"}
EXCEL_EXTENSIONS = {".xlsx", ".xlsm"}
DOCX_EXTENSIONS = {".docx"}

_QUANTITY_RE = re.compile(r"^(\d+/\d+|\d+(?:\.\d+)?)")
_UNIT_SUFFIX_RE = re.compile(r"([a-zA-Z]+)$")
_NUMBER_PREFIX_RE = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)")


def normalize_column_name(header: str, taken: Optional[set] = None) -> Optional[str]:
    """Map a header cell to a BOQ field name, or None when it is not recognized."""
    lower = str(header).strip().lower()
    taken = taken or set()
    for key, aliases in COLUMN_ALIASES.items():
        if lower in aliases and key not in taken:
            return key
    return None


def map_columns(headers: List[str]) -> Dict[int, str]:
    """Map column index to field name for every recognized header."""
    column_map: Dict[int, str] = {}
    for idx, header in enumerate(headers):
        if not header:
            continue
        key = normalize_column_name(header, set(column_map.values()))
        if key:
            column_map[idx] = key
    return column_map


def parse_quantity(value: str) -> Tuple[float, Optional[str]]:
    """
    Parse a quantity cell.

    A leading number or fraction is the quantity; a trailing word is a unit.

    >>> parse_quantity("12 kg")
    (12.0, 'kg')
    >>> parse_quantity("1/2")
    (0.5, None)
    """
    text = value.strip()
    unit_match = _UNIT_SUFFIX_RE.search(text)
    unit = unit_match.group(1) if unit_match else None

    match = _QUANTITY_RE.match(text)
    if not match:
        return 0.0, unit
    number = match.group(1)
    if "/" in number:
        numerator, denominator = (float(part) for part in number.split("/"))
        return (numerator / denominator if denominator else 0.0), unit
    return float(number), unit


def parse_rate(value: str) -> float:
    """Parse a rate cell, ignoring currency symbols and thousands separators."""
    cleaned = re.sub(r"[^0-9.\-]", "", value)
    match = _NUMBER_PREFIX_RE.match(cleaned)
    if not match:
        return 0.0
    return max(float(match.group(0)), 0.0)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return str(value).strip()


def parse_rows(rows: List[List[Any]]) -> BoqImportPreview:
    """
    Parse a sheet given as a list of rows (the first row holds the headers).

    Raises:
        ImportFileError: Fewer than two rows, missing required columns, or no usable rows
    """
    if len(rows) < 2:
        raise ImportFileError("File must have at least a header row and one data row")

    headers = [_cell(h) for h in rows[0]]
    column_map = map_columns(headers)

    found = set(column_map.values())
    missing = [column for column in REQUIRED_COLUMNS if column not in found]
    if missing:
        raise ImportFileError(
            "Missing required columns",
            errors=[
                f"Missing required columns: {', '.join(missing)}.",
                f"Found columns: {', '.join(headers)}",
            ],
        )

    parsed_rows: List[BoqImportRow] = []
    row_errors: List[str] = []

    for i, raw in enumerate(rows[1:], start=1):
        cells = [_cell(c) for c in raw]
        if not any(cells):
            continue

        parsed: Dict[str, Any] = {}
        for idx, key in column_map.items():
            value = cells[idx] if idx < len(cells) else ""
            if key == "quantity":
                quantity, unit = parse_quantity(value)
                parsed["quantity"] = quantity
                if unit and not parsed.get("unit"):
                    parsed["unit"] = unit
            elif key == "rate":
                parsed["rate"] = parse_rate(value)
            elif value or key not in parsed:
                parsed[key] = value

        if not parsed.get("item_name"):
            row_errors.append(f"Row {i + 1}: Skipped (Missing item name)")
            continue

        parsed_rows.append(
            BoqImportRow(
                item_name=parsed["item_name"],
                category=parsed.get("category") or "Uncategorized",
                description=parsed.get("description") or "",
                unit=parsed.get("unit") or "Nos",
                quantity=parsed.get("quantity") or 0,
                rate=parsed.get("rate") or 0,
                item_type=parsed.get("item_type") or "material",
                source=parsed.get("source") or "bought_out",
            )
        )

    if not parsed_rows:
        raise ImportFileError("No valid rows found in file. Please check column headers.")

    errors = row_errors[:MAX_REPORTED_ERRORS]
    if len(row_errors) > MAX_REPORTED_ERRORS:
        errors.append(f"...and {len(row_errors) - MAX_REPORTED_ERRORS} more issues")

    logger.debug(f"Parsed {len(parsed_rows)} BOQ row(s) with {len(row_errors)} skipped")
    return BoqImportPreview(rows=parsed_rows, errors=errors)


def _csv_width(text: str) -> int:
    return max((len(row) for row in csv.reader(io.StringIO(text))), default=0)


def _read_csv(content: bytes) -> List[List[Any]]:
    # Rows may be wider than the header (trailing commas, unlabelled notes).
    text = content.decode("utf-8-sig")
    frame = pd.read_csv(
        io.StringIO(text),
        header=None,
        names=list(range(max(_csv_width(text), 1))),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
    )
    return frame.values.tolist()


def _read_docx(content: bytes) -> List[List[Any]]:
    """Rows of every table in the document, in order; empty rows are dropped."""
    document = Document(io.BytesIO(content))
    if not document.tables:
        raise ImportFileError("No tables found in the Word document. BOQ items must be in a table.")
    rows: List[List[Any]] = []
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                rows.append(cells)
    return rows


def read_table(filename: str, content: bytes) -> List[List[Any]]:
    """
    Read the first sheet (or every Word table) of an uploaded file as raw rows.

    Raises:
        ImportFileError: Unsupported extension or unreadable file
    """
    extension = PurePath(filename or "").suffix.lower()
    try:
        if extension in CSV_EXTENSIONS:
            return _read_csv(content)
        if extension in EXCEL_EXTENSIONS:
            frame = pd.read_excel(io.BytesIO(content), header=None, dtype=str, sheet_name=0, engine="openpyxl")
            return frame.values.tolist()
        if extension in DOCX_EXTENSIONS:
            return _read_docx(content)
        raise ImportFileError(
            f"Unsupported file type '{extension or filename}'. Upload a CSV, Excel (.xlsx) or Word (.docx) file."
        )
    except ImportFileError:
        raise
    except Exception as e:
        logger.warning(f"Failed to read uploaded BOQ file {filename!r}: {e}")
        raise ImportFileError("Failed to parse file. Please ensure it is a valid CSV, Excel or Word file.") from e


def parse_file(filename: str, content: bytes) -> BoqImportPreview:
    """Read and parse an uploaded BOQ file."""
    if not content:
        raise ImportFileError("Uploaded file is empty")
    return parse_rows(read_table(filename, content))
