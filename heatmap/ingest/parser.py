"""Heatmap Viewer — Table Parser.

Turns the delimited text of an hour × weekday report into Records. Parsing is
tolerant: banner lines before the header are skipped, unknown columns are
ignored and malformed numbers read as zero. It never raises on content.
"""

import csv
import math
import re
from typing import Any, Dict, List, Optional

from heatmap.models.grid_models import Record
from heatmap.core.logging import get_logger

logger = get_logger("ingest.parser")

HOUR_COLUMN = "Hour of the day"
DAY_COLUMN = "Day of the week"
CONVERSIONS_COLUMN = "Conversions"
COST_COLUMN = "Cost"

COLUMNS = [HOUR_COLUMN, DAY_COLUMN, CONVERSIONS_COLUMN, COST_COLUMN]

# Marker that identifies the header row
HEADER_MARKER = HOUR_COLUMN
DELIMITER = ","

_LEADING_INT = re.compile(r"^[+-]?\d+")
_CURRENCY_PREFIX = re.compile(r"^[$€£¥₹]")


def _split(line: str) -> List[str]:
    """Split one line on the delimiter, honouring quoted fields."""
    try:
        return next(csv.reader([line], delimiter=DELIMITER), [])
    except csv.Error:
        # Oversized or malformed quoting: plain split
        return line.split(DELIMITER)


def _safe_int(value: Any) -> int:
    """Leading integer of a field ("9", "9.0", " 9 ") or 0."""
    match = _LEADING_INT.match(str(value or "").strip().strip('"'))
    return int(match.group()) if match else 0


def _safe_float(value: Any) -> float:
    """Non-negative finite float of a field ("1,234.50", "$12") or 0."""
    text = str(value or "").strip().strip('"').replace(DELIMITER, "")
    text = _CURRENCY_PREFIX.sub("", text)
    try:
        number = float(text)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def find_header_index(lines: List[str]) -> int:
    """Index of the first line carrying the header marker, else 0."""
    for index, line in enumerate(lines):
        if HEADER_MARKER in line:
            return index
    return 0


def parse_header(line: str) -> Dict[str, int]:
    """Map each recognized column name to its position in the header row."""
    positions: Dict[str, int] = {}
    for index, field in enumerate(_split(line)):
        name = field.replace('"', "").strip()
        if name in COLUMNS and name not in positions:
            positions[name] = index
    return positions


def _field(values: List[str], positions: Dict[str, int], column: str) -> Optional[str]:
    index = positions.get(column)
    if index is None or index >= len(values):
        return None
    return values[index].strip()


def parse(text: str) -> List[Record]:
    """Parse report text into Records, in input order."""
    lines = (text or "").strip().splitlines()
    if not lines:
        return []

    header_index = find_header_index(lines)
    positions = parse_header(lines[header_index])
    if len(positions) < len(COLUMNS):
        missing = [c for c in COLUMNS if c not in positions]
        logger.debug(f"Header is missing columns: {missing}")

    records: List[Record] = []
    for line in lines[header_index + 1 :]:
        if not line.strip():
            continue
        values = _split(line)
        records.append(
            Record(
                hour=_safe_int(_field(values, positions, HOUR_COLUMN)),
                day=(_field(values, positions, DAY_COLUMN) or "").strip('"').strip(),
                conversions=_safe_float(_field(values, positions, CONVERSIONS_COLUMN)),
                cost=_safe_float(_field(values, positions, COST_COLUMN)),
            )
        )

    logger.debug(f"Parsed {len(records)} records (header at line {header_index})")
    return records


def serialize(rows) -> str:
    """Write (day, hour, conversions, cost) rows back into report text.

    Accepts any iterable of 4-tuples, e.g. ``Grid.rows()``.
    """
    lines = [DELIMITER.join(COLUMNS)]
    for day, hour, conversions, cost in rows:
        lines.append(DELIMITER.join([str(hour), day, repr(float(conversions)), repr(float(cost))]))
    return "\n".join(lines) + "\n"
