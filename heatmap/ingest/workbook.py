"""Heatmap Viewer — Workbook → delimited text conversion.

Each sheet of an uploaded Excel workbook is converted independently into the
same comma-delimited text a CSV upload would carry, so the parser never has to
know where a table came from.
"""

import io
from collections import OrderedDict
from typing import Dict

import pandas as pd

from heatmap.core.logging import get_logger

logger = get_logger("ingest.workbook")

EXCEL_EXTENSIONS = (".xlsx", ".xls")
CSV_EXTENSIONS = (".csv",)


def is_excel(filename: str) -> bool:
    return filename.lower().endswith(EXCEL_EXTENSIONS)


def is_csv(filename: str) -> bool:
    return filename.lower().endswith(CSV_EXTENSIONS)


def _cell_text(value) -> str:
    """Render a cell the way a spreadsheet CSV export would."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    return str(value)


def sheet_to_csv(df: pd.DataFrame) -> str:
    """Convert a header-less sheet frame to CSV text, keeping every row."""
    if df.empty:
        return ""
    rendered = df.apply(lambda column: column.map(_cell_text))
    return rendered.to_csv(index=False, header=False, lineterminator="\n")


def workbook_to_csv(data: bytes) -> Dict[str, str]:
    """Convert every sheet of a workbook into CSV text, in workbook order.

    Raises whatever pandas raises for unreadable workbooks; callers decide how
    that is surfaced.
    """
    sheets: Dict[str, str] = OrderedDict()
    with pd.ExcelFile(io.BytesIO(data)) as workbook:
        for sheet_name in workbook.sheet_names:
            df = workbook.parse(sheet_name, header=None, dtype=object)
            sheets[str(sheet_name)] = sheet_to_csv(df)
            logger.debug(f"Converted sheet '{sheet_name}' ({len(df)} rows)")
    logger.info(f"Converted workbook with {len(sheets)} sheet(s)")
    return sheets
