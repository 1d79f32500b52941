"""Heatmap Viewer — Stored Table Models."""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel
from sqlmodel import SQLModel, Field, UniqueConstraint


class CsvFile(SQLModel, table=True):
    """Uploaded table content, one row per (filename, sheet).

    sheet_key mirrors sheet_name with "" for the single-sheet entry, so the
    unique constraint also covers CSV uploads (NULLs never collide in SQL).
    """

    __tablename__ = "csv_files"
    __table_args__ = (
        UniqueConstraint("filename", "sheet_key", name="uq_csv_files_filename_sheet"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    filename: str = Field(index=True, max_length=255)
    sheet_name: Optional[str] = Field(default=None, max_length=255)
    sheet_key: str = Field(default="", max_length=255)
    content: str = Field(description="Delimited text of the table")
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def sheet_key(sheet: Optional[str]) -> str:
    """Uniqueness key for a sheet name ("" for single-sheet uploads)."""
    return sheet or ""


# ─────────────────────────────────────────────
# PYDANTIC SCHEMAS — File Service Results
# ─────────────────────────────────────────────


class Dataset(BaseModel):
    """A stored table as seen by callers."""

    filename: str
    sheet: Optional[str] = None
    content: str
    uploaded_at: datetime


class UploadResult(BaseModel):
    """Outcome of an upload."""

    success: bool = True
    filename: str
    saved_sheets: List[Optional[str]] = []
    message: str = ""


class DeleteResult(BaseModel):
    """Outcome of a delete."""

    success: bool = True
    filename: str
    removed: int = 0


class FileWithSheets(BaseModel):
    """A stored filename and its sheets (empty for CSV uploads)."""

    filename: str
    sheets: List[str] = []
