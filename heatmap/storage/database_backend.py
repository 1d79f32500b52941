"""Heatmap Viewer — Relational Storage Backend.

Durable, multi-instance-safe storage in the ``csv_files`` table. Saves are a
single ``INSERT … ON CONFLICT DO UPDATE`` so concurrent uploads of the same
(filename, sheet) never create duplicate rows.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import select

from heatmap.database import Database
from heatmap.models.dataset_models import CsvFile, sheet_key
from heatmap.storage.base import StorageBackend
from heatmap.core.logging import get_logger

logger = get_logger("storage.database")

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class DatabaseBackend(StorageBackend):
    """Stores tables as rows of ``csv_files``."""

    name = "database"

    def __init__(self, database: Database):
        self.database = database

    def list_files(self) -> List[str]:
        latest = func.max(CsvFile.uploaded_at).label("latest")
        with self.database.session() as session:
            rows = session.exec(
                select(CsvFile.filename, latest)
                .group_by(CsvFile.filename)
                .order_by(latest.desc(), func.max(CsvFile.id).desc())
            ).all()
        return [filename for filename, _ in rows]

    def list_sheets(self, filename: str) -> List[str]:
        with self.database.session() as session:
            rows = session.exec(
                select(CsvFile.sheet_name)
                .where(CsvFile.filename == filename, CsvFile.sheet_name.is_not(None))  # type: ignore
                .distinct()
                .order_by(CsvFile.sheet_name)
            ).all()
        return list(rows)

    def get_content(self, filename: str, sheet: Optional[str] = None) -> Optional[str]:
        with self.database.session() as session:
            return session.exec(
                select(CsvFile.content)
                .where(CsvFile.filename == filename, CsvFile.sheet_key == sheet_key(sheet))
                .limit(1)
            ).first()

    def save(self, filename: str, content: str, sheet: Optional[str] = None) -> None:
        dialect = self.database.engine.dialect.name
        insert = _INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Upsert not supported for dialect '{dialect}'")

        now = datetime.now(timezone.utc)
        stmt = insert(CsvFile).values(
            filename=filename,
            sheet_name=sheet or None,
            sheet_key=sheet_key(sheet),
            content=content,
            uploaded_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["filename", "sheet_key"],
            set_={"content": stmt.excluded.content, "uploaded_at": stmt.excluded.uploaded_at},
        )
        with self.database.engine.begin() as conn:
            conn.execute(stmt)
        logger.info(
            f"Saved {filename} ({len(content)} chars)",
            extra={"file_name": filename, "sheet": sheet},
        )

    def delete(self, filename: str) -> int:
        with self.database.engine.begin() as conn:
            result = conn.execute(delete(CsvFile).where(CsvFile.filename == filename))  # type: ignore[arg-type]
        removed = result.rowcount or 0
        logger.info(f"Deleted {removed} entries for {filename}", extra={"file_name": filename})
        return removed

    def check(self) -> bool:
        return self.database.test_connection()
