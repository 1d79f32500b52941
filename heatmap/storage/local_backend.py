"""Heatmap Viewer — Local File Storage Backend.

Development-only storage: one JSON document per (filename, sheet) inside a
directory. Listings scan every document, so this is only meant for a handful
of files on a single instance.
"""

import hashlib
import os
import re
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from heatmap.models.dataset_models import Dataset, sheet_key
from heatmap.storage.base import StorageBackend
from heatmap.core.logging import get_logger

logger = get_logger("storage.local")

_UNSAFE_CHARS = re.compile(r"[^a-z0-9.-]", re.IGNORECASE)


def _sanitize(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name)


def document_name(filename: str, sheet: Optional[str] = None) -> str:
    """Stable file name for a (filename, sheet) key.

    The digest keeps keys apart that sanitize to the same text.
    """
    suffix = f"_{_sanitize(sheet)}" if sheet else ""
    digest = hashlib.sha1(f"{filename}\x00{sheet_key(sheet)}".encode("utf-8")).hexdigest()[:10]
    return f"{_sanitize(filename)}{suffix}-{digest}.json"


class LocalBackend(StorageBackend):
    """Stores tables as JSON documents under ``storage_dir``."""

    name = "local"

    def __init__(self, storage_dir: str | Path):
        self.storage_dir = Path(storage_dir)

    def _ensure_dir(self) -> None:
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _documents(self) -> Iterator[tuple[Path, Dataset]]:
        """Every readable stored document."""
        self._ensure_dir()
        for path in sorted(self.storage_dir.glob("*.json")):
            try:
                yield path, Dataset.model_validate_json(path.read_text(encoding="utf-8"))
            except ValueError as e:
                logger.warning(f"Skipping unreadable document {path.name}: {e}")

    def list_files(self) -> List[str]:
        latest: Dict[str, datetime] = {}
        for _, dataset in self._documents():
            seen = latest.get(dataset.filename)
            if seen is None or dataset.uploaded_at > seen:
                latest[dataset.filename] = dataset.uploaded_at
        return sorted(latest, key=lambda name: latest[name], reverse=True)

    def list_sheets(self, filename: str) -> List[str]:
        sheets = {
            dataset.sheet
            for _, dataset in self._documents()
            if dataset.filename == filename and dataset.sheet
        }
        return sorted(sheets)

    def get_content(self, filename: str, sheet: Optional[str] = None) -> Optional[str]:
        path = self.storage_dir / document_name(filename, sheet)
        if not path.exists():
            return None
        dataset = Dataset.model_validate_json(path.read_text(encoding="utf-8"))
        return dataset.content

    def save(self, filename: str, content: str, sheet: Optional[str] = None) -> None:
        self._ensure_dir()
        dataset = Dataset(
            filename=filename,
            sheet=sheet or None,
            content=content,
            uploaded_at=datetime.now(timezone.utc),
        )
        target = self.storage_dir / document_name(filename, sheet)
        # Write-then-rename so readers never see a half-written document
        fd, tmp_name = tempfile.mkstemp(dir=self.storage_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(dataset.model_dump_json(indent=2))
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info(
            f"Saved {filename} to {target.name}",
            extra={"file_name": filename, "sheet": sheet},
        )

    def delete(self, filename: str) -> int:
        removed = 0
        for path, dataset in list(self._documents()):
            if dataset.filename == filename:
                path.unlink(missing_ok=True)
                removed += 1
        logger.info(f"Deleted {removed} entries for {filename}", extra={"file_name": filename})
        return removed

    def check(self) -> bool:
        self._ensure_dir()
        return os.access(self.storage_dir, os.W_OK)
