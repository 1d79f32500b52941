"""Heatmap Viewer — Abstract Storage Backend."""

from abc import ABC, abstractmethod
from typing import List, Optional


class StorageBackend(ABC):
    """Durable keyed storage for uploaded table content.

    Entries are keyed by (filename, sheet); sheet is None for single-sheet CSV
    uploads. Implementations are blocking and raise on failure; the gateway
    classifies and retries.
    """

    name: str = "abstract"

    @abstractmethod
    def list_files(self) -> List[str]:
        """Distinct filenames, most recently uploaded first."""
        ...

    @abstractmethod
    def list_sheets(self, filename: str) -> List[str]:
        """Sheet names stored under a filename, ascending, without None."""
        ...

    @abstractmethod
    def get_content(self, filename: str, sheet: Optional[str] = None) -> Optional[str]:
        """Stored text for (filename, sheet), or None if there is none."""
        ...

    @abstractmethod
    def save(self, filename: str, content: str, sheet: Optional[str] = None) -> None:
        """Insert or overwrite (filename, sheet) and refresh its upload time."""
        ...

    @abstractmethod
    def delete(self, filename: str) -> int:
        """Remove every sheet stored under a filename. Returns entries removed."""
        ...

    def check(self) -> bool:
        """Whether the backend is reachable."""
        return True
