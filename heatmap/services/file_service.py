"""Heatmap Viewer — File Service.

The operations the HTTP layer calls: upload, list, fetch, delete. Uploads are
validated here and workbook sheets are expanded into one stored entry each.
"""

from typing import List, Optional

from heatmap.core.errors import HeatmapError, ValidationError
from heatmap.ingest.workbook import is_csv, is_excel, workbook_to_csv
from heatmap.models.dataset_models import DeleteResult, FileWithSheets, UploadResult
from heatmap.storage.gateway import PersistenceGateway
from heatmap.core.logging import get_logger

logger = get_logger("services.files")


def decode_text(data: bytes) -> str:
    """Decode uploaded CSV bytes, dropping a UTF-8 byte-order mark."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


class FileService:
    """Core-facing boundary over the persistence gateway."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def upload(self, filename: Optional[str], data: Optional[bytes]) -> UploadResult:
        """Store a CSV (single entry) or a workbook (one entry per sheet)."""
        if not filename or data is None:
            raise ValidationError("No file provided")
        if not is_csv(filename) and not is_excel(filename):
            raise ValidationError("Only CSV and Excel files are allowed")
        if not data:
            raise ValidationError("Uploaded file is empty")

        if is_csv(filename):
            await self.gateway.save(filename, decode_text(data))
            logger.info(f"Uploaded CSV {filename}", extra={"file_name": filename})
            return UploadResult(
                filename=filename,
                saved_sheets=[None],
                message="CSV file uploaded successfully",
            )

        try:
            sheets = workbook_to_csv(data)
        except Exception as e:
            raise ValidationError(f"Could not read workbook: {e}") from e

        saved: List[Optional[str]] = []
        last_error: Optional[HeatmapError] = None
        for sheet_name, content in sheets.items():
            try:
                await self.gateway.save(filename, content, sheet_name)
                saved.append(sheet_name)
            except HeatmapError as e:
                last_error = e
                logger.error(
                    f"Failed to save sheet '{sheet_name}': {e.message}",
                    extra={"file_name": filename, "sheet": sheet_name},
                )

        if not saved:
            if last_error is not None:
                raise last_error
            raise ValidationError("Workbook contains no sheets")

        logger.info(
            f"Uploaded workbook {filename} with {len(saved)} sheet(s)",
            extra={"file_name": filename},
        )
        return UploadResult(
            filename=filename,
            saved_sheets=saved,
            message=f"Excel file uploaded successfully with {len(saved)} sheet(s)",
        )

    async def list_files(self) -> List[str]:
        return await self.gateway.list_files()

    async def list_sheets(self, filename: str) -> List[str]:
        return await self.gateway.list_sheets(filename)

    async def list_files_with_sheets(self) -> List[FileWithSheets]:
        """Every stored filename with its sheets (empty for CSV uploads)."""
        files = await self.gateway.list_files()
        return [
            FileWithSheets(filename=name, sheets=await self.gateway.list_sheets(name))
            for name in files
        ]

    async def fetch_content(self, filename: str, sheet: Optional[str] = None) -> str:
        return await self.gateway.fetch_content(filename, sheet or None)

    async def delete_file(self, filename: str) -> DeleteResult:
        removed = await self.gateway.delete(filename)
        return DeleteResult(filename=filename, removed=removed)
