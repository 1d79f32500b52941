"""Heatmap Viewer — File Routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import PlainTextResponse

from heatmap.core.errors import (
    FatalBackendError,
    HeatmapError,
    NotFoundError,
    TransientBackendError,
    ValidationError,
)
from heatmap.models.dataset_models import DeleteResult, FileWithSheets, UploadResult
from heatmap.services.file_service import FileService
from heatmap.core.logging import get_logger

logger = get_logger("api.files")

router = APIRouter(tags=["Files"])


def get_file_service(request: Request) -> FileService:
    """Dependency: the service built during application start-up."""
    return request.app.state.file_service


def to_http_error(error: HeatmapError) -> HTTPException:
    """Map a taxonomy error onto an HTTP status."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=error.message)
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=error.message)
    if isinstance(error, TransientBackendError):
        return HTTPException(
            status_code=503, detail="Storage temporarily unavailable, please retry"
        )
    if isinstance(error, FatalBackendError):
        return HTTPException(status_code=500, detail="Internal storage error")
    return HTTPException(status_code=500, detail=error.message)


@router.post("/upload", response_model=UploadResult)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    service: FileService = Depends(get_file_service),
):
    """Upload a CSV file, or an Excel workbook stored sheet by sheet."""
    if file is None:
        raise to_http_error(ValidationError("No file provided"))
    data = await file.read()
    try:
        return await service.upload(file.filename, data)
    except HeatmapError as e:
        logger.error(f"Upload failed: {e.message}", extra={"file_name": file.filename})
        raise to_http_error(e)


@router.get("/csv-files", response_model=List[str])
async def list_csv_files(service: FileService = Depends(get_file_service)):
    """Stored filenames, most recently uploaded first."""
    try:
        return await service.list_files()
    except HeatmapError as e:
        raise to_http_error(e)


@router.get("/files", response_model=List[FileWithSheets])
async def list_files_with_sheets(service: FileService = Depends(get_file_service)):
    """Stored filenames with their sheet names."""
    try:
        return await service.list_files_with_sheets()
    except HeatmapError as e:
        raise to_http_error(e)


@router.get("/sheets/{filename}", response_model=List[str])
async def list_sheets(filename: str, service: FileService = Depends(get_file_service)):
    """Sheet names stored under a filename (empty for CSV uploads)."""
    try:
        return await service.list_sheets(filename)
    except HeatmapError as e:
        raise to_http_error(e)


@router.get("/csv/{filename}", response_class=PlainTextResponse)
async def get_csv(
    filename: str,
    sheet: Optional[str] = Query(None, description="Sheet name for workbook uploads"),
    service: FileService = Depends(get_file_service),
):
    """Raw stored text of a file (or one of its sheets)."""
    try:
        content = await service.fetch_content(filename, sheet)
    except HeatmapError as e:
        raise to_http_error(e)
    return PlainTextResponse(content, media_type="text/csv")


@router.delete("/csv/{filename}", response_model=DeleteResult)
async def delete_csv(filename: str, service: FileService = Depends(get_file_service)):
    """Delete a file and all of its sheets."""
    try:
        return await service.delete_file(filename)
    except HeatmapError as e:
        logger.error(f"Delete failed: {e.message}", extra={"file_name": filename})
        raise to_http_error(e)
