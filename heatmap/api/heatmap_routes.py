"""Heatmap Viewer — Heatmap Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from heatmap.analyzer.pipeline import ALL_VIEWS, build_heatmap, resolve_views
from heatmap.api.file_routes import get_file_service, to_http_error
from heatmap.core.errors import HeatmapError
from heatmap.models.grid_models import HeatmapOutput
from heatmap.services.file_service import FileService
from heatmap.core.logging import get_logger

logger = get_logger("api.heatmap")

router = APIRouter(prefix="/heatmap", tags=["Heatmap"])


@router.get("/{filename}", response_model=HeatmapOutput)
async def get_heatmap(
    filename: str,
    sheet: Optional[str] = Query(None, description="Sheet name for workbook uploads"),
    view: str = Query(
        ALL_VIEWS,
        description='One of: "conversions", "cost", "conversion-cost", "cost-conversion", "all".',
    ),
    service: FileService = Depends(get_file_service),
):
    """Render the stored table as a weekday × hour heatmap.

    Returns every cell with its value, label and colors, the legend and the
    slots whose value is zero.
    """
    try:
        views = resolve_views(view)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown view: {view}")

    try:
        content = await service.fetch_content(filename, sheet)
    except HeatmapError as e:
        raise to_http_error(e)

    return build_heatmap(content, views, filename=filename, sheet=sheet or None)
