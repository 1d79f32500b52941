"""Heatmap Viewer — Heatmap Pipeline.

Runs the full data flow for one stored table:
  text → parse → aggregate → per-view bounds → per-cell colors → HeatmapOutput

Nothing is cached; every call recomputes from the raw text.
"""

from typing import Iterable, List, Optional

from heatmap.ingest.parser import parse
from heatmap.analyzer.aggregator import DAYS, HOURS, Grid, aggregate, slots
from heatmap.analyzer.color_mapper import color_for, format_hour, format_value, legend_for
from heatmap.core.view_registry import DerivedView, get_view
from heatmap.models.grid_models import HeatmapCell, HeatmapOutput, HeatmapView, ZeroSlot
from heatmap.core.logging import get_logger

logger = get_logger("analyzer.pipeline")

ALL_VIEWS = "all"


def resolve_views(view: Optional[str]) -> List[DerivedView]:
    """Turn a view selector ("all", a view id or None) into views.

    Raises ValueError for an unknown selector.
    """
    if view is None or view == ALL_VIEWS:
        return list(DerivedView)
    return [DerivedView(view)]


def render_view(grid: Grid, view: DerivedView) -> HeatmapView:
    """Render every slot of a grid under one view."""
    definition = get_view(view)
    bounds = grid.bounds(view)

    cells: List[HeatmapCell] = []
    for day, hour in slots():
        cell = grid.cell(day, hour)
        value = definition.project(cell.conversions, cell.cost)
        color = color_for(value, view, bounds.min_value, bounds.max_value)
        cells.append(
            HeatmapCell(
                day=day,
                hour=hour,
                hour_label=format_hour(hour),
                value=value,
                display=format_value(value, view),
                conversions=cell.conversions,
                cost=cell.cost,
                background_color=color.background_color,
                text_color=color.text_color,
            )
        )

    return HeatmapView(
        view=view.value,
        title=definition.title,
        bounds=bounds,
        legend=legend_for(view, bounds),
        cells=cells,
        zero_slots=[
            ZeroSlot(day=d, hour=h, hour_label=format_hour(h))
            for d, h in grid.zero_slots(view)
        ],
    )


def build_heatmap(
    text: str,
    views: Iterable[DerivedView] | None = None,
    filename: str = "",
    sheet: Optional[str] = None,
) -> HeatmapOutput:
    """Parse, aggregate and render report text."""
    records = parse(text)
    grid = aggregate(records)
    totals = grid.totals()
    selected = list(views) if views is not None else list(DerivedView)

    output = HeatmapOutput(
        filename=filename,
        sheet=sheet,
        record_count=len(records),
        days=DAYS,
        hours=HOURS,
        total_conversions=totals.conversions,
        total_cost=totals.cost,
        views=[render_view(grid, v) for v in selected],
    )
    logger.info(
        f"Rendered {len(selected)} view(s) from {len(records)} records",
        extra={"file_name": filename, "sheet": sheet},
    )
    return output
