"""Heatmap Viewer — Grid & Rendering Models."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    """One parsed row of an hour × weekday report. Immutable."""

    model_config = ConfigDict(frozen=True)

    hour: int
    day: str
    conversions: float = 0.0
    cost: float = 0.0


class Cell(BaseModel):
    """Aggregated (conversions, cost) pair stored in a grid slot."""

    model_config = ConfigDict(frozen=True)

    conversions: float = 0.0
    cost: float = 0.0


ZERO_CELL = Cell()


class ViewBounds(BaseModel):
    """Min / max of a derived view across the whole grid."""

    min_value: float = 0.0
    max_value: float = 1.0


class ColorSample(BaseModel):
    """Background and contrasting text color for a rendered cell."""

    model_config = ConfigDict(frozen=True)

    background_color: str
    text_color: str


# ─────────────────────────────────────────────
# PYDANTIC SCHEMAS — Heatmap Output
# ─────────────────────────────────────────────


class LegendSwatch(BaseModel):
    """One color box of the legend."""

    label: str  # "Low" | "Medium" | "High"
    color: str


class Legend(BaseModel):
    """Low → high legend for a view."""

    low_label: str
    high_label: str
    swatches: List[LegendSwatch] = []


class HeatmapCell(BaseModel):
    """A rendered grid slot."""

    day: str
    hour: int
    hour_label: str
    value: float
    display: str
    conversions: float
    cost: float
    background_color: str
    text_color: str


class ZeroSlot(BaseModel):
    """A (day, hour) slot whose view value is zero."""

    day: str
    hour: int
    hour_label: str


class HeatmapView(BaseModel):
    """One fully rendered derived view."""

    view: str
    title: str
    bounds: ViewBounds
    legend: Legend
    cells: List[HeatmapCell] = []
    zero_slots: List[ZeroSlot] = []


class HeatmapOutput(BaseModel):
    """Rendered heatmap(s) for one stored table."""

    filename: str = ""
    sheet: Optional[str] = None
    record_count: int = 0
    days: List[str] = []
    hours: List[int] = []
    total_conversions: float = 0.0
    total_cost: float = 0.0
    views: List[HeatmapView] = []
