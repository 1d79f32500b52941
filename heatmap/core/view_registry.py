"""Heatmap Viewer — Derived View Registry.

Defines the four ways a grid cell's (conversions, cost) pair is projected to a
single display value, together with the anchor colors each view is painted
with. Renderers and the aggregator look views up here instead of branching on
view names.
"""

from enum import Enum
from typing import Callable, Dict


class DerivedView(str, Enum):
    """How a cell is projected to a display value."""

    CONVERSIONS = "conversions"
    COST = "cost"
    CONVERSION_COST = "conversion-cost"  # conversions per unit of cost
    COST_CONVERSION = "cost-conversion"  # cost per conversion


# ─────────────────────────────────────────────
# ANCHOR COLORS
# ─────────────────────────────────────────────

WHITE = "#ffffff"
GREEN = "#2da155"
RED = "#fe7f7f"
WORST_CASE_RED = "#b91c1c"


def _conversion_cost(conversions: float, cost: float) -> float:
    return conversions / cost if cost > 0 else 0.0


def _cost_conversion(conversions: float, cost: float) -> float:
    return cost / conversions if conversions > 0 else 0.0


class ViewDefinition:
    """Describes a single derived view."""

    def __init__(
        self,
        view: DerivedView,
        title: str,
        project: Callable[[float, float], float],
        low_color: str,
        high_color: str,
        is_ratio: bool = False,
        zero_is_worst: bool = False,
    ):
        self.view = view
        self.title = title
        self.project = project
        self.low_color = low_color
        self.high_color = high_color
        self.is_ratio = is_ratio
        self.zero_is_worst = zero_is_worst

    def __repr__(self) -> str:
        return f"<View {self.view.value}>"


# ─────────────────────────────────────────────
# VIEWS — Canonical Registry
# ─────────────────────────────────────────────

VIEWS: Dict[DerivedView, ViewDefinition] = {
    DerivedView.CONVERSIONS: ViewDefinition(
        DerivedView.CONVERSIONS,
        "Conversion Heatmap",
        lambda conversions, cost: conversions,
        WHITE,
        GREEN,
    ),
    DerivedView.COST: ViewDefinition(
        DerivedView.COST,
        "Cost Heatmap",
        lambda conversions, cost: cost,
        WHITE,
        RED,
    ),
    DerivedView.CONVERSION_COST: ViewDefinition(
        DerivedView.CONVERSION_COST,
        "Conversion/Cost Heatmap",
        _conversion_cost,
        WHITE,
        GREEN,
        is_ratio=True,
    ),
    # Zero conversions with nonzero cost is the least desirable slot
    DerivedView.COST_CONVERSION: ViewDefinition(
        DerivedView.COST_CONVERSION,
        "Cost/Conversion Heatmap",
        _cost_conversion,
        WHITE,
        RED,
        is_ratio=True,
        zero_is_worst=True,
    ),
}


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def get_view(view: DerivedView | str) -> ViewDefinition:
    """Look up a view by enum member or identifier. Raises ValueError if unknown."""
    return VIEWS[DerivedView(view)]


def project(view: DerivedView | str, conversions: float, cost: float) -> float:
    """Compute the display value of a (conversions, cost) pair for a view."""
    return get_view(view).project(conversions, cost)
