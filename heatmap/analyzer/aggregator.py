"""Heatmap Viewer — Metric Aggregator.

Builds the 7 × 24 weekday/hour grid from parsed records and exposes the
derived views over it. Lookups are total over the canonical domain: a slot
with no record reads as a zero cell.
"""

from typing import Dict, Iterable, Iterator, List, Tuple

from heatmap.models.grid_models import Cell, Record, ViewBounds, ZERO_CELL
from heatmap.core.view_registry import DerivedView, get_view
from heatmap.core.logging import get_logger

logger = get_logger("analyzer.aggregator")

DAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
HOURS = list(range(24))

SlotKey = Tuple[str, int]

_DAY_SET = frozenset(DAYS)


def in_domain(day: str, hour: int) -> bool:
    """True if (day, hour) is one of the 168 canonical slots."""
    return day in _DAY_SET and 0 <= hour <= 23


def slots() -> Iterator[SlotKey]:
    """All canonical slots, hour-major (the order the grid is drawn in)."""
    for hour in HOURS:
        for day in DAYS:
            yield day, hour


class Grid:
    """Weekday × hour grid of (conversions, cost) cells."""

    def __init__(self, cells: Dict[SlotKey, Cell] | None = None):
        self._cells: Dict[SlotKey, Cell] = dict(cells or {})

    def __len__(self) -> int:
        return len(DAYS) * len(HOURS)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return all(self.cell(d, h) == other.cell(d, h) for d, h in slots())

    def cell(self, day: str, hour: int) -> Cell:
        """Cell at (day, hour); the zero cell if nothing was recorded there."""
        if not in_domain(day, hour):
            raise KeyError((day, hour))
        return self._cells.get((day, hour), ZERO_CELL)

    def value(self, day: str, hour: int, view: DerivedView | str) -> float:
        """Display value of a slot under a view, computed on demand."""
        cell = self.cell(day, hour)
        return get_view(view).project(cell.conversions, cell.cost)

    def values(self, view: DerivedView | str) -> List[float]:
        definition = get_view(view)
        return [
            definition.project(cell.conversions, cell.cost)
            for cell in (self.cell(d, h) for d, h in slots())
        ]

    def bounds(self, view: DerivedView | str) -> ViewBounds:
        """Min / max of a view over all 168 slots (min ≤ 0, max ≥ 1)."""
        values = self.values(view)
        return ViewBounds(min_value=min(values + [0.0]), max_value=max(values + [1.0]))

    def zero_slots(self, view: DerivedView | str) -> List[SlotKey]:
        """Slots whose view value is exactly zero, in drawing order."""
        return [(d, h) for d, h in slots() if self.value(d, h, view) == 0]

    def totals(self) -> Cell:
        conversions = sum(c.conversions for c in self._cells.values())
        cost = sum(c.cost for c in self._cells.values())
        return Cell(conversions=conversions, cost=cost)

    def rows(self) -> Iterator[Tuple[str, int, float, float]]:
        """(day, hour, conversions, cost) for every slot, day-major."""
        for day in DAYS:
            for hour in HOURS:
                cell = self.cell(day, hour)
                yield day, hour, cell.conversions, cell.cost


def aggregate(records: Iterable[Record]) -> Grid:
    """Place records into a grid; later records win on a (day, hour) collision."""
    cells: Dict[SlotKey, Cell] = {}
    dropped = 0
    for record in records:
        if not in_domain(record.day, record.hour):
            dropped += 1
            continue
        cells[(record.day, record.hour)] = Cell(
            conversions=record.conversions, cost=record.cost
        )
    if dropped:
        logger.debug(f"Dropped {dropped} records outside the weekday/hour domain")
    return Grid(cells)
