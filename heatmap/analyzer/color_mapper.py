"""Heatmap Viewer — Color Mapper.

Maps a display value to a background color by linear interpolation between a
view's low and high anchor colors, and picks black or white text for contrast.
Every function here is pure.
"""

from typing import Tuple

from heatmap.models.grid_models import ColorSample, Legend, LegendSwatch, ViewBounds
from heatmap.core.view_registry import DerivedView, WORST_CASE_RED, get_view

RGB = Tuple[int, int, int]

BLACK_TEXT = "#000000"
WHITE_TEXT = "#ffffff"
LUMINANCE_THRESHOLD = 155


def hex_to_rgb(color: str) -> RGB:
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


def rgb_to_hex(rgb: RGB) -> str:
    return "#" + "".join(f"{channel:02x}" for channel in rgb)


def _round_half_up(x: float) -> int:
    # Python's round() is banker's rounding; colors round .5 upward
    return int(x + 0.5) if x >= 0 else -int(-x + 0.5)


def interpolate_color(low: str, high: str, factor: float) -> str:
    """Blend two hex colors channel-wise; factor 0 → low, 1 → high."""
    low_rgb, high_rgb = hex_to_rgb(low), hex_to_rgb(high)
    return rgb_to_hex(
        tuple(
            _round_half_up(lo + (hi - lo) * factor) for lo, hi in zip(low_rgb, high_rgb)
        )
    )


def luminance(color: str) -> float:
    """Perceptual brightness (0–255) of a hex color."""
    r, g, b = hex_to_rgb(color)
    return 0.299 * r + 0.587 * g + 0.114 * b


def text_color_for(background: str) -> str:
    return BLACK_TEXT if luminance(background) > LUMINANCE_THRESHOLD else WHITE_TEXT


def intensity(value: float, max_value: float) -> float:
    """value / max clamped to [0, 1]."""
    if max_value <= 0:
        return 0.0
    return min(max(value / max_value, 0.0), 1.0)


def color_for(
    value: float,
    view: DerivedView | str,
    min_value: float,
    max_value: float,
) -> ColorSample:
    """Background and text color for one cell.

    min_value is accepted for symmetry with the legend but the scale is
    anchored at zero, so it does not shift the blend.
    """
    definition = get_view(view)
    if definition.zero_is_worst and value == 0:
        background = WORST_CASE_RED
    else:
        background = interpolate_color(
            definition.low_color, definition.high_color, intensity(value, max_value)
        )
    return ColorSample(background_color=background, text_color=text_color_for(background))


# ─────────────────────────────────────────────
# LABELS & LEGEND
# ─────────────────────────────────────────────


def format_value(value: float, view: DerivedView | str) -> str:
    """Cell label: ratio views with two decimals, counts without trailing .0."""
    if value == 0:
        return "0"
    if get_view(view).is_ratio:
        return f"{value:.2f}"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_bound(value: float, view: DerivedView | str) -> str:
    if get_view(view).is_ratio:
        return f"{value:.2f}"
    return str(_round_half_up(value))


def format_hour(hour: int) -> str:
    """12am, 1am … 11am, 12pm, 1pm … 11pm."""
    if hour == 0:
        return "12am"
    if hour < 12:
        return f"{hour}am"
    if hour == 12:
        return "12pm"
    return f"{hour - 12}pm"


def legend_for(view: DerivedView | str, bounds: ViewBounds) -> Legend:
    """Low / medium / high swatches with numeric bounds.

    The bounds are the plain numeric min / max; the zero-is-worst override of
    cost/conversion cells is not reflected here.
    """
    definition = get_view(view)
    return Legend(
        low_label=f"Low ({format_bound(bounds.min_value, view)})",
        high_label=f"High ({format_bound(bounds.max_value, view)})",
        swatches=[
            LegendSwatch(label="Low", color=definition.low_color),
            LegendSwatch(
                label="Medium",
                color=interpolate_color(definition.low_color, definition.high_color, 0.5),
            ),
            LegendSwatch(label="High", color=definition.high_color),
        ],
    )
