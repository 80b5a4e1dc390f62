from __future__ import annotations

import logging
import math
import textwrap
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from matplotlib.figure import Figure

from likert_charts.config import LIKERT_CATEGORIES, LIKERT_LABELS
from likert_charts.core.ui_adapter import InMemoryUIAdapter, UIAdapter

logger = logging.getLogger(__name__)

BAR_COLOR = "#4c282e"

# Fraction of each band slot left empty between bars (and at both ends).
BAR_PADDING = 0.3

# Upper bound of the count axis when every count is zero.
EMPTY_AXIS_MAX = 5

Y_TICK_COUNT = 5

# Space reserved above the plot margins for the question title.
TITLE_BAND_PX = 40
TITLE_WRAP_CHARS_PER_PX = 1 / 8

DPI = 100


# ---------------------------------------------------------------------------
# Layout variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Margins:
    top: int
    right: int
    bottom: int
    left: int


@dataclass(frozen=True)
class ChartLayout:
    """
    Pixel geometry of one chart variant.

    width/height are the outer plot size (title band excluded); the bars
    are drawn in the inner area left after the margins.
    """
    margins: Margins
    width: int
    height: int
    tick_rotation: float = 0.0

    @property
    def inner_width(self) -> int:
        return self.width - self.margins.left - self.margins.right

    @property
    def inner_height(self) -> int:
        return self.height - self.margins.top - self.margins.bottom


# Short titles, sentiment labels rotated to fit under 400px wide charts.
COMPACT_LAYOUT = ChartLayout(
    margins=Margins(top=30, right=20, bottom=80, left=40),
    width=400,
    height=300,
    tick_rotation=25.0,
)

# Full question text, horizontal labels.
WIDE_LAYOUT = ChartLayout(
    margins=Margins(top=30, right=20, bottom=50, left=40),
    width=500,
    height=300,
    tick_rotation=0.0,
)

LAYOUTS: Dict[str, ChartLayout] = {
    "compact": COMPACT_LAYOUT,
    "wide": WIDE_LAYOUT,
}


def get_layout(name: str) -> ChartLayout:
    key = (name or "").strip().lower()
    if key not in LAYOUTS:
        raise ValueError(f"Unknown chart layout: {name!r}. Expected one of {sorted(LAYOUTS)}")
    return LAYOUTS[key]


# ---------------------------------------------------------------------------
# Scales
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BandScale:
    """
    Discrete axis: splits [0, extent] into equal slots, one per domain value.

    Each bar takes (1 - padding) of its slot; half a padding's worth of
    slot is left at each end, so bars stay centred in the extent.
    """
    domain: Tuple[int, ...]
    extent: float
    padding: float = BAR_PADDING

    @property
    def step(self) -> float:
        n = len(self.domain)
        return self.extent / max(1.0, n - self.padding + 2 * self.padding)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def __call__(self, value: int) -> float:
        index = self.domain.index(value)
        return self.step * self.padding + index * self.step

    def center(self, value: int) -> float:
        return self(value) + self.bandwidth / 2


@dataclass(frozen=True)
class LinearScale:
    """Continuous count axis mapping domain [d0, d1] onto range [r0, r1]."""

    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def ticks(self, count: int = Y_TICK_COUNT) -> List[int]:
        """Whole-number tick values covering the domain, roughly `count` intervals."""
        d0, d1 = self.domain
        step = _integer_tick_step(d1 - d0, count)
        first = int(math.ceil(d0 / step)) * step
        return list(range(first, int(math.floor(d1)) + 1, step))


def _integer_tick_step(span: float, count: int) -> int:
    raw = span / max(count, 1)
    if raw <= 0:
        return 1
    power = 10 ** math.floor(math.log10(raw))
    error = raw / power
    if error >= math.sqrt(50):
        step = power * 10
    elif error >= math.sqrt(10):
        step = power * 5
    elif error >= math.sqrt(2):
        step = power * 2
    else:
        step = power
    return max(1, int(round(step)))


def build_x_scale(layout: ChartLayout) -> BandScale:
    return BandScale(domain=LIKERT_CATEGORIES, extent=float(layout.inner_width))


def build_y_scale(series: Sequence[Tuple[int, int]], layout: ChartLayout) -> LinearScale:
    max_count = max((count for _, count in series), default=0)
    upper = max_count or EMPTY_AXIS_MAX
    return LinearScale(domain=(0.0, float(upper)), range=(0.0, float(layout.inner_height)))


# ---------------------------------------------------------------------------
# Chart element
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BarGeometry:
    """One bar in inner-area pixels; every bar starts at the baseline y=0."""
    category: int
    label: str
    count: int
    x: float
    width: float
    height: float


@dataclass(frozen=True)
class ChartElement:
    title: str
    series: Tuple[Tuple[int, int], ...]
    layout: ChartLayout
    x_scale: BandScale
    y_scale: LinearScale
    bars: Tuple[BarGeometry, ...]
    figure: Figure

    @property
    def y_ticks(self) -> List[int]:
        return self.y_scale.ticks()


def compute_bars(
    series: Sequence[Tuple[int, int]],
    x_scale: BandScale,
    y_scale: LinearScale,
) -> Tuple[BarGeometry, ...]:
    counts = dict(series)
    return tuple(
        BarGeometry(
            category=c,
            label=LIKERT_LABELS[c],
            count=counts.get(c, 0),
            x=x_scale(c),
            width=x_scale.bandwidth,
            height=y_scale(counts.get(c, 0)),
        )
        for c in x_scale.domain
    )


def _draw_figure(
    title: str,
    layout: ChartLayout,
    bars: Sequence[BarGeometry],
    y_scale: LinearScale,
) -> Figure:
    outer_h = layout.height + TITLE_BAND_PX
    fig = Figure(figsize=(layout.width / DPI, outer_h / DPI), dpi=DPI)

    m = layout.margins
    ax = fig.add_axes((
        m.left / layout.width,
        m.bottom / outer_h,
        layout.inner_width / layout.width,
        layout.inner_height / outer_h,
    ))

    wrap_at = max(10, int(layout.width * TITLE_WRAP_CHARS_PER_PX))
    fig.text(
        0.5,
        1 - 6 / outer_h,
        textwrap.fill(title, width=wrap_at),
        ha="center",
        va="top",
        fontsize=11,
        fontweight="bold",
    )

    ax.bar(
        [b.x for b in bars],
        [b.height for b in bars],
        width=[b.width for b in bars],
        bottom=0,
        align="edge",
        color=BAR_COLOR,
    )
    ax.set_xlim(0, layout.inner_width)
    ax.set_ylim(0, layout.inner_height)

    rotated = bool(layout.tick_rotation)
    ax.set_xticks([b.x + b.width / 2 for b in bars])
    ax.set_xticklabels(
        [b.label for b in bars],
        rotation=layout.tick_rotation,
        ha="right" if rotated else "center",
        rotation_mode="anchor" if rotated else "default",
        fontsize=8,
    )

    ticks = y_scale.ticks()
    ax.set_yticks([y_scale(t) for t in ticks])
    ax.set_yticklabels([f"{t:d}" for t in ticks], fontsize=8)

    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    return fig


def build_chart(
    title: str,
    series: Sequence[Tuple[int, int]],
    layout: ChartLayout = COMPACT_LAYOUT,
) -> ChartElement:
    frozen_series = tuple((int(c), int(n)) for c, n in series)
    x_scale = build_x_scale(layout)
    y_scale = build_y_scale(frozen_series, layout)
    bars = compute_bars(frozen_series, x_scale, y_scale)
    figure = _draw_figure(title, layout, bars, y_scale)
    return ChartElement(
        title=title,
        series=frozen_series,
        layout=layout,
        x_scale=x_scale,
        y_scale=y_scale,
        bars=bars,
        figure=figure,
    )


_DEFAULT_ADAPTER = InMemoryUIAdapter()


def render(
    target: Any,
    title: str,
    series: Sequence[Tuple[int, int]],
    *,
    layout: ChartLayout = COMPACT_LAYOUT,
    adapter: Optional[UIAdapter] = None,
) -> None:
    """
    Draw one question's bar chart and append it to `target`.

    Earlier charts in the container are left alone; clearing before a
    re-render is up to the caller.
    """
    element = build_chart(title, series, layout)
    (adapter or _DEFAULT_ADAPTER).append_chart(target, element)
    logger.debug("Rendered chart %r (y max=%s)", title, element.y_scale.domain[1])
