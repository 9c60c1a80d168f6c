"""News banner timing and geometry.

The banner is a rounded bar that grows upward from a fixed bottom edge, fades
its title in, holds, fades the title out and collapses again. The six phases
have nominal durations; when the overlay window is shorter than the nominal
total every phase is compressed proportionally and the rounding drift is
corrected on the collapse phase, so the phases always fill the window
exactly.

    grow | delay | text fade-in | hold | text fade-out | collapse
    300  | 100   | 200          | 4000 | 200           | 300      (ms)

Compression starts below 5300ms.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from reelforge.render.draw_commands import BannerFrame, CommandType, DrawCommand
from reelforge.render.text_layout import TextMeasurer, wrap_words
from reelforge.schemas.project import DEFAULT_OVERLAY_Z, NewsBannerOverlay
from reelforge.utils.interpolation import ease_in_out, ease_out, lerp, progress, round_half_up

logger = logging.getLogger(__name__)

PHASE_NAMES = ("grow", "delay", "text_fade", "hold", "text_out", "collapse")

NOMINAL_PHASES_MS: dict[str, int] = {
    "grow": 300,
    "delay": 100,
    "text_fade": 200,
    "hold": 4000,
    "text_out": 200,
    "collapse": 300,
}
# Compression threshold and default window; the nominal phases themselves
# add up to 5100ms, so an uncompressed banner ends 200ms before its window.
NOMINAL_TOTAL_MS = 5300

# delay and hold may vanish entirely; the others keep at least 1ms
PHASE_FLOORS_MS: dict[str, int] = {
    "grow": 1,
    "delay": 0,
    "text_fade": 1,
    "hold": 0,
    "text_out": 1,
    "collapse": 1,
}

# Order in which other phases give up time when collapse would drop below 1ms
_DEFICIT_ORDER = ("hold", "delay", "text_out", "text_fade", "grow")
_LAST_RESORT_ORDER = ("text_out", "text_fade", "grow")


@dataclass(frozen=True)
class BannerPhases:
    """Phase durations in ms, relative to the banner start."""

    grow: int
    delay: int
    text_fade: int
    hold: int
    text_out: int
    collapse: int

    @property
    def text_start(self) -> int:
        return self.grow + self.delay

    @property
    def text_visible(self) -> int:
        return self.text_start + self.text_fade

    @property
    def text_out_start(self) -> int:
        return self.text_visible + self.hold

    @property
    def collapse_start(self) -> int:
        return self.text_out_start + self.text_out

    @property
    def total(self) -> int:
        return self.collapse_start + self.collapse

    def durations(self) -> tuple[int, ...]:
        return tuple(getattr(self, name) for name in PHASE_NAMES)


def compute_phases(available_ms: int) -> BannerPhases:
    """Fit the six phases into ``available_ms``.

    Pass 1 scales every nominal duration by ``available / nominal_total``
    and floors it. Pass 2 moves the residual onto collapse; if that leaves
    collapse under 1ms the shortfall is taken from the other phases.
    """
    available = max(1, int(available_ms))
    # At the threshold and above the phases stay nominal (5100ms), so the sum
    # drops from available to 5100 between 5299 and 5300.
    if available >= NOMINAL_TOTAL_MS:
        return BannerPhases(**NOMINAL_PHASES_MS)

    factor = available / NOMINAL_TOTAL_MS
    durations = {
        name: max(PHASE_FLOORS_MS[name], round_half_up(NOMINAL_PHASES_MS[name] * factor))
        for name in PHASE_NAMES
    }

    durations["collapse"] += available - sum(durations.values())
    if durations["collapse"] < 1:
        deficit = 1 - durations["collapse"]
        durations["collapse"] = 1
        for name in _DEFICIT_ORDER:
            take = min(deficit, durations[name] - PHASE_FLOORS_MS[name])
            durations[name] -= take
            deficit -= take
        # Windows shorter than the 1ms floors combined
        for name in _LAST_RESORT_ORDER:
            take = min(deficit, durations[name])
            durations[name] -= take
            deficit -= take

    logger.debug(f"[BANNER] Compressed phases to {available}ms: {durations}")
    return BannerPhases(**durations)


@dataclass(frozen=True)
class BannerStyle:
    """Banner geometry in canvas pixels (designed for a 1080x1920 canvas)."""

    bar_width: int = 804
    initial_height: int = 146
    final_height: int = 473
    radius: int = 73
    initial_top: int = 1396
    bar_color: str = "#F8604A"
    font_size: int = 70
    font_family: str = "YSText, system-ui"
    text_color: str = "#ffffff"
    text_width: int = 704
    text_top_offset: int = 50

    @property
    def bar_bottom(self) -> int:
        return self.initial_top + self.initial_height

    @property
    def line_height(self) -> int:
        return round_half_up(self.font_size * 1.1)

    @property
    def font(self) -> str:
        return f"400 {self.font_size}px {self.font_family}"

    @property
    def max_lines(self) -> int:
        return max(1, math.floor((self.final_height - self.text_top_offset) / self.line_height))


def banner_window_ms(overlay: NewsBannerOverlay) -> Optional[tuple[int, int]]:
    """(start_ms, available_ms) or None when the banner has no start."""
    if overlay.start is None:
        return None
    start_ms = round_half_up(overlay.start * 1000)
    if overlay.end is not None:
        end_ms = round_half_up(overlay.end * 1000)
    else:
        end_ms = start_ms + NOMINAL_TOTAL_MS
    return start_ms, max(1, end_ms - start_ms)


def _text_alpha(local: float, phases: BannerPhases) -> float:
    if local < phases.text_start:
        return 0.0
    if local <= phases.text_visible:
        return ease_in_out(progress(local - phases.text_start, phases.text_fade))
    if local < phases.text_out_start:
        return 1.0
    if local <= phases.text_out_start + phases.text_out:
        return 1 - ease_in_out(progress(local - phases.text_out_start, phases.text_out))
    return 0.0


def banner_state(
    overlay: NewsBannerOverlay,
    ms: float,
    canvas_width: int,
    measurer: TextMeasurer,
    style: BannerStyle = BannerStyle(),
) -> Optional[BannerFrame]:
    """Banner geometry and text at ``ms``, or None when it is not showing."""
    if not overlay.news_title:
        return None
    window = banner_window_ms(overlay)
    if window is None:
        return None
    start_ms, available = window
    phases = compute_phases(available)

    local = ms - start_ms
    if local < 0 or local > phases.total:
        return None

    if local <= phases.grow:
        t = ease_out(progress(local, phases.grow))
        bar_h = lerp(style.initial_height, style.final_height, t)
        bar_alpha = t
    elif local >= phases.collapse_start:
        p = progress(local - phases.collapse_start, phases.collapse)
        bar_h = lerp(style.initial_height, style.final_height, 1 - ease_out(p))
        bar_alpha = max(0.0, 1 - p)
    else:
        bar_h = style.final_height
        bar_alpha = 1.0

    bar_x = round_half_up((canvas_width - style.bar_width) / 2)
    bar_y = round_half_up(style.bar_bottom - bar_h)

    text_alpha = _text_alpha(local, phases)
    lines: list[str] = []
    if text_alpha > 0:
        lines = wrap_words(
            overlay.news_title,
            style.text_width,
            lambda s: measurer.measure(s, style.font_size),
        )[: style.max_lines]

    return BannerFrame(
        bar_x=bar_x,
        bar_y=bar_y,
        bar_w=style.bar_width,
        bar_h=max(1, round_half_up(bar_h)),
        bar_alpha=bar_alpha,
        bar_radius=style.radius,
        bar_color=style.bar_color,
        text_alpha=text_alpha,
        text_x=round_half_up((canvas_width - style.text_width) / 2),
        text_y=bar_y + style.text_top_offset,
        font=style.font,
        font_size=style.font_size,
        line_height=style.line_height,
        text_color=style.text_color,
        lines=lines,
    )


def banner_command(
    overlay: NewsBannerOverlay,
    ms: float,
    canvas_width: int,
    measurer: TextMeasurer,
    style: BannerStyle = BannerStyle(),
) -> Optional[DrawCommand]:
    """Wrap ``banner_state`` in a draw command carrying the overlay's z."""
    frame = banner_state(overlay, ms, canvas_width, measurer, style)
    if frame is None:
        return None
    return DrawCommand(
        type=CommandType.BANNER,
        x=frame.bar_x,
        y=frame.bar_y,
        w=frame.bar_w,
        h=frame.bar_h,
        z=banner_z(overlay),
        alpha=frame.bar_alpha,
        banner=frame,
    )


def banner_z(overlay: NewsBannerOverlay) -> int:
    return overlay.z if overlay.z is not None else DEFAULT_OVERLAY_Z
