"""Subtitle selection and caption box layout."""

from dataclasses import dataclass
from typing import Optional, Sequence

from reelforge.render.draw_commands import SubtitleCommand
from reelforge.schemas.project import Subtitle


@dataclass(frozen=True)
class SubtitleStyle:
    """Caption box, designed for a 1080x1920 canvas."""

    box_width: int = 796
    box_height: int = 138
    top: int = 1400
    radius: int = 69
    font: str = "54px YSText, system-ui"
    text_color: str = "#fff"
    blur_px: int = 64
    tint_color: str = "rgba(0,0,0,0.35)"
    fallback_color: str = "rgba(0,0,0,0.65)"


def select_subtitle(subtitles: Sequence[Subtitle], ms: float) -> Optional[Subtitle]:
    """First subtitle whose ``[start, end)`` window contains ``ms``."""
    for sub in subtitles:
        if sub.contains(ms):
            return sub
    return None


def subtitle_box(
    canvas_width: int, text: str, style: SubtitleStyle = SubtitleStyle()
) -> SubtitleCommand:
    return SubtitleCommand(
        text=text,
        x=(canvas_width - style.box_width) / 2,
        y=style.top,
        w=style.box_width,
        h=style.box_height,
        radius=style.radius,
        font=style.font,
        text_color=style.text_color,
        blur_px=style.blur_px,
        tint_color=style.tint_color,
        fallback_color=style.fallback_color,
    )
