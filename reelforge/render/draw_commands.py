"""Draw commands produced by the resolver.

A draw command is the fully resolved state of one visual element at one
instant: static geometry and payload from the project plus the animated
scale, translation and opacity. The rasterizer composes
``translate(x + w/2 + translate_x, y + h/2 + translate_y) * scale(scale)``
about the element center and draws with ``alpha``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from reelforge.schemas.project import TextStyle


class CommandType(Enum):
    """Kinds of draw commands."""

    IMAGE = "image"
    VIDEO = "video"
    TEXT = "text"
    BANNER = "banner"


@dataclass(frozen=True)
class BannerFrame:
    """News banner state at one instant."""

    bar_x: int
    bar_y: int
    bar_w: int
    bar_h: int
    bar_alpha: float
    bar_radius: int
    bar_color: str
    text_alpha: float
    text_x: int
    text_y: int
    font: str
    font_size: int
    line_height: int
    text_color: str
    lines: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "barX": self.bar_x,
            "barY": self.bar_y,
            "barW": self.bar_w,
            "barH": self.bar_h,
            "barAlpha": self.bar_alpha,
            "barRadius": self.bar_radius,
            "barColor": self.bar_color,
            "textAlpha": self.text_alpha,
            "textX": self.text_x,
            "textY": self.text_y,
            "font": self.font,
            "fontSize": self.font_size,
            "lineHeight": self.line_height,
            "textColor": self.text_color,
            "lines": list(self.lines),
        }


@dataclass(frozen=True)
class DrawCommand:
    """One element to draw, in draw order."""

    type: CommandType
    x: float
    y: float
    w: float
    h: float
    z: int
    id: Optional[str] = None
    alpha: float = 1.0
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    src: Optional[str] = None
    text: Optional[str] = None
    style: Optional[TextStyle] = None
    anchor: Optional[str] = None
    source_time: Optional[float] = None  # video only: seconds into the source
    banner: Optional[BannerFrame] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the rasterizer wire format."""
        data: dict[str, Any] = {
            "type": self.type.value,
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "w": self.w,
            "h": self.h,
            "z": self.z,
            "alpha": self.alpha,
            "scale": self.scale,
            "translateX": self.translate_x,
            "translateY": self.translate_y,
        }
        if self.type in (CommandType.IMAGE, CommandType.VIDEO):
            data["src"] = self.src
        if self.type == CommandType.VIDEO:
            data["sourceTime"] = self.source_time
        if self.type == CommandType.TEXT:
            data["text"] = self.text
            data["style"] = self.style.model_dump(exclude_none=True) if self.style else None
            data["anchor"] = self.anchor
        if self.banner is not None:
            data["banner"] = self.banner.to_dict()
        return data


@dataclass(frozen=True)
class SubtitleCommand:
    """Caption box drawn above every other element."""

    text: str
    x: float
    y: float
    w: float
    h: float
    radius: float
    font: str
    text_color: str
    blur_px: int
    tint_color: str
    fallback_color: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "x": self.x,
            "y": self.y,
            "w": self.w,
            "h": self.h,
            "radius": self.radius,
            "font": self.font,
            "textColor": self.text_color,
            "blurPx": self.blur_px,
            "tintColor": self.tint_color,
            "fallbackColor": self.fallback_color,
        }
