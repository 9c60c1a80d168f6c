"""Text measurement and layout for text draw commands and the news banner.

The rasterizer owns the real fonts, but line breaking has to be decided with
the same widths the rasterizer will use, so measurement is injected through
the ``TextMeasurer`` protocol. ``PillowTextMeasurer`` is the default
implementation backed by Pillow's FreeType bindings.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from PIL import ImageFont

from reelforge.config import get_settings
from reelforge.render.draw_commands import DrawCommand

logger = logging.getLogger(__name__)

DEFAULT_TEXT_FONT = "600 42px YSText"
DEFAULT_TEXT_COLOR = "#fff"
DEFAULT_TEXT_PAD = 10
DEFAULT_TEXT_RADIUS = 12
DEFAULT_FONT_SIZE = 42

SHADOW_COLOR = "rgba(0,0,0,0.6)"
SHADOW_BLUR = 6
SHADOW_OFFSET_Y = 2

_FONT_SIZE_RE = re.compile(r"(\d+)px")


class TextMeasurer(Protocol):
    def measure(self, text: str, font_size: int) -> float:
        """Return the rendered width of ``text`` in pixels."""
        ...


class PillowTextMeasurer:
    """Measures text with Pillow, trying the configured fonts in order."""

    def __init__(self, font_paths: Optional[list[str]] = None):
        self.font_paths = font_paths if font_paths is not None else get_settings().font_paths
        self._fonts: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def _font(self, font_size: int):
        font = self._fonts.get(font_size)
        if font is not None:
            return font

        for candidate_path in self.font_paths:
            try:
                font = ImageFont.truetype(candidate_path, font_size)
                logger.debug(f"[TEXT] Loaded font: {candidate_path} ({font_size}px)")
                break
            except OSError:
                continue

        if font is None:
            logger.warning(f"[TEXT] No suitable font found, using PIL default ({font_size}px)")
            font = ImageFont.load_default(size=font_size)

        self._fonts[font_size] = font
        return font

    def measure(self, text: str, font_size: int) -> float:
        return float(self._font(font_size).getlength(text))


def parse_font_size(font: Optional[str], default: int = DEFAULT_FONT_SIZE) -> int:
    """Pixel size from a CSS font shorthand such as ``"600 42px YSText"``."""
    if not font:
        return default
    match = _FONT_SIZE_RE.search(font)
    return int(match.group(1)) if match else default


def wrap_words(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Greedy line fill.

    A word is appended to the current line while the candidate line measures
    no wider than ``max_width``; otherwise it starts a new line. The first
    word of a line is always placed, even when it alone is too wide.
    """
    lines: list[str] = []
    current = ""
    for word in str(text).split():
        candidate = f"{current} {word}" if current else word
        if not current or measure(candidate) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


@dataclass(frozen=True)
class TextBox:
    """Rounded-rectangle background behind a text object."""

    x: float
    y: float
    w: float
    h: float
    radius: float
    color: str


@dataclass(frozen=True)
class TextShadow:
    color: str = SHADOW_COLOR
    blur: float = SHADOW_BLUR
    offset_y: float = SHADOW_OFFSET_Y


@dataclass(frozen=True)
class TextLayout:
    """Resolved layout for a text draw command."""

    lines: list[str]
    font: str
    font_size: int
    color: str
    align: str  # "center" or "left"
    x: float  # anchor x of every line
    y: float  # vertical middle of the first line
    line_height: float
    width: float  # widest line
    box: Optional[TextBox] = None
    shadow: Optional[TextShadow] = None
    line_ys: list[float] = field(default_factory=list)


def layout_text(command: DrawCommand, measurer: TextMeasurer) -> TextLayout:
    """Lay out a text command the way the canvas renderer draws text objects.

    Lines are word-wrapped to the object's width when it has one. Anchors
    starting with ``center`` center the text on ``x``; anchors ending with
    ``bottom`` put the box above ``y``.
    """
    style = command.style
    font = (style.font if style and style.font else None) or DEFAULT_TEXT_FONT
    color = (style.color if style and style.color else None) or DEFAULT_TEXT_COLOR
    pad = style.pad if style and style.pad else DEFAULT_TEXT_PAD
    radius = style.radius if style and style.radius else DEFAULT_TEXT_RADIUS
    font_size = parse_font_size(font)

    text = command.text or ""
    if command.w > 0:
        lines = wrap_words(text, command.w, lambda s: measurer.measure(s, font_size))
    else:
        lines = [text]
    if not lines:
        lines = [""]

    text_width = max(measurer.measure(line, font_size) for line in lines)
    line_height = font_size + pad * 1.5
    block_height = line_height * len(lines)

    anchor = command.anchor or ""
    centered = anchor.startswith("center")
    bottom = anchor.endswith("bottom")

    box = None
    if style and style.bg:
        box_x = command.x - (text_width / 2 + pad) if centered else command.x
        box_y = command.y - block_height if bottom else command.y
        box = TextBox(
            x=box_x,
            y=box_y,
            w=text_width + pad * 2,
            h=block_height,
            radius=radius,
            color=style.bg,
        )

    first_y = command.y - block_height + line_height / 2 if bottom else command.y
    line_ys = [first_y + i * line_height for i in range(len(lines))]

    return TextLayout(
        lines=lines,
        font=font,
        font_size=font_size,
        color=color,
        align="center" if centered else "left",
        x=command.x if centered else command.x + pad,
        y=first_y,
        line_height=line_height,
        width=text_width,
        box=box,
        shadow=TextShadow() if style and style.shadow else None,
        line_ys=line_ys,
    )
