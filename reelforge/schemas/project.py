"""Project document schemas.

Typed view over the timeline JSON consumed by the renderer. The document
shape is the one written by the editor front-end::

    {
      "project":   {"width": 1080, "height": 1920, "background": "#000", "fps": 30},
      "videoTrack": [{"start": 0, "end": 5, "objects": [...]}],
      "overlays":  [...],
      "subtitles": [...],
      "audio":     {"tracks": [...]}          # or legacy {"music": {...}}
    }

Optional/duck-typed parts of the format (overlay kinds, old and new audio
forms, easing names) are resolved once here so the render code works on one
canonical shape.
"""

import logging
import math
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)

from reelforge.config import get_settings
from reelforge.exceptions import InvalidTimeRangeError
from reelforge.utils.interpolation import EasingKind, parse_easing

logger = logging.getLogger(__name__)

DEFAULT_OVERLAY_Z = 100


def _coerce_seconds(value: Any) -> float | None:
    """Time bounds that are missing or not numbers become ``None`` (never active)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _coerce_id(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


Seconds = Annotated[float | None, BeforeValidator(_coerce_seconds)]


class _Model(BaseModel):
    """Base for document models: extra fields ignored, nulls mean "use default"."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class _Timed(_Model):
    start: Seconds = None
    end: Seconds = None

    @property
    def has_bounds(self) -> bool:
        return self.start is not None and self.end is not None

    def contains(self, ms: float) -> bool:
        """Half-open window test: ``ms / 1000`` in ``[start, end)`` seconds."""
        if not self.has_bounds:
            return False
        return self.start <= ms / 1000 < self.end


# =============================================================================
# Animations
# =============================================================================


class _AnimationBase(_Model):
    easing: EasingKind = EasingKind.LINEAR

    @field_validator("easing", mode="before")
    @classmethod
    def _resolve_easing(cls, v: Any) -> EasingKind:
        return parse_easing(v)


class ZoomAnimation(_AnimationBase):
    """Uniform scale from ``from`` to ``to`` across the scene."""

    type: Literal["zoom"] = "zoom"
    from_: float = Field(default=1.0, alias="from")
    to: float = 1.0


class Offset(_Model):
    x: float = 0.0
    y: float = 0.0


class MoveAnimation(_AnimationBase):
    """Translation offset from ``from`` to ``to`` across the scene."""

    type: Literal["move"] = "move"
    from_: Offset = Field(default_factory=Offset, alias="from")
    to: Offset = Field(default_factory=Offset)


class FadeAnimation(_AnimationBase):
    """Fade in/out windows in seconds at the scene edges."""

    type: Literal["fade"] = "fade"
    fade_in: float = Field(default=0.0, alias="in")
    fade_out: float = Field(default=0.0, alias="out")


Animation = Annotated[
    Union[ZoomAnimation, MoveAnimation, FadeAnimation],
    Field(discriminator="type"),
]

ANIMATION_TYPES = ("zoom", "move", "fade")


# =============================================================================
# Scenes
# =============================================================================


class TextStyle(_Model):
    font: str | None = None
    color: str | None = None
    pad: float | None = None
    radius: float | None = None
    bg: str | None = None
    shadow: bool = False


ObjectType = Literal["image", "video", "text"]


class SceneObject(_Model):
    type: ObjectType
    id: str | None = None
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0
    z: int = 0
    src: str | None = None
    text: str | None = None
    style: TextStyle | None = None
    anchor: str | None = None
    animations: list[Animation] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("animations", mode="before")
    @classmethod
    def _drop_unknown_animations(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        kept = []
        for anim in v:
            if isinstance(anim, BaseModel):
                kept.append(anim)
            elif isinstance(anim, dict) and anim.get("type") in ANIMATION_TYPES:
                kept.append(anim)
            else:
                kind = anim.get("type") if isinstance(anim, dict) else type(anim).__name__
                logger.warning(f"[LOAD] Dropping animation of unknown type: {kind}")
        return kept


class Scene(_Timed):
    objects: list[SceneObject] = Field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        if not self.has_bounds:
            return 0.0
        return (self.end - self.start) * 1000


# =============================================================================
# Overlays
# =============================================================================


class ImageOverlay(_Timed):
    """Time-windowed image or logo drawn independently of scenes."""

    type: str | None = None  # "logo" in most documents
    src: str | None = None
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0
    z: int | None = None
    opacity: float | None = None

    @field_validator("opacity")
    @classmethod
    def _clamp_opacity(cls, v: float | None) -> float | None:
        if v is None:
            return None
        return max(0.0, v)


class NewsBannerOverlay(_Timed):
    """Animated "breaking news" banner, recognized by its ``newsTitle``."""

    news_title: str = Field(alias="newsTitle")
    z: int | None = None


def _overlay_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "news" if isinstance(value.get("newsTitle"), str) else "image"
    return "news" if isinstance(value, NewsBannerOverlay) else "image"


Overlay = Annotated[
    Union[
        Annotated[ImageOverlay, Tag("image")],
        Annotated[NewsBannerOverlay, Tag("news")],
    ],
    Discriminator(_overlay_kind),
]


# =============================================================================
# Subtitles
# =============================================================================


class Subtitle(_Timed):
    text: str = ""


# =============================================================================
# Audio
# =============================================================================


class AudioTrack(_Model):
    """Canonical audio track.

    ``volume_percent`` is amplitude-linear (100 = unity); ``gain_db`` is the
    legacy decibel form. When both are absent the track plays at unity.
    """

    id: str
    src: str
    offset: float = 0.0
    volume_percent: float | None = Field(default=None, alias="volumePercent")
    gain_db: float | None = Field(default=None, alias="gain")

    @field_validator("offset")
    @classmethod
    def _clamp_offset(cls, v: float) -> float:
        return max(0.0, v)


class _TrackEntry(_Model):
    id: str | None = None
    src: str | None = None
    offset: float = 0.0
    volume_percent: float | None = Field(default=None, alias="volumePercent")
    gain_db: float | None = Field(default=None, alias="gain")

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)


class AudioSection(_Model):
    """Raw ``audio`` block: new ``tracks`` list or legacy single ``music``."""

    tracks: list[_TrackEntry] | None = None
    music: _TrackEntry | None = None

    def to_tracks(self) -> list[AudioTrack]:
        if self.tracks is not None:
            result = []
            for i, entry in enumerate(self.tracks):
                if not entry.src:
                    logger.warning(f"[LOAD] Skipping audio track {i} without src")
                    continue
                result.append(
                    AudioTrack(
                        id=entry.id or f"track-{i}",
                        src=entry.src,
                        offset=entry.offset,
                        volume_percent=entry.volume_percent,
                        gain_db=entry.gain_db,
                    )
                )
            return result

        if self.music is not None and self.music.src:
            return [
                AudioTrack(
                    id="music",
                    src=self.music.src,
                    offset=self.music.offset,
                    volume_percent=self.music.volume_percent,
                    gain_db=self.music.gain_db,
                )
            ]
        return []


# =============================================================================
# Project
# =============================================================================


class ProjectSettings(_Model):
    width: int = Field(default=1920, gt=0)
    height: int = Field(default=1080, gt=0)
    background: str = "#000"
    fps: float = Field(default_factory=lambda: get_settings().render_fps, gt=0)
    duration: float | None = Field(default=None, ge=0)


class Project(_Model):
    settings: ProjectSettings = Field(default_factory=ProjectSettings, alias="project")
    scenes: list[Scene] = Field(default_factory=list, alias="videoTrack")
    overlays: list[Overlay] = Field(default_factory=list)
    subtitles: list[Subtitle] = Field(default_factory=list)
    audio_tracks: list[AudioTrack] = Field(default_factory=list, alias="audioTracks")

    @model_validator(mode="before")
    @classmethod
    def _normalize_audio(cls, data: Any) -> Any:
        """Fold the ``audio`` block (either form) into ``audioTracks``."""
        if not isinstance(data, dict):
            return data
        if "audioTracks" in data or "audio_tracks" in data:
            return data
        audio = data.get("audio")
        if not isinstance(audio, dict):
            return data
        section = AudioSection.model_validate(audio)
        return {**data, "audioTracks": section.to_tracks()}

    @model_validator(mode="after")
    def _check_time_ranges(self) -> "Project":
        groups: list[tuple[str, list[_Timed]]] = [
            ("videoTrack", self.scenes),
            ("overlays", self.overlays),
            ("subtitles", self.subtitles),
        ]
        for name, items in groups:
            for i, item in enumerate(items):
                if item.has_bounds and item.end <= item.start:
                    raise InvalidTimeRangeError(
                        start=item.start, end=item.end, field=f"{name}[{i}]"
                    )
                if item.start is None or (item.end is None and not isinstance(item, NewsBannerOverlay)):
                    logger.warning(f"[LOAD] {name}[{i}] has no usable time bounds; it will never be drawn")
        return self

    @property
    def duration_seconds(self) -> float:
        """Explicit duration, else the end of the last-ending scene."""
        if self.settings.duration is not None:
            return self.settings.duration
        ends = [sc.end for sc in self.scenes if sc.end is not None]
        return max(ends + [0.0])

    @property
    def image_overlays(self) -> list[ImageOverlay]:
        return [o for o in self.overlays if isinstance(o, ImageOverlay)]

    @property
    def news_banner(self) -> NewsBannerOverlay | None:
        """First news-banner overlay, if any."""
        for o in self.overlays:
            if isinstance(o, NewsBannerOverlay):
                return o
        return None
