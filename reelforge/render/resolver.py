"""Timeline-to-render-state resolver.

Given a project and a timestamp in milliseconds, produces the ordered list of
draw commands for that instant:

1. Objects of every scene whose window contains the timestamp, with their
   animations (zoom, move, fade) applied.
2. Image overlays whose window contains the timestamp.
3. A stable sort by ``z`` (scene objects before overlays at equal ``z``).
4. The news banner spliced in at the position its ``z`` belongs.

The active subtitle is reported next to the command list and is drawn above
everything else.

Every function here is a pure function of its arguments: no I/O, no state
between calls. Hosts may resolve distinct timestamps concurrently.
"""

import bisect
from dataclasses import dataclass
from typing import Optional

from reelforge.render.banner import BannerStyle, banner_command
from reelforge.render.draw_commands import CommandType, DrawCommand, SubtitleCommand
from reelforge.render.subtitles import SubtitleStyle, select_subtitle, subtitle_box
from reelforge.render.text_layout import PillowTextMeasurer, TextMeasurer
from reelforge.schemas.project import (
    DEFAULT_OVERLAY_Z,
    FadeAnimation,
    MoveAnimation,
    Project,
    Scene,
    SceneObject,
    ZoomAnimation,
)
from reelforge.utils.interpolation import get_easing_function, lerp, progress, round_half_up


@dataclass(frozen=True)
class ObjectTransform:
    """Animated state of one object."""

    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    alpha: float = 1.0


def fade_alpha(
    local_ms: float, dur_ms: float, fade_in_s: float = 0.0, fade_out_s: float = 0.0
) -> float:
    """Opacity factor for fade-in/fade-out windows at the scene edges.

    Fade-in covers ``[0, fade_in)`` and ramps linearly from 0; fade-out
    covers ``(dur - fade_out, dur]`` and ramps down to 0.
    """
    fade_in_ms = fade_in_s * 1000
    fade_out_ms = fade_out_s * 1000
    if fade_in_ms > 0 and local_ms < fade_in_ms:
        return local_ms / fade_in_ms
    if fade_out_ms > 0 and local_ms > dur_ms - fade_out_ms:
        return max(0.0, (dur_ms - local_ms) / fade_out_ms)
    return 1.0


def resolve_object(obj: SceneObject, local_ms: float, dur_ms: float) -> ObjectTransform:
    """Apply an object's animations at ``local_ms`` into its scene.

    Zoom and move overwrite (the last entry wins); fades multiply.
    """
    scale, tx, ty, alpha = 1.0, 0.0, 0.0, 1.0
    t = progress(local_ms, dur_ms)

    for anim in obj.animations:
        if isinstance(anim, ZoomAnimation):
            scale = lerp(anim.from_, anim.to, get_easing_function(anim.easing)(t))
        elif isinstance(anim, MoveAnimation):
            eased = get_easing_function(anim.easing)(t)
            tx = lerp(anim.from_.x, anim.to.x, eased)
            ty = lerp(anim.from_.y, anim.to.y, eased)
        elif isinstance(anim, FadeAnimation):
            alpha *= fade_alpha(local_ms, dur_ms, anim.fade_in, anim.fade_out)

    return ObjectTransform(scale=scale, translate_x=tx, translate_y=ty, alpha=alpha)


def current_scene(project: Project, ms: float) -> Optional[Scene]:
    """First scene, in list order, whose window contains ``ms``."""
    for scene in project.scenes:
        if scene.contains(ms):
            return scene
    return None


def video_source_time(project: Project, ms: float) -> float:
    """Seek target for video objects, snapped to the project frame grid.

    Local time is measured against the current scene, so overlapping scenes
    share the first match's clock.
    """
    fps = project.settings.fps
    scene = current_scene(project, ms)
    start_ms = scene.start * 1000 if scene is not None else 0.0
    local_s = max(0.0, (ms - start_ms) / 1000)
    return round_half_up(local_s * fps) / fps


def build_active_objects(project: Project, ms: float) -> list[DrawCommand]:
    """Scene objects and image overlays visible at ``ms``, sorted by z."""
    commands: list[DrawCommand] = []

    for scene in project.scenes:
        if not scene.contains(ms):
            continue
        local_ms = ms - scene.start * 1000
        dur_ms = scene.duration_ms

        for obj in scene.objects:
            transform = resolve_object(obj, local_ms, dur_ms)
            command_type = CommandType(obj.type)
            commands.append(
                DrawCommand(
                    type=command_type,
                    id=obj.id,
                    x=obj.x,
                    y=obj.y,
                    w=obj.w,
                    h=obj.h,
                    z=obj.z,
                    alpha=transform.alpha,
                    scale=transform.scale,
                    translate_x=transform.translate_x,
                    translate_y=transform.translate_y,
                    src=obj.src,
                    text=obj.text,
                    style=obj.style,
                    anchor=obj.anchor,
                    source_time=(
                        video_source_time(project, ms)
                        if command_type == CommandType.VIDEO
                        else None
                    ),
                )
            )

    for overlay in project.image_overlays:
        if not overlay.contains(ms):
            continue
        commands.append(
            DrawCommand(
                type=CommandType.IMAGE,
                src=overlay.src,
                x=overlay.x,
                y=overlay.y,
                w=overlay.w,
                h=overlay.h,
                z=overlay.z if overlay.z is not None else DEFAULT_OVERLAY_Z,
                alpha=overlay.opacity if overlay.opacity is not None else 1.0,
            )
        )

    # list.sort is stable: equal z keeps scene objects ahead of overlays
    commands.sort(key=lambda c: c.z)
    return commands


def splice_by_z(commands: list[DrawCommand], command: DrawCommand) -> list[DrawCommand]:
    """New list with ``command`` inserted after every element of equal or lower z."""
    index = bisect.bisect_right(commands, command.z, key=lambda c: c.z)
    return commands[:index] + [command] + commands[index:]


@dataclass(frozen=True)
class FrameResult:
    """Everything to draw at one timestamp."""

    ms: float
    commands: list[DrawCommand]
    subtitle: Optional[SubtitleCommand] = None

    @property
    def is_empty(self) -> bool:
        return not self.commands and self.subtitle is None

    def to_dict(self) -> dict:
        return {
            "ms": self.ms,
            "commands": [c.to_dict() for c in self.commands],
            "subtitle": self.subtitle.to_dict() if self.subtitle else None,
            "empty": self.is_empty,
        }


def resolve_frame(
    project: Project,
    ms: float,
    measurer: Optional[TextMeasurer] = None,
    banner_style: BannerStyle = BannerStyle(),
    subtitle_style: SubtitleStyle = SubtitleStyle(),
) -> FrameResult:
    """Resolve the full frame at ``ms``.

    ``measurer`` is only consulted when a banner title is visible; a
    ``PillowTextMeasurer`` is created on demand when none is given.
    """
    commands = build_active_objects(project, ms)

    banner = project.news_banner
    if banner is not None:
        command = banner_command(
            banner,
            ms,
            project.settings.width,
            measurer or PillowTextMeasurer(),
            banner_style,
        )
        if command is not None:
            commands = splice_by_z(commands, command)

    subtitle = select_subtitle(project.subtitles, ms)
    return FrameResult(
        ms=ms,
        commands=commands,
        subtitle=(
            subtitle_box(project.settings.width, subtitle.text, subtitle_style)
            if subtitle is not None
            else None
        ),
    )


class FrameResolver:
    """Resolves frames of one project with a shared text measurer."""

    def __init__(
        self,
        project: Project,
        measurer: Optional[TextMeasurer] = None,
        banner_style: BannerStyle = BannerStyle(),
        subtitle_style: SubtitleStyle = SubtitleStyle(),
    ):
        self.project = project
        self.measurer = measurer or PillowTextMeasurer()
        self.banner_style = banner_style
        self.subtitle_style = subtitle_style

    def resolve(self, ms: float) -> FrameResult:
        return resolve_frame(
            self.project, ms, self.measurer, self.banner_style, self.subtitle_style
        )


@dataclass(frozen=True)
class RenderState:
    """Caller-owned state threaded between successive frames.

    The resolver never decides whether to clear the canvas; it only reports
    empty frames. Hosts that want to avoid black flashes between sparse
    frames keep the previous canvas via ``keep_previous_frame``.
    """

    has_rendered_frame: bool = False
    frames_resolved: int = 0

    def advance(self, frame: FrameResult) -> "RenderState":
        return RenderState(
            has_rendered_frame=self.has_rendered_frame or not frame.is_empty,
            frames_resolved=self.frames_resolved + 1,
        )


def keep_previous_frame(state: RenderState, frame: FrameResult) -> bool:
    """True when ``frame`` is empty and an earlier frame already drew something.

    Empty frames before anything was drawn are cleared to the background.
    """
    return frame.is_empty and state.has_rendered_frame
