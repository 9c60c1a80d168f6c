from reelforge.render.audio_mixer import AudioMixer, MixGraph, MixTrack, build_mix_graph
from reelforge.render.banner import BannerPhases, BannerStyle, banner_state, compute_phases
from reelforge.render.draw_commands import BannerFrame, CommandType, DrawCommand, SubtitleCommand
from reelforge.render.pipeline import RenderPipeline, resolve_frames
from reelforge.render.resolver import (
    FrameResolver,
    FrameResult,
    RenderState,
    build_active_objects,
    fade_alpha,
    keep_previous_frame,
    resolve_frame,
)
from reelforge.render.subtitles import select_subtitle

__all__ = [
    "AudioMixer",
    "BannerFrame",
    "BannerPhases",
    "BannerStyle",
    "CommandType",
    "DrawCommand",
    "FrameResolver",
    "FrameResult",
    "MixGraph",
    "MixTrack",
    "RenderPipeline",
    "RenderState",
    "SubtitleCommand",
    "banner_state",
    "build_active_objects",
    "build_mix_graph",
    "compute_phases",
    "fade_alpha",
    "keep_previous_frame",
    "resolve_frame",
    "resolve_frames",
    "select_subtitle",
]
