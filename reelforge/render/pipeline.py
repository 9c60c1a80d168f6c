"""
Frame schedule and encode plan for a project.

This module drives the pure resolver over the project timeline:
1. Compute the frame grid (duration * fps, frame timestamps in ms)
2. Resolve each frame, threading RenderState so empty frames can keep
   the previous canvas
3. Build the audio mix graph once
4. Build the FFmpeg mux command (frames + mixed audio, bounded by -shortest)

Rasterizing the frames and running FFmpeg are the host's job; the pipeline
only hands out what to draw and how to encode it.
"""

import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from reelforge.config import Settings, get_settings
from reelforge.render.audio_mixer import AudioMixer, MixGraph, build_mix_graph
from reelforge.render.resolver import (
    FrameResolver,
    FrameResult,
    RenderState,
    keep_previous_frame,
)
from reelforge.render.text_layout import TextMeasurer
from reelforge.schemas.project import Project
from reelforge.utils.interpolation import round_half_up

logger = logging.getLogger(__name__)


def total_frames(duration_s: float, fps: float) -> int:
    """Number of frames covering ``duration_s`` (the last one may be partial)."""
    return max(0, math.ceil(duration_s * fps))


def frame_timestamp_ms(index: int, fps: float) -> int:
    """Timestamp of frame ``index`` in whole milliseconds."""
    return round_half_up(index * 1000 / fps)


def warm_up_timestamps(count: int, fps: float) -> list[int]:
    """Timestamps of warm-up frames (resolved to prime decoders, never saved)."""
    return [frame_timestamp_ms(i, fps) for i in range(max(0, count))]


@dataclass(frozen=True)
class FramePlan:
    """One frame of the render: what to draw and where to save it."""

    index: int
    ms: int
    frame: FrameResult
    keep_previous: bool
    filename: str


def resolve_frames(
    project: Project,
    timestamps: Sequence[float],
    measurer: Optional[TextMeasurer] = None,
    max_workers: int = 4,
) -> list[FrameResult]:
    """Resolve many timestamps in parallel; results keep timestamp order."""
    resolver = FrameResolver(project, measurer)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(resolver.resolve, timestamps))


class RenderPipeline:
    """Frame-by-frame render plan for one project."""

    def __init__(
        self,
        project: Project,
        measurer: Optional[TextMeasurer] = None,
        settings: Optional[Settings] = None,
    ):
        self.project = project
        self.settings = settings or get_settings()
        self.resolver = FrameResolver(project, measurer)
        self.fps = project.settings.fps
        self.duration_s = project.duration_seconds

    @property
    def frame_count(self) -> int:
        return total_frames(self.duration_s, self.fps)

    def frame_filename(self, index: int) -> str:
        return self.settings.frame_pattern % index

    def warm_up_plans(self, count: Optional[int] = None) -> list[FrameResult]:
        """Resolve the warm-up frames (same timestamps as the first frames)."""
        if count is None:
            count = self.settings.render_warm_frames
        return [self.resolver.resolve(ms) for ms in warm_up_timestamps(count, self.fps)]

    def iter_frames(self, state: Optional[RenderState] = None) -> Iterator[FramePlan]:
        """Yield every frame of the project in order.

        ``keep_previous`` tells the rasterizer to leave the last canvas in
        place instead of clearing to the background.
        """
        state = state or RenderState()
        logger.info(
            f"[PIPELINE] {self.frame_count} frames at {self.fps}fps "
            f"({self.duration_s}s, {self.project.settings.width}x{self.project.settings.height})"
        )
        for index in range(self.frame_count):
            ms = frame_timestamp_ms(index, self.fps)
            frame = self.resolver.resolve(ms)
            yield FramePlan(
                index=index,
                ms=ms,
                frame=frame,
                keep_previous=keep_previous_frame(state, frame),
                filename=self.frame_filename(index),
            )
            state = state.advance(frame)

    def mix_graph(self) -> MixGraph:
        return build_mix_graph(self.project.audio_tracks, self.duration_s)

    def build_mux_command(self, output_path: str, frames_dir: Optional[str] = None) -> list[str]:
        """FFmpeg command muxing saved frames with the mixed audio.

        Without audio tracks a silent stream of the project duration is used.
        ``-shortest`` keeps a long audio file from running past the frames.
        """
        settings = self.settings
        mixer = AudioMixer(settings)
        frames_dir = frames_dir or settings.frames_dir_name
        graph = self.mix_graph()

        cmd = [
            settings.ffmpeg_path,
            "-y",
            "-framerate",
            f"{self.fps:g}",
            "-i",
            os.path.join(frames_dir, settings.frame_pattern),
        ]

        if graph.requires_silence:
            cmd.extend(mixer.silence_input_args(self.duration_s))
            cmd.extend(["-map", "0:v", "-map", "1:a"])
        else:
            cmd.extend(mixer.input_args(graph))
            cmd.extend([
                "-filter_complex",
                graph.to_filter_complex(first_input_index=1),
                "-map",
                "0:v",
                "-map",
                "[aout]",
            ])

        cmd.extend([
            "-c:v",
            settings.render_video_codec,
            "-pix_fmt",
            settings.render_pix_fmt,
            "-profile:v",
            settings.render_profile,
            "-crf",
            str(settings.render_crf),
            "-preset",
            settings.render_preset,
            "-c:a",
            settings.render_audio_codec,
            "-b:a",
            settings.render_audio_bitrate,
            "-shortest",
            output_path,
        ])

        logger.info(f"[PIPELINE] ffmpeg: {' '.join(cmd)}")
        return cmd
