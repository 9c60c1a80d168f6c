"""
Audio mix graph builder.

Turns the project's audio tracks into a declarative mix graph:
- Per-track delay (offset on the timeline, same on every channel)
- Per-track linear gain (from volume percent or legacy decibel gain)
- Silence padding so tracks of different lengths can be summed
- Summation without normalization, as long as the longest input
- Final trim to the project duration

The graph is engine-agnostic; ``MixGraph.to_filter_complex`` realizes it as an
FFmpeg ``filter_complex`` string using adelay, volume, apad, amix and atrim.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from reelforge.config import Settings, get_settings
from reelforge.schemas.project import AudioTrack
from reelforge.utils.interpolation import round_half_up

logger = logging.getLogger(__name__)

COMBINE_RULE = "sum,no-normalize,duration=longest"


def db_to_percent(db: float) -> float:
    """Decibels to amplitude percent (0 dB = 100%)."""
    return 10 ** (db / 20) * 100


def percent_to_fraction(percent: float) -> float:
    """Amplitude percent to a linear gain; negative values clamp to 0."""
    return max(0.0, percent) / 100


def volume_fraction(track: AudioTrack) -> float:
    """Linear amplitude gain for a track.

    ``volume_percent`` wins over ``gain_db``; with neither the track plays at
    unity. There is no upper clamp: values above 100% amplify.
    """
    if track.volume_percent is not None:
        return percent_to_fraction(track.volume_percent)
    if track.gain_db is not None:
        return max(0.0, 10 ** (track.gain_db / 20))
    return 1.0


def _format_seconds(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".") or "0"


@dataclass(frozen=True)
class MixTrack:
    """One delayed, scaled input of the mix."""

    src: str
    delay_ms: int
    gain: float
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"src": self.src, "delayMs": self.delay_ms, "gain": self.gain}


@dataclass(frozen=True)
class MixGraph:
    """Declarative audio mix.

    When ``requires_silence`` is set there is nothing to mix and the encoder
    must be given an explicit silent stream of ``trim_to_seconds``.
    """

    tracks: list[MixTrack] = field(default_factory=list)
    trim_to_seconds: float = 0.0
    combine_rule: str = COMBINE_RULE

    @property
    def requires_silence(self) -> bool:
        return not self.tracks

    def to_dict(self) -> dict[str, Any]:
        return {
            "tracks": [t.to_dict() for t in self.tracks],
            "combineRule": self.combine_rule,
            "trimToSeconds": self.trim_to_seconds,
            "requiresSilence": self.requires_silence,
        }

    def to_filter_complex(self, first_input_index: int = 0, output_label: str = "aout") -> str:
        """Realize the graph as an FFmpeg filter_complex string.

        Args:
            first_input_index: FFmpeg input index of the first track
            output_label: Label of the mixed output pad

        Returns:
            Filter complex string

        Raises:
            ValueError: If the graph has no tracks (use a silent input instead)
        """
        if not self.tracks:
            raise ValueError("Mix graph has no tracks; supply a silent stream instead")

        filter_parts: list[str] = []
        track_outputs: list[str] = []
        for idx, track in enumerate(self.tracks):
            label = f"a{idx}"
            filter_parts.append(
                f"[{first_input_index + idx}:a]"
                f"adelay={track.delay_ms}|{track.delay_ms},"
                f"volume={track.gain:.6f},"
                f"apad[{label}]"
            )
            track_outputs.append(label)

        trim = f"atrim=end={_format_seconds(self.trim_to_seconds)}"
        if len(track_outputs) == 1:
            # Single track - no mixing needed
            filter_parts.append(f"[{track_outputs[0]}]{trim}[{output_label}]")
        else:
            mix_input_str = "".join(f"[{o}]" for o in track_outputs)
            filter_parts.append(
                f"{mix_input_str}amix=inputs={len(track_outputs)}:normalize=0:duration=longest,"
                f"{trim}[{output_label}]"
            )

        return ";".join(filter_parts)


def build_mix_graph(tracks: Sequence[AudioTrack], target_duration_s: float) -> MixGraph:
    """Build the mix graph for ``tracks`` trimmed to ``target_duration_s``."""
    mix_tracks = [
        MixTrack(
            src=track.src,
            delay_ms=round_half_up(max(0.0, track.offset) * 1000),
            gain=volume_fraction(track),
            id=track.id,
        )
        for track in tracks
    ]
    logger.info(
        f"[AUDIO MIX] {len(mix_tracks)} tracks, trim to {target_duration_s}s"
        + (" (silent stream required)" if not mix_tracks else "")
    )
    return MixGraph(tracks=mix_tracks, trim_to_seconds=max(0.0, target_duration_s))


class AudioMixer:
    """Builds FFmpeg invocations for a mix graph.

    Running the commands is left to the host; nothing here spawns processes.
    """

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.ffmpeg_path = settings.ffmpeg_path
        self.sample_rate = settings.render_audio_sample_rate
        self.audio_codec = settings.render_audio_codec
        self.audio_bitrate = settings.render_audio_bitrate

    def input_args(self, graph: MixGraph) -> list[str]:
        """``-i`` arguments for every track, in graph order."""
        args: list[str] = []
        for track in graph.tracks:
            args.extend(["-i", track.src])
        return args

    def silence_input_args(self, duration_s: float) -> list[str]:
        """A lavfi silent stereo input lasting ``duration_s``."""
        return [
            "-f",
            "lavfi",
            "-t",
            _format_seconds(duration_s),
            "-i",
            f"anullsrc=r={self.sample_rate}:cl=stereo",
        ]

    def build_mix_command(self, graph: MixGraph, output_path: str) -> list[str]:
        """Standalone FFmpeg command that writes the mixed audio to a file."""
        cmd = [self.ffmpeg_path, "-y"]
        if graph.requires_silence:
            cmd.extend(self.silence_input_args(graph.trim_to_seconds))
            cmd.extend(["-map", "0:a"])
        else:
            cmd.extend(self.input_args(graph))
            cmd.extend(["-filter_complex", graph.to_filter_complex(), "-map", "[aout]"])

        cmd.extend([
            "-c:a",
            self.audio_codec,
            "-b:a",
            self.audio_bitrate,
            "-ar",
            str(self.sample_rate),
            output_path,
        ])
        return cmd
