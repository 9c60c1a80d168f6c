from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REELFORGE_",
        extra="ignore",
    )

    # Application
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # FFmpeg
    ffmpeg_path: str = "ffmpeg"

    # Frame sampling
    render_fps: int = 30
    render_warm_frames: int = 5
    frames_dir_name: str = "frames"
    frame_pattern: str = "frame_%06d.png"

    # Video encode settings
    render_video_codec: str = "libx264"
    render_pix_fmt: str = "yuv420p"
    render_profile: str = "high"
    render_crf: int = 18
    render_preset: str = "medium"

    # Audio encode settings
    render_audio_codec: str = "aac"
    render_audio_bitrate: str = "192k"
    render_audio_sample_rate: int = 48000

    # Fonts tried in order for text measurement (Linux first, then macOS)
    font_paths: list[str] = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/opentype/noto/NotoSans-Regular.ttf",
        "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
    ]


@lru_cache
def get_settings() -> Settings:
    return Settings()
