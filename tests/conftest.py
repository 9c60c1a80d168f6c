"""
Pytest fixtures for reelforge tests.

Text measurement uses a fixed-width fake so that wrapping decisions do not
depend on which fonts are installed on the machine running the tests.
"""

import json
from pathlib import Path
from typing import Any

import pytest

from reelforge.config import Settings
from reelforge.schemas.project import Project


class FakeMeasurer:
    """Every character is ``char_width`` pixels wide, whatever the font size."""

    def __init__(self, char_width: float = 10.0):
        self.char_width = char_width

    def measure(self, text: str, font_size: int) -> float:
        return len(text) * self.char_width


@pytest.fixture
def measurer() -> FakeMeasurer:
    return FakeMeasurer()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def project_data() -> dict[str, Any]:
    """A small but complete project document (1080x1920, 12s)."""
    return {
        "project": {"width": 1080, "height": 1920, "background": "#000", "fps": 30},
        "videoTrack": [
            {
                "start": 0,
                "end": 5,
                "objects": [
                    {
                        "id": "bg",
                        "type": "image",
                        "src": "bg.png",
                        "x": 0,
                        "y": 0,
                        "w": 1080,
                        "h": 1920,
                        "z": 0,
                        "animations": [
                            {"type": "zoom", "from": 1.0, "to": 1.2, "easing": "linear"},
                            {"type": "fade", "in": 0.5, "out": 0.5},
                        ],
                    },
                    {
                        "id": "title",
                        "type": "text",
                        "text": "Hello world",
                        "x": 540,
                        "y": 300,
                        "z": 10,
                        "anchor": "center",
                        "style": {"font": "600 48px YSText", "bg": "#00000080"},
                    },
                ],
            },
            {
                "start": 5,
                "end": 12,
                "objects": [
                    {
                        "id": "clip",
                        "type": "video",
                        "src": "clip.mp4",
                        "x": 0,
                        "y": 0,
                        "w": 1080,
                        "h": 1920,
                        "animations": [
                            {"type": "move", "from": {"x": 0, "y": 0}, "to": {"x": 100, "y": -50}},
                        ],
                    },
                ],
            },
        ],
        "overlays": [
            {"type": "logo", "src": "logo.png", "start": 0, "end": 12, "x": 20, "y": 20, "w": 100, "h": 100},
            {"newsTitle": "Breaking news from the studio", "start": 1, "end": 6.3, "z": 50},
        ],
        "subtitles": [
            {"start": 0, "end": 2, "text": "First line"},
            {"start": 2, "end": 4, "text": "Second line"},
        ],
        "audio": {
            "tracks": [
                {"id": "voice", "src": "voice.mp3", "offset": 0, "volumePercent": 100},
                {"id": "bgm", "src": "bgm.mp3", "offset": 2, "volumePercent": 50},
            ]
        },
    }


@pytest.fixture
def project(project_data: dict[str, Any]) -> Project:
    return Project.model_validate(project_data)


@pytest.fixture
def project_file(tmp_path: Path, project_data: dict[str, Any]) -> Path:
    path = tmp_path / "project.json"
    path.write_text(json.dumps(project_data), encoding="utf-8")
    return path


@pytest.fixture
def make_project():
    """Factory for a minimal 1080x1920 project with the given top-level sections."""

    def _make(**overrides: Any) -> Project:
        data: dict[str, Any] = {"project": {"width": 1080, "height": 1920, "fps": 30}}
        data.update(overrides)
        return Project.model_validate(data)

    return _make
