"""Project loading.

Reads a project document, validates it into ``Project`` and normalizes the
canvas for a render.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from reelforge.exceptions import InvalidFieldValueError, ProjectLoadError
from reelforge.schemas.project import Project

logger = logging.getLogger(__name__)


def load_project(source: Union[str, Path, Mapping[str, Any]]) -> Project:
    """Load a project from a JSON file path or an already-parsed mapping.

    Raises:
        ProjectLoadError: If the file cannot be read or the document is malformed
        InvalidTimeRangeError: If a scene, overlay or subtitle ends before it starts
    """
    if isinstance(source, Mapping):
        data = dict(source)
        origin = "<mapping>"
    else:
        path = Path(source)
        origin = str(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise ProjectLoadError("Project file not found", source=origin)
        except (OSError, json.JSONDecodeError) as e:
            raise ProjectLoadError(f"Could not read project ({e})", source=origin) from e

    if not isinstance(data, dict):
        raise ProjectLoadError("Project document must be a JSON object", source=origin)

    try:
        project = Project.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise ProjectLoadError(
            f"Invalid project document at '{field}': {first.get('msg')}", source=origin
        ) from e

    logger.info(
        f"[LOAD] {origin}: {len(project.scenes)} scenes, {len(project.overlays)} overlays, "
        f"{len(project.subtitles)} subtitles, {len(project.audio_tracks)} audio tracks, "
        f"{project.duration_seconds}s"
    )
    return project


def apply_render_overrides(
    project: Project,
    *,
    width: Optional[int] = None,
    height: Optional[int] = None,
    fps: Optional[float] = None,
) -> Project:
    """Copy of ``project`` with the canvas size and frame rate forced."""
    updates: dict[str, Any] = {}
    for name, value in (("width", width), ("height", height), ("fps", fps)):
        if value is None:
            continue
        if value <= 0:
            raise InvalidFieldValueError(field=name, value=value)
        updates[name] = value

    if not updates:
        return project
    settings = project.settings.model_copy(update=updates)
    return project.model_copy(update={"settings": settings})
