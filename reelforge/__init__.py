import logging
from typing import Optional

from reelforge.config import get_settings
from reelforge.loader import apply_render_overrides, load_project
from reelforge.render import (
    FrameResolver,
    FrameResult,
    MixGraph,
    RenderPipeline,
    RenderState,
    build_active_objects,
    build_mix_graph,
    resolve_frame,
)
from reelforge.schemas.project import Project

__all__ = [
    "FrameResolver",
    "FrameResult",
    "MixGraph",
    "Project",
    "RenderPipeline",
    "RenderState",
    "apply_render_overrides",
    "build_active_objects",
    "build_mix_graph",
    "configure_logging",
    "load_project",
    "resolve_frame",
]


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging with the configured level."""
    logging.basicConfig(
        level=level or get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
