"""Scene factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import StepvizConfig, load_config
from .base import BaseScene
from .inmemory import InMemoryScene
from .svg import SvgScene


def get_scene(
    backend: Optional[str] = None, config: Optional[StepvizConfig] = None
) -> BaseScene:
    """Factory function to get the configured scene."""

    config = config or load_config()
    render = config.render
    backend = (backend or os.getenv("STEPVIZ_SCENE") or render.scene).lower()

    if backend == "inmemory":
        return InMemoryScene(width=render.viewport_width, height=render.viewport_height)
    elif backend == "svg":
        return SvgScene(
            width=render.viewport_width,
            height=render.viewport_height,
            output_path=render.output_path,
        )
    else:
        raise ValueError(f"Unsupported scene backend: {backend}")


__all__ = ["BaseScene", "InMemoryScene", "SvgScene", "get_scene"]
