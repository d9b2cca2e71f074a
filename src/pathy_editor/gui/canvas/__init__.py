"""Canvas components for path display and editing."""

from .path_canvas import PathCanvas
from .scene_painter import ScenePainter

__all__ = ["PathCanvas", "ScenePainter"]
