"""PySide6/pyqtgraph front end for the path editor."""

from .app import PathyWindow, run

__all__ = ["PathyWindow", "run"]
