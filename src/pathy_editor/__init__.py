"""
Interactive editor for composite cubic Bézier robot paths.

The editing core lives in :mod:`pathy_editor.core`; the Qt front end in
:mod:`pathy_editor.gui` is only imported when the GUI is launched.
"""

from .config import EditorConfig, load_editor_config
from .core import (
    EditMode,
    Path,
    PathEditor,
    PathLoadError,
    PersistedRecord,
    PointerInput,
    dumps_records,
    from_records,
    loads_records,
    to_program,
    to_records,
)
from .settings import default_editor_config, get_settings, reset_settings_cache

__all__ = [
    "EditorConfig",
    "load_editor_config",
    "EditMode",
    "Path",
    "PathEditor",
    "PathLoadError",
    "PersistedRecord",
    "PointerInput",
    "dumps_records",
    "from_records",
    "loads_records",
    "to_program",
    "to_records",
    "default_editor_config",
    "get_settings",
    "reset_settings_cache",
]
