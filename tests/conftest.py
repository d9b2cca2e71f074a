from typing import Sequence, Tuple

import pytest

from pathy_editor.core import AnchorPoint, Path, PathEditor, PointerInput
from pathy_editor.settings import reset_settings_cache


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep environment configuration from leaking into tests."""
    monkeypatch.delenv("PATHY_CONFIG", raising=False)
    monkeypatch.delenv("PATHY_THEME", raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


def straight_anchor(x: float, y: float, reach: float = 10.0, settled: bool = True) -> AnchorPoint:
    """Anchor with horizontal controls ``reach`` units either side of it."""
    return AnchorPoint.create((x, y), (x - reach, y), (x + reach, y), settled=settled)


def make_path(points: Sequence[Tuple[float, float]], settled: bool = True) -> Path:
    return Path(straight_anchor(x, y, settled=settled) for x, y in points)


def click(editor: PathEditor, pos: Tuple[float, float], now: float = 0.0):
    return editor.tick(PointerInput(position=pos, pressed=True, released=True, clicked=True), now)


def drag(editor: PathEditor, start: Tuple[float, float], end: Tuple[float, float], now: float = 0.0):
    editor.tick(PointerInput(position=start, pressed=True, held=True), now)
    editor.tick(PointerInput(position=end, held=True), now)
    return editor.tick(PointerInput(position=end, released=True), now)


@pytest.fixture
def editor() -> PathEditor:
    return PathEditor()


@pytest.fixture
def three_anchor_editor() -> PathEditor:
    return PathEditor(path=make_path([(20.0, 20.0), (60.0, 60.0), (100.0, 20.0)]))
