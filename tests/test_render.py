import math

import numpy as np
import pytest

from pathy_editor.core import AnchorPoint, EditMode, HoverAnimator, Path, PathEditor, PointerInput, SceneBuilder
from pathy_editor.core.render import RED, YELLOW

from conftest import make_path


def build(editor: PathEditor, builder: SceneBuilder, pointer, now: float):
    result = editor.tick(PointerInput(position=pointer), now)
    return builder.build(editor.path, result, editor.mode, pointer, now, editor.ratio)


def anchor_colors(scene, count: int):
    # three circles per anchor, primary first
    return [scene.circles[3 * idx].color for idx in range(count)]


def test_hover_animator_moves_towards_target_over_time() -> None:
    animator = HoverAnimator(duration=0.1)
    assert animator.value("k", True, 0.0) == 0.0
    assert animator.value("k", True, 0.05) == pytest.approx(0.5)
    assert animator.value("k", True, 1.0) == 1.0
    assert animator.value("k", False, 1.05) == pytest.approx(0.5)
    assert HoverAnimator(duration=0.0).value("k", True, 0.0) == 1.0


def test_scene_has_circles_lines_and_curve(three_anchor_editor) -> None:
    editor = three_anchor_editor
    scene = build(editor, SceneBuilder(editor.config), None, 0.0)

    assert len(scene.circles) == 9
    assert len(scene.lines) == 6
    assert [circle.filled for circle in scene.circles[:3]] == [True, False, False]
    assert all(circle.radius == 5.0 for circle in scene.circles)
    assert scene.curve_points.shape[1] == 2
    assert np.allclose(scene.curve_points[0], (20.0, 20.0))
    assert np.allclose(scene.curve_points[-1], (100.0, 20.0))


def test_control_lines_stop_short_of_the_control_circle(editor) -> None:
    anchor = AnchorPoint.create((50.0, 50.0), (40.0, 50.0), (60.0, 50.0), settled=True)
    editor.path.append(anchor)
    scene = build(editor, SceneBuilder(editor.config), None, 0.0)

    gap = (5.0 + 1.0) / editor.ratio
    assert scene.lines[0].start == (50.0, 50.0)
    assert scene.lines[0].end[0] == pytest.approx(40.0 + gap)
    assert scene.lines[1].end[0] == pytest.approx(60.0 - gap)


def test_zero_length_control_line_has_no_nan(editor) -> None:
    anchor = AnchorPoint.create((50.0, 50.0), (50.0, 50.0), (50.0, 50.0), settled=True)
    editor.path.append(anchor)
    scene = build(editor, SceneBuilder(editor.config), None, 0.0)
    for line in scene.lines:
        assert not any(math.isnan(v) for v in (*line.start, *line.end))
        assert line.end == (50.0, 50.0)


def test_hovered_handle_grows_in_default_mode(three_anchor_editor) -> None:
    editor = three_anchor_editor
    builder = SceneBuilder(editor.config)
    build(editor, builder, (60.0, 60.0), 0.0)
    scene = build(editor, builder, (60.0, 60.0), 1.0)
    assert scene.circles[3].radius == pytest.approx(8.0)
    assert scene.circles[0].radius == pytest.approx(5.0)


def test_delete_mode_reddens_only_the_hovered_anchor(three_anchor_editor) -> None:
    editor = three_anchor_editor
    editor.set_mode(EditMode.DELETE)
    builder = SceneBuilder(editor.config)
    build(editor, builder, (60.0, 60.0), 0.0)
    scene = build(editor, builder, (60.0, 60.0), 1.0)

    assert anchor_colors(scene, 3) == [YELLOW, RED, YELLOW]
    assert scene.circles[3].radius == pytest.approx(5.0)


def test_trim_mode_reddens_the_anchors_to_be_removed(three_anchor_editor) -> None:
    editor = three_anchor_editor
    editor.set_mode(EditMode.TRIM)
    builder = SceneBuilder(editor.config)
    build(editor, builder, (60.0, 60.0), 0.0)
    scene = build(editor, builder, (60.0, 60.0), 1.0)

    assert anchor_colors(scene, 3) == [YELLOW, RED, RED]


def test_create_mode_shows_cursor_preview(editor) -> None:
    editor.set_mode(EditMode.CREATE)
    scene = build(editor, SceneBuilder(editor.config), (70.0, 70.0), 0.0)
    assert len(scene.circles) == 1
    assert scene.circles[0].center == (70.0, 70.0)
    assert not scene.circles[0].filled


def test_insert_mode_marks_curve_hit() -> None:
    a = AnchorPoint.create((20.0, 50.0), (10.0, 50.0), (30.0, 50.0), settled=True)
    b = AnchorPoint.create((50.0, 50.0), (40.0, 50.0), (60.0, 50.0), settled=True)
    editor = PathEditor(path=Path([a, b]))
    editor.set_mode(EditMode.INSERT)
    scene = build(editor, SceneBuilder(editor.config), (35.0, 50.0), 0.0)

    assert len(scene.circles) == 7
    marker = scene.circles[-1]
    assert marker.filled
    assert marker.center[0] == pytest.approx(35.0, abs=0.2)


def test_animation_state_of_removed_anchors_is_dropped() -> None:
    editor = PathEditor(path=make_path([(20.0, 20.0), (60.0, 60.0)]))
    builder = SceneBuilder(editor.config)
    build(editor, builder, None, 0.0)
    removed = editor.path[1].id
    editor.path.remove_at(1)
    build(editor, builder, None, 0.1)
    assert all(key[0] != removed for key in builder.animator._state)
