import random

import numpy as np
import pytest

from pathy_editor.core import (
    MODE_HANDLERS,
    AnchorPoint,
    ConstraintPropagator,
    EditMode,
    HandleSlot,
    Path,
    PathEditor,
    PointerInput,
    dumps_records,
    to_records,
)

from conftest import click, drag, make_path


def test_create_on_empty_path_places_anchor_with_default_controls(editor) -> None:
    editor.set_mode(EditMode.CREATE)
    result = click(editor, (10.0, 10.0))

    assert result.changed
    assert len(editor.path) == 1
    anchor = editor.path[0]
    assert anchor.primary.pos == (10.0, 10.0)
    assert anchor.control_a.pos == (30.0, 20.0)
    assert anchor.control_b.pos == (-10.0, 0.0)
    assert ConstraintPropagator.is_continuous(anchor)


def test_create_appends_with_tangent_from_previous_anchor() -> None:
    first = AnchorPoint.create((0.0, 0.0), (20.0, 10.0), (-20.0, -10.0), settled=True)
    editor = PathEditor(path=Path([first]))
    editor.set_mode(EditMode.CREATE)
    result = click(editor, (100.0, 0.0))

    assert len(editor.path) == 2
    new = editor.path[1]
    assert new.control_a.pos == (40.0, -5.0)
    assert new.control_b.pos == (160.0, 5.0)
    assert result.program == (
        "std::vector<wolflib::Moment> path = wolf.solve({\n"
        "    {{0.000_in, 0.000_in}, {-20.000_in, -10.000_in}, {40.000_in, -5.000_in}, {100.000_in, 0.000_in}}\n"
        "}, 1);"
    )


def test_create_ignores_clicks_outside_the_field(editor) -> None:
    editor.set_mode(EditMode.CREATE)
    assert not click(editor, (-1.0, 10.0)).changed
    assert not click(editor, (10.0, 141.0)).changed
    assert editor.path.is_empty()


def test_create_ignores_clicks_on_a_handle(editor) -> None:
    editor.set_mode(EditMode.CREATE)
    click(editor, (10.0, 10.0))
    result = click(editor, (10.2, 10.0))
    assert result.hovered == editor.path[0].ref(HandleSlot.PRIMARY)
    assert not result.changed
    assert len(editor.path) == 1


def test_drag_control_a_mirrors_control_b() -> None:
    a = AnchorPoint.create((20.0, 20.0), (30.0, 25.0), (10.0, 15.0), settled=True)
    b = AnchorPoint.create((80.0, 20.0), (70.0, 15.0), (90.0, 25.0), settled=True)
    editor = PathEditor(path=Path([a, b]))

    drag(editor, (30.0, 25.0), (5.0, 5.0))

    assert np.allclose(a.control_a.pos, (5.0, 5.0))
    assert np.allclose(a.control_b.pos, (35.0, 35.0))
    assert editor.path.dragged is None
    assert not a.control_a.drag_locked


def test_drag_primary_moves_whole_anchor(three_anchor_editor) -> None:
    editor = three_anchor_editor
    anchor = editor.path[1]
    result = drag(editor, (60.0, 60.0), (65.0, 58.0))

    assert anchor.primary.pos == (65.0, 58.0)
    assert np.allclose(anchor.control_a.pos, (55.0, 58.0))
    assert np.allclose(anchor.control_b.pos, (75.0, 58.0))
    assert "65.000_in, 58.000_in" in result.program


def test_drag_lock_survives_pointer_leaving_hit_radius(three_anchor_editor) -> None:
    editor = three_anchor_editor
    anchor = editor.path[0]
    editor.tick(PointerInput(position=(20.0, 20.0), pressed=True, held=True), 0.0)
    assert editor.path.dragged == anchor.ref(HandleSlot.PRIMARY)
    assert anchor.primary.drag_locked

    editor.tick(PointerInput(position=(40.0, 30.0), held=True), 0.0)
    editor.tick(PointerInput(position=(45.0, 35.0), held=True), 0.0)
    assert anchor.primary.pos == (45.0, 35.0)

    editor.tick(PointerInput(position=(45.0, 35.0), released=True), 0.0)
    assert editor.path.dragged is None


def test_drag_start_uses_press_position_when_pointer_moved_within_the_tick(three_anchor_editor) -> None:
    editor = three_anchor_editor
    anchor = editor.path[0]

    result = editor.tick(
        PointerInput(position=(24.0, 23.0), press_position=(20.0, 20.0), pressed=True, held=True), 0.0
    )

    assert result.hovered is None
    assert editor.path.dragged == anchor.ref(HandleSlot.PRIMARY)
    assert result.changed
    assert anchor.primary.pos == (24.0, 23.0)
    assert np.allclose(anchor.control_a.pos, (14.0, 23.0))
    assert np.allclose(anchor.control_b.pos, (34.0, 23.0))
    assert "24.000_in, 23.000_in" in result.program


def test_pointer_on_primary_hovers_it(three_anchor_editor) -> None:
    editor = three_anchor_editor
    result = editor.tick(PointerInput(position=(60.0, 60.0)), 0.0)
    assert result.hovered == editor.path[1].ref(HandleSlot.PRIMARY)


def test_insert_far_from_curve_is_a_no_op(three_anchor_editor) -> None:
    editor = three_anchor_editor
    editor.set_mode(EditMode.INSERT)
    result = click(editor, (5.0, 130.0))
    assert result.curve_hit is None
    assert not result.changed
    assert len(editor.path) == 3


def test_insert_on_curve_adds_anchor_after_segment_start() -> None:
    a = AnchorPoint.create((20.0, 50.0), (10.0, 50.0), (30.0, 50.0), settled=True)
    b = AnchorPoint.create((50.0, 50.0), (40.0, 50.0), (60.0, 50.0), settled=True)
    editor = PathEditor(path=Path([a, b]))
    editor.set_mode(EditMode.INSERT)

    result = click(editor, (35.0, 50.0))

    assert result.changed
    assert result.curve_hit is not None
    assert len(editor.path) == 3
    assert editor.path[0] is a
    assert editor.path[2] is b
    new = editor.path[1]
    assert new.primary.x == pytest.approx(35.0, abs=0.2)
    assert new.primary.y == pytest.approx(50.0)
    assert new.control_b.x > new.primary.x > new.control_a.x
    assert ConstraintPropagator.is_continuous(new)
    assert result.program.count("_in}}") == 2


def test_delete_removes_exactly_the_hovered_anchor(three_anchor_editor) -> None:
    editor = three_anchor_editor
    ids = editor.path.ids
    editor.set_mode(EditMode.DELETE)
    result = click(editor, (60.0, 60.0))

    assert result.changed
    assert editor.path.ids == [ids[0], ids[2]]


def test_delete_without_hover_is_a_no_op(three_anchor_editor) -> None:
    editor = three_anchor_editor
    editor.set_mode(EditMode.DELETE)
    assert not click(editor, (130.0, 130.0)).changed
    assert len(editor.path) == 3


def test_trim_keeps_anchors_before_the_hovered_one() -> None:
    editor = PathEditor(path=make_path([(10.0, 10.0), (40.0, 40.0), (70.0, 10.0), (100.0, 40.0)]))
    ids = editor.path.ids
    editor.set_mode(EditMode.TRIM)
    click(editor, (70.0, 10.0))
    assert editor.path.ids == ids[:2]

    click(editor, (10.0, 10.0))
    assert editor.path.is_empty()
    assert editor.program == "std::vector<wolflib::Moment> path = wolf.solve({}, 1);"


@pytest.mark.parametrize("mode", [EditMode.DELETE, EditMode.TRIM])
def test_structural_modes_never_drag(three_anchor_editor, mode) -> None:
    editor = three_anchor_editor
    editor.set_mode(mode)
    editor.tick(PointerInput(position=(60.0, 60.0), pressed=True, held=True), 0.0)
    assert editor.path.dragged is None
    editor.tick(PointerInput(position=(64.0, 64.0), held=True), 0.0)
    assert editor.path[1].primary.pos == (60.0, 60.0)


def test_selecting_active_mode_returns_to_default(editor) -> None:
    assert editor.set_mode(EditMode.CREATE) is EditMode.CREATE
    assert editor.set_mode(EditMode.CREATE) is EditMode.DEFAULT
    assert editor.set_mode(EditMode.TRIM) is EditMode.TRIM


def test_mode_change_releases_drag_lock(three_anchor_editor) -> None:
    editor = three_anchor_editor
    editor.tick(PointerInput(position=(20.0, 20.0), pressed=True, held=True), 0.0)
    assert editor.path.dragged is not None
    editor.set_mode(EditMode.CREATE)
    assert editor.path.dragged is None
    assert not editor.path[0].primary.drag_locked


def test_every_mode_has_a_handler() -> None:
    assert set(MODE_HANDLERS) == set(EditMode)


def test_clear_empties_path_and_regenerates_program(three_anchor_editor) -> None:
    editor = three_anchor_editor
    programs = []
    editor.add_listener(programs.append)
    editor.clear()
    assert editor.path.is_empty()
    assert programs == ["std::vector<wolflib::Moment> path = wolf.solve({}, 1);"]


def test_field_size_locked_while_path_has_anchors(editor, three_anchor_editor) -> None:
    assert editor.set_field_size(200.0, 100.0)
    assert editor.field_size == (200.0, 100.0)
    assert editor.ratio == pytest.approx(720 / 200.0)
    assert not three_anchor_editor.set_field_size(200.0)
    assert three_anchor_editor.field_size == (140.5, 140.5)


def test_load_json_replaces_path_and_notifies(editor) -> None:
    source = make_path([(10.0, 10.0), (50.0, 50.0)])
    programs = []
    editor.add_listener(programs.append)

    assert editor.load_json(dumps_records(to_records(source)))
    assert editor.path.ids == source.ids
    assert len(programs) == 1
    assert "50.000_in, 50.000_in" in editor.program


def test_malformed_load_leaves_path_unchanged(three_anchor_editor, caplog) -> None:
    editor = three_anchor_editor
    ids = editor.path.ids
    program = editor.program
    records = [record.model_dump(by_alias=True, mode="json") for record in editor.records()]
    del records[1]["id"]

    assert not editor.load_records(records)
    assert not editor.load_json("[{not json")
    assert editor.path.ids == ids
    assert editor.program == program
    assert "Rejected path" in caplog.text


def test_to_json_exports_current_path(three_anchor_editor) -> None:
    text = three_anchor_editor.to_json()
    assert '"controlA"' in text
    assert str(three_anchor_editor.path[2].id) in text


def test_continuity_holds_after_random_drags(three_anchor_editor) -> None:
    editor = three_anchor_editor
    rng = random.Random(1234)
    slots = list(HandleSlot)
    for step in range(60):
        anchor = editor.path[rng.randrange(len(editor.path))]
        handle = anchor.handle(rng.choice(slots))
        start = handle.pos
        end = (start[0] + rng.uniform(-3.0, 3.0), start[1] + rng.uniform(-3.0, 3.0))
        drag(editor, start, end, now=step * 0.016)
        for each in editor.path:
            assert ConstraintPropagator.is_continuous(each)
