"""Tests for the grid state machine: cell policy, placement, unlocks, story boxes,
structure freezing, row sizing and change notifications."""

from story_grid.grid import LOCKED_STEP, MAX_ROWS, MIN_ROWS, StoryGrid, cell_access
from story_grid.models import CellAccess
from story_grid.narrative import step_fragment


def _rows(grid: StoryGrid, column: int) -> list[int]:
    return sorted(m.row for m in grid.markers if m.column == column)


def _tuples(grid: StoryGrid) -> list[tuple]:
    return sorted((m.row, m.column, m.type, m.description) for m in grid.markers)


# ── Initial state ────────────────────────────────────────


def test_initial_state():
    grid = StoryGrid()
    assert grid.active_step == 1
    assert grid.scenario_key == "settingsExist"
    assert grid.markers == ()
    assert grid.story_boxes == ()


# ── Cell policy ──────────────────────────────────────────


def test_top_row_only_inner_columns():
    for col in (1, 2, 3):
        assert cell_access(0, col, 1) == CellAccess(visible=True, editable=True)
    for col in (0, 4):
        assert cell_access(0, col, 1) == CellAccess(visible=False, editable=False)


def test_step_path_always_visible_never_editable():
    for step in range(4):
        for col in range(5):
            assert cell_access(1, col, step) == CellAccess(visible=True, editable=False)


def test_visibility_at_step_two():
    grid = StoryGrid()
    grid.advance()
    assert grid.active_step == 2
    assert grid.cell_access(3, 3) == CellAccess(visible=False, editable=False)
    assert grid.cell_access(3, 2) == CellAccess(visible=True, editable=True)
    assert grid.cell_access(3, 1) == CellAccess(visible=True, editable=False)


def test_goal_column_content_hidden():
    assert cell_access(2, 4, 3) == CellAccess(visible=False, editable=False)


# ── Placement ────────────────────────────────────────────


def test_place_marker_lands_on_row_two():
    grid = StoryGrid()
    marker = grid.place_marker(1, "queen", "first")
    assert marker is not None
    assert (marker.row, marker.column) == (2, 1)
    assert marker.symbol == "♕"
    assert marker.color == "#ff9f43"
    assert marker.description == "first"


def test_place_marker_outside_active_column_ignored():
    grid = StoryGrid()
    assert grid.place_marker(2, "queen") is None
    assert grid.place_marker(0, "queen") is None
    assert grid.markers == ()


def test_placements_form_contiguous_block():
    grid = StoryGrid()
    for type_ in ["queen", "knight", "pawn", "pawn", "knight", "pawn", "pawn"]:
        grid.place_marker(1, type_)
    assert _rows(grid, 1) == [2, 3, 4, 5, 6, 7, 8]


def test_placements_contiguous_in_each_unlocked_column():
    grid = StoryGrid()
    grid.place_marker(1, "pawn")
    grid.place_marker(1, "pawn")
    grid.advance()
    grid.place_marker(2, "knight")
    grid.place_marker(1, "pawn")  # column 1 is locked for placement now
    grid.place_marker(2, "queen")
    grid.place_marker(2, "pawn")
    assert _rows(grid, 1) == [2, 3]
    assert _rows(grid, 2) == [2, 3, 4]


def test_next_row_after_gap_goes_below_block():
    grid = StoryGrid()
    for _ in range(3):
        grid.place_marker(1, "pawn")
    grid.delete_marker(3, 1)
    assert grid.next_row(1) == 5


def test_next_row_ignores_top_lane():
    grid = StoryGrid()
    grid.place_top_marker(1, "queen")
    marker = grid.place_marker(1, "pawn")
    assert marker.row == 2


def test_place_unknown_type_uses_placeholder():
    grid = StoryGrid()
    marker = grid.place_marker(1, "bishop")
    assert marker.symbol == "?"
    assert marker.color == "#000000"
    assert marker.type == "bishop"


def test_place_top_marker():
    grid = StoryGrid()
    marker = grid.place_top_marker(2, "knight", "mentor")
    assert (marker.row, marker.column) == (0, 2)
    assert grid.place_top_marker(2, "pawn") is None
    assert grid.place_top_marker(0, "pawn") is None
    assert grid.place_top_marker(4, "pawn") is None
    assert len(grid.markers) == 1


def test_limits_not_enforced_by_default():
    grid = StoryGrid()
    for _ in range(3):
        assert grid.place_marker(1, "queen") is not None
    assert grid.type_count("queen") == 3


def test_limits_enforced_when_enabled():
    grid = StoryGrid(enforce_limits=True)
    assert grid.place_marker(1, "queen") is not None
    assert grid.place_top_marker(1, "queen") is not None
    assert grid.place_marker(1, "queen") is None
    # Unbounded types are never capped
    for _ in range(4):
        assert grid.place_marker(1, "pawn") is not None


# ── Edit / delete / clear ────────────────────────────────


def test_edit_marker_description():
    grid = StoryGrid()
    marker = grid.place_marker(1, "queen")
    assert grid.edit_marker_description(marker.id, "boss") is True
    assert grid.get_marker(marker.id).description == "boss"
    assert grid.marker_at(2, 1).description == "boss"


def test_edit_unknown_marker():
    grid = StoryGrid()
    assert grid.edit_marker_description("missing", "x") is False


def test_edit_allowed_outside_active_column():
    grid = StoryGrid()
    marker = grid.place_marker(1, "queen")
    grid.advance()
    assert grid.edit_marker_description(marker.id, "later") is True


def test_delete_marker():
    grid = StoryGrid()
    grid.place_marker(1, "queen")
    assert grid.delete_marker(2, 1) is True
    assert grid.markers == ()


def test_delete_missing_is_noop():
    grid = StoryGrid()
    grid.place_marker(1, "queen")
    assert grid.delete_marker(3, 1) is False
    assert len(grid.markers) == 1


def test_clear_all_keeps_step_and_scenario():
    grid = StoryGrid("settingsNotThere")
    grid.place_marker(1, "queen")
    grid.advance()
    grid.clear_all()
    assert grid.markers == ()
    assert grid.active_step == 2
    assert grid.scenario_key == "settingsNotThere"
    assert len(grid.story_boxes) == 1


def test_reset():
    grid = StoryGrid()
    grid.place_marker(1, "queen")
    grid.advance()
    grid.advance()
    grid.reset()
    assert grid.markers == ()
    assert grid.story_boxes == ()
    assert grid.active_step == 1


# ── Advance and story boxes ──────────────────────────────


def test_advance_appends_story_box():
    grid = StoryGrid()
    assert grid.advance() is True
    assert grid.active_step == 2
    box = grid.story_boxes[0]
    assert box.step == 2
    assert box.title == "Complete the task"
    assert box.symbol == "✅"
    assert box.content == step_fragment(2, grid.structure.column(2), "settingsExist")
    assert box.timestamp


def test_advance_at_terminal_step_is_noop():
    grid = StoryGrid()
    grid.advance()
    grid.advance()
    grid.place_marker(3, "pawn")
    data = grid.get_data()
    boxes = grid.story_boxes
    assert grid.can_advance() is False
    assert grid.advance() is False
    assert grid.active_step == 3
    assert grid.get_data() == data
    assert grid.story_boxes == boxes


def test_story_boxes_never_exceed_active_step():
    grid = StoryGrid()
    for _ in range(5):
        grid.advance()
        assert len(grid.story_boxes) <= grid.active_step
    assert [b.step for b in grid.story_boxes] == [2, 3]


def test_reach_out_story_box(fixed_random):
    grid = StoryGrid("settingsNotThere", rng=fixed_random(0.1))
    grid.advance()
    box = grid.story_boxes[0]
    assert box.title == "Reach out for help"
    assert "reach out for help and support" in box.content


# ── Structure ────────────────────────────────────────────


def test_structure_frozen_until_scenario_change(fixed_random):
    grid = StoryGrid("settingsNotThere", rng=fixed_random(0.1, 0.9))
    assert grid.structure.column(2).title == "Reach out for help"
    # Further reads never draw again
    assert grid.structure.column(2).title == "Reach out for help"
    grid.advance()
    assert grid.step_display(2).title == "Reach out for help"

    grid.set_scenario("settingsNotThere")
    assert grid.structure.column(2).title == "Embed in workflow"


def test_step_display_locks_future_columns():
    grid = StoryGrid()
    assert grid.step_display(0).title == "King"
    assert grid.step_display(1).title == "How to use it"
    assert grid.step_display(2) == LOCKED_STEP
    assert grid.step_display(3) == LOCKED_STEP
    assert grid.step_display(4).title == "Goal - Opponent King"


def test_set_scenario_keeps_markers():
    grid = StoryGrid()
    grid.place_marker(1, "queen")
    grid.set_scenario("settingsNotThere")
    assert grid.scenario_key == "settingsNotThere"
    assert grid.step_display(1).title == "Brainstorm"
    assert len(grid.markers) == 1


def test_unknown_scenario_uses_default_structure():
    grid = StoryGrid("doesNotExist")
    assert grid.structure.scenario_key is None
    assert grid.step_display(1).title == "Brainstorm"
    assert grid.current_step().title == "Brainstorm"


# ── Row sizing ───────────────────────────────────────────


def test_row_count_minimum():
    grid = StoryGrid()
    assert grid.row_count() == MIN_ROWS
    grid.place_marker(1, "pawn")
    assert grid.row_count() == MIN_ROWS


def test_row_count_grows_with_active_block():
    grid = StoryGrid()
    grid.place_marker(1, "pawn")
    grid.place_marker(1, "pawn")
    assert grid.row_count() == 5


def test_row_count_capped():
    grid = StoryGrid()
    for _ in range(6):
        grid.place_marker(1, "pawn")
    assert grid.row_count() == MAX_ROWS


def test_row_count_follows_active_column():
    grid = StoryGrid()
    for _ in range(3):
        grid.place_marker(1, "pawn")
    assert grid.row_count() == 6
    grid.advance()
    assert grid.row_count() == MIN_ROWS


# ── Finished columns ─────────────────────────────────────


def test_column_finished_after_described_and_advanced():
    grid = StoryGrid()
    marker = grid.place_marker(1, "queen")
    assert grid.is_column_finished(1) is False
    grid.edit_marker_description(marker.id, "   ")
    grid.advance()
    assert grid.is_column_finished(1) is False
    grid.edit_marker_description(marker.id, "done")
    assert grid.is_column_finished(1) is True


# ── Notifications ────────────────────────────────────────


def test_subscribers_receive_exported_data():
    grid = StoryGrid()
    events = []
    grid.subscribe(events.append)
    grid.place_marker(1, "queen", "q")
    assert events[-1]["totalElements"] == 1
    assert events[-1]["bottomRows"] == [{"row": 2, "col": 1, "type": "queen", "description": "q"}]
    grid.advance()
    assert events[-1]["activeStep"] == 2
    assert len(events) == 2


def test_unsubscribe():
    grid = StoryGrid()
    events = []
    unsubscribe = grid.subscribe(events.append)
    unsubscribe()
    grid.place_marker(1, "queen")
    assert events == []


def test_ignored_operations_do_not_notify():
    grid = StoryGrid()
    events = []
    grid.subscribe(events.append)
    grid.place_marker(3, "queen")
    grid.delete_marker(2, 1)
    grid.clear_all()
    grid.set_scenario("settingsNotThere")
    assert events == []


# ── End to end ───────────────────────────────────────────


def test_place_advance_delete_export():
    grid = StoryGrid()
    assert grid.active_step == 1
    marker = grid.place_marker(1, "queen", "first")
    assert (marker.row, marker.column) == (2, 1)
    grid.advance()
    assert grid.active_step == 2
    assert len(grid.story_boxes) == 1
    assert grid.delete_marker(2, 1) is True
    assert grid.markers == ()
    assert grid.get_data() == {
        "topRow": [],
        "bottomRows": [],
        "activeStep": 2,
        "totalElements": 0,
    }


def test_markers_returned_as_snapshot():
    grid = StoryGrid()
    grid.place_marker(1, "queen")
    snapshot = grid.markers
    grid.place_marker(1, "pawn")
    assert len(snapshot) == 1
    assert _tuples(grid) == [(2, 1, "queen", ""), (3, 1, "pawn", "")]
