"""Editor surface: translates clicks and panel picks into grid operations.

The surface keeps only transient selection state (selected marker, pending
description text, empty-cell target, whether the character panel is open).
All of it is dropped on save, cancel or clean and never exported. The grid
itself stays the single owner of markers, steps and story boxes.
"""

from __future__ import annotations

from pydantic import BaseModel

from story_grid import catalog
from story_grid.grid import StoryGrid
from story_grid.models import (
    FIRST_CONTENT_ROW,
    GOAL_COLUMN,
    GRID_COLS,
    CharacterType,
    Marker,
    StoryBox,
)


class CellView(BaseModel):
    row: int
    col: int
    visible: bool
    editable: bool
    finished: bool = False
    title: str | None = None  # step title on row 1
    step_symbol: str | None = None  # step symbol on row 1
    marker_id: str | None = None
    marker_type: str | None = None
    symbol: str | None = None
    color: str | None = None
    description: str = ""
    add_button: bool = False
    label: str


class EditorView(BaseModel):
    """Everything a client needs to draw one grid."""

    scenario_key: str
    active_step: int
    rows: int
    cells: list[list[CellView]]
    can_advance: bool
    current_step_title: str
    current_step_symbol: str
    characters: list[CharacterType]
    story_boxes: list[StoryBox]
    selected_marker: Marker | None = None
    pending_description: str = ""
    target_cell: tuple[int, int] | None = None
    character_panel_open: bool = False


class EditorSurface:
    def __init__(self, grid: StoryGrid) -> None:
        self.grid = grid
        self.selected_marker_id: str | None = None
        self.pending_description = ""
        self.target_cell: tuple[int, int] | None = None
        self.character_panel_open = False

    # ── Selection ────────────────────────────────────────

    @property
    def selected_marker(self) -> Marker | None:
        if self.selected_marker_id is None:
            return None
        return self.grid.get_marker(self.selected_marker_id)

    def _clear_selection(self) -> None:
        self.selected_marker_id = None
        self.pending_description = ""

    def add_button_row(self) -> int | None:
        """Row showing the Add button in the active column, if it fits in the grid."""
        column = self.grid.active_step
        if not 1 <= column < GOAL_COLUMN:
            return None
        row = self.grid.next_row(column)
        if row < FIRST_CONTENT_ROW or row >= self.grid.row_count():
            return None
        if self.grid.marker_at(row, column) is not None:
            return None
        return row

    def click_cell(self, row: int, column: int) -> bool:
        """Select a marker or target an empty editable cell. Returns False if ignored."""
        access = self.grid.cell_access(row, column)
        if not access.visible or not access.editable:
            return False
        marker = self.grid.marker_at(row, column)
        if marker is not None:
            self.selected_marker_id = marker.id
            self.pending_description = marker.description
            self.target_cell = None
            return True
        if row == 0 or row == self.add_button_row():
            self._clear_selection()
            self.target_cell = (row, column)
            self.character_panel_open = True
            return True
        return False

    def open_character_panel(self) -> None:
        """The Add button: pick characters for the active column."""
        self._clear_selection()
        self.target_cell = None
        self.character_panel_open = True

    def close_character_panel(self) -> None:
        self.character_panel_open = False
        self.target_cell = None

    def choose_character(self, type: str) -> Marker | None:
        """Place the picked character at the targeted cell or in the active column."""
        if not self.character_panel_open or catalog.lookup(type) is None:
            return None
        if self.target_cell is not None and self.target_cell[0] == 0:
            marker = self.grid.place_top_marker(self.target_cell[1], type)
            self.close_character_panel()
            return marker
        if self.add_button_row() is None:
            return None
        # Panel stays open so several characters can be added in a row
        return self.grid.place_marker(self.grid.active_step, type)

    # ── Description editing ──────────────────────────────

    def set_pending_description(self, text: str) -> None:
        self.pending_description = text

    def save_description(self) -> bool:
        saved = False
        if self.selected_marker_id is not None:
            saved = self.grid.edit_marker_description(
                self.selected_marker_id, self.pending_description
            )
        self._clear_selection()
        return saved

    def cancel(self) -> None:
        self._clear_selection()

    def delete_selected(self) -> bool:
        marker = self.selected_marker
        deleted = False
        if marker is not None and self.grid.cell_access(marker.row, marker.column).editable:
            deleted = self.grid.delete_marker(marker.row, marker.column)
        self._clear_selection()
        return deleted

    # ── Grid controls ────────────────────────────────────

    def unlock_next(self) -> bool:
        self._clear_selection()
        self.close_character_panel()
        return self.grid.advance()

    def clean_grid(self) -> None:
        self.grid.reset()
        self._clear_selection()
        self.close_character_panel()

    def change_scenario(self, scenario_key: str) -> None:
        self.grid.set_scenario(scenario_key)

    # ── Rendering ────────────────────────────────────────

    def _cell(self, row: int, col: int, add_row: int | None) -> CellView:
        grid = self.grid
        access = grid.cell_access(row, col)
        if not access.visible:
            return CellView(row=row, col=col, visible=False, editable=False, label="🔒")

        view = CellView(
            row=row,
            col=col,
            visible=True,
            editable=access.editable,
            finished=row >= FIRST_CONTENT_ROW and grid.is_column_finished(col),
            label=f"{row}-{col}",
        )
        if row == 1:
            step = grid.step_display(col)
            view.title = step.title
            view.step_symbol = step.symbol
            if col == GOAL_COLUMN:
                view.label = "GOAL"
            elif col > grid.active_step:
                view.label = "🔒"
        marker = grid.marker_at(row, col)
        if marker is not None:
            view.marker_id = marker.id
            view.marker_type = marker.type
            view.symbol = marker.symbol
            view.color = marker.color
            view.description = marker.description
        view.add_button = col == grid.active_step and row == add_row
        return view

    def view(self) -> EditorView:
        grid = self.grid
        rows = grid.row_count()
        add_row = self.add_button_row()
        current = grid.current_step()
        return EditorView(
            scenario_key=grid.scenario_key,
            active_step=grid.active_step,
            rows=rows,
            cells=[[self._cell(r, c, add_row) for c in range(GRID_COLS)] for r in range(rows)],
            can_advance=grid.can_advance(),
            current_step_title=current.title,
            current_step_symbol=current.symbol,
            characters=list(catalog.CHESS_CHARACTERS),
            story_boxes=list(grid.story_boxes),
            selected_marker=self.selected_marker,
            pending_description=self.pending_description,
            target_cell=self.target_cell,
            character_panel_open=self.character_panel_open,
        )
