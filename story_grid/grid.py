"""Grid state machine for the progressive story-path editor.

The grid is five columns wide (King, Step 1-3, Goal). Row 0 is a lane above
the step path, row 1 is the path itself, rows 2+ hold the characters placed
for each step.

State:
  active_step   0..3, starts at 1; advance() is the only forward transition,
                reset() the only way back (besides an import).
  markers       at most one per (row, column).
  story_boxes   append-only log, one entry per advance().
  structure     step metadata resolved once per scenario selection.

Cell policy (cell_access):
  row 0    visible + editable for columns 1-3, inert for King and Goal
  row 1    always visible, never editable
  rows 2+  visible if column <= active_step, editable if column == active_step

Invalid transitions (advancing past step 3, placing outside the active
column) are ignored and reported through the return value, never raised.
Edits and deletes are not re-checked against the cell policy here; the
editor surface only offers them for editable cells.

Every change to the marker set or active_step calls each subscribed
listener with the exported form data.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from story_grid import catalog, narrative, scripts, transform
from story_grid.models import (
    FIRST_CONTENT_ROW,
    GOAL_COLUMN,
    MAX_ACTIVE_STEP,
    CellAccess,
    FixedStoryStructure,
    GridFormData,
    Marker,
    StepMeta,
    StoryBox,
)
from story_grid.scripts import RandomSource

module_logger = logging.getLogger(__name__)

DEFAULT_SCENARIO = "settingsExist"
INITIAL_STEP = 1
MIN_ROWS = 4  # above lane + step path + one content row + add row
MAX_ROWS = 7

LOCKED_STEP = StepMeta(title="🔒 Locked", symbol="🔒", color="#999999")

Listener = Callable[[dict[str, Any]], None]


def cell_access(row: int, column: int, active_step: int) -> CellAccess:
    """Visibility and editability of a cell for a given active step."""
    if row == 0:
        inner = 0 < column < GOAL_COLUMN
        return CellAccess(visible=inner, editable=inner)
    if row == 1:
        return CellAccess(visible=True, editable=False)
    if column < active_step:
        return CellAccess(visible=True, editable=False)
    if column == active_step:
        return CellAccess(visible=True, editable=True)
    return CellAccess(visible=False, editable=False)


class StoryGrid:
    """Owns the markers, the unlock progression and the story-box log of one grid.

    Args:
        scenario_key:   Which story script governs the step titles.
        rng:            Source for branch resolution; defaults to the random module.
        enforce_limits: Refuse placements beyond a catalog type's max_count.
        logger:         Logger for ignored transitions and skipped imports.
    """

    def __init__(
        self,
        scenario_key: str = DEFAULT_SCENARIO,
        *,
        rng: RandomSource | None = None,
        enforce_limits: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.enforce_limits = enforce_limits
        self._log = logger or module_logger
        self._rng = rng
        self._scenario_key = scenario_key
        self._structure: FixedStoryStructure | None = None  # pending until first read
        self._markers: list[Marker] = []
        self._active_step = INITIAL_STEP
        self._story_boxes: list[StoryBox] = []
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def active_step(self) -> int:
        return self._active_step

    @property
    def scenario_key(self) -> str:
        return self._scenario_key

    @property
    def markers(self) -> tuple[Marker, ...]:
        return tuple(self._markers)

    @property
    def story_boxes(self) -> tuple[StoryBox, ...]:
        return tuple(self._story_boxes)

    @property
    def structure(self) -> FixedStoryStructure:
        """The frozen step metadata, resolved on first access after a scenario change."""
        if self._structure is None:
            self._structure = scripts.resolve(self._scenario_key, self._rng)
            self._log.debug(
                "Story structure fixed for %r: %s",
                self._scenario_key,
                [c.title for c in self._structure.columns],
            )
        return self._structure

    def cell_access(self, row: int, column: int) -> CellAccess:
        return cell_access(row, column, self._active_step)

    def marker_at(self, row: int, column: int) -> Marker | None:
        for marker in self._markers:
            if marker.row == row and marker.column == column:
                return marker
        return None

    def get_marker(self, marker_id: str) -> Marker | None:
        for marker in self._markers:
            if marker.id == marker_id:
                return marker
        return None

    def next_row(self, column: int) -> int:
        """Row the next placement in a column lands on.

        Below the current block when its last row is filled, otherwise into
        the gap just above it; row 2 for an empty column.
        """
        rows = [m.row for m in self._markers if m.column == column and m.row >= FIRST_CONTENT_ROW]
        if not rows:
            return FIRST_CONTENT_ROW
        max_row = max(rows)
        if self.marker_at(max_row, column) is not None:
            return max_row + 1
        return max_row - 1

    def row_count(self) -> int:
        """Rendered grid height: room for one empty row after the active block."""
        target = self.next_row(self._active_step)
        return min(max(target + 1, MIN_ROWS), MAX_ROWS)

    def step_display(self, column: int) -> StepMeta:
        """Step-path metadata for a column, or the locked placeholder."""
        if column <= self._active_step or column == GOAL_COLUMN:
            return self.structure.column(column)
        return LOCKED_STEP

    def current_step(self) -> StepMeta:
        return self.structure.column(self._active_step)

    def can_advance(self) -> bool:
        return self._active_step < MAX_ACTIVE_STEP

    def is_column_finished(self, column: int) -> bool:
        """A column is finished once its first character is described and it is no longer active."""
        marker = self.marker_at(FIRST_CONTENT_ROW, column)
        completed = marker is not None and marker.description.strip() != ""
        return completed and column != self._active_step

    def type_count(self, type: str) -> int:
        return sum(1 for m in self._markers if m.type == type)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def advance(self) -> bool:
        """Unlock the next column and log its story box."""
        if not self.can_advance():
            self._log.debug("advance() ignored at terminal step %d", self._active_step)
            return False
        self._active_step += 1
        step = self._active_step
        meta = self.structure.column(step)
        self._story_boxes.append(StoryBox(
            id=uuid.uuid4().hex,
            step=step,
            title=meta.title,
            symbol=meta.symbol,
            color=meta.color,
            content=narrative.step_fragment(step, meta, self._scenario_key),
            timestamp=datetime.now(timezone.utc).isoformat(),
        ))
        self._notify()
        return True

    def reset(self) -> None:
        """Clear markers and story boxes and return to the first step."""
        self._markers = []
        self._story_boxes = []
        self._active_step = INITIAL_STEP
        self._notify()

    def set_scenario(self, scenario_key: str) -> FixedStoryStructure:
        """Switch scripts and freeze a freshly resolved structure. Markers stay."""
        self._scenario_key = scenario_key
        self._structure = None
        return self.structure

    # ------------------------------------------------------------------
    # Markers
    # ------------------------------------------------------------------

    def _within_limit(self, type: str) -> bool:
        if not self.enforce_limits:
            return True
        character = catalog.lookup(type)
        if character is None or character.unbounded:
            return True
        return self.type_count(type) < character.max_count

    def _add_marker(self, row: int, column: int, type: str, description: str) -> Marker | None:
        if not self._within_limit(type):
            self._log.debug("Placement of %r refused: catalog limit reached", type)
            return None
        symbol, color = catalog.display_attributes(type)
        marker = Marker(
            id=transform.new_marker_id(),
            row=row,
            column=column,
            type=type,
            symbol=symbol,
            color=color,
            description=description,
        )
        self._markers.append(marker)
        self._notify()
        return marker

    def place_marker(self, column: int, type: str, description: str = "") -> Marker | None:
        """Place a character below the step path in the active column."""
        if column != self._active_step:
            self._log.debug("place_marker(%d) ignored: active column is %d", column, self._active_step)
            return None
        row = self.next_row(column)
        if self.marker_at(row, column) is not None:
            return None
        return self._add_marker(row, column, type, description)

    def place_top_marker(self, column: int, type: str, description: str = "") -> Marker | None:
        """Place a character in the lane above the step path (columns 1-3)."""
        if not self.cell_access(0, column).editable or self.marker_at(0, column) is not None:
            self._log.debug("place_top_marker(%d) ignored", column)
            return None
        return self._add_marker(0, column, type, description)

    def edit_marker_description(self, marker_id: str, text: str) -> bool:
        for i, marker in enumerate(self._markers):
            if marker.id == marker_id:
                self._markers[i] = marker.model_copy(update={"description": text})
                self._notify()
                return True
        return False

    def delete_marker(self, row: int, column: int) -> bool:
        remaining = [m for m in self._markers if not (m.row == row and m.column == column)]
        if len(remaining) == len(self._markers):
            return False
        self._markers = remaining
        self._notify()
        return True

    def clear_all(self) -> None:
        """Remove every marker; active step and scenario are kept."""
        if not self._markers:
            return
        self._markers = []
        self._notify()

    # ------------------------------------------------------------------
    # Host data exchange
    # ------------------------------------------------------------------

    def form_data(self) -> GridFormData:
        return transform.export_form_data(self._markers, self._active_step)

    def get_data(self) -> dict[str, Any]:
        return transform.dump_form_data(self.form_data())

    def set_data(self, payload: Any) -> bool:
        """Restore markers (and active step, when present) from host form data.

        A malformed payload leaves the grid untouched and returns False.
        """
        try:
            data = transform.parse_form_data(payload)
        except transform.FormDataError as e:
            self._log.warning("Ignoring malformed grid data: %s", e)
            return False
        self._markers = transform.markers_from_form_data(data)
        if data.active_step is not None:
            self._active_step = data.active_step
        # Keep one story box per advance at most
        del self._story_boxes[self._active_step:]
        self._notify()
        return True

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        data = self.get_data()
        for listener in list(self._listeners):
            listener(data)
