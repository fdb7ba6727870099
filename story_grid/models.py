"""Core domain models for the story grid.

The grid state machine, the data transform and the editor surface all operate
on these types. Pydantic is used for validation and serialisation at every
data boundary; the external form-data shape keeps its camelCase keys through
field aliases.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

GRID_COLS = 5  # King, Step 1, Step 2, Step 3, Goal
GOAL_COLUMN = GRID_COLS - 1
MAX_ACTIVE_STEP = 3  # the Goal column is never active
FIRST_CONTENT_ROW = 2


class CharacterType(BaseModel):
    """A placeable marker type from the character catalog."""

    model_config = ConfigDict(frozen=True)

    type: str
    symbol: str
    color: str
    max_count: int | None = None  # None = unbounded

    @property
    def unbounded(self) -> bool:
        return self.max_count is None


class Marker(BaseModel):
    """A placed character instance occupying one grid cell."""

    id: str
    row: int = Field(ge=0)
    column: int = Field(ge=0, le=GOAL_COLUMN)
    type: str
    symbol: str
    color: str
    description: str = ""


class StepMeta(BaseModel):
    """Title/symbol/color shown for one column of the step path."""

    model_config = ConfigDict(frozen=True)

    title: str
    symbol: str
    color: str
    step_id: str | None = None


class ScriptStep(BaseModel):
    """One step of a story script, optionally carrying a random branch."""

    step: str
    title: str
    description: str = ""
    color: str
    symbol: str
    random_branch: RandomBranch | None = None


class RandomBranch(BaseModel):
    probability: float = Field(ge=0.0, le=1.0)
    alternative_step: ScriptStep


class StoryScript(BaseModel):
    key: str
    title: str
    description: str = ""
    steps: list[ScriptStep]


class FixedStoryStructure(BaseModel):
    """Step metadata for all five columns, frozen once per scenario selection."""

    model_config = ConfigDict(frozen=True)

    scenario_key: str | None  # None when the default structure was used
    columns: tuple[StepMeta, ...] = Field(min_length=GRID_COLS, max_length=GRID_COLS)
    steps: tuple[ScriptStep, ...] = ()

    def column(self, index: int) -> StepMeta:
        return self.columns[index]


class StoryBox(BaseModel):
    """Narrative snapshot appended each time the active step advances."""

    model_config = ConfigDict(frozen=True)

    id: str
    step: int
    title: str
    symbol: str
    color: str
    content: str
    timestamp: str


class CellAccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    visible: bool
    editable: bool


# ── External form-data shapes ────────────────────────────


class TopRowEntry(BaseModel):
    col: int = Field(ge=0, le=GOAL_COLUMN)
    type: str
    description: str | None = ""


class BottomRowEntry(BaseModel):
    row: int = Field(ge=FIRST_CONTENT_ROW)
    col: int = Field(ge=0, le=GOAL_COLUMN)
    type: str
    description: str | None = ""


class GridFormData(BaseModel):
    """The shape exchanged with the host form (getData / setData).

    activeStep is always present on export and optional on import.
    """

    model_config = ConfigDict(populate_by_name=True)

    top_row: list[TopRowEntry] = Field(default_factory=list, alias="topRow")
    bottom_rows: list[BottomRowEntry] = Field(default_factory=list, alias="bottomRows")
    active_step: int | None = Field(
        default=None, alias="activeStep", ge=0, le=MAX_ACTIVE_STEP
    )
    total_elements: int | None = Field(default=None, alias="totalElements")


class LegacyElement(BaseModel):
    """A flat element from the older visualElements shape (id/symbol/color ignored)."""

    row: int = Field(ge=0)
    col: int = Field(ge=0, le=GOAL_COLUMN)
    type: str
    description: str | None = ""


class LegacyFormData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    visual_elements: list[LegacyElement] = Field(alias="visualElements")
    active_step: int | None = Field(
        default=None, alias="activeStep", ge=0, le=MAX_ACTIVE_STEP
    )


ScriptStep.model_rebuild()
