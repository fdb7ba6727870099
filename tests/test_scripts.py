from story_grid import scripts
from story_grid.scripts import (
    DEFAULT_STRUCTURE,
    GOAL,
    KING,
    RANDOM_STORY_SCRIPTS,
    get_story_script_by_key,
    random_story_script,
    resolve,
)


class NoRandom:
    def random(self) -> float:
        raise AssertionError("no sample expected")


# ── Registry ─────────────────────────────────────────────


def test_available_keys():
    assert scripts.available_keys() == ["settingsExist", "settingsNotThere"]


def test_script_stats():
    assert scripts.script_stats() == {
        "totalScripts": 2,
        "totalSteps": 6,
        "availableKeys": ["settingsExist", "settingsNotThere"],
    }


def test_unknown_key_returns_none():
    assert get_story_script_by_key("missing") is None


# ── Branch resolution ────────────────────────────────────


def test_branch_keeps_primary_above_probability(fixed_random):
    structure = resolve("settingsNotThere", fixed_random(0.9))
    assert structure.column(2).title == "Embed in workflow"
    assert structure.column(2).step_id == "2-1"


def test_branch_takes_alternative_below_probability(fixed_random):
    structure = resolve("settingsNotThere", fixed_random(0.1))
    assert structure.column(2).title == "Reach out for help"
    assert structure.column(2).symbol == "🤝"
    assert structure.column(2).color == "#ff9800"
    assert structure.steps[1].step == "2-2"


def test_branch_boundary_keeps_primary(fixed_random):
    structure = resolve("settingsNotThere", fixed_random(0.5))
    assert structure.column(2).title == "Embed in workflow"


def test_unbranched_script_draws_nothing():
    structure = resolve("settingsExist", NoRandom())
    assert [c.title for c in structure.columns] == [
        "King",
        "How to use it",
        "Complete the task",
        "Get a solution",
        "Goal - Opponent King",
    ]


def test_resolution_does_not_mutate_registry(fixed_random):
    resolve("settingsNotThere", fixed_random(0.1))
    step = RANDOM_STORY_SCRIPTS["settingsNotThere"].steps[1]
    assert step.step == "2-1"
    assert step.random_branch is not None


# ── Fixed columns and fallback ───────────────────────────


def test_king_and_goal_are_fixed(fixed_random):
    for key in ("settingsExist", "settingsNotThere", "unknown"):
        structure = resolve(key, fixed_random(0.3))
        assert structure.column(0) == KING
        assert structure.column(4) == GOAL


def test_unknown_key_uses_default_structure():
    structure = resolve("unknown", NoRandom())
    assert structure is DEFAULT_STRUCTURE
    assert structure.scenario_key is None
    assert structure.steps == ()


def test_random_story_script(fixed_random):
    assert random_story_script(fixed_random(0.0)).key == "settingsExist"
    script = random_story_script(fixed_random(0.99, 0.1))
    assert script.key == "settingsNotThere"
    assert script.steps[1].title == "Reach out for help"
