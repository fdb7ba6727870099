"""Story scripts and the resolver that turns them into a fixed 5-column path.

A script is three ordered steps. A step may carry a random branch: one
sample is drawn per resolution and the alternative step replaces the primary
when the sample falls below the branch probability. Two resolutions of the
same key can therefore disagree, so callers cache the resolved structure
(see StoryGrid.structure).

Column 0 is always the King and column 4 always the Goal; scripts only
supply columns 1-3. Unknown keys fall back to DEFAULT_STRUCTURE.
"""

import random
from typing import Any, Protocol

from story_grid.models import FixedStoryStructure, ScriptStep, StepMeta, StoryScript


class RandomSource(Protocol):
    def random(self) -> float: ...


KING = StepMeta(title="King", symbol="♔", color="#ff6b6b")
GOAL = StepMeta(title="Goal - Opponent King", symbol="♚", color="#2c3e50")

DEFAULT_STRUCTURE = FixedStoryStructure(
    scenario_key=None,
    columns=(
        KING,
        StepMeta(title="Brainstorm", symbol="💡", color="#4fc3f7"),
        StepMeta(title="Embed in workflow", symbol="⚙️", color="#10b981"),
        StepMeta(title="Result", symbol="📊", color="#ff9f43"),
        GOAL,
    ),
)

_SCRIPT_DATA: dict[str, dict[str, Any]] = {
    "settingsExist": {
        "key": "settingsExist",
        "title": "Settings Exist",
        "description": "Working through a need when suitable settings already exist.",
        "steps": [
            {
                "step": "1",
                "title": "How to use it",
                "description": "Learn how to use the existing settings and options.",
                "color": "#ff6b6b",
                "symbol": "⚙️",
            },
            {
                "step": "2",
                "title": "Complete the task",
                "description": "Use the existing settings to finish the task.",
                "color": "#4fc3f7",
                "symbol": "✅",
            },
            {
                "step": "3",
                "title": "Get a solution",
                "description": "Reach a final solution based on the existing settings.",
                "color": "#10b981",
                "symbol": "🎯",
            },
        ],
    },
    "settingsNotThere": {
        "key": "settingsNotThere",
        "title": "Settings Not There",
        "description": "Working through a need when new settings have to be created.",
        "steps": [
            {
                "step": "1",
                "title": "Brainstorm",
                "description": "Think through which settings and configuration are needed.",
                "color": "#ff9f43",
                "symbol": "💡",
            },
            {
                "step": "2-1",
                "title": "Embed in workflow",
                "description": "Embed the new settings into the existing workflow.",
                "color": "#9c27b0",
                "symbol": "🔧",
                "random_branch": {
                    "probability": 0.5,
                    "alternative_step": {
                        "step": "2-2",
                        "title": "Reach out for help",
                        "description": "Ask for outside help and support.",
                        "color": "#ff9800",
                        "symbol": "🤝",
                    },
                },
            },
            {
                "step": "3",
                "title": "Get a solution",
                "description": "Reach a solution through the newly created settings.",
                "color": "#00bcd4",
                "symbol": "🚀",
            },
        ],
    },
}

RANDOM_STORY_SCRIPTS: dict[str, StoryScript] = {
    key: StoryScript.model_validate(data) for key, data in _SCRIPT_DATA.items()
}


def available_keys() -> list[str]:
    return list(RANDOM_STORY_SCRIPTS)


def script_stats() -> dict[str, Any]:
    keys = available_keys()
    return {
        "totalScripts": len(keys),
        "totalSteps": sum(len(RANDOM_STORY_SCRIPTS[k].steps) for k in keys),
        "availableKeys": keys,
    }


def resolve_step(step: ScriptStep, rng: RandomSource | None = None) -> ScriptStep:
    """Return the step itself or its branch alternative (one sample drawn)."""
    if step.random_branch is not None:
        if (rng or random).random() < step.random_branch.probability:
            return step.random_branch.alternative_step
    return step


def resolve_script(script: StoryScript, rng: RandomSource | None = None) -> StoryScript:
    """Copy of the script with every random branch resolved."""
    steps = [resolve_step(step, rng) for step in script.steps]
    return script.model_copy(update={"steps": steps})


def get_story_script_by_key(key: str, rng: RandomSource | None = None) -> StoryScript | None:
    script = RANDOM_STORY_SCRIPTS.get(key)
    if script is None:
        return None
    return resolve_script(script, rng)


def random_story_script(rng: RandomSource | None = None) -> StoryScript:
    """Pick a script at random, then resolve its branches."""
    source = rng or random
    keys = available_keys()
    key = keys[int(source.random() * len(keys))]
    return resolve_script(RANDOM_STORY_SCRIPTS[key], rng)


def resolve(scenario_key: str, rng: RandomSource | None = None) -> FixedStoryStructure:
    """Build the five-column structure for a scenario key.

    Draws fresh branch samples on every call; the caller must freeze the result.
    """
    script = get_story_script_by_key(scenario_key, rng)
    if script is None or len(script.steps) < 3:
        return DEFAULT_STRUCTURE

    steps = tuple(script.steps[:3])
    middle = tuple(
        StepMeta(title=s.title, symbol=s.symbol, color=s.color, step_id=s.step)
        for s in steps
    )
    return FixedStoryStructure(
        scenario_key=scenario_key,
        columns=(KING, *middle, GOAL),
        steps=steps,
    )
