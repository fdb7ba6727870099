"""Handlebars narrative rendering: story-box fragments and the random story.

step_fragment() produces the text logged in a story box when a step unlocks.
generate_story() fills the longer "settings not there" story from the
resolved structure and the characters placed in each step column.

Variables are rendered with triple-stash so respondent text is not
HTML-escaped.
"""

import random
from collections.abc import Callable, Iterable
from typing import Any

import pybars

from story_grid.models import FixedStoryStructure, Marker, StepMeta
from story_grid.scripts import RandomSource

_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}

STEP_NAMES = ["King", "Step 1", "Step 2", "Step 3", "Goal"]
REACH_OUT_TITLE = "Reach out for help"

DEFAULT_FRAGMENT = "This is {{{step_name}}} in your journey."

STEP_FRAGMENTS: dict[str, dict[int, str]] = {
    "settingsExist": {
        1: "You begin by understanding how to use existing settings and configurations. "
        "This involves exploring the current system and identifying what's already available.",
        2: "You proceed to complete the task using the existing settings. "
        "This step involves applying the known configurations to achieve your objectives.",
        3: "You successfully obtain a solution based on the existing settings. "
        "The outcome demonstrates the effectiveness of working with established configurations.",
    },
    "settingsNotThere": {
        1: "You start by brainstorming ideas and approaches. This involves creative "
        "thinking and exploring different possibilities for your needs.",
        2: "You implement your chosen method and integrate it into your workflow "
        "to address the challenges.",
        3: "You successfully achieve your goals and obtain a solution. The process "
        "has led to a positive outcome that meets your needs.",
    },
}

# (scenario, step) -> text used when the resolved step is the help branch
REACH_OUT_FRAGMENTS: dict[tuple[str, int], str] = {
    ("settingsNotThere", 2): "When the initial approach doesn't work, you reach out "
    "for help and support from others to find alternative solutions.",
}

STORY_TEMPLATE = """\
{{{name}}} is going to start the customization for an unmet needs on {{{needs}}} \
but with no prior settings. They firstly {{{step1_title}}} with {{{step1_characters}}} \
about walkarounds/combination, and got some idea.

{{#if reached_out}}\
Unluckily, the walkaround/combination didn't work. So with the help of \
{{{step2_characters}}} they started {{{step2_title}}}. Finally they got a \
{{{quality}}} solution within a {{{duration}}} time.\
{{else}}\
Luckily, the walkaround/combination worked! So they started {{{step2_title}}} with \
{{{step2_characters}}} to implement, and finally they got a {{{quality}}} solution.\
{{/if}}"""


class TemplateError(Exception):
    """Raised when a narrative template fails to compile or render."""


def render_template(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context))
    except Exception as e:
        raise TemplateError(f"Template error: {e}") from e


def step_fragment(step: int, step_meta: StepMeta | None, scenario_key: str | None) -> str:
    """Story-box text for a newly unlocked step."""
    step_name = STEP_NAMES[step] if 0 <= step < len(STEP_NAMES) else f"Step {step}"
    template = None
    if scenario_key is not None:
        if step_meta is not None and step_meta.title == REACH_OUT_TITLE:
            template = REACH_OUT_FRAGMENTS.get((scenario_key, step))
        if template is None:
            template = STEP_FRAGMENTS.get(scenario_key, {}).get(step)
    return render_template(template or DEFAULT_FRAGMENT, {"step_name": step_name})


def character_names(markers: Iterable[Marker]) -> str:
    types = [m.type or "colleague" for m in markers]
    if not types:
        return "some colleagues"
    return ", ".join(types)


def _solution_quality(rng: RandomSource) -> str:
    sample = rng.random()
    if sample < 0.5:
        return "successful"
    if sample < 0.8:
        return "usable"
    return "not too bad"


def _time_description(rng: RandomSource) -> str:
    return "long" if rng.random() < 0.8 else "ok"


def generate_story(
    name: str,
    needs: str,
    structure: FixedStoryStructure,
    markers: Iterable[Marker],
    rng: RandomSource | None = None,
) -> str:
    """Fill the random-story paragraph for a resolved structure.

    Only the "settingsNotThere" scenario has a story; every other scenario
    (including the default structure) yields "".
    """
    if structure.scenario_key != "settingsNotThere" or len(structure.steps) < 2:
        return ""
    source = rng or random
    by_column: dict[int, list[Marker]] = {}
    for marker in sorted(markers, key=lambda m: (m.column, m.row)):
        by_column.setdefault(marker.column, []).append(marker)

    step1, step2 = structure.steps[0], structure.steps[1]
    context = {
        "name": name,
        "needs": needs,
        "step1_title": step1.title.lower(),
        "step1_characters": character_names(by_column.get(1, [])),
        "step2_title": step2.title,
        "step2_characters": character_names(by_column.get(2, [])),
        "reached_out": step2.step == "2-2",
        "quality": _solution_quality(source),
    }
    if context["reached_out"]:
        context["duration"] = _time_description(source)
    return render_template(STORY_TEMPLATE, context)
