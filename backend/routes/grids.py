"""Story-grid editor endpoints for one route-map field of a respondent.

Selection endpoints (click, panel, pending description, cancel) only touch
the editor's transient state. Endpoints that change markers or the active
step also save the respondent's draft.
"""

from typing import Any

from fastapi import APIRouter, HTTPException

from backend import sessions, storage
from backend.fields import is_route_map
from backend.survey import SurveyForm
from story_grid.editor import EditorSurface
from story_grid.narrative import generate_story

from .models import CellBody, CharacterBody, DescriptionBody, ScenarioBody
from .survey import get_form_or_404

router = APIRouter()


def _editor(rid: str, field: str) -> tuple[SurveyForm, EditorSurface]:
    form = get_form_or_404(rid)
    if not is_route_map(field):
        raise HTTPException(404, "Route map not found")
    return form, form.editors[field]


def _respond(form: SurveyForm, field: str, msg: str | None = None) -> dict[str, Any]:
    return {
        "view": form.editors[field].view(),
        "value": form.values[field],
        "msg": msg,
    }


@router.get("/respondents/{rid}/grids/{field}")
async def get_grid(rid: str, field: str):
    """Render the grid: cells, controls, story boxes and selection."""
    form, _ = _editor(rid, field)
    return _respond(form, field)


@router.post("/respondents/{rid}/grids/{field}/click")
async def click_cell(rid: str, field: str, body: CellBody):
    """Select a character or target an empty editable cell."""
    form, editor = _editor(rid, field)
    editor.click_cell(body.row, body.col)
    return _respond(form, field)


@router.post("/respondents/{rid}/grids/{field}/panel")
async def open_panel(rid: str, field: str):
    """Open the character panel for the active column (the Add button)."""
    form, editor = _editor(rid, field)
    editor.open_character_panel()
    return _respond(form, field)


@router.delete("/respondents/{rid}/grids/{field}/panel")
async def close_panel(rid: str, field: str):
    """Close the character panel."""
    form, editor = _editor(rid, field)
    editor.close_character_panel()
    return _respond(form, field)


@router.post("/respondents/{rid}/grids/{field}/characters")
async def choose_character(rid: str, field: str, body: CharacterBody):
    """Place a character picked from the panel."""
    form, editor = _editor(rid, field)
    if editor.choose_character(body.type) is None:
        return _respond(form, field)
    return _respond(form, field, sessions.persist(form))


@router.put("/respondents/{rid}/grids/{field}/description")
async def set_description(rid: str, field: str, body: DescriptionBody):
    """Update the pending description of the selected character."""
    form, editor = _editor(rid, field)
    editor.set_pending_description(body.text)
    return _respond(form, field)


@router.post("/respondents/{rid}/grids/{field}/description/save")
async def save_description(rid: str, field: str):
    """Store the pending description on the selected character."""
    form, editor = _editor(rid, field)
    if not editor.save_description():
        return _respond(form, field)
    return _respond(form, field, sessions.persist(form))


@router.post("/respondents/{rid}/grids/{field}/cancel")
async def cancel(rid: str, field: str):
    """Drop the selection and the pending description."""
    form, editor = _editor(rid, field)
    editor.cancel()
    return _respond(form, field)


@router.post("/respondents/{rid}/grids/{field}/delete")
async def delete_selected(rid: str, field: str):
    """Delete the selected character."""
    form, editor = _editor(rid, field)
    if not editor.delete_selected():
        return _respond(form, field)
    return _respond(form, field, sessions.persist(form))


@router.post("/respondents/{rid}/grids/{field}/advance")
async def advance(rid: str, field: str):
    """Unlock the next block."""
    form, editor = _editor(rid, field)
    if not editor.unlock_next():
        return _respond(form, field)
    return _respond(form, field, sessions.persist(form))


@router.post("/respondents/{rid}/grids/{field}/clean")
async def clean(rid: str, field: str):
    """Clear every character and story box and return to the first step."""
    form, editor = _editor(rid, field)
    editor.clean_grid()
    return _respond(form, field, sessions.persist(form))


@router.put("/respondents/{rid}/grids/{field}/scenario")
async def change_scenario(rid: str, field: str, body: ScenarioBody):
    """Switch the story script; placed characters are kept."""
    form, editor = _editor(rid, field)
    editor.change_scenario(body.key)
    return _respond(form, field)


@router.get("/respondents/{rid}/grids/{field}/story")
async def get_story(rid: str, field: str, name: str | None = None, needs: str | None = None):
    """Generate the random-story text for the grid's resolved steps."""
    form, editor = _editor(rid, field)
    defaults = storage.get_config()["story"]
    grid = editor.grid
    story = generate_story(
        name or form.values.get("name") or defaults["default_name"],
        needs or defaults["default_needs"],
        grid.structure,
        grid.markers,
    )
    return {"scenario": grid.scenario_key, "story": story}
