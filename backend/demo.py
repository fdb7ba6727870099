"""Create a demo survey draft for development/testing."""

import json
import shutil

from backend import storage
from backend.survey import SurveyForm

DEMO_RESPONDENT_ID = "demo-respondent"

DEMO_ANSWERS = {
    "name": "Demo Respondent",
    "email": "demo@example.com",
    "age": "29",
    "reflection": "Brainstorming with colleagues was the most useful step.",
}

# Older drafts stored the raw element list; kept here so the legacy import path is exercised
DEMO_LEGACY_ROUTE_MAP = {
    "visualElements": [
        {"row": 0, "col": 1, "type": "queen", "description": "Team lead"},
        {"row": 2, "col": 1, "type": "pawn", "description": "Forum post"},
        {"row": 2, "col": 2, "type": "knight", "description": "IT support"},
    ],
    "activeStep": 2,
}


def create_demo_data() -> SurveyForm:
    """Wipe existing drafts and create one fresh demo draft."""
    if storage.drafts_dir().exists():
        shutil.rmtree(storage.drafts_dir())
    storage.drafts_dir().mkdir(parents=True, exist_ok=True)

    form = SurveyForm(DEMO_RESPONDENT_ID)
    for key, value in DEMO_ANSWERS.items():
        form.update_value(key, value)

    # A settingsNotThere path walked through all three steps
    editor = form.editors["routeMap2-2"]
    grid = editor.grid
    grid.place_marker(1, "queen", "Manager")
    grid.place_marker(1, "pawn", "Colleague next door")
    grid.advance()
    grid.place_marker(2, "knight", "Power user")
    grid.advance()
    grid.place_marker(3, "pawn")

    form.update_value("routeMap3-1", json.dumps(DEMO_LEGACY_ROUTE_MAP))

    storage.save_draft(form.respondent_id, form.to_document())
    print(f"Created demo draft for respondent {form.respondent_id!r}.")
    return form
