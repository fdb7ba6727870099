"""Survey form endpoints: respondents, field values, export/import documents."""

from urllib.parse import quote

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from backend import sessions
from backend.fields import FIELDS, ROUTE_MAP_CONFIG, route_maps_for_page
from backend.survey import SurveyForm

from .models import UpdateValues

router = APIRouter()


def get_form_or_404(rid: str) -> SurveyForm:
    form = sessions.get_form(rid)
    if form is None:
        raise HTTPException(404, "Respondent not found")
    return form


@router.get("/fields")
async def list_fields(page: str | None = None):
    """List survey fields, or the route-map fields shown on one page."""
    if page is None:
        return FIELDS
    return [ROUTE_MAP_CONFIG[key] for key in route_maps_for_page(page)]


@router.post("/respondents", status_code=201)
async def create_respondent():
    """Start a new survey with a fresh respondent id."""
    form = sessions.create_form()
    return {"respondentId": form.respondent_id, "document": form.to_document()}


@router.get("/respondents/{rid}")
async def get_respondent(rid: str):
    """Get the current survey document."""
    return get_form_or_404(rid).to_document()


@router.patch("/respondents/{rid}/values")
async def update_values(rid: str, body: UpdateValues):
    """Update field values; route-map values are restored into their grids."""
    form = get_form_or_404(rid)
    unknown = [key for key in body.values if key not in form.values]
    if unknown:
        raise HTTPException(400, f"Unknown fields: {', '.join(unknown)}")
    skipped = [key for key, value in body.values.items() if not form.update_value(key, value)]
    return {"document": form.to_document(), "skipped": skipped, "msg": sessions.persist(form)}


@router.delete("/respondents/{rid}")
async def delete_respondent(rid: str):
    """Forget a respondent and delete the saved draft."""
    if not sessions.discard_form(rid):
        raise HTTPException(404, "Respondent not found")
    return {"ok": True}


@router.get("/respondents/{rid}/export")
async def export_document(rid: str):
    """Download the survey document as a JSON file."""
    form = get_form_or_404(rid)
    filename = form.download_filename()
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    disposition = f'attachment; filename="{ascii_name}"; filename*=UTF-8\'\'{quote(filename)}'
    return JSONResponse(form.to_document(), headers={"Content-Disposition": disposition})


@router.post("/respondents/{rid}/import")
async def import_document(rid: str, body: dict):
    """Load an uploaded survey document into the respondent's form."""
    form = get_form_or_404(rid)
    # A document without a values object raises FormDataError (400 via the app handler)
    skipped = form.load_document(body, adopt_respondent_id=False)
    return {
        "document": form.to_document(),
        "skipped": skipped,
        "msg": sessions.persist(form),
    }
