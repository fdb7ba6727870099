"""FastAPI API endpoints under /api.

Endpoint groups: health/settings/catalog, respondents (survey form values,
export/import documents) and grids (the story-grid editor of one route-map
field). Grid endpoints are nested under /api/respondents/{rid}/grids/{field}/.
Every mutating endpoint writes the respondent's draft; a failed write is
reported in the response's "msg" field instead of failing the request.
"""

from fastapi import APIRouter

from .grids import router as grids_router
from .settings import router as settings_router
from .survey import router as survey_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(survey_router)
router.include_router(grids_router)
