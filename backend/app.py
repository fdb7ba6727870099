import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend import sessions, storage
from backend.routes import router
from story_grid.transform import FormDataError

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


async def form_data_error_handler(request: Request, exc: FormDataError) -> JSONResponse:
    logger.warning("Rejected survey document on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app(data_dir: Path | None = None) -> FastAPI:
    """Build the survey API with drafts stored under data_dir (or $DATA_DIR).

    Live forms from a previous app are dropped; respondents are reloaded from
    their drafts on first access.
    """
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))
    storage.init_storage(resolved)
    sessions.clear()
    logger.info("Survey drafts stored in %s", storage.drafts_dir())

    app = FastAPI(title="Route Map Survey")
    app.add_exception_handler(FormDataError, form_data_error_handler)
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (uses DATA_DIR env var or default)
app = create_app()
