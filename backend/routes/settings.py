"""Health check, settings, character catalog and story script endpoints."""

from fastapi import APIRouter

from backend import storage
from story_grid import catalog, scripts

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings():
    """Get global app settings (autosave delay, character limits, story defaults)."""
    return storage.get_config()


@router.patch("/settings")
async def update_settings(body: dict):
    """Update global app settings (partial merge)."""
    return storage.update_config(body)


@router.get("/characters")
async def list_characters():
    """List the placeable character types."""
    return list(catalog.CHESS_CHARACTERS)


@router.get("/scenarios")
async def list_scenarios():
    """List the story scripts with their step counts."""
    return scripts.script_stats()


@router.get("/scenarios/random")
async def random_scenario():
    """Pick a story script at random with its branches resolved."""
    return scripts.random_story_script()
