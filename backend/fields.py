"""Survey field table and route-map configuration.

Route maps are the story-grid fields; every other field is free text. Each
route map names the story script (step_key) its grid starts with.
"""

from typing import Any

ROUTE_MAP_CONFIG: dict[str, dict[str, Any]] = {
    "routeMap2-1": {
        "key": "routeMap2-1",
        "label": "Settings Exist Story Path",
        "question": "Design your journey from King to Goal when settings already exist",
        "prompt_id": "prompt2-1",
        "type": "fourGridStory",
        "step_key": "settingsExist",
    },
    "routeMap2-2": {
        "key": "routeMap2-2",
        "label": "Settings Not There Story Path",
        "question": "Design your journey from King to Goal when settings need to be created",
        "prompt_id": "prompt2-2",
        "type": "fourGridStory",
        "step_key": "settingsNotThere",
    },
    "routeMap2-3": {
        "key": "routeMap2-3",
        "label": "Settings Exist Story Path (Alternative)",
        "question": "Design your journey from King to Goal when settings already exist (alternative path)",
        "prompt_id": "prompt2-3",
        "type": "fourGridStory",
        "step_key": "settingsExist",
    },
    "routeMap3-1": {
        "key": "routeMap3-1",
        "label": "Settings Not There Story Path (Game)",
        "question": "Design your journey from King to Goal when settings need to be created (game mode)",
        "prompt_id": "prompt3-1",
        "type": "fourGridStory",
        "step_key": "settingsNotThere",
    },
    "routeMap3-2": {
        "key": "routeMap3-2",
        "label": "Settings Exist Story Path (Game)",
        "question": "Design your journey from King to Goal when settings already exist (game mode)",
        "prompt_id": "prompt3-2",
        "type": "fourGridStory",
        "step_key": "settingsExist",
        "required": False,
    },
}

# Which route maps appear on which page
PAGE_ROUTE_MAPS: dict[str, list[str]] = {
    "route": ["routeMap2-1", "routeMap2-2", "routeMap2-3"],
    "reflection": ["routeMap3-1", "routeMap3-2"],
}

# Form order: basic info -> route maps -> reflection -> comments
FIELDS: list[dict[str, Any]] = [
    {"key": "name", "label": "Name"},
    {"key": "email", "label": "Email"},
    ROUTE_MAP_CONFIG["routeMap2-1"],
    ROUTE_MAP_CONFIG["routeMap2-2"],
    ROUTE_MAP_CONFIG["routeMap2-3"],
    {"key": "age", "label": "Age"},
    ROUTE_MAP_CONFIG["routeMap3-1"],
    ROUTE_MAP_CONFIG["routeMap3-2"],
    {"key": "reflection", "label": "Learning Reflection", "multiline": True},
    {"key": "feedback", "label": "Additional Comments on Learning Path", "multiline": True},
]

FIELD_KEYS: list[str] = [f["key"] for f in FIELDS]


def is_route_map(key: str) -> bool:
    return key in ROUTE_MAP_CONFIG


def route_maps_for_page(page: str) -> list[str]:
    return PAGE_ROUTE_MAPS.get(page, [])
