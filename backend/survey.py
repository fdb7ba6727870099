"""Survey form: field values, respondent id and the embedded story grids.

Each route-map field owns one StoryGrid (wrapped in an EditorSurface). The
form subscribes to every grid and folds its exported form data into the
field value as a compact JSON string, so `values` is always the savable
document body.

Document layout (drafts, downloads and uploads all share it):
  {"values": {<field key>: <str>, ...}, "respondentId": <str>, "timestamp": <ISO-8601>}

Route-map values always pass through their grid (current or legacy shape):
an empty value resets the grid, and a value that cannot be parsed is skipped
with a warning, leaving both the grid and the stored value as they were.
"""

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any

from story_grid.editor import EditorSurface
from story_grid.grid import StoryGrid
from story_grid.transform import FormDataError

from backend.fields import FIELD_KEYS, ROUTE_MAP_CONFIG, is_route_map

logger = logging.getLogger(__name__)


def new_respondent_id() -> str:
    return str(uuid.uuid4())


def _compact(data: dict[str, Any]) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


class SurveyForm:
    def __init__(self, respondent_id: str | None = None, *, enforce_limits: bool = False) -> None:
        self.respondent_id = respondent_id or new_respondent_id()
        self.values: dict[str, str] = {key: "" for key in FIELD_KEYS}
        self.editors: dict[str, EditorSurface] = {}
        for key, config in ROUTE_MAP_CONFIG.items():
            grid = StoryGrid(config["step_key"], enforce_limits=enforce_limits)
            grid.subscribe(lambda data, key=key: self._on_grid_change(key, data))
            self.editors[key] = EditorSurface(grid)

    def _on_grid_change(self, field_key: str, form_data: dict[str, Any]) -> None:
        encoded = _compact(form_data)
        if self.values.get(field_key) != encoded:
            self.values[field_key] = encoded

    def grid(self, field_key: str) -> StoryGrid:
        return self.editors[field_key].grid

    def update_value(self, key: str, value: str) -> bool:
        """Set a field value. Returns False if a route-map value was rejected.

        A route-map value goes through its grid first: the field then holds the
        grid's own export. An empty value resets the grid; a malformed one is
        skipped and the field keeps its previous value.
        """
        if key not in self.values:
            raise KeyError(key)
        if not is_route_map(key):
            self.values[key] = value
            return True
        grid = self.grid(key)
        if not value:
            grid.reset()
            self.values[key] = ""
            return True
        if not grid.set_data(value):
            logger.warning("Failed to parse %s data; keeping the previous value", key)
            return False
        return True

    def has_content(self) -> bool:
        return any(str(v).strip() for v in self.values.values())

    # ── Documents ────────────────────────────────────────

    def load_document(self, document: Any, *, adopt_respondent_id: bool = True) -> list[str]:
        """Replace values from a saved document and restore the grids.

        Returns the route-map keys that were skipped as malformed. An upload into
        a live session passes adopt_respondent_id=False to keep its own id.
        Raises FormDataError when the document has no values object.
        """
        if not isinstance(document, dict) or not isinstance(document.get("values"), dict):
            raise FormDataError("Document has no values object")
        values = document["values"]
        skipped: list[str] = []
        for key in FIELD_KEYS:
            raw = values.get(key, "")
            if isinstance(raw, dict) and is_route_map(key):
                raw = _compact(raw)
            if not self.update_value(key, "" if raw is None else str(raw)):
                skipped.append(key)
        if adopt_respondent_id and document.get("respondentId"):
            self.respondent_id = str(document["respondentId"])
        return skipped

    def to_document(self) -> dict[str, Any]:
        return {
            "values": dict(self.values),
            "respondentId": self.respondent_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def download_filename(self) -> str:
        safe_name = re.sub(
            r"[^\w\u4e00-\u9fa5-]+", "_", self.values.get("name") or "anonymous", flags=re.ASCII
        )
        return f"learning_route_map_{safe_name}.json"
