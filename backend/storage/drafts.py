"""Survey draft storage: one JSON document per respondent, last write wins."""

import json
from typing import Any

from .core import draft_path, drafts_dir


def list_drafts() -> list[dict[str, Any]]:
    results = []
    for path in sorted(drafts_dir().glob("*.json")):
        results.append(json.loads(path.read_text(encoding="utf-8")))
    return results


def get_draft(respondent_id: str) -> dict[str, Any] | None:
    """Load a saved document. Returns None if missing."""
    path = draft_path(respondent_id)
    if not path.is_file():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def save_draft(respondent_id: str, document: dict[str, Any]) -> None:
    """Overwrite the respondent's draft with the given document."""
    draft_path(respondent_id).write_text(
        json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8"
    )


def delete_draft(respondent_id: str) -> bool:
    path = draft_path(respondent_id)
    if not path.is_file():
        return False
    path.unlink()
    return True
