"""Storage root, per-respondent paths and the slug used for draft file names."""

import re
import unicodedata
from pathlib import Path

_data_dir: Path | None = None


def slugify(value: str) -> str:
    """Convert a respondent id (or any label) to a filesystem-safe slug.

    uuid4 ids pass through unchanged; "Anna's Draft" → "annas-draft".
    """
    text = unicodedata.normalize("NFKD", value)
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    text = re.sub(r"['\"]", "", text)
    text = re.sub(r"[^a-z0-9]+", "-", text).strip("-")
    return text or "untitled"


def init_storage(data_dir: Path) -> None:
    """Point storage at data_dir and create the drafts folder."""
    global _data_dir
    _data_dir = data_dir
    drafts_dir().mkdir(parents=True, exist_ok=True)


def data_dir() -> Path:
    assert _data_dir is not None, "Call init_storage() before using storage"
    return _data_dir


def drafts_dir() -> Path:
    return data_dir() / "drafts"


def draft_path(respondent_id: str) -> Path:
    return drafts_dir() / f"{slugify(respondent_id)}.json"


def config_path() -> Path:
    return data_dir() / "config.json"
