"""File-based JSON storage.

Data layout:
  data/
    drafts/
      <respondent>.json  Saved survey document (values, respondentId, timestamp)
    config.json          App settings (autosave delay, character limits, story defaults)

Drafts are plain overwrites: the last write for a respondent wins. Respondent
ids are slugified before they become file names.

Config: get_config() returns defaults merged with stored values.
update_config() applies partial updates: story settings merged key-by-key,
scalars overwritten.
"""

# Re-export all public symbols so `from backend import storage` keeps working.

from .core import (  # noqa: F401
    config_path,
    data_dir,
    draft_path,
    drafts_dir,
    init_storage,
    slugify,
)

from .drafts import (  # noqa: F401
    delete_draft,
    get_draft,
    list_drafts,
    save_draft,
)

from .config import (  # noqa: F401
    get_config,
    update_config,
)
