"""Live survey forms, one per respondent, backed by draft storage.

A form is loaded from its draft the first time it is requested and kept in
memory afterwards; the in-memory form is the source of truth and every
change is written back with persist(). A failed write is logged and
reported as a short message, never raised, so the form keeps its state
until the next successful save.
"""

import logging

from backend import storage
from backend.survey import SurveyForm

logger = logging.getLogger(__name__)

_forms: dict[str, SurveyForm] = {}


def clear() -> None:
    """Drop all live forms (storage re-init, tests)."""
    _forms.clear()


def _new_form(respondent_id: str | None = None) -> SurveyForm:
    config = storage.get_config()
    return SurveyForm(respondent_id, enforce_limits=config["enforce_character_limits"])


def create_form() -> SurveyForm:
    form = _new_form()
    _forms[form.respondent_id] = form
    persist(form)
    return form


def get_form(respondent_id: str) -> SurveyForm | None:
    """Return the live form, loading it from its draft if needed."""
    form = _forms.get(respondent_id)
    if form is not None:
        return form
    document = storage.get_draft(respondent_id)
    if document is None:
        return None
    form = _new_form(respondent_id)
    skipped = form.load_document(document, adopt_respondent_id=False)
    if skipped:
        logger.warning("Draft %s: skipped malformed fields %s", respondent_id, skipped)
    _forms[respondent_id] = form
    return form


def discard_form(respondent_id: str) -> bool:
    """Forget the live form and delete its draft."""
    known = _forms.pop(respondent_id, None) is not None
    return storage.delete_draft(respondent_id) or known


def persist(form: SurveyForm) -> str | None:
    """Save the form as its respondent's draft. Returns an error message on failure.

    A form with no answers at all never overwrites an existing draft.
    """
    if not form.has_content() and storage.get_draft(form.respondent_id) is not None:
        logger.debug("Draft %s: form is empty, keeping the saved draft", form.respondent_id)
        return None
    try:
        storage.save_draft(form.respondent_id, form.to_document())
    except OSError as e:
        logger.warning("Draft save failed for %s: %s", form.respondent_id, e)
        return "Could not save your answers locally; they are kept until the next save."
    return None
