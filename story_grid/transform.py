"""Bidirectional mapping between grid markers and the host form-data shape.

Export shape:
  {"topRow": [{col, type, description}],                 row 0
   "bottomRows": [{row, col, type, description}],        rows >= 2
   "activeStep": int, "totalElements": int}

Import also accepts the legacy shape {"visualElements": [{row, col, type,
description, ...}], "activeStep"?}; its elements are re-partitioned by their
own row value. Row 1 is the step path and never holds markers, so legacy
elements on it are dropped.

Import is lossy-tolerant: unknown character types get the placeholder glyph,
and duplicate positions keep the first entry. Only a payload that matches
neither shape raises FormDataError.
"""

import json
import logging
import uuid
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from story_grid.catalog import display_attributes
from story_grid.models import (
    FIRST_CONTENT_ROW,
    BottomRowEntry,
    GridFormData,
    LegacyFormData,
    Marker,
    TopRowEntry,
)

logger = logging.getLogger(__name__)


class FormDataError(ValueError):
    """Raised when an import payload is neither the current nor the legacy shape."""


def new_marker_id() -> str:
    return uuid.uuid4().hex


def export_form_data(markers: Iterable[Marker], active_step: int) -> GridFormData:
    markers = list(markers)
    return GridFormData(
        top_row=[
            TopRowEntry(col=m.column, type=m.type, description=m.description or "")
            for m in markers
            if m.row == 0
        ],
        bottom_rows=[
            BottomRowEntry(row=m.row, col=m.column, type=m.type, description=m.description or "")
            for m in markers
            if m.row >= FIRST_CONTENT_ROW
        ],
        active_step=active_step,
        total_elements=len(markers),
    )


def dump_form_data(data: GridFormData) -> dict[str, Any]:
    """Serialise to the camelCase dict the host form stores."""
    return data.model_dump(by_alias=True)


def _from_legacy(legacy: LegacyFormData) -> GridFormData:
    top_row: list[TopRowEntry] = []
    bottom_rows: list[BottomRowEntry] = []
    for el in legacy.visual_elements:
        description = el.description or ""
        if el.row == 0:
            top_row.append(TopRowEntry(col=el.col, type=el.type, description=description))
        elif el.row >= FIRST_CONTENT_ROW:
            bottom_rows.append(
                BottomRowEntry(row=el.row, col=el.col, type=el.type, description=description)
            )
        else:
            logger.warning("Legacy element on the step path (row 1, col %d) dropped", el.col)
    return GridFormData(
        top_row=top_row,
        bottom_rows=bottom_rows,
        active_step=legacy.active_step,
        total_elements=len(legacy.visual_elements),
    )


def parse_form_data(payload: Any) -> GridFormData:
    """Validate a current-shape or legacy-shape payload (dict or JSON string)."""
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise FormDataError(f"Form data is not valid JSON: {e}") from e
    if isinstance(payload, GridFormData):
        return payload
    if not isinstance(payload, dict):
        raise FormDataError(f"Form data must be an object, got {type(payload).__name__}")

    try:
        if "topRow" in payload or "bottomRows" in payload:
            return GridFormData.model_validate(payload)
        if "visualElements" in payload:
            return _from_legacy(LegacyFormData.model_validate(payload))
    except ValidationError as e:
        raise FormDataError(f"Invalid form data: {e}") from e
    raise FormDataError("Form data has neither topRow/bottomRows nor visualElements")


def markers_from_form_data(data: GridFormData) -> list[Marker]:
    """Rebuild markers with fresh ids and catalog-derived symbol/color."""
    positioned = [(0, e.col, e.type, e.description) for e in data.top_row]
    positioned += [(e.row, e.col, e.type, e.description) for e in data.bottom_rows]

    markers: list[Marker] = []
    taken: set[tuple[int, int]] = set()
    for row, col, type_, description in positioned:
        if (row, col) in taken:
            logger.warning("Duplicate marker at (%d, %d) skipped on import", row, col)
            continue
        taken.add((row, col))
        symbol, color = display_attributes(type_)
        markers.append(Marker(
            id=new_marker_id(),
            row=row,
            column=col,
            type=type_,
            symbol=symbol,
            color=color,
            description=description or "",
        ))
    return markers
