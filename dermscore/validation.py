"""Per-field validation rules derived from a field's declared kind, options and bounds."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, Optional, Union

from pydantic import BaseModel

from .models import FieldGroup, FieldKind, FieldSpec
from .schema import flatten_fields

logger = logging.getLogger(__name__)


class FieldError(BaseModel):
    """A single field's value violates its declared constraint."""

    field_id: str
    message: str
    value: Any = None


def _as_number(raw: Any) -> Optional[float]:
    """Strict numeric coercion: numbers and numeric strings only."""
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (int, float)):
        val = float(raw)
    elif isinstance(raw, str):
        try:
            val = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(val) or math.isinf(val):
        return None
    return val


def validate(field: FieldSpec, raw: Any) -> Optional[FieldError]:
    """
    Check one raw value against a field.

    Returns None when the value is acceptable, otherwise a FieldError.
    Select and radio fields with numeric options accept the number as text.
    """
    def error(message: str) -> FieldError:
        return FieldError(field_id=field.id, message=message, value=raw)

    if field.kind == FieldKind.NUMBER:
        val = _as_number(raw)
        if val is None:
            return error(f"{field.label}: expected a number")
        if field.min is not None and val < field.min:
            return error(f"{field.label}: must be at least {field.min:g}")
        if field.max is not None and val > field.max:
            return error(f"{field.label}: must be at most {field.max:g}")
        return None

    if field.kind in (FieldKind.SELECT, FieldKind.RADIO):
        allowed = field.option_values()
        if field.numeric_options():
            val = _as_number(raw)
            if val is not None and any(val == _as_number(opt) for opt in allowed):
                return None
        elif isinstance(raw, str) and raw in allowed:
            return None
        return error(f"{field.label}: must be one of {', '.join(str(a) for a in allowed)}")

    if field.kind == FieldKind.CHECKBOX:
        if isinstance(raw, bool):
            return None
        return error(f"{field.label}: expected true or false")

    if field.kind == FieldKind.TEXT:
        if isinstance(raw, str):
            return None
        return error(f"{field.label}: expected text")

    raise ValueError(f"Unknown field kind: {field.kind}")


def validate_values(
    sections: Iterable[Union[FieldSpec, FieldGroup]],
    values: Dict[str, Any],
) -> Dict[str, FieldError]:
    """
    Validate every supplied value that names a declared field.

    Each field is checked independently; the returned mapping holds one
    FieldError per rejected field and is empty when everything passes.
    """
    fields = {f.id: f for f in flatten_fields(sections)}
    errors: Dict[str, FieldError] = {}
    for key, raw in values.items():
        field = fields.get(key)
        if field is None:
            logger.debug(f"Ignoring undeclared field: {key}")
            continue
        err = validate(field, raw)
        if err is not None:
            errors[key] = err
    return errors
