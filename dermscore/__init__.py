"""Declarative registry of clinical dermatology scoring instruments."""

from .models import FieldGroup, FieldKind, FieldOption, FieldSpec, Instrument, Result, SourceType
from .registry import REGISTRY, InstrumentNotFound, Registry, all_instruments, by_id, get_instrument
from .schema import default_values, flatten_fields
from .validation import FieldError, validate, validate_values

__version__ = "0.1.0"

__all__ = [
    "FieldError",
    "FieldGroup",
    "FieldKind",
    "FieldOption",
    "FieldSpec",
    "Instrument",
    "InstrumentNotFound",
    "REGISTRY",
    "Registry",
    "Result",
    "SourceType",
    "all_instruments",
    "by_id",
    "default_values",
    "flatten_fields",
    "get_instrument",
    "validate",
    "validate_values",
]
