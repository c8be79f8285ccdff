"""
Instrument schema helpers.

Builders used by the instrument modules to declare fields, plus the two
read-only walks over a section tree: ``flatten_fields`` and ``default_values``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .models import FieldGroup, FieldKind, FieldOption, FieldSpec, OptionValue


# ── Option sets ──────────────────────────────────────────────────────────────

def options(pairs: Iterable[Tuple[OptionValue, str]]) -> List[FieldOption]:
    return [FieldOption(value=value, label=label) for value, label in pairs]


def ordinal_options(lo: int, hi: int, labels: Optional[Sequence[str]] = None) -> List[FieldOption]:
    """Integer options lo..hi, labelled ``"n - label"`` when labels are given."""
    opts = []
    for i, value in enumerate(range(lo, hi + 1)):
        label = f"{value} - {labels[i]}" if labels else str(value)
        opts.append(FieldOption(value=value, label=label))
    return opts


def yes_no_options(yes: str = "Yes", no: str = "No") -> List[FieldOption]:
    return [FieldOption(value=0, label=no), FieldOption(value=1, label=yes)]


# ── Field builders ───────────────────────────────────────────────────────────

def number_input(
    id: str,
    label: str,
    min: Optional[float] = 0,
    max: Optional[float] = None,
    default: float = 0,
    step: Optional[float] = None,
    description: Optional[str] = None,
    placeholder: Optional[str] = None,
) -> FieldSpec:
    return FieldSpec(
        id=id, label=label, kind=FieldKind.NUMBER, default=default,
        min=min, max=max, step=step, description=description, placeholder=placeholder,
    )


def select_input(
    id: str,
    label: str,
    opts: Sequence[FieldOption],
    default: Optional[OptionValue] = None,
    description: Optional[str] = None,
) -> FieldSpec:
    return FieldSpec(
        id=id, label=label, kind=FieldKind.SELECT, options=tuple(opts),
        default=opts[0].value if default is None else default, description=description,
    )


def radio_input(
    id: str,
    label: str,
    opts: Sequence[FieldOption],
    default: Optional[OptionValue] = None,
    description: Optional[str] = None,
) -> FieldSpec:
    return FieldSpec(
        id=id, label=label, kind=FieldKind.RADIO, options=tuple(opts),
        default=opts[0].value if default is None else default, description=description,
    )


def checkbox_input(id: str, label: str, default: bool = False, description: Optional[str] = None) -> FieldSpec:
    return FieldSpec(id=id, label=label, kind=FieldKind.CHECKBOX, default=default, description=description)


def text_input(id: str, label: str, default: str = "", placeholder: Optional[str] = None) -> FieldSpec:
    return FieldSpec(id=id, label=label, kind=FieldKind.TEXT, default=default, placeholder=placeholder)


def group(
    id: str,
    title: str,
    fields: Sequence[FieldSpec],
    grid_cols: Optional[int] = None,
    description: Optional[str] = None,
) -> FieldGroup:
    return FieldGroup(id=id, title=title, fields=tuple(fields), grid_cols=grid_cols, description=description)


# ── Section tree walks ───────────────────────────────────────────────────────

def flatten_fields(sections: Iterable[Union[FieldSpec, FieldGroup]]) -> List[FieldSpec]:
    """Every leaf field of a section tree, in declaration order."""
    fields: List[FieldSpec] = []
    for section in sections:
        if isinstance(section, FieldGroup):
            fields.extend(section.fields)
        elif isinstance(section, FieldSpec):
            fields.append(section)
        else:
            raise TypeError(f"Unknown section type: {type(section).__name__}")
    return fields


def default_values(sections: Iterable[Union[FieldSpec, FieldGroup]]) -> Dict[str, Any]:
    return {f.id: f.default for f in flatten_fields(sections)}


def with_defaults(sections: Iterable[Union[FieldSpec, FieldGroup]], values: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay caller-supplied values on the declared defaults."""
    merged = default_values(sections)
    merged.update(values or {})
    return merged


# ── Shared option sets ───────────────────────────────────────────────────────

SEVERITY_0_4 = options([
    (0, "0-None"), (1, "1-Slight/Mild"), (2, "2-Moderate"), (3, "3-Marked/Severe"), (4, "4-Very Severe"),
])

AREA_0_6 = options([
    (0, "0 (0%)"), (1, "1 (1-9%)"), (2, "2 (10-29%)"), (3, "3 (30-49%)"),
    (4, "4 (50-69%)"), (5, "5 (70-89%)"), (6, "6 (90-100%)"),
])
