"""Pydantic models for dermscore instruments."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldKind(str, Enum):
    """Input kinds an instrument field can declare."""

    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    TEXT = "text"


class SourceType(str, Enum):
    RESEARCH = "Research"
    CLINICAL_GUIDELINE = "Clinical Guideline"
    EXPERT_CONSENSUS = "Expert Consensus"


class DisplayType(str, Enum):
    FORM = "form"
    STATIC_LIST = "static_list"


OptionValue = Union[int, float, str]


class FieldOption(BaseModel):
    """One choice of a select or radio field."""

    model_config = ConfigDict(frozen=True)

    value: OptionValue
    label: str


class FieldSpec(BaseModel):
    """A single typed input field."""

    model_config = ConfigDict(frozen=True)

    section_type: Literal["field"] = "field"
    id: str
    label: str
    kind: FieldKind = FieldKind.NUMBER
    options: Tuple[FieldOption, ...] = ()
    default: Union[bool, int, float, str] = 0
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    placeholder: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def _check_declaration(self) -> "FieldSpec":
        if self.kind in (FieldKind.SELECT, FieldKind.RADIO):
            if not self.options:
                raise ValueError(f"{self.id}: {self.kind.value} field needs options")
            values = [opt.value for opt in self.options]
            if len(set(values)) != len(values):
                raise ValueError(f"{self.id}: option values must be unique")
            if len({isinstance(val, str) for val in values}) > 1:
                raise ValueError(f"{self.id}: option values must be all numbers or all text")
            if self.default not in values or isinstance(self.default, bool):
                raise ValueError(f"{self.id}: default {self.default!r} is not an option value")
        elif self.kind == FieldKind.NUMBER:
            if isinstance(self.default, (bool, str)):
                raise ValueError(f"{self.id}: number field needs a numeric default")
            if self.min is not None and self.max is not None and self.min > self.max:
                raise ValueError(f"{self.id}: min {self.min} exceeds max {self.max}")
            if self.min is not None and self.default < self.min:
                raise ValueError(f"{self.id}: default below min")
            if self.max is not None and self.default > self.max:
                raise ValueError(f"{self.id}: default above max")
        elif self.kind == FieldKind.CHECKBOX:
            if not isinstance(self.default, bool):
                raise ValueError(f"{self.id}: checkbox default must be a bool")
        elif self.kind == FieldKind.TEXT:
            if not isinstance(self.default, str):
                raise ValueError(f"{self.id}: text default must be a string")
        return self

    def option_values(self) -> List[OptionValue]:
        return [opt.value for opt in self.options]

    def numeric_options(self) -> bool:
        """True when every option carries a number (drives select coercion)."""
        return bool(self.options) and not any(isinstance(opt.value, str) for opt in self.options)


class FieldGroup(BaseModel):
    """Display-only grouping of fields."""

    model_config = ConfigDict(frozen=True)

    section_type: Literal["group"] = "group"
    id: str
    title: str
    fields: Tuple[FieldSpec, ...]
    grid_cols: Optional[int] = Field(default=None, ge=1, le=4)
    description: Optional[str] = None


Section = Annotated[Union[FieldSpec, FieldGroup], Field(discriminator="section_type")]


class Result(BaseModel):
    """Outcome of one instrument computation."""

    model_config = ConfigDict(frozen=True)

    score: Union[int, float, str]
    interpretation: str
    details: Dict[str, Any] = {}


class Instrument(BaseModel):
    """A declaratively defined scoring instrument."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    name: str
    acronym: Optional[str] = None
    description: str
    condition: str
    keywords: Tuple[str, ...] = ()
    source_type: SourceType
    sections: Tuple[Section, ...]
    compute: Callable[[Dict[str, Any]], Result] = Field(exclude=True, repr=False)
    references: Tuple[str, ...] = ()
    # (lowest, highest); highest is None for open-ended counts
    score_range: Optional[Tuple[float, Optional[float]]] = None
    display_type: DisplayType = DisplayType.FORM
    rationale: Optional[str] = None
    clinical_performance: Optional[str] = None

    @model_validator(mode="after")
    def _check_unique_field_ids(self) -> "Instrument":
        seen = set()
        for section in self.sections:
            fields = section.fields if isinstance(section, FieldGroup) else (section,)
            for f in fields:
                if f.id in seen:
                    raise ValueError(f"{self.id}: duplicate field id {f.id!r}")
                seen.add(f.id)
        return self

    @property
    def title(self) -> str:
        return f"{self.name} ({self.acronym})" if self.acronym and self.acronym not in self.name else self.name


class InstrumentInfo(BaseModel):
    """Schema summary returned by ``ToolHandler.instrument_info``."""

    id: str
    title: str
    condition: str
    description: str
    source_type: SourceType
    inputs: List[Dict[str, Any]]
    defaults: Dict[str, Any] = {}
    score_range: Optional[Tuple[float, Optional[float]]] = None
    references: List[str] = []


class ExecuteResult(BaseModel):
    """Outcome of ``ToolHandler.execute``: a result, or the reasons it was refused."""

    success: bool
    instrument_id: str
    result: Optional[Result] = None
    errors: List[str] = []
    warnings: List[str] = []
