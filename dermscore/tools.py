"""Tool definitions and handlers for driving the registry programmatically."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .models import ExecuteResult, Instrument, InstrumentInfo
from .registry import REGISTRY, InstrumentNotFound, Registry
from .schema import default_values, flatten_fields, with_defaults
from .validation import validate_values

logger = logging.getLogger(__name__)

# Function-calling style definitions for the three operations below
TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": "list_instruments",
            "description": "List dermatology scoring instruments, optionally filtered by text or condition.",
            "parameters": {
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "Free-text filter (e.g., psoriasis, itch, easi)"},
                    "condition": {"type": "string", "description": "Condition filter (e.g., Atopic Dermatitis)"},
                },
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "instrument_info",
            "description": (
                "Get the input schema for an instrument. "
                "Returns field ids, kinds, options, bounds and defaults needed for execute."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "instrument_id": {"type": "string", "description": "Instrument ID (e.g., easi, pasi, dlqi)"},
                },
                "required": ["instrument_id"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "execute",
            "description": (
                "Score an instrument from field values. "
                "Returns the score and interpretation, or validation errors."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "instrument_id": {"type": "string", "description": "Instrument ID"},
                    "values": {
                        "type": "object",
                        "description": (
                            "Field values keyed by field id. Numbers for number fields, an option value for "
                            "selects, true/false for checkboxes. Omitted fields take their defaults."
                        ),
                    },
                },
                "required": ["instrument_id", "values"],
            },
        },
    },
]


def describe_field(field) -> Dict[str, Any]:
    entry: Dict[str, Any] = {"id": field.id, "label": field.label, "type": field.kind.value, "default": field.default}
    if field.options:
        entry["options"] = [{"value": opt.value, "label": opt.label} for opt in field.options]
    constraints = {k: getattr(field, k) for k in ("min", "max", "step") if getattr(field, k) is not None}
    if constraints:
        entry["constraints"] = constraints
    if field.description:
        entry["description"] = field.description
    return entry


class ToolHandler:
    """
    Handles list/info/execute calls against a registry.

    ``execute`` validates supplied values before computing. Unknown ids and
    rejected fields come back as an unsuccessful ExecuteResult rather than
    an exception.
    """

    def __init__(self, registry: Optional[Registry] = None):
        self._registry = registry if registry is not None else REGISTRY
        self._info_cache: Dict[str, InstrumentInfo] = {}

    def _resolve(self, instrument_id: str) -> Instrument:
        resolved = self._registry.resolve_id(instrument_id)
        if resolved is None:
            raise InstrumentNotFound(instrument_id)
        return self._registry.get(resolved)

    def list_instruments(self, query: str = "", condition: Optional[str] = None) -> List[Dict[str, str]]:
        return [
            {
                "id": inst.id,
                "title": inst.title,
                "condition": inst.condition,
                "description": inst.description,
            }
            for inst in self._registry.search(query, condition)
        ]

    def instrument_info(self, instrument_id: str) -> InstrumentInfo:
        """
        Get an instrument's input schema.

        Raises InstrumentNotFound for an unknown id.
        """
        inst = self._resolve(instrument_id)
        cached = self._info_cache.get(inst.id)
        if cached is not None:
            return cached

        info = InstrumentInfo(
            id=inst.id,
            title=inst.title,
            condition=inst.condition,
            description=inst.description,
            source_type=inst.source_type,
            inputs=[describe_field(f) for f in flatten_fields(inst.sections)],
            defaults=default_values(inst.sections),
            score_range=inst.score_range,
            references=list(inst.references),
        )
        self._info_cache[inst.id] = info
        return info

    def execute(self, instrument_id: str, values: Optional[Dict[str, Any]] = None) -> ExecuteResult:
        """
        Validate ``values`` and compute the instrument.

        Keys that name no field are ignored with a warning; omitted fields
        take their declared defaults.
        """
        values = values or {}
        try:
            inst = self._resolve(instrument_id)
        except InstrumentNotFound as e:
            return ExecuteResult(success=False, instrument_id=instrument_id, errors=[str(e)])

        declared = {f.id for f in flatten_fields(inst.sections)}
        warnings = [f"Unknown field ignored: {key}" for key in values if key not in declared]

        errors = validate_values(inst.sections, values)
        if errors:
            return ExecuteResult(
                success=False,
                instrument_id=inst.id,
                errors=[err.message for err in errors.values()],
                warnings=warnings,
            )

        result = inst.compute(with_defaults(inst.sections, values))
        logger.debug(f"{inst.id}: score={result.score!r}")
        return ExecuteResult(success=True, instrument_id=inst.id, result=result, warnings=warnings)

    def execute_tool(self, tool_name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Dispatch a tool call by name and return a plain dict."""
        if tool_name == "list_instruments":
            return {"instruments": self.list_instruments(arguments.get("query", ""), arguments.get("condition"))}

        if tool_name == "instrument_info":
            instrument_id = arguments.get("instrument_id")
            if not instrument_id:
                return {"error": "Missing required parameter: instrument_id"}
            try:
                return self.instrument_info(instrument_id).model_dump(mode="json")
            except InstrumentNotFound as e:
                return {"error": str(e)}

        if tool_name == "execute":
            instrument_id = arguments.get("instrument_id")
            if not instrument_id:
                return {"error": "Missing required parameter: instrument_id"}
            return self.execute(instrument_id, arguments.get("values") or {}).model_dump(mode="json")

        return {"error": f"Unknown tool: {tool_name}"}


def format_instrument_info(info: InstrumentInfo) -> str:
    """Render an instrument's schema as plain text, one line per field."""
    lines = [f"Instrument: {info.title} ({info.id})", f"Condition: {info.condition}", "", "Inputs:"]
    for inp in info.inputs:
        line = f"  - {inp['id']}: {inp['label']} [{inp['type']}] default={inp['default']!r}"
        constraints = inp.get("constraints", {})
        if "min" in constraints:
            line += f" min={constraints['min']:g}"
        if "max" in constraints:
            line += f" max={constraints['max']:g}"
        lines.append(line)
        for opt in inp.get("options", []):
            lines.append(f"      {opt['value']!r}: {opt['label']}")
    if info.score_range:
        lo, hi = info.score_range
        lines.append("")
        lines.append(f"Score range: {lo:g} to {'open' if hi is None else format(hi, 'g')}")
    return "\n".join(lines)

