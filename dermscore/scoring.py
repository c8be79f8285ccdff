"""
Shared helpers for instrument computations: lenient value coercion, rounding,
threshold banding and result construction.

Every computation reads user input through the ``parse_*`` helpers, so a missing
or malformed value degrades to a default instead of raising.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, TypeVar, Union

from .models import Result

Number = Union[int, float]

L = TypeVar("L")

# (operator, bound, label); operator is "<" or "<="
Band = Tuple[str, float, L]


# ── Value coercion ───────────────────────────────────────────────────────────

def parse_num(raw: Any, default: float = 0.0) -> float:
    """Parse a numeric value, falling back to ``default`` on anything unusable."""
    if isinstance(raw, dict):
        return parse_num(raw.get("value"), default)
    if raw is None:
        return default
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, str) and not raw.strip():
        return default
    try:
        val = float(raw)
    except (TypeError, ValueError):
        return default
    if math.isnan(val) or math.isinf(val):
        return default
    return val


def parse_bool(raw: Any) -> bool:
    if isinstance(raw, dict):
        return parse_bool(raw.get("value", False))
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        return raw.strip().lower() in ("true", "yes", "1", "on")
    if isinstance(raw, (int, float)):
        return bool(raw) and not math.isnan(raw)
    return False


def parse_str(raw: Any, default: str = "") -> str:
    if isinstance(raw, dict):
        return parse_str(raw.get("value"), default)
    return str(raw) if raw is not None else default


def clamp(val: float, lo: float, hi: float) -> float:
    return max(lo, min(val, hi))


def count_true(v: Dict[str, Any], keys: Iterable[str]) -> int:
    return sum(1 for k in keys if parse_bool(v.get(k)))


def sum_nums(v: Dict[str, Any], keys: Iterable[str]) -> float:
    return sum(parse_num(v.get(k)) for k in keys)


# ── Rounding and formatting ──────────────────────────────────────────────────

def round_to(value: float, ndigits: int = 1) -> float:
    """
    Round half away from zero on the exact binary value of ``value``.

    3.15 is stored as 3.149999... and so rounds to 3.1, as fixed-point
    formatting of the same float would.
    """
    quant = Decimal(1).scaleb(-ndigits)
    return float(Decimal(value).quantize(quant, rounding=ROUND_HALF_UP))


def tidy(value: Any) -> Any:
    """Collapse integral floats to int so 12.0 reports as 12."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: tidy(val) for k, val in value.items()}
    return value


def fmt(value: Number, ndigits: Optional[int] = None) -> str:
    if ndigits is not None:
        return f"{value:.{ndigits}f}"
    return str(tidy(round_to(value, 4) if isinstance(value, float) else value))


# ── Banding ──────────────────────────────────────────────────────────────────

def band(score: float, bands: Sequence[Band[L]], fallback: L) -> L:
    """Return the label of the first band whose bound the score does not exceed."""
    for op, bound, label in bands:
        if op == "<":
            if score < bound:
                return label
        elif op == "<=":
            if score <= bound:
                return label
        else:
            raise ValueError(f"Unknown band operator: {op}")
    return fallback


# ── Result construction ──────────────────────────────────────────────────────

def make_result(score: Any, interpretation: str, details: Optional[Dict[str, Any]] = None) -> Result:
    return Result(
        score=tidy(score),
        interpretation=interpretation,
        details=tidy(details or {}),
    )
