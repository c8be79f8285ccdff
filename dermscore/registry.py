"""
Instrument registry.

Built once at import time from the fixed instrument list and read-only
afterwards. ``by_id`` reports an unknown id as ``None``; ``get`` raises
``InstrumentNotFound`` for callers that prefer an exception.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .instruments import ALL_INSTRUMENTS
from .models import Instrument

logger = logging.getLogger(__name__)


class InstrumentNotFound(ValueError):
    """Raised when an instrument id is not registered."""

    def __init__(self, instrument_id: str):
        super().__init__(f"Instrument '{instrument_id}' not found")
        self.instrument_id = instrument_id


class Registry:
    """Immutable collection of instruments sorted by name and indexed by id."""

    def __init__(self, instruments: Iterable[Instrument]):
        by_id: Dict[str, Instrument] = {}
        for inst in instruments:
            if inst.id in by_id:
                raise ValueError(f"Duplicate instrument id: {inst.id}")
            by_id[inst.id] = inst
        self._by_id = by_id
        self._sorted: Tuple[Instrument, ...] = tuple(
            sorted(by_id.values(), key=lambda inst: (inst.name.lower(), inst.id))
        )

    def __len__(self) -> int:
        return len(self._sorted)

    def __contains__(self, instrument_id: object) -> bool:
        return instrument_id in self._by_id

    def __iter__(self):
        return iter(self._sorted)

    def all(self) -> List[Instrument]:
        return list(self._sorted)

    def by_id(self, instrument_id: str) -> Optional[Instrument]:
        return self._by_id.get(instrument_id)

    def get(self, instrument_id: str) -> Instrument:
        inst = self._by_id.get(instrument_id)
        if inst is None:
            raise InstrumentNotFound(instrument_id)
        return inst

    def resolve_id(self, instrument_id: str) -> Optional[str]:
        """Map an id typed with the wrong case or stray whitespace onto a registered id."""
        candidate = instrument_id.strip()
        if candidate in self._by_id:
            return candidate
        lowered = candidate.lower()
        for known in self._by_id:
            if known.lower() == lowered:
                return known
        return None

    def conditions(self) -> List[str]:
        return sorted({inst.condition for inst in self._sorted}, key=str.lower)

    def search(self, query: str = "", condition: Optional[str] = None) -> List[Instrument]:
        """
        Filter instruments by free text and/or condition.

        The query matches case-insensitively against id, name, acronym,
        condition, description and keywords. The condition filter is a
        case-insensitive substring match on the condition text.
        """
        needle = query.strip().lower()
        cond = condition.strip().lower() if condition else None
        hits = []
        for inst in self._sorted:
            if cond and cond not in inst.condition.lower():
                continue
            if needle:
                haystack = [inst.id, inst.name, inst.acronym or "", inst.condition, inst.description,
                            *inst.keywords]
                if not any(needle in text.lower() for text in haystack):
                    continue
            hits.append(inst)
        return hits


REGISTRY = Registry(ALL_INSTRUMENTS)
logger.debug(f"Registered {len(REGISTRY)} instruments")


def all_instruments() -> List[Instrument]:
    return REGISTRY.all()


def by_id(instrument_id: str) -> Optional[Instrument]:
    return REGISTRY.by_id(instrument_id)


def get_instrument(instrument_id: str) -> Instrument:
    return REGISTRY.get(instrument_id)
