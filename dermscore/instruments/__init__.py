"""All instrument definitions, grouped by clinical area."""

from __future__ import annotations

from typing import List

from ..models import Instrument
from . import (
    acne_rosacea,
    autoimmune,
    bullous,
    eczema,
    hidradenitis,
    oncology,
    pigmentation_hair,
    pruritus_urticaria,
    psoriasis,
    pyoderma,
    quality_of_life,
    wounds,
)

ALL_INSTRUMENTS: List[Instrument] = [
    *quality_of_life.INSTRUMENTS,
    *eczema.INSTRUMENTS,
    *psoriasis.INSTRUMENTS,
    *hidradenitis.INSTRUMENTS,
    *acne_rosacea.INSTRUMENTS,
    *autoimmune.INSTRUMENTS,
    *pigmentation_hair.INSTRUMENTS,
    *pruritus_urticaria.INSTRUMENTS,
    *bullous.INSTRUMENTS,
    *pyoderma.INSTRUMENTS,
    *oncology.INSTRUMENTS,
    *wounds.INSTRUMENTS,
]
