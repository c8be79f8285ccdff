"""Chronic wound instruments: BWAT and PUSH."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import Instrument, Result, SourceType
from ..schema import number_input, options, select_input
from ..scoring import band, make_result, parse_num, round_to

WOUND_CONDITIONS = "Chronic Wounds, Pressure Ulcers, Diabetic Foot Ulcers, Venous Leg Ulcers, Surgical Wounds"


def _graded(*labels: str):
    return options((i, f"{i} ({label})") for i, label in enumerate(labels, start=1))


# 1. BWAT ──────────────────────────────────────────────────────────────────────
# field id, label, description, option labels 1..5
BWAT_ITEMS = [
    ("bwat_size", "Size of Wound", "Score based on wound area (length x width in cm²).",
     _graded("< 0.5 cm²", "0.5–3.0 cm²", "3.1–10.0 cm²", "10.1–24.0 cm²", ">24.0 cm²")),
    ("bwat_depth", "Depth (Thickness) of Wound", "How deep the wound extends.",
     _graded("Superficial", "Partial thickness", "Full thickness, no bone/tendon",
             "Full thickness with bone/tendon", "Extensive, undermining")),
    ("bwat_edges", "Wound Edges", "Condition of the wound edges.",
     _graded("Attached, normal", "Attached, thickened", "Attached, rolled under", "Unattached, undermined",
             "Hyperkeratotic, fibrotic")),
    ("bwat_undermining", "Undermining", "Undermining around the wound.",
     _graded("None", "0–0.5 cm", "0.6–1.0 cm", "1.1–1.5 cm", ">1.5 cm")),
    ("bwat_necrotic_type", "Necrotic Tissue Type", "Predominant necrotic tissue type.",
     _graded("None", "Slough", "Necrotic - yellow", "Necrotic - black", "Eschar - thick black")),
    ("bwat_necrotic_amount", "Necrotic Tissue Amount", "Amount of necrotic tissue in wound bed.",
     _graded("None", "1–25%", "26–50%", "51–75%", "76–100%")),
    ("bwat_exudate_type", "Exudate Type", "Consistency of wound exudate.",
     _graded("None", "Serous", "Serosanguinous", "Sanguineous", "Purulent")),
    ("bwat_exudate_amount", "Exudate Amount", "Volume of wound exudate.",
     _graded("None", "Scant <25% wet", "Moderate 25–75% wet", "Large >75% wet", "Copious/dripping")),
    ("bwat_surrounding_color", "Skin Color Surrounding Wound", "Periwound skin color (within 4 cm of edge).",
     _graded("Normal", "Erythema, no warmth", "Erythema + warmth", "Ecchymosis/Bruising", "Necrosis")),
    ("bwat_peripheral_edema", "Peripheral (Periwound) Edema", "Edema next to the wound.",
     _graded("None", "0.5 cm", "1.0 cm", "1.5 cm", ">1.5 cm, pitting/boggy")),
    ("bwat_peripheral_indur", "Peripheral (Periwound) Induration", "Firmness of periwound tissue.",
     _graded("None", "0.5 cm", "1.0 cm", "1.5 cm", ">1.5 cm, hard/woody")),
    ("bwat_granulation", "Granulation Tissue", "Percentage of wound bed with healthy granulation.",
     _graded("100% healthy granulation", "75–99%", "50–74%", "25–49%", "0–24% or none")),
    ("bwat_epithelialization", "Epithelialization", "Percentage of wound surface covered with new epithelium.",
     _graded("100% epithelialized", "75–99%", "50–74%", "25–49%", "0–24%")),
]

BWAT_BANDS = [
    ("<=", 20, "Minimal Severity (Wound approaching healed state)"),
    ("<=", 30, "Mild Severity (Slowly healing or stable)"),
    ("<=", 40, "Moderate Severity (Delayed healing, potential complications)"),
]


def run_bwat(v: Dict[str, Any]) -> Result:
    # Items are rated 1..5; an unrated item counts as the healthiest grade.
    item_scores = {field_id[len("bwat_"):]: parse_num(v.get(field_id), 1) or 1 for field_id, *_ in BWAT_ITEMS}
    total = sum(item_scores.values())
    category = band(total, BWAT_BANDS, "Extreme Severity (Non-healing, high risk of deterioration)")
    interpretation = (
        f"Total BWAT Score: {int(total)} (Range: 13–65). Wound Status: {category}. A lower score indicates a "
        "healthier wound."
    )
    return make_result(total, interpretation, {
        "Individual_Item_Scores": item_scores,
        "Overall_Severity_Category": category,
    })


BWAT = Instrument(
    id="bwat",
    name="Bates-Jensen Wound Assessment Tool",
    acronym="BWAT",
    description=(
        "A standardized instrument to assess and monitor the status and healing progression of chronic wounds, "
        "quantifying 13 key wound characteristics."
    ),
    condition=WOUND_CONDITIONS,
    keywords=("bwat", "Bates-Jensen", "wound assessment", "pressure ulcer", "chronic wound", "wound healing",
              "score", "monitoring"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(field_id, label, opts, default=1, description=description)
        for field_id, label, description, opts in BWAT_ITEMS
    ],
    compute=run_bwat,
    score_range=(13, 65),
    references=(
        "Sussman C, Bates-Jensen BM. Wound Care: A Collaborative Practice Manual for Health Professionals. 4th ed. "
        "Wolters Kluwer Health; 2007. Chapter 6: Tools to Measure Wound Healing.",
        "Harris C, Bates-Jensen B, Parslow N, Raizman R, Singh M, Ketchen R. Concurrent Validation and "
        "Reliability of Digital Image Analysis of the Bates-Jensen Wound Assessment Tool in Pressure Ulcer "
        "Measurement. Wound Repair Regen. 2011;19(3):302–309.",
        "Dalamagka MI, et al. Role of Bates-Jensen Wound Assessment Tool (BJWAT) in Wound Management: A Tertiary "
        "Care Centre Study. Clin Res Trials. 2023;11(1):235–243.",
    ),
)


# 2. PUSH ──────────────────────────────────────────────────────────────────────
# Upper area bound (cm²) for sub-scores 1..9; larger wounds score 10.
PUSH_AREA_BOUNDS = [0.3, 0.6, 1.0, 2.0, 3.0, 4.0, 8.0, 12.0, 24.0]

PUSH_BANDS = [
    ("<=", 0, "Closed/Healed"),
    ("<=", 5, "Minimal impairment (healing well)"),
    ("<=", 10, "Moderate impairment (slow/delayed healing)"),
]


def push_area_subscore(area_cm2: float) -> int:
    if area_cm2 <= 0:
        return 0
    for sub_score, bound in enumerate(PUSH_AREA_BOUNDS, start=1):
        if area_cm2 <= bound:
            return sub_score
    return 10


def run_push(v: Dict[str, Any]) -> Result:
    area = round_to(parse_num(v.get("push_length_cm")) * parse_num(v.get("push_width_cm")), 2)
    area_score = push_area_subscore(area)
    exudate = parse_num(v.get("push_exudate_amount"))
    tissue = parse_num(v.get("push_tissue_type"))
    total = area_score + exudate + tissue

    status = band(total, PUSH_BANDS, "Severe impairment (non-healing or worsening)")
    interpretation = (
        f"Total PUSH Score: {int(total)} (Range: 0–17). Healing Status: {status}.\n"
        "A decreasing score over time indicates improvement.\n"
        f"Area: {area:.2f} cm² (Sub-score: {area_score}). Exudate: {int(exudate)}. Tissue Type: {int(tissue)}."
    )
    return make_result(total, interpretation, {
        "area_cm2": f"{area:.2f}",
        "area_sub_score": area_score,
        "exudate_amount_sub_score": exudate,
        "tissue_type_sub_score": tissue,
        "total_push_score": total,
        "healing_status_category": status,
    })


PUSH = Instrument(
    id="push",
    name="Pressure Ulcer Scale for Healing",
    acronym="PUSH",
    description=(
        "The PUSH Tool from the National Pressure Injury Advisory Panel monitors pressure ulcer status over time "
        "by scoring surface area, exudate amount and tissue type."
    ),
    condition="Pressure Ulcer, Chronic Wound, Diabetic Foot Ulcer, Venous Leg Ulcer, Surgical Wound",
    keywords=("push", "pressure ulcer", "wound healing", "monitoring", "score", "exudate", "tissue type",
              "surface area"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        number_input("push_length_cm", "Greatest Wound Length (cm) – measure head to toe", max=100, step=0.1,
                     description="Measure the greatest head-to-toe length of the wound in centimeters."),
        number_input("push_width_cm", "Greatest Wound Width (cm) – measure side to side", max=100, step=0.1,
                     description="Measure the greatest side-to-side width of the wound in centimeters."),
        select_input(
            "push_exudate_amount", "Exudate Amount",
            options([(0, "0 - None"), (1, "1 - Light"), (2, "2 - Moderate"), (3, "3 - Heavy")]),
            description="Select the category that best describes the amount of wound exudate.",
        ),
        select_input(
            "push_tissue_type", "Tissue Type",
            options([
                (0, "0 - Closed (Resurfaced/Epithelialized)"),
                (1, "1 - Epithelial Tissue"),
                (2, "2 - Granulation Tissue"),
                (3, "3 - Slough"),
                (4, "4 - Necrotic Tissue"),
            ]),
            description="Select the category that best describes the predominant tissue type in the wound bed.",
        ),
    ],
    compute=run_push,
    score_range=(0, 17),
    references=(
        "National Pressure Injury Advisory Panel. Pressure Ulcer Scale for Healing (PUSH) Tool Version 3.0. "
        "Published 9/15/98.",
        "Stotts NA, Rodeheaver GT, Edsberg LE, Moore T. A prospective study of the Pressure Ulcer Scale for "
        "Healing (PUSH). Adv Wound Care. 2005;18(5):367–373.",
        "Choi EPH, Chin WY, Wan EYF, Lam CLK. Evaluation of the internal and external responsiveness of the "
        "Pressure Ulcer Scale for Healing (PUSH) tool for assessing acute and chronic wounds. J Adv Nurs. "
        "2016;72(3):234–243.",
    ),
)


INSTRUMENTS: List[Instrument] = [BWAT, PUSH]
