"""Skin cancer screening and oncology instruments: ABCDE, 7-point checklist, CTCAE skin, mSWAT and SCORTEN."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import Instrument, Result, SourceType
from ..schema import checkbox_input, group, number_input, options, select_input
from ..scoring import fmt, make_result, parse_bool, parse_num, parse_str, round_to

MELANOMA_SCREENING = "Melanoma Screening"


# 1. ABCDE ─────────────────────────────────────────────────────────────────────
# field id, feature name, label
ABCDE_FEATURES = [
    ("A_asymmetry", "Asymmetry", "A - Asymmetry (one half of the mole doesn't match the other)"),
    ("B_border", "Border irregularity", "B - Border irregularity (edges are ragged, notched, or blurred)"),
    ("C_color", "Color variegation",
     "C - Color variegation (color is not uniform, with shades of tan, brown, black, or sometimes white, red, "
     "or blue)"),
    ("D_diameter", "Diameter >6mm", "D - Diameter greater than 6mm (about the size of a pencil eraser)"),
    ("E_evolving", "Evolving",
     "E - Evolving (mole changes in size, shape, color, elevation, or another trait, or any new symptom such as "
     "bleeding, itching or crusting)"),
]


def run_abcde_melanoma(v: Dict[str, Any]) -> Result:
    present = [name for field_id, name, _ in ABCDE_FEATURES if parse_bool(v.get(field_id))]
    score = len(present)
    if score:
        interpretation = (
            f"Warning: {', '.join(present)} present. {score} feature(s) noted. Lesion requires further evaluation "
            "by a healthcare professional."
        )
    else:
        interpretation = "No ABCDE signs noted. Continue regular skin checks."
    return make_result(score, interpretation, {"positive_features": ", ".join(present) or "None"})


ABCDE_MELANOMA = Instrument(
    id="abcde_melanoma",
    name="ABCDE Rule for Melanoma",
    acronym="ABCDE",
    description="A mnemonic for common signs of melanoma. If any are present, further evaluation is recommended.",
    condition=MELANOMA_SCREENING,
    keywords=("abcde", "melanoma", "skin cancer", "screening", "mole"),
    source_type=SourceType.RESEARCH,
    sections=[checkbox_input(field_id, label) for field_id, _, label in ABCDE_FEATURES],
    compute=run_abcde_melanoma,
    score_range=(0, 5),
    references=("Rigel DS, et al. J Am Acad Dermatol. 1985. American Academy of Dermatology recommendations.",),
)


# 2. 7-point checklist ─────────────────────────────────────────────────────────
SEVEN_POINT_MAJOR = [
    ("major_change_size", "Change in Size"),
    ("major_irregular_shape", "Irregular Shape"),
    ("major_irregular_color", "Irregular Color"),
]
SEVEN_POINT_MINOR = [
    ("minor_diameter_ge7mm", "Diameter >= 7mm"),
    ("minor_inflammation", "Inflammation"),
    ("minor_oozing_crusting", "Oozing or Crusting"),
    ("minor_change_sensation", "Change in Sensation (e.g., itch, pain)"),
]

SEVEN_POINT_REFERRAL = 3


def run_seven_point_checklist(v: Dict[str, Any]) -> Result:
    version = parse_str(v.get("version"), "weighted").strip().lower()
    if version not in ("original", "weighted"):
        version = "weighted"
    major_points = 2 if version == "weighted" else 1

    score = 0
    present: List[str] = []
    for field_id, label in SEVEN_POINT_MAJOR:
        if parse_bool(v.get(field_id)):
            present.append(f"{label} (Major)")
            score += major_points
    for field_id, label in SEVEN_POINT_MINOR:
        if parse_bool(v.get(field_id)):
            present.append(f"{label} (Minor)")
            score += 1

    interpretation = f"7-Point Checklist Score ({version}): {score}. "
    if score >= SEVEN_POINT_REFERRAL:
        interpretation += "Urgent referral is recommended (Score >= 3)."
    else:
        interpretation += ("Score < 3, does not meet criteria for urgent referral based on this checklist alone. "
                           "Clinical correlation advised.")
    return make_result(score, interpretation, {"Version": version, "Present_Features": ", ".join(present) or "None"})


SEVEN_POINT_CHECKLIST = Instrument(
    id="seven_point_checklist",
    name="7-Point Checklist for Melanoma",
    acronym="7-Point Checklist",
    description=(
        "A clinical rule to help identify suspicious pigmented lesions that may require urgent referral. Uses "
        "major and minor criteria."
    ),
    condition=MELANOMA_SCREENING,
    keywords=("melanoma", "skin cancer", "screening", "checklist", "nevus", "mole"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(
            "version", "Checklist Version",
            options([
                ("original", "Original (All criteria = 1 point)"),
                ("weighted", "Weighted (Major criteria = 2 points, Minor = 1 point)"),
            ]),
            default="weighted",
        ),
        group("major_criteria_group", "Major Criteria",
              [checkbox_input(field_id, label) for field_id, label in SEVEN_POINT_MAJOR], grid_cols=1),
        group("minor_criteria_group", "Minor Criteria",
              [checkbox_input(field_id, label) for field_id, label in SEVEN_POINT_MINOR], grid_cols=1),
    ],
    compute=run_seven_point_checklist,
    score_range=(0, 10),
    references=(
        "MacKie RM. An aid to pre-operative assessment of pigmented lesions of the skin. Br J Dermatol. 1983.",
        "Walter FM, et al. The 7-point checklist for melanoma: a prospective validation study in primary care. "
        "Br J Gen Pract. 2013.",
        "NICE guideline [NG12] Melanoma: assessment and management.",
    ),
)


# 3. CTCAE skin toxicities ─────────────────────────────────────────────────────
CTCAE_CRITERIA: Dict[str, Dict[int, str]] = {
    "Rash maculopapular": {
        1: "Macules/papules covering <10% BSA with or without symptoms (e.g., pruritus, burning, tightness).",
        2: "Macules/papules covering 10-30% BSA with or without symptoms; limiting instrumental ADL.",
        3: "Macules/papules covering >30% BSA with or without symptoms; limiting self care ADL; hospitalization "
           "indicated.",
        4: "Life-threatening consequences (e.g., SJS/TEN, exfoliative dermatitis).",
        5: "Death.",
    },
    "Pruritus": {
        1: "Mild; topical intervention indicated.",
        2: "Moderate; oral intervention or medical intervention indicated; limiting instrumental ADL.",
        3: "Severe; interfering with self care ADL or sleep; hospitalization indicated.",
    },
    "Hand-foot skin reaction": {
        1: "Minimal skin changes or dermatitis (e.g., erythema, edema, hyperkeratosis) without pain.",
        2: "Skin changes (e.g., peeling, blisters, bleeding, edema, hyperkeratosis) with pain; limiting "
           "instrumental ADL.",
        3: "Severe skin changes (e.g., peeling, blisters, bleeding, edema, hyperkeratosis) with pain; limiting "
           "self care ADL.",
    },
    "Alopecia": {
        1: "Hair loss of <50% of normal for that individual that is not obvious from a distance; a different "
           "hairstyle may be required to cover the hair loss but it does not require a wig or hairpiece to "
           "camouflage.",
        2: "Hair loss of >=50% of normal for that individual that is obvious from a distance; a wig or hairpiece "
           "is required to camouflage the hair loss if the patient desires; limiting instrumental ADL.",
    },
    "Radiation dermatitis": {
        1: "Faint erythema or dry desquamation.",
        2: "Moderate to brisk erythema; patchy moist desquamation, mostly confined to skin folds and creases; "
           "moderate edema.",
        3: "Moist desquamation other than skin folds and creases; bleeding induced by minor trauma or abrasion.",
        4: "Skin necrosis or ulceration of full thickness dermis; spontaneous bleeding from involved site.",
        5: "Death.",
    },
    "Photosensitivity": {
        1: "Skin reaction resembling mild sunburn; minimal symptoms.",
        2: "Painful skin reaction resembling moderate to severe sunburn; skin changes (e.g., edema); limiting "
           "instrumental ADL.",
        3: "Severe painful skin reaction with bullae; limiting self care ADL.",
    },
    "Skin hyperpigmentation": {
        1: "Hyperpigmentation covering <10% BSA.",
        2: "Hyperpigmentation covering 10 - 30% BSA.",
        3: "Hyperpigmentation covering >30% BSA.",
    },
    "Skin hypopigmentation": {
        1: "Hypopigmentation covering <10% BSA.",
        2: "Hypopigmentation covering 10 - 30% BSA.",
        3: "Hypopigmentation covering >30% BSA.",
    },
    "Nail changes": {
        1: "Nail changes (e.g., discoloration, ridging, pitting, Beau's lines) not interfering with function.",
        2: "Nail changes (e.g., discoloration, ridging, pitting, Beau's lines, onycholysis, pain) interfering "
           "with instrumental ADL.",
        3: "Nail changes (e.g., nail loss, onycholysis, pain) interfering with self care ADL.",
    },
    "Mucositis oral": {
        1: "Asymptomatic or mild symptoms; intervention not indicated.",
        2: "Moderate pain or ulceration; not interfering with oral intake; modified diet indicated.",
        3: "Severe pain; interfering with oral intake.",
        4: "Life-threatening consequences (e.g., airway obstruction); urgent intervention indicated.",
        5: "Death.",
    },
}

CTCAE_OTHER = "Other"

# Events whose top grades are not meaningful on their own.
_CTCAE_NO_GENERIC_TOP_GRADES = {"Pruritus", "Hand-foot skin reaction", "Alopecia"}

_CTCAE_GRADES = options([
    (1, "Grade 1 - Mild"), (2, "Grade 2 - Moderate"), (3, "Grade 3 - Severe"),
    (4, "Grade 4 - Life-threatening"), (5, "Grade 5 - Death"),
])


def ctcae_criteria(adverse_event: str, grade: int, grade_label: str) -> str:
    """Criteria summary for one adverse event at one grade, with generic wording where none is recorded."""
    known = CTCAE_CRITERIA.get(adverse_event)
    if known and grade in known:
        return known[grade]
    if known and grade in (4, 5):
        if adverse_event not in _CTCAE_NO_GENERIC_TOP_GRADES:
            return "Life-threatening consequences; urgent intervention indicated." if grade == 4 else "Death related to AE."
        return f"{grade_label} for {adverse_event}. Refer to full CTCAE manual for specific criteria."
    if adverse_event == CTCAE_OTHER:
        return f'{grade_label} for "Other" AE. Document specific criteria manually.'
    return (
        f"Criteria for {adverse_event} {grade_label} not pre-defined in this tool's snippets. {grade_label}. "
        "Refer to full CTCAE manual."
    )


def run_ctcae_skin(v: Dict[str, Any]) -> Result:
    adverse_event = parse_str(v.get("ae_term_select"), CTCAE_OTHER) or CTCAE_OTHER
    grade = int(parse_num(v.get("ctcae_grade"), 1))
    grade_label = next((opt.label for opt in _CTCAE_GRADES if opt.value == grade), f"Grade {grade}")
    criteria = ctcae_criteria(adverse_event, grade, grade_label)
    interpretation = "\n".join([
        f"Adverse Event: {adverse_event}",
        f"CTCAE Grade: {grade_label}",
        f"Criteria Summary: {criteria}",
        "(Refer to full CTCAE documentation for complete definitions and all terms.)",
    ])
    return make_result(grade, interpretation, {
        "Adverse_Event_Term": adverse_event,
        "Selected_Grade_Label": grade_label,
        "Criteria_Summary": criteria,
    })


CTCAE_SKIN = Instrument(
    id="ctcae_skin",
    name="CTCAE - Skin Toxicities",
    acronym="CTCAE Skin",
    description=(
        "The National Cancer Institute's Common Terminology Criteria for Adverse Events grade dermatologic "
        "toxicities of cancer therapy on a 5-point scale (1 mild, 2 moderate, 3 severe, 4 life-threatening, "
        "5 death). Grading is categorical: each event has its own criteria per grade based on extent, symptoms "
        "and impact on function."
    ),
    condition="Adverse Drug Reactions",
    keywords=("ctcae", "skin toxicity", "adverse event", "drug reaction", "grading", "chemotherapy", "oncology",
              "NCI"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(
            "ae_term_select", "Select Cutaneous Adverse Event",
            options([(ae, ae) for ae in CTCAE_CRITERIA] + [(CTCAE_OTHER, "Other (Specify in notes/report)")]),
        ),
        select_input(
            "ctcae_grade", "CTCAE Grade (1-5)", _CTCAE_GRADES,
            description="Select grade. Specific criteria summary for the chosen AE will be shown in results.",
        ),
    ],
    compute=run_ctcae_skin,
    score_range=(1, 5),
    references=(
        "Chen AP, Setser A, Anadkat MJ, et al. Grading Dermatologic Adverse Events of Cancer Treatments: The "
        "Common Terminology Criteria for Adverse Events Version 4.0. J Am Acad Dermatol. 2012;67(5):1025-39.",
        "National Cancer Institute (NCI). Common Terminology Criteria for Adverse Events (CTCAE).",
    ),
)


# 4. mSWAT ─────────────────────────────────────────────────────────────────────
# field id, details stem, lesion label, weight
MSWAT_LESIONS = [
    ("bsa_patches", "Patch", "Patches", 1),
    ("bsa_plaques", "Plaque", "Plaques", 2),
    ("bsa_tumors_ulcers", "Tumor_Ulcer", "Tumors/Ulcers", 4),
]


def run_mswat(v: Dict[str, Any]) -> Result:
    bsa = {field_id: parse_num(v.get(field_id)) for field_id, _, _, _ in MSWAT_LESIONS}
    weighted = {field_id: bsa[field_id] * weight for field_id, _, _, weight in MSWAT_LESIONS}
    total = sum(weighted.values())
    total_bsa = sum(bsa.values())

    parts = ", ".join(
        f"{label} ({fmt(bsa[field_id])}% BSA x{weight} = {fmt(weighted[field_id], 1)})"
        for field_id, _, label, weight in MSWAT_LESIONS
    )
    interpretation = (
        f"mSWAT Score: {fmt(total, 1)} (Range: 0-400 theoretically, based on 100% BSA for each category). "
        f"Calculated from: {parts}. Total BSA involved by lesions: {fmt(total_bsa, 1)}%. Higher score indicates "
        "greater skin tumor burden."
    )
    if total_bsa > 100:
        interpretation += (" Note: Sum of BSA percentages exceeds 100%. Please verify inputs if this is not "
                           "intended due to overlapping assessments.")

    details: Dict[str, Any] = {}
    for field_id, _, label, _ in MSWAT_LESIONS:
        details[f"BSA_{label.replace('/', '_')}_Percent"] = bsa[field_id]
    for field_id, stem, _, _ in MSWAT_LESIONS:
        details[f"Weighted_{stem}_Score"] = weighted[field_id]
    details["Total_BSA_Involved_Percent"] = total_bsa
    return make_result(round_to(total, 1), interpretation, details)


MSWAT = Instrument(
    id="mswat",
    name="Modified Severity-Weighted Assessment Tool (mSWAT)",
    acronym="mSWAT",
    description=(
        "Assesses skin severity in Mycosis Fungoides and Sézary Syndrome from the percentage of BSA involved by "
        "patches (x1), plaques (x2) and tumors/ulcers (x4). The BSA percentages should not sum past 100%."
    ),
    condition="Cutaneous T-Cell Lymphoma (CTCL)",
    keywords=("mswat", "ctcl", "mycosis fungoides", "sezary syndrome", "skin severity"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        number_input(field_id, f"BSA % Covered by {label} (Weight x{weight})", max=100)
        for field_id, _, label, weight in MSWAT_LESIONS
    ],
    compute=run_mswat,
    # Each BSA field is bounded on its own, so 100% in every category reaches 700.
    score_range=(0, 700),
    references=(
        "Olsen E, Whittaker S, Kim YH, et al. Clinical end points and response criteria in mycosis fungoides and "
        "Sézary syndrome: a consensus statement of the International Society for Cutaneous Lymphomas, the United "
        "States Cutaneous Lymphoma Consortium, and the Cutaneous Lymphoma Task Force of the European "
        "Organisation for Research and Treatment of Cancer. J Clin Oncol. 2011.",
    ),
)


# 5. SCORTEN ───────────────────────────────────────────────────────────────────
SCORTEN_FACTORS = [
    ("age_ge40", "Age ≥ 40 years"),
    ("malignancy_present", "Associated malignancy (cancer)"),
    ("heart_rate_ge120", "Heart rate ≥ 120 beats/minute"),
    ("bsa_gt10", "Initial percentage of body surface area (BSA) detachment > 10%"),
    ("serum_urea_gt10", "Serum urea level > 10 mmol/L (or > 28 mg/dL)"),
    ("serum_bicarbonate_lt20", "Serum bicarbonate level < 20 mmol/L (or < 20 mEq/L)"),
    ("serum_glucose_gt14", "Serum glucose level > 14 mmol/L (or > 252 mg/dL)"),
]

# Predicted mortality by score; 5 and above share the top bracket.
SCORTEN_MORTALITY = {0: "3.2%", 1: "12.1%", 2: "35.3%", 3: "58.3%", 4: "58.3%+"}


def run_scorten(v: Dict[str, Any]) -> Result:
    score = 0
    details: Dict[str, str] = {}
    for field_id, label in SCORTEN_FACTORS:
        if parse_bool(v.get(field_id)):
            score += 1
            details[label] = "Present (1 pt)"
        else:
            details[label] = "Absent (0 pts)"
    mortality = SCORTEN_MORTALITY.get(score, ">90%")
    interpretation = (
        f"SCORTEN: {score} (Range: 0-7). Predicted mortality risk (approximate): {mortality}. This score helps "
        "estimate prognosis in SJS/TEN."
    )
    return make_result(score, interpretation, details)


SCORTEN = Instrument(
    id="scorten",
    name="SCORTEN",
    acronym="SCORTEN",
    description=(
        "A severity-of-illness score to predict mortality in patients with Stevens-Johnson Syndrome (SJS) or "
        "Toxic Epidermal Necrolysis (TEN)."
    ),
    condition="SJS/TEN",
    keywords=("scorten", "sjs", "ten", "stevens-johnson syndrome", "toxic epidermal necrolysis", "prognosis",
              "mortality", "drug reaction"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[checkbox_input(field_id, label) for field_id, label in SCORTEN_FACTORS],
    compute=run_scorten,
    score_range=(0, 7),
    references=(
        "Bastuji-Garin S, et al. SCORTEN: a severity-of-illness score for toxic epidermal necrolysis. J Invest "
        "Dermatol. 2000 Aug;115(2):149-53.",
    ),
)


INSTRUMENTS: List[Instrument] = [ABCDE_MELANOMA, SEVEN_POINT_CHECKLIST, CTCAE_SKIN, MSWAT, SCORTEN]
