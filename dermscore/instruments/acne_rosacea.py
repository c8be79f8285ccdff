"""Acne and rosacea instruments: GAGS, IGA for acne, IGA for rosacea and CEA."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..models import FieldOption, Instrument, Result, SourceType
from ..schema import options, select_input
from ..scoring import band, make_result, parse_num


def _label_for(opts: Sequence[FieldOption], value: float, missing: str) -> str:
    return next((opt.label for opt in opts if opt.value == value), missing)


# 1. GAGS ──────────────────────────────────────────────────────────────────────
_GAGS_GRADES = options([
    (0, "0 - No lesions"),
    (1, "1 - <10 Comedones"),
    (2, "2 - 10-20 Comedones OR <10 Papules"),
    (3, "3 - >20 Comedones OR 10-20 Papules OR <10 Pustules"),
    (4, "4 - >20 Papules OR 10-20 Pustules OR <5 Nodules"),
])

# location key, name, factor
GAGS_LOCATIONS = [
    ("forehead", "Forehead", 2),
    ("r_cheek", "Right Cheek", 2),
    ("l_cheek", "Left Cheek", 2),
    ("nose", "Nose", 1),
    ("chin", "Chin", 1),
    ("chest_upper_back", "Chest & Upper Back", 3),
]

_GAGS_BANDS = [("<=", 0, "Clear."), ("<=", 18, "Mild Acne."), ("<=", 30, "Moderate Acne."), ("<=", 38, "Severe Acne.")]


def run_gags(v: Dict[str, Any]) -> Result:
    total = 0
    per_location: Dict[str, Any] = {}
    for key, name, factor in GAGS_LOCATIONS:
        grade = int(parse_num(v.get(f"gags_{key}")))
        total += grade * factor
        per_location[name] = {"grade": grade, "score": grade * factor}
    severity = band(total, _GAGS_BANDS, "Very Severe Acne.")
    interpretation = (
        f"Total GAGS Score: {total} (Range: 0-44+). {severity} (Severity bands: 0 Clear, 1-18 Mild, "
        "19-30 Moderate, 31-38 Severe, 39+ Very Severe)."
    )
    return make_result(total, interpretation, per_location)


GAGS = Instrument(
    id="gags",
    name="Global Acne Grading System (GAGS)",
    acronym="GAGS",
    description=(
        "Global score for acne severity based on lesion type (comedones, papules, pustules, nodules) and "
        "location factors."
    ),
    condition="Acne Vulgaris",
    keywords=("gags", "acne", "acne vulgaris", "global acne grading system", "severity"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(f"gags_{key}", f"{name} (Factor x{factor}) - Predominant Lesion Grade (0-4)", _GAGS_GRADES)
        for key, name, factor in GAGS_LOCATIONS
    ],
    compute=run_gags,
    score_range=(0, 44),
    references=(
        "Doshi A, Zaheer A, Stiller MJ. A comparison of current acne grading systems and proposal of a novel "
        "system. Int J Dermatol. 1997 Jul;36(7):494-8.",
        "Adityan B, Kumari R, Thappa DM. Scoring systems in acne vulgaris. Indian J Dermatol Venereol Leprol. "
        "2009 May-Jun;75(3):323-6.",
    ),
)


# 2. IGA for acne ──────────────────────────────────────────────────────────────
_IGA_ACNE_GRADES = options([
    (0, "0 - Clear: No inflammatory or non-inflammatory lesions."),
    (1, "1 - Almost Clear: Rare non-inflammatory lesions (NILs) with no more than one small inflammatory "
        "lesion (IL)."),
    (2, "2 - Mild: Some NILs, no more than a few ILs (papules/pustules only, no nodules)."),
    (3, "3 - Moderate: Many NILs, may have some ILs, no more than one small nodule."),
    (4, "4 - Severe: Numerous NILs and ILs, may have a few nodules."),
    (5, "5 - Very Severe: Highly inflammatory acne with widespread lesions and nodules."),
])

BASELINE_NOT_ASSESSED = -1

_IGA_ACNE_BASELINE = options([(BASELINE_NOT_ASSESSED, "N/A (Baseline not assessed)")]) + _IGA_ACNE_GRADES


def iga_treatment_success(current: int, baseline: int) -> str:
    """Success needs a final grade of 0 or 1 and at least a two-grade drop from baseline."""
    if baseline < 0:
        return "N/A"
    if current <= 1 and baseline - current >= 2:
        return "Achieved"
    return "Not Achieved"


def run_iga_acne(v: Dict[str, Any]) -> Result:
    current = int(parse_num(v.get("current_iga_grade")))
    baseline = int(parse_num(v.get("baseline_iga_grade"), BASELINE_NOT_ASSESSED))
    current_label = _label_for(_IGA_ACNE_GRADES, current, "Invalid Grade")
    baseline_label = _label_for(_IGA_ACNE_BASELINE, baseline, "N/A")
    success = iga_treatment_success(current, baseline)

    interpretation = f"Current IGA Acne Grade: {current_label}. "
    if baseline != BASELINE_NOT_ASSESSED:
        interpretation += (
            f"\nBaseline IGA Grade: {baseline_label}. \nTreatment Success (≥2 grade reduction and current "
            f"grade 0 or 1): {success}."
        )
    return make_result(current, interpretation, {
        "Current_IGA_Description": current_label,
        "Baseline_IGA_Description": baseline_label,
        "Treatment_Success_Criteria_Met": success,
    })


IGA_ACNE = Instrument(
    id="iga_acne",
    name="IGA for Acne Vulgaris",
    acronym="IGA Acne",
    description=(
        "The Investigator's Global Assessment (IGA) is a static, clinician-rated snapshot of overall acne "
        "severity, used in clinical trials to define treatment success. This version uses a 6-point (0-5) scale."
    ),
    condition="Acne Vulgaris",
    keywords=("iga", "acne", "acne vulgaris", "physician global assessment", "severity"),
    source_type=SourceType.RESEARCH,
    sections=[
        select_input("current_iga_grade", "Current IGA Grade (0-5)", _IGA_ACNE_GRADES),
        select_input(
            "baseline_iga_grade", "Baseline IGA Grade (0-5 or N/A)", _IGA_ACNE_BASELINE,
            default=BASELINE_NOT_ASSESSED,
            description="Select baseline grade if assessing treatment success (≥2 grade improvement AND final "
                        "grade 0 or 1).",
        ),
    ],
    compute=run_iga_acne,
    score_range=(0, 5),
    references=(
        "Thiboutot DM, et al. A multicenter, randomized, double-blind, parallel-group study of the efficacy and "
        "safety of a novel tretinoin 0.04% gel microsphere formulation in the treatment of acne vulgaris. Cutis. "
        "2008;81(1):71-78.",
        "FDA Guidance for Industry: Acne Vulgaris: Developing Drugs for Treatment.",
    ),
)


# 3-4. Rosacea grades ──────────────────────────────────────────────────────────
def _grade_result(v: Dict[str, Any], field_id: str, opts: Sequence[FieldOption], prefix: str, meaning: str) -> Result:
    grade = int(parse_num(v.get(field_id)))
    description = _label_for(opts, grade, "N/A")
    title = description.split(":", 1)[0].strip() if ":" in description else description
    interpretation = f"{prefix}: Grade {grade} ({title}). {meaning} Full description: {description}"
    return make_result(grade, interpretation, {"Selected_Grade_Description": description})


_IGA_ROSACEA_GRADES = options([
    (0, "0 - Clear: No inflammatory lesions (papules/pustules), no erythema."),
    (1, "1 - Almost Clear: Rare inflammatory lesions; faint erythema."),
    (2, "2 - Mild: Few inflammatory lesions (papules/pustules); mild erythema."),
    (3, "3 - Moderate: Several to many inflammatory lesions; moderate erythema."),
    (4, "4 - Severe: Numerous inflammatory lesions; severe erythema; may include plaques/nodules."),
])


def run_iga_rosacea(v: Dict[str, Any]) -> Result:
    return _grade_result(
        v, "iga_grade_rosacea", _IGA_ROSACEA_GRADES, "IGA for Rosacea",
        "This reflects the overall severity of rosacea based on inflammatory lesions and erythema.",
    )


IGA_ROSACEA = Instrument(
    id="iga_rosacea",
    name="Investigator's Global Assessment (IGA) for Rosacea",
    acronym="IGA-R",
    description=(
        "A clinician-rated assessment of overall rosacea severity, typically on a 5-point scale (0=Clear to "
        "4=Severe). Definitions vary slightly."
    ),
    condition="Rosacea",
    keywords=("iga", "rosacea", "physician global assessment", "severity", "erythema", "papules", "pustules"),
    source_type=SourceType.RESEARCH,
    sections=[select_input("iga_grade_rosacea", "Select IGA Grade for Rosacea", _IGA_ROSACEA_GRADES)],
    compute=run_iga_rosacea,
    score_range=(0, 4),
    references=(
        "Fowler J, et al. Efficacy and safety of once-daily ivermectin 1% cream in treatment of papulopustular "
        "rosacea: results of two randomized, double-blind, vehicle-controlled pivotal studies. J Drugs Dermatol. "
        "2014.",
    ),
)


# Short grade title before the colon, clinical wording after it.
_CEA_GRADES = options([
    (0, "0 - Clear: Clear skin with no signs of erythema."),
    (1, "1 - Almost Clear: Slight redness."),
    (2, "2 - Mild: Definite redness, easily recognized."),
    (3, "3 - Moderate: Marked redness."),
    (4, "4 - Severe: Fiery redness."),
])


def run_cea_rosacea(v: Dict[str, Any]) -> Result:
    return _grade_result(
        v, "cea_grade_rosacea", _CEA_GRADES, "CEA for Rosacea",
        "This score reflects the severity of facial erythema.",
    )


CEA_ROSACEA = Instrument(
    id="cea_rosacea",
    name="Clinician's Erythema Assessment (CEA) for Rosacea",
    acronym="CEA Rosacea",
    description=(
        "A clinician-rated assessment of the severity of facial erythema associated with rosacea, typically on a "
        "5-point scale."
    ),
    condition="Rosacea",
    keywords=("cea", "rosacea", "erythema", "redness", "severity"),
    source_type=SourceType.RESEARCH,
    sections=[select_input("cea_grade_rosacea", "Select CEA Grade for Rosacea Erythema", _CEA_GRADES)],
    compute=run_cea_rosacea,
    score_range=(0, 4),
    references=(
        "Fowler J Jr, et al. Brimonidine trials. J Drugs Dermatol. 2013;12(6):650-6.",
    ),
)


INSTRUMENTS: List[Instrument] = [GAGS, IGA_ACNE, IGA_ROSACEA, CEA_ROSACEA]
