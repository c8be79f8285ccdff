"""Psoriasis instruments: PASI, PSSI, NAPSI, PGA and the PEST screening questionnaire."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import FieldSpec, Instrument, Result, SourceType
from ..schema import AREA_0_6, SEVERITY_0_4, group, number_input, options, select_input, yes_no_options
from ..scoring import band, clamp, fmt, make_result, parse_num, round_to, sum_nums


# 1. PASI ──────────────────────────────────────────────────────────────────────
# region key, name, multiplier (share of body surface area)
PASI_REGIONS = [
    ("h", "Head/Neck", 0.1),
    ("u", "Upper Limbs", 0.2),
    ("t", "Trunk", 0.3),
    ("l", "Lower Limbs", 0.4),
]

_PASI_BANDS = [("<", 10, "Mild Psoriasis."), ("<=", 20, "Moderate Psoriasis.")]


def run_pasi(v: Dict[str, Any]) -> Result:
    total = 0.0
    regional: Dict[str, Any] = {}
    for key, name, multiplier in PASI_REGIONS:
        e = parse_num(v.get(f"E_{key}"))
        i = parse_num(v.get(f"I_{key}"))
        s = parse_num(v.get(f"S_{key}"))
        a = parse_num(v.get(f"A_{key}"))
        regional_score = multiplier * (e + i + s) * a
        total += regional_score
        regional[name] = {
            "Erythema": e, "Induration": i, "Scaling": s, "Area_Score": a,
            "Sum_Severity": e + i + s,
            "Regional_PASI_Score": round_to(regional_score, 2),
        }
    score = round_to(total, 2)
    interpretation = (
        f"Total PASI Score: {fmt(score)} (Range: 0-72). {band(score, _PASI_BANDS, 'Severe Psoriasis.')}"
        " (Common bands: <10 Mild; 10-20 Moderate; >20 Severe. Response: PASI 50, 75, 90, 100 indicate "
        "% reduction from baseline.)"
    )
    return make_result(score, interpretation, regional)


PASI = Instrument(
    id="pasi",
    name="Psoriasis Area and Severity Index (PASI)",
    acronym="PASI",
    description="Gold standard for assessing severity of extensive plaque psoriasis and monitoring treatment response.",
    condition="Psoriasis",
    keywords=("pasi", "psoriasis", "plaque psoriasis", "severity", "index"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        group(
            f"pasi_group_{key}", f"{name} (Multiplier x{multiplier})",
            [
                select_input(f"E_{key}", "Erythema (E)", SEVERITY_0_4),
                select_input(f"I_{key}", "Induration (I)", SEVERITY_0_4),
                select_input(f"S_{key}", "Scaling (S)", SEVERITY_0_4),
                select_input(f"A_{key}", "Area (A)", AREA_0_6, description="% of region affected."),
            ],
            grid_cols=4,
            description=f"This region accounts for {int(multiplier * 100)}% of Body Surface Area.",
        )
        for key, name, multiplier in PASI_REGIONS
    ],
    compute=run_pasi,
    score_range=(0, 72),
    references=("Fredriksson T, Pettersson U. Severe psoriasis--oral therapy with a new retinoid. "
                "Dermatologica. 1978;157(4):238-44.",),
)


# 2. PSSI ──────────────────────────────────────────────────────────────────────
def run_pssi(v: Dict[str, Any]) -> Result:
    e = parse_num(v.get("pssi_erythema"))
    t = parse_num(v.get("pssi_thickness"))
    s = parse_num(v.get("pssi_scaling"))
    a = parse_num(v.get("pssi_area"))
    score = (e + t + s) * a
    interpretation = (
        f"PSSI Score: {fmt(score)} (Range: 0-72). Higher score indicates more severe scalp psoriasis. "
        f"(E:{fmt(e)} + T:{fmt(t)} + S:{fmt(s)}) x A:{fmt(a)}."
    )
    return make_result(score, interpretation, {"Erythema": e, "Thickness": t, "Scaling": s, "Area_Score": a})


PSSI = Instrument(
    id="pssi",
    name="Psoriasis Scalp Severity Index (PSSI)",
    acronym="PSSI",
    description="Specifically assesses the severity of scalp psoriasis.",
    condition="Psoriasis / Psoriatic Arthritis",
    keywords=("pssi", "psoriasis", "scalp psoriasis", "scalp", "severity", "psoriatic arthritis"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input("pssi_erythema", "Scalp Erythema (E)", SEVERITY_0_4),
        select_input("pssi_thickness", "Scalp Thickness (T)", SEVERITY_0_4),
        select_input("pssi_scaling", "Scalp Scaling (S)", SEVERITY_0_4),
        select_input("pssi_area", "Scalp Area (A)", AREA_0_6, description="% scalp area."),
    ],
    compute=run_pssi,
    score_range=(0, 72),
    references=("Ortonne JP, et al. J Eur Acad Dermatol Venereol. 2004;18(Suppl 2):28.",),
)


# 3. NAPSI ─────────────────────────────────────────────────────────────────────
MAX_NAILS = 20


def run_napsi(v: Dict[str, Any]) -> Result:
    nail_count = int(clamp(parse_num(v.get("nail_count")), 1, MAX_NAILS))
    total = 0.0
    per_nail: Dict[str, Any] = {}
    for i in range(1, nail_count + 1):
        matrix = parse_num(v.get(f"nail_{i}_matrix"))
        bed = parse_num(v.get(f"nail_{i}_bed"))
        total += matrix + bed
        per_nail[f"Nail {i}"] = {"matrix_score": matrix, "bed_score": bed, "total_nail_score": matrix + bed}
    interpretation = (
        f"Total NAPSI Score (for {nail_count} nails): {fmt(total)} (Max score: {nail_count * 8}). "
        "Higher score indicates more severe nail psoriasis. No universal severity bands defined; "
        "used for tracking change."
    )
    return make_result(total, interpretation, {"assessed_nails": nail_count, **per_nail})


def _nail_inputs(n: int) -> List[FieldSpec]:
    return [
        number_input(
            f"nail_{n}_matrix", f"Nail {n}: Matrix Score (0-4)", max=4,
            description="Quadrants with any: pitting, leukonychia, red spots in lunula, crumbling.",
        ),
        number_input(
            f"nail_{n}_bed", f"Nail {n}: Bed Score (0-4)", max=4,
            description="Quadrants with any: onycholysis, splinter haemorrhages, subungual hyperkeratosis, "
                        "oil drop discoloration.",
        ),
    ]


NAPSI = Instrument(
    id="napsi",
    name="Nail Psoriasis Severity Index (NAPSI)",
    acronym="NAPSI",
    description=(
        "Evaluates severity of psoriatic nail involvement. Each nail is divided into 4 quadrants and scored "
        "for matrix and bed disease; only the first N assessed nails are summed."
    ),
    condition="Psoriasis",
    keywords=("napsi", "psoriasis", "nail disorders", "nail", "severity"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(
            "nail_count", "Number of Nails Assessed (1-20)",
            options((n, f"{n} Nail(s)") for n in range(1, MAX_NAILS + 1)), default=10,
        ),
        *[field for n in range(1, MAX_NAILS + 1) for field in _nail_inputs(n)],
    ],
    compute=run_napsi,
    score_range=(0, MAX_NAILS * 8),
    references=("Rich P, Scher RK. Nail Psoriasis Severity Index: a useful tool for evaluation of nail psoriasis. "
                "J Am Acad Dermatol. 2003 Aug;49(2):206-12.",),
)


# 4. PGA for psoriasis ─────────────────────────────────────────────────────────
_PGA_LEVELS = options([
    (0, "0 - Clear"), (1, "1 - Almost Clear / Minimal"), (2, "2 - Mild"), (3, "3 - Mild to Moderate"),
    (4, "4 - Moderate"), (5, "5 - Moderate to Severe"), (6, "6 - Severe / Very Marked"),
])


def run_pga_psoriasis(v: Dict[str, Any]) -> Result:
    level = int(parse_num(v.get("pga_level")))
    description = next((opt.label for opt in _PGA_LEVELS if opt.value == level), "N/A")
    interpretation = (
        f"PGA for Psoriasis: Level {level} ({description}). Score directly reflects assessed severity. "
        "PGA 0 or 1 often a treatment goal."
    )
    return make_result(level, interpretation, {"pga_description": description})


PGA_PSORIASIS = Instrument(
    id="pga_psoriasis",
    name="Physician Global Assessment (PGA) for Psoriasis",
    acronym="PGA Psoriasis",
    description="Single-item clinician assessment of overall psoriasis severity. Scales vary.",
    condition="Psoriasis / Psoriatic Arthritis",
    keywords=("pga", "psoriasis", "physician global assessment", "severity", "psoriatic arthritis"),
    source_type=SourceType.RESEARCH,
    sections=[select_input("pga_level", "Select PGA Level (Example 7-Level)", _PGA_LEVELS)],
    compute=run_pga_psoriasis,
    score_range=(0, 6),
    references=("Various versions; widely used in clinical trials.",),
)


# 5. PEST ──────────────────────────────────────────────────────────────────────
_PEST_QUESTIONS = [
    ("pest_q1_swollen_joint", "Q1_Swollen_Joint", "Have you ever had a swollen joint (or joints)?"),
    ("pest_q2_doctor_arthritis", "Q2_Doctor_Arthritis", "Has a doctor ever told you that you have arthritis?"),
    ("pest_q3_nail_pits", "Q3_Nail_Pits", "Do your fingernails or toenails have holes or pits?"),
    ("pest_q4_heel_pain", "Q4_Heel_Pain", "Have you had pain in your heel?"),
    ("pest_q5_dactylitis", "Q5_Dactylitis",
     "Have you had a finger or toe that was completely swollen and painful for no apparent reason?"),
]

PEST_REFERRAL_THRESHOLD = 3


def run_pest(v: Dict[str, Any]) -> Result:
    score = sum_nums(v, (field_id for field_id, _, _ in _PEST_QUESTIONS))
    if score >= PEST_REFERRAL_THRESHOLD:
        verdict = ("Suggests an elevated risk of PsA. Consider referral to rheumatology for formal "
                   "PsA evaluation.")
        recommendation = "Refer to rheumatology"
    else:
        verdict = ("Low likelihood of PsA. Continue routine dermatology follow-up and repeat screening "
                   "periodically.")
        recommendation = "Continue routine dermatology screening"
    details: Dict[str, Any] = {"Total_PEST_Score": score, "Referral_Recommendation": recommendation}
    details.update({key: parse_num(v.get(field_id)) for field_id, key, _ in _PEST_QUESTIONS})
    return make_result(score, f"PEST Score: {fmt(score)} (Range: 0-5). {verdict}", details)


PEST = Instrument(
    id="pest",
    name="Psoriasis Epidemiology Screening Tool",
    acronym="PEST",
    description=(
        "A validated 5-item, patient-self-administered questionnaire to screen for psoriatic arthritis in "
        "people with psoriasis."
    ),
    condition="Psoriasis, Psoriatic Arthritis",
    keywords=("pest", "psoriasis", "psoriatic arthritis", "screening", "questionnaire", "arthritis", "nail pitting"),
    source_type=SourceType.RESEARCH,
    sections=[select_input(field_id, label, yes_no_options(), default=0) for field_id, _, label in _PEST_QUESTIONS],
    compute=run_pest,
    score_range=(0, 5),
    references=(
        "Ibrahim GH, Buch MH, Lawson C, Waxman R, Helliwell PS. Evaluation of an existing screening tool for "
        "psoriatic arthritis in people with psoriasis and the development of a new instrument: the Psoriasis "
        "Epidemiology Screening Tool (PEST) questionnaire. Clin Exp Rheumatol. 2009;27(3):469-474.",
        "Coates LC, Savage LJ, Chinoy H, et al. Assessment of two screening tools to identify psoriatic "
        "arthritis in patients with psoriasis. J Eur Acad Dermatol Venereol. 2018;32(9):1530-1534.",
    ),
)


INSTRUMENTS: List[Instrument] = [PASI, PSSI, NAPSI, PGA_PSORIASIS, PEST]
