"""
Hidradenitis suppurativa instruments: HiSCR, HS-PGA, Hurley staging, IHS4 and
the modified Sartorius score.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..models import Instrument, Result, SourceType
from ..schema import checkbox_input, group, number_input, options, select_input
from ..scoring import band, count_true, fmt, make_result, parse_num, round_to

CONDITION = "Hidradenitis Suppurativa"


# 1. HiSCR ─────────────────────────────────────────────────────────────────────
HISCR_REDUCTION_THRESHOLD = 50.0


def percent_reduction(baseline: float, followup: float) -> float:
    """
    Percentage drop from baseline to follow-up.

    A zero baseline has no proportional change: staying at zero counts as a
    full (100%) reduction, any new lesion counts as no (0%) reduction.
    """
    if baseline == 0:
        return 100.0 if followup == 0 else 0.0
    return (baseline - followup) / baseline * 100


def run_hiscr(v: Dict[str, Any]) -> Result:
    baseline_an = parse_num(v.get("baselineAN"))
    current_an = parse_num(v.get("currentAN"))
    baseline_abscesses = parse_num(v.get("baselineAbscesses"))
    current_abscesses = parse_num(v.get("currentAbscesses"))
    baseline_fistulas = parse_num(v.get("baselineFistulas"))
    current_fistulas = parse_num(v.get("currentFistulas"))

    reduction = percent_reduction(baseline_an, current_an)
    an_reduction_met = reduction >= HISCR_REDUCTION_THRESHOLD
    no_abscess_increase = current_abscesses <= baseline_abscesses
    no_fistula_increase = current_fistulas <= baseline_fistulas
    achieved = an_reduction_met and no_abscess_increase and no_fistula_increase

    if achieved:
        interpretation = (
            f"HiSCR Achieved: At least 50% reduction in AN count ({fmt(reduction, 1)}%) with no increase in "
            "abscesses and no increase in draining fistulas."
        )
    else:
        yes_no = {True: "Yes", False: "No"}
        interpretation = "\n".join([
            "HiSCR Not Achieved.",
            f"- AN count reduction ≥50%: {yes_no[an_reduction_met]} ({fmt(reduction, 1)}% reduction)",
            f"- No increase in abscess count: {yes_no[no_abscess_increase]}",
            f"- No increase in draining fistula count: {yes_no[no_fistula_increase]}",
        ])

    return make_result(1 if achieved else 0, interpretation, {
        "Baseline_AN_Count": baseline_an,
        "Followup_AN_Count": current_an,
        "AN_Reduction_Met": an_reduction_met,
        "Percent_AN_Reduction": round_to(reduction, 1),
        "Baseline_Abscess_Count": baseline_abscesses,
        "Followup_Abscess_Count": current_abscesses,
        "No_Abscess_Increase_Met": no_abscess_increase,
        "Baseline_Fistula_Count": baseline_fistulas,
        "Followup_Fistula_Count": current_fistulas,
        "No_Fistula_Increase_Met": no_fistula_increase,
        "HiSCR_Status": "Achieved" if achieved else "Not Achieved",
    })


HISCR = Instrument(
    id="hiscr",
    name="HiSCR (Hidradenitis Suppurativa Clinical Response)",
    acronym="HiSCR",
    description=(
        "A dichotomous treatment-response outcome for HS trials: at least 50% reduction in abscess and "
        "inflammatory nodule (AN) count with no increase in abscesses or draining fistulas from baseline."
    ),
    condition=CONDITION,
    keywords=("hiscr", "hs", "hidradenitis suppurativa", "treatment response", "clinical trial", "an count"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        group("hiscr_baseline_group", "Baseline Assessment (Prior to Treatment Start)", [
            number_input("baselineAbscesses", "Baseline Abscess (A) Count"),
            number_input("baselineAN", "Baseline Total Inflammatory Lesion (AN) Count (Abscesses + Nodules)",
                         description="Sum of baseline Abscesses and Inflammatory Nodules."),
            number_input("baselineFistulas", "Baseline Draining Fistula (DF) Count"),
        ], grid_cols=1),
        group("hiscr_followup_group", "Follow-up Assessment (At Evaluation Timepoint)", [
            number_input("currentAbscesses", "Follow-up Abscess (A) Count"),
            number_input("currentAN", "Follow-up Total Inflammatory Lesion (AN) Count (Abscesses + Nodules)",
                         description="Sum of follow-up Abscesses and Inflammatory Nodules."),
            number_input("currentFistulas", "Follow-up Draining Fistula (DF) Count"),
        ], grid_cols=1),
    ],
    compute=run_hiscr,
    score_range=(0, 1),
    references=(
        "Kimball AB, Jemec GB, Yang M, et al. Assessing the validity, responsiveness and meaningfulness of the "
        "Hidradenitis Suppurativa Clinical Response (HiSCR) as the clinical endpoint for hidradenitis "
        "suppurativa treatment. Br J Dermatol. 2014;171(6):1434-42.",
    ),
)


# 2. HS-PGA ────────────────────────────────────────────────────────────────────
def hs_pga_grade(a: float, inflammatory: float, df: float, non_inflammatory: float) -> Tuple[int, str]:
    """Derive the 0-5 HS-PGA grade from lesion counts; -1 when undetermined."""
    grade, description = -1, "Undetermined - use clinical judgment or direct PGA selection."

    if a == 0 and inflammatory == 0 and df == 0 and non_inflammatory == 0:
        return 0, "Clear: No inflammatory or non-inflammatory HS lesions."
    if a == 0 and inflammatory == 0 and df == 0 and non_inflammatory > 0:
        return 1, ("Minimal: No abscesses, inflammatory nodules, or draining fistulas; only non-inflammatory "
                   "nodules present.")
    if a == 0 and df == 0 and 0 < inflammatory <= 4:
        return 2, "Mild: 1-4 inflammatory nodule(s); no abscess(es) or draining fistula(s)."
    if a <= 2 and df == 0 and inflammatory == 0:
        return 2, "Mild: ≤2 abscess(es); no inflammatory nodule(s) or draining fistula(s)."
    if df <= 2 and a == 0 and inflammatory == 0:
        return 2, "Mild: ≤2 draining fistula(s); no inflammatory nodule(s) or abscess(es)."
    if not (a > 0 or df > 0 or inflammatory > 0):
        return grade, description

    tracts = a + df
    lone_abscesses = a > 2 and inflammatory == 0 and df == 0
    lone_fistulas = df > 2 and inflammatory == 0 and a == 0
    if a <= 5 and df <= 5 and tracts <= 5 and inflammatory < 10 and not (lone_abscesses or lone_fistulas):
        if tracts >= 1 or inflammatory >= 5:
            grade, description = 3, ("Moderate: Some abscesses/fistulas (total ≤5) and/or several "
                                     "inflammatory nodules (<10).")
        else:
            grade, description = 2, "Mild: Few mixed inflammatory lesions."
    if (a > 5 or df > 5 or tracts > 5 or (tracts >= 1 and inflammatory >= 10)) and not tracts > 10:
        grade, description = 4, ("Severe: Multiple abscesses/fistulas (total >5) or many inflammatory "
                                 "nodules (≥10) with some A/DF.")
    if tracts > 10 or (a + inflammatory + df > 20 and tracts >= 5):
        grade, description = 5, "Very Severe: Extensive/confluent lesions or very numerous lesions."

    if grade == -1:
        grade, description = 3, "Moderate (General fallback - use clinical judgment)."
    return grade, description


def run_hspga(v: Dict[str, Any]) -> Result:
    a = parse_num(v.get("abscesses_count"))
    inflammatory = parse_num(v.get("inflammatory_nodules_count"))
    df = parse_num(v.get("draining_fistulas_count"))
    non_inflammatory = parse_num(v.get("non_inflammatory_nodules_count"))
    grade, description = hs_pga_grade(a, inflammatory, df, non_inflammatory)
    shown = "N/A" if grade == -1 else grade
    interpretation = (
        f"HS-PGA Score: {shown} - {description}. This score is a global assessment. "
        "Precise definitions can vary."
    )
    return make_result(grade, interpretation, {
        "Abscesses": a,
        "Inflammatory_Nodules": inflammatory,
        "Draining_Fistulas": df,
        "Non_Inflammatory_Nodules": non_inflammatory,
        "Calculated_Description": description,
    })


HSPGA = Instrument(
    id="hspga",
    name="HS-PGA (Hidradenitis Suppurativa Physician's Global Assessment)",
    acronym="HS-PGA",
    description=(
        "A static 6-point scale for clinicians to globally assess the severity of hidradenitis suppurativa. "
        "Specific definitions for each grade vary slightly across trials."
    ),
    condition=CONDITION,
    keywords=("hspga", "hs", "hidradenitis suppurativa", "pga", "physician global assessment", "severity"),
    source_type=SourceType.RESEARCH,
    sections=[
        number_input("abscesses_count", "Number of Abscesses (A)"),
        number_input("inflammatory_nodules_count", "Number of Inflammatory Nodules (IN)"),
        number_input("draining_fistulas_count", "Number of Draining Fistulas (DF)"),
        number_input("non_inflammatory_nodules_count",
                     "Number of Non-Inflammatory Nodules (NIN) (e.g., for Grade 0/1 distinction)"),
    ],
    compute=run_hspga,
    score_range=(0, 5),
    references=(
        "HS-PGA scales are often defined in specific clinical trial protocols. Example: Kimball AB, et al. "
        "JAMA Dermatol. 2012. FDA Adalimumab Prescribing Information.",
    ),
)


# 3. Hurley staging ────────────────────────────────────────────────────────────
_HURLEY_STAGES = options([
    (1, "Stage 1: Abscess formation (single or multiple) without sinus tracts and cicatrization (scarring)."),
    (2, "Stage 2: Recurrent abscesses with tract formation and cicatrization. Single or multiple widely "
        "separated lesions."),
    (3, "Stage 3: Diffuse or almost diffuse involvement, or multiple interconnected tracts and abscesses "
        "across an entire area."),
])

_HURLEY_DESCRIPTIONS = {
    1: "Stage 1 indicates abscess formation (single or multiple) without sinus tracts and scarring. "
       "Typically considered Mild HS.",
    2: "Stage 2 indicates recurrent abscesses with tract formation and scarring, with single or multiple "
       "widely separated lesions. Typically considered Moderate HS.",
    3: "Stage 3 indicates diffuse or almost diffuse involvement, or multiple interconnected tracts and "
       "abscesses across an entire area. Typically considered Severe HS.",
}


def run_hurley_staging_hs(v: Dict[str, Any]) -> Result:
    stage = int(parse_num(v.get("hurley_stage")))
    description = _HURLEY_DESCRIPTIONS.get(stage)
    interpretation = f"Hurley Stage {stage}. {description or 'Invalid stage selected.'}"
    return make_result(stage, interpretation, {"stage_description": description or "N/A"})


HURLEY_STAGING_HS = Instrument(
    id="hurley_staging_hs",
    name="Hurley Staging System for Hidradenitis Suppurativa (HS)",
    acronym="Hurley Staging",
    description="A simple clinical staging system to classify the severity of Hidradenitis Suppurativa.",
    condition=CONDITION,
    keywords=("hurley", "hs", "hidradenitis suppurativa", "staging", "severity"),
    source_type=SourceType.RESEARCH,
    sections=[select_input("hurley_stage", "Select Hurley Stage", _HURLEY_STAGES, default=1)],
    compute=run_hurley_staging_hs,
    score_range=(1, 3),
    references=("Hurley HJ. Axillary hyperhidrosis, apocrine bromhidrosis, hidradenitis suppurativa, and familial "
                "benign pemphigus. Dermatol Surg. 1989;15(6):557-61.",),
)


# 4. IHS4 ──────────────────────────────────────────────────────────────────────
_IHS4_BANDS = [("<=", 3, "Mild HS"), ("<=", 10, "Moderate HS")]


def run_ihs4(v: Dict[str, Any]) -> Result:
    nodules = parse_num(v.get("nodules"))
    abscesses = parse_num(v.get("abscesses"))
    tunnels = parse_num(v.get("drainingTunnels"))
    total = nodules * 1 + abscesses * 2 + tunnels * 4
    severity = band(total, _IHS4_BANDS, "Severe HS")
    interpretation = "\n".join([
        f"IHS4 Score: {fmt(total)}. Severity: {severity}.",
        "Formula: (Nodules × 1) + (Abscesses × 2) + (Draining Tunnels × 4).",
        "Severity bands: ≤3 Mild; 4-10 Moderate; ≥11 Severe.",
    ])
    return make_result(total, interpretation, {
        "Nodules_Count": nodules,
        "Abscesses_Count": abscesses,
        "Draining_Tunnels_Count": tunnels,
        "Nodules_Contribution": nodules * 1,
        "Abscesses_Contribution": abscesses * 2,
        "Draining_Tunnels_Contribution": tunnels * 4,
        "Total_IHS4_Score": total,
        "Severity_Category": severity,
    })


IHS4 = Instrument(
    id="ihs4",
    name="International Hidradenitis Suppurativa Severity Score System (IHS4)",
    acronym="IHS4",
    description=(
        "A dynamic scoring system from the European HS Foundation that weights inflammatory nodules, abscesses "
        "and draining tunnels to quantify HS severity."
    ),
    condition=CONDITION,
    keywords=("ihs4", "hs", "hidradenitis suppurativa", "severity", "dynamic score", "inflammatory nodules",
              "abscesses", "draining tunnels"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        number_input("nodules", "Number of Inflammatory Nodules (N) (x1 point each)"),
        number_input("abscesses", "Number of Abscesses (A) (x2 points each)"),
        number_input("drainingTunnels", "Number of Draining Tunnels/Fistulas (DT) (x4 points each)"),
    ],
    compute=run_ihs4,
    score_range=(0, None),
    references=(
        "Zouboulis CC, Tzellos T, Kyrgidis A, et al. Development and validation of the International Hidradenitis "
        "Suppurativa Severity Score System (IHS4). J Am Acad Dermatol. 2017;77(4):633-641.",
    ),
)


# 5. Modified Sartorius score ──────────────────────────────────────────────────
MSS_REGIONS = [
    ("axilla_l", "Axilla (Left)"), ("axilla_r", "Axilla (Right)"),
    ("groin_l", "Groin (Left)"), ("groin_r", "Groin (Right)"),
    ("genital_l", "Genital (Left)"), ("genital_r", "Genital (Right)"),
    ("gluteal_l", "Gluteal (Left)"), ("gluteal_r", "Gluteal (Right)"),
    ("inframammary_l", "Inframammary (Left)"), ("inframammary_r", "Inframammary (Right)"),
    ("other_region", "Other Region(s)"),
]
MSS_POINTS_PER_REGION = 3


def run_mss_hs(v: Dict[str, Any]) -> Result:
    involved = count_true(v, (region_id for region_id, _ in MSS_REGIONS))
    regions_score = involved * MSS_POINTS_PER_REGION
    nodules_score = parse_num(v.get("nodules_count")) * 2
    fistulas_score = parse_num(v.get("fistulas_tunnels_count")) * 4
    scars_score = parse_num(v.get("scars_count")) * 1
    other_score = parse_num(v.get("other_lesions_count")) * 1
    distance_score = parse_num(v.get("longest_distance"))
    separated_score = parse_num(v.get("lesions_separated"))

    total = (regions_score + nodules_score + fistulas_score + scars_score + other_score
             + distance_score + separated_score)
    interpretation = (
        f"Modified Sartorius Score (mSS): {fmt(total)}. Higher score indicates more severe HS. "
        "This score is dynamic and used to track changes over time. No universal severity bands."
    )
    return make_result(total, interpretation, {
        "Regions_Score": regions_score,
        "Involved_Regions_Count": involved,
        "Nodules_Score": nodules_score,
        "Fistulas_Score": fistulas_score,
        "Scars_Score": scars_score,
        "Other_Lesions_Score": other_score,
        "Distance_Score": distance_score,
        "Lesions_Separated_Score": separated_score,
    })


MSS_HS = Instrument(
    id="mss_hs",
    name="Modified Sartorius Score (mSS) for HS",
    acronym="mSS HS",
    description=(
        "A dynamic score for assessing the severity of Hidradenitis Suppurativa by evaluating involved regions, "
        "lesion counts, and distances."
    ),
    condition=CONDITION,
    keywords=("mss", "hs", "hidradenitis suppurativa", "sartorius", "severity", "dynamic"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        group(
            "mss_regions_group", "Anatomical Regions Involved (3 points per region)",
            [checkbox_input(region_id, label) for region_id, label in MSS_REGIONS],
            grid_cols=2,
        ),
        group("mss_lesions_group", "Lesion Counts and Characteristics", [
            number_input("nodules_count", "Inflammatory Nodules (count x 2 points)"),
            number_input("fistulas_tunnels_count", "Fistulas/Tunnels (count x 4 points)"),
            number_input("scars_count", "Scars (count of distinct scarred areas x 1 point)",
                         description="Typically 1 point per distinct scar area, not number of individual scars."),
            number_input("other_lesions_count",
                         "Other Lesions (e.g. comedones, papules - count if significant x 1 point)"),
            select_input(
                "longest_distance", "Longest Distance Between Two Lesions (in one region)",
                options([(2, "<5cm (2 points)"), (4, "5 to <10cm (4 points)"), (8, "≥10cm (8 points)")]),
                default=2,
            ),
            select_input(
                "lesions_separated", "Are all lesions clearly separated by normal skin in each region?",
                options([(0, "Yes (Clearly separated - 0 points)"), (6, "No (Not separated/Confluent - 6 points)")]),
                default=0,
            ),
        ], grid_cols=1),
    ],
    compute=run_mss_hs,
    score_range=(0, None),
    references=(
        "Sartorius K, Lapins J, Emtestam L, Jemec GB. Suggestions for uniform outcome variables when reporting "
        "treatment effects in hidradenitis suppurativa. Br J Dermatol. 2003;149(1):211-3.",
        "Sartorius K, Emtestam L, Jemec GB, Lapins J. Objective scoring of hidradenitis suppurativa reflecting "
        "the role of tobacco smoking and obesity. Br J Dermatol. 2009;161(4):831-9.",
    ),
)


INSTRUMENTS: List[Instrument] = [HISCR, HSPGA, HURLEY_STAGING_HS, IHS4, MSS_HS]
