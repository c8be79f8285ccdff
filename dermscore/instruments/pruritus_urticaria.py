"""Itch, urticaria and angioedema instruments: NRS, VAS, 5-D itch, ISS/VIS, UAS7, UCT and AAS."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import Instrument, Result, SourceType
from ..schema import group, number_input, options, select_input
from ..scoring import band, fmt, make_result, parse_num, round_to

CONDITION_PRURITUS = "Pruritus"
CONDITION_URTICARIA = "Urticaria"

_ITCH_REFERENCE = (
    "Phan NQ, Blome C, Fritz F, et al. Assessment of pruritus intensity: prospective study on validity and "
    "reliability of the visual analogue scale, numerical rating scale and verbal rating scale in patients with "
    "chronic pruritus. Acta Derm Venereol. 2012."
)


# 1. NRS for pruritus ──────────────────────────────────────────────────────────
_NRS_BANDS = [("<=", 0, "No itch"), ("<=", 3, "Mild itch"), ("<=", 6, "Moderate itch"), ("<=", 8, "Severe itch")]


def run_nrs_pruritus(v: Dict[str, Any]) -> Result:
    score = parse_num(v.get("nrs_score"))
    severity = band(score, _NRS_BANDS, "Very severe itch")
    interpretation = (
        f"NRS for Pruritus: {fmt(score)} (Range 0-10). Severity: {severity}. (Example severity bands: 0 No itch, "
        "1-3 Mild, 4-6 Moderate, 7-8 Severe, 9-10 Very severe)."
    )
    return make_result(score, interpretation, {"Reported_NRS_Score": score, "Assessed_Severity": severity})


NRS_PRURITUS = Instrument(
    id="nrs_pruritus",
    name="Numeric Rating Scale (NRS) for Pruritus",
    acronym="NRS Pruritus",
    description=(
        "A simple scale for patients to rate the intensity of their itch on an 11-point scale (0=no itch, "
        "10=worst imaginable itch)."
    ),
    condition=CONDITION_PRURITUS,
    keywords=("nrs", "numeric rating scale", "pruritus", "itch", "intensity", "patient reported"),
    source_type=SourceType.RESEARCH,
    sections=[
        number_input("nrs_score", "NRS Score (0-10)", max=10, step=1,
                     description="Enter score from 0 (no itch) to 10 (worst imaginable itch)."),
    ],
    compute=run_nrs_pruritus,
    score_range=(0, 10),
    references=(_ITCH_REFERENCE,),
)


# 2. VAS for pruritus ──────────────────────────────────────────────────────────
_VAS_BANDS = [("<=", 0, "No itch"), ("<", 3, "Mild itch"), ("<", 7, "Moderate itch"), ("<", 9, "Severe itch")]


def run_vas_pruritus(v: Dict[str, Any]) -> Result:
    score = round_to(parse_num(v.get("vas_score_cm")), 1)
    severity = band(score, _VAS_BANDS, "Very severe itch")
    interpretation = (
        f"VAS for Pruritus: {fmt(score, 1)} (Range 0-10). Severity: {severity}. (Example severity bands: 0 No "
        "itch, >0-2.9 Mild, 3-6.9 Moderate, 7-8.9 Severe, 9-10 Very severe)."
    )
    return make_result(score, interpretation, {"Reported_VAS_Score": score, "Assessed_Severity": severity})


VAS_PRURITUS = Instrument(
    id="vas_pruritus",
    name="Visual Analogue Scale (VAS) for Pruritus",
    acronym="VAS Pruritus",
    description=(
        "A simple scale for patients to rate the intensity of their itch, typically on a 10 cm line (0=no itch, "
        "10=worst imaginable itch)."
    ),
    condition=CONDITION_PRURITUS,
    keywords=("vas", "visual analogue scale", "pruritus", "itch", "intensity", "patient reported"),
    source_type=SourceType.RESEARCH,
    sections=[
        number_input("vas_score_cm", "VAS Score (cm or 0-10)", max=10, step=0.1,
                     description="Enter score from 0 (no itch) to 10 (worst imaginable itch)."),
    ],
    compute=run_vas_pruritus,
    score_range=(0, 10),
    references=("Huskisson EC. Measurement of pain. Lancet. 1974.", _ITCH_REFERENCE),
)


# 3. 5-D itch scale ────────────────────────────────────────────────────────────
# field id, details key, label, option labels for 1..5
_FIVE_D_DOMAINS = [
    ("d1_duration", "D1_Duration_Score", "Domain 1: Duration (Total hours itching per day)",
     ["<1 hr", "1-3 hrs", "4-6 hrs", "7-12 hrs", ">12 hrs"]),
    ("d2_degree", "D2_Degree_Score", "Domain 2: Degree (Severity of worst itch episode)",
     ["Mild", "Mild-Moderate", "Moderate", "Moderate-Severe", "Severe"]),
    ("d3_direction", "D3_Direction_Score", "Domain 3: Direction (Itch getting better or worse over past month)",
     ["Much better", "Somewhat better", "No change", "Somewhat worse", "Much worse"]),
    ("d4_disability", "D4_Disability_Score", "Domain 4: Disability (Impact on QoL - sleep, mood, activities)",
     ["Not at all", "A little", "Moderately", "A lot", "Very much"]),
    ("d5_distribution", "D5_Distribution_Score", "Domain 5: Distribution (Body parts affected)",
     ["1-2 parts", "3-5 parts", "6-10 parts", "11-18 parts", "All over/Almost all over"]),
]


def run_five_d_itch(v: Dict[str, Any]) -> Result:
    # Each domain bottoms out at 1, so a missing answer counts as the lowest score.
    domain_scores = {key: parse_num(v.get(field_id), 1) or 1 for field_id, key, _, _ in _FIVE_D_DOMAINS}
    total = sum(domain_scores.values())
    interpretation = (
        f"5-D Itch Scale Total Score: {fmt(total)} (Range: 5-25). Higher score indicates more severe and impactful "
        "pruritus. No universally defined severity bands, used to track change."
    )
    return make_result(total, interpretation, domain_scores)


FIVE_D_ITCH = Instrument(
    id="five_d_itch",
    name="5-D Itch Scale",
    acronym="5-D Itch",
    description=(
        "A multidimensional patient-reported outcome measure for chronic pruritus, assessing Duration, Degree, "
        "Direction, Disability, and Distribution."
    ),
    condition=CONDITION_PRURITUS,
    keywords=("5d itch", "pruritus", "itch", "multidimensional", "patient reported"),
    source_type=SourceType.RESEARCH,
    sections=[
        select_input(
            field_id, label, options((i, f"{i} ({text})") for i, text in enumerate(labels, start=1)),
            default=3 if field_id == "d3_direction" else 1,
        )
        for field_id, _, label, labels in _FIVE_D_DOMAINS
    ],
    compute=run_five_d_itch,
    score_range=(5, 25),
    references=(
        "Elman S, Hynan LS, Gabriel V, Mayo MJ. The 5-D Itch Scale: a new measure of pruritus. Br J Dermatol. "
        "2010 Mar;162(3):587-93.",
    ),
)


# 4. ISS/VIS ───────────────────────────────────────────────────────────────────
def run_iss_vis(v: Dict[str, Any]) -> Result:
    score = parse_num(v.get("total_iss_vis_score"))
    interpretation = (
        f"ISS/VIS Score: {fmt(score)}. Higher score indicates more severe ichthyosis. Interpretation and range "
        "depend on the specific version of the ISS/VIS used."
    )
    return make_result(score, interpretation, {"User_Entered_Score": score})


ISS_VIS = Instrument(
    id="iss_vis",
    name="Ichthyosis Severity Score (ISS) / Visual Index for Ichthyosis Severity (VIS)",
    acronym="ISS/VIS",
    description=(
        "Assesses overall ichthyosis severity. Specific components and scoring vary (e.g., Yale VIS-ISS, Gånemo "
        "ISS). This tool accepts a pre-calculated total score."
    ),
    condition="Ichthyosis",
    keywords=("ichthyosis", "severity score", "iss", "vis", "scaling", "erythema"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        number_input("total_iss_vis_score", "Total ISS/VIS Score",
                     description="Enter the pre-calculated total score from the specific ISS/VIS version used."),
    ],
    compute=run_iss_vis,
    score_range=(0, None),
    references=(
        "Gånemo A, et al. Severity assessment in ichthyoses: a validation study. Acta Derm Venereol. 2003.",
        "Milstone LM, et al. The Visual Index for Ichthyosis Severity (VIIS): a validated instrument for use in "
        "ichthyosis clinical trials. Br J Dermatol. 2020.",
    ),
)


# 5. UAS7 ──────────────────────────────────────────────────────────────────────
UAS7_DAYS = 7

_UAS7_WHEALS = options([
    (0, "0 (None)"), (1, "1 (<20/24h)"), (2, "2 (20-50/24h)"), (3, "3 (>50/24h or large confluent areas)"),
])
_UAS7_ITCH = options([
    (0, "0 (None)"),
    (1, "1 (Mild - present but not annoying/troublesome)"),
    (2, "2 (Moderate - troublesome but does not interfere with normal daily activity/sleep)"),
    (3, "3 (Intense - severe, annoying, interferes with normal daily activity/sleep)"),
])

_UAS7_BANDS = [
    ("<=", 0, "Urticaria-free."),
    ("<=", 6, "Well-controlled urticaria (or mild activity)."),
    ("<=", 15, "Mildly active urticaria."),
    ("<=", 27, "Moderately active urticaria."),
]


def run_uas7(v: Dict[str, Any]) -> Result:
    total = 0.0
    daily: Dict[str, Any] = {}
    for day in range(1, UAS7_DAYS + 1):
        wheals = parse_num(v.get(f"d{day}_wheals"))
        itch = parse_num(v.get(f"d{day}_itch"))
        total += wheals + itch
        daily[f"Day {day}"] = {"wheals": wheals, "itch": itch, "total": wheals + itch}
    interpretation = (
        f"Total UAS7 Score: {fmt(total)} (Range: 0-42). {band(total, _UAS7_BANDS, 'Severely active urticaria.')}"
        " (Severity bands: 0 Urticaria-free, 1-6 Well-controlled/Mild, 7-15 Mild, 16-27 Moderate, 28-42 Severe)"
    )
    return make_result(total, interpretation, daily)


UAS7 = Instrument(
    id="uas7",
    name="Urticaria Activity Score over 7 days (UAS7)",
    acronym="UAS7",
    description=(
        "Patient-reported assessment of chronic spontaneous urticaria (CSU) activity over 7 consecutive days, "
        "combining daily scores for number of wheals and intensity of itch."
    ),
    condition=CONDITION_URTICARIA,
    keywords=("uas7", "urticaria", "csu", "hives", "itch", "wheals", "patient reported"),
    source_type=SourceType.RESEARCH,
    sections=[
        group(
            f"uas7_day_{day}_group", f"Day {day}",
            [
                select_input(f"d{day}_wheals", "Wheals (Number)", _UAS7_WHEALS,
                             description="Score for number of wheals in the last 24 hours."),
                select_input(f"d{day}_itch", "Itch Severity", _UAS7_ITCH,
                             description="Score for intensity of itch in the last 24 hours."),
            ],
            grid_cols=2,
        )
        for day in range(1, UAS7_DAYS + 1)
    ],
    compute=run_uas7,
    score_range=(0, 42),
    references=("Zuberbier T, et al. Allergy. 2009.", "Mathias SD, et al. Ann Allergy Asthma Immunol. 2012."),
)


# 6. UCT ───────────────────────────────────────────────────────────────────────
UCT_WELL_CONTROLLED = 12

_UCT_HOW_MUCH = options([(4, "Very much"), (3, "Much"), (2, "Moderately"), (1, "A little"), (0, "Not at all")])
_UCT_HOW_WELL = options([(4, "Completely"), (3, "Well"), (2, "Moderately"), (1, "Poorly"), (0, "Not at all")])


def run_uct(v: Dict[str, Any]) -> Result:
    raw = {n: parse_num(v.get(field_id)) for n, field_id in
           enumerate(("q1_symptoms", "q2_qol", "q3_treatment", "q4_control"), start=1)}
    # Burden questions are reverse scored; the control question counts as answered.
    scored = {1: 4 - raw[1], 2: 4 - raw[2], 3: 4 - raw[3], 4: raw[4]}
    total = sum(scored.values())
    verdict = "Urticaria is well controlled." if total >= UCT_WELL_CONTROLLED else "Urticaria is poorly controlled."
    interpretation = (
        f"UCT Score: {fmt(total)} (Range: 0-16). {verdict} (Standard interpretation: <12 poorly controlled, "
        "≥12 well controlled)."
    )
    return make_result(total, interpretation, {
        "Q1_Symptoms_Score": scored[1],
        "Q2_QoL_Score": scored[2],
        "Q3_Treatment_Sufficiency_Score": scored[3],
        "Q4_Overall_Control_Score": scored[4],
        **{f"Raw_Input_Q{n}": value for n, value in raw.items()},
    })


UCT = Instrument(
    id="uct",
    name="Urticaria Control Test (UCT)",
    acronym="UCT",
    description="Patient-reported questionnaire to assess urticaria control over the last 4 weeks.",
    condition=CONDITION_URTICARIA,
    keywords=("uct", "urticaria", "control", "patient reported"),
    source_type=SourceType.RESEARCH,
    sections=[
        select_input(
            "q1_symptoms",
            "Q1: How much have you suffered from the physical symptoms of urticaria (itch, wheals, swelling) in "
            "the last 4 weeks?",
            _UCT_HOW_MUCH, default=0,
        ),
        select_input(
            "q2_qol", "Q2: How much has your quality of life been affected by urticaria in the last 4 weeks?",
            _UCT_HOW_MUCH, default=0,
        ),
        select_input(
            "q3_treatment",
            "Q3: How often was treatment for your urticaria not enough to control your symptoms in the last "
            "4 weeks?",
            _UCT_HOW_MUCH, default=0,
        ),
        select_input(
            "q4_control", "Q4: Overall, how well controlled would you say your urticaria was in the last 4 weeks?",
            _UCT_HOW_WELL, default=0,
        ),
    ],
    compute=run_uct,
    score_range=(0, 16),
    references=("Weller K, et al. J Allergy Clin Immunol. 2014.",),
)


# 7. AAS ───────────────────────────────────────────────────────────────────────
_AAS_IMPACT = options([(0, "0 (Not at all)"), (1, "1 (A little)"), (2, "2 (Moderately)"), (3, "3 (A lot)")])

# field id, details key
_AAS_ITEMS = [
    ("aas_parts", "Item1_Parts"),
    ("aas_duration", "Item2_Duration"),
    ("aas_severity", "Item3_Severity"),
    ("aas_function", "Item4_Function"),
    ("aas_appearance", "Item5_Appearance"),
]


def run_aas(v: Dict[str, Any]) -> Result:
    items = {key: parse_num(v.get(field_id)) for field_id, key in _AAS_ITEMS}
    score = sum(items.values())
    interpretation = (
        f"AAS (for one day): {fmt(score)} (Range for one day: 0-15). Higher score indicates more angioedema "
        "activity. AAS7 (sum of 7 daily scores) ranges 0-105. AAS28 ranges 0-420."
    )
    return make_result(score, interpretation, items)


AAS = Instrument(
    id="aas",
    name="Angioedema Activity Score (AAS)",
    acronym="AAS",
    description=(
        "Patient-reported diary to assess activity of recurrent angioedema. Can be summed over periods (e.g., "
        "AAS7, AAS28). This form is for a single representative day."
    ),
    condition="Angioedema",
    keywords=("aas", "angioedema", "activity score", "patient reported"),
    source_type=SourceType.RESEARCH,
    sections=[
        select_input("aas_parts", "1. Number of body parts affected by angioedema today?",
                     options([(0, "0"), (1, "1"), (2, "2"), (3, "3 or more")])),
        select_input("aas_duration", "2. How long did your angioedema last today (total duration of all episodes)?",
                     options([(0, "<1 hour"), (1, "1-6 hours"), (2, "6-24 hours"), (3, ">24 hours")])),
        select_input("aas_severity", "3. How severe was your angioedema today (worst episode)?",
                     options([(0, "0 (None)"), (1, "1 (Mild)"), (2, "2 (Moderate)"), (3, "3 (Severe)")])),
        select_input("aas_function", "4. How much did angioedema interfere with your daily functioning today?",
                     _AAS_IMPACT),
        select_input("aas_appearance", "5. How much did angioedema affect your appearance today?", _AAS_IMPACT),
    ],
    compute=run_aas,
    score_range=(0, 15),
    references=("Weller K, et al. Allergy. 2012.",),
)


INSTRUMENTS: List[Instrument] = [NRS_PRURITUS, VAS_PRURITUS, FIVE_D_ITCH, ISS_VIS, UAS7, UCT, AAS]
