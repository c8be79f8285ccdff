"""
Connective tissue and autoimmune instruments.

Skin components of the lupus, Sjögren's and vasculitis activity indices, the
scleroderma skin scores, and the sarcoidosis and dermatomyositis severity
indices.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from ..models import Instrument, Result, SourceType
from ..schema import checkbox_input, group, number_input, options, select_input
from ..scoring import band, fmt, make_result, parse_bool, parse_num, parse_str, round_to

# checkbox id, details key, points
Criterion = Tuple[str, str, int]


def _checkbox_points(v: Dict[str, Any], criteria: Sequence[Criterion]) -> Tuple[int, Dict[str, str]]:
    score = 0
    details: Dict[str, str] = {}
    for field_id, key, points in criteria:
        if parse_bool(v.get(field_id)):
            score += points
            details[key] = f"Present ({points} pt{'s' if points != 1 else ''})"
        else:
            details[key] = "Absent (0 pts)"
    return score, details


# 1. BILAG skin ────────────────────────────────────────────────────────────────
# grade -> (score, activity level)
BILAG_GRADES: Dict[str, Tuple[int, str]] = {
    "A": (4, "Severe"),
    "B": (3, "Moderate"),
    "C": (2, "Mild"),
    "D": (1, "Inactive (previous)"),
    "E": (0, "Never involved"),
}


def run_bilag_skin(v: Dict[str, Any]) -> Result:
    grade = parse_str(v.get("bilag_skin_grade")).strip().upper() or "E"
    score, activity = BILAG_GRADES.get(grade, (0, "N/A"))
    interpretation = (
        f"BILAG Skin Component Grade: {grade} ({activity}). This reflects current lupus activity in the skin "
        "and mucous membranes."
    )
    return make_result(score, interpretation, {"BILAG_Grade": grade, "Activity_Level": activity})


BILAG_SKIN = Instrument(
    id="bilag_skin",
    name="BILAG - Skin Component",
    acronym="BILAG Skin",
    description=(
        "Assesses lupus activity in the mucocutaneous domain as part of the British Isles Lupus Assessment "
        "Group index."
    ),
    condition="Lupus",
    keywords=("bilag", "lupus", "sle", "skin", "mucocutaneous", "activity", "disease activity index"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(
            "bilag_skin_grade", "BILAG Mucocutaneous Grade",
            options([
                ("A", "A - Severe disease activity"),
                ("B", "B - Moderate disease activity"),
                ("C", "C - Mild disease activity"),
                ("D", "D - Disease inactive but previous involvement"),
                ("E", "E - Never involved"),
            ]),
            default="E",
        ),
    ],
    compute=run_bilag_skin,
    score_range=(0, 4),
    references=(
        "Hay EM, et al. Criteria for data collection and analysis in randomized clinical trials for systemic "
        "lupus erythematosus (SLE) I. The British Isles Lupus Assessment Group (BILAG) index for the assessment "
        "of SLE activity. Br J Rheumatol. 1993.",
        "Isenberg DA, et al. BILAG 2004. Development and initial validation of an updated version of the British "
        "Isles Lupus Assessment Group's disease activity index for patients with systemic lupus erythematosus. "
        "Rheumatology (Oxford). 2005.",
    ),
)


# 2. SLEDAI skin descriptors ───────────────────────────────────────────────────
_SLEDAI_CRITERIA: List[Criterion] = [
    ("rash", "Rash", 4),
    ("alopecia", "Alopecia", 4),
    ("mucosal_ulcers", "Mucosal_Ulcers", 4),
    ("vasculitis", "Cutaneous_Vasculitis", 8),
]


def run_sledai_skin(v: Dict[str, Any]) -> Result:
    score, details = _checkbox_points(v, _SLEDAI_CRITERIA)
    interpretation = (
        f"SLEDAI Skin Descriptors Score: {score}. This score contributes to the total SLEDAI. Higher score "
        "indicates greater skin-related disease activity."
    )
    return make_result(score, interpretation, details)


SLEDAI_SKIN = Instrument(
    id="sledai_skin",
    name="SLEDAI - Skin Descriptors",
    acronym="SLEDAI Skin",
    description=(
        "Scores specific skin manifestations as part of the Systemic Lupus Erythematosus Disease Activity "
        "Index (SLEDAI)."
    ),
    condition="Lupus",
    keywords=("sledai", "lupus", "sle", "skin descriptors", "disease activity", "rash", "alopecia",
              "mucosal ulcers", "vasculitis"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        checkbox_input("rash", "Rash (New/Recurrent inflammatory type - 4 points)"),
        checkbox_input("alopecia", "Alopecia (New/Recurrent abnormal, diffuse, or patchy hair loss - 4 points)"),
        checkbox_input("mucosal_ulcers", "Mucosal Ulcers (New/Recurrent oral or nasal - 4 points)"),
        checkbox_input(
            "vasculitis",
            "Cutaneous Vasculitis (Ulceration, gangrene, tender nodules, purpura, splinter hemorrhages, "
            "periungual lesions - 8 points)",
        ),
    ],
    compute=run_sledai_skin,
    score_range=(0, 20),
    references=(
        "Bombardier C, et al. Derivation of the SLEDAI. A disease activity index for lupus patients. "
        "Arthritis Rheum. 1992.",
        "Gladman DD, et al. Systemic Lupus Erythematosus Disease Activity Index 2000. J Rheumatol. 2002.",
    ),
)


# 3. LoSCAT ────────────────────────────────────────────────────────────────────
_LOSAI_BANDS = [("<=", 4, "Mild Activity"), ("<=", 12, "Moderate Activity")]
_LOSDI_BANDS = [("<=", 10, "Mild Damage"), ("<=", 15, "Moderate Damage")]


def run_loscat(v: Dict[str, Any]) -> Result:
    activity = parse_num(v.get("activityIndex"))
    damage = parse_num(v.get("damageIndex"))
    activity_band = band(activity, _LOSAI_BANDS, "Severe Activity")
    damage_band = band(damage, _LOSDI_BANDS, "Severe Damage")
    # Activity and damage are reported side by side, never summed.
    score = f"Activity: {fmt(activity)}, Damage: {fmt(damage)}"
    interpretation = "\n".join([
        "LoSCAT Assessment Results:",
        f"Activity (LoSAI): {fmt(activity)} ({activity_band}).",
        f"Damage (LoSDI): {fmt(damage)} ({damage_band}).",
        "Severity Bands:",
        "LoSAI (Activity): 0–4 Mild; 5–12 Moderate; ≥13 Severe.",
        "LoSDI (Damage): 0–10 Mild; 11–15 Moderate; ≥16 Severe.",
    ])
    return make_result(score, interpretation, {
        "LoSAI_Activity_Score": activity,
        "LoSAI_Severity_Category": activity_band,
        "LoSDI_Damage_Score": damage,
        "LoSDI_Severity_Category": damage_band,
    })


LOSCAT = Instrument(
    id="loscat",
    name="Localized Scleroderma Cutaneous Assessment Tool (LoSCAT)",
    acronym="LoSCAT",
    description=(
        "Assesses disease state in localized scleroderma (morphea), separating disease activity (LoSAI) from "
        "irreversible damage such as atrophy and sclerosis (LoSDI). Expects pre-calculated LoSAI and LoSDI "
        "scores as input."
    ),
    condition="Localized Scleroderma (Morphea)",
    keywords=("loscat", "morphea", "localized scleroderma", "activity", "damage", "pga", "mrss", "LoSAI", "LoSDI"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        number_input("activityIndex", "LoSAI (Localized Scleroderma Activity Index) Score",
                     description="Enter the pre-calculated LoSAI score."),
        number_input("damageIndex", "LoSDI (Localized Scleroderma Damage Index) Score",
                     description="Enter the pre-calculated LoSDI score."),
    ],
    compute=run_loscat,
    references=(
        "Arkachaisri T, Vilaiyuk S, Li S, et al. The localized scleroderma cutaneous assessment tool: a new "
        "instrument for clinical trials. Arthritis Rheum. 2010;62(10):3066-3077.",
        "Kelsey CE, Torok KS. The Localized Scleroderma Cutaneous Assessment Tool (LoSCAT): responsiveness to "
        "change in a pediatric clinical population. J Am Acad Dermatol. 2020;82(1):173-179.",
    ),
)


# 4. mRSS ──────────────────────────────────────────────────────────────────────
MRSS_SITES = [
    ("face", "Face"),
    ("anterior_chest", "Anterior Chest"),
    ("abdomen", "Abdomen"),
    ("fingers_r", "Fingers (Right)"),
    ("fingers_l", "Fingers (Left)"),
    ("hands_r", "Hands (dorsum) (Right)"),
    ("hands_l", "Hands (dorsum) (Left)"),
    ("forearms_r", "Forearms (Right)"),
    ("forearms_l", "Forearms (Left)"),
    ("upper_arms_r", "Upper Arms (Right)"),
    ("upper_arms_l", "Upper Arms (Left)"),
    ("thighs_r", "Thighs (Right)"),
    ("thighs_l", "Thighs (Left)"),
    ("lower_legs_r", "Lower Legs (Right)"),
    ("lower_legs_l", "Lower Legs (Left)"),
    ("feet_r", "Feet (dorsum) (Right)"),
    ("feet_l", "Feet (dorsum) (Left)"),
]

_MRSS_THICKNESS = options([
    (0, "0 - Normal skin"), (1, "1 - Mild thickness"), (2, "2 - Moderate thickness"),
    (3, "3 - Severe thickness (unable to pinch)"),
])

_MRSS_BANDS = [
    ("<=", 0, "No skin thickening."),
    ("<=", 14, "Limited skin involvement or mild diffuse involvement."),
    ("<=", 29, "Moderate diffuse skin involvement."),
]


def run_mrss(v: Dict[str, Any]) -> Result:
    site_scores = {name: parse_num(v.get(f"mrss_{key}")) for key, name in MRSS_SITES}
    total = sum(site_scores.values())
    severity = band(total, _MRSS_BANDS, "Severe diffuse skin involvement.")
    interpretation = (
        f"Total mRSS: {fmt(total)} (Range: 0-51). {severity} Higher score indicates greater skin thickness and "
        "fibrosis. Used to track disease progression and treatment response."
    )
    return make_result(total, interpretation, {"Site_Scores": site_scores, "Overall_Severity_Category": severity})


MRSS = Instrument(
    id="mrss",
    name="Modified Rodnan Skin Score (mRSS)",
    acronym="mRSS",
    description=(
        "Standard measure of skin thickness in systemic sclerosis. Seventeen body sites are each scored by "
        "palpation from 0 (normal) to 3 (severe thickening, unable to pinch), unweighted, for a total of 0-51."
    ),
    condition="Systemic Sclerosis (Scleroderma)",
    keywords=("mrss", "scleroderma", "systemic sclerosis", "skin thickness", "fibrosis", "Rodnan", "ACR", "EULAR"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        group(
            "mrss_assessment_group", "Skin Thickness Assessment (0-3 per site)",
            [select_input(f"mrss_{key}", f"{name} Skin Thickness", _MRSS_THICKNESS) for key, name in MRSS_SITES],
            grid_cols=3,
            description="Assess skin thickness by palpation at each of the 17 sites. 0=Normal, 1=Mild, "
                        "2=Moderate, 3=Severe (unable to pinch).",
        ),
    ],
    compute=run_mrss,
    score_range=(0, 51),
    references=(
        "Clements P, Lachenbruch P, Siebold J, et al. Inter- and intraobserver variability of total skin "
        "thickness score (modified Rodnan TSS) in systemic sclerosis. J Rheumatol. 1995;22(7):1281-1285.",
        "Khanna D, Furst DE, Clements PJ, et al. Minimal clinically important differences for the Rodnan skin "
        "score in systemic sclerosis. Arthritis Rheum. 2009;60(8):2493-2502.",
    ),
)


# 5. ESSDAI cutaneous domain ───────────────────────────────────────────────────
ESSDAI_CUTANEOUS_WEIGHT = 2

_ESSDAI_LEVELS = options([
    (0, "0 - No activity"),
    (1, "1 - Low activity (e.g., non-vasculitic purpura <2 sites, limited urticarial vasculitis)"),
    (2, "2 - Moderate activity (e.g., vasculitic purpura >2 sites or one major site, extensive urticarial "
        "vasculitis, cutaneous ulcers)"),
    (3, "3 - High activity (e.g., extensive/multiple skin ulcers, digital gangrene)"),
])


def run_essdai_cutaneous(v: Dict[str, Any]) -> Result:
    level = int(parse_num(v.get("cutaneous_activity_level")))
    weighted = level * ESSDAI_CUTANEOUS_WEIGHT
    description = next((opt.label for opt in _ESSDAI_LEVELS if opt.value == level), "N/A")
    interpretation = (
        f"ESSDAI Cutaneous Domain: Activity Level {level} ({description}). Weighted Score contribution to "
        f"total ESSDAI: {weighted}."
    )
    return make_result(weighted, interpretation, {"Activity_Level": level, "Level_Description": description})


ESSDAI_CUTANEOUS = Instrument(
    id="essdai_cutaneous",
    name="ESSDAI - Cutaneous Domain",
    acronym="ESSDAI Cutaneous",
    description="Scores the cutaneous domain of the EULAR Sjögren's Syndrome Disease Activity Index (ESSDAI).",
    condition="Sjögren's Syndrome",
    keywords=("essdai", "sjogren's syndrome", "cutaneous domain", "skin activity", "disease activity index"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(
            "cutaneous_activity_level", "Cutaneous Domain Activity Level", _ESSDAI_LEVELS,
            description="Refer to ESSDAI definitions for specific criteria for each activity level.",
        ),
    ],
    compute=run_essdai_cutaneous,
    score_range=(0, 6),
    references=(
        "Seror R, et al. EULAR Sjogren's Syndrome Disease Activity Index (ESSDAI): a user guide. RMD Open. 2015.",
    ),
)


# 6. BVAS skin ─────────────────────────────────────────────────────────────────
_BVAS_CRITERIA: List[Criterion] = [
    ("ulcer_bvas", "Skin_Ulceration", 1),
    ("gangrene_bvas", "Major_Digital_Ischemia_Gangrene", 6),
    ("other_skin_bvas", "Other_Skin_Lesions", 1),
]


def run_bvas_skin(v: Dict[str, Any]) -> Result:
    rash = int(parse_num(v.get("rash_bvas")))
    checked, details = _checkbox_points(v, _BVAS_CRITERIA)
    score = rash + checked
    interpretation = (
        f"BVAS Skin Component Score: {score}. This score contributes to the total BVAS. Higher score indicates "
        "greater skin-related vasculitis activity. (Note: Scoring assumes new/worse for checkbox items if "
        "checked)."
    )
    return make_result(score, interpretation, {"Rash": f"Score {rash}", **details})


BVAS_SKIN = Instrument(
    id="bvas_skin",
    name="BVAS - Skin Component",
    acronym="BVAS Skin",
    description="Scores skin manifestations for the Birmingham Vasculitis Activity Score (BVAS).",
    condition="Vasculitis",
    keywords=("bvas", "vasculitis", "skin involvement", "activity score", "rash", "ulcer", "gangrene"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(
            "rash_bvas", "Rash (Purpura, urticaria, other)",
            options([
                (0, "0 - Absent"),
                (1, "1 - Persistent (present at this visit, but also at last visit without worsening)"),
                (3, "3 - New/Worse (new onset or definite worsening since last visit)"),
            ]),
        ),
        checkbox_input("ulcer_bvas", "Skin Ulceration (non-digital, excluding major gangrene) (1 point if new/worse)"),
        checkbox_input("gangrene_bvas", "Major Digital Ischemia/Gangrene (6 points if new/worse)"),
        checkbox_input("other_skin_bvas", "Other Skin Lesions (e.g., nodules, livedo - 1 point if new/worse)"),
    ],
    compute=run_bvas_skin,
    score_range=(0, 11),
    references=(
        "Luqmani RA, et al. Birmingham Vasculitis Activity Score (BVAS) in systemic necrotizing vasculitis. "
        "QJM. 1994.",
        "Mukhtyar C, et al. Modification and validation of the Birmingham Vasculitis Activity Score (version 3). "
        "Ann Rheum Dis. 2009.",
    ),
)


# 7. SASI ──────────────────────────────────────────────────────────────────────
SASI_REGIONS = [
    ("luq", "Left Upper Quadrant (LUQ)"),
    ("ruq", "Right Upper Quadrant (RUQ)"),
    ("llq", "Left Lower Quadrant (LLQ)"),
    ("rlq", "Right Lower Quadrant (RLQ)"),
    ("nose", "Nose"),
]

_SASI_SEVERITY = options([(0, "0 – None"), (1, "1 – Mild"), (2, "2 – Moderate"), (3, "3 – Marked"), (4, "4 – Severe")])
_SASI_AREA = options([
    (0, "0 – None (0%)"), (1, "1 – < 10%"), (2, "2 – 10–30%"), (3, "3 – 31–50%"),
    (4, "4 – 51–70%"), (5, "5 – 71–90%"), (6, "6 – 91–100%"),
])

_SASI_BANDS = [("<=", 19, "Mild"), ("<=", 39, "Moderate")]


def run_sasi(v: Dict[str, Any]) -> Result:
    products = 0.0
    regional: Dict[str, Any] = {}
    for key, name in SASI_REGIONS:
        a = parse_num(v.get(f"sasi_area_{key}"))
        e = parse_num(v.get(f"sasi_erythema_{key}"))
        i = parse_num(v.get(f"sasi_induration_{key}"))
        d = parse_num(v.get(f"sasi_desquamation_{key}"))
        products += (e + i + d) * a
        regional[name] = {
            "Area_Score": a, "Erythema": e, "Induration": i, "Desquamation": d,
            "Severity_Sum_Per_Region": e + i + d, "Region_Product": (e + i + d) * a,
        }
    # Averaged over the facial regions rather than weighted.
    score = round_to(products / len(SASI_REGIONS), 2)
    category = band(score, _SASI_BANDS, "Severe")
    return make_result(score, f"Total SASI Score: {fmt(score)} (Range: 0-72). Severity Category: {category}.", {
        "Regional_Scores": regional,
        "Sum_Of_Region_Products": products,
        "Total_SASI_Score": score,
        "Severity_Category": category,
    })


SASI = Instrument(
    id="sasi",
    name="Sarcoidosis Activity and Severity Index",
    acronym="SASI",
    description=(
        "Quantifies cutaneous sarcoidosis severity by evaluating erythema, induration, desquamation and area "
        "involvement across five facial regions, yielding a total score from 0 to 72."
    ),
    condition="Cutaneous Sarcoidosis",
    keywords=("sasi", "sarcoidosis", "cutaneous sarcoidosis", "facial lesions", "erythema", "induration",
              "desquamation", "severity index"),
    source_type=SourceType.RESEARCH,
    sections=[
        group(
            f"sasi_group_{key}", f"Facial Region: {name}",
            [
                select_input(f"sasi_area_{key}", f"Area Involvement in {name}", _SASI_AREA),
                select_input(f"sasi_erythema_{key}", f"Erythema in {name}", _SASI_SEVERITY),
                select_input(f"sasi_induration_{key}", f"Induration in {name}", _SASI_SEVERITY),
                select_input(f"sasi_desquamation_{key}", f"Desquamation in {name}", _SASI_SEVERITY),
            ],
            grid_cols=2,
        )
        for key, name in SASI_REGIONS
    ],
    compute=run_sasi,
    score_range=(0, 72),
    references=(
        "Rosenbach M, Yeung H, Chu EY, et al. Reliability and Convergent Validity of the Cutaneous Sarcoidosis "
        "Activity and Morphology Instrument for Assessing Cutaneous Sarcoidosis. JAMA Dermatol. "
        "2013;149(5):550–556.",
        "Judson MA, Baughman RP, Costabel U, et al. Validation of the Sarcoidosis Assessment Instrument. "
        "Sarcoidosis Vasc Diffuse Lung Dis. 2008;25(3):165–172.",
    ),
)


# 8. DSSI ──────────────────────────────────────────────────────────────────────
# region key, name, body surface weight
DSSI_REGIONS = [
    ("head", "Head", 0.1),
    ("trunk", "Trunk", 0.2),
    ("ue", "Upper Extremities (UE)", 0.3),
    ("le", "Lower Extremities (LE)", 0.4),
]

_DSSI_SEVERITY = options([
    (0, "0 - None"), (1, "1 - Mild"), (2, "2 - Moderate"), (3, "3 - Moderate–Severe"), (4, "4 - Severe"),
])
_DSSI_AREA = options([
    (0, "0 - None (0%)"), (1, "1 - < 10%"), (2, "2 - 10–30%"), (3, "3 - 31–50%"),
    (4, "4 - 51–70%"), (5, "5 - 71–90%"), (6, "6 - > 90%"),
])

_DSSI_BANDS = [("<=", 17, "Minimal cutaneous involvement"), ("<=", 36, "Moderate involvement")]


def run_dssi(v: Dict[str, Any]) -> Result:
    total = 0.0
    regional: Dict[str, Any] = {}
    for key, name, weight in DSSI_REGIONS:
        a = parse_num(v.get(f"dssi_area_{key}"))
        r = parse_num(v.get(f"dssi_redness_{key}"))
        i = parse_num(v.get(f"dssi_induration_{key}"))
        s = parse_num(v.get(f"dssi_scaliness_{key}"))
        region_score = (r + i + s) * a * weight
        total += region_score
        regional[name] = {
            "Area_Score": a, "Redness": r, "Induration": i, "Scaliness": s,
            "Severity_Sum": r + i + s, "Calculated_Region_Score": round_to(region_score, 2),
        }
    score = round_to(total, 2)
    category = band(score, _DSSI_BANDS, "Severe involvement")
    return make_result(score, f"Total DSSI Score: {fmt(score)} (Range: 0-72). Severity Category: {category}.", {
        "Regional_Scores": regional,
        "Total_DSSI_Score": score,
        "Severity_Category": category,
    })


DSSI = Instrument(
    id="dssi",
    name="Dermatomyositis Skin Severity Index",
    acronym="DSSI",
    description=(
        "Adapts PASI for dermatomyositis, assessing erythema, induration, scaliness and area involvement across "
        "four body regions to yield a total score (0-72)."
    ),
    condition="Dermatomyositis",
    keywords=("dssi", "dermatomyositis", "skin severity", "erythema", "induration", "scaliness", "PASI"),
    source_type=SourceType.RESEARCH,
    sections=[
        group(
            f"dssi_group_{key}", f"{name} (BSA Weight: {int(weight * 100)}%)",
            [
                select_input(f"dssi_area_{key}", f"Percentage of {name} Involved", _DSSI_AREA,
                             description="Estimate % of this region affected."),
                select_input(f"dssi_redness_{key}", f"Erythema in {name}", _DSSI_SEVERITY),
                select_input(f"dssi_induration_{key}", f"Induration in {name}", _DSSI_SEVERITY),
                select_input(f"dssi_scaliness_{key}", f"Scaliness in {name}", _DSSI_SEVERITY),
            ],
            grid_cols=2,
        )
        for key, name, weight in DSSI_REGIONS
    ],
    compute=run_dssi,
    score_range=(0, 72),
    references=(
        "Carroll CL, Lang W, Snively B, Feldman SR, Callen J, Jorizzo JL. Development and validation of the "
        "Dermatomyositis Skin Severity Index. Br J Dermatol. 2008;158(2):345–350.",
        "Gaffney RG, Werth VP. Cutaneous outcome measures in dermatomyositis. Semin Arthritis Rheum. "
        "2020;50(3):458–462.",
    ),
)


INSTRUMENTS: List[Instrument] = [
    BILAG_SKIN, SLEDAI_SKIN, LOSCAT, MRSS, ESSDAI_CUTANEOUS, BVAS_SKIN, SASI, DSSI,
]
