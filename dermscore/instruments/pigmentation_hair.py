"""Pigmentation, hair and skin typing instruments: MASI/mMASI, VASI, VIDA, SALT, mFG and Fitzpatrick."""

from __future__ import annotations

import re
from typing import Any, Dict, List

from ..models import DisplayType, Instrument, Result, SourceType
from ..schema import group, number_input, options, select_input
from ..scoring import band, fmt, make_result, parse_num, parse_str, round_to


# 1. MASI / mMASI ──────────────────────────────────────────────────────────────
# region key, name, area multiplier
MASI_REGIONS = [
    ("forehead", "Forehead", 0.3),
    ("right_malar", "Right Malar", 0.3),
    ("left_malar", "Left Malar", 0.3),
    ("chin", "Chin", 0.1),
]

_MASI_AREA = options(
    (i, f"{i} ({pct})")
    for i, pct in enumerate(["0%", "<10%", "10-29%", "30-49%", "50-69%", "70-89%", "90-100%"])
)
_MASI_INTENSITY = options(
    (i, f"{i} ({word})") for i, word in enumerate(["None", "Slight", "Mild", "Moderate", "Marked"])
)

_MASI_BANDS = [("<=", 0, "No melasma."), ("<", 16, "Mild melasma."), ("<=", 32, "Moderate melasma.")]
_MMASI_BANDS = [("<=", 0, "No melasma."), ("<", 8, "Mild melasma."), ("<=", 16, "Moderate melasma.")]


def run_masi_mmasi(v: Dict[str, Any]) -> Result:
    variant = parse_str(v.get("masi_type"), "masi").strip().lower()
    if variant not in ("masi", "mmasi"):
        variant = "masi"
    with_homogeneity = variant == "masi"

    total = 0.0
    regional: Dict[str, Any] = {}
    for key, name, multiplier in MASI_REGIONS:
        a = parse_num(v.get(f"{key}_area"))
        d = parse_num(v.get(f"{key}_darkness"))
        h = parse_num(v.get(f"{key}_homogeneity")) if with_homogeneity else 0.0
        regional_score = (d + h) * a * multiplier
        total += regional_score
        regional[name] = {
            "Area": a, "Darkness": d, "Homogeneity": h if with_homogeneity else "N/A",
            "Regional_Score": round_to(regional_score, 2),
        }
    score = round_to(total, 2)

    interpretation = f"Total {variant.upper()} Score: {fmt(score)}. "
    if with_homogeneity:
        interpretation += band(score, _MASI_BANDS, "Severe melasma.")
        interpretation += " (MASI Range: 0-48. Severity bands example: <16 Mild, 16-32 Moderate, >32 Severe)."
    else:
        interpretation += band(score, _MMASI_BANDS, "Severe melasma.")
        interpretation += " (mMASI Range: 0-24. Severity bands are less standardized for mMASI but can be inferred)."
    return make_result(score, interpretation, {"type": variant.upper(), **regional})


MASI_MMASI = Instrument(
    id="masi_mmasi",
    name="Melasma Area & Severity Index (MASI/mMASI)",
    acronym="MASI/mMASI",
    description=(
        "Assesses the severity of melasma by evaluating area of involvement, darkness, and homogeneity "
        "(for MASI)."
    ),
    condition="Melasma",
    keywords=("masi", "mmasi", "melasma", "pigmentation", "severity"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(
            "masi_type", "MASI Type",
            options([("masi", "MASI (includes Homogeneity)"), ("mmasi", "mMASI (excludes Homogeneity)")]),
        ),
        *[
            group(
                f"masi_group_{key}", f"{name} (Area Multiplier x{multiplier})",
                [
                    select_input(f"{key}_area", "Area (A)", _MASI_AREA),
                    select_input(f"{key}_darkness", "Darkness (D)", _MASI_INTENSITY),
                    select_input(f"{key}_homogeneity", "Homogeneity (H) (MASI only)", _MASI_INTENSITY,
                                 description="Skip for mMASI"),
                ],
                grid_cols=3,
            )
            for key, name, multiplier in MASI_REGIONS
        ],
    ],
    compute=run_masi_mmasi,
    score_range=(0, 48),
    references=(
        "MASI: Kimbrough-Green CK, et al. Arch Dermatol. 1994.",
        "mMASI: Pandya AG, et al. J Am Acad Dermatol. 2011.",
    ),
)


# 2. VASI ──────────────────────────────────────────────────────────────────────
VASI_REGIONS = [
    "Hands",
    "Upper Extremities (excluding Hands)",
    "Trunk",
    "Lower Extremities (excluding Feet)",
    "Feet",
    "Head/Neck",
]

VASI_CAP = 100.0

_VASI_DEPIGMENTATION = options([
    (1, "100% Depigmentation"), (0.9, "90% Depigmentation"), (0.75, "75% Depigmentation"),
    (0.5, "50% Depigmentation"), (0.25, "25% Depigmentation"), (0.1, "10% Depigmentation"),
    (0, "0% Depigmentation (No depigmentation)"),
])


def vasi_region_id(name: str) -> str:
    """Field id prefix for a region name, e.g. Head/Neck becomes head_neck."""
    return re.sub(r"[\s()/]+", "_", name.lower())


def run_vasi(v: Dict[str, Any]) -> Result:
    total = 0.0
    facial = 0.0
    regional: Dict[str, Any] = {}
    for name in VASI_REGIONS:
        rid = vasi_region_id(name)
        hand_units = parse_num(v.get(f"{rid}_hand_units"))
        depigmentation = parse_num(v.get(f"{rid}_depigmentation_percent"))
        regional_score = hand_units * depigmentation
        total += regional_score
        if rid == "head_neck":
            facial = regional_score
        regional[name] = {
            "Hand_Units": hand_units,
            "Depigmentation_Multiplier": depigmentation,
            "Regional_VASI_Score": round_to(regional_score, 2),
        }
    capped_total = min(total, VASI_CAP)
    capped_facial = min(facial, VASI_CAP)
    interpretation = (
        f"Total VASI (T-VASI): {fmt(capped_total, 2)} (Range: 0-100). Facial VASI (F-VASI): "
        f"{fmt(capped_facial, 2)}. Higher score indicates more extensive depigmentation. VASI is used to track "
        "changes over time (e.g., VASI50 for 50% improvement). No universal baseline severity bands defined."
    )
    return make_result(capped_total, interpretation, {
        "Total_VASI_Uncapped": round_to(total, 2),
        "Facial_VASI_Uncapped": round_to(facial, 2),
        **regional,
    })


VASI = Instrument(
    id="vasi",
    name="Vitiligo Area Scoring Index (VASI)",
    acronym="VASI",
    description=(
        "Quantifies the extent of vitiligo by assessing the percentage of depigmentation in different body "
        "regions, weighted by hand units."
    ),
    condition="Vitiligo",
    keywords=("vasi", "vitiligo", "depigmentation", "area scoring"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        group(
            f"vasi_group_{vasi_region_id(name)}", f"Region: {name}",
            [
                number_input(f"{vasi_region_id(name)}_hand_units", "Hand Units (HU)",
                             description="Area in patient's hand units (1 HU ~ 1% BSA)."),
                select_input(f"{vasi_region_id(name)}_depigmentation_percent", "Depigmentation %",
                             _VASI_DEPIGMENTATION, default=0),
            ],
            grid_cols=2,
        )
        for name in VASI_REGIONS
    ],
    compute=run_vasi,
    score_range=(0, VASI_CAP),
    references=(
        "Hamzavi I, Jain H, McLean D, et al. Parametric modeling of the vitiligo area scoring index (VASI). "
        "Arch Dermatol. 2004;140(6):677-683.",
    ),
)


# 3. VIDA ──────────────────────────────────────────────────────────────────────
_VIDA_ACTIVITY = options([
    (4, "+4 (Active for ≤6 weeks: new lesions and/or spread of existing lesions)"),
    (3, "+3 (Active for 6 weeks to 3 months)"),
    (2, "+2 (Active for 3 to 6 months)"),
    (1, "+1 (Active for 6 to 12 months)"),
    (0, "0 (Stable for ≥1 year: no new lesions, no spread, no repigmentation)"),
    (-1, "-1 (Regressive for ≥1 year: spontaneous repigmentation, no new lesions, no spread)"),
])


def run_vida(v: Dict[str, Any]) -> Result:
    score = int(parse_num(v.get("activity_status")))
    label = next((opt.label for opt in _VIDA_ACTIVITY if opt.value == score), "Invalid score")
    if score > 0:
        status = "Indicates active disease."
    elif score == 0:
        status = "Indicates stable disease."
    else:
        status = "Indicates regressive disease with spontaneous repigmentation."
    sign = "" if score < 0 else "+"
    return make_result(score, f"VIDA Score: {sign}{score}. ({label}). {status}", {"vida_description": label})


VIDA = Instrument(
    id="vida",
    name="Vitiligo Disease Activity (VIDA) Score",
    acronym="VIDA",
    description=(
        "Assesses current vitiligo activity based on the patient's perception of new lesions, spread of "
        "existing lesions, or repigmentation over specific timeframes."
    ),
    condition="Vitiligo",
    keywords=("vida", "vitiligo", "activity", "patient reported"),
    source_type=SourceType.RESEARCH,
    sections=[select_input("activity_status", "Current Vitiligo Activity Status", _VIDA_ACTIVITY, default=0)],
    compute=run_vida,
    score_range=(-1, 4),
    references=(
        "Njoo MD, Spuls PI, Bos JD, Westerhof W, Bossuyt PM. Nonsurgical repigmentation therapies in vitiligo. "
        "Meta-analysis of the literature. Arch Dermatol. 1998;134(12):1532-1540.",
        "Njoo MD, Das PK, Bos JD, Westerhof W. Association of the Koebner phenomenon with disease activity and "
        "therapeutic responsiveness in vitiligo. Arch Dermatol. 2000;136(3):414-5.",
    ),
)


# 4. SALT ──────────────────────────────────────────────────────────────────────
# region key, name, share of scalp
SALT_REGIONS = [
    ("vertex", "Vertex", 0.40),
    ("right_side", "Right Side", 0.18),
    ("left_side", "Left Side", 0.18),
    ("posterior", "Posterior (Back of Head)", 0.24),
]

_SALT_BANDS = [
    ("<=", 0, "S0 - No hair loss"),
    ("<=", 25, "S1 - Mild (≤25% loss)"),
    ("<=", 50, "S2 - Moderate (26–50% loss)"),
    ("<=", 75, "S3 - Severe (51–75% loss)"),
    ("<", 100, "S4 - Very Severe (76–99% loss)"),
]


def run_salt(v: Dict[str, Any]) -> Result:
    total = 0.0
    details: Dict[str, Any] = {}
    for key, name, weight in SALT_REGIONS:
        loss = parse_num(v.get(f"salt_loss_percent_{key}"))
        contribution = loss * weight
        total += contribution
        details[f"{name}_Contribution"] = round_to(contribution, 1)
    score = round_to(total, 1)
    category = band(score, _SALT_BANDS, "S5 - Alopecia Totalis (100% loss)")
    details.update({"Total_SALT_Score": score, "Severity_Category": category})
    return make_result(
        score, f"Total SALT Score: {fmt(score)} (Range: 0-100). Severity Category: {category}.", details,
    )


SALT = Instrument(
    id="salt",
    name="Severity of Alopecia Tool (SALT Score)",
    acronym="SALT",
    description=(
        "Quantifies the extent of scalp hair loss in alopecia areata as a percentage of total scalp area, "
        "summing the weighted hair loss of four regions: Vertex (40%), Right Side (18%), Left Side (18%) and "
        "Posterior (24%)."
    ),
    condition="Alopecia Areata",
    keywords=("salt", "alopecia areata", "hair loss", "scalp involvement", "naaf"),
    source_type=SourceType.RESEARCH,
    sections=[
        group(
            "salt_inputs_group", "Scalp Hair Loss Assessment",
            [
                number_input(
                    f"salt_loss_percent_{key}", f"Percentage Hair Loss in {name} ({int(weight * 100)}%)",
                    max=100, step=1,
                    description=f"Enter the percentage of hair loss (0-100) for the {name} area.",
                )
                for key, name, weight in SALT_REGIONS
            ],
            grid_cols=2,
            description="For each of the four scalp regions, estimate the percentage of hair loss (0-100%).",
        ),
    ],
    compute=run_salt,
    score_range=(0, 100),
    references=(
        "Olsen EA, Hordinsky MK, Price VH, et al. Alopecia areata investigational assessment guidelines--Part II. "
        "National Alopecia Areata Foundation. J Am Acad Dermatol. 2004 Sep;51(3):440-7.",
    ),
)


# 5. mFG ───────────────────────────────────────────────────────────────────────
MFG_AREAS = ["Upper Lip", "Chin", "Chest", "Upper Back", "Lower Back", "Upper Abdomen", "Lower Abdomen", "Arm", "Thigh"]

_MFG_GRADES = options(
    (i, f"{i} - {word}") for i, word in enumerate(["Absent", "Minimal", "Mild", "Moderate", "Severe"])
)

_MFG_BANDS = [
    ("<", 8, "Normal hair growth or clinically insignificant hirsutism."),
    ("<=", 15, "Mild hirsutism."),
]


def _mfg_key(area: str) -> str:
    return area.lower().replace(" ", "_")


def run_mfg_score(v: Dict[str, Any]) -> Result:
    area_scores = {area.replace(" ", "_"): parse_num(v.get(f"fg_{_mfg_key(area)}")) for area in MFG_AREAS}
    total = sum(area_scores.values())
    severity = band(total, _MFG_BANDS, "Moderate to Severe hirsutism.")
    interpretation = (
        f"mFG Score: {fmt(total)} (Range: 0-36). {severity} A score of ≥8 is often used to define hirsutism."
    )
    return make_result(total, interpretation, area_scores)


MFG_SCORE = Instrument(
    id="mfg_score",
    name="Ferriman-Gallwey Score (mFG)",
    acronym="mFG Score",
    description="Evaluates hirsutism in women by grading terminal hair growth in nine body areas.",
    condition="Hirsutism",
    keywords=("mfg", "ferriman-gallwey", "hirsutism", "hair growth", "women"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(
            f"fg_{_mfg_key(area)}", f"{area} Score (0-4)", _MFG_GRADES,
            description="0=Absent, 1=Minimal, 2=Mild, 3=Moderate, 4=Severe terminal hair.",
        )
        for area in MFG_AREAS
    ],
    compute=run_mfg_score,
    score_range=(0, 36),
    references=(
        "Ferriman D, Gallwey JD. Clinical assessment of body hair growth in women. J Clin Endocrinol Metab. "
        "1961;21:1440-7.",
        "Hatch R, Rosenfield RL, Kim MH, Tredway D. Hirsutism: implications, etiology, and management. "
        "Am J Obstet Gynecol. 1981;140(7):815-30.",
    ),
)


# 6. Fitzpatrick skin type ─────────────────────────────────────────────────────
_FITZPATRICK_TYPES = options([
    (1, "Type I: Always burns, never tans (pale white skin; blond or red hair; blue eyes; freckles)."),
    (2, "Type II: Usually burns, tans minimally (white skin; fair; blond or red hair; blue, green, or hazel eyes)."),
    (3, "Type III: Sometimes mild burn, tans uniformly (cream white skin; fair with any eye or hair color; "
        "very common)."),
    (4, "Type IV: Burns minimally, always tans well (moderate brown skin; typical Mediterranean Caucasian skin)."),
    (5, "Type V: Very rarely burns, tans very easily (dark brown skin; Middle Eastern skin types)."),
    (6, "Type VI: Never burns, tans very easily (deeply pigmented dark brown to black skin)."),
])


def run_fitzpatrick_skin_type(v: Dict[str, Any]) -> Result:
    skin_type = int(parse_num(v.get("fitzpatrick_type"), 3))
    description = next((opt.label for opt in _FITZPATRICK_TYPES if opt.value == skin_type), "Invalid type selected.")
    return make_result(
        skin_type,
        f"Fitzpatrick Skin Type {skin_type}. Description: {description}",
        {"classification_description": description},
    )


FITZPATRICK_SKIN_TYPE = Instrument(
    id="fitzpatrick_skin_type",
    name="Fitzpatrick Skin Type Classification",
    acronym="Fitzpatrick Scale",
    description=(
        "A categorical system to classify skin based on its response to UV radiation (burning and tanning). "
        "Used to guide phototherapy dosing, predict photodamage risk and select cosmetic procedures."
    ),
    condition="Skin Typing",
    keywords=("fitzpatrick", "skin type", "sun sensitivity", "uv", "tanning", "photodamage", "phototherapy"),
    source_type=SourceType.RESEARCH,
    display_type=DisplayType.STATIC_LIST,
    rationale=(
        "Developed to categorize individuals by their skin's response to ultraviolet radiation, specifically "
        "the tendency to burn and the ability to tan. It was introduced to estimate UV sensitivity for psoriasis "
        "phototherapy and is now used to stratify the risk of photodamage and skin cancer. It is a categorical "
        "classification based on a structured interview about natural skin colour, sunburn history and tanning "
        "response, not a numerical score."
    ),
    clinical_performance=(
        "Not a diagnostic test, so sensitivity and specificity do not apply. Inter-rater agreement is moderate "
        "(kappa 0.4–0.7) and higher for trained dermatologists than for self-assessment. Accuracy is limited in "
        "ethnically diverse populations, particularly for types V and VI. Reflectance spectrophotometry "
        "correlates well with clinician-assigned type and has been proposed as an objective alternative."
    ),
    sections=[select_input("fitzpatrick_type", "Select Fitzpatrick Skin Type", _FITZPATRICK_TYPES, default=3)],
    compute=run_fitzpatrick_skin_type,
    score_range=(1, 6),
    references=(
        "Gupta V, Sharma VK. Skin Typing: Fitzpatrick Grading and Others. Clin Dermatol. 2019;37(5):430-436.",
        "Roberts WE. Skin Type Classification Systems Old and New. Dermatol Clin. 2009;27(4):529-33.",
        "Eilers S, Bach DQ, Gaber R, et al. Accuracy of Self-report in Assessing Fitzpatrick Skin Phototypes I "
        "Through VI. JAMA Dermatol. 2013;149(11):1289-94.",
        "Pershing LK, Tirumala VP, Nelson JL, et al. Reflectance Spectrophotometer: The Dermatologists' "
        "Sphygmomanometer for Skin Phototyping? J Invest Dermatol. 2008;128(7):1633-40.",
    ),
)


INSTRUMENTS: List[Instrument] = [MASI_MMASI, VASI, VIDA, SALT, MFG_SCORE, FITZPATRICK_SKIN_TYPE]
