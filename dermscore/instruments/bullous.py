"""Autoimmune blistering disease instruments: ABSIS, BPDAI and PDAI."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import Instrument, Result, SourceType
from ..schema import checkbox_input, group, number_input, options, select_input
from ..scoring import band, fmt, make_result, parse_bool, parse_num, round_to

PEMPHIGUS = "Pemphigus Vulgaris, Pemphigus Foliaceus"


# 1. ABSIS ─────────────────────────────────────────────────────────────────────
# region key, name, share of body surface
ABSIS_REGIONS = [
    ("head_neck", "Head & Neck", 0.09),
    ("trunk_anterior", "Trunk Anterior", 0.18),
    ("trunk_posterior", "Trunk Posterior", 0.18),
    ("right_upper_extremity", "Right Upper Extremity (incl. hand)", 0.09),
    ("left_upper_extremity", "Left Upper Extremity (incl. hand)", 0.09),
    ("right_lower_extremity", "Right Lower Extremity (incl. foot)", 0.18),
    ("left_lower_extremity", "Left Lower Extremity (incl. foot)", 0.18),
    ("genital_area", "Genital Area", 0.01),
]

ABSIS_MUCOSAL_SITES = [
    ("buccal", "Buccal mucosa"),
    ("palate", "Palate"),
    ("tongue", "Tongue"),
    ("pharynx", "Pharynx"),
    ("larynx", "Larynx"),
    ("conjunctiva", "Conjunctiva"),
    ("nasal", "Nasal mucosa"),
    ("esophagus", "Esophagus (if tested)"),
    ("genital", "Genital mucosa"),
    ("rectal_anal", "Rectal/anal mucosa"),
    ("other_mucosal", "Other mucosal (specify)"),
]

HEALED_QUALITY = 0.5

_ABSIS_QUALITY = options([
    (0.5, "0.5 - Re-epithelialized (Healed)"),
    (1.0, "1.0 - Dry, Erosive"),
    (1.5, "1.5 - Exudative, Erosive"),
])

_ABSIS_BANDS = [("<=", 6.4, "Mild"), ("<=", 31.5, "Moderate")]


def run_absis(v: Dict[str, Any]) -> Result:
    skin_fraction = 0.0
    skin_details: Dict[str, Any] = {}
    for key, name, weight in ABSIS_REGIONS:
        percent = parse_num(v.get(f"absis_skin_area_percent_{key}"))
        quality = parse_num(v.get(f"absis_skin_quality_{key}"), HEALED_QUALITY) or HEALED_QUALITY
        contribution = percent / 100 * weight * quality
        skin_fraction += contribution
        skin_details[name] = {
            "percent_affected_in_region": percent,
            "quality_score_value": quality,
            "weighted_contribution": round_to(contribution * 100, 2),
        }
    # A fully involved, exudative body surface scores 150.
    skin = round_to(skin_fraction * 100, 1)

    mucosal_details = {name: parse_num(v.get(f"absis_mucosal_{key}")) for key, name in ABSIS_MUCOSAL_SITES}
    mucosal = sum(mucosal_details.values())
    oral = parse_num(v.get("absis_oral_discomfort_vas"))

    total = skin + mucosal + oral
    category = band(total, _ABSIS_BANDS, "Severe")
    interpretation = "\n".join([
        f"Total ABSIS Score: {fmt(total, 1)} (Range: 0-206).",
        f"Skin Score: {fmt(skin, 1)} (Max: 150).",
        f"Mucosal Score: {fmt(mucosal)} (Max: 11).",
        f"Oral Discomfort Score: {fmt(oral)} (Max: 45).",
        f"Severity Category: {category} (Mild: ≤6.4; Moderate: >6.4 to ≤31.5; Severe: >31.5).",
    ])
    return make_result(round_to(total, 1), interpretation, {
        "Skin_Score_Calculated": skin,
        "Mucosal_Score_Calculated": mucosal,
        "Oral_Discomfort_Score_Input": oral,
        "Total_ABSIS_Score_Calculated": round_to(total, 1),
        "Severity_Category": category,
        "Skin_Regional_Details": skin_details,
        "Mucosal_Site_Details": mucosal_details,
    })


ABSIS = Instrument(
    id="absis",
    name="Autoimmune Bullous Skin Disorder Intensity Score",
    acronym="ABSIS",
    description=(
        "Clinician-reported instrument to quantify disease severity in pemphigus, combining objective measures "
        "of skin and mucosal involvement with patient-reported oral discomfort."
    ),
    condition=PEMPHIGUS,
    keywords=("absis", "pemphigus", "bullous disease", "body surface area", "blister", "erosion",
              "mucosal involvement", "oral pain"),
    source_type=SourceType.RESEARCH,
    sections=[
        *[
            group(
                f"absis_skin_group_{key}", f"{name} (Region BSA: {int(round(weight * 100))}%)",
                [
                    number_input(
                        f"absis_skin_area_percent_{key}", "% of this Region Affected", max=100, step=1,
                        description=f"Enter percentage (0-100) of the {name} that has lesions.",
                    ),
                    select_input(
                        f"absis_skin_quality_{key}", "Predominant Lesion Quality in Affected Part", _ABSIS_QUALITY,
                        default=HEALED_QUALITY,
                    ),
                ],
                grid_cols=2,
                description="Skin involvement (max 150): share of this region with lesions and their quality.",
            )
            for key, name, weight in ABSIS_REGIONS
        ],
        group(
            "absis_mucosal_overall_group", "Mucosal Involvement (Max Score: 11)",
            [
                select_input(f"absis_mucosal_{key}", name, options([(0, "Absent"), (1, "Present")]))
                for key, name in ABSIS_MUCOSAL_SITES
            ],
            grid_cols=2,
        ),
        group(
            "absis_oral_discomfort_group", "Oral Discomfort (Patient-Reported, Max Score: 45)",
            [
                number_input(
                    "absis_oral_discomfort_vas", "Oral Discomfort VAS (0-45)", max=45, step=1,
                    description="Patient rates oral discomfort during eating/drinking (0=none; 45=worst imaginable).",
                ),
            ],
            grid_cols=1,
        ),
    ],
    compute=run_absis,
    score_range=(0, 206),
    references=(
        "Pfütze M, et al. Introducing a novel Autoimmune Bullous Skin Disorder Intensity Score (ABSIS) in "
        "Pemphigus. J Eur Acad Dermatol Venereol. 2007;21(3):317–324.",
        "Mardani N, et al. Estimated cut-off values for pemphigus severity classification using the ABSIS "
        "scoring system. BMC Dermatol. 2020;20:36.",
    ),
)


# 2. BPDAI ─────────────────────────────────────────────────────────────────────
BPDAI_REGIONS = [("hn", "Head/Neck"), ("tr", "Trunk"), ("ul", "Upper Limbs"), ("ll", "Lower Limbs")]

BPDAI_MUCOSAL_SITES = [("oral", "Oral"), ("ocular", "Ocular"), ("nasal", "Nasal"), ("genital_anal", "Genital/Anal")]

_BPDAI_COUNT = options([(0, "0 (No lesions)"), (1, "1 (1-3 lesions)"), (2, "2 (4-10 lesions)"), (3, "3 (>10 lesions)")])
_BPDAI_BSA = options([(0, "0 (0%)"), (1, "1 (<10%)"), (2, "2 (10-30%)"), (3, "3 (>30%)")])

# Masmoudi et al. 2020 cut-offs; a zero total is reported as remission.
_BPDAI_BANDS = [("<=", 0, "No activity/Remission"), ("<=", 11, "Mild BP"), ("<=", 32, "Moderate BP")]


def _bpdai_lesion_score(v: Dict[str, Any], prefix: str):
    subtotal = 0.0
    per_region: Dict[str, Any] = {}
    for key, name in BPDAI_REGIONS:
        count = parse_num(v.get(f"{prefix}_num_{key}"))
        bsa = parse_num(v.get(f"{prefix}_bsa_{key}"))
        subtotal += count + bsa
        per_region[name] = {"count_score": count, "bsa_score": bsa, "total": count + bsa}
    return subtotal, per_region


def run_bpdai(v: Dict[str, Any]) -> Result:
    blisters, blister_details = _bpdai_lesion_score(v, "blisters")
    urticaria, urticaria_details = _bpdai_lesion_score(v, "urticaria")
    mucosal_details = {name: int(parse_bool(v.get(f"mucosal_{key}"))) for key, name in BPDAI_MUCOSAL_SITES}
    mucosal = sum(mucosal_details.values())
    pruritus = round_to(parse_num(v.get("pruritus_vas")), 1)

    total = round_to(blisters + urticaria + mucosal + pruritus, 1)
    category = band(total, _BPDAI_BANDS, "Severe BP")
    interpretation = "\n".join([
        f"Total BPDAI Score: {fmt(total, 1)} (Range: 0-62).",
        f"Severity (Masmoudi et al. 2020): {category}.",
        "(Bands: 0-11 Mild; 12-32 Moderate; ≥33 Severe).",
        f"Subscores: Skin Blisters/Erosions: {fmt(blisters)}, Skin Urticarial/Erythema: {fmt(urticaria)}, "
        f"Mucosal: {mucosal}, Pruritus VAS: {fmt(pruritus, 1)}.",
    ])
    return make_result(total, interpretation, {
        "Skin_Blisters_Erosions": blister_details,
        "Skin_Urticarial_Erythema": urticaria_details,
        "Mucosal_Involvement": mucosal_details,
        "Skin_Blisters_Erosions_Subtotal": blisters,
        "Skin_Urticarial_Erythema_Subtotal": urticaria,
        "Mucosal_Involvement_Subtotal": mucosal,
        "Pruritus_VAS_Score": pruritus,
        "Total_BPDAI_Activity_Score": total,
        "Severity_Category_Masmoudi2020": category,
    })


def _bpdai_lesion_group(prefix: str, title: str):
    return group(
        f"bpdai_skin_{prefix}_group", title,
        [
            field
            for key, name in BPDAI_REGIONS
            for field in (
                select_input(f"{prefix}_num_{key}", f"{name} - Lesion Count", _BPDAI_COUNT),
                select_input(f"{prefix}_bsa_{key}", f"{name} - BSA %", _BPDAI_BSA),
            )
        ],
        grid_cols=2,
        description="Assess number of lesions and BSA % involvement for each region.",
    )


BPDAI = Instrument(
    id="bpdai",
    name="Bullous Pemphigoid Disease Area Index",
    acronym="BPDAI",
    description=(
        "Quantifies disease severity in bullous pemphigoid by scoring blisters/erosions and urticarial "
        "plaques/erythema across 4 body regions, mucosal involvement at 4 sites, and pruritus. Total 0-62."
    ),
    condition="Bullous Pemphigoid",
    keywords=("bpdai", "bullous pemphigoid", "lesion scoring", "mucosal involvement", "urticaria", "erythema",
              "blister", "activity index", "pruritus"),
    source_type=SourceType.RESEARCH,
    sections=[
        _bpdai_lesion_group("blisters", "Skin Activity - Blisters/Erosions (Max Score: 24)"),
        _bpdai_lesion_group("urticaria", "Skin Activity - Urticarial Plaques/Erythema (Max Score: 24)"),
        group(
            "bpdai_mucosal_group", "Mucosal Involvement (Max Score: 4)",
            [checkbox_input(f"mucosal_{key}", name) for key, name in BPDAI_MUCOSAL_SITES],
            grid_cols=2,
            description="Check all affected mucosal sites (1 point per site).",
        ),
        group(
            "bpdai_pruritus_group", "Pruritus (Max Score: 10)",
            [
                number_input(
                    "pruritus_vas", "Pruritus VAS (0-10 cm)", max=10, step=0.1,
                    description="Patient rates average itch intensity over past 24h (0=no itch, 10=worst "
                                "imaginable itch).",
                ),
            ],
            grid_cols=1,
        ),
    ],
    compute=run_bpdai,
    score_range=(0, 62),
    references=(
        "Murrell DF, Daniel BS, Joly P, et al. Definitions and outcome measures for bullous pemphigoid: "
        "recommendations by an international group of experts. J Am Acad Dermatol. 2012 Mar;66(3):479-85.",
        "Masmoudi W, et al. International validation of BPDAI and calculation of cut-off values defining mild, "
        "moderate, and severe BP. Br J Dermatol. 2020;183(2):426–433.",
    ),
)


# 3. PDAI ──────────────────────────────────────────────────────────────────────
_PDAI_BANDS = [
    ("<=", 0, "No activity (remission). "),
    ("<", 15, "Mild pemphigus activity. "),
    ("<=", 45, "Moderate pemphigus activity. "),
]


def run_pdai(v: Dict[str, Any]) -> Result:
    skin = parse_num(v.get("pdai_skin_activity"))
    scalp = parse_num(v.get("pdai_scalp_activity"))
    mucosal = parse_num(v.get("pdai_mucosal_activity"))
    total = skin + scalp + mucosal
    severity = band(total, _PDAI_BANDS, "Severe pemphigus activity. ")
    interpretation = "\n".join([
        f"Total PDAI Score: {fmt(total, 0)} (Max: 250, based on Skin 0-120, Scalp 0-10, Mucosal 0-120).",
        f"Severity: {severity}",
        "(Commonly cited cut-offs: <15 Mild, 15-45 Moderate, >45 Severe for a combined score; the original PDAI "
        "interpretation focuses on individual domain scores or trial-specific definitions).",
    ])
    return make_result(total, interpretation, {
        "Skin_Activity_Score": skin,
        "Scalp_Activity_Score": scalp,
        "Mucosal_Activity_Score": mucosal,
        "Total_Calculated_PDAI": total,
        "Severity_Interpretation": severity,
    })


PDAI = Instrument(
    id="pdai",
    name="Pemphigus Disease Area Index (PDAI)",
    acronym="PDAI",
    description=(
        "Clinician-reported scoring system for pemphigus activity. This version uses pre-calculated sub-scores "
        "for Skin, Scalp, and Mucosal involvement."
    ),
    condition=PEMPHIGUS,
    keywords=("pdai", "pemphigus", "severity", "blister", "mucosal", "skin activity"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        number_input("pdai_skin_activity", "Skin Activity Score (0-120)", max=120,
                     description="Enter the calculated skin activity score based on lesion counts and extent "
                                 "across 12 body areas."),
        number_input("pdai_scalp_activity", "Scalp Activity Score (0-10)", max=10,
                     description="Enter the calculated scalp activity score."),
        number_input("pdai_mucosal_activity", "Mucosal Activity Score (0-120)", max=120,
                     description="Enter the calculated mucosal activity score based on involvement of 12 mucosal "
                                 "sites."),
    ],
    compute=run_pdai,
    score_range=(0, 250),
    references=(
        "Harmon K, et al. Development of the Pemphigus Disease Area Index (PDAI). J Invest Dermatol. "
        "2008;128(5):1200-1206.",
        "Murrell DF, et al. Definitions and outcome measures for pemphigus: recommendations by an international "
        "panel of experts. J Am Acad Dermatol. 2008;58(6):1043-1046.",
    ),
)


INSTRUMENTS: List[Instrument] = [ABSIS, BPDAI, PDAI]
