"""
Pyoderma gangrenosum diagnostic frameworks: Delphi consensus, PARACELSUS and Su.

Delphi and Su are criteria sets (a mandatory major subset plus a minor count);
they score 1 when met and 0 otherwise. PARACELSUS is a weighted point score.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from ..models import Instrument, Result, SourceType
from ..schema import group, options, select_input
from ..scoring import make_result, parse_num

CONDITION = "Pyoderma Gangrenosum"

_PRESENT_ABSENT = options([(1, "Present"), (0, "Absent")])

# field id, label
Criterion = Tuple[str, str]


def _criteria_inputs(criteria: Sequence[Criterion]):
    return [select_input(field_id, label, _PRESENT_ABSENT, default=0) for field_id, label in criteria]


def _present(v: Dict[str, Any], field_id: str) -> int:
    return 1 if parse_num(v.get(field_id)) == 1 else 0


# 1. Delphi consensus ──────────────────────────────────────────────────────────
DELPHI_MAJOR = ("pg_delphi_major_biopsy",
                "Biopsy of ulcer edge demonstrating a neutrophilic infiltrate without vasculitis or infection")

DELPHI_MINOR: List[Criterion] = [
    ("pg_delphi_minor_exclude_infxn", "Exclusion of infection by appropriate cultures and/or histology"),
    ("pg_delphi_minor_pathergy",
     "History of pathergy (new lesion or ulceration at site of minor trauma or surgery)"),
    ("pg_delphi_minor_ibd_or_arth", "History of inflammatory bowel disease or inflammatory arthritis"),
    ("pg_delphi_minor_rapid_ulcer",
     "History of papule, pustule, or vesicle that rapidly ulcerated (≤ 4 days) prior to presentation"),
    ("pg_delphi_minor_erythema_border",
     "Peripheral erythema, undermining borders, and tenderness at the ulcer site"),
    ("pg_delphi_minor_multiple_ulcers", "Multiple ulcerations, at least one located on an anterior lower leg"),
    ("pg_delphi_minor_cribriform_scars", "Cribriform (‘wrinkled paper’) scars at healed ulcer sites"),
    ("pg_delphi_minor_response_immu",
     "Decrease in ulcer size within one month of initiating immunosuppressive medication(s)"),
]

DELPHI_MINOR_REQUIRED = 4


def run_pg_delphi(v: Dict[str, Any]) -> Result:
    major = _present(v, DELPHI_MAJOR[0])
    minors = {field_id: _present(v, field_id) for field_id, _ in DELPHI_MINOR}
    minor_count = sum(minors.values())
    meets = major == 1 and minor_count >= DELPHI_MINOR_REQUIRED

    if meets:
        interpretation = (
            f"Meets Delphi Criteria (Major criterion present AND {minor_count} of 8 minor criteria present).\n"
            "Sensitivity: ~86%, Specificity: ~90%.\n"
            "High likelihood of true ulcerative PG; supports initiation of immunosuppressive therapy."
        )
    else:
        interpretation = (
            f"Does Not Meet Delphi Criteria. Major criterion present: {'Yes' if major else 'No'}. "
            f"Minor criteria met: {minor_count} of 8 (requires ≥4).\n"
            "Consider alternative diagnoses (e.g., venous stasis ulcer, vasculitis, infection)."
        )
    return make_result(1 if meets else 0, interpretation, {
        "major_biopsy_present": major,
        "minor_criteria_count": minor_count,
        "minor_criteria_individual_scores": minors,
        "meets_delphi_criteria": meets,
    })


PG_DELPHI = Instrument(
    id="pg_delphi",
    name="Delphi Consensus Criteria for Ulcerative Pyoderma Gangrenosum",
    acronym="Delphi Criteria (PG)",
    description=(
        "Requires one major criterion (histopathology showing a neutrophilic infiltrate at the ulcer edge, "
        "without vasculitis or infection) plus at least four of eight minor criteria. Meeting both yields "
        "sensitivity ≈ 86% and specificity ≈ 90% for ulcerative PG."
    ),
    condition=CONDITION,
    keywords=("delphi", "pyoderma gangrenosum", "ulcerative", "diagnostic criteria", "neutrophilic infiltrate",
              "pathergy", "inflammatory bowel disease"),
    source_type=SourceType.RESEARCH,
    sections=[
        group("pg_delphi_major_criterion_group", "Major Criterion (Required)", _criteria_inputs([DELPHI_MAJOR]),
              grid_cols=1),
        group("pg_delphi_minor_criteria_group", "Minor Criteria (Need ≥ 4 to fulfill)",
              _criteria_inputs(DELPHI_MINOR), grid_cols=1),
    ],
    compute=run_pg_delphi,
    score_range=(0, 1),
    references=(
        "Maverakis E, Wang E, Shinkai K, et al. Diagnostic Criteria of Ulcerative Pyoderma Gangrenosum: Delphi "
        "Consensus. JAMA Dermatol. 2018;154(4):461–466.",
        "Weenig RH, Davis MD, Dahl PR, Su WP. Skin Ulcers Misdiagnosed as PG. N Engl J Med. "
        "2002;347(18):1412–1418.",
    ),
)


# 2. PARACELSUS ────────────────────────────────────────────────────────────────
# tier, criteria, points per criterion
PARACELSUS_TIERS: List[Tuple[str, List[Criterion], int]] = [
    ("major", [
        ("pg_para_major_progressive", "Rapidly progressive ulceration (> 1 cm/day) despite standard wound care"),
        ("pg_para_major_exclude_diffdx",
         "Exclusion of other relevant differential diagnoses (infection, vasculitis, malignancy) after evaluation"),
        ("pg_para_major_reddish_border", "Reddish-violaceous wound border with undermined edges"),
    ], 3),
    ("minor", [
        ("pg_para_minor_amelior_immu",
         "Amelioration of ulcer upon initiation of immunosuppressive therapy (e.g., corticosteroids)"),
        ("pg_para_minor_bizarre_shape",
         "Bizarre or irregular ulcer shape (e.g., geographic or pustular satellite extension)"),
        ("pg_para_minor_extreme_pain", "Extreme pain at ulcer site (> 4/10 on visual analog scale)"),
        ("pg_para_minor_pathergy",
         "Clinical evidence of pathergy (new lesion at site of minor trauma or debridement)"),
    ], 2),
    ("additional", [
        ("pg_para_add_suppl_inflam", "Suppurative (neutrophilic) inflammation on histopathology"),
        ("pg_para_add_undermined_margin", "Undermined wound borders on clinical examination"),
        ("pg_para_add_systemic_disease",
         "Associated systemic disease (e.g., inflammatory bowel disease, rheumatoid arthritis, hematologic "
         "malignancy)"),
    ], 1),
]

PARACELSUS_HIGH = 10
PARACELSUS_INDETERMINATE = 7


def run_pg_paracelsus(v: Dict[str, Any]) -> Result:
    tier_scores = {
        tier: sum(_present(v, field_id) for field_id, _ in criteria) * points
        for tier, criteria, points in PARACELSUS_TIERS
    }
    total = sum(tier_scores.values())
    if total >= PARACELSUS_HIGH:
        category = "High Likelihood of PG (Sensitivity ≈ 94%, Specificity ≈ 90%)"
    elif total >= PARACELSUS_INDETERMINATE:
        category = "Indeterminate; further evaluation (e.g., biopsy, expert consultation) is recommended."
    else:
        category = "Unlikely PG; consider alternative diagnoses (e.g., venous stasis ulcer, vascular ulcer)."
    return make_result(total, f"PARACELSUS Score: {total} (Range: 0–20). {category}", {
        "major_criteria_score": tier_scores["major"],
        "minor_criteria_score": tier_scores["minor"],
        "additional_criteria_score": tier_scores["additional"],
        "total_paracelsus_score": total,
        "interpretation_category": category,
    })


PG_PARACELSUS = Instrument(
    id="pg_paracelsus",
    name="PARACELSUS Score for Pyoderma Gangrenosum",
    acronym="PARACELSUS Score (PG)",
    description=(
        "A weighted diagnostic tool to differentiate pyoderma gangrenosum from other ulcerative conditions. Ten "
        "criteria score 3 (major), 2 (minor) or 1 (additional) points, for a total of 0–20; a score of ≥10 "
        "strongly suggests PG."
    ),
    condition=CONDITION,
    keywords=("paracelsus", "pyoderma gangrenosum", "diagnostic score", "ulcer", "pathergy",
              "immunosuppressive response"),
    source_type=SourceType.RESEARCH,
    sections=[
        group(
            f"pg_paracelsus_{tier}_group",
            f"{tier.capitalize()} Criteria ({points} Point{'s' if points != 1 else ''} Each)",
            _criteria_inputs(criteria),
            grid_cols=1,
        )
        for tier, criteria, points in PARACELSUS_TIERS
    ],
    compute=run_pg_paracelsus,
    score_range=(0, 20),
    references=(
        "Jockenhöfer F, Wollina U, Salva KA, Benson S, Dissemond J. The PARACELSUS Score: A Novel Diagnostic "
        "Tool for Pyoderma Gangrenosum. Br J Dermatol. 2019;180(3):615-620.",
        "Haag C, Hansen T, Hajar T, et al. Comparison of Three Diagnostic Frameworks for Pyoderma Gangrenosum. "
        "J Invest Dermatol. 2021;141(1):59-63.",
    ),
)


# 3. Su criteria ───────────────────────────────────────────────────────────────
SU_MAJOR: List[Criterion] = [
    ("pg_su_major_rapid_ulcer",
     "Rapid progression of a painful, necrolytic cutaneous ulcer with irregular, violaceous, undermined border"),
    ("pg_su_major_biopsy_neutrophil",
     "Biopsy of ulcer edge showing sterile neutrophilic infiltrate (no evidence of vasculitis or infection)"),
]

SU_MINOR: List[Criterion] = [
    ("pg_su_minor_exclude_infxn", "Exclusion of infection via appropriate cultures and histopathology"),
    ("pg_su_minor_pathergy",
     "Pathergy phenomenon (new lesion at site of minor trauma, extending beyond the original injury)"),
    ("pg_su_minor_history_ibd_arth",
     "History of inflammatory bowel disease, inflammatory arthritis, or hematologic malignancy"),
    ("pg_su_minor_characteristic_clinical",
     "Characteristic clinical features: multiple ulcers (≥ 1 on anterior lower leg), peripheral erythema, "
     "undermined borders"),
]

SU_MINOR_REQUIRED = 2


def run_pg_su(v: Dict[str, Any]) -> Result:
    rapid_ulcer = _present(v, "pg_su_major_rapid_ulcer")
    biopsy = _present(v, "pg_su_major_biopsy_neutrophil")
    majors_met = rapid_ulcer == 1 and biopsy == 1
    minors = {field_id: _present(v, field_id) for field_id, _ in SU_MINOR}
    minor_count = sum(minors.values())
    meets = majors_met and minor_count >= SU_MINOR_REQUIRED

    if meets:
        interpretation = (
            f"Meets Su Criteria (Both major criteria present AND {minor_count} of 4 minor criteria present).\n"
            "Sensitivity: ~86.2%, Specificity: ~69.6%.\n"
            "Supports clinical diagnosis of PG."
        )
    else:
        interpretation = (
            f"Does Not Meet Su Criteria. Both major criteria met: {'Yes' if majors_met else 'No'}. "
            f"Minor criteria met: {minor_count} of 4 (requires ≥2).\n"
            "Suggests alternative etiologies (e.g., infection, vasculitis, malignancy)."
        )
    return make_result(1 if meets else 0, interpretation, {
        "major_rapid_ulcer": rapid_ulcer,
        "major_biopsy_neutrophil": biopsy,
        "minor_criteria_count": minor_count,
        "minor_criteria_individual_scores": minors,
        "meets_su_criteria": meets,
    })


PG_SU = Instrument(
    id="pg_su",
    name="Su Criteria for Pyoderma Gangrenosum",
    acronym="Su Criteria (PG)",
    description=(
        "Proposed by Su WP et al. (2004, Mayo Clinic); requires both major criteria plus at least two of four "
        "minor criteria. In retrospective cohorts, sensitivity ≈ 86.2% and specificity ≈ 69.6%."
    ),
    condition=CONDITION,
    keywords=("su", "pyoderma gangrenosum", "diagnostic criteria", "neutrophilic infiltrate", "undermined border",
              "pathergy"),
    source_type=SourceType.RESEARCH,
    sections=[
        group("pg_su_major_criteria_group", "Major Criteria (Both Required)", _criteria_inputs(SU_MAJOR),
              grid_cols=1),
        group("pg_su_minor_criteria_group", "Minor Criteria (Need ≥ 2)", _criteria_inputs(SU_MINOR), grid_cols=1),
    ],
    compute=run_pg_su,
    score_range=(0, 1),
    references=(
        "Su WP, Davis MD, Weenig RH, Powell FC, Perry HO. Pyoderma Gangrenosum: Clinicopathologic Correlation "
        "and Proposed Diagnostic Criteria. Int J Dermatol. 2004;43(11):790–800.",
    ),
)


INSTRUMENTS: List[Instrument] = [PG_DELPHI, PG_PARACELSUS, PG_SU]
