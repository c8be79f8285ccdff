"""
Atopic dermatitis and eczema instruments: EASI, SCORAD, POEM, vIGA-AD, SASSAD,
HECSI and DASI.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import DisplayType, Instrument, Result, SourceType
from ..schema import group, number_input, options, select_input
from ..scoring import band, fmt, make_result, parse_num, parse_str, round_to

CONDITION = "Atopic Dermatitis / Eczema"

_SEVERITY_0_3 = options([(0, "0-None"), (1, "1-Mild"), (2, "2-Moderate"), (3, "3-Severe")])


# 1. EASI ──────────────────────────────────────────────────────────────────────
_EASI_AREA = options([
    (0, "0 (0%)"), (1, "1 (1-9%)"), (2, "2 (10-29%)"), (3, "3 (30-49%)"),
    (4, "4 (50-69%)"), (5, "5 (70-89%)"), (6, "6 (90+%)"),
])

# region id, name, adult weight, child (0-7 years) weight
EASI_REGIONS = [
    ("head_neck", "Head & Neck", 0.1, 0.2),
    ("upper_limbs", "Upper Limbs", 0.2, 0.2),
    ("trunk", "Trunk (incl. genitals)", 0.3, 0.3),
    ("lower_limbs", "Lower Limbs (incl. buttocks)", 0.4, 0.3),
]
_EASI_SIGNS = [
    ("erythema", "Erythema"),
    ("induration", "Induration/Papulation"),
    ("excoriation", "Excoriation"),
    ("lichenification", "Lichenification"),
]

_EASI_BANDS = [
    ("<=", 0, "Clear"),
    ("<=", 1.0, "Almost clear"),
    ("<=", 7.0, "Mild"),
    ("<=", 21.0, "Moderate"),
    ("<=", 50.0, "Severe"),
]


def run_easi(v: Dict[str, Any]) -> Result:
    age_group = parse_str(v.get("age_group"), "adult")
    total = 0.0
    regional: Dict[str, Any] = {}
    for region_id, name, adult_w, child_w in EASI_REGIONS:
        area = parse_num(v.get(f"{region_id}_area"))
        severity = sum(parse_num(v.get(f"{region_id}_{sign}")) for sign, _ in _EASI_SIGNS)
        weight = child_w if age_group == "child" else adult_w
        contribution = severity * area * weight
        total += contribution
        regional[name] = {
            "Severity_Sum": severity,
            "Area_Score": area,
            "Region_Weight_Applied": weight,
            "Regional_EASI_Contribution": round_to(contribution, 2),
        }

    score = round_to(total, 1)
    severity_label = band(score, _EASI_BANDS, "Very severe")
    return make_result(score, f"EASI Score: {fmt(score)} (Range: 0-72). Severity: {severity_label} eczema.", {
        "Selected_Age_Group": age_group,
        "Regional_Scores": regional,
        "Total_EASI_Score": score,
        "Severity_Category": severity_label,
    })


EASI = Instrument(
    id="easi",
    name="Eczema Area and Severity Index (EASI)",
    acronym="EASI",
    description=(
        "A validated tool for assessing the severity and extent of atopic dermatitis, recommended by the HOME "
        "initiative. Four signs are rated in four body regions together with an area score for each region."
    ),
    condition=CONDITION,
    keywords=("easi", "atopic dermatitis", "ad", "eczema", "severity", "area", "HOME initiative"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input(
            "age_group", "Age Group (determines regional weights)",
            options([("adult", "Adult/Child >7 years"), ("child", "Child 0-7 years")]), default="adult",
        ),
        *[
            group(
                f"easi_group_{region_id}",
                f"{name} (Adult Wt: {adult_w}, Child Wt: {child_w})",
                [select_input(f"{region_id}_area", "Area Affected Score (0-6)", _EASI_AREA)]
                + [select_input(f"{region_id}_{sign}", f"{label} (0-3)", _SEVERITY_0_3) for sign, label in _EASI_SIGNS],
                grid_cols=2,
            )
            for region_id, name, adult_w, child_w in EASI_REGIONS
        ],
    ],
    compute=run_easi,
    score_range=(0, 72),
    references=(
        "Hanifin JM, Thurston M, Omoto M, et al. The Eczema Area and Severity Index (EASI): assessment of "
        "reliability in atopic dermatitis. Exp Dermatol. 2001;10(1):11-18.",
        "Leshem YA, Hajar T, Hanifin JM, Simpson EL. What the Eczema Area and Severity Index score tells us about "
        "the severity of atopic dermatitis: a systematic review. Br J Dermatol. 2015;172(5):1353-1356.",
    ),
)


# 2. SCORAD ────────────────────────────────────────────────────────────────────
_SCORAD_SIGNS = [
    ("B_erythema", "Erythema"),
    ("B_oedema", "Oedema/Papulation"),
    ("B_oozing", "Oozing/Crusting"),
    ("B_excoriations", "Excoriations"),
    ("B_lichenification", "Lichenification"),
    ("B_dryness", "Dryness (non-inflamed)"),
]

_SCORAD_BANDS = [("<", 25, "Mild"), ("<", 50, "Moderate")]
_OSCORAD_BANDS = [("<", 15, "Mild"), ("<", 40, "Moderate")]


def run_scorad(v: Dict[str, Any]) -> Result:
    extent = parse_num(v.get("A_extent"))
    intensity = sum(parse_num(v.get(field_id)) for field_id, _ in _SCORAD_SIGNS)
    subjective = parse_num(v.get("C_pruritus")) + parse_num(v.get("C_sleeplessness"))

    objective = extent / 5 + 7 * intensity / 2
    score = round_to(objective + subjective, 2)
    o_score = round_to(objective, 2)
    interpretation = (
        f"SCORAD: {fmt(score)} (Range: 0-103). oSCORAD: {fmt(objective, 2)} (Range: 0-83). "
        f"Severity (SCORAD): {band(score, _SCORAD_BANDS, 'Severe')}. "
        f"Severity (oSCORAD): {band(objective, _OSCORAD_BANDS, 'Severe')}."
    )
    return make_result(score, interpretation, {
        "Part_A_Extent_BSA": extent,
        "Part_B_Intensity_Sum_of_6_signs": intensity,
        "Part_C_Subjective_Symptoms_Sum": subjective,
        "Calculated_oSCORAD": o_score,
    })


SCORAD = Instrument(
    id="scorad",
    name="SCORing Atopic Dermatitis (SCORAD)",
    acronym="SCORAD",
    description=(
        "Comprehensive assessment of extent and severity of atopic dermatitis. Uses the Rule of Nines for "
        "extent. The objective SCORAD (oSCORAD) omits the subjective symptoms."
    ),
    condition=CONDITION,
    keywords=("scorad", "atopic dermatitis", "ad", "eczema", "severity", "extent"),
    source_type=SourceType.EXPERT_CONSENSUS,
    sections=[
        group("scorad_group_a", "Part A: Extent (BSA %)", [
            number_input(
                "A_extent", "Body Surface Area Involved (%)", max=100,
                description="Use Rule of Nines to estimate total % BSA affected by eczema.",
            ),
        ], grid_cols=1),
        group(
            "scorad_group_b", "Part B: Intensity (Average of 6 Signs)",
            [select_input(field_id, label, _SEVERITY_0_3) for field_id, label in _SCORAD_SIGNS],
            grid_cols=3,
            description="Assess the average intensity of each sign over affected areas.",
        ),
        group("scorad_group_c", "Part C: Subjective Symptoms (VAS 0-10)", [
            number_input("C_pruritus", "Pruritus (Itch)", max=10),
            number_input("C_sleeplessness", "Sleeplessness", max=10),
        ], grid_cols=2, description="Patient to rate average over last 3 days/nights (0=None, 10=Maximal)."),
    ],
    compute=run_scorad,
    score_range=(0, 103),
    references=("European Task Force on Atopic Dermatitis. Severity scoring of atopic dermatitis: the SCORAD "
                "index. Dermatology. 1993;186(1):23-31.",),
)


# 3. POEM ──────────────────────────────────────────────────────────────────────
_POEM_OPTIONS = options([
    (0, "0 days (No days)"), (1, "1-2 days"), (2, "3-4 days"), (3, "5-6 days"), (4, "Every day (7 days)"),
])

_POEM_QUESTIONS = [
    ("poem_q1_itch", "days has your skin been itchy"),
    ("poem_q2_sleep", "nights has your sleep been disturbed"),
    ("poem_q3_bleeding", "days has your skin been bleeding"),
    ("poem_q4_weeping", "days has your skin been weeping (leaking fluid)"),
    ("poem_q5_cracking", "days has your skin been cracked"),
    ("poem_q6_flaking", "days has your skin been flaking or peeling off"),
    ("poem_q7_dryness", "days has your skin been dry or rough"),
]

_POEM_BANDS = [
    ("<=", 2, "Clear or almost clear eczema"),
    ("<=", 7, "Mild eczema"),
    ("<=", 16, "Moderate eczema"),
    ("<=", 24, "Severe eczema"),
]


def run_poem(v: Dict[str, Any]) -> Result:
    individual = {q_id: parse_num(v.get(q_id)) for q_id, _ in _POEM_QUESTIONS}
    total = sum(individual.values())
    category = band(total, _POEM_BANDS, "Very severe eczema")
    interpretation = (
        f"Total POEM Score: {fmt(total)} (Range: 0-28).\nSeverity Category: {category}.\n"
        "Higher scores indicate more frequent or persistent symptoms."
    )
    return make_result(total, interpretation, {
        "Individual_Question_Scores": individual,
        "Total_POEM_Score": total,
        "Severity_Category": category,
    })


POEM = Instrument(
    id="poem",
    name="Patient-Oriented Eczema Measure",
    acronym="POEM",
    description=(
        "A 7-question patient-reported measure of eczema severity based on the frequency of itch, sleep loss, "
        "bleeding, weeping, cracking, flaking and dryness over the past week."
    ),
    condition=CONDITION,
    keywords=("poem", "patient-reported", "eczema symptoms", "quality of life", "symptom frequency",
              "atopic dermatitis", "NICE", "HOME initiative"),
    source_type=SourceType.RESEARCH,
    sections=[
        select_input(
            q_id, f"Over the last week, on how many {text} because of your eczema?", _POEM_OPTIONS,
        )
        for q_id, text in _POEM_QUESTIONS
    ],
    compute=run_poem,
    score_range=(0, 28),
    references=(
        "Charman CR, Venn AJ, Williams HC. The patient-oriented eczema measure: development and initial "
        "validation of a new tool for measuring eczema severity from the patients' perspective. "
        "Arch Dermatol. 2004;140(12):1513-1519.",
        "Spuls PI, Gerbens LAA, Simpson E, et al. POEM, a core instrument to measure symptoms in routine "
        "clinical practice: a HOME statement. Br J Dermatol. 2017;176(3):679-685.",
    ),
)


# 4. vIGA-AD ───────────────────────────────────────────────────────────────────
VIGA_AD_GRADES = options([
    (0, "0 - Clear: No inflammatory signs of AD (no erythema, no induration/papulation, no oozing/crusting)."),
    (1, "1 - Almost Clear: Barely perceptible erythema, barely perceptible induration/papulation, "
        "and no oozing/crusting."),
    (2, "2 - Mild: Mild erythema, mild induration/papulation, and +/- oozing/crusting."),
    (3, "3 - Moderate: Moderate erythema, moderate induration/papulation, and +/- oozing/crusting."),
    (4, "4 - Severe: Marked erythema, marked induration/papulation/lichenification, and +/- oozing/crusting."),
])


def run_viga_ad(v: Dict[str, Any]) -> Result:
    grade = int(parse_num(v.get("viga_grade")))
    label = next((opt.label for opt in VIGA_AD_GRADES if opt.value == grade), None)
    if label is None:
        return make_result(grade, "vIGA-AD Grade: N/A.", {"grade_text": "N/A", "description": ""})
    title, _, text = label.partition(": ")
    title = title.split(" - ", 1)[1]
    return make_result(grade, f"vIGA-AD Grade: {title}. {text}", {"grade_text": title, "description": text})


VIGA_AD = Instrument(
    id="viga_ad",
    name="Validated IGA for AD (vIGA-AD)",
    acronym="vIGA-AD",
    description="Static clinician assessment of atopic dermatitis severity on a 5-point scale.",
    condition=CONDITION,
    keywords=("viga-ad", "iga", "atopic dermatitis", "ad", "eczema", "physician global assessment", "validated"),
    source_type=SourceType.RESEARCH,
    display_type=DisplayType.STATIC_LIST,
    sections=[select_input("viga_grade", "Select vIGA-AD Grade", VIGA_AD_GRADES)],
    compute=run_viga_ad,
    score_range=(0, 4),
    references=("Developed for clinical trials by the Eczema Council together with regulatory bodies such as "
                "the FDA.",),
)


# 5. SASSAD ────────────────────────────────────────────────────────────────────
_SASSAD_AREAS = [
    ("arms", "Arms"), ("hands", "Hands"), ("legs", "Legs"),
    ("feet", "Feet"), ("head_neck", "Head/Neck"), ("trunk", "Trunk"),
]
_SASSAD_SIGNS = ["Erythema", "Exudation", "Excoriation", "Dryness", "Cracking", "Lichenification"]


def run_sassad(v: Dict[str, Any]) -> Result:
    total = 0.0
    per_site: Dict[str, Dict[str, float]] = {}
    for area_id, area_name in _SASSAD_AREAS:
        signs = {sign: parse_num(v.get(f"{sign.lower()}_{area_id}")) for sign in _SASSAD_SIGNS}
        per_site[area_name] = signs
        total += sum(signs.values())
    interpretation = (
        f"Total SASSAD Score: {fmt(total)} (Range: 0-108). Higher score indicates more severe AD. "
        "No standard severity bands universally defined."
    )
    return make_result(total, interpretation, per_site)


SASSAD = Instrument(
    id="sassad",
    name="Six Area, Six Sign AD Severity Score (SASSAD)",
    acronym="SASSAD",
    description="Records and monitors atopic dermatitis activity by grading 6 signs (0-3) across 6 body sites.",
    condition=CONDITION,
    keywords=("sassad", "atopic dermatitis", "ad", "eczema", "severity", "six area six sign"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        group(
            f"sassad_group_{area_id}", f"Region: {area_name}",
            [select_input(f"{sign.lower()}_{area_id}", sign, _SEVERITY_0_3) for sign in _SASSAD_SIGNS],
            grid_cols=3,
        )
        for area_id, area_name in _SASSAD_AREAS
    ],
    compute=run_sassad,
    score_range=(0, 108),
    references=("Berth-Jones J. Six Area, Six Sign Atopic Dermatitis (SASSAD) severity score: a simple system for "
                "monitoring disease activity in atopic dermatitis. Br J Dermatol. 1996;135 Suppl 48:25-30.",),
)


# 6. HECSI ─────────────────────────────────────────────────────────────────────
_HECSI_AREAS = [
    ("fingertips", "Fingertips"),
    ("fingers_excluding_tips", "Fingers (excluding tips)"),
    ("palms", "Palms"),
    ("backs_of_hands", "Backs of Hands"),
    ("wrists", "Wrists"),
]
_HECSI_SIGNS = [
    ("erythema", "Erythema"),
    ("induration_papulation", "Induration/Papulation"),
    ("vesicles", "Vesicles"),
    ("fissures", "Fissures"),
    ("scaling", "Scaling"),
    ("oedema", "Oedema"),
]
_HECSI_AREA_AFFECTED = options([
    (0, "0 (0%)"), (1, "1 (1-25%)"), (2, "2 (26-50%)"), (3, "3 (51-75%)"), (4, "4 (76-100%)"),
])

_HECSI_BANDS = [
    ("<=", 0, "Clear."),
    ("<=", 16, "Almost clear."),
    ("<=", 37, "Moderate hand eczema."),
    ("<=", 116, "Severe hand eczema."),
]


def run_hecsi(v: Dict[str, Any]) -> Result:
    total = 0.0
    areas: Dict[str, Any] = {}
    for area_id, area_name in _HECSI_AREAS:
        signs = {name: parse_num(v.get(f"{area_id}_{sign_id}")) for sign_id, name in _HECSI_SIGNS}
        intensity = sum(signs.values())
        affected = parse_num(v.get(f"{area_id}_area_affected"))
        total += intensity * affected
        areas[area_name] = {
            "intensity_sum": intensity,
            "area_affected_score": affected,
            "regional_score": intensity * affected,
            "signs": signs,
        }
    interpretation = (
        f"Total HECSI Score: {fmt(total)} (Range: 0-360). {band(total, _HECSI_BANDS, 'Very severe hand eczema.')}"
        " (Severity bands: 0 Clear, 1-16 Almost Clear, 17-37 Moderate, 38-116 Severe, >116 Very Severe)"
    )
    return make_result(total, interpretation, areas)


HECSI = Instrument(
    id="hecsi",
    name="Hand Eczema Severity Index (HECSI)",
    acronym="HECSI",
    description="Assesses severity of hand eczema from six signs and the extent of involvement in five areas.",
    condition=CONDITION,
    keywords=("hecsi", "hand eczema", "eczema", "atopic dermatitis", "severity", "hand"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        group(
            f"hecsi_group_{area_id}", f"Region: {area_name}",
            [select_input(f"{area_id}_{sign_id}", f"{name} (0-3)", _SEVERITY_0_3) for sign_id, name in _HECSI_SIGNS]
            + [select_input(f"{area_id}_area_affected", "Area Affected (0-4)", _HECSI_AREA_AFFECTED)],
            grid_cols=3,
        )
        for area_id, area_name in _HECSI_AREAS
    ],
    compute=run_hecsi,
    score_range=(0, 360),
    references=("Held E, Skoet R, Johansen JD, Agner T. The hand eczema severity index (HECSI): a scoring system "
                "for clinical assessment of hand eczema. Br J Dermatol. 2005;152(2):302-7.",),
)


# 7. DASI ──────────────────────────────────────────────────────────────────────
_DASI_VESICLES = options([(0, "0 (None)"), (1, "1 (1-10/cm²)"), (2, "2 (11-30/cm²)"), (3, "3 (>30/cm²)")])

_DASI_EXTENSION = [("<=", 0, 0), ("<=", 10, 1), ("<=", 25, 2), ("<=", 50, 3), ("<=", 75, 4)]

_DASI_BANDS = [
    ("<=", 0, "Clear."),
    ("<=", 15, "Mild dyshidrotic eczema."),
    ("<=", 30, "Moderate dyshidrotic eczema."),
]


def dasi_extension_score(percent: float) -> int:
    """Map the percentage of hands/feet affected to the 0-5 extension score."""
    return int(band(percent, _DASI_EXTENSION, 5))


def run_dasi(v: Dict[str, Any]) -> Result:
    vesicles = parse_num(v.get("vesicles_cm2"))
    erythema = parse_num(v.get("erythema"))
    desquamation = parse_num(v.get("desquamation"))
    itching = parse_num(v.get("itching"))
    ext_raw = parse_num(v.get("extension_percent"))
    ext_score = dasi_extension_score(ext_raw)

    score = (vesicles + erythema + desquamation + itching) * ext_score
    interpretation = (
        f"DASI Score: {fmt(score)} (Range: 0-60). {band(score, _DASI_BANDS, 'Severe dyshidrotic eczema.')}"
        " (Severity bands: 0 Clear, 1-15 Mild, 16-30 Moderate, 31-60 Severe)"
    )
    return make_result(score, interpretation, {
        "V": vesicles, "E": erythema, "D": desquamation, "I": itching,
        "Ext_raw_Percentage": ext_raw,
        "Extension_Score_0_5": ext_score,
    })


DASI = Instrument(
    id="dasi",
    name="Dyshidrotic Eczema Area and Severity Index (DASI)",
    acronym="DASI",
    description="Assesses severity of dyshidrotic eczema (pompholyx).",
    condition=CONDITION,
    keywords=("dasi", "dyshidrotic eczema", "pompholyx", "eczema", "atopic dermatitis", "severity"),
    source_type=SourceType.CLINICAL_GUIDELINE,
    sections=[
        select_input("vesicles_cm2", "Vesicles/cm² (V)", _DASI_VESICLES),
        select_input("erythema", "Erythema (E)", _SEVERITY_0_3),
        select_input("desquamation", "Desquamation (D)", _SEVERITY_0_3),
        select_input("itching", "Itching (I) - past 24h", _SEVERITY_0_3),
        number_input("extension_percent", "Extension % (Ext)", max=100,
                     description="Percentage of hands/feet affected."),
    ],
    compute=run_dasi,
    score_range=(0, 60),
    references=("Vocks E, Plötz SG, Ring J. The Dyshidrotic Eczema Area and Severity Index - a score developed for "
                "the assessment of dyshidrotic eczema. Dermatology. 2000;201(3):200-4.",),
)


INSTRUMENTS: List[Instrument] = [EASI, SCORAD, POEM, VIGA_AD, SASSAD, HECSI, DASI]
