"""
Quality-of-life questionnaires: DLQI, CDLQI, SCQOLI-10, Skindex-29, Acne-QoL,
MELASQOL and VitiQoL.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import FieldSpec, Instrument, Result, SourceType
from ..schema import number_input, options, select_input
from ..scoring import band, fmt, make_result, parse_num, round_to, sum_nums

_FREQUENCY = options([(3, "Very much"), (2, "A lot"), (1, "A little"), (0, "Not at all")])
# Q7 also offers "not relevant", which scores the same as "not at all".
_FREQUENCY_Q7 = options([(3, "Very much"), (2, "A lot"), (1, "A little"), (0, "Not at all / Not relevant")])


# 1. DLQI ──────────────────────────────────────────────────────────────────────
_DLQI_QUESTIONS = [
    "how itchy, sore, painful or stinging has your skin been?",
    "how embarrassed or self conscious have you been because of your skin?",
    "how much has your skin interfered with you going shopping or looking after your home or garden?",
    "how much has your skin influenced the clothes you wear?",
    "how much has your skin affected any social or leisure activities?",
    "how much has your skin made it difficult for you to do any sport?",
    "has your skin prevented you from working or studying?",
    "how much has your skin created problems with your partner or any of your close friends or relatives?",
    "how much has your skin caused any sexual difficulties?",
    "how much of a problem has the treatment for your skin been, for example by making your home messy, or by taking up time?",
]

_DLQI_BANDS = [
    ("<=", 1, "No effect at all on patient's life."),
    ("<=", 5, "Small effect on patient's life."),
    ("<=", 10, "Moderate effect on patient's life."),
    ("<=", 20, "Very large effect on patient's life."),
]


def run_dlqi(v: Dict[str, Any]) -> Result:
    details = {f"Q{i}": parse_num(v.get(f"q{i}")) for i in range(1, 11)}
    score = sum(details.values())
    return make_result(score, band(score, _DLQI_BANDS, "Extremely large effect on patient's life."), details)


DLQI = Instrument(
    id="dlqi",
    name="Dermatology Life Quality Index",
    acronym="DLQI",
    description="A 10-question questionnaire to measure the impact of skin disease on a person's quality of life.",
    condition="Quality of Life",
    keywords=("dlqi", "quality of life", "skin disease", "impact", "patient reported"),
    source_type=SourceType.EXPERT_CONSENSUS,
    sections=[
        select_input(
            f"q{i}", f"Q{i}: Over the last week, {text}",
            _FREQUENCY_Q7 if i == 7 else _FREQUENCY, default=0,
        )
        for i, text in enumerate(_DLQI_QUESTIONS, start=1)
    ],
    compute=run_dlqi,
    score_range=(0, 30),
    references=(
        "Finlay AY, Khan GK. Dermatology Life Quality Index (DLQI)--a simple practical measure for routine "
        "clinical use. Clin Exp Dermatol. 1994 May;19(3):210-6.",
    ),
)


# 2. CDLQI ─────────────────────────────────────────────────────────────────────
_CDLQI_QUESTIONS = [
    "how itchy, sore, painful or stinging has your skin been?",
    "how embarrassed or self-conscious have you been because of your skin?",
    "how much has your skin interfered with you playing with friends or going to school?",
    "how much has your skin influenced the clothes you wear?",
    "how much has your skin affected any hobbies or pastimes?",
    "how much has your skin made it difficult for you to do any sport?",
    "has your skin prevented you from going to school or nursery?",
    "how much has your skin made you feel fed up or sad?",
    "how much has your skin caused problems with your sleep?",
    "how much of a problem has the treatment for your skin been, for example by making your home messy, or by taking up time?",
]

_CDLQI_BANDS = [
    ("<=", 0, "No effect at all on child's life."),
    ("<=", 6, "Small effect on child's life."),
    ("<=", 12, "Moderate effect on child's life."),
    ("<=", 18, "Very large effect on child's life."),
]


def run_cdlqi(v: Dict[str, Any]) -> Result:
    details = {f"Q{i}": parse_num(v.get(f"cdlqi_q{i}")) for i in range(1, 11)}
    score = sum(details.values())
    label = band(score, _CDLQI_BANDS, "Extremely large effect on child's life.")
    interpretation = (
        f"CDLQI Score: {fmt(score)} (Range: 0-30). {label} "
        "(Severity bands: 0 No effect, 1-6 Small, 7-12 Moderate, 13-18 Very large, 19-30 Extremely large)"
    )
    return make_result(score, interpretation, details)


CDLQI = Instrument(
    id="cdlqi",
    name="Children's Dermatology Life Quality Index (CDLQI)",
    acronym="CDLQI",
    description=(
        "A 10-question questionnaire to measure the impact of skin disease on the quality of life "
        "of children aged 4-16 years."
    ),
    condition="Quality of Life",
    keywords=("cdlqi", "quality of life", "children", "pediatric", "skin disease", "patient reported"),
    source_type=SourceType.EXPERT_CONSENSUS,
    sections=[
        select_input(
            f"cdlqi_q{i}", f"Q{i}: Over the last week, {text}",
            _FREQUENCY_Q7 if i == 7 else _FREQUENCY, default=0,
        )
        for i, text in enumerate(_CDLQI_QUESTIONS, start=1)
    ],
    compute=run_cdlqi,
    score_range=(0, 30),
    references=(
        "Lewis-Jones MS, Finlay AY. The Children's Dermatology Life Quality Index (CDLQI): initial validation "
        "and practical application. Br J Dermatol. 1995 Jul;132(6):942-9.",
    ),
)


# 3. SCQOLI-10 ─────────────────────────────────────────────────────────────────
_SCQOLI_OPTIONS = options([(0, "Never"), (1, "Rarely"), (2, "Sometimes"), (3, "Often"), (4, "Always")])

_SCQOLI_ITEMS = [
    ("symptoms", "Symptoms (itching, pain, discomfort)"),
    ("emotions", "Emotions (sadness, anxiety, anger)"),
    ("daily_activities", "Daily activities (work, household chores)"),
    ("sleep", "Sleep"),
    ("social_life", "Social life and leisure"),
    ("self_perception", "Self-perception (feeling ashamed or embarrassed)"),
    ("relationships", "Relationships with others"),
    ("treatment_burden", "Treatment burden (time, cost, side effects)"),
    ("concentration", "Concentration and memory"),
    ("energy_vitality", "Energy and vitality"),
]

_SCQOLI_BANDS = [
    ("<=", 10, "Low impact on QoL."),
    ("<=", 20, "Moderate impact on QoL."),
    ("<=", 30, "High impact on QoL."),
]


def run_scqoli10(v: Dict[str, Any]) -> Result:
    # Only the declared items count; stray keys in the value map are ignored.
    score = sum_nums(v, (item_id for item_id, _ in _SCQOLI_ITEMS))
    label = band(score, _SCQOLI_BANDS, "Very high impact on QoL.")
    details = {label_text: parse_num(v.get(item_id)) for item_id, label_text in _SCQOLI_ITEMS}
    return make_result(score, f"Interpretation based on total score (0-40): {label}", details)


SCQOLI10 = Instrument(
    id="scqoli-10",
    name="Simplified Cutaneous QoL Index (SCQOLI-10)",
    acronym="SCQOLI-10",
    description="A 10-item questionnaire for assessing quality of life in patients with chronic skin diseases.",
    condition="Quality of Life",
    keywords=("scqoli-10", "quality of life", "chronic skin disease", "patient reported"),
    source_type=SourceType.EXPERT_CONSENSUS,
    sections=[select_input(item_id, label, _SCQOLI_OPTIONS, default=0) for item_id, label in _SCQOLI_ITEMS],
    compute=run_scqoli10,
    score_range=(0, 40),
    references=(
        "Misery L, et al. Development and validation of a new tool for the global assessment of quality of life "
        "in patients with chronic skin disorders: the SCQOLI-10. J Eur Acad Dermatol Venereol. 2021.",
    ),
)


# 4. Skindex-29 ────────────────────────────────────────────────────────────────
def run_skindex29(v: Dict[str, Any]) -> Result:
    symptoms = parse_num(v.get("symptoms_score"))
    emotions = parse_num(v.get("emotions_score"))
    functioning = parse_num(v.get("functioning_score"))
    average = round_to((symptoms + emotions + functioning) / 3, 1)
    interpretation = (
        f"Skindex-29 Scores: Symptoms={fmt(symptoms, 1)}, Emotions={fmt(emotions, 1)}, "
        f"Functioning={fmt(functioning, 1)}. Overall Average={fmt(average)}. "
        "Higher scores indicate worse quality of life. Each domain and the average score range from 0 to 100."
    )
    return make_result(average, interpretation, {
        "Symptoms_Domain": symptoms,
        "Emotions_Domain": emotions,
        "Functioning_Domain": functioning,
        "Overall_Average_Score": average,
    })


def _domain_input(id: str, name: str) -> FieldSpec:
    return number_input(
        id, f"{name} Domain Score (0-100)", max=100,
        description=f"Enter the calculated/transformed score for the {name} domain.",
    )


SKINDEX29 = Instrument(
    id="skindex29",
    name="Skindex-29",
    acronym="Skindex-29",
    description=(
        "A 29-item questionnaire assessing the effects of skin diseases on patients' quality of life, divided "
        "into three domains: Symptoms, Emotions, and Functioning. Scores are transformed to a 0-100 scale."
    ),
    condition="Quality of Life",
    keywords=("skindex", "quality of life", "symptoms", "emotions", "functioning", "patient reported"),
    source_type=SourceType.RESEARCH,
    sections=[
        _domain_input("symptoms_score", "Symptoms"),
        _domain_input("emotions_score", "Emotions"),
        _domain_input("functioning_score", "Functioning"),
    ],
    compute=run_skindex29,
    score_range=(0, 100),
    references=(
        "Chren MM, Lasek RJ, Sahay AP, Sands LP. Measurement properties of Skindex-29: a quality-of-life measure "
        "for patients with skin disease. J Cutan Med Surg. 1997.",
        "Chren MM. The Skindex instruments to measure the effects of skin disease on quality of life. "
        "Dermatol Clin. 2012 Apr;30(2):231-6, xiii.",
    ),
)


# 5. Acne-QoL ──────────────────────────────────────────────────────────────────
_ACNEQOL_DOMAINS = [
    ("self_perception_score", "Self-Perception", 5, 30),
    ("role_social_score", "Role-Social", 4, 24),
    ("role_emotional_score", "Role-Emotional", 5, 30),
    ("acne_symptoms_score", "Acne Symptoms", 5, 30),
]

# Higher is better, so the bands read from worst to best.
_ACNEQOL_BANDS = [
    ("<=", 30, "Extremely large negative effect on QoL."),
    ("<=", 60, "Moderate negative effect."),
    ("<=", 90, "Small negative effect."),
]


def run_acneqol(v: Dict[str, Any]) -> Result:
    scores = {name: parse_num(v.get(field_id)) for field_id, name, _, _ in _ACNEQOL_DOMAINS}
    total = sum(scores.values())
    label = band(total, _ACNEQOL_BANDS, "No or minimal negative effect (nearly normal QoL).")
    lines = ["Acne-QoL Scores:"]
    lines += [f"{name}: {fmt(scores[name])}/{maximum}" for _, name, _, maximum in _ACNEQOL_DOMAINS]
    lines += [
        f"Total Score: {fmt(total)}/114.",
        "Higher scores indicate better Quality of Life (less impact from acne).",
        f"Band: {label}",
        "A change of ~10-12 points total is often considered clinically important.",
    ]
    details: Dict[str, Any] = {f"{name.replace(' ', '_').replace('-', '_')}_Score": val for name, val in scores.items()}
    details["Total_Acne_QoL_Score"] = total
    details["Band"] = label
    return make_result(total, "\n".join(lines), details)


ACNEQOL = Instrument(
    id="acneqol",
    name="Acne-Specific Quality of Life (Acne-QoL)",
    acronym="Acne-QoL",
    description=(
        "A 19-item questionnaire measuring how facial acne affects quality of life across four domains. "
        "Each item is scored 0 to 6; higher scores indicate better QoL. Total score ranges from 0 to 114."
    ),
    condition="Quality of Life",
    keywords=("acneqol", "acne", "quality of life", "patient reported", "self-perception", "emotional impact",
              "social functioning", "acne symptoms"),
    source_type=SourceType.RESEARCH,
    sections=[
        number_input(
            field_id, f"{name} Domain Score (0-{maximum})", max=maximum,
            description=f"Sum of the {items} items in the {name} domain (each item 0-6). Higher is better QoL.",
        )
        for field_id, name, items, maximum in _ACNEQOL_DOMAINS
    ],
    compute=run_acneqol,
    score_range=(0, 114),
    references=(
        "Girman CJ, Hartmaier S, Thiboutot D, et al. Development of a new measure for evaluating the impact of "
        "acne on quality of life: The Acne-QoL. Psychopharmacol Bull. 1996;32(3):503-9.",
        "McLeod LD, et al. Further development and validation of the Acne-Specific Quality of Life (Acne-QoL) "
        "instrument. J Dermatolog Treat. 2003;14(3):137-44.",
    ),
)


# 6. MELASQOL ──────────────────────────────────────────────────────────────────
def run_melasqol(v: Dict[str, Any]) -> Result:
    score = parse_num(v.get("total_score"), 7) or 7
    interpretation = f"MELASQOL Score: {fmt(score)} (Range: 7-70). Higher score indicates worse quality of life."
    return make_result(score, interpretation, {"score_source": "User-entered total score"})


MELASQOL = Instrument(
    id="melasqol",
    name="Melasma Quality of Life Scale (MELASQOL)",
    acronym="MELASQOL",
    description=(
        "A 10-item patient-reported measure of the psychosocial impact of melasma. Items are scored 1 to 7 and "
        "the scored total ranges from 7 to 70; higher scores indicate worse quality of life."
    ),
    condition="Quality of Life",
    keywords=("melasqol", "melasma", "quality of life", "patient reported", "psychosocial impact"),
    source_type=SourceType.RESEARCH,
    sections=[
        number_input(
            "total_score", "Total MELASQOL Score (7-70)", min=7, max=70, default=7,
            description="Enter the sum of scores from the 10 questions (each question 1-7).",
        ),
    ],
    compute=run_melasqol,
    score_range=(7, 70),
    references=(
        "Balkrishnan R, McMichael AJ, Camacho FT, et al. Development and validation of a health-related quality "
        "of life instrument for women with melasma. Br J Dermatol. 2003;149(3):572-577.",
    ),
)


# 7. VitiQoL ───────────────────────────────────────────────────────────────────
def run_vitiqol(v: Dict[str, Any]) -> Result:
    score = parse_num(v.get("total_score"))
    interpretation = (
        f"VitiQoL Score: {fmt(score)}. Higher score indicates worse quality of life. "
        "Refer to the specific VitiQoL version for detailed interpretation and range."
    )
    return make_result(score, interpretation, {"score_source": "User-entered total score"})


VITIQOL = Instrument(
    id="vitiqol",
    name="Vitiligo-specific Quality of Life (VitiQoL)",
    acronym="VitiQoL",
    description=(
        "Measures the impact of vitiligo on a patient's quality of life. Scores depend on the version used "
        "(e.g., 15 items scored 0-6, total 0-90)."
    ),
    condition="Quality of Life",
    keywords=("vitiqol", "vitiligo", "quality of life", "patient reported"),
    source_type=SourceType.RESEARCH,
    sections=[
        number_input(
            "total_score", "Total VitiQoL Score",
            description="Sum of the questionnaire items; the range depends on the version used.",
        ),
    ],
    compute=run_vitiqol,
    references=(
        "Lilly E, Lu PD, Borovicka JH, et al. Development and validation of a vitiligo-specific quality-of-life "
        "instrument (VitiQoL). J Am Acad Dermatol. 2013;69(1):e11-e18.",
    ),
)


INSTRUMENTS: List[Instrument] = [DLQI, CDLQI, SCQOLI10, SKINDEX29, ACNEQOL, MELASQOL, VITIQOL]
