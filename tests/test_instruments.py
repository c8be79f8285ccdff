"""
Instrument computation tests.

Test Categories:
1. Properties every instrument must satisfy (defaults in range, leniency, determinism)
2. Weighted regional sums
3. Criteria counting and thresholds
4. Banding boundaries
5. Reduction from baseline
6. Instrument-specific scenarios
"""

import pytest

from dermscore.models import FieldKind, Result
from dermscore.registry import REGISTRY, get_instrument
from dermscore.schema import default_values, flatten_fields
from dermscore.instruments.hidradenitis import percent_reduction
from dermscore.instruments.oncology import CTCAE_CRITERIA, ctcae_criteria
from dermscore.instruments.wounds import push_area_subscore

ALL = REGISTRY.all()
IDS = [inst.id for inst in ALL]


def compute(instrument_id, **values):
    inst = get_instrument(instrument_id)
    merged = default_values(inst.sections)
    merged.update(values)
    return inst.compute(merged)


# ============================================================
# TEST: PROPERTIES OF EVERY INSTRUMENT
# ============================================================

@pytest.mark.parametrize("inst", ALL, ids=IDS)
def test_defaults_compute_within_range(inst):
    result = inst.compute(default_values(inst.sections))
    assert isinstance(result, Result)
    assert result.interpretation
    if inst.score_range is None or isinstance(result.score, str):
        return
    lo, hi = inst.score_range
    assert result.score >= lo
    if hi is not None:
        assert result.score <= hi


@pytest.mark.parametrize("inst", ALL, ids=IDS)
def test_compute_is_deterministic(inst):
    values = default_values(inst.sections)
    first = inst.compute(values)
    second = inst.compute(dict(values))
    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


@pytest.mark.parametrize("inst", ALL, ids=IDS)
def test_missing_and_malformed_values_do_not_raise(inst):
    assert isinstance(inst.compute({}), Result)
    garbage = {f.id: "not-a-value" for f in flatten_fields(inst.sections)}
    assert isinstance(inst.compute(garbage), Result)


@pytest.mark.parametrize("inst", ALL, ids=IDS)
def test_checking_a_criterion_never_lowers_the_score(inst):
    base_values = default_values(inst.sections)
    base = inst.compute(base_values).score
    if isinstance(base, str):
        return
    for field in flatten_fields(inst.sections):
        if field.kind != FieldKind.CHECKBOX:
            continue
        toggled = dict(base_values, **{field.id: True})
        assert inst.compute(toggled).score >= base, field.id


@pytest.mark.parametrize("inst", ALL, ids=IDS)
@pytest.mark.parametrize("bound", ["min", "max"])
def test_number_fields_at_their_bounds_stay_in_range(inst, bound):
    if inst.score_range is None:
        return
    lo, hi = inst.score_range
    values = default_values(inst.sections)
    for field in flatten_fields(inst.sections):
        if field.kind == FieldKind.NUMBER and getattr(field, bound) is not None:
            values[field.id] = getattr(field, bound)
    score = inst.compute(values).score
    assert score >= lo
    if hi is not None:
        assert score <= hi


@pytest.mark.parametrize("inst", ALL, ids=IDS)
def test_declared_metadata(inst):
    assert inst.name
    assert inst.condition
    assert inst.references, "every instrument cites at least one reference"
    assert flatten_fields(inst.sections)


# ============================================================
# TEST: WEIGHTED REGIONAL SUMS
# ============================================================

DSSI_REGIONS = {"head": 0.1, "trunk": 0.2, "ue": 0.3, "le": 0.4}


class TestDSSI:
    """Four regions weighted 0.1/0.2/0.3/0.4: (erythema + induration + scaliness) x area x weight."""

    def test_all_zero(self):
        assert compute("dssi").score == 0

    @pytest.mark.parametrize("region,weight", DSSI_REGIONS.items())
    def test_extent_step_adds_weight_times_severity(self, region, weight):
        severity = {f"dssi_redness_{region}": 2, f"dssi_induration_{region}": 1, f"dssi_scaliness_{region}": 1}
        before = compute("dssi", **severity, **{f"dssi_area_{region}": 2}).score
        after = compute("dssi", **severity, **{f"dssi_area_{region}": 3}).score
        assert after - before == pytest.approx(weight * 4 * 1)

    def test_monotonic_in_severity(self):
        scores = [compute("dssi", dssi_area_le=3, dssi_redness_le=r).score for r in range(5)]
        assert scores == sorted(scores)

    def test_maximum(self):
        values = {}
        for region in DSSI_REGIONS:
            values.update({f"dssi_area_{region}": 6, f"dssi_redness_{region}": 4,
                           f"dssi_induration_{region}": 4, f"dssi_scaliness_{region}": 4})
        result = compute("dssi", **values)
        assert result.score == 72
        assert result.details["Severity_Category"] == "Severe involvement"


class TestSASI:
    """Region products (erythema + induration + desquamation) x area, averaged over five facial regions."""

    @staticmethod
    def region(key, area, erythema, induration, desquamation):
        return {f"sasi_area_{key}": area, f"sasi_erythema_{key}": erythema,
                f"sasi_induration_{key}": induration, f"sasi_desquamation_{key}": desquamation}

    def test_products_are_divided_by_region_count(self):
        result = compute("sasi", **self.region("luq", 1, 1, 0, 0))
        assert result.score == 0.2
        assert result.details["Sum_Of_Region_Products"] == 1

    def test_maximum(self):
        values = {}
        for key in ("luq", "ruq", "llq", "rlq", "nose"):
            values.update(self.region(key, 6, 4, 4, 4))
        result = compute("sasi", **values)
        assert result.score == 72
        assert result.details["Severity_Category"] == "Severe"

    @pytest.mark.parametrize("desquamation,score,category", [(3, 19, "Mild"), (4, 19.2, "Moderate")])
    def test_mild_edge(self, desquamation, score, category):
        # products 72 + 12 + 11 = 95 or 72 + 12 + 12 = 96
        values = {**self.region("luq", 6, 4, 4, 4), **self.region("ruq", 1, 4, 4, 4),
                  **self.region("llq", 1, 4, 4, desquamation)}
        result = compute("sasi", **values)
        assert result.score == score
        assert result.details["Severity_Category"] == category

    @pytest.mark.parametrize("erythema,score,category", [(3, 39, "Moderate"), (4, 39.2, "Severe")])
    def test_moderate_edge(self, erythema, score, category):
        # products 72 + 72 + 48 + 3 = 195 or one more
        values = {**self.region("luq", 6, 4, 4, 4), **self.region("ruq", 6, 4, 4, 4),
                  **self.region("llq", 4, 4, 4, 4), **self.region("rlq", 1, erythema, 0, 0)}
        result = compute("sasi", **values)
        assert result.score == score
        assert result.details["Severity_Category"] == category


class TestSALT:
    def test_total_loss_is_s5(self):
        regions = ("vertex", "right_side", "left_side", "posterior")
        result = compute("salt", **{f"salt_loss_percent_{r}": 100 for r in regions})
        assert result.score == 100
        assert result.details["Severity_Category"].startswith("S5")

    def test_just_below_total_is_s4(self):
        regions = ("vertex", "right_side", "left_side", "posterior")
        result = compute("salt", **{f"salt_loss_percent_{r}": 99 for r in regions})
        assert result.score == 99
        assert result.details["Severity_Category"].startswith("S4")

    def test_vertex_weight(self):
        assert compute("salt", salt_loss_percent_vertex=50).score == 20


# ============================================================
# TEST: CRITERIA COUNTING
# ============================================================

DELPHI_MINORS = [
    "pg_delphi_minor_exclude_infxn", "pg_delphi_minor_pathergy", "pg_delphi_minor_ibd_or_arth",
    "pg_delphi_minor_rapid_ulcer", "pg_delphi_minor_erythema_border", "pg_delphi_minor_multiple_ulcers",
    "pg_delphi_minor_cribriform_scars", "pg_delphi_minor_response_immu",
]


class TestPGDelphi:
    def test_three_minors_do_not_meet(self):
        result = compute("pg_delphi", pg_delphi_major_biopsy=1, **{k: 1 for k in DELPHI_MINORS[:3]})
        assert result.score == 0
        assert result.details["meets_delphi_criteria"] is False

    def test_four_minors_meet(self):
        result = compute("pg_delphi", pg_delphi_major_biopsy=1, **{k: 1 for k in DELPHI_MINORS[:4]})
        assert result.score == 1
        assert result.interpretation.startswith("Meets Delphi Criteria")

    def test_major_is_mandatory(self):
        result = compute("pg_delphi", pg_delphi_major_biopsy=0, **{k: 1 for k in DELPHI_MINORS})
        assert result.score == 0
        assert result.details["minor_criteria_count"] == 8

    def test_verdict_flips_back(self):
        met = compute("pg_delphi", pg_delphi_major_biopsy=1, **{k: 1 for k in DELPHI_MINORS[:4]})
        unmet = compute("pg_delphi", pg_delphi_major_biopsy=1, **{k: 1 for k in DELPHI_MINORS[:3]})
        assert (met.score, unmet.score) == (1, 0)


class TestSevenPointChecklist:
    def test_weighted_major_scores_two(self):
        result = compute("seven_point_checklist", major_change_size=True, minor_inflammation=True)
        assert result.score == 3
        assert "Urgent referral is recommended" in result.interpretation

    def test_original_counts_each_criterion_once(self):
        result = compute("seven_point_checklist", version="original", major_change_size=True,
                         minor_inflammation=True)
        assert result.score == 2
        assert "does not meet criteria" in result.interpretation
        assert result.details["Version"] == "original"

    def test_maximum(self):
        inst = get_instrument("seven_point_checklist")
        values = {f.id: True for f in flatten_fields(inst.sections) if f.kind == FieldKind.CHECKBOX}
        assert compute("seven_point_checklist", **values).score == 10


class TestABCDE:
    def test_no_signs(self):
        result = compute("abcde_melanoma")
        assert result.score == 0
        assert result.details["positive_features"] == "None"

    def test_features_listed(self):
        result = compute("abcde_melanoma", A_asymmetry=True, D_diameter=True)
        assert result.score == 2
        assert result.details["positive_features"] == "Asymmetry, Diameter >6mm"
        assert result.interpretation.startswith("Warning:")


class TestSCORTEN:
    @pytest.mark.parametrize("count,mortality", [(0, "3.2%"), (1, "12.1%"), (3, "58.3%"), (4, "58.3%+"),
                                                 (5, ">90%"), (7, ">90%")])
    def test_mortality_by_score(self, count, mortality):
        factors = ["age_ge40", "malignancy_present", "heart_rate_ge120", "bsa_gt10", "serum_urea_gt10",
                   "serum_bicarbonate_lt20", "serum_glucose_gt14"]
        result = compute("scorten", **{f: True for f in factors[:count]})
        assert result.score == count
        assert f"(approximate): {mortality}." in result.interpretation


# ============================================================
# TEST: BANDING BOUNDARIES
# ============================================================

class TestIHS4Bands:
    @pytest.mark.parametrize("nodules,severity", [(3, "Mild HS"), (4, "Moderate HS"), (10, "Moderate HS"),
                                                  (11, "Severe HS")])
    def test_boundaries(self, nodules, severity):
        result = compute("ihs4", nodules=nodules)
        assert result.details["Severity_Category"] == severity

    def test_weights(self):
        assert compute("ihs4", nodules=1, abscesses=1, drainingTunnels=1).score == 7


class TestDLQIBands:
    @pytest.mark.parametrize("q1,q2,band_text", [
        (1, 0, "No effect"),
        (2, 0, "Small effect"),
        (3, 2, "Small effect"),
        (3, 3, "Moderate effect"),
    ])
    def test_boundaries(self, q1, q2, band_text):
        result = compute("dlqi", q1=q1, q2=q2)
        assert result.score == q1 + q2
        assert result.interpretation.startswith(band_text)


class TestPASIBands:
    """Mild below 10, moderate from 10 up to and including 20, severe above."""

    @pytest.mark.parametrize("values,score,band_text", [
        # 0.4 x 4 x 6 on the lower limbs plus 0.1 x 3 x 1 on the head
        ({"E_l": 2, "I_l": 1, "S_l": 1, "A_l": 6, "E_h": 3, "A_h": 1}, 9.9, "Mild Psoriasis."),
        ({"E_l": 3, "I_l": 1, "S_l": 1, "A_l": 5}, 10, "Moderate Psoriasis."),
        ({"E_l": 4, "I_l": 4, "S_l": 2, "A_l": 5}, 20, "Moderate Psoriasis."),
        ({"E_l": 4, "I_l": 4, "S_l": 2, "A_l": 5, "E_h": 1, "A_h": 1}, 20.1, "Severe Psoriasis."),
    ])
    def test_boundaries(self, values, score, band_text):
        result = compute("pasi", **values)
        assert result.score == score
        assert result.interpretation.startswith(f"Total PASI Score: {score}. {band_text}")


class TestMASIBands:
    """Mild below 16, moderate from 16 up to and including 32, severe above."""

    @staticmethod
    def region(key, area, darkness, homogeneity):
        return {f"{key}_area": area, f"{key}_darkness": darkness, f"{key}_homogeneity": homogeneity}

    @pytest.mark.parametrize("chin,score,band_text", [
        ((3, 3, 2), 15.9, "Mild melasma."),
        ((2, 4, 4), 16, "Moderate melasma."),
    ])
    def test_mild_edge(self, chin, score, band_text):
        # forehead 0.3 x 8 x 6 = 14.4 plus the chin
        result = compute("masi_mmasi", **self.region("forehead", 6, 4, 4), **self.region("chin", *chin))
        assert result.score == score
        assert result.interpretation == (
            f"Total MASI Score: {score}. {band_text} (MASI Range: 0-48. Severity bands example: <16 Mild, "
            "16-32 Moderate, >32 Severe)."
        )

    @pytest.mark.parametrize("left_malar,chin,score,band_text", [
        ((0, 0, 0), (4, 4, 4), 32, "Moderate melasma."),
        ((2, 3, 2), (1, 2, 1), 32.1, "Severe melasma."),
    ])
    def test_moderate_edge(self, left_malar, chin, score, band_text):
        # forehead and right malar contribute 14.4 each
        result = compute(
            "masi_mmasi",
            **self.region("forehead", 6, 4, 4), **self.region("right_malar", 6, 4, 4),
            **self.region("left_malar", *left_malar), **self.region("chin", *chin),
        )
        assert result.score == score
        assert f"Total MASI Score: {score}. {band_text}" in result.interpretation

    def test_mmasi_ignores_homogeneity(self):
        result = compute("masi_mmasi", masi_type="mmasi", **self.region("forehead", 6, 4, 4))
        assert result.score == 7.2
        assert result.details["type"] == "MMASI"


class TestUAS7:
    """Daily wheal and itch scores (0-3 each) summed over seven days."""

    @staticmethod
    def week(total):
        values, remaining = {}, total
        for day in range(1, 8):
            wheals = min(3, remaining)
            itch = min(3, remaining - wheals)
            values.update({f"d{day}_wheals": wheals, f"d{day}_itch": itch})
            remaining -= wheals + itch
        assert remaining == 0
        return values

    @pytest.mark.parametrize("total,band_text", [
        (0, "Urticaria-free."),
        (1, "Well-controlled urticaria"),
        (6, "Well-controlled urticaria"),
        (7, "Mildly active urticaria."),
        (15, "Mildly active urticaria."),
        (16, "Moderately active urticaria."),
        (27, "Moderately active urticaria."),
        (28, "Severely active urticaria."),
        (42, "Severely active urticaria."),
    ])
    def test_weekly_sum_and_bands(self, total, band_text):
        result = compute("uas7", **self.week(total))
        assert result.score == total
        assert result.interpretation.startswith(f"Total UAS7 Score: {total} (Range: 0-42). {band_text}")

    def test_each_day_contributes(self):
        result = compute("uas7", d7_wheals=3, d7_itch=2, d1_itch=1)
        assert result.score == 6
        assert result.details["Day 7"] == {"wheals": 3, "itch": 2, "total": 5}
        assert result.details["Day 1"]["total"] == 1

    def test_days_past_the_week_are_ignored(self):
        assert compute("uas7", d8_wheals=3, d8_itch=3).score == 0


class TestPassThroughTotals:
    """Instruments that report a total the user computed elsewhere."""

    @pytest.mark.parametrize("raw,score", [(0, 0), (57, 57), (12.5, 12.5)])
    def test_vitiqol(self, raw, score):
        result = compute("vitiqol", total_score=raw)
        assert result.score == score
        assert result.details["score_source"] == "User-entered total score"

    @pytest.mark.parametrize("raw,score", [(0, 0), (1, 1), (33.5, 33.5)])
    def test_iss_vis(self, raw, score):
        result = compute("iss_vis", total_iss_vis_score=raw)
        assert result.score == score
        assert result.details["User_Entered_Score"] == score

    @pytest.mark.parametrize("raw,score", [(7, 7), (8, 8), (69, 69), (70, 70)])
    def test_melasqol(self, raw, score):
        result = compute("melasqol", total_score=raw)
        assert result.score == score
        assert result.interpretation.startswith(f"MELASQOL Score: {score} (Range: 7-70)")

    @pytest.mark.parametrize("raw", [0, None, "", "abc"])
    def test_melasqol_floors_at_seven(self, raw):
        assert compute("melasqol", total_score=raw).score == 7

    def test_melasqol_missing_total(self):
        assert get_instrument("melasqol").compute({}).score == 7


class TestBWAT:
    def test_defaults_are_minimal(self):
        result = compute("bwat")
        assert result.score == 13
        assert result.details["Overall_Severity_Category"].startswith("Minimal")

    def test_missing_items_count_as_one(self):
        assert get_instrument("bwat").compute({}).score == 13

    def test_band_edges(self):
        inst = get_instrument("bwat")
        ids = [f.id for f in flatten_fields(inst.sections)]
        # 13 items; raising 7 of them to 2 gives 20, one more gives 21
        at_20 = compute("bwat", **{i: 2 for i in ids[:7]})
        at_21 = compute("bwat", **{i: 2 for i in ids[:8]})
        assert at_20.score == 20
        assert at_20.details["Overall_Severity_Category"].startswith("Minimal")
        assert at_21.details["Overall_Severity_Category"].startswith("Mild")

    def test_maximum(self):
        inst = get_instrument("bwat")
        result = compute("bwat", **{f.id: 5 for f in flatten_fields(inst.sections)})
        assert result.score == 65
        assert result.details["Overall_Severity_Category"].startswith("Extreme")


# ============================================================
# TEST: REDUCTION FROM BASELINE
# ============================================================

class TestHiSCR:
    def test_percent_reduction_zero_baseline(self):
        assert percent_reduction(0, 0) == 100.0
        assert percent_reduction(0, 3) == 0.0
        assert percent_reduction(10, 5) == 50.0

    def test_zero_baseline_zero_followup_is_responder(self):
        result = compute("hiscr")
        assert result.score == 1
        assert result.details["Percent_AN_Reduction"] == 100

    def test_zero_baseline_new_lesions_is_non_responder(self):
        result = compute("hiscr", currentAN=2)
        assert result.score == 0
        assert result.details["Percent_AN_Reduction"] == 0

    def test_exactly_half_is_responder(self):
        assert compute("hiscr", baselineAN=10, currentAN=5).score == 1
        assert compute("hiscr", baselineAN=10, currentAN=6).score == 0

    def test_abscess_increase_blocks_response(self):
        result = compute("hiscr", baselineAN=10, currentAN=2, baselineAbscesses=1, currentAbscesses=2)
        assert result.score == 0
        assert result.details["No_Abscess_Increase_Met"] is False
        assert result.interpretation.startswith("HiSCR Not Achieved")

    def test_fistula_increase_blocks_response(self):
        result = compute("hiscr", baselineAN=10, currentAN=2, currentFistulas=1)
        assert result.score == 0


# ============================================================
# TEST: INSTRUMENT-SPECIFIC SCENARIOS
# ============================================================

class TestPUSH:
    @pytest.mark.parametrize("area,expected", [
        (0, 0), (0.3, 1), (0.31, 2), (1.0, 3), (4.0, 6), (8.0, 7), (24.0, 9), (24.01, 10),
    ])
    def test_area_subscore(self, area, expected):
        assert push_area_subscore(area) == expected

    def test_total(self):
        result = compute("push", push_length_cm=2, push_width_cm=1.5, push_exudate_amount=2, push_tissue_type=3)
        assert result.details["area_cm2"] == "3.00"
        assert result.details["area_sub_score"] == 5
        assert result.score == 10
        assert result.details["healing_status_category"].startswith("Moderate")

    def test_healed(self):
        result = compute("push")
        assert result.score == 0
        assert result.details["healing_status_category"] == "Closed/Healed"


class TestCTCAE:
    def test_known_grade_uses_recorded_criteria(self):
        result = compute("ctcae_skin", ae_term_select="Pruritus", ctcae_grade=2)
        assert result.score == 2
        assert result.details["Criteria_Summary"] == CTCAE_CRITERIA["Pruritus"][2]

    def test_generic_top_grade(self):
        assert ctcae_criteria("Photosensitivity", 4, "Grade 4 - Life-threatening") == (
            "Life-threatening consequences; urgent intervention indicated."
        )
        assert ctcae_criteria("Nail changes", 5, "Grade 5 - Death") == "Death related to AE."

    def test_top_grade_without_generic_wording(self):
        text = ctcae_criteria("Alopecia", 4, "Grade 4 - Life-threatening")
        assert "Refer to full CTCAE manual" in text

    def test_other(self):
        result = compute("ctcae_skin", ae_term_select="Other", ctcae_grade=3)
        assert '"Other" AE' in result.details["Criteria_Summary"]

    def test_missing_mid_grade(self):
        text = ctcae_criteria("Alopecia", 3, "Grade 3 - Severe")
        assert text.startswith("Criteria for Alopecia Grade 3 - Severe not pre-defined")


class TestMSWAT:
    def test_weights(self):
        result = compute("mswat", bsa_patches=10, bsa_plaques=5, bsa_tumors_ulcers=2.5)
        assert result.score == 30
        assert result.details["Total_BSA_Involved_Percent"] == 17.5
        assert "exceeds 100%" not in result.interpretation

    def test_overlap_note(self):
        result = compute("mswat", bsa_patches=60, bsa_plaques=50)
        assert result.score == 160
        assert "exceeds 100%" in result.interpretation

    def test_every_category_at_full_bsa(self):
        result = compute("mswat", bsa_patches=100, bsa_plaques=100, bsa_tumors_ulcers=100)
        assert result.score == 700
        assert result.score <= get_instrument("mswat").score_range[1]
        assert "exceeds 100%" in result.interpretation


class TestABSIS:
    def test_skin_score_rounds_the_computed_fraction(self):
        # 35% of the anterior trunk (0.18) at healed quality (0.5) lands just under 3.15
        result = compute("absis", absis_skin_area_percent_trunk_anterior=35)
        assert result.score == 3.1
        assert result.details["Skin_Score_Calculated"] == 3.1

    def test_full_exudative_skin_is_150(self):
        inst = get_instrument("absis")
        values = {}
        for field in flatten_fields(inst.sections):
            if field.id.startswith("absis_skin_area_percent_"):
                values[field.id] = 100
            elif field.id.startswith("absis_skin_quality_"):
                values[field.id] = 1.5
        result = compute("absis", **values)
        assert result.details["Skin_Score_Calculated"] == 150
        assert result.details["Severity_Category"] == "Severe"


class TestUCT:
    def test_control_threshold(self):
        assert compute("uct", q4_control=0).score == 12
        assert "well controlled" in compute("uct", q4_control=0).interpretation
        poor = compute("uct", q1_symptoms=1, q4_control=0)
        assert poor.score == 11
        assert "poorly controlled" in poor.interpretation


class TestFiveDItch:
    def test_missing_domains_floor_at_one(self):
        assert get_instrument("five_d_itch").compute({}).score == 5
