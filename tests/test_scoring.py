"""
Shared scoring helpers: lenient coercion, rounding, banding and result building.
"""

import pytest

from dermscore.scoring import (
    band,
    clamp,
    count_true,
    fmt,
    make_result,
    parse_bool,
    parse_num,
    parse_str,
    round_to,
    sum_nums,
    tidy,
)


# ============================================================
# TEST: VALUE COERCION
# ============================================================

class TestParseNum:
    """Missing or malformed input degrades to the default."""

    @pytest.mark.parametrize("raw,expected", [
        (3, 3.0),
        ("2.5", 2.5),
        (" 4 ", 4.0),
        (True, 1.0),
        ({"value": 7}, 7.0),
    ])
    def test_numeric_inputs(self, raw, expected):
        assert parse_num(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", [], float("nan"), float("inf")])
    def test_unusable_inputs_fall_back(self, raw):
        assert parse_num(raw) == 0.0
        assert parse_num(raw, 5) == 5

    def test_zero_is_not_replaced_by_default(self):
        assert parse_num(0, 1) == 0.0


class TestParseBoolAndStr:
    @pytest.mark.parametrize("raw", [True, "true", "Yes", "1", 1, 2.0, {"value": True}])
    def test_truthy(self, raw):
        assert parse_bool(raw) is True

    @pytest.mark.parametrize("raw", [False, None, "false", "no", "", 0, float("nan"), []])
    def test_falsy(self, raw):
        assert parse_bool(raw) is False

    def test_parse_str(self):
        assert parse_str(None, "x") == "x"
        assert parse_str(3) == "3"
        assert parse_str({"value": "weighted"}) == "weighted"


def test_clamp_count_and_sum():
    assert clamp(12, 0, 10) == 10
    assert clamp(-1, 0, 10) == 0
    values = {"a": True, "b": "yes", "c": False, "x": "2", "y": None}
    assert count_true(values, ["a", "b", "c", "missing"]) == 2
    assert sum_nums(values, ["x", "y", "missing"]) == 2.0


# ============================================================
# TEST: ROUNDING AND FORMATTING
# ============================================================

class TestRounding:
    def test_round_half_up(self):
        assert round_to(2.25, 1) == 2.3
        assert round_to(0.125, 2) == 0.13
        assert round_to(2.5, 0) == 3.0

    def test_round_negative_away_from_zero(self):
        assert round_to(-1.25, 1) == -1.3

    @pytest.mark.parametrize("value,ndigits,expected", [(3.15, 1, 3.1), (1.005, 2, 1.0), (2.675, 2, 2.67)])
    def test_rounds_the_stored_binary_value(self, value, ndigits, expected):
        # each literal sits just below its written half in binary
        assert round_to(value, ndigits) == expected

    def test_tidy_collapses_integral_floats(self):
        assert tidy(12.0) == 12
        assert isinstance(tidy(12.0), int)
        assert tidy(1.5) == 1.5
        assert tidy({"a": 2.0, "b": {"c": 3.0}}) == {"a": 2, "b": {"c": 3}}

    def test_fmt(self):
        assert fmt(3.0) == "3"
        assert fmt(2.5) == "2.5"
        assert fmt(2.5, 2) == "2.50"
        assert fmt(7) == "7"


# ============================================================
# TEST: BANDING
# ============================================================

class TestBand:
    BANDS = [("<", 10, "low"), ("<=", 20, "mid")]

    def test_exclusive_bound(self):
        assert band(9.99, self.BANDS, "high") == "low"
        assert band(10, self.BANDS, "high") == "mid"

    def test_inclusive_bound(self):
        assert band(20, self.BANDS, "high") == "mid"
        assert band(20.01, self.BANDS, "high") == "high"

    def test_unknown_operator_raises(self):
        with pytest.raises(ValueError):
            band(1, [(">", 0, "x")], "y")


def test_make_result_tidies_score_and_details():
    result = make_result(4.0, "text", {"n": 2.0})
    assert result.score == 4
    assert result.details == {"n": 2}
