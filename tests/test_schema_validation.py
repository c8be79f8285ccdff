"""
Section-tree walks and per-field validation.
"""

import pytest
from pydantic import ValidationError

from dermscore.models import FieldGroup, FieldKind, FieldSpec, Instrument, Result, SourceType
from dermscore.schema import (
    checkbox_input,
    default_values,
    flatten_fields,
    group,
    number_input,
    options,
    ordinal_options,
    radio_input,
    select_input,
    text_input,
    with_defaults,
    yes_no_options,
)
from dermscore.validation import FieldError, validate, validate_values


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def sections():
    return [
        number_input("count", "Lesion count", min=0, max=50, default=2),
        group("grp", "Grouped", [
            select_input("grade", "Grade", ordinal_options(0, 3)),
            radio_input("site", "Site", options([("scalp", "Scalp"), ("trunk", "Trunk")]), default="trunk"),
        ]),
        checkbox_input("itch", "Itch present"),
        text_input("note", "Note"),
    ]


# ============================================================
# TEST: SECTION TREE
# ============================================================

class TestSectionTree:
    def test_flatten_preserves_declaration_order(self, sections):
        assert [f.id for f in flatten_fields(sections)] == ["count", "grade", "site", "itch", "note"]

    def test_default_values(self, sections):
        assert default_values(sections) == {"count": 2, "grade": 0, "site": "trunk", "itch": False, "note": ""}

    def test_with_defaults_overlays_supplied_values(self, sections):
        merged = with_defaults(sections, {"grade": 2, "extra": 1})
        assert merged["grade"] == 2
        assert merged["count"] == 2
        assert merged["extra"] == 1

    def test_flatten_rejects_unknown_section(self):
        with pytest.raises(TypeError):
            flatten_fields(["not a section"])


class TestDeclarationInvariants:
    """Malformed declarations are rejected when the instrument module loads."""

    def test_select_needs_options(self):
        with pytest.raises(ValidationError):
            FieldSpec(id="x", label="X", kind=FieldKind.SELECT, default=0)

    def test_select_default_must_be_an_option(self):
        with pytest.raises(ValidationError):
            select_input("x", "X", ordinal_options(1, 3), default=0)

    def test_option_values_unique(self):
        with pytest.raises(ValidationError):
            select_input("x", "X", options([(1, "a"), (1, "b")]))

    def test_option_values_share_one_type(self):
        with pytest.raises(ValidationError):
            select_input("x", "X", options([(0, "None"), ("other", "Other")]))

    def test_number_default_within_bounds(self):
        with pytest.raises(ValidationError):
            number_input("x", "X", min=1, max=5, default=0)

    def test_duplicate_field_ids_rejected(self):
        with pytest.raises(ValidationError):
            Instrument(
                id="dup", name="Dup", description="d", condition="c", source_type=SourceType.RESEARCH,
                sections=[number_input("a", "A"), group("g", "G", [number_input("a", "A again")])],
                compute=lambda v: Result(score=0, interpretation=""),
            )

    def test_yes_no_options(self):
        assert [(o.value, o.label) for o in yes_no_options()] == [(0, "No"), (1, "Yes")]

    def test_group_is_display_only(self, sections):
        grp = sections[1]
        assert isinstance(grp, FieldGroup)
        assert grp.section_type == "group"
        assert sections[0].section_type == "field"


# ============================================================
# TEST: FIELD VALIDATION
# ============================================================

class TestValidate:
    def test_number_bounds(self, sections):
        count = sections[0]
        assert validate(count, 0) is None
        assert validate(count, "50") is None
        assert isinstance(validate(count, 51), FieldError)
        assert isinstance(validate(count, -1), FieldError)

    @pytest.mark.parametrize("raw", [None, "abc", True, float("nan")])
    def test_number_rejects_non_numeric(self, sections, raw):
        err = validate(sections[0], raw)
        assert err is not None
        assert err.field_id == "count"

    def test_numeric_select_accepts_text(self, sections):
        grade = flatten_fields(sections)[1]
        assert validate(grade, 3) is None
        assert validate(grade, "3") is None
        assert validate(grade, 3.0) is None
        assert validate(grade, 4) is not None

    def test_fractional_select_options(self):
        quality = select_input("q", "Quality", options([(0.5, "Healed"), (1.0, "Dry"), (1.5, "Exudative")]))
        assert quality.numeric_options()
        assert validate(quality, "1") is None
        assert validate(quality, 1.5) is None
        assert isinstance(validate(quality, "wet"), FieldError)

    def test_string_radio(self, sections):
        site = flatten_fields(sections)[2]
        assert validate(site, "scalp") is None
        assert validate(site, "Scalp") is not None

    def test_checkbox_requires_bool(self, sections):
        itch = flatten_fields(sections)[3]
        assert validate(itch, True) is None
        assert validate(itch, 1) is not None

    def test_text_requires_string(self, sections):
        note = flatten_fields(sections)[4]
        assert validate(note, "") is None
        assert validate(note, 5) is not None


class TestValidateValues:
    def test_errors_are_field_local(self, sections):
        errors = validate_values(sections, {"count": 99, "grade": 9, "itch": True})
        assert set(errors) == {"count", "grade"}
        assert "at most" in errors["count"].message

    def test_undeclared_and_missing_keys_are_not_errors(self, sections):
        assert validate_values(sections, {"unknown": "x"}) == {}
        assert validate_values(sections, {}) == {}
