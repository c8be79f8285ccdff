"""
Instrument registry: ordering, lookup and search.
"""

import pytest

from dermscore import registry as registry_module
from dermscore.instruments import ALL_INSTRUMENTS
from dermscore.instruments.psoriasis import PASI
from dermscore.registry import REGISTRY, InstrumentNotFound, Registry, all_instruments, by_id, get_instrument


EXPECTED_IDS = {
    # quality of life
    "dlqi", "cdlqi", "scqoli-10", "skindex29", "acneqol", "melasqol", "vitiqol",
    # eczema
    "easi", "scorad", "poem", "viga_ad", "sassad", "hecsi", "dasi",
    # psoriasis
    "pasi", "pssi", "napsi", "pga_psoriasis", "pest",
    # hidradenitis suppurativa
    "hiscr", "hspga", "hurley_staging_hs", "ihs4", "mss_hs",
    # acne and rosacea
    "gags", "iga_acne", "iga_rosacea", "cea_rosacea",
    # autoimmune
    "bilag_skin", "sledai_skin", "loscat", "mrss", "essdai_cutaneous", "bvas_skin", "sasi", "dssi",
    # pigmentation and hair
    "masi_mmasi", "vasi", "vida", "salt", "mfg_score", "fitzpatrick_skin_type",
    # pruritus and urticaria
    "nrs_pruritus", "vas_pruritus", "five_d_itch", "iss_vis", "uas7", "uct", "aas",
    # bullous
    "absis", "bpdai", "pdai",
    # pyoderma gangrenosum
    "pg_delphi", "pg_paracelsus", "pg_su",
    # oncology
    "abcde_melanoma", "seven_point_checklist", "ctcae_skin", "mswat", "scorten",
    # wounds
    "bwat", "push",
}


class TestRegistryContents:
    def test_every_instrument_registered(self):
        assert {inst.id for inst in all_instruments()} == EXPECTED_IDS
        assert len(REGISTRY) == len(ALL_INSTRUMENTS)

    def test_all_sorted_by_name(self):
        names = [inst.name.lower() for inst in all_instruments()]
        assert names == sorted(names)

    def test_all_returns_a_copy(self):
        listing = all_instruments()
        listing.clear()
        assert len(all_instruments()) == len(REGISTRY)


class TestLookup:
    def test_by_id(self):
        assert by_id("pasi") is PASI
        assert "pasi" in REGISTRY

    def test_unknown_id_is_none(self):
        assert by_id("no_such_instrument") is None
        assert "no_such_instrument" not in REGISTRY

    def test_get_raises_not_found(self):
        with pytest.raises(InstrumentNotFound) as exc:
            get_instrument("no_such_instrument")
        assert "not found" in str(exc.value)
        assert isinstance(exc.value, ValueError)

    def test_resolve_id_is_case_insensitive(self):
        assert REGISTRY.resolve_id(" PASI ") == "pasi"
        assert REGISTRY.resolve_id("nope") is None


class TestConstruction:
    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError):
            Registry([PASI, PASI])

    def test_empty_registry(self):
        empty = Registry([])
        assert len(empty) == 0
        assert empty.all() == []
        assert empty.by_id("pasi") is None

    def test_module_singleton(self):
        assert registry_module.REGISTRY is REGISTRY


class TestSearch:
    def test_search_by_keyword(self):
        ids = {inst.id for inst in REGISTRY.search("nail")}
        assert "napsi" in ids

    def test_search_by_condition(self):
        hits = REGISTRY.search(condition="pyoderma gangrenosum")
        assert {inst.id for inst in hits} == {"pg_delphi", "pg_paracelsus", "pg_su"}

    def test_empty_query_returns_everything(self):
        assert len(REGISTRY.search()) == len(REGISTRY)

    def test_conditions_are_unique_and_sorted(self):
        conditions = REGISTRY.conditions()
        assert len(conditions) == len(set(conditions))
        assert conditions == sorted(conditions, key=str.lower)
