"""
Tool handler and command-line interface.
"""

import json

import pytest

from dermscore.cli import EXIT_INVALID, EXIT_NOT_FOUND, EXIT_OK, main, parse_assignment
from dermscore.models import ExecuteResult, InstrumentInfo
from dermscore.registry import Registry
from dermscore.tools import TOOL_DEFINITIONS, ToolHandler, format_instrument_info


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def handler():
    return ToolHandler()


# ============================================================
# TEST: TOOL HANDLER
# ============================================================

class TestToolHandler:
    def test_tool_definitions_named(self):
        names = [t["function"]["name"] for t in TOOL_DEFINITIONS]
        assert names == ["list_instruments", "instrument_info", "execute"]

    def test_list_filters(self, handler):
        rows = handler.list_instruments(condition="Pyoderma")
        assert {r["id"] for r in rows} == {"pg_delphi", "pg_paracelsus", "pg_su"}
        assert all(set(r) == {"id", "title", "condition", "description"} for r in rows)

    def test_instrument_info(self, handler):
        info = handler.instrument_info("push")
        assert isinstance(info, InstrumentInfo)
        assert [i["id"] for i in info.inputs] == [
            "push_length_cm", "push_width_cm", "push_exudate_amount", "push_tissue_type",
        ]
        assert info.inputs[0]["constraints"]["max"] == 100
        assert info.defaults["push_tissue_type"] == 0
        assert info.score_range == (0, 17)

    def test_instrument_info_resolves_case(self, handler):
        assert handler.instrument_info("PUSH").id == "push"

    def test_instrument_info_is_cached(self, handler):
        assert handler.instrument_info("dlqi") is handler.instrument_info("dlqi")

    def test_instrument_info_unknown(self, handler):
        with pytest.raises(ValueError, match="not found"):
            handler.instrument_info("nope")

    def test_execute_success(self, handler):
        outcome = handler.execute("dlqi", {"q1": 3, "q2": "2"})
        assert isinstance(outcome, ExecuteResult)
        assert outcome.success
        assert outcome.result.score == 5
        assert outcome.errors == []

    def test_execute_validation_errors(self, handler):
        outcome = handler.execute("dlqi", {"q1": 9, "q2": 1})
        assert not outcome.success
        assert outcome.result is None
        assert len(outcome.errors) == 1
        assert "Q1" in outcome.errors[0]

    def test_execute_unknown_field_warns(self, handler):
        outcome = handler.execute("dlqi", {"q99": 1})
        assert outcome.success
        assert outcome.warnings == ["Unknown field ignored: q99"]

    def test_execute_at_field_maxima_stays_in_range(self, handler):
        outcome = handler.execute("mswat", {"bsa_patches": 100, "bsa_plaques": 100, "bsa_tumors_ulcers": 100})
        assert outcome.success
        lo, hi = handler.instrument_info("mswat").score_range
        assert lo <= outcome.result.score <= hi

    def test_execute_rejects_total_below_floor(self, handler):
        outcome = handler.execute("melasqol", {"total_score": 6})
        assert not outcome.success
        assert "at least 7" in outcome.errors[0]

    def test_execute_unknown_instrument(self, handler):
        outcome = handler.execute("nope", {})
        assert not outcome.success
        assert outcome.errors == ["Instrument 'nope' not found"]

    def test_execute_tool_dispatch(self, handler):
        assert handler.execute_tool("instrument_info", {})["error"].startswith("Missing required parameter")
        assert handler.execute_tool("instrument_info", {"instrument_id": "nope"}) == {
            "error": "Instrument 'nope' not found",
        }
        payload = handler.execute_tool("execute", {"instrument_id": "scorten", "values": {"age_ge40": True}})
        assert payload["success"] is True
        assert payload["result"]["score"] == 1
        assert handler.execute_tool("bogus", {}) == {"error": "Unknown tool: bogus"}
        assert handler.execute_tool("list_instruments", {"query": "scorten"})["instruments"][0]["id"] == "scorten"

    def test_custom_empty_registry(self):
        empty = ToolHandler(Registry([]))
        assert empty.list_instruments() == []
        assert not empty.execute("dlqi", {}).success

    def test_format_instrument_info(self, handler):
        text = format_instrument_info(handler.instrument_info("push"))
        assert text.startswith("Instrument: Pressure Ulcer Scale for Healing (PUSH) (push)")
        assert "push_length_cm" in text
        assert "Score range: 0 to 17" in text


# ============================================================
# TEST: COMMAND LINE
# ============================================================

class TestCli:
    def test_parse_assignment(self):
        assert parse_assignment("q1=3") == ("q1", 3)
        assert parse_assignment("flag=true") == ("flag", True)
        assert parse_assignment("version=original") == ("version", "original")

    def test_list(self, capsys):
        assert main(["list", "--search", "scorten"]) == EXIT_OK
        assert "scorten" in capsys.readouterr().out

    def test_list_json(self, capsys):
        assert main(["--json", "list", "--condition", "Pyoderma"]) == EXIT_OK
        rows = json.loads(capsys.readouterr().out)
        assert len(rows) == 3

    def test_info(self, capsys):
        assert main(["info", "push"]) == EXIT_OK
        assert "push_tissue_type" in capsys.readouterr().out

    def test_defaults_json(self, capsys):
        assert main(["--json", "defaults", "bwat"]) == EXIT_OK
        defaults = json.loads(capsys.readouterr().out)
        assert len(defaults) == 13
        assert set(defaults.values()) == {1}

    def test_compute(self, capsys):
        assert main(["compute", "dlqi", "--set", "q1=3", "--set", "q2=3"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Score: 6" in out
        assert "Moderate effect" in out

    def test_compute_json_values(self, capsys):
        code = main(["--json", "compute", "scorten", "--values", '{"age_ge40": true, "bsa_gt10": true}'])
        assert code == EXIT_OK
        payload = json.loads(capsys.readouterr().out)
        assert payload["result"]["score"] == 2

    def test_json_flag_after_subcommand(self, capsys):
        assert main(["compute", "dlqi", "--set", "q1=3", "--json"]) == EXIT_OK
        payload = json.loads(capsys.readouterr().out)
        assert payload["result"]["score"] == 3

        assert main(["list", "--condition", "Pyoderma", "--json"]) == EXIT_OK
        assert len(json.loads(capsys.readouterr().out)) == 3

    def test_plain_output_without_json_flag(self, capsys):
        assert main(["defaults", "bwat"]) == EXIT_OK
        out = capsys.readouterr().out
        assert not out.lstrip().startswith("{")
        assert "=1" in out

    def test_compute_invalid_value(self, capsys):
        assert main(["compute", "dlqi", "--set", "q1=9"]) == EXIT_INVALID
        assert "error:" in capsys.readouterr().err

    def test_compute_bad_json(self, capsys):
        assert main(["compute", "dlqi", "--values", "{not json"]) == EXIT_INVALID

    def test_unknown_instrument(self, capsys):
        assert main(["compute", "nope"]) == EXIT_NOT_FOUND
        assert main(["info", "nope"]) == EXIT_NOT_FOUND
        assert "not found" in capsys.readouterr().err
