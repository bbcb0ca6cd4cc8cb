"""Tests for recovering generated documents."""

import json

import pytest

from homepilot.errors import RecoveryFailed
from homepilot.recovery import interpret_generated, recover_document, repair_json_text, strip_fences
from homepilot.recovery.parser import ScanState, scan

SAMPLE = {
    "affordabilityScore": 72,
    "affordabilityLevel": "Affordable",
    "monthlyPayment": 2055.06,
    "dtiRatio": 34.1,
    "ok": True,
    "missing": None,
    "note": 'say "hi" \\ café, {not: a brace}',
    "insuranceBreakdown": {"year1": 1000, "year2": 1040, "notes": "Scaled [from] price"},
    "keyInsights": ["Great value", "Hot property", {"nested": [1, -2.5, [True, False]]}],
    "warnings": [],
    "delta": -12,
}


def _is_structural_prefix(got, want) -> bool:
    """True when ``got`` could be produced by cutting ``want`` short."""
    if isinstance(want, dict):
        if not isinstance(got, dict):
            return False
        keys = list(got)
        if keys != list(want)[: len(keys)]:
            return False
        if not keys:
            return True
        if any(got[k] != want[k] for k in keys[:-1]):
            return False
        return _is_structural_prefix(got[keys[-1]], want[keys[-1]])
    if isinstance(want, list):
        if not isinstance(got, list) or len(got) > len(want):
            return False
        if not got:
            return True
        if got[:-1] != want[: len(got) - 1]:
            return False
        return _is_structural_prefix(got[-1], want[len(got) - 1])
    if isinstance(want, str):
        return isinstance(got, str) and want.startswith(got)
    if isinstance(want, bool) or want is None:
        return got == want
    return isinstance(got, (int, float)) and not isinstance(got, bool) and got == want


class TestScenarios:
    """Exact recoveries for truncated generator output."""

    def test_unclosed_array_and_object(self) -> None:
        raw = '{"score":80,"items":["a","b"'
        assert repair_json_text(raw) == '{"score":80,"items":["a","b"]}'
        assert recover_document(raw).data == {"score": 80, "items": ["a", "b"]}

    def test_cut_mid_string(self) -> None:
        raw = '{"note":"partial te'
        assert repair_json_text(raw) == '{"note":"partial te"}'
        doc = recover_document(raw)
        assert doc.data == {"note": "partial te"}
        assert doc.repaired is True

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ('{"a":1,"b', {"a": 1}),
            ('{"a":1,"b"', {"a": 1}),
            ('{"a":1,"b":', {"a": 1}),
            ('{"a":1,"b": ', {"a": 1}),
            ('{"a":1,', {"a": 1}),
            ('{"a":tru', {}),
            ('{"a":1,"b":-', {"a": 1}),
            ('{"a":1,"b":1.', {"a": 1}),
            ('{"a":1,"b":72', {"a": 1}),
            ('{"a":1,"b":true', {"a": 1}),
            ('{"a":1,"b":7\n', {"a": 1, "b": 7}),
            ("[1, 2", [1]),
            ('{"a":[1,2,', {"a": [1, 2]}),
            ('{"a":{"b":', {"a": {}}),
            ('{"a":{"b":1},"c":[{"d":"x', {"a": {"b": 1}, "c": [{"d": "x"}]}),
            ("[1, 2, nul", [1, 2]),
            ("[", []),
        ],
    )
    def test_truncated_tails(self, raw: str, expected) -> None:
        assert recover_document(raw).data == expected

    def test_dangling_escape_trimmed(self) -> None:
        assert recover_document('{"a":"line\\').data == {"a": "line"}
        assert recover_document('{"a":"caf\\u00').data == {"a": "caf"}
        assert recover_document('{"a":"q\\"').data == {"a": 'q"'}

    def test_escaped_quote_does_not_close_string(self) -> None:
        assert recover_document('{"a":"x\\"}').data == {"a": 'x"}'}


class TestWellFormed:
    @pytest.mark.parametrize("indent", [None, 2])
    def test_idempotent(self, indent) -> None:
        text = json.dumps(SAMPLE, indent=indent)
        doc = recover_document(text)
        assert doc.data == SAMPLE
        assert doc.text == text
        assert doc.repaired is False
        assert repair_json_text(text) == text

    def test_fenced(self) -> None:
        doc = recover_document('```json\n{"a": 1}\n```')
        assert doc.data == {"a": 1}
        assert doc.repaired is False

    def test_fenced_and_truncated(self) -> None:
        doc = recover_document('```json\n{"score":80,"items":["a","b"')
        assert doc.data == {"score": 80, "items": ["a", "b"]}
        assert doc.repaired is True

    def test_surrounding_prose_dropped(self) -> None:
        doc = recover_document('Here is the analysis:\n{"a": [1]}\nLet me know if you need more!')
        assert doc.data == {"a": [1]}
        assert doc.repaired is True

    def test_strip_fences(self) -> None:
        assert strip_fences("  ```\n[1]\n```  ") == "[1]"
        assert strip_fences("[1]") == "[1]"


class TestPrefixProperty:
    @pytest.mark.parametrize("indent", [None, 2])
    def test_every_truncation_is_error_or_prefix(self, indent) -> None:
        text = json.dumps(SAMPLE, indent=indent)
        for k in range(len(text) + 1):
            try:
                got = recover_document(text[:k]).data
            except RecoveryFailed:
                continue
            assert _is_structural_prefix(got, SAMPLE), (k, text[:k], got)


class TestFailures:
    def test_no_document(self) -> None:
        with pytest.raises(RecoveryFailed) as exc:
            recover_document("I could not analyze this property.")
        assert exc.value.original == "I could not analyze this property."

    def test_empty(self) -> None:
        with pytest.raises(RecoveryFailed):
            recover_document("")

    def test_unrepairable_interior(self) -> None:
        with pytest.raises(RecoveryFailed) as exc:
            recover_document('{"a" 1, "b": "x')
        assert exc.value.original == '{"a" 1, "b": "x'
        assert exc.value.repaired == '{"a" 1, "b": "x"}'


class TestScanner:
    """Tests for the Normal / InString / Escaped state machine."""

    def test_depths(self) -> None:
        st = scan('{"a":["x",{"b":')
        assert st.brace_depth == 2
        assert st.bracket_depth == 1
        assert st.state is ScanState.NORMAL

    def test_braces_inside_strings_ignored(self) -> None:
        st = scan('{"k":"a}b]c')
        assert st.state is ScanState.IN_STRING
        assert st.brace_depth == 1
        assert st.bracket_depth == 0
        assert st.root_end is None

    def test_escape_covers_one_character(self) -> None:
        assert scan('{"k":"a\\').state is ScanState.ESCAPED
        assert scan('{"k":"a\\\\').state is ScanState.IN_STRING
        assert scan('{"k":"a\\\\"').state is ScanState.NORMAL

    def test_stops_at_root_close(self) -> None:
        st = scan('{"a":1} {"b":')
        assert st.root_end == 7


class TestInterpret:
    def test_reads_record_fields(self) -> None:
        raw = json.dumps(
            {
                "affordabilityScore": "72",
                "affordabilityLevel": "Affordable",
                "monthlyPayment": "$2,055",
                "dtiRatio": 34.1,
                "keyInsights": "Great value",
                "warnings": ["High DTI", None, ""],
                "williamRecommendation": "Go for it.",
                "insuranceBreakdown": {"year1": 1000},
                "fiveYearSummary": {"totalReturn": 90000},
            }
        )
        g = interpret_generated(raw)
        assert g.score == 72
        assert g.level == "Affordable"
        assert g.monthly_payment == 2055
        assert g.dti_ratio == 34.1
        assert g.insights == ("Great value",)
        assert g.warnings == ("High DTI",)
        assert g.advisor_message == "Go for it."
        assert g.breakdowns == {"insuranceBreakdown": {"year1": 1000}}
        assert g.five_year_summary == {"totalReturn": 90000}
        assert g.repaired is False

    def test_record_kept_as_recovered(self) -> None:
        g = interpret_generated('{"investmentScore": 55, "keyInsights": ["a", "b')
        assert g.record == {"investmentScore": 55, "keyInsights": ["a", "b"]}
        assert g.score == 55
        assert g.insights == ("a", "b")
        assert g.advisor_message == ""
        assert g.repaired is True

    def test_non_object_rejected(self) -> None:
        with pytest.raises(RecoveryFailed):
            interpret_generated("[1, 2, 3]")

    def test_number_at_end_of_input_dropped(self) -> None:
        g = interpret_generated('{"affordabilityLevel":"Affordable","monthlyPayment":2055.06,"affordabilityScore":7')
        assert g.record == {"affordabilityLevel": "Affordable", "monthlyPayment": 2055.06}
        assert g.score is None
        assert g.repaired is True
