"""
Tests for the GBIF name parser integration.

Tests cover:
- Parsing response decoding
- Review flagging policy
- Correction table application
- Rank marker join
- Error handling

Note: These tests mock pygbif to avoid hitting the GBIF API during testing.
"""

from unittest.mock import patch

import pytest
import requests

from errors import NameParsingError
from qc.gbif import (
    NameParser,
    ParsedName,
    apply_corrections,
    attach_rank_markers,
    distinct_names,
    flag_for_review,
    parse_checklist_names,
)


def _response(name, type_="SCIENTIFIC", parsed=True, partially=False, marker="sp."):
    return {
        "scientificName": name,
        "type": type_,
        "parsed": parsed,
        "parsedPartially": partially,
        "rankMarker": marker,
        "canonicalName": name,
    }


@pytest.fixture
def parser():
    return NameParser(timeout=5)


class TestParsedName:
    """Tests for ParsedName decoding and review policy."""

    def test_from_response(self):
        result = ParsedName.from_response(_response("Baz qux var. minor", marker="var."))

        assert result.scientificname == "Baz qux var. minor"
        assert result.type == "SCIENTIFIC"
        assert result.parsed is True
        assert result.parsedpartially is False
        assert result.rankmarker == "var."

    def test_from_response_with_state(self):
        """Newer parser responses report a state instead of parse flags."""
        result = ParsedName.from_response(
            {"scientificName": "Foo bar", "type": "SCIENTIFIC", "state": "PARTIAL"}
        )

        assert result.parsed is True
        assert result.parsedpartially is True
        assert result.rankmarker == ""

    def test_clean_parse_not_flagged(self):
        assert ParsedName.from_response(_response("Foo bar")).needs_review is False

    @pytest.mark.parametrize(
        "payload",
        [
            _response("Foo sp. A", type_="INFORMAL"),
            _response("Foo bar", parsed=False),
            _response("Foo bar x", partially=True),
        ],
    )
    def test_unclean_parse_flagged(self, payload):
        assert ParsedName.from_response(payload).needs_review is True


class TestNameParser:
    """Tests for NameParser.parse_names."""

    @patch("qc.gbif.species")
    def test_single_call_with_all_names(self, mock_species, parser):
        mock_species.name_parser.return_value = [_response("Foo bar"), _response("Baz qux")]

        results = parser.parse_names(["Foo bar", "Baz qux"])

        mock_species.name_parser.assert_called_once_with(["Foo bar", "Baz qux"], timeout=5)
        assert set(results) == {"Foo bar", "Baz qux"}
        assert results["Baz qux"].rankmarker == "sp."

    @patch("qc.gbif.species")
    def test_empty_input_skips_call(self, mock_species, parser):
        assert parser.parse_names([]) == {}
        mock_species.name_parser.assert_not_called()

    @patch("qc.gbif.species")
    def test_missing_entry_is_unparsed(self, mock_species, parser):
        mock_species.name_parser.return_value = [_response("Foo bar")]

        results = parser.parse_names(["Foo bar", "Baz qux"])

        assert results["Baz qux"].parsed is False
        assert results["Baz qux"].rankmarker == ""
        assert results["Baz qux"].needs_review is True

    @patch("qc.gbif.species")
    def test_network_error_is_fatal(self, mock_species, parser):
        mock_species.name_parser.side_effect = requests.ConnectionError("offline")

        with pytest.raises(NameParsingError) as excinfo:
            parser.parse_names(["Foo bar"])

        assert excinfo.value.code == "parser_failed"

    @patch("qc.gbif.species")
    def test_bad_response_is_fatal(self, mock_species, parser):
        mock_species.name_parser.return_value = {"error": "boom"}

        with pytest.raises(NameParsingError):
            parser.parse_names(["Foo bar"])

    def test_from_config(self):
        assert NameParser.from_config({"gbif": {"timeout": 12}}).timeout == 12
        assert NameParser.from_config({}).timeout == 30.0


class TestHelpers:
    """Tests for the row-level helpers."""

    def test_distinct_names_keeps_first_order(self, make_row):
        rows = [make_row("Foo bar"), make_row("Baz qux"), make_row("Foo bar"), make_row("")]
        assert distinct_names(rows) == ["Foo bar", "Baz qux"]

    def test_flag_for_review_logs(self, caplog):
        parsed = {
            "Foo bar": ParsedName.from_response(_response("Foo bar")),
            "Foo sp. A": ParsedName.from_response(_response("Foo sp. A", type_="INFORMAL")),
        }

        with caplog.at_level("WARNING", logger="qc.gbif"):
            flagged = flag_for_review(parsed)

        assert [r.scientificname for r in flagged] == ["Foo sp. A"]
        assert "Foo sp. A" in caplog.text

    def test_apply_corrections(self, make_row):
        rows = (make_row("Foo barr"), make_row("Baz qux"))

        corrected = apply_corrections(rows, {"Foo barr": "Foo bar"})

        assert [r.raw_scientific_name for r in corrected] == ["Foo bar", "Baz qux"]
        assert rows[0].raw_scientific_name == "Foo barr"

    def test_attach_rank_markers(self, make_row):
        rows = (make_row("Foo bar", locality="Antwerp"), make_row("Baz qux"), make_row("Foo bar"))
        parsed = {"Foo bar": ParsedName.from_response(_response("Foo bar", marker="sp."))}

        enriched = attach_rank_markers(rows, parsed)

        assert [r.raw_rankmarker for r in enriched] == ["sp.", "", "sp."]
        assert enriched[0].raw_locality == "Antwerp"


class TestParseChecklistNames:
    """Tests for the parse / correct / re-parse sequence."""

    @patch("qc.gbif.species")
    def test_second_pass_uses_corrected_names(self, mock_species, parser, make_row):
        mock_species.name_parser.side_effect = [
            [_response("Foo barr", parsed=False, marker=""), _response("Baz qux", marker="var.")],
            [_response("Foo bar"), _response("Baz qux", marker="var.")],
        ]
        rows = (make_row("Foo barr"), make_row("Baz qux", "Plantae"))

        enriched, flagged = parse_checklist_names(rows, parser, {"Foo barr": "Foo bar"})

        assert mock_species.name_parser.call_count == 2
        second_call = mock_species.name_parser.call_args_list[1]
        assert second_call.args[0] == ["Foo bar", "Baz qux"]
        assert [r.raw_scientific_name for r in enriched] == ["Foo bar", "Baz qux"]
        assert [r.raw_rankmarker for r in enriched] == ["sp.", "var."]
        assert flagged == []

    @patch("qc.gbif.species")
    def test_flagged_names_do_not_block(self, mock_species, parser, make_row):
        mock_species.name_parser.return_value = [_response("Foo sp. A", type_="INFORMAL", marker="")]
        rows = (make_row("Foo sp. A"),)

        enriched, flagged = parse_checklist_names(rows, parser)

        assert len(enriched) == 1
        assert enriched[0].raw_rankmarker == ""
        assert [r.scientificname for r in flagged] == ["Foo sp. A"]
