"""
Tests for the destination key index.
"""
from destination_index import build_destination_index, cell_text
from key_replacements import ReplacementRule


class TestCellText:

    def test_missing_column_is_empty(self):
        assert cell_text({"A": "1"}, "B") == ""

    def test_none_is_empty(self):
        assert cell_text({"A": None}, "A") == ""


class TestBuildDestinationIndex:

    def test_last_occurrence_wins(self):
        rows = [{"ID": "X", "V": "1"}, {"ID": "X", "V": "2"}]
        index, duplicates = build_destination_index(rows, "ID", [])
        assert index["X"] == {"ID": "X", "V": "2"}
        assert duplicates == ["X"]

    def test_duplicate_reported_once(self):
        rows = [{"ID": "K", "V": str(i)} for i in range(3)]
        index, duplicates = build_destination_index(rows, "ID", [])
        assert duplicates == ["K"]
        assert index["K"]["V"] == "2"

    def test_duplicates_in_first_detection_order(self):
        rows = [{"ID": k} for k in ["B", "A", "A", "C", "B", "C", "A"]]
        _, duplicates = build_destination_index(rows, "ID", [])
        assert duplicates == ["A", "B", "C"]

    def test_empty_keys_skipped(self):
        rows = [{"ID": ""}, {"ID": ""}, {"V": "no key"}, {"ID": "1"}]
        index, duplicates = build_destination_index(rows, "ID", [])
        assert list(index) == ["1"]
        assert duplicates == []

    def test_replacements_applied_to_keys(self):
        rows = [{"ID": "A-1", "V": "1"}, {"ID": "a1", "V": "2"}]
        index, duplicates = build_destination_index(rows, "ID", [ReplacementRule("-", "")])
        assert set(index) == {"A1", "a1"}
        assert duplicates == []

    def test_replacement_creates_duplicate(self):
        rows = [{"ID": "A-1", "V": "1"}, {"ID": "A1", "V": "2"}]
        index, duplicates = build_destination_index(rows, "ID", [ReplacementRule("-", "")])
        assert index["A1"]["V"] == "2"
        assert duplicates == ["A1"]

    def test_key_that_becomes_empty_is_skipped(self):
        rows = [{"ID": "--"}]
        index, _ = build_destination_index(rows, "ID", [ReplacementRule("-", "")])
        assert index == {}
