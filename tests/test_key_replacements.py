"""
Tests for the key replacement pipeline.
"""
from key_replacements import ReplacementRule, apply_replacements, replace_ignore_case


class TestReplaceIgnoreCase:

    def test_replaces_all_occurrences(self):
        assert replace_ignore_case("a-b-c", "-", "") == "abc"

    def test_case_insensitive(self):
        assert replace_ignore_case("INV001 inv002", "inv", "X") == "X001 X002"

    def test_replacement_is_literal(self):
        assert replace_ignore_case("a.b", ".", r"\1") == r"a\1b"

    def test_find_is_literal(self):
        assert replace_ignore_case("a.b", "a.", "") == "b"
        assert replace_ignore_case("axb", "a.", "") == "axb"


class TestApplyReplacements:

    def test_no_rules_returns_input(self):
        assert apply_replacements("A-1", []) == "A-1"
        assert apply_replacements("A-1", None) == "A-1"

    def test_none_input(self):
        assert apply_replacements(None, [ReplacementRule("a", "b")]) == ""

    def test_rules_chain_in_order(self):
        rules = [ReplacementRule("a", "b"), ReplacementRule("b", "c")]
        assert apply_replacements("a", rules) == "c"

    def test_order_matters(self):
        rules = [ReplacementRule("b", "c"), ReplacementRule("a", "b")]
        assert apply_replacements("a", rules) == "b"

    def test_empty_find_is_skipped(self):
        rules = [ReplacementRule("", "X"), ReplacementRule("-", "")]
        assert apply_replacements("A-1", rules) == "A1"

    def test_dash_removal(self):
        assert apply_replacements("A-1", [ReplacementRule("-", "")]) == "A1"

    def test_rules_not_modified(self):
        rules = [ReplacementRule("-", "")]
        apply_replacements("A-1", rules)
        assert rules == [ReplacementRule("-", "")]
