"""
Test match gotchas: veto tables, validity checks, fallback walk, alias filtering.
"""
import sys
from pathlib import Path

import pytest

repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from food_matcher.alignment.gotchas import (
    DEFAULT_VETO_TABLES,
    VetoTables,
    check_problematic_match,
    filter_modifier_aliases,
    is_modifier_word,
    is_problematic,
    passes_validity_checks,
    select_acceptable_candidate,
    validate_aliases,
    veto_tables_from_config,
)

from conftest import make_candidate, make_ingredient


class TestSingleWordPatterns:
    """One-word ingredients vs compound foods."""

    def test_salt_vs_salted_butter(self):
        verdict = check_problematic_match(
            make_ingredient("salt"), make_candidate("sb", "Salted Butter", 90)
        )
        assert verdict.is_problematic
        assert verdict.pattern == "salt -> salted butter"
        assert "modifier" in verdict.reason

    def test_salt_vs_table_salt_ok(self):
        verdict = check_problematic_match(
            make_ingredient("salt"), make_candidate("ts", "Table Salt", 80)
        )
        assert not verdict.is_problematic
        assert verdict.pattern is None

    def test_pepper_vs_bell_pepper(self):
        assert is_problematic(make_ingredient("pepper"), make_candidate("p", "Red Bell Pepper", 85)).is_problematic

    def test_butter_vs_peanut_butter(self):
        assert check_problematic_match(
            make_ingredient("Butter"), make_candidate("pb", "Peanut Butter", 85)
        ).is_problematic

    def test_multi_word_ingredient_skips_single_word_table(self):
        verdict = check_problematic_match(
            make_ingredient("sea salt"), make_candidate("sb", "Salted Butter", 70)
        )
        assert not verdict.is_problematic


class TestSemanticMismatches:
    """Multi-word ingredients vs semantically different foods."""

    def test_beef_stock_vs_ground_beef(self):
        verdict = check_problematic_match(
            make_ingredient("beef stock"), make_candidate("gb", "Ground Beef", 90)
        )
        assert verdict.is_problematic
        assert verdict.pattern == "beef stock -> ground beef"

    def test_bay_leaf_vs_lettuce(self):
        assert check_problematic_match(
            make_ingredient("bay leaf"), make_candidate("l", "Leaf Lettuce", 80)
        ).is_problematic

    def test_beef_stock_vs_beef_stock(self):
        assert not check_problematic_match(
            make_ingredient("beef stock"), make_candidate("bs", "Beef Stock", 100)
        ).is_problematic


class TestValidityChecks:
    """Confidence-gated advisory filter."""

    def test_single_word_low_confidence_rejected(self):
        assert not passes_validity_checks(
            make_ingredient("pepper"), make_candidate("bp", "Black Pepper", 80)
        )

    def test_single_word_high_confidence_allowed(self):
        assert passes_validity_checks(
            make_ingredient("pepper"), make_candidate("bp", "Black Pepper", 95)
        )

    def test_multi_word_low_confidence_rejected(self):
        assert not passes_validity_checks(
            make_ingredient("chicken stock"), make_candidate("c", "Chicken Stock Breast Mix", 80)
        )


class TestFallback:
    """Walking the ranked list past vetoed candidates."""

    def test_falls_back_one_position(self):
        ranked = [make_candidate("sb", "Salted Butter", 90), make_candidate("ts", "Table Salt", 80)]
        accepted, rejections = select_acceptable_candidate(make_ingredient("salt"), ranked)
        assert accepted.food.id == "ts"
        assert [c.food.id for c, _ in rejections] == ["sb"]

    def test_stops_after_one_fallback(self):
        ranked = [
            make_candidate("sb", "Salted Butter", 90),
            make_candidate("sp", "Salt and Pepper Blend", 88),
            make_candidate("ss", "Sea Salt", 70),
        ]
        accepted, rejections = select_acceptable_candidate(make_ingredient("salt"), ranked)
        assert accepted is None, "Third candidate must not be considered by default"
        assert len(rejections) == 2

    def test_deeper_fallback_when_configured(self):
        ranked = [
            make_candidate("sb", "Salted Butter", 90),
            make_candidate("sp", "Salt and Pepper Blend", 88),
            make_candidate("ss", "Sea Salt", 70),
        ]
        accepted, _ = select_acceptable_candidate(make_ingredient("salt"), ranked, max_fallback=2)
        assert accepted.food.id == "ss"

    def test_ranked_list_not_mutated(self):
        ranked = [make_candidate("sb", "Salted Butter", 90), make_candidate("ts", "Table Salt", 80)]
        snapshot = list(ranked)
        select_acceptable_candidate(make_ingredient("salt"), ranked)
        assert ranked == snapshot

    def test_verbose_logs_veto(self, monkeypatch, capsys):
        monkeypatch.setenv("MATCH_VERBOSE", "1")
        ranked = [make_candidate("sb", "Salted Butter", 90)]
        select_acceptable_candidate(make_ingredient("salt"), ranked)
        assert "[VETO]" in capsys.readouterr().out


class TestTablesFromConfig:
    """YAML-shaped table loading."""

    def test_custom_tables(self):
        tables = veto_tables_from_config({
            "single_word_patterns": [
                {"ingredient": "Cream", "excludes": ["Ice"], "reason": "Cream is dairy, not dessert"},
            ],
            "semantic_mismatches": [],
        })
        assert isinstance(tables, VetoTables)
        verdict = check_problematic_match(
            make_ingredient("cream"), make_candidate("ic", "Ice Cream", 90), tables
        )
        assert verdict.is_problematic
        assert not check_problematic_match(
            make_ingredient("salt"), make_candidate("sb", "Salted Butter", 90), tables
        ).is_problematic, "Custom tables replace the defaults"

    def test_malformed_record(self):
        with pytest.raises(ValueError):
            veto_tables_from_config({"single_word_patterns": [{"ingredient": "salt"}]})
        with pytest.raises(ValueError):
            veto_tables_from_config({"semantic_mismatches": [{"ingredient": "beef stock", "excludes": []}]})

    def test_default_table_sizes(self):
        assert len(DEFAULT_VETO_TABLES.single_word) == 6
        assert len(DEFAULT_VETO_TABLES.semantic) == 4


class TestAliasValidation:
    """Modifier words must not become aliases."""

    def test_modifier_words(self):
        assert is_modifier_word("Salted")
        assert not is_modifier_word("butter")

    def test_filter_modifier_aliases(self):
        assert filter_modifier_aliases(["salted", "butter", "ground beef", "olive oil"]) == [
            "butter", "olive oil"
        ]

    def test_validate_aliases_reasons(self):
        result = validate_aliases(["unsalted", "fresh basil", "basil"])
        assert result.valid == ["basil"]
        assert result.rejected == ["unsalted", "fresh basil"]
        assert result.reasons["unsalted"].startswith("Single-word modifier")
        assert result.reasons["fresh basil"].startswith("Starts with modifier")
