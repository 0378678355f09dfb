"""
Tests for district key normalization

Every dataset joins on these keys, so the expected strings here are exact.

Run: pytest tests/test_normalize.py -v
"""

import pytest

from district_mergers.normalize import (
    KeyNormalizer,
    candidate_keys,
    district_key,
    normalize_name,
    school_key,
)


class TestNormalizeName:
    """Tests for the normalization pipeline."""

    @pytest.mark.parametrize("name,expected", [
        ("Bristol Warren Regional School District", "bristol warren"),
        ("Exeter-West Greenwich Regional School District", "exeter west greenwich"),
        ("Providence Public Schools", "providence"),
        ("Newport School District", "newport"),
        ("  Little   Compton  ", "little compton"),
        ("Foster Elementary", "foster"),
        ("Chariho Secondary", "chariho"),
        ("Smithfield & Johnston", "smithfield and johnston"),
        ("Smithfield&Johnston", "smithfield and johnston"),
        ("St. Mary's Academy", "st marys academy"),
        ("North–South Kingstown", "north south kingstown"),
        ("North—South Kingstown", "north south kingstown"),
    ])
    def test_known_names(self, name, expected):
        assert normalize_name(name) == expected

    def test_strips_only_one_district_suffix(self):
        """Only the first matching suffix is removed."""
        assert normalize_name("Central Falls Public Schools School District") == "central falls public schools"

    def test_district_suffix_then_level_suffix(self):
        assert normalize_name("Foster Elementary School District") == "foster"

    def test_non_ascii_letters_are_dropped(self):
        """Only ASCII word characters survive, matching keys already on disk."""
        assert normalize_name("San José") == "san jos"

    @pytest.mark.parametrize("value", ["", "   ", None, 42, ["Providence"]])
    def test_empty_or_non_string_returns_empty(self, value):
        assert normalize_name(value) == ""

    def test_idempotent_on_real_names(self):
        names = [
            "Bristol Warren Regional School District",
            "Exeter-West Greenwich Regional School District",
            "Providence Public Schools",
            "Urban Collaborative (Accelerated Program)",
            "Smithfield & Johnston",
            "Foster Elementary",
            "  North   Smithfield  ",
        ]
        for name in names:
            once = normalize_name(name)
            assert normalize_name(once) == once, name


class TestParentheticals:
    """Parenthesized asides are removed before punctuation by default."""

    def test_aside_removed_by_default(self):
        assert normalize_name("Urban Collaborative (Accelerated Program)") == "urban collaborative"

    def test_aside_in_middle(self):
        assert normalize_name("Davies (Career & Tech) School District") == "davies"

    def test_legacy_order_keeps_aside_text(self):
        legacy = KeyNormalizer(strip_parentheticals_first=False)
        assert legacy.normalize("Urban Collaborative (Accelerated Program)") == \
            "urban collaborative accelerated program"

    def test_unclosed_parenthesis_is_plain_punctuation(self):
        assert normalize_name("Urban Collaborative (Accelerated") == "urban collaborative accelerated"


class TestDistrictKey:
    """Tests for alias resolution."""

    def test_default_alias(self):
        assert district_key("Bistol Warren Regional District") == "bristol warren"

    def test_alias_target_matches_normal_spelling(self):
        assert district_key("Bistol Warren Regional District") == \
            district_key("Bristol Warren Regional School District")

    def test_unaliased_name_is_normalized_name(self):
        assert district_key("Cranston Public Schools") == "cranston"

    def test_deterministic(self):
        assert district_key("West Warwick Public Schools") == district_key("West Warwick Public Schools")

    def test_custom_aliases_accept_raw_spellings(self):
        normalizer = KeyNormalizer(aliases={"N. Kingstown": "north kingstown"})
        assert normalizer.district_key("N Kingstown") == "north kingstown"

    def test_empty_alias_table(self):
        normalizer = KeyNormalizer(aliases={})
        assert normalizer.district_key("Bistol Warren Regional District") == "bistol warren regional district"

    def test_instances_do_not_share_aliases(self):
        first = KeyNormalizer(aliases={"alpha": "beta"})
        second = KeyNormalizer(aliases={})
        assert first.district_key("Alpha") == "beta"
        assert second.district_key("Alpha") == "alpha"


class TestSchoolKey:

    def test_composite_key(self):
        assert school_key("Providence Public Schools", "Classical High School") == \
            "providence||classical high school"

    def test_district_part_uses_aliases(self):
        assert school_key("Bistol Warren Regional District", "Mt. Hope High School") == \
            "bristol warren||mt hope high school"

    def test_separator_cannot_come_from_a_name(self):
        key = school_key("A||B", "C||D")
        assert key.count("||") == 1


class TestCandidateKeys:
    """Tests for near-miss key suggestions."""

    def test_shared_prefix_and_substring(self):
        mapping = {
            "north kingstown": 1,
            "north providence": 2,
            "north smithfield": 3,
            "south kingstown": 4,
        }
        assert candidate_keys(mapping, "north kingston") == [
            "north kingstown",
            "north providence",
            "north smithfield",
        ]

    def test_limit(self):
        mapping = {f"warwick {i}": i for i in range(20)}
        assert len(candidate_keys(mapping, "warwick", limit=5)) == 5

    def test_no_candidates(self):
        assert candidate_keys({"cranston": 1}, "woonsocket") == []
