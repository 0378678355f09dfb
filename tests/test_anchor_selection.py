"""
Tests for choosing a district's anchor point

Run: pytest tests/test_anchor_selection.py -v
"""

import pytest

from district_mergers.calculators.anchor_selection import (
    SchoolCandidate,
    is_elementary,
    is_high_school,
    is_likely_charter,
    pick_best,
    rank_candidates,
    select_anchor,
)

FALLBACK = (41.7001234567, -71.5009876543)


def school(name, enrollment=None, low=9, high=12, bucket="High", charter=None, lat=41.7, lon=-71.5):
    return SchoolCandidate(
        name=name,
        lat=lat,
        lon=lon,
        nces_id="440000000001",
        grade_low=low,
        grade_high=high,
        grade_bucket=bucket,
        enrollment=enrollment,
        likely_charter=is_likely_charter(name) if charter is None else charter,
    )


class TestClassification:

    @pytest.mark.parametrize("name", [
        "Blackstone Valley Prep",
        "Achievement First Charter School",
        "Davies Career and Tech",
        "Segue Institute Academy",
        "Alternative Learning Program",
    ])
    def test_likely_charter(self, name):
        assert is_likely_charter(name)

    @pytest.mark.parametrize("name", ["Classical High School", "Ponaganset High School", "Preparatory Road Elementary"])
    def test_not_charter(self, name):
        assert not is_likely_charter(name)

    def test_high_school_by_grades(self):
        assert is_high_school(school("Cranston East", low=9, high=12, bucket=""))
        assert not is_high_school(school("Park View Middle", low=6, high=8, bucket="Middle"))

    def test_k12_needs_high_bucket(self):
        assert is_high_school(school("Block Island School", low=0, high=12, bucket="High"))
        assert not is_high_school(school("Block Island School", low=0, high=12, bucket="Other"))

    def test_high_school_without_grades_uses_bucket(self):
        assert is_high_school(school("Mystery High", low=None, high=None, bucket="High"))
        assert not is_high_school(school("Mystery School", low=None, high=None, bucket=""))

    def test_elementary(self):
        assert is_elementary(school("Garden City", low=0, high=5, bucket=""))
        assert is_elementary(school("Garden City", low=None, high=None, bucket="Elementary"))
        assert not is_elementary(school("Park View Middle", low=6, high=8, bucket="Middle"))


class TestRanking:

    def test_enrollment_descending_unknown_last(self):
        ranked = rank_candidates([
            school("B High", enrollment=None),
            school("A High", enrollment=800),
            school("C High", enrollment=1_200),
        ])
        assert [s.name for s in ranked] == ["C High", "A High", "B High"]

    def test_ties_by_bucket_span_then_name(self):
        ranked = rank_candidates([
            school("Zeta", enrollment=500, low=6, high=8, bucket="Middle"),
            school("Beta", enrollment=500, low=9, high=12),
            school("Alpha", enrollment=500, low=9, high=12),
            school("Gamma", enrollment=500, low=7, high=12),
        ])
        assert [s.name for s in ranked] == ["Gamma", "Alpha", "Beta", "Zeta"]

    def test_pick_best_skips_charters(self):
        winner, flags = pick_best([
            school("Blackstone Valley Prep", enrollment=2_000),
            school("Cumberland High School", enrollment=1_400),
        ])
        assert winner.name == "Cumberland High School"
        assert flags == []

    def test_pick_best_prefers_known_enrollment(self):
        winner, flags = pick_best([
            school("Old High", enrollment=None),
            school("New High", enrollment=300),
        ])
        assert winner.name == "New High"
        assert flags == []

    def test_pick_best_charter_only(self):
        winner, flags = pick_best([school("Charter High", enrollment=None, low=None, high=None)])
        assert flags == [
            "anchor_used_heuristic_no_enrollment",
            "anchor_may_be_charter",
            "anchor_missing_grade_span",
        ]


class TestSelectAnchor:

    def test_largest_high_school(self):
        anchor = select_anchor(
            "Cranston",
            [
                school("Cranston High School East", enrollment=1_500, lat=41.7812345678, lon=-71.4456789012),
                school("Cranston High School West", enrollment=1_700, lat=41.7654321, lon=-71.48),
                school("Garden City Elementary", enrollment=400, low=0, high=5, bucket="Elementary"),
            ],
            FALLBACK,
        )

        assert anchor.anchor_type == "high_school"
        assert anchor.anchor_school.name == "Cranston High School West"
        assert anchor.anchor_school.enrollment == 1_700
        assert anchor.flags == ("anchor_high_school",)
        assert anchor.lat == 41.765432

    def test_coordinates_rounded(self):
        anchor = select_anchor("Cranston", [school("Cranston East", 900, lat=41.7812345678, lon=-71.4456789012)], FALLBACK)
        assert anchor.lat == 41.781235
        assert anchor.lon == -71.445679

    def test_elementary_when_no_high_school(self):
        anchor = select_anchor(
            "Foster",
            [
                school("Captain Isaac Paine Elementary", enrollment=250, low=0, high=5, bucket="Elementary"),
                school("Foster Middle", enrollment=100, low=6, high=8, bucket="Middle"),
            ],
            FALLBACK,
        )

        assert anchor.anchor_type == "elementary_school"
        assert anchor.anchor_school.name == "Captain Isaac Paine Elementary"
        assert anchor.flags == ("anchor_elementary_school",)

    def test_fallback_point(self):
        anchor = select_anchor(
            "New Shoreham",
            [school("Island Middle", enrollment=80, low=6, high=8, bucket="Middle")],
            FALLBACK,
            fallback_flags=["used_centroid_fallback"],
        )

        assert anchor.anchor_type == "fallback"
        assert anchor.anchor_school is None
        assert (anchor.lat, anchor.lon) == (41.700123, -71.500988)
        assert anchor.flags == ("used_centroid_fallback", "anchor_fallback_no_school_candidates")

    def test_no_candidates(self):
        anchor = select_anchor("Jamestown", [], FALLBACK)
        assert anchor.anchor_type == "fallback"
        assert anchor.to_dict()["anchorType"] == "fallback"

    def test_name_tie_break_ignores_case(self):
        anchor = select_anchor(
            "Pawtucket",
            [
                school("Zeta High", enrollment=500),
                school("beta High", enrollment=500),
            ],
            FALLBACK,
        )
        assert anchor.anchor_school.name == "beta High"

    def test_rank_name_order_is_case_insensitive(self):
        ranked = rank_candidates([
            school("Zeta High", enrollment=500),
            school("alpha High", enrollment=500),
            school("Beta High", enrollment=500),
        ])
        assert [s.name for s in ranked] == ["alpha High", "Beta High", "Zeta High"]
