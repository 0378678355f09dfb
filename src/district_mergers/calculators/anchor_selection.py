"""
District anchor selection

A district's anchor is the point used for spoke-to-hub distances. Preference:

1. the largest public high school (grades through 12)
2. otherwise the largest public elementary school
3. otherwise a fallback point inside the district boundary

Likely charter or alternative schools are only used when nothing else is
available, and schools with known enrollment beat schools without it.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from district_mergers.models import AnchorSchool, DistrictAnchor
from district_mergers.utilities.common import round_half_up

CHARTER_PATTERN = re.compile(r"charter|academy|prep(?:\s|$)|career[\s-]?(?:and\s+)?tech|tech\s+ctr", re.IGNORECASE)
ALTERNATIVE_PATTERN = re.compile(r"\balternative\b", re.IGNORECASE)

BUCKET_PRIORITY = {
    'High': 0,
    'Middle': 1,
    'Elementary': 2,
}


@dataclass(frozen=True)
class SchoolCandidate:
    """A public school that could anchor its district."""
    name: str
    lat: float
    lon: float
    nces_id: str = ""
    grade_low: Optional[int] = None
    grade_high: Optional[int] = None
    grade_bucket: str = ""
    district_geoid: str = ""
    district_name: str = ""
    enrollment: Optional[int] = None
    likely_charter: bool = False

    def to_anchor_school(self) -> AnchorSchool:
        return AnchorSchool(
            name=self.name,
            nces_id=self.nces_id,
            enrollment=self.enrollment,
            grade_low=self.grade_low,
            grade_high=self.grade_high,
            grade_bucket=self.grade_bucket,
            district_geoid=self.district_geoid,
            district_name=self.district_name,
        )


def is_likely_charter(school_name: str) -> bool:
    return bool(CHARTER_PATTERN.search(school_name) or ALTERNATIVE_PATTERN.search(school_name))


def is_high_school(school: SchoolCandidate) -> bool:
    if school.grade_high is None:
        return school.grade_bucket == 'High'
    if school.grade_high < 12:
        return False
    if school.grade_low is not None and school.grade_low >= 9:
        return True
    return school.grade_bucket == 'High'


def is_elementary(school: SchoolCandidate) -> bool:
    if school.grade_bucket == 'Elementary':
        return True
    return school.grade_high is not None and school.grade_high <= 6


def _rank_key(school: SchoolCandidate):
    enrollment = school.enrollment if school.enrollment is not None else -1
    if school.grade_high is not None and school.grade_low is not None:
        span = school.grade_high - school.grade_low
    else:
        span = -1
    return (
        -enrollment,
        BUCKET_PRIORITY.get(school.grade_bucket, 3),
        -span,
        school.name.casefold(),
        school.name,
    )


def rank_candidates(candidates: Iterable[SchoolCandidate]) -> List[SchoolCandidate]:
    """
    Order candidates best first: enrollment (unknown last), then High before
    Middle before Elementary, then wider grade span, then name (case-insensitive).
    """
    return sorted(candidates, key=_rank_key)


def pick_best(candidates: List[SchoolCandidate]) -> Tuple[SchoolCandidate, List[str]]:
    """
    Choose the anchor school from a non-empty candidate list.

    Returns:
        The winning school and the data-quality flags it raises
    """
    non_charter = [c for c in candidates if not c.likely_charter]
    with_enrollment = [c for c in non_charter if c.enrollment is not None and c.enrollment > 0]

    pool = with_enrollment or non_charter or candidates
    winner = rank_candidates(pool)[0]

    flags = []
    if winner.enrollment is None or winner.enrollment <= 0:
        flags.append('anchor_used_heuristic_no_enrollment')
    if winner.likely_charter:
        flags.append('anchor_may_be_charter')
    if winner.grade_low is None and winner.grade_high is None:
        flags.append('anchor_missing_grade_span')
    return winner, flags


def select_anchor(
    display_name: str,
    candidates: Iterable[SchoolCandidate],
    fallback_point: Tuple[float, float],
    fallback_flags: Iterable[str] = ()
) -> DistrictAnchor:
    """
    Build the anchor record for one district.

    Args:
        display_name: District name as shown to users
        candidates: Public schools located in the district
        fallback_point: (lat, lon) inside the district, used when no school
            qualifies
        fallback_flags: Flags already raised while computing the fallback
            point (e.g. 'used_centroid_fallback')

    Returns:
        DistrictAnchor with coordinates rounded to 6 decimals
    """
    candidates = list(candidates)
    high_schools = [c for c in candidates if is_high_school(c)]
    elementary = [c for c in candidates if is_elementary(c)]

    for pool, anchor_type in ((high_schools, 'high_school'), (elementary, 'elementary_school')):
        if not pool:
            continue
        winner, flags = pick_best(pool)
        flags.append(f"anchor_{anchor_type}")
        return DistrictAnchor(
            display_name=display_name,
            lat=round_half_up(winner.lat, 6),
            lon=round_half_up(winner.lon, 6),
            anchor_type=anchor_type,
            anchor_school=winner.to_anchor_school(),
            flags=tuple(flags),
        )

    lat, lon = fallback_point
    return DistrictAnchor(
        display_name=display_name,
        lat=round_half_up(lat, 6),
        lon=round_half_up(lon, 6),
        anchor_type='fallback',
        flags=tuple(fallback_flags) + ('anchor_fallback_no_school_candidates',),
    )
