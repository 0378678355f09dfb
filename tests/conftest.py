"""
Shared fixtures for the district consolidation tests

Builds small budget, enrollment and anchor maps around real Rhode Island
district names, with anchor points placed at known great-circle distances
from the hub so expected costs can be worked out by hand.

Usage:
    pytest tests/ -v
"""

import json
import math

import pytest

from district_mergers.geo import EARTH_RADIUS_MILES
from district_mergers.models import (
    AnchorSchool,
    ConsolidationParams,
    DistrictAnchor,
    DistrictBudget,
    DistrictEnrollment,
)

HUB_LAT = 41.8240
HUB_LON = -71.4128


def lat_miles_north(lat: float, miles: float) -> float:
    """Latitude ``miles`` due north of ``lat`` on the estimator's sphere."""
    return lat + math.degrees(miles / EARTH_RADIUS_MILES)


def make_budget(display_name, total, admin_model, flags=()):
    return DistrictBudget(
        display_name=display_name,
        source_file=f"{display_name}.csv",
        fiscal_year="FY2024-25",
        total_expenditures=total,
        central_administration=admin_model,
        central_administration_model=admin_model,
        admin_share_of_total=admin_model / total if total else None,
        admin_share_of_total_model=admin_model / total if total else None,
        flags=tuple(flags),
    )


def make_enrollment(name, total):
    return DistrictEnrollment(distcode="", distname=name, total=total)


def make_anchor(display_name, miles_from_hub=0.0, anchor_type="high_school"):
    school = None
    if anchor_type != "fallback":
        school = AnchorSchool(name=f"{display_name} High School", nces_id="440000000001", enrollment=900)
    return DistrictAnchor(
        display_name=display_name,
        lat=lat_miles_north(HUB_LAT, miles_from_hub),
        lon=HUB_LON,
        anchor_type=anchor_type,
        anchor_school=school,
    )


@pytest.fixture
def params():
    """Assumptions from the worked example: half of spoke admin saved, every spoke student bused at $3/mile."""
    return ConsolidationParams(
        admin_reduction_rate=0.5,
        affected_share=1.0,
        cost_per_student_mile=3.0,
    )


@pytest.fixture
def district_maps():
    """
    Three districts:

    - cranston: 10,000 students, $500,000 modeled admin, the hub point
    - johnston: 2,000 students, $100,000 modeled admin, 10 miles away
    - scituate: 1,000 students, $80,000 modeled admin, 25 miles away
    """
    budgets = {
        "cranston": make_budget("Cranston", 150_000_000, 500_000),
        "johnston": make_budget("Johnston", 40_000_000, 100_000),
        "scituate": make_budget("Scituate", 25_000_000, 80_000),
    }
    enrollments = {
        "cranston": make_enrollment("Cranston", 10_000),
        "johnston": make_enrollment("Johnston", 2_000),
        "scituate": make_enrollment("Scituate", 1_000),
    }
    anchors = {
        "cranston": make_anchor("Cranston", 0.0),
        "johnston": make_anchor("Johnston", 10.0),
        "scituate": make_anchor("Scituate", 25.0),
    }
    return budgets, enrollments, anchors


@pytest.fixture
def write_json(tmp_path):
    """Write a document to a JSON file under tmp_path and return its path."""
    def writer(name, document):
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path
    return writer


@pytest.fixture
def district_files(district_maps, write_json):
    """The district_maps fixture written out as the three JSON artifacts."""
    budgets, enrollments, anchors = district_maps
    return {
        "budgets": write_json("budgets.json", {k: v.to_dict() for k, v in budgets.items()}),
        "enrollment": write_json("lea_enrollment.json", {k: v.to_dict() for k, v in enrollments.items()}),
        "anchors": write_json("district-anchors.json", {k: v.to_dict() for k, v in anchors.items()}),
    }
