"""
District Mergers
School District Consolidation Estimator

Joins district budget, enrollment and anchor-point data on a shared
normalized district key and estimates the administrative savings and added
transportation cost of consolidating districts.
"""

__version__ = "0.1.0"

from .normalize import KeyNormalizer, district_key, normalize_name, school_key
from .geo import miles_between
from .join import join_districts
from .models import ConsolidationParams, ConsolidationResult
from .calculators.consolidation import compute_consolidation, ConsolidationEstimator

__all__ = [
    "KeyNormalizer",
    "district_key",
    "normalize_name",
    "school_key",
    "miles_between",
    "join_districts",
    "ConsolidationParams",
    "ConsolidationResult",
    "compute_consolidation",
    "ConsolidationEstimator",
]
