"""
Join layer: resolve district keys against the budget, enrollment and anchor maps.

The maps are read-only snapshots owned by the caller; nothing here fetches,
caches or mutates them.
"""

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from district_mergers.models import (
    DistrictAnchor,
    DistrictBudget,
    DistrictEnrollment,
    MissingData,
)

BudgetsMap = Mapping[str, DistrictBudget]
EnrollmentMap = Mapping[str, DistrictEnrollment]
AnchorsMap = Mapping[str, DistrictAnchor]


@dataclass(frozen=True)
class DistrictRecords:
    """What each dataset holds for one district key (None when absent)."""
    key: str
    budget: Optional[DistrictBudget]
    enrollment: Optional[DistrictEnrollment]
    anchor: Optional[DistrictAnchor]

    @property
    def complete(self) -> bool:
        return (
            self.budget is not None
            and has_enrollment(self.enrollment)
            and self.anchor is not None
        )


@dataclass(frozen=True)
class JoinResult:
    records: Tuple[DistrictRecords, ...]
    missing: MissingData

    @property
    def ok(self) -> bool:
        return not self.missing.any

    @property
    def keys(self) -> List[str]:
        return [r.key for r in self.records]

    def __getitem__(self, key: str) -> DistrictRecords:
        for record in self.records:
            if record.key == key:
                return record
        raise KeyError(key)


def has_enrollment(enrollment: Optional[DistrictEnrollment]) -> bool:
    """An enrollment record only counts when its total is positive."""
    return enrollment is not None and bool(enrollment.total) and enrollment.total > 0


def unique_keys(keys: Iterable[str]) -> List[str]:
    """Distinct keys in first-seen order."""
    return list(dict.fromkeys(keys))


def join_districts(
    keys: Iterable[str],
    budgets: BudgetsMap,
    enrollments: EnrollmentMap,
    anchors: AnchorsMap
) -> JoinResult:
    """
    Look up every key in all three datasets.

    Args:
        keys: District keys; duplicates are dropped, order is kept
        budgets: District key -> budget record
        enrollments: District key -> enrollment record
        anchors: District key -> anchor record

    Returns:
        JoinResult with one DistrictRecords per distinct key and the keys
        missing from each dataset, in selection order
    """
    records = []
    missing_budgets = []
    missing_enrollment = []
    missing_anchors = []

    for key in unique_keys(keys):
        record = DistrictRecords(
            key=key,
            budget=budgets.get(key),
            enrollment=enrollments.get(key),
            anchor=anchors.get(key),
        )
        if record.budget is None:
            missing_budgets.append(key)
        if not has_enrollment(record.enrollment):
            missing_enrollment.append(key)
        if record.anchor is None:
            missing_anchors.append(key)
        records.append(record)

    return JoinResult(
        records=tuple(records),
        missing=MissingData(
            budgets=tuple(missing_budgets),
            enrollment=tuple(missing_enrollment),
            anchors=tuple(missing_anchors),
        ),
    )
