"""
District Consolidation Estimator

Estimates the budget effect of merging school districts: the largest district
(the hub) absorbs the others (spokes), eliminating part of the spokes' central
administration spend while adding busing cost for spoke students who now
travel to the hub.

    admin savings    = admin reduction rate × Σ spoke modeled admin spend
    transport cost   = Σ distance(spoke, hub) × spoke enrollment
                         × affected share × cost per student-mile
    net impact       = admin savings − transport cost   (positive = savings)
"""

import itertools
import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from district_mergers.geo import miles_between
from district_mergers.join import (
    AnchorsMap,
    BudgetsMap,
    EnrollmentMap,
    join_districts,
    unique_keys,
)
from district_mergers.models import (
    ConsolidationParams,
    ConsolidationResult,
    SpokeDetail,
)
from district_mergers.utilities.common import round_half_up, safe_divide

logger = logging.getLogger(__name__)

# Spoke-to-hub distances above this are reported as implausible
DISTANCE_WARNING_MILES = 60.0

MIN_SELECTION_WARNING = "Select at least 2 districts"

DEFAULT_PARAMS = ConsolidationParams(
    admin_reduction_rate=0.5,
    affected_share=0.5,
    cost_per_student_mile=1.0,
)


def _clamp(value: float, low: float, high: float) -> float:
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def clamp_params(params: ConsolidationParams) -> ConsolidationParams:
    """
    Force every parameter into its valid range.

    Rates and shares are clamped to [0, 1] and cost per student-mile to
    >= 0. NaN is treated as the lower bound.
    """
    return ConsolidationParams(
        admin_reduction_rate=_clamp(params.admin_reduction_rate, 0.0, 1.0),
        affected_share=_clamp(params.affected_share, 0.0, 1.0),
        cost_per_student_mile=_clamp(params.cost_per_student_mile, 0.0, math.inf),
    )


def compute_consolidation(
    selected_keys: Iterable[str],
    budgets: BudgetsMap,
    enrollments: EnrollmentMap,
    anchors: AnchorsMap,
    params: ConsolidationParams,
    distance_warning_miles: float = DISTANCE_WARNING_MILES
) -> ConsolidationResult:
    """
    Estimate the effect of consolidating the selected districts.

    Pure function of its inputs: no I/O, no state between calls, and the
    maps are never modified.

    Args:
        selected_keys: District keys to merge (duplicates ignored, order
            kept; order breaks enrollment ties when choosing the hub)
        budgets: District key -> DistrictBudget
        enrollments: District key -> DistrictEnrollment
        anchors: District key -> DistrictAnchor
        params: Assumptions; clamped before use
        distance_warning_miles: Spoke distances above this add a warning

    Returns:
        ConsolidationResult. ``ok`` is False, with zeroed figures, when fewer
        than two distinct districts are selected or any selected district is
        missing a budget, a positive enrollment or an anchor. Budget
        data-quality flags are always carried into ``warnings``.

    Example:
        Hub A (10,000 students) and spoke B (2,000 students, $100,000 modeled
        admin, 10 miles away) with rate 0.5, affected share 1.0 and $3 per
        student-mile: admin savings $50,000, transportation $60,000, net
        impact -$10,000 (a net cost).
    """
    params = clamp_params(params)
    keys = unique_keys(selected_keys)

    if len(keys) < 2:
        return ConsolidationResult.not_ok(warnings=(MIN_SELECTION_WARNING,))

    joined = join_districts(keys, budgets, enrollments, anchors)

    warnings: List[str] = []
    for record in joined.records:
        if record.budget is not None:
            for flag in record.budget.flags:
                warnings.append(f"{record.budget.display_name}: {flag}")

    if not joined.ok:
        logger.info(
            f"Cannot estimate {keys}: missing budgets={list(joined.missing.budgets)}, "
            f"enrollment={list(joined.missing.enrollment)}, anchors={list(joined.missing.anchors)}"
        )
        return ConsolidationResult.not_ok(warnings=tuple(warnings), missing=joined.missing)

    # Hub: strictly largest enrollment, first in selection order on ties
    hub = joined.records[0]
    hub_enrollment = 0
    for record in joined.records:
        if record.enrollment.total > hub_enrollment:
            hub_enrollment = record.enrollment.total
            hub = record
    spokes = [r for r in joined.records if r.key != hub.key]

    combined_enrollment = sum(r.enrollment.total for r in joined.records)
    combined_spending = sum(r.budget.total_expenditures for r in joined.records)
    hub_spending = hub.budget.total_expenditures
    spokes_spending = combined_spending - hub_spending

    admin_baseline_hub = hub.budget.central_administration_model
    admin_baseline_spokes = sum(r.budget.central_administration_model for r in spokes)
    admin_savings = params.admin_reduction_rate * admin_baseline_spokes

    transportation_increase = 0.0
    breakdown = []
    for spoke in spokes:
        distance = miles_between(spoke.anchor.point, hub.anchor.point)
        if distance > distance_warning_miles:
            warnings.append(f"{spoke.anchor.display_name}: distance {distance:.1f} mi seems high")
        enrollment = spoke.enrollment.total
        cost = distance * enrollment * params.affected_share * params.cost_per_student_mile
        transportation_increase += cost
        breakdown.append(SpokeDetail(
            key=spoke.key,
            name=spoke.anchor.display_name,
            enrollment=enrollment,
            distance_miles=round_half_up(distance, 1),
            cost=round_half_up(cost),
        ))
    breakdown.sort(key=lambda s: s.cost, reverse=True)

    net_impact = admin_savings - transportation_increase
    projected_spending = combined_spending - net_impact

    logger.debug(
        f"Hub {hub.key} ({hub_enrollment:,} students) with {len(spokes)} spokes: "
        f"admin savings {admin_savings:,.0f}, transportation {transportation_increase:,.0f}"
    )

    return ConsolidationResult(
        ok=True,
        hub_key=hub.key,
        hub_name=hub.anchor.display_name,
        combined_enrollment=combined_enrollment,
        combined_spending=combined_spending,
        hub_spending=hub_spending,
        spokes_spending=spokes_spending,
        baseline_per_pupil=safe_divide(combined_spending, combined_enrollment),
        admin_baseline_hub=admin_baseline_hub,
        admin_baseline_spokes=admin_baseline_spokes,
        admin_savings=admin_savings,
        transportation_increase=transportation_increase,
        net_impact=net_impact,
        projected_spending=projected_spending,
        projected_per_pupil=safe_divide(projected_spending, combined_enrollment),
        admin_savings_pct_combined=safe_divide(admin_savings, combined_spending),
        transport_increase_pct_combined=safe_divide(transportation_increase, combined_spending),
        net_impact_pct_combined=safe_divide(net_impact, combined_spending),
        admin_savings_pct_spokes_spending=safe_divide(admin_savings, spokes_spending),
        transport_increase_pct_spokes_spending=safe_divide(transportation_increase, spokes_spending),
        net_impact_pct_spokes_spending=safe_divide(net_impact, spokes_spending),
        spoke_breakdown=tuple(breakdown),
        warnings=tuple(warnings),
    )


def _summary_row(keys: Sequence[str], result: ConsolidationResult) -> Dict[str, object]:
    return {
        'districts': ' + '.join(unique_keys(keys)),
        'ok': result.ok,
        'hub_key': result.hub_key or None,
        'combined_enrollment': result.combined_enrollment,
        'combined_spending': result.combined_spending,
        'admin_savings': result.admin_savings,
        'transportation_increase': result.transportation_increase,
        'net_impact': result.net_impact,
        'net_impact_pct_combined': result.net_impact_pct_combined,
        'projected_per_pupil': result.projected_per_pupil,
        'warning_count': len(result.warnings),
    }


class ConsolidationEstimator:
    """
    Object interface to the estimator over a fixed set of loaded maps, with
    default assumptions and batch evaluation.
    """

    def __init__(
        self,
        budgets: BudgetsMap,
        enrollments: EnrollmentMap,
        anchors: AnchorsMap,
        default_params: Optional[ConsolidationParams] = None,
        distance_warning_miles: float = DISTANCE_WARNING_MILES
    ):
        """
        Args:
            budgets: District key -> DistrictBudget
            enrollments: District key -> DistrictEnrollment
            anchors: District key -> DistrictAnchor
            default_params: Used when estimate() gets no params
            distance_warning_miles: Threshold for the implausible-distance warning
        """
        self.budgets = budgets
        self.enrollments = enrollments
        self.anchors = anchors
        self.default_params = default_params or DEFAULT_PARAMS
        self.distance_warning_miles = distance_warning_miles

    def estimate(
        self,
        keys: Iterable[str],
        params: Optional[ConsolidationParams] = None
    ) -> ConsolidationResult:
        return compute_consolidation(
            keys,
            self.budgets,
            self.enrollments,
            self.anchors,
            params or self.default_params,
            distance_warning_miles=self.distance_warning_miles,
        )

    def calculate_batch(
        self,
        scenarios: Iterable[Sequence[str]],
        params: Optional[ConsolidationParams] = None
    ) -> pd.DataFrame:
        """
        Estimate several selections with the same assumptions.

        Args:
            scenarios: Each item is one selection of district keys
            params: Assumptions (defaults to the estimator's)

        Returns:
            DataFrame with one row of headline figures per scenario
        """
        rows = []
        for keys in scenarios:
            result = self.estimate(keys, params)
            if not result.ok:
                logger.warning(f"Scenario {list(keys)} not estimated: {list(result.warnings) or result.missing.to_dict()}")
            rows.append(_summary_row(keys, result))

        return pd.DataFrame(rows)

    def sweep(
        self,
        keys: Sequence[str],
        admin_rates: Iterable[float],
        affected_shares: Iterable[float],
        costs_per_student_mile: Iterable[float]
    ) -> pd.DataFrame:
        """
        Estimate one selection across every combination of parameter values.

        Returns:
            DataFrame with the three parameter columns followed by the
            headline figures, one row per combination
        """
        rows = []
        for rate, share, cost in itertools.product(admin_rates, affected_shares, costs_per_student_mile):
            params = ConsolidationParams(
                admin_reduction_rate=rate,
                affected_share=share,
                cost_per_student_mile=cost,
            )
            result = self.estimate(keys, params)
            rows.append({
                'admin_reduction_rate': rate,
                'affected_share': share,
                'cost_per_student_mile': cost,
                **_summary_row(keys, result),
            })

        return pd.DataFrame(rows)
