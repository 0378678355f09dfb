"""
Modeled central-administration spend

Budget extracts report central administration as district management plus
program/operations management. Source data is messy (negative lines,
administration larger than the whole budget), so projections use a modeled
figure instead of the raw one:

- negative components count as 0
- if the modeled share of total spending exceeds ADMIN_SHARE_OUTLIER, it is
  capped at ADMIN_SHARE_CAP of total spending

Every adjustment leaves a flag on the record; the estimator surfaces those
flags as warnings.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, Mapping

from district_mergers.models import BudgetComponents, DistrictBudget
from district_mergers.utilities.common import round_half_up

logger = logging.getLogger(__name__)

ADMIN_SHARE_OUTLIER = 0.15
ADMIN_SHARE_CAP = 0.10

# Flags counted together in summarize_budget_flags()
FLAG_GROUPS = {
    'parse_failed': ('parse_failed',),
    'missing_admin': ('missing_district_management', 'missing_program_operations_management'),
    'negative_admin': ('district_management_negative', 'program_operations_management_negative'),
    'admin_share_outlier': ('admin_share_outlier',),
    'admin_share_capped': ('admin_share_capped_model',),
}


def model_budget(
    display_name: str,
    source_file: str,
    fiscal_year: str,
    total_expenditures: float,
    district_management: float,
    program_operations_management: float,
    flags: Iterable[str] = (),
    admin_share_outlier: float = ADMIN_SHARE_OUTLIER,
    admin_share_cap: float = ADMIN_SHARE_CAP
) -> DistrictBudget:
    """
    Build a DistrictBudget with raw and modeled administration figures.

    Args:
        display_name: District name as shown to users
        source_file: File the figures were extracted from
        fiscal_year: Fiscal year label (e.g. "FY2024-25")
        total_expenditures: Total spending, 0 when unknown
        district_management: Raw district management spend
        program_operations_management: Raw program/operations management spend
        flags: Flags already raised during extraction
        admin_share_outlier: Modeled share above which the cap applies
        admin_share_cap: Share of total the modeled admin is capped at

    Returns:
        DistrictBudget with all adjustment flags appended to ``flags``
    """
    flags = list(flags)

    central_administration = district_management + program_operations_management
    if central_administration > total_expenditures > 0:
        flags.append('admin_gt_total')

    dm_model = district_management
    pom_model = program_operations_management
    if district_management < 0:
        flags.append('district_management_negative')
        dm_model = 0
    if program_operations_management < 0:
        flags.append('program_operations_management_negative')
        pom_model = 0

    central_admin_model = dm_model + pom_model
    admin_share = None
    admin_share_model = None

    if total_expenditures > 0:
        admin_share = central_administration / total_expenditures
        if central_admin_model / total_expenditures > admin_share_outlier:
            flags.append('admin_share_outlier')
            cap = total_expenditures * admin_share_cap
            central_admin_model = round_half_up(min(central_admin_model, cap))
            flags.append('admin_share_capped_model')
        admin_share_model = central_admin_model / total_expenditures
    else:
        flags.append('total_expenditures_missing_or_zero')
        central_admin_model = max(0, central_admin_model)

    if admin_share is not None:
        admin_share = round_half_up(admin_share, 6)
    if admin_share_model is not None:
        admin_share_model = round_half_up(admin_share_model, 6)

    if flags:
        logger.debug(f"{display_name}: {', '.join(flags)}")

    return DistrictBudget(
        display_name=display_name,
        source_file=source_file,
        fiscal_year=fiscal_year,
        total_expenditures=total_expenditures,
        central_administration=central_administration,
        central_administration_model=central_admin_model,
        admin_share_of_total=admin_share,
        admin_share_of_total_model=admin_share_model,
        components=BudgetComponents(
            district_management=district_management,
            program_operations_management=program_operations_management,
        ),
        components_model=BudgetComponents(
            district_management=dm_model,
            program_operations_management=pom_model,
        ),
        flags=tuple(flags),
    )


def empty_budget(display_name: str, source_file: str, flags: Iterable[str]) -> DistrictBudget:
    """Placeholder record for a budget file that could not be read."""
    return DistrictBudget(
        display_name=display_name,
        source_file=source_file,
        total_expenditures=0,
        central_administration_model=0,
        flags=tuple(flags),
    )


def summarize_budget_flags(budgets: Mapping[str, DistrictBudget]) -> Dict[str, int]:
    """
    Count districts per flag group.

    Returns:
        Dict with one count per FLAG_GROUPS entry plus 'districts', the
        number of records examined
    """
    counts = Counter()
    for budget in budgets.values():
        for group, members in FLAG_GROUPS.items():
            if any(flag in budget.flags for flag in members):
                counts[group] += 1

    summary = {group: counts[group] for group in FLAG_GROUPS}
    summary['districts'] = len(budgets)
    return summary
