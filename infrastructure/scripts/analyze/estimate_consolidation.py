#!/usr/bin/env python3
"""
Estimate the budget impact of consolidating school districts

Loads the budget, enrollment and anchor artifacts, resolves the given district
names to keys and runs the consolidation estimator.

Usage:
    python estimate_consolidation.py <district> <district> [...] [--admin-rate R]
        [--affected-share S] [--cost-per-mile C] [--output <json>] [--breakdown-csv <csv>]

Example:
    python estimate_consolidation.py "Providence" "North Providence" --cost-per-mile 2.5
    python estimate_consolidation.py foster glocester --output data/exports/json/foster_glocester.json

Exit status is 0 for a completed estimate, 1 when the inputs could not be
loaded and 2 when the estimate could not be made (too few districts or
missing data).
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from district_mergers.config import load_settings
from district_mergers.loaders import DataLoadError, load_anchors, load_budgets, load_enrollments
from district_mergers.models import ConsolidationParams, ConsolidationResult
from district_mergers.utilities.common import (
    format_currency,
    format_number,
    format_percent,
    get_project_root,
    setup_logging,
)

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = get_project_root() / "data" / "processed"
DEFAULT_BUDGETS_FILE = DEFAULT_DATA_DIR / "budgets.json"
DEFAULT_ENROLLMENT_FILE = DEFAULT_DATA_DIR / "lea_enrollment.json"
DEFAULT_ANCHORS_FILE = DEFAULT_DATA_DIR / "district-anchors.json"


def format_result(result: ConsolidationResult) -> str:
    """
    Render an estimate as plain text for the terminal.
    """
    lines = []
    if not result.ok:
        lines.append("Estimate not available.")
        missing = result.missing
        for label, keys in (("budget", missing.budgets), ("enrollment", missing.enrollment), ("anchor", missing.anchors)):
            if keys:
                lines.append(f"  Missing {label}: {', '.join(keys)}")
    else:
        lines.extend([
            f"Hub district:            {result.hub_name} ({result.hub_key})",
            f"Combined enrollment:     {format_number(result.combined_enrollment)}",
            f"Combined spending:       {format_currency(result.combined_spending)}",
            f"Baseline per pupil:      {format_currency(result.baseline_per_pupil)}",
            f"Admin savings:           {format_currency(result.admin_savings)}"
            f" ({format_percent(result.admin_savings_pct_combined)} of combined)",
            f"Transportation increase: {format_currency(result.transportation_increase)}"
            f" ({format_percent(result.transport_increase_pct_combined)} of combined)",
            f"Net impact:              {format_currency(result.net_impact)}"
            f" ({format_percent(result.net_impact_pct_combined)} of combined,"
            f" {format_percent(result.net_impact_pct_spokes_spending)} of spokes)",
            f"Projected per pupil:     {format_currency(result.projected_per_pupil)}",
            "",
            "Spokes:",
        ])
        for spoke in result.spoke_breakdown:
            lines.append(
                f"  {spoke.name:<30} {format_number(spoke.enrollment):>8} students"
                f" {spoke.distance_miles:>6.1f} mi {format_currency(spoke.cost):>12}"
            )

    if result.warnings:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"  - {warning}" for warning in result.warnings)

    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Estimate administrative savings and transportation cost of merging districts',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('districts', nargs='+', help='District names or keys (at least 2)')
    parser.add_argument('--budgets', type=Path, default=DEFAULT_BUDGETS_FILE, help='budgets.json')
    parser.add_argument('--enrollment', type=Path, default=DEFAULT_ENROLLMENT_FILE, help='District enrollment JSON')
    parser.add_argument('--anchors', type=Path, default=DEFAULT_ANCHORS_FILE, help='district-anchors.json')
    parser.add_argument('--config', type=Path, help='Settings YAML (default: config/consolidation.yaml)')
    parser.add_argument('--admin-rate', type=float, help='Share of spoke admin spend eliminated (0-1)')
    parser.add_argument('--affected-share', type=float, help='Share of spoke students bused further (0-1)')
    parser.add_argument('--cost-per-mile', type=float, help='Dollars per affected student per added mile')
    parser.add_argument('--output', type=Path, help='Write the full result as JSON')
    parser.add_argument('--breakdown-csv', type=Path, help='Write the spoke breakdown as CSV')
    parser.add_argument('--log-level', default='WARNING', help='Logging level (default: WARNING)')
    return parser


def resolve_params(args: argparse.Namespace, defaults: ConsolidationParams) -> ConsolidationParams:
    """Command-line overrides on top of the configured defaults."""
    overrides = {
        'admin_reduction_rate': args.admin_rate,
        'affected_share': args.affected_share,
        'cost_per_student_mile': args.cost_per_mile,
    }
    return defaults.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        settings = load_settings(args.config)
        budgets = load_budgets(args.budgets)
        enrollments = load_enrollments(args.enrollment)
        anchors = load_anchors(args.anchors)
    except (FileNotFoundError, DataLoadError) as e:
        logger.error(f"Could not load inputs: {e}")
        return 1

    normalizer = settings.normalizer()
    keys = [normalizer.district_key(name) for name in args.districts]
    logger.info(f"Resolved districts: {keys}")

    estimator = settings.estimator(budgets, enrollments, anchors)
    result = estimator.estimate(keys, resolve_params(args, settings.default_params))

    print(format_result(result))

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, 'w') as f:
            json.dump(result.to_dict(), f, indent=2)
        logger.info(f"Result saved: {args.output}")

    if args.breakdown_csv and result.ok:
        args.breakdown_csv.parent.mkdir(parents=True, exist_ok=True)
        breakdown = pd.DataFrame([spoke.to_dict() for spoke in result.spoke_breakdown])
        breakdown.to_csv(args.breakdown_csv, index=False)
        logger.info(f"Spoke breakdown saved: {args.breakdown_csv}")

    return 0 if result.ok else 2


if __name__ == '__main__':
    sys.exit(main())
