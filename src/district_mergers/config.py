"""
Settings for the normalizer, estimator and budget model.

Usage:
    settings = load_settings()                       # config/consolidation.yaml
    settings = load_settings("config/local.yaml")

    normalizer = settings.normalizer()
    estimator = settings.estimator(budgets, enrollments, anchors)
    budget = settings.model_budget("Foster", "foster.csv", "FY2024-25", 1.2e7, 4e5, 1e5)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from district_mergers.calculators.budget_model import (
    ADMIN_SHARE_CAP,
    ADMIN_SHARE_OUTLIER,
    model_budget,
)
from district_mergers.calculators.consolidation import (
    DEFAULT_PARAMS,
    DISTANCE_WARNING_MILES,
    ConsolidationEstimator,
)
from district_mergers.join import AnchorsMap, BudgetsMap, EnrollmentMap
from district_mergers.models import ConsolidationParams, DistrictBudget
from district_mergers.normalize import DEFAULT_ALIASES, KeyNormalizer
from district_mergers.utilities.common import get_project_root, load_yaml_config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = get_project_root() / "config" / "consolidation.yaml"


@dataclass(frozen=True)
class Settings:
    default_params: ConsolidationParams = DEFAULT_PARAMS
    distance_warning_miles: float = DISTANCE_WARNING_MILES
    aliases: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ALIASES))
    strip_parentheticals_first: bool = True
    admin_share_outlier: float = ADMIN_SHARE_OUTLIER
    admin_share_cap: float = ADMIN_SHARE_CAP

    def normalizer(self) -> KeyNormalizer:
        return KeyNormalizer(
            aliases=self.aliases,
            strip_parentheticals_first=self.strip_parentheticals_first,
        )

    def estimator(
        self,
        budgets: BudgetsMap,
        enrollments: EnrollmentMap,
        anchors: AnchorsMap
    ) -> ConsolidationEstimator:
        return ConsolidationEstimator(
            budgets,
            enrollments,
            anchors,
            default_params=self.default_params,
            distance_warning_miles=self.distance_warning_miles,
        )

    def model_budget(
        self,
        display_name: str,
        source_file: str,
        fiscal_year: str,
        total_expenditures: float,
        district_management: float,
        program_operations_management: float,
        flags: Iterable[str] = ()
    ) -> DistrictBudget:
        """model_budget() with the configured admin share thresholds."""
        return model_budget(
            display_name,
            source_file,
            fiscal_year,
            total_expenditures,
            district_management,
            program_operations_management,
            flags=flags,
            admin_share_outlier=self.admin_share_outlier,
            admin_share_cap=self.admin_share_cap,
        )


def settings_from_dict(config: dict) -> Settings:
    """
    Build Settings from a parsed config document, using built-in defaults
    for anything not given.
    """
    consolidation = config.get('consolidation') or {}
    normalizer = config.get('normalizer') or {}
    budget_section = config.get('budget_model') or {}

    params = DEFAULT_PARAMS.model_dump()
    params.update(consolidation.get('default_params') or {})

    aliases = normalizer.get('aliases')
    if aliases is None:
        aliases = dict(DEFAULT_ALIASES)

    return Settings(
        default_params=ConsolidationParams(**params),
        distance_warning_miles=float(consolidation.get('distance_warning_miles', DISTANCE_WARNING_MILES)),
        aliases={str(k): str(v) for k, v in aliases.items()},
        strip_parentheticals_first=bool(normalizer.get('strip_parentheticals_first', True)),
        admin_share_outlier=float(budget_section.get('admin_share_outlier', ADMIN_SHARE_OUTLIER)),
        admin_share_cap=float(budget_section.get('admin_share_cap', ADMIN_SHARE_CAP)),
    )


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from YAML.

    Args:
        config_path: YAML file (defaults to config/consolidation.yaml)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the file is not valid YAML
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_FILE
    settings = settings_from_dict(load_yaml_config(path))
    logger.debug(f"Loaded settings from {path}")
    return settings
