"""
Utility functions for the district consolidation toolkit

Common functions used across the calculators, loaders and scripts.
"""

import logging
import math
from pathlib import Path
from typing import Optional, Union
import pandas as pd
import yaml

logger = logging.getLogger(__name__)


def load_yaml_config(config_path: Union[str, Path]) -> dict:
    """
    Load a YAML configuration file

    Args:
        config_path: Path to YAML file

    Returns:
        Dictionary from YAML file

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If file is not valid YAML
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        try:
            config = yaml.safe_load(f)
            return config if config else {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML: {e}")


def get_project_root() -> Path:
    """
    Get the project root directory

    Returns:
        Path to project root
    """
    # Assumes this file is in src/district_mergers/utilities/
    return Path(__file__).parent.parent.parent.parent


def setup_logging(
    log_level: str = 'INFO',
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Set up logging configuration

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file to write logs to

    Returns:
        Configured logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default if division would fail

    Args:
        numerator: Top number
        denominator: Bottom number
        default: Value to return if division fails

    Returns:
        Result of division or default value
    """
    if pd.isna(numerator) or pd.isna(denominator) or denominator <= 0:
        return default

    return numerator / denominator


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round to ``digits`` decimals with halves going up, the way the
    published artifacts were rounded (round() sends halves to even).

    Examples:
        >>> round_half_up(1234.5)
        1235.0
        >>> round_half_up(-2.5)
        -2.0
    """
    if not math.isfinite(value):
        return value
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def format_number(value: Union[int, float], decimals: int = 0) -> str:
    """
    Format a number with thousands separators

    Args:
        value: Number to format
        decimals: Number of decimal places

    Returns:
        Formatted string

    Examples:
        >>> format_number(1234567)
        '1,234,567'
        >>> format_number(1234.567, 2)
        '1,234.57'
    """
    if pd.isna(value):
        return "N/A"

    return f"{value:,.{decimals}f}"


def format_currency(value: Union[int, float]) -> str:
    """
    Format a dollar amount, keeping the sign in front of the symbol

    Examples:
        >>> format_currency(-10000)
        '-$10,000'
    """
    if pd.isna(value):
        return "N/A"

    sign = "-" if value < 0 else ""
    return f"{sign}${format_number(abs(value))}"


def format_percent(value: float, decimals: int = 2) -> str:
    """Format a fraction (0.0123) as a percentage string ('1.23%')."""
    if pd.isna(value):
        return "N/A"

    return f"{value * 100:.{decimals}f}%"
