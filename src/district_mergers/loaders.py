"""
Loaders for the district JSON artifacts

Each artifact is a JSON object keyed by normalized district key:

    budgets.json            { key: DistrictBudget }
    lea_enrollment.json     { key: DistrictEnrollment }
    district-anchors.json   { key: DistrictAnchor }

Records are validated on the way in so the estimator can trust their shape.
Loaded maps are read-only.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from district_mergers.models import DistrictAnchor, DistrictBudget, DistrictEnrollment

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class DataLoadError(ValueError):
    """A district artifact could not be read or failed validation."""


def parse_json_map(
    document: object,
    model: Type[RecordT],
    source: str = "<document>",
    strict: bool = False
) -> Mapping[str, RecordT]:
    """
    Validate a decoded JSON document into a read-only map of records.

    Args:
        document: Decoded JSON; must be an object keyed by district key
        model: Record model each value is validated against
        source: Name used in log and error messages
        strict: Raise on the first invalid record instead of skipping it

    Returns:
        Read-only mapping of district key to record, in document order

    Raises:
        DataLoadError: If the document is not an object, or (strict) a
            record is invalid
    """
    if not isinstance(document, dict):
        raise DataLoadError(
            f"{source}: expected a JSON object keyed by district key, got {type(document).__name__}"
        )

    records = {}
    rejected = 0
    for key, value in document.items():
        try:
            records[key] = model.model_validate(value)
        except ValidationError as e:
            if strict:
                raise DataLoadError(f"{source}: invalid record {key!r}: {e}") from e
            rejected += 1
            logger.warning(f"{source}: skipping invalid {model.__name__} {key!r}: {e.error_count()} error(s)")

    logger.info(f"Loaded {len(records):,} {model.__name__} records from {source}"
                + (f" ({rejected} rejected)" if rejected else ""))
    return MappingProxyType(records)


def load_json_map(
    path: Union[str, Path],
    model: Type[RecordT],
    strict: bool = False
) -> Mapping[str, RecordT]:
    """
    Read and validate one district artifact from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        DataLoadError: If the file is not valid JSON or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise DataLoadError(f"{path}: invalid JSON: {e}") from e

    return parse_json_map(document, model, source=str(path), strict=strict)


def load_budgets(path: Union[str, Path], strict: bool = False) -> Mapping[str, DistrictBudget]:
    return load_json_map(path, DistrictBudget, strict=strict)


def load_enrollments(path: Union[str, Path], strict: bool = False) -> Mapping[str, DistrictEnrollment]:
    return load_json_map(path, DistrictEnrollment, strict=strict)


def load_anchors(path: Union[str, Path], strict: bool = False) -> Mapping[str, DistrictAnchor]:
    return load_json_map(path, DistrictAnchor, strict=strict)
