"""
Wine Weather - Dataset Validation
Validates report dataset literals against a JSON schema before they are
turned into immutable report models.
"""
import logging
from typing import Any, Dict, List, Mapping, Sequence

from jsonschema import Draft7Validator, validators
from jsonschema.exceptions import best_match

dataset_logger = logging.getLogger('wine_weather.dataset')

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

REPORT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["jsonrpc", "method", "id", "params"],
    "additionalProperties": False,
    "properties": {
        "jsonrpc": {"const": "2.0"},
        "method": {"const": "getReport"},
        "id": {
            "type": "object",
            "required": ["region", "country", "report_date"],
            "additionalProperties": False,
            "properties": {
                "region": {"type": "string", "minLength": 1},
                "country": {"type": "string", "minLength": 1},
                "report_date": {"type": "string", "pattern": ISO_DATE_PATTERN},
            },
        },
        "params": {
            "type": "object",
            "required": [
                "climate_variability_month_to_month_percentage",
                "primary_driver",
                "primary_driver_share_percent",
            ],
            "additionalProperties": False,
            "properties": {
                "climate_variability_month_to_month_percentage": {"type": "number"},
                "primary_driver": {"type": "string", "minLength": 1},
                "primary_driver_share_percent": {"type": "number"},
            },
        },
    },
}

DATASET_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["reports", "definitions"],
    "additionalProperties": False,
    "properties": {
        "reports": {"type": "array", "items": REPORT_SCHEMA},
        "definitions": {
            "type": "object",
            "required": ["jsonrpc", "method", "id", "result"],
            "additionalProperties": False,
            "properties": {
                "jsonrpc": {"const": "2.0"},
                "method": {"const": "getDefinitions"},
                "id": {"type": "string", "minLength": 1},
                "result": {
                    "type": "object",
                    "minProperties": 1,
                    "additionalProperties": {"type": "string", "minLength": 1},
                },
            },
        },
    },
}

Draft7Validator.check_schema(DATASET_SCHEMA)


def _is_array(checker, instance) -> bool:
    return isinstance(instance, (list, tuple))


def _is_object(checker, instance) -> bool:
    return isinstance(instance, Mapping)


# Frozen literals use tuples and MappingProxyType in place of lists and dicts
DatasetValidator = validators.extend(
    Draft7Validator,
    type_checker=Draft7Validator.TYPE_CHECKER.redefine_many(
        {"array": _is_array, "object": _is_object}
    ),
)


class DatasetLoadError(ValueError):
    """Raised when a dataset literal is corrupt or violates the report schema."""


def _format_path(path: Sequence[Any]) -> str:
    return " -> ".join(str(p) for p in path) if path else "root"


def validate_dataset_payload(payload: Any) -> Mapping[str, Any]:
    """Validate a raw dataset mapping and return it unchanged.

    Raises :class:`DatasetLoadError` naming the offending path when the
    payload does not match :data:`DATASET_SCHEMA` or contains duplicate
    report identities.
    """
    if not isinstance(payload, Mapping):
        raise DatasetLoadError(
            f"dataset must be a mapping, received type {type(payload)!r}"
        )

    error = best_match(DatasetValidator(DATASET_SCHEMA).iter_errors(payload))
    if error is not None:
        error_path = _format_path(list(error.absolute_path))
        message = f"Schema validation failed at '{error_path}': {error.message}"
        dataset_logger.error(message)
        raise DatasetLoadError(message)

    _check_unique_identities(payload["reports"])
    dataset_logger.debug(f"Schema validation passed for {len(payload['reports'])} reports")
    return payload


def _check_unique_identities(reports: List[Mapping[str, Any]]) -> None:
    """Reject reports sharing the same region/country/date identity."""
    seen = set()
    for i, report in enumerate(reports):
        identity = report["id"]
        key = (
            identity["region"].lower(),
            identity["country"].lower(),
            identity["report_date"],
        )
        if key in seen:
            message = (
                f"Duplicate report identity at 'reports -> {i}': "
                f"{identity['region']}, {identity['country']}, {identity['report_date']}"
            )
            dataset_logger.error(message)
            raise DatasetLoadError(message)
        seen.add(key)
