"""
Wine Weather - Report Dataset
Holds the bundled climate variability reports and the term glossary as an
immutable, validated container.

The literal below is the single source of truth for the search handler.
A refreshed dataset only has to match the same shape to be accepted by
:func:`load_dataset`.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import pandas as pd
from pydantic import ValidationError

from .contracts import DefinitionsEntry, Report
from .dataset_validation import DatasetLoadError, dataset_logger, validate_dataset_payload


def freeze_payload(value: Any) -> Any:
    """Recursively turn mappings into read-only views and lists into tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_payload(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_payload(item) for item in value)
    return value


def thaw_payload(value: Any) -> Any:
    """Recursively copy a (possibly frozen) payload into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {key: thaw_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw_payload(item) for item in value]
    return value


DEFAULT_DATASET_PAYLOAD: Mapping[str, Any] = freeze_payload({
    "reports": (
        {
            "jsonrpc": "2.0",
            "method": "getReport",
            "id": {"region": "Mendoza Region", "country": "Argentina", "report_date": "2025-07-26"},
            "params": {
                "climate_variability_month_to_month_percentage": 4.20,
                "primary_driver": "Longwave Solar Radiation",
                "primary_driver_share_percent": 10.96,
            },
        },
        {
            "jsonrpc": "2.0",
            "method": "getReport",
            "id": {"region": "Marlborough Region", "country": "New Zealand", "report_date": "2025-07-26"},
            "params": {
                "climate_variability_month_to_month_percentage": 0.09,
                "primary_driver": "Specific Humidity",
                "primary_driver_share_percent": 11.33,
            },
        },
        {
            "jsonrpc": "2.0",
            "method": "getReport",
            "id": {"region": "Western Australia Region", "country": "Australia", "report_date": "2025-07-26"},
            "params": {
                "climate_variability_month_to_month_percentage": 0.78,
                "primary_driver": "Longwave Solar Radiation",
                "primary_driver_share_percent": 11.27,
            },
        },
    ),
    "definitions": {
        "jsonrpc": "2.0",
        "method": "getDefinitions",
        "id": "premier-method-definitions",
        "result": {
            "Climate Variability": "A measure of weather condition variance using Information Theory entropy, expressed in 'bits'. Higher bits mean more variability.",
            "Primary Driver": "The single weather measurement (e.g., Temperature, Precipitation) that contributes the most entropy to the total Climate Variability for a region.",
            "Month to Month Change": "The difference in the total 'Climate Variability' from the previous month, indicating a trend.",
        },
    },
})


def _matches(value: str, wanted: Optional[str]) -> bool:
    return wanted is None or value.lower() == wanted.lower()


@dataclass(frozen=True)
class ReportDataset:
    """Read-only view over validated reports and definitions."""

    reports: Tuple[Report, ...]
    definitions: Mapping[str, str]
    definitions_id: str

    def filter_by_location(
        self, region: Optional[str] = None, country: Optional[str] = None
    ) -> Tuple[Report, ...]:
        """Reports whose region and country match the given filters.

        Matching is case-insensitive and an omitted filter matches every
        report. Dataset order is preserved.
        """
        return tuple(
            report for report in self.reports
            if _matches(report.region, region) and _matches(report.country, country)
        )

    def most_recent(self, limit: int = 3) -> Tuple[Report, ...]:
        """Up to ``limit`` reports ordered by report date, newest first.

        Reports sharing a date keep their dataset order.
        """
        ordered = sorted(self.reports, key=lambda report: report.id.issued_on, reverse=True)
        return tuple(ordered[:limit])

    def to_frame(self) -> pd.DataFrame:
        """Flatten reports into one row per report."""
        rows = [
            {**report.id.model_dump(), **report.params.model_dump()}
            for report in self.reports
        ]
        frame = pd.DataFrame(
            rows,
            columns=[
                "region",
                "country",
                "report_date",
                "climate_variability_month_to_month_percentage",
                "primary_driver",
                "primary_driver_share_percent",
            ],
        )
        frame["report_date"] = pd.to_datetime(frame["report_date"])
        return frame

    def get_statistics(self) -> Dict[str, Any]:
        frame = self.to_frame()
        if frame.empty:
            return {
                "total_reports": 0,
                "regions": [],
                "countries": [],
                "date_range": {"start": None, "end": None},
                "primary_drivers": {},
                "mean_variability_percentage": None,
                "definitions": len(self.definitions),
            }
        return {
            "total_reports": int(len(frame)),
            "regions": list(frame["region"].unique()),
            "countries": list(frame["country"].unique()),
            "date_range": {
                "start": frame["report_date"].min().date().isoformat(),
                "end": frame["report_date"].max().date().isoformat(),
            },
            "primary_drivers": {
                driver: int(count)
                for driver, count in frame["primary_driver"].value_counts().items()
            },
            "mean_variability_percentage": round(
                float(frame["climate_variability_month_to_month_percentage"].mean()), 4
            ),
            "definitions": len(self.definitions),
        }


def load_dataset(payload: Mapping[str, Any]) -> ReportDataset:
    """Validate a raw dataset mapping and freeze it into a :class:`ReportDataset`.

    Raises :class:`DatasetLoadError` for corrupt literals, for example an
    empty trailing report object.
    """
    if not isinstance(payload, Mapping):
        raise DatasetLoadError(
            f"dataset must be a mapping, received type {type(payload)!r}"
        )
    validate_dataset_payload(payload)
    raw = thaw_payload(payload)

    try:
        reports = tuple(Report.model_validate(entry) for entry in raw["reports"])
        definitions = DefinitionsEntry.model_validate(raw["definitions"])
    except ValidationError as exc:
        raise DatasetLoadError(f"Report contract validation failed: {exc}") from exc

    dataset_logger.info(
        f"Loaded {len(reports)} reports and {len(definitions.result)} definitions"
    )
    return ReportDataset(
        reports=reports,
        definitions=MappingProxyType(dict(definitions.result)),
        definitions_id=definitions.id,
    )


DEFAULT_DATASET = load_dataset(DEFAULT_DATASET_PAYLOAD)
