"""Shared contracts for the wine weather search handler.

Report records, query parameters and the two JSON-RPC 2.0 response shapes
are codified here so the dataset loader, the dispatcher and the MCP tools
agree on one schema:

* report records keep the ``getReport`` envelope consumers already parse,
* success and error responses are separate models, so ``result`` and
  ``error`` can never appear together.

All models are Pydantic based and expose ``.model_dump()`` for consumers.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

JSONRPC_VERSION = "2.0"

INVALID_PARAMS = -32602
METHOD_NOT_FOUND = -32601

REPORT_METHOD = "getReport"
DEFINITIONS_METHOD = "getDefinitions"


class ReportIdentity(BaseModel):
    """Region/country/date triple identifying one report."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    region: str = Field(..., min_length=1, description="Wine region name")
    country: str = Field(..., min_length=1, description="Country of the region")
    report_date: str = Field(..., description="ISO date the report was issued")

    @field_validator("report_date")
    @classmethod
    def _check_iso_date(cls, value: str) -> str:
        date.fromisoformat(value)
        return value

    @property
    def issued_on(self) -> date:
        return date.fromisoformat(self.report_date)


class ReportMetrics(BaseModel):
    """Climate variability metrics carried by a report."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    climate_variability_month_to_month_percentage: float
    primary_driver: str = Field(..., min_length=1)
    primary_driver_share_percent: float


class Report(BaseModel):
    """One report record in its ``getReport`` envelope."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    method: Literal["getReport"] = REPORT_METHOD
    id: ReportIdentity
    params: ReportMetrics

    @property
    def region(self) -> str:
        return self.id.region

    @property
    def country(self) -> str:
        return self.id.country

    @property
    def report_date(self) -> str:
        return self.id.report_date


class DefinitionsEntry(BaseModel):
    """The ``getDefinitions`` envelope holding the term glossary."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    method: Literal["getDefinitions"] = DEFINITIONS_METHOD
    id: str = Field(..., min_length=1)
    result: Dict[str, str]


class LocationParams(BaseModel):
    """Optional filters accepted by a location search.

    Empty strings are treated as "not supplied".
    """

    model_config = ConfigDict(extra="ignore")

    region: Optional[str] = None
    country: Optional[str] = None

    @field_validator("region", "country", mode="before")
    @classmethod
    def _require_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value or None
        raise ValueError("must be a string")

    def is_empty(self) -> bool:
        return self.region is None and self.country is None


class JsonRpcError(BaseModel):
    """Error object of a JSON-RPC 2.0 error response."""

    code: int
    message: str


class JsonRpcSuccessResponse(BaseModel):
    """JSON-RPC 2.0 response carrying a ``result``."""

    model_config = ConfigDict(extra="forbid")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: int
    result: Union[List[Dict[str, Any]], Dict[str, Any]]


class JsonRpcErrorResponse(BaseModel):
    """JSON-RPC 2.0 response carrying an ``error``."""

    model_config = ConfigDict(extra="forbid")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: int
    error: JsonRpcError


JsonRpcResponse = Union[JsonRpcSuccessResponse, JsonRpcErrorResponse]


def parse_response(payload: Any) -> JsonRpcResponse:
    """Validate and convert a raw response dict into its response model."""

    if isinstance(payload, (JsonRpcSuccessResponse, JsonRpcErrorResponse)):
        return payload
    if not isinstance(payload, dict):
        raise TypeError(
            "response must be a dict or a JSON-RPC response model; "
            f"received type {type(payload)!r}"
        )
    if "error" in payload:
        return JsonRpcErrorResponse.model_validate(payload)
    return JsonRpcSuccessResponse.model_validate(payload)


__all__ = [
    "DEFINITIONS_METHOD",
    "DefinitionsEntry",
    "INVALID_PARAMS",
    "JSONRPC_VERSION",
    "JsonRpcError",
    "JsonRpcErrorResponse",
    "JsonRpcResponse",
    "JsonRpcSuccessResponse",
    "LocationParams",
    "METHOD_NOT_FOUND",
    "REPORT_METHOD",
    "Report",
    "ReportIdentity",
    "ReportMetrics",
    "ValidationError",
    "parse_response",
]
