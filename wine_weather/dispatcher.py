"""Query dispatcher for the wine weather search handler.

Branches on the search type, runs the filter or sort against the read-only
dataset, and shapes the outcome as a JSON-RPC 2.0 result or error. Both
error kinds are ordinary return values; nothing here raises for bad input.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import ValidationError

from .contracts import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    JsonRpcError,
    JsonRpcErrorResponse,
    JsonRpcResponse,
    JsonRpcSuccessResponse,
    LocationParams,
)
from .dataset import DEFAULT_DATASET, ReportDataset

logger = logging.getLogger("wine_weather.dispatch")

MOST_RECENT_LIMIT = 3

LOCATION_REQUIRED_MESSAGE = "Invalid params: 'region' or 'country' is required."
LOCATION_TYPE_MESSAGE = "Invalid params: 'region' and 'country' must be strings."
METHOD_NOT_FOUND_MESSAGE = "Method not found"

IdGenerator = Callable[[], int]


def timestamp_id() -> int:
    """Response id derived from the wall clock, in milliseconds."""

    return time.time_ns() // 1_000_000


class SearchType(str, Enum):
    """Search labels understood by the dispatcher (matched exactly)."""

    BY_LOCATION = "Search by location"
    MOST_RECENT = "Search most Recent"
    DEFINITIONS = "Search Definitions"


class QueryDispatcher:
    """Stateless dispatcher over an injected dataset and id generator."""

    def __init__(
        self,
        dataset: Optional[ReportDataset] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self.dataset = dataset if dataset is not None else DEFAULT_DATASET
        self.id_generator = id_generator or timestamp_id

    def handle(self, query_type: Any, params: Optional[Any] = None) -> JsonRpcResponse:
        """Answer one query and return the response model."""

        response_id = self.id_generator()
        try:
            search_type = SearchType(query_type)
        except ValueError:
            logger.info(f"Unknown search type {query_type!r}")
            return self._error(response_id, METHOD_NOT_FOUND, METHOD_NOT_FOUND_MESSAGE)

        logger.debug(f"Dispatching {search_type.value!r} (id={response_id})")

        if search_type is SearchType.BY_LOCATION:
            return self._search_by_location(response_id, params)
        if search_type is SearchType.MOST_RECENT:
            reports = self.dataset.most_recent(MOST_RECENT_LIMIT)
            return self._success(response_id, [r.model_dump(mode="json") for r in reports])
        return self._success(response_id, dict(self.dataset.definitions))

    def dispatch(self, query_type: Any, params: Optional[Any] = None) -> Dict[str, Any]:
        """Answer one query and return the JSON-ready response dict."""

        return self.handle(query_type, params).model_dump(mode="json")

    # ------------------------------------------------------------------ helpers
    def _search_by_location(self, response_id: int, params: Optional[Any]) -> JsonRpcResponse:
        if params is None:
            params = {}
        if not isinstance(params, Mapping):
            logger.info(f"Rejected location params of type {type(params).__name__}")
            return self._error(response_id, INVALID_PARAMS, LOCATION_TYPE_MESSAGE)

        try:
            location = LocationParams.model_validate(dict(params))
        except ValidationError:
            logger.info("Rejected location params with non-string filters")
            return self._error(response_id, INVALID_PARAMS, LOCATION_TYPE_MESSAGE)

        if location.is_empty():
            logger.info("Location search without region or country")
            return self._error(response_id, INVALID_PARAMS, LOCATION_REQUIRED_MESSAGE)

        reports = self.dataset.filter_by_location(location.region, location.country)
        logger.debug(
            f"Location search region={location.region!r} country={location.country!r} "
            f"matched {len(reports)} reports"
        )
        return self._success(response_id, [r.model_dump(mode="json") for r in reports])

    @staticmethod
    def _success(response_id: int, result: Any) -> JsonRpcSuccessResponse:
        return JsonRpcSuccessResponse(id=response_id, result=result)

    @staticmethod
    def _error(response_id: int, code: int, message: str) -> JsonRpcErrorResponse:
        return JsonRpcErrorResponse(
            id=response_id, error=JsonRpcError(code=code, message=message)
        )


default_dispatcher = QueryDispatcher()


def dispatch(query_type: Any, params: Optional[Any] = None) -> Dict[str, Any]:
    """Answer a query with the process-wide dispatcher."""

    return default_dispatcher.dispatch(query_type, params)


__all__ = [
    "IdGenerator",
    "LOCATION_REQUIRED_MESSAGE",
    "LOCATION_TYPE_MESSAGE",
    "METHOD_NOT_FOUND_MESSAGE",
    "MOST_RECENT_LIMIT",
    "QueryDispatcher",
    "SearchType",
    "default_dispatcher",
    "dispatch",
    "timestamp_id",
]
