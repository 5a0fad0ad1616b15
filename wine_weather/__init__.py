"""Wine weather report search.

Answers three fixed searches over a bundled set of wine region climate
reports and shapes every answer as a JSON-RPC 2.0 response.
"""

from .contracts import (
    INVALID_PARAMS,
    JSONRPC_VERSION,
    METHOD_NOT_FOUND,
    JsonRpcErrorResponse,
    JsonRpcSuccessResponse,
    Report,
    parse_response,
)
from .dataset import (
    DEFAULT_DATASET,
    DEFAULT_DATASET_PAYLOAD,
    ReportDataset,
    freeze_payload,
    load_dataset,
    thaw_payload,
)
from .dataset_validation import DatasetLoadError
from .dispatcher import MOST_RECENT_LIMIT, QueryDispatcher, SearchType, dispatch, timestamp_id

__all__ = [
    "DEFAULT_DATASET",
    "DEFAULT_DATASET_PAYLOAD",
    "DatasetLoadError",
    "INVALID_PARAMS",
    "JSONRPC_VERSION",
    "JsonRpcErrorResponse",
    "JsonRpcSuccessResponse",
    "METHOD_NOT_FOUND",
    "MOST_RECENT_LIMIT",
    "QueryDispatcher",
    "Report",
    "ReportDataset",
    "SearchType",
    "dispatch",
    "freeze_payload",
    "load_dataset",
    "parse_response",
    "thaw_payload",
    "timestamp_id",
]
