#!/usr/bin/env python3
"""Run a search directly against the wine weather dispatcher."""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Ensure repository root is on sys.path
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from wine_weather.config import Settings, setup_logging
from wine_weather.dispatcher import SearchType, dispatch


async def _search_via_mcp(search_type: str, params: Dict[str, str]) -> Dict[str, Any]:
    from fastmcp import Client

    from wine_weather.server import WineWeatherServer
    from wine_weather.tool_results import tool_result_payload

    server = WineWeatherServer()
    async with Client(server.mcp) as client:
        result = await client.call_tool("mcp_search", {"search_type": search_type, **params})
    return tool_result_payload(result)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Execute a wine weather report search")
    parser.add_argument(
        "search_type",
        help="Search label, one of: " + ", ".join(repr(s.value) for s in SearchType),
    )
    parser.add_argument("--region", default=None, help="Region filter for location searches")
    parser.add_argument("--country", default=None, help="Country filter for location searches")
    parser.add_argument(
        "--via-mcp",
        action="store_true",
        help="Route the search through the FastMCP tool surface in-process",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print the JSON response",
    )
    args = parser.parse_args(argv)

    setup_logging(Settings.from_env())

    params = {
        key: value
        for key, value in (("region", args.region), ("country", args.country))
        if value is not None
    }

    if args.via_mcp:
        payload = asyncio.run(_search_via_mcp(args.search_type, params))
    else:
        payload = dispatch(args.search_type, params)

    if args.pretty:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(payload, ensure_ascii=False))

    return 1 if "error" in payload else 0


if __name__ == "__main__":
    sys.exit(main())
