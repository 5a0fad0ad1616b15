"""
Wine Weather - MCP Search Server
Exposes the report search dispatcher as FastMCP tools.

Each search type gets its own tool, and ``mcp_search`` accepts any search
label so agents can send the raw label through unchanged. Every tool
returns the JSON-RPC response dict produced by the dispatcher.
"""
import json
import logging
import time
from typing import Annotated, Any, Dict, Optional

from fastmcp import FastMCP
from pydantic import Field

from .config import Settings, setup_logging
from .dispatcher import QueryDispatcher, SearchType

server_logger = logging.getLogger('wine_weather.server')

SERVER_VERSION = "1.0.0"

TOOL_NAMES = (
    "describe_capabilities",
    "SearchByLocation",
    "SearchMostRecent",
    "SearchDefinitions",
    "mcp_search",
    "HealthCheck",
)


def _location_params(region: Optional[str], country: Optional[str]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    if region is not None:
        params["region"] = region
    if country is not None:
        params["country"] = country
    return params


class WineWeatherServer:
    """FastMCP server answering wine region climate report searches."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        dispatcher: Optional[QueryDispatcher] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.dispatcher = dispatcher or QueryDispatcher()
        self.server_name = self.settings.server_name
        self.mcp = FastMCP(self.server_name)

        self._register_capabilities_tool()
        self._register_search_tools()
        self._register_health_check_tool()

    def get_metadata(self) -> Dict[str, str]:
        return {
            "Name": "Wine Weather Report Server",
            "Description": "Searches monthly climate variability reports for wine regions",
            "Version": SERVER_VERSION,
            "Author": "Wine Weather",
        }

    # ------------------------------------------------------------------ tool registration
    def _register_capabilities_tool(self) -> None:
        @self.mcp.tool()
        def describe_capabilities() -> str:
            """Return metadata describing this server and its search types."""

            metadata = self.get_metadata()
            payload = {
                "name": self.server_name,
                "version": metadata["Version"],
                "description": metadata["Description"],
                "search_types": [search_type.value for search_type in SearchType],
                "tools": list(TOOL_NAMES),
            }
            return json.dumps(payload)

    def _register_search_tools(self) -> None:
        @self.mcp.tool()
        def SearchByLocation(
            region: Annotated[Optional[str], Field(description="Wine region, case-insensitive")] = None,
            country: Annotated[Optional[str], Field(description="Country, case-insensitive")] = None,
        ) -> Dict[str, Any]:
            """Find reports for a region and/or country. At least one is required."""

            return self.search(SearchType.BY_LOCATION.value, region=region, country=country)

        @self.mcp.tool()
        def SearchMostRecent() -> Dict[str, Any]:
            """Return the three most recent reports, newest first."""

            return self.search(SearchType.MOST_RECENT.value)

        @self.mcp.tool()
        def SearchDefinitions() -> Dict[str, Any]:
            """Return definitions of the terms used in the reports."""

            return self.search(SearchType.DEFINITIONS.value)

        @self.mcp.tool()
        def mcp_search(
            search_type: Annotated[str, Field(description="'Search by location', 'Search most Recent' or 'Search Definitions'")],
            region: Annotated[Optional[str], Field(description="Region filter for location searches")] = None,
            country: Annotated[Optional[str], Field(description="Country filter for location searches")] = None,
        ) -> Dict[str, Any]:
            """Run any search type and return the JSON-RPC response."""

            return self.search(search_type, region=region, country=country)

    def _register_health_check_tool(self) -> None:
        @self.mcp.tool()
        def HealthCheck() -> Dict[str, Any]:
            """Check server health and dataset availability."""

            return self.health()

    # ------------------------------------------------------------------ handlers
    def search(
        self,
        search_type: str,
        region: Optional[str] = None,
        country: Optional[str] = None,
    ) -> Dict[str, Any]:
        response = self.dispatcher.dispatch(search_type, _location_params(region, country))
        if "error" in response:
            server_logger.info(
                f"{search_type!r} returned error {response['error']['code']}"
            )
        return response

    def health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "server": self.server_name,
            "data_stats": self.dispatcher.dataset.get_statistics(),
        }


def create_server(settings: Optional[Settings] = None) -> FastMCP:
    """Create and return the FastMCP instance."""
    return WineWeatherServer(settings).mcp


def main() -> None:
    """Entrypoint used when the module is executed directly."""
    settings = Settings.from_env()
    setup_logging(settings)
    server = WineWeatherServer(settings)
    metadata = server.get_metadata()
    server_logger.info(f"Starting {metadata['Name']} v{metadata['Version']} as {server.server_name}")
    server.mcp.run()


if __name__ == "__main__":
    main()
