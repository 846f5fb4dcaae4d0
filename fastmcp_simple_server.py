#!/usr/bin/env python3
"""
Simple MCP Server using FastMCP for the examples.

This server provides a few weather lookup tools via the Model Context Protocol.
It's started over stdio by ``example.py`` to demonstrate MCP tool discovery.
"""

import logging
from fastmcp import FastMCP

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

server = FastMCP(name="weather-mcp-server")

_FORECASTS = {
    "boston": ["sunny", "cloudy", "rain"],
    "denver": ["snow", "snow", "sunny"],
    "lima": ["cloudy", "cloudy", "cloudy"],
}


@server.tool
def get_forecast(city: str, days: int = 3) -> str:
    """
    Get the weather forecast for a city.

    Args:
        city: City name, e.g. 'Boston'
        days: Number of days to forecast (1-3)
    """
    forecast = _FORECASTS.get(city.strip().lower())
    if forecast is None:
        raise ValueError(f"No forecast available for {city}")
    days = max(1, min(days, len(forecast)))
    return ", ".join(f"day {i + 1}: {weather}" for i, weather in enumerate(forecast[:days]))


@server.tool
def list_cities() -> str:
    """List the cities with a forecast."""
    return ", ".join(city.title() for city in sorted(_FORECASTS))


if __name__ == "__main__":
    logger.info("Starting weather MCP server")
    server.run()
