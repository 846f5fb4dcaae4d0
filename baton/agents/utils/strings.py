"""Naming helpers."""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_WORD = re.compile(r"[^0-9a-zA-Z]+")


def to_snake_case(value: str) -> str:
    """Convert ``"WeatherReportTool"`` or ``"Weather Agent"`` to ``weather_report_tool`` / ``weather_agent``."""
    value = _CAMEL_BOUNDARY.sub("_", value.strip())
    value = _NON_WORD.sub("_", value)
    return value.strip("_").lower()


def strip_suffix(value: str, suffix: str) -> str:
    if suffix and value.endswith(suffix) and value != suffix:
        return value[: -len(suffix)]
    return value
