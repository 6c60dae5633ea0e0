"""In-process tool provider with a set of utility tools.

The local provider offers the same utility tools as the companion MCP server
(time, weather, statistics, file listing, hashing, ...) without a network hop.
Each tool extracts and validates its own arguments; a bad argument or a
failing tool is reported as an error result, never as an exception.
"""

import asyncio
import hashlib
import json
import logging
import os
import platform
import random
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx

from mcp_host.core.errors import ToolExecutionFailure
from mcp_host.tools.types import ToolDescriptor, ToolResult

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

ToolHandler = Callable[["LocalToolProvider", dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class LocalTool:
    name: str
    description: str
    input_schema: dict[str, Any]
    handler: ToolHandler


_TOOLS: dict[str, LocalTool] = {}


def local_tool(
    name: str,
    description: str,
    properties: dict[str, Any] | None = None,
    required: list[str] | None = None,
) -> Callable[[ToolHandler], ToolHandler]:
    """Register a coroutine function as a local tool."""

    def decorator(handler: ToolHandler) -> ToolHandler:
        schema: dict[str, Any] = {"type": "object", "properties": properties or {}}
        if required:
            schema["required"] = required
        _TOOLS[name] = LocalTool(name, description, schema, handler)
        return handler

    return decorator


# --- Argument extraction ---


def _number(args: dict[str, Any], key: str) -> float:
    value = args.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' must be a number")
    return float(value)


def _integer(args: dict[str, Any], key: str, default: int | None = None) -> int:
    value = args.get(key, default)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be an integer")
    return value


def _string(args: dict[str, Any], key: str, default: str | None = None) -> str:
    value = args.get(key, default)
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


# --- Tools ---


@local_tool("GetTime", "Gets the current UTC time in ISO 8601 format.")
async def get_time(provider: "LocalToolProvider", args: dict[str, Any]) -> str:
    return datetime.now(timezone.utc).isoformat()


@local_tool(
    "FetchWeather",
    "Fetches current temperature and wind speed from Open-Meteo for the given coordinates.",
    properties={
        "latitude": {"type": "number", "description": "Latitude in decimal degrees"},
        "longitude": {"type": "number", "description": "Longitude in decimal degrees"},
    },
    required=["latitude", "longitude"],
)
async def fetch_weather(provider: "LocalToolProvider", args: dict[str, Any]) -> dict:
    params = {
        "latitude": _number(args, "latitude"),
        "longitude": _number(args, "longitude"),
        "current": "temperature_2m,wind_speed_10m",
    }
    response = await provider.http_client.get(OPEN_METEO_URL, params=params)
    response.raise_for_status()
    data = response.json()

    current = data.get("current") or {}
    return {
        "temperatureC": current.get("temperature_2m"),
        "windSpeedKph": current.get("wind_speed_10m"),
        "timezone": data.get("timezone") or "UTC",
    }


@local_tool(
    "ComputeStats",
    "Computes basic statistics for a list of numbers.",
    properties={
        "numbers": {
            "type": "array",
            "items": {"type": "number"},
            "description": "Numbers to analyze",
        }
    },
    required=["numbers"],
)
async def compute_stats(provider: "LocalToolProvider", args: dict[str, Any]) -> dict:
    numbers = args.get("numbers")
    if not isinstance(numbers, list) or any(
        isinstance(n, bool) or not isinstance(n, (int, float)) for n in numbers
    ):
        raise ValueError("'numbers' must be a list of numbers")

    if not numbers:
        return {"count": 0, "min": None, "max": None, "average": None, "sum": 0}

    total = sum(numbers)
    return {
        "count": len(numbers),
        "min": min(numbers),
        "max": max(numbers),
        "average": total / len(numbers),
        "sum": total,
    }


@local_tool(
    "ListFiles",
    "Lists files in a directory, optionally limiting the number of results.",
    properties={
        "directory": {"type": "string", "description": "Directory to list files from"},
        "maxResults": {
            "type": "integer",
            "description": "Maximum number of files to return",
            "default": 50,
        },
    },
    required=["directory"],
)
async def list_files(provider: "LocalToolProvider", args: dict[str, Any]) -> list[str]:
    directory = _string(args, "directory", ".").strip() or "."
    max_results = max(0, _integer(args, "maxResults", 50))

    path = Path(directory)
    if not path.is_dir():
        raise FileNotFoundError(f"Directory not found: {directory}")

    files = sorted(str(entry) for entry in path.iterdir() if entry.is_file())
    return files[:max_results]


@local_tool("GenerateGuid", "Generates a new GUID.")
async def generate_guid(provider: "LocalToolProvider", args: dict[str, Any]) -> str:
    return str(uuid.uuid4())


@local_tool("GetHostInfo", "Gets host and runtime information about the current process.")
async def get_host_info(provider: "LocalToolProvider", args: dict[str, Any]) -> dict:
    return {
        "machineName": platform.node(),
        "osDescription": platform.platform(),
        "runtimeDescription": f"{platform.python_implementation()} {platform.python_version()}",
        "processArchitecture": platform.machine(),
        "processorCount": os.cpu_count(),
        "processId": os.getpid(),
    }


@local_tool("GetEnvironmentKeys", "Returns environment variable keys visible to the process.")
async def get_environment_keys(
    provider: "LocalToolProvider", args: dict[str, Any]
) -> list[str]:
    return sorted((key for key in os.environ if key.strip()), key=str.lower)


@local_tool(
    "CalculateSha256",
    "Computes a SHA-256 hash for the provided text.",
    properties={"input": {"type": "string", "description": "Text to hash"}},
    required=["input"],
)
async def calculate_sha256(provider: "LocalToolProvider", args: dict[str, Any]) -> dict:
    text = _string(args, "input")
    return {"sha256": hashlib.sha256(text.encode("utf-8")).hexdigest()}


@local_tool(
    "GetRandomNumber",
    "Returns a random integer within the provided inclusive range.",
    properties={
        "minValue": {"type": "integer", "description": "Minimum value (inclusive)"},
        "maxValue": {"type": "integer", "description": "Maximum value (inclusive)"},
    },
    required=["minValue", "maxValue"],
)
async def get_random_number(provider: "LocalToolProvider", args: dict[str, Any]) -> int:
    min_value = _integer(args, "minValue")
    max_value = _integer(args, "maxValue")
    if min_value > max_value:
        raise ValueError("Minimum value must be less than or equal to maximum value.")
    return random.randint(min_value, max_value)


@local_tool(
    "Delay",
    "Delays for the specified number of milliseconds.",
    properties={
        "milliseconds": {"type": "integer", "description": "Delay duration in milliseconds"}
    },
    required=["milliseconds"],
)
async def delay(provider: "LocalToolProvider", args: dict[str, Any]) -> str:
    milliseconds = _integer(args, "milliseconds")
    if milliseconds < 0:
        raise ValueError("'milliseconds' must not be negative")
    await asyncio.sleep(milliseconds / 1000)
    return f"Delayed for {milliseconds} ms."


@local_tool(
    "Echo",
    "Echoes the provided message.",
    properties={"message": {"type": "string", "description": "Message to echo"}},
    required=["message"],
)
async def echo(provider: "LocalToolProvider", args: dict[str, Any]) -> str:
    return _string(args, "message")


def _render(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


class LocalToolProvider:
    """Tool provider that runs the registered utility tools in-process.

    Attributes:
        http_client: Client used by tools that call web APIs
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self.http_client = http_client or httpx.AsyncClient(timeout=30.0)
        self._tools = dict(_TOOLS)

    async def connect(self) -> None:
        logger.info(f"Local tool provider ready with {len(self._tools)} tools")

    async def list_tools(self) -> list[ToolDescriptor]:
        return [
            ToolDescriptor(
                name=tool.name,
                description=tool.description,
                input_schema=tool.input_schema,
            )
            for tool in self._tools.values()
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Run a local tool.

        Raises:
            ToolExecutionFailure: If no tool with that name exists
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolExecutionFailure(f"Unknown tool: {name}")

        try:
            value = await tool.handler(self, arguments)
        except Exception as e:
            logger.warning(f"Local tool {name} failed: {e}")
            return ToolResult.text(f"Error executing tool {name}: {e}", is_error=True)

        return ToolResult.text(_render(value))

    async def close(self) -> None:
        await self.http_client.aclose()
