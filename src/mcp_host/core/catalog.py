"""Conversion of provider tool descriptors into the completion tool schema."""

import copy
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from mcp_host.tools.types import ToolDescriptor

EMPTY_OBJECT_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


@dataclass(frozen=True)
class CatalogEntry:
    """A tool as offered to the completion service."""

    name: str
    description: str | None
    parameters: dict[str, Any]

    def to_wire(self) -> dict[str, Any]:
        function: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            function["description"] = self.description
        function["parameters"] = copy.deepcopy(self.parameters)
        return {"type": "function", "function": function}


Catalog = tuple[CatalogEntry, ...]


def build_catalog(descriptors: Iterable[ToolDescriptor]) -> Catalog:
    """Map tool descriptors 1:1 into catalog entries, preserving order.

    A descriptor without an input schema gets an empty object schema so the
    tool stays callable with no arguments.

    Args:
        descriptors: Descriptors as discovered from the tool provider

    Returns:
        Immutable catalog

    Raises:
        ValueError: If two descriptors share a name
    """
    entries: list[CatalogEntry] = []
    seen: set[str] = set()

    for descriptor in descriptors:
        if descriptor.name in seen:
            raise ValueError(f"Duplicate tool name in catalog: {descriptor.name}")
        seen.add(descriptor.name)

        schema = descriptor.input_schema
        entries.append(
            CatalogEntry(
                name=descriptor.name,
                description=descriptor.description,
                parameters=copy.deepcopy(schema) if schema else copy.deepcopy(EMPTY_OBJECT_SCHEMA),
            )
        )

    return tuple(entries)


def catalog_to_wire(catalog: Catalog) -> list[dict[str, Any]]:
    return [entry.to_wire() for entry in catalog]
