"""Enum lookup built from the catalog."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType

from typed_sqlgen.catalog import SYSTEM_SCHEMAS, Catalog, Enum

logger = logging.getLogger(__name__)

# Read-only mapping from lower-cased type name to its enum definition
EnumLookup = Mapping[str, Enum]

EMPTY_ENUMS: EnumLookup = MappingProxyType({})


def build_enum_map(catalog: Catalog) -> EnumLookup:
    """Collect the catalog's enums keyed by the names a column type may use.

    Each enum is registered under its bare name. Enums outside the default
    schema are also registered as ``schema.name``. A bare name shared by two
    schemas keeps the first registration; the qualified key disambiguates.
    """
    enum_map: dict[str, Enum] = {}

    for schema in catalog.schemas:
        if schema.name in SYSTEM_SCHEMAS:
            continue

        for enum_def in schema.enums:
            bare = enum_def.name.lower()
            enum_map.setdefault(bare, enum_def)
            if schema.name != catalog.default_schema:
                enum_map[f"{schema.name}.{enum_def.name}".lower()] = enum_def
            logger.debug("Registered enum %s.%s", schema.name, enum_def.name)

    return MappingProxyType(enum_map)


def pascal_case(name: str) -> str:
    """Convert snake_case (optionally schema-qualified) to PascalCase."""
    parts = [p for p in re.split(r"[_.]", name) if p]
    return "".join(p[:1].upper() + p[1:].lower() for p in parts)
