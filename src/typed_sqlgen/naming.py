"""Identifier derivation for generated fields and functions."""

from __future__ import annotations

import re
from collections import Counter

from typed_sqlgen.catalog import Column
from typed_sqlgen.errors import AmbiguousNameError

_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z_$]+")


def camel_case(name: str) -> str:
    """Convert a column name to a lowerCamelCase identifier.

    Returns an empty string when nothing usable is left.
    """
    parts = [p for p in _NON_IDENTIFIER.sub("_", name).split("_") if p]
    if not parts:
        return ""
    first = parts[0]
    head = first.lower() if first.isupper() else first[:1].lower() + first[1:]
    result = head + "".join(p[:1].upper() + p[1:] for p in parts[1:])
    if result[0].isdigit():
        result = "_" + result
    return result


def arg_name(index: int, column: Column | None) -> str:
    """Return the argument field name for the parameter at ``index``."""
    if column is not None and column.name:
        name = camel_case(column.name)
        if name:
            return name
    return f"arg{index}"


def col_name(index: int, column: Column | None) -> str:
    """Return the row field name for the result column at ``index``."""
    if column is not None and column.name:
        name = camel_case(column.name)
        if name:
            return name
    return f"column{index}"


def function_name(query_name: str) -> str:
    """Return the generated function name for a query (``GetAuthor`` -> ``getAuthor``)."""
    return query_name[:1].lower() + query_name[1:]


def assert_unique_names(kind: str, query_name: str, file_name: str, names: list[str]) -> None:
    """Raise AmbiguousNameError if any derived name occurs more than once.

    Args:
        kind: "argument" or "column".
        query_name: Name of the query the names belong to.
        file_name: Source file of the query.
        names: Derived identifiers, in declaration order.
    """
    counts = Counter(names)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        raise AmbiguousNameError(kind, query_name, file_name, duplicates)
