"""Request and response model: catalog, queries, generated files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum as _Enum
from pathlib import Path
from typing import Any

from typed_sqlgen.errors import ConfigError, UnsupportedCommandError

DEFAULT_SCHEMA = "public"

# Schemas whose enums never reach generated code
SYSTEM_SCHEMAS = frozenset({"pg_catalog", "information_schema"})


class CommandKind(_Enum):
    """Execution contract of a query."""

    EXEC = ":exec"
    EXECLASTID = ":execlastid"
    ONE = ":one"
    MANY = ":many"

    @classmethod
    def parse(cls, value: str) -> CommandKind:
        """Parse a command string such as ``:one``."""
        for kind in cls:
            if kind.value == value:
                return kind
        raise UnsupportedCommandError(f"Unknown query command: {value!r}")


@dataclass
class Identifier:
    """A (possibly qualified) database type name."""

    name: str
    schema: str = ""
    catalog: str = ""

    @property
    def qualified_name(self) -> str:
        """Return ``schema.name`` unless the schema is empty or pg_catalog.

        An empty name stays empty whatever the schema.
        """
        if not self.name:
            return ""
        if self.schema and self.schema != "pg_catalog":
            return f"{self.schema}.{self.name}"
        return self.name


@dataclass
class Enum:
    """A database enum type. Value order is significant."""

    name: str
    vals: list[str] = field(default_factory=list)
    schema: str = ""


@dataclass
class Schema:
    """A named schema and the enums it defines."""

    name: str
    enums: list[Enum] = field(default_factory=list)


@dataclass
class Catalog:
    """All schemas available to a generation run."""

    default_schema: str = DEFAULT_SCHEMA
    schemas: list[Schema] = field(default_factory=list)


@dataclass
class Column:
    """A result column or the type description of a parameter."""

    name: str = ""
    type: Identifier | None = None
    not_null: bool = False
    is_array: bool = False
    array_dims: int = 0

    @property
    def type_name(self) -> str | None:
        """Return the flattened type name, or None when no type is declared."""
        if self.type is None:
            return None
        return self.type.qualified_name


@dataclass
class Parameter:
    """A positional query parameter (``number`` is 1-based)."""

    number: int
    column: Column | None = None


@dataclass
class Query:
    """An already-parsed query annotated with types."""

    name: str
    cmd: CommandKind
    text: str
    filename: str
    params: list[Parameter] = field(default_factory=list)
    columns: list[Column] = field(default_factory=list)


@dataclass
class GenerateRequest:
    """Catalog and queries handed to the generator in one piece."""

    catalog: Catalog = field(default_factory=Catalog)
    queries: list[Query] = field(default_factory=list)
    plugin_options: bytes = b""
    sqlc_version: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenerateRequest:
        """Build a request from sqlc's JSON form.

        Keys may be camelCase (as protobuf-JSON writes them) or snake_case.
        """
        if not isinstance(data, dict):
            raise ConfigError("Request must be a JSON object")
        catalog_data = data.get("catalog") or {}
        options = _get(data, "pluginOptions", "plugin_options", default=b"")
        if isinstance(options, dict):
            options = json.dumps(options)
        if isinstance(options, str):
            options = options.encode("utf-8")
        return cls(
            catalog=_catalog_from_dict(catalog_data),
            queries=[_query_from_dict(q) for q in data.get("queries") or []],
            plugin_options=options,
            sqlc_version=_get(data, "sqlcVersion", "sqlc_version", default=""),
        )


@dataclass(frozen=True)
class GeneratedFile:
    """One output file. Immutable once produced."""

    name: str
    contents: bytes


@dataclass
class GenerateResponse:
    """Ordered set of generated files."""

    files: list[GeneratedFile] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable view of the response."""
        return {
            "files": [
                {"name": f.name, "contents": f.contents.decode("utf-8")}
                for f in self.files
            ]
        }


def load_request(path: Path | str) -> GenerateRequest:
    """Load a request from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Request file not found: {path}")
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return GenerateRequest.from_dict(data)


def _get(data: dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _catalog_from_dict(data: dict[str, Any]) -> Catalog:
    schemas = []
    for schema_data in data.get("schemas") or []:
        name = schema_data.get("name", "")
        enums = [
            Enum(name=e["name"], vals=list(e.get("vals") or []), schema=name)
            for e in schema_data.get("enums") or []
        ]
        schemas.append(Schema(name=name, enums=enums))
    default_schema = _get(data, "defaultSchema", "default_schema") or DEFAULT_SCHEMA
    return Catalog(default_schema=default_schema, schemas=schemas)


def _column_from_dict(data: dict[str, Any] | None) -> Column | None:
    if data is None:
        return None
    type_data = data.get("type")
    type_id = None
    if type_data:
        type_id = Identifier(
            name=type_data.get("name", ""),
            schema=type_data.get("schema", ""),
            catalog=type_data.get("catalog", ""),
        )
    return Column(
        name=data.get("name", ""),
        type=type_id,
        not_null=bool(_get(data, "notNull", "not_null", default=False)),
        is_array=bool(_get(data, "isArray", "is_array", default=False)),
        array_dims=int(_get(data, "arrayDims", "array_dims", default=0) or 0),
    )


def _query_from_dict(data: dict[str, Any]) -> Query:
    try:
        name = data["name"]
        cmd = data["cmd"]
    except KeyError as err:
        raise ConfigError(f"Query is missing required key {err.args[0]!r}") from err
    params = [
        Parameter(number=int(p.get("number", i + 1)), column=_column_from_dict(p.get("column")))
        for i, p in enumerate(data.get("params") or [])
    ]
    return Query(
        name=name,
        cmd=CommandKind.parse(cmd),
        text=data.get("text", ""),
        filename=data.get("filename", ""),
        params=params,
        columns=[_column_from_dict(c) for c in data.get("columns") or []],
    )
