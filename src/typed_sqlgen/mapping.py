"""Mapping of database column types to target type descriptors."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from typed_sqlgen.catalog import Column
from typed_sqlgen.enums import EMPTY_ENUMS, EnumLookup, pascal_case
from typed_sqlgen.errors import UnclassifiedTypeError
from typed_sqlgen.types import (
    ANY,
    ArrayTypeRef,
    EnumTypeRef,
    PrimitiveTypeRef,
    TypeCategory,
    TypeRef,
    nullable,
)

PG_CATALOG_PREFIX = "pg_catalog."

TypeTable = Mapping[str, TypeCategory]


def _table(groups: dict[TypeCategory, Iterable[str]]) -> TypeTable:
    table: dict[str, TypeCategory] = {}
    for category, names in groups.items():
        for name in names:
            table[name] = category
    return MappingProxyType(table)


# Geometric types; postgres.js returns these as objects rather than strings
POSTGRES_GEOMETRIC_TYPES = frozenset(
    {"point", "line", "lseg", "box", "path", "polygon", "circle"}
)

# Internal catalog types that only show up when querying system tables
POSTGRES_SYSTEM_TYPES = frozenset(
    {
        "aclitem",
        "cid",
        "tid",
        "xid",
        "regproc",
        "regrole",
        "pg_node_tree",
        "pg_snapshot",
        "txid_snapshot",
    }
)

POSTGRES_TYPES: TypeTable = _table(
    {
        TypeCategory.BOOLEAN: ("bool", "boolean"),
        TypeCategory.BINARY: ("bytea",),
        TypeCategory.TIMESTAMP: (
            "date",
            "timestamp",
            "timestamp without time zone",
            "timestamptz",
            "timestamp with time zone",
        ),
        TypeCategory.INTEGER: (
            "int2",
            "smallint",
            "int4",
            "int",
            "integer",
            "int8",
            "bigint",
            "serial",
            "serial2",
            "serial4",
            "serial8",
            "smallserial",
            "bigserial",
            "oid",
        ),
        TypeCategory.FLOAT: ("float4", "real", "float8", "float", "double precision"),
        TypeCategory.OPAQUE: ("json", "jsonb"),
        TypeCategory.VOID: ("void",),
        TypeCategory.STRING: (
            "text",
            "varchar",
            "character varying",
            "char",
            "character",
            "bpchar",
            "name",
            "uuid",
            "citext",
            "inet",
            "cidr",
            "macaddr",
            "macaddr8",
            "money",
            "numeric",
            "decimal",
            "xml",
            "bit",
            "varbit",
            "bit varying",
            "interval",
            "time",
            "time without time zone",
            "timetz",
            "time with time zone",
            "tsvector",
            "tsquery",
            *sorted(POSTGRES_GEOMETRIC_TYPES),
            *sorted(POSTGRES_SYSTEM_TYPES),
        ),
    }
)

POSTGRES_STRICT_TYPES: TypeTable = MappingProxyType(
    {
        name: category
        for name, category in POSTGRES_TYPES.items()
        if name not in POSTGRES_GEOMETRIC_TYPES and name not in POSTGRES_SYSTEM_TYPES
    }
)

SQLITE_TYPES: TypeTable = _table(
    {
        TypeCategory.INTEGER: (
            "int",
            "integer",
            "tinyint",
            "smallint",
            "mediumint",
            "bigint",
            "unsignedbigint",
            "int2",
            "int8",
            # bun:sqlite hands these back as numbers
            "boolean",
            "bool",
            "timestamp",
        ),
        TypeCategory.STRING: ("varchar", "text", "date", "datetime"),
        TypeCategory.BINARY: ("blob",),
        TypeCategory.FLOAT: ("real", "double", "doubleprecision", "float"),
    }
)

# 64-bit integers some clients return as strings; the interface type stays
# numeric and row accessors convert with Number().
WIRE_NARROWED_TYPES = frozenset({"int8", "bigint", "bigserial", "serial8"})


def normalize_type_name(type_name: str) -> str:
    """Strip the ``pg_catalog.`` qualifier and lower-case the rest."""
    if type_name.startswith(PG_CATALOG_PREFIX):
        type_name = type_name[len(PG_CATALOG_PREFIX):]
    return type_name.lower()


def is_wire_narrowed(column: Column | None, narrowed: Iterable[str] = WIRE_NARROWED_TYPES) -> bool:
    """Return whether a column's values need a numeric conversion when read."""
    if column is None or not column.type_name:
        return False
    return normalize_type_name(column.type_name) in narrowed


def array_dims(column: Column) -> int:
    """Return the number of sequence levels a column's type gets (0 for scalars)."""
    if column.is_array or column.array_dims > 0:
        return max(column.array_dims, 1)
    return 0


class TypeMapper:
    """Maps columns and parameters to type descriptors for one driver."""

    def __init__(
        self,
        table: TypeTable,
        enums: EnumLookup = EMPTY_ENUMS,
        *,
        strict: bool = False,
    ) -> None:
        """Initialize a type mapper.

        Args:
            table: Lower-cased database type name to category.
            enums: Enum lookup built from the catalog.
            strict: Raise UnclassifiedTypeError for names missing from the
                table instead of falling back to an opaque type.
        """
        self.table = table
        self.enums = enums
        self.strict = strict

    def enum_key(self, column: Column | None) -> str | None:
        """Return the enum lookup key of a column's type, if it is an enum."""
        if column is None or not column.type_name:
            return None
        key = normalize_type_name(column.type_name)
        if key in self.enums:
            return key
        # public.status is registered under its bare name only
        bare = normalize_type_name(column.type.name)
        if bare in self.enums:
            return bare
        return None

    def classify(self, column: Column) -> TypeCategory:
        """Return the category of a column's element type.

        An empty type name (sqlc could not infer the type) is classified like
        any other name missing from the table.

        Raises:
            UnclassifiedTypeError: In strict mode, for names the table and the
                enum lookup do not know.
        """
        if self.enum_key(column) is not None:
            return TypeCategory.ENUM_REF

        type_name = column.type_name or ""
        category = self.table.get(normalize_type_name(type_name))
        if category is None and column.type is not None:
            category = self.table.get(normalize_type_name(column.type.name))
        if category is None:
            if self.strict:
                raise UnclassifiedTypeError(type_name, column.name)
            return TypeCategory.OPAQUE
        return category

    def base_type(self, column: Column) -> TypeRef:
        """Return a column's element type, ignoring arrays and nullability."""
        category = self.classify(column)
        if category is TypeCategory.ENUM_REF:
            key = self.enum_key(column)
            return EnumTypeRef(key=key, name=pascal_case(key))
        return PrimitiveTypeRef(category)

    def map_column(self, column: Column | None) -> TypeRef:
        """Return the declared type of a column or parameter.

        A parameter without a column, or a column without a type, carries
        nothing to classify and maps to ``any``.
        """
        if column is None or column.type is None:
            return ANY

        typ = self.base_type(column)
        for _ in range(array_dims(column)):
            typ = ArrayTypeRef(typ)

        if column.not_null:
            return typ
        return nullable(typ)
