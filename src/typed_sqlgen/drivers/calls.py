"""Building blocks shared by the driver call shapes."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from typed_sqlgen.catalog import Column, Parameter
from typed_sqlgen.decls import (
    ArrowFunction,
    AsExpr,
    Binary,
    Call,
    Conditional,
    ElementAccess,
    Expr,
    FunctionDecl,
    Identifier,
    IfStatement,
    Not,
    NullLiteral,
    NumberLiteral,
    ObjectLiteral,
    Param,
    PropertyAccess,
    ReturnStatement,
    Stmt,
)
from typed_sqlgen.drivers.base import DriverConfig, QuerySignature
from typed_sqlgen.mapping import array_dims, is_wire_narrowed
from typed_sqlgen.naming import arg_name, col_name
from typed_sqlgen.types import TypeRef, TypeReference

RowAccessor = Callable[[Column, int], Expr]

ARGS = Identifier("args")
ROW = Identifier("row")
ROWS = Identifier("rows")


def func_params(config: DriverConfig, signature: QuerySignature) -> list[Param]:
    """Return ``(client: Client, args: QueryArgs)``; ``args`` only with parameters."""
    params = [Param(config.client_var, TypeReference(config.import_type))]
    if signature.arg_iface and signature.params:
        params.append(Param("args", TypeReference(signature.arg_iface)))
    return params


def function(
    config: DriverConfig, signature: QuerySignature, return_type: TypeRef, body: list[Stmt]
) -> FunctionDecl:
    """Wrap a body in ``export async function name(...)``."""
    return FunctionDecl(
        name=signature.func_name,
        params=func_params(config, signature),
        return_type=return_type,
        body=body,
    )


def arg_exprs(params: Iterable[Parameter]) -> list[Expr]:
    """Return ``args.<field>`` for each parameter, in order."""
    return [PropertyAccess(ARGS, arg_name(i, p.column)) for i, p in enumerate(params)]


def method_call(obj: Expr, method: str, args: list[Expr] | None = None) -> Call:
    """Return ``obj.method(args)``."""
    return Call(PropertyAccess(obj, method), list(args or []))


def row_object(columns: list[Column], accessor: RowAccessor) -> ObjectLiteral:
    """Map a raw row tuple onto the row interface's fields."""
    return ObjectLiteral([(col_name(i, c), accessor(c, i)) for i, c in enumerate(columns)])


def to_number(value: Expr, dims: int = 0) -> Expr:
    """Convert a value, or every element of a ``dims``-deep array, with Number().

    ``Number(v)``, ``v.map(Number)``, ``v.map((v2) => v2.map(Number))``, ...
    """
    if dims == 0:
        return Call(Identifier("Number"), [value])
    if dims == 1:
        return method_call(value, "map", [Identifier("Number")])
    item = Identifier(f"v{dims}")
    return method_call(value, "map", [ArrowFunction([Param(item.name)], to_number(item, dims - 1))])


def narrowing_accessor(narrowed: frozenset[str]) -> RowAccessor:
    """Return an accessor that converts wire-narrowed columns with Number().

    Arrays are converted element by element. Nullable columns keep their
    null: ``row[i] === null ? null : Number(row[i])``.
    """

    def access(column: Column, index: int) -> Expr:
        element = ElementAccess(ROW, index)
        if not is_wire_narrowed(column, narrowed):
            return element
        converted = to_number(element, array_dims(column))
        if column.not_null:
            return converted
        return Conditional(Binary(element, "===", NullLiteral()), NullLiteral(), converted)

    return access


def casting_accessor(map_type: Callable[[Column], TypeRef]) -> RowAccessor:
    """Return an accessor that casts each field: ``row[i] as T``."""

    def access(column: Column, index: int) -> Expr:
        return AsExpr(ElementAccess(ROW, index), map_type(column))

    return access


def single_row_guard() -> IfStatement:
    """``if (rows.length !== 1) { return null; }``"""
    return IfStatement(
        Binary(PropertyAccess(ROWS, "length"), "!==", NumberLiteral(1)),
        [ReturnStatement(NullLiteral())],
    )


def missing_row_guard() -> IfStatement:
    """``if (!row) { return null; }``"""
    return IfStatement(Not(ROW), [ReturnStatement(NullLiteral())])
