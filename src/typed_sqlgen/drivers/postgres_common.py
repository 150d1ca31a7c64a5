"""Positional-array PostgreSQL driver.

Generated code calls ``sql.unsafe(text, [args...])`` and, for queries that
return rows, ``.values()`` to get tuples that are mapped onto the row
interface by index. Clients differ only in their import, so one driver
class serves every config with this call shape.
"""

from __future__ import annotations

from typed_sqlgen.decls import (
    ArrayLiteral,
    ArrowFunction,
    AsExpr,
    Await,
    Call,
    ConstStatement,
    ElementAccess,
    Expr,
    ExprStatement,
    FunctionDecl,
    Identifier,
    Param,
    ReturnStatement,
    TemplateLiteral,
)
from typed_sqlgen.drivers.base import CallShape, Driver, DriverConfig, QuerySignature
from typed_sqlgen.drivers.calls import (
    ROW,
    ROWS,
    arg_exprs,
    function,
    method_call,
    missing_row_guard,
    narrowing_accessor,
    row_object,
    single_row_guard,
)
from typed_sqlgen.enums import EMPTY_ENUMS, EnumLookup
from typed_sqlgen.mapping import POSTGRES_TYPES, WIRE_NARROWED_TYPES
from typed_sqlgen.types import (
    ANY,
    ArrayTypeRef,
    TypeRef,
    TypeReference,
    VOID,
    nullable,
    promise_of,
)

# Bun's built-in client: import type { SQL } from "bun"
BUN_SQL = DriverConfig(
    name="bun-sql",
    import_module="bun",
    import_type="SQL",
    call_shape=CallShape.POSITIONAL_ARRAY,
    type_table=POSTGRES_TYPES,
    use_type_import=True,
    strict=False,
    wire_narrowed=WIRE_NARROWED_TYPES,
)


class PostgresCommonDriver(Driver):
    """Driver for clients exposing ``sql.unsafe(text, params).values()``."""

    supports_row_values = True

    def __init__(
        self,
        config: DriverConfig = BUN_SQL,
        enums: EnumLookup = EMPTY_ENUMS,
        *,
        strict: bool | None = None,
    ) -> None:
        super().__init__(config, enums, strict=strict)
        self.accessor = narrowing_accessor(config.wire_narrowed)

    def _unsafe_call(self, signature: QuerySignature) -> Call:
        return method_call(
            Identifier(self.config.client_var),
            "unsafe",
            [TemplateLiteral(signature.query_text), ArrayLiteral(arg_exprs(signature.params))],
        )

    def _raw_row_type(self, signature: QuerySignature) -> TypeRef:
        """Type of one raw ``.values()`` row: ``any[]`` or the RowValues tuple."""
        if signature.row_values:
            return TypeReference(signature.row_values)
        return ArrayTypeRef(ANY)

    def _values(self, signature: QuerySignature) -> Expr:
        """``await sql.unsafe(...).values() as any[]``"""
        values = method_call(self._unsafe_call(signature), "values")
        if signature.row_values:
            rows_type: TypeRef = ArrayTypeRef(TypeReference(signature.row_values))
        else:
            rows_type = ArrayTypeRef(ANY)
        return AsExpr(Await(values), rows_type)

    def exec_decl(self, signature: QuerySignature) -> FunctionDecl:
        body = [ExprStatement(Await(self._unsafe_call(signature)))]
        return function(self.config, signature, promise_of(VOID), body)

    def one_decl(self, signature: QuerySignature) -> FunctionDecl:
        body = [
            ConstStatement("rows", self._values(signature)),
            single_row_guard(),
            ConstStatement("row", ElementAccess(ROWS, 0)),
            missing_row_guard(),
            ReturnStatement(row_object(signature.columns, self.accessor)),
        ]
        return function(self.config, signature, promise_of(nullable(signature.row_type)), body)

    def many_decl(self, signature: QuerySignature) -> FunctionDecl:
        mapper = ArrowFunction(
            [Param(ROW.name, self._raw_row_type(signature))],
            row_object(signature.columns, self.accessor),
        )
        body = [ReturnStatement(method_call(self._values(signature), "map", [mapper]))]
        return function(
            self.config, signature, promise_of(ArrayTypeRef(signature.row_type)), body
        )
