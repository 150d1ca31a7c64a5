"""bun:sqlite driver.

Generated code prepares a statement and calls ``run`` or ``values`` with
the arguments spread positionally. Row fields are cast to their declared
types. ``:execlastid`` reads ``lastInsertRowid`` from ``run``'s result. The
upstream sqlc-gen-typescript bun:sqlite generator covers only ``:exec``,
``:one`` and ``:many``; ``:execlastid`` extends that client contract.
"""

from __future__ import annotations

from typed_sqlgen.decls import (
    ArrowFunction,
    AsExpr,
    Call,
    ConstStatement,
    ElementAccess,
    Expr,
    ExprStatement,
    FunctionDecl,
    Identifier,
    Param,
    PropertyAccess,
    ReturnStatement,
    TemplateLiteral,
)
from typed_sqlgen.drivers.base import CallShape, Driver, DriverConfig, QuerySignature
from typed_sqlgen.drivers.calls import (
    ROW,
    ROWS,
    arg_exprs,
    casting_accessor,
    function,
    method_call,
    missing_row_guard,
    row_object,
    single_row_guard,
)
from typed_sqlgen.enums import EMPTY_ENUMS, EnumLookup
from typed_sqlgen.mapping import SQLITE_TYPES
from typed_sqlgen.types import (
    NUMBER,
    VOID,
    ArrayTypeRef,
    TypeReference,
    nullable,
    promise_of,
)

BUN_SQLITE = DriverConfig(
    name="bun-sqlite",
    import_module="bun:sqlite",
    import_type="Database",
    call_shape=CallShape.PREPARED_STATEMENT,
    type_table=SQLITE_TYPES,
    client_var="database",
    use_type_import=False,
    strict=False,
)

STMT = Identifier("stmt")


class BunSqliteDriver(Driver):
    """Driver for Bun's built-in SQLite client."""

    supports_row_values = True

    def __init__(
        self,
        config: DriverConfig = BUN_SQLITE,
        enums: EnumLookup = EMPTY_ENUMS,
        *,
        strict: bool | None = None,
    ) -> None:
        super().__init__(config, enums, strict=strict)
        self.accessor = casting_accessor(self.map_type)

    def _prepare(self, signature: QuerySignature) -> ConstStatement:
        """``const stmt = database.prepare(`...`)``"""
        prepare = method_call(
            Identifier(self.config.client_var),
            "prepare",
            [TemplateLiteral(signature.query_text)],
        )
        return ConstStatement(STMT.name, prepare)

    def _run(self, signature: QuerySignature) -> Call:
        return method_call(STMT, "run", arg_exprs(signature.params))

    def _values(self, signature: QuerySignature) -> Expr:
        values = method_call(STMT, "values", arg_exprs(signature.params))
        if signature.row_values:
            return AsExpr(values, ArrayTypeRef(TypeReference(signature.row_values)))
        return values

    def exec_decl(self, signature: QuerySignature) -> FunctionDecl:
        body = [self._prepare(signature), ExprStatement(self._run(signature))]
        return function(self.config, signature, promise_of(VOID), body)

    def execlastid_decl(self, signature: QuerySignature) -> FunctionDecl:
        last_id = PropertyAccess(Identifier("result"), "lastInsertRowid")
        body = [
            self._prepare(signature),
            ConstStatement("result", self._run(signature)),
            ReturnStatement(Call(Identifier("Number"), [last_id])),
        ]
        return function(self.config, signature, promise_of(NUMBER), body)

    def one_decl(self, signature: QuerySignature) -> FunctionDecl:
        body = [
            self._prepare(signature),
            ConstStatement("rows", self._values(signature)),
            single_row_guard(),
            ConstStatement("row", ElementAccess(ROWS, 0)),
            missing_row_guard(),
            ReturnStatement(row_object(signature.columns, self.accessor)),
        ]
        return function(self.config, signature, promise_of(nullable(signature.row_type)), body)

    def many_decl(self, signature: QuerySignature) -> FunctionDecl:
        row_param_type = TypeReference(signature.row_values) if signature.row_values else None
        mapper = ArrowFunction(
            [Param(ROW.name, row_param_type)],
            row_object(signature.columns, self.accessor),
        )
        body = [
            self._prepare(signature),
            ConstStatement("rows", self._values(signature)),
            ReturnStatement(method_call(ROWS, "map", [mapper])),
        ]
        return function(
            self.config, signature, promise_of(ArrayTypeRef(signature.row_type)), body
        )
