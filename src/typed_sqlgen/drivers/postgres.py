"""postgres.js driver.

Generates tagged template calls (``sql<Row[]>`...${args.id}...```). Assumes
the connection is configured with ``transform: postgres.camel`` and a bigint
parser, so rows already arrive with named, correctly typed fields.
"""

from __future__ import annotations

from typed_sqlgen.decls import (
    Await,
    ConstStatement,
    ElementAccess,
    ExprStatement,
    FunctionDecl,
    Identifier,
    ReturnStatement,
    TaggedTemplate,
)
from typed_sqlgen.drivers.base import CallShape, Driver, DriverConfig, QuerySignature
from typed_sqlgen.drivers.calls import ROWS, function, single_row_guard
from typed_sqlgen.enums import EMPTY_ENUMS, EnumLookup
from typed_sqlgen.mapping import POSTGRES_STRICT_TYPES
from typed_sqlgen.parsing import PlaceholderRewriter
from typed_sqlgen.types import ArrayTypeRef, TypeRef, VOID, nullable, promise_of

POSTGRES_JS = DriverConfig(
    name="postgres",
    import_module="postgres",
    import_type="Sql",
    call_shape=CallShape.TAGGED_TEMPLATE,
    type_table=POSTGRES_STRICT_TYPES,
    use_type_import=True,
    strict=True,
)


class PostgresDriver(Driver):
    """Driver for the postgres npm package."""

    def __init__(
        self,
        config: DriverConfig = POSTGRES_JS,
        enums: EnumLookup = EMPTY_ENUMS,
        *,
        strict: bool | None = None,
    ) -> None:
        super().__init__(config, enums, strict=strict)
        self.rewriter = PlaceholderRewriter()

    def _template(self, signature: QuerySignature, row_type: TypeRef | None = None) -> TaggedTemplate:
        type_args = [ArrayTypeRef(row_type)] if row_type is not None else []
        return self.rewriter.build(
            Identifier(self.config.client_var),
            signature.query_text,
            signature.params,
            type_args,
        )

    def exec_decl(self, signature: QuerySignature) -> FunctionDecl:
        body = [ExprStatement(Await(self._template(signature)))]
        return function(self.config, signature, promise_of(VOID), body)

    def one_decl(self, signature: QuerySignature) -> FunctionDecl:
        # More than one row is treated like no row
        body = [
            ConstStatement("rows", Await(self._template(signature, signature.row_type))),
            single_row_guard(),
            ReturnStatement(ElementAccess(ROWS, 0)),
        ]
        return function(self.config, signature, promise_of(nullable(signature.row_type)), body)

    def many_decl(self, signature: QuerySignature) -> FunctionDecl:
        body = [ReturnStatement(Await(self._template(signature, signature.row_type)))]
        return function(
            self.config, signature, promise_of(ArrayTypeRef(signature.row_type)), body
        )
