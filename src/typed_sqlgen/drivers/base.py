"""Driver capability interface shared by every client library."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from typed_sqlgen.catalog import Column, CommandKind, Parameter
from typed_sqlgen.decls import Declaration, FunctionDecl, ImportDecl, ImportSpecifier
from typed_sqlgen.enums import EMPTY_ENUMS, EnumLookup
from typed_sqlgen.errors import UnsupportedCommandError
from typed_sqlgen.mapping import TypeMapper, TypeTable
from typed_sqlgen.types import TypeRef


class CallShape(Enum):
    """How generated code hands SQL text and arguments to the client."""

    POSITIONAL_ARRAY = "positional_array"  # client.unsafe(text, [a, b])
    PREPARED_STATEMENT = "prepared_statement"  # db.prepare(text).values(a, b)
    TAGGED_TEMPLATE = "tagged_template"  # client`... ${a} ...`


@dataclass
class DriverConfig:
    """Import surface, call shape and type policy of one client library."""

    name: str
    import_module: str
    import_type: str
    call_shape: CallShape
    type_table: TypeTable
    client_var: str = "sql"
    use_type_import: bool = True
    strict: bool = False
    wire_narrowed: frozenset[str] = field(default_factory=frozenset)


@dataclass
class QuerySignature:
    """Everything a driver needs to emit one query function."""

    func_name: str
    query_text: str
    arg_iface: str | None
    row_type: TypeRef
    params: list[Parameter] = field(default_factory=list)
    columns: list[Column] = field(default_factory=list)
    row_values: str | None = None  # tuple alias for raw rows, if declared


class Driver:
    """Base class for all drivers.

    Subclasses implement the per-command declarations for their call shape.
    """

    supports_row_values = False

    def __init__(
        self,
        config: DriverConfig,
        enums: EnumLookup = EMPTY_ENUMS,
        *,
        strict: bool | None = None,
    ) -> None:
        """Initialize a driver.

        Args:
            config: Client library description.
            enums: Enum lookup for this run; never mutated.
            strict: Override the config's type-classification policy.
        """
        self.config = config
        self.strict = config.strict if strict is None else strict
        self.mapper = TypeMapper(config.type_table, enums, strict=self.strict)

    @property
    def name(self) -> str:
        return self.config.name

    def map_type(self, column: Column | None) -> TypeRef:
        """Return the declared type of a column or parameter."""
        return self.mapper.map_column(column)

    def preamble(self) -> list[Declaration]:
        """Return the declarations every generated file starts with."""
        config = self.config
        return [
            ImportDecl(
                module=config.import_module,
                names=[ImportSpecifier(config.import_type)],
                type_only=config.use_type_import,
            )
        ]

    def declare(self, cmd: CommandKind, signature: QuerySignature) -> FunctionDecl:
        """Emit the function declaration for a query's command kind."""
        if cmd is CommandKind.EXEC:
            return self.exec_decl(signature)
        elif cmd is CommandKind.EXECLASTID:
            return self.execlastid_decl(signature)
        elif cmd is CommandKind.ONE:
            return self.one_decl(signature)
        elif cmd is CommandKind.MANY:
            return self.many_decl(signature)
        raise UnsupportedCommandError(f"{self.name} driver does not support {cmd}")

    def exec_decl(self, signature: QuerySignature) -> FunctionDecl:
        raise NotImplementedError

    def execlastid_decl(self, signature: QuerySignature) -> FunctionDecl:
        raise UnsupportedCommandError(f"{self.name} driver does not support :execlastid")

    def one_decl(self, signature: QuerySignature) -> FunctionDecl:
        raise NotImplementedError

    def many_decl(self, signature: QuerySignature) -> FunctionDecl:
        raise NotImplementedError
