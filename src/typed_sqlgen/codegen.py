"""Per-query declaration emission and per-file assembly."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from typed_sqlgen.catalog import (
    Column,
    CommandKind,
    Enum,
    GeneratedFile,
    GenerateRequest,
    GenerateResponse,
    Query,
)
from typed_sqlgen.config import GeneratorOptions
from typed_sqlgen.decls import Declaration, InterfaceDecl, PropertySignature, TypeAliasDecl
from typed_sqlgen.drivers import Driver, QuerySignature, create_driver
from typed_sqlgen.enums import EnumLookup, build_enum_map, pascal_case
from typed_sqlgen.errors import CodegenError, QueryGenerationError
from typed_sqlgen.naming import arg_name, assert_unique_names, col_name, function_name
from typed_sqlgen.render import TypeScriptRenderer
from typed_sqlgen.types import (
    VOID,
    StringLiteralTypeRef,
    TupleTypeRef,
    TypeRef,
    TypeReference,
    UnionTypeRef,
    iter_enum_refs,
)

logger = logging.getLogger(__name__)

ROWLESS_COMMANDS = frozenset({CommandKind.EXEC, CommandKind.EXECLASTID})

# Ordered set of enum lookup keys (dict keys keep first-insertion order)
EnumUsage = dict[str, None]


def output_name(filename: str, extension: str = ".ts") -> str:
    """Return the generated file name: ``authors.sql`` -> ``authors.ts``."""
    path = PurePosixPath(filename)
    if path.suffix:
        return str(path.with_suffix(extension))
    return f"{filename}{extension}"


def enum_type_decl(key: str, enum_def: Enum) -> TypeAliasDecl:
    """Return ``export type AuthorStatus = "active" | "inactive";``."""
    if not enum_def.vals:
        return TypeAliasDecl(pascal_case(key), TypeReference("never"))
    members = tuple(StringLiteralTypeRef(v) for v in enum_def.vals)
    return TypeAliasDecl(pascal_case(key), UnionTypeRef(members))


def group_by_file(queries: list[Query]) -> dict[str, list[Query]]:
    """Group queries by source filename, keeping first-seen order."""
    groups: dict[str, list[Query]] = {}
    for query in queries:
        groups.setdefault(query.filename, []).append(query)
    return groups


class QueryEmitter:
    """Builds the declarations of a single query."""

    def __init__(self, driver: Driver, *, emit_row_values: bool = False) -> None:
        self.driver = driver
        self.emit_row_values = emit_row_values and driver.supports_row_values

    def emit(self, query: Query, filename: str, file_enums: EnumUsage) -> list[Declaration]:
        """Return the interfaces and function for ``query``.

        Enum types referenced by the query are added to ``file_enums``.

        Raises:
            AmbiguousNameError: If two parameters or two columns derive the
                same identifier.
            QueryGenerationError: If the driver cannot map a type or does
                not support the query's command kind.
        """
        logger.debug("Emitting %s %s (%s)", query.cmd.value, query.name, filename)
        decls: list[Declaration] = []
        arg_iface: str | None = None
        row_type: TypeRef = VOID
        row_values: str | None = None

        if query.params:
            arg_iface = f"{query.name}Args"
            names = [arg_name(i, p.column) for i, p in enumerate(query.params)]
            assert_unique_names("argument", query.name, filename, names)
            columns = [p.column for p in query.params]
            types = self._map_types(query, filename, columns, file_enums)
            decls.append(InterfaceDecl(arg_iface, self._fields(names, types)))

        # :exec and :execlastid return no rows, so their columns get no row shape
        if query.columns and query.cmd not in ROWLESS_COMMANDS:
            row_iface = f"{query.name}Row"
            names = [col_name(i, c) for i, c in enumerate(query.columns)]
            assert_unique_names("column", query.name, filename, names)
            types = self._map_types(query, filename, query.columns, file_enums)
            decls.append(InterfaceDecl(row_iface, self._fields(names, types)))
            row_type = TypeReference(row_iface)
            if self.emit_row_values:
                row_values = f"{query.name}RowValues"
                decls.append(TypeAliasDecl(row_values, TupleTypeRef(tuple(types))))

        signature = QuerySignature(
            func_name=function_name(query.name),
            query_text=query.text,
            arg_iface=arg_iface,
            row_type=row_type,
            params=query.params,
            columns=query.columns,
            row_values=row_values,
        )
        try:
            decls.append(self.driver.declare(query.cmd, signature))
        except CodegenError as err:
            raise QueryGenerationError(query.name, filename, str(err)) from err
        return decls

    def _map_types(
        self,
        query: Query,
        filename: str,
        columns: list[Column | None],
        file_enums: EnumUsage,
    ) -> list[TypeRef]:
        try:
            types = [self.driver.map_type(c) for c in columns]
        except CodegenError as err:
            raise QueryGenerationError(query.name, filename, str(err)) from err
        for typ in types:
            for ref in iter_enum_refs(typ):
                file_enums.setdefault(ref.key)
        return types

    @staticmethod
    def _fields(names: list[str], types: list[TypeRef]) -> list[PropertySignature]:
        return [PropertySignature(name, typ) for name, typ in zip(names, types)]


class FileAssembler:
    """Turns grouped queries into generated files for one driver."""

    def __init__(
        self,
        driver: Driver,
        enums: EnumLookup,
        renderer: TypeScriptRenderer | None = None,
        *,
        emit_row_values: bool = False,
        extension: str | None = None,
    ) -> None:
        self.driver = driver
        self.enums = enums
        self.renderer = renderer or TypeScriptRenderer()
        self.extension = extension or self.renderer.extension
        self.emitter = QueryEmitter(driver, emit_row_values=emit_row_values)
        # Enums referenced anywhere in the run, in first-used order
        self.used_enums: EnumUsage = {}

    def assemble(self, queries: list[Query]) -> list[GeneratedFile]:
        """Generate one file per source filename."""
        return [
            self.assemble_file(filename, file_queries)
            for filename, file_queries in group_by_file(queries).items()
        ]

    def assemble_file(self, filename: str, queries: list[Query]) -> GeneratedFile:
        """Generate the file for the queries of one source file."""
        file_enums: EnumUsage = {}
        body: list[Declaration] = []
        for query in queries:
            body.extend(self.emitter.emit(query, filename, file_enums))

        enum_decls: list[Declaration] = []
        for key in file_enums:
            self.used_enums.setdefault(key)
            enum_decls.append(enum_type_decl(key, self.enums[key]))

        declarations = self.driver.preamble() + enum_decls + body
        text = self.renderer.render_file(declarations)
        name = output_name(filename, self.extension)
        logger.debug("Assembled %s: %d queries, %d enums", name, len(queries), len(enum_decls))
        return GeneratedFile(name=name, contents=text.encode("utf-8"))


def generate(
    request: GenerateRequest, options: GeneratorOptions | None = None
) -> GenerateResponse:
    """Generate TypeScript files for every query in the request.

    Options default to the request's plugin options. Any error aborts the
    whole run; no partial response is returned.
    """
    if options is None:
        options = GeneratorOptions.from_json(request.plugin_options)

    enums = build_enum_map(request.catalog)
    driver = create_driver(options.driver, enums, strict=options.strict)
    assembler = FileAssembler(
        driver,
        enums,
        emit_row_values=options.emit_row_values,
        extension=options.extension,
    )
    files = assembler.assemble(request.queries)

    logger.info(
        "Generated %d file(s) for %d queries with driver %s (enums used: %s)",
        len(files),
        len(request.queries),
        driver.name,
        ", ".join(assembler.used_enums) or "none",
    )
    return GenerateResponse(files=files)
