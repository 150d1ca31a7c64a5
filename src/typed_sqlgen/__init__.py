"""Typed SQLGen - TypeScript query functions from sqlc catalogs and queries."""

from typed_sqlgen.catalog import (
    Catalog,
    Column,
    CommandKind,
    Enum,
    GeneratedFile,
    GenerateRequest,
    GenerateResponse,
    Identifier,
    Parameter,
    Query,
    Schema,
    load_request,
)
from typed_sqlgen.codegen import FileAssembler, QueryEmitter, generate
from typed_sqlgen.config import GeneratorOptions
from typed_sqlgen.drivers import DRIVERS, Driver, DriverConfig, create_driver
from typed_sqlgen.enums import build_enum_map
from typed_sqlgen.errors import (
    AmbiguousNameError,
    CodegenError,
    ConfigError,
    QueryGenerationError,
    UnclassifiedTypeError,
    UnsupportedCommandError,
)
from typed_sqlgen.mapping import TypeMapper
from typed_sqlgen.render import TypeScriptRenderer

__all__ = [
    # Main API
    "generate",
    "GeneratorOptions",
    "load_request",
    # Request model
    "Catalog",
    "Schema",
    "Enum",
    "Identifier",
    "Column",
    "Parameter",
    "Query",
    "CommandKind",
    "GenerateRequest",
    "GenerateResponse",
    "GeneratedFile",
    # Pipeline
    "build_enum_map",
    "TypeMapper",
    "QueryEmitter",
    "FileAssembler",
    "TypeScriptRenderer",
    # Drivers
    "DRIVERS",
    "Driver",
    "DriverConfig",
    "create_driver",
    # Errors
    "CodegenError",
    "ConfigError",
    "AmbiguousNameError",
    "UnsupportedCommandError",
    "UnclassifiedTypeError",
    "QueryGenerationError",
]

__version__ = "0.1.0"
