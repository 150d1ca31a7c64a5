"""Exceptions raised while generating code."""

from __future__ import annotations

NAMED_PARAMS_DOCS_URL = "https://docs.sqlc.dev/en/latest/howto/named_parameters.html"


class CodegenError(Exception):
    """Base class for all code generation errors."""


class ConfigError(CodegenError, ValueError):
    """Invalid generator options or malformed request data."""


class AmbiguousNameError(CodegenError, ValueError):
    """Two parameters or two result columns derive the same identifier."""

    def __init__(
        self, kind: str, query_name: str, file_name: str, duplicates: list[str]
    ) -> None:
        self.kind = kind
        self.query_name = query_name
        self.file_name = file_name
        self.duplicates = duplicates
        duplicate_list = "\n".join(f"- {d}" for d in duplicates)
        super().__init__(
            "\n".join(
                [
                    f"sqlc-gen-typescript: ambiguous {kind} names for query "
                    f"'{query_name}' ({file_name})",
                    "",
                    "The TypeScript generator produced duplicate identifier(s):",
                    duplicate_list,
                    "",
                    "Disambiguate using named parameters (sqlc.arg/sqlc.narg) "
                    "or explicit column aliases.",
                    f"Docs: {NAMED_PARAMS_DOCS_URL}",
                ]
            )
        )


class UnsupportedCommandError(CodegenError, NotImplementedError):
    """The selected driver cannot implement a query's command kind."""


class UnclassifiedTypeError(CodegenError, ValueError):
    """A strict driver met a database type it has no mapping for."""

    def __init__(self, type_name: str, column_name: str = "") -> None:
        self.type_name = type_name
        self.column_name = column_name
        column = column_name or "unknown"
        hint = column_name or "name"
        super().__init__(
            f'Unrecognized PostgreSQL type: "{type_name}" for column "{column}". '
            "This usually means sqlc couldn't infer the type. "
            f'Try adding an explicit cast like "sqlc.arg({hint})::text" '
            f"or \"sqlc.narg('{hint}')\" in your query."
        )


class QueryGenerationError(CodegenError):
    """Wraps the first error raised while emitting a query's declarations."""

    def __init__(self, query_name: str, file_name: str, message: str) -> None:
        self.query_name = query_name
        self.file_name = file_name
        super().__init__(f'Error in query "{query_name}" ({file_name}): {message}')
