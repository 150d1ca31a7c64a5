"""Rewrite positional SQL placeholders into tagged-template substitutions."""

from __future__ import annotations

from typed_sqlgen.catalog import Parameter
from typed_sqlgen.decls import Expr, Identifier, PropertyAccess, TaggedTemplate
from typed_sqlgen.naming import arg_name
from typed_sqlgen.parsing.sql_lexer import SqlTextLexer
from typed_sqlgen.types import TypeRef


class PlaceholderRewriter:
    """Turns ``WHERE id = $1`` into ``sql`WHERE id = ${args.id}```."""

    def __init__(self) -> None:
        self.lexer = SqlTextLexer()
        self.lexer.build()

    def split(self, text: str) -> tuple[list[str], list[int]]:
        """Split query text at ``$N`` markers.

        Returns:
            (fragments, indices): literal fragments and the 1-based marker
            numbers between them. There is always one more fragment than
            there are markers; fragments are exact slices of ``text``.
        """
        fragments: list[str] = []
        indices: list[int] = []
        current = ""
        for tok in self.lexer.tokenize(text):
            if tok.type == "PARAM":
                fragments.append(current)
                indices.append(tok.value)
                current = ""
            else:
                current += tok.value
        fragments.append(current)
        return fragments, indices

    def build(
        self,
        tag: Expr,
        text: str,
        params: list[Parameter],
        type_args: list[TypeRef] | None = None,
    ) -> TaggedTemplate:
        """Build a tagged template whose substitutions read from ``args``."""
        fragments, indices = self.split(text)
        exprs: list[Expr] = []
        for number in indices:
            index = number - 1
            if 0 <= index < len(params):
                field_name = arg_name(index, params[index].column)
            else:
                # Marker without a matching parameter
                field_name = f"arg{max(index, 0)}"
            exprs.append(PropertyAccess(Identifier("args"), field_name))
        return TaggedTemplate(
            tag=tag, fragments=fragments, exprs=exprs, type_args=list(type_args or [])
        )


def split_placeholders(text: str) -> tuple[list[str], list[int]]:
    """Split query text at ``$N`` markers (see PlaceholderRewriter.split)."""
    return PlaceholderRewriter().split(text)
