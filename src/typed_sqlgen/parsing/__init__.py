"""Parsing module for query text placeholders."""

from typed_sqlgen.parsing.sql_lexer import SqlTextLexer
from typed_sqlgen.parsing.template import PlaceholderRewriter, split_placeholders

__all__ = [
    "PlaceholderRewriter",
    "SqlTextLexer",
    "split_placeholders",
]
