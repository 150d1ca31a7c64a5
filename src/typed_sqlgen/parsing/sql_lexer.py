"""Lexer splitting SQL text into literal text and positional markers."""

import ply.lex as lex


class SqlTextLexer:
    """Lexer for tokenizing query text around ``$N`` placeholders.

    Every input character belongs to exactly one token, so concatenating
    the token values reproduces the input.
    """

    # Token list
    tokens = [
        "PARAM",
        "TEXT",
    ]

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    # Function rules are tried in definition order: markers first.

    def t_PARAM(self, t: lex.LexToken) -> lex.LexToken:
        r"\$[0-9]+"
        t.value = int(t.value[1:])
        return t

    def t_TEXT(self, t: lex.LexToken) -> lex.LexToken:
        r"[^$]+|\$"
        t.lexer.lineno += t.value.count("\n")
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at line {t.lineno}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)
        self.lexer.lineno = 1

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
