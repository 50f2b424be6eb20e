"""Lexer for the candy value literal notation."""

import json

import ply.lex as lex

_INT_TYPES = ("nat", "nat8", "nat16", "nat32", "nat64", "int", "int8", "int16", "int32", "int64")


class ValueLexer:
    """Lexer for tokenizing value literals."""

    # Reserved keywords; all integer type names share one token type
    reserved = {
        **{name: "INT_TYPE" for name in _INT_TYPES},
        "float": "FLOAT_TYPE",
        "blob": "BLOB",
        "bytes": "BYTES",
        "opaque": "OPAQUE",
        "some": "SOME",
        "null": "NULL",
        "empty": "EMPTY",
        "true": "TRUE",
        "false": "FALSE",
        "thawed": "THAWED",
        "frozen": "FROZEN",
        "nats": "NATS",
        "floats": "FLOATS",
        "map": "MAP",
        "set": "SET",
        "lock": "LOCK",
        "zone": "ZONE",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "INTEGER",
        "FLOAT",
        "HEX",
        "STRING",
        "LBRACE",
        "RBRACE",
        "LBRACKET",
        "RBRACKET",
        "LPAREN",
        "RPAREN",
        "COLON",
        "COMMA",
        "ARROW",
        "SEMI",
    ] + sorted(set(reserved.values()))

    # Simple tokens
    t_LBRACE = r"\{"
    t_RBRACE = r"\}"
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_COLON = r":"
    t_COMMA = r","
    t_ARROW = r"=>"
    t_SEMI = r";"

    # Ignored characters (spaces, tabs, and newlines)
    t_ignore = " \t\r"

    # Comments
    t_ignore_COMMENT = r"\#[^\n]*"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    # Function tokens match in definition order: HEX before INTEGER, FLOAT before INTEGER
    def t_HEX(self, t: lex.LexToken) -> lex.LexToken:
        r"0x[0-9a-fA-F]*"
        digits = t.value[2:]
        if len(digits) % 2:
            raise SyntaxError(f"Odd number of hex digits at position {t.lexpos}")
        t.value = bytes.fromhex(digits)
        return t

    def t_FLOAT(self, t: lex.LexToken) -> lex.LexToken:
        r"-?\d+(\.\d+([eE][-+]?\d+)?|[eE][-+]?\d+)"
        t.value = float(t.value)
        return t

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"-?\d+"
        t.value = int(t.value)
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"\\\n]|\\.)*"'
        t.value = json.loads(t.value)
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        # Check if it's a reserved word
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)

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
