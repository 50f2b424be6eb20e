"""Parser for the candy value literal notation."""

from __future__ import annotations

from typing import Any

import ply.yacc as yacc

from candy_values.parsing.value_lexer import ValueLexer
from candy_values.types import (
    INTEGER_TYPES,
    Array,
    Blob,
    Bool,
    Bytes,
    Empty,
    Field,
    Float,
    Floats,
    Int,
    Map,
    Mutability,
    Nats,
    OpaqueId,
    Optional,
    Record,
    Set,
    Text,
    Value,
)
from candy_values.workspace import Workspace

# "nat8" -> Nat8, "int" -> Int, ...
_INTEGER_CLASSES = {cls.__name__.lower(): cls for cls in INTEGER_TYPES}


class ValueParser:
    """Parser for value literals and workspaces written as zone blocks."""

    tokens = ValueLexer.tokens

    def __init__(self) -> None:
        self.lexer = ValueLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_document_value(self, p: yacc.YaccProduction) -> None:
        """document : value"""
        p[0] = p[1]

    def p_document_zones(self, p: yacc.YaccProduction) -> None:
        """document : zone_list
                    | zone_list SEMI"""
        p[0] = p[1]

    def p_document_empty(self, p: yacc.YaccProduction) -> None:
        """document : empty"""
        p[0] = None

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""

    # --- Workspaces ---

    def p_zone_list_single(self, p: yacc.YaccProduction) -> None:
        """zone_list : zone"""
        p[0] = [p[1]]

    def p_zone_list_multiple(self, p: yacc.YaccProduction) -> None:
        """zone_list : zone_list SEMI zone"""
        p[0] = p[1] + [p[3]]

    def p_zone(self, p: yacc.YaccProduction) -> None:
        """zone : ZONE LBRACE value_list RBRACE
                | ZONE LBRACE value_list COMMA RBRACE"""
        p[0] = p[3]

    def p_zone_empty(self, p: yacc.YaccProduction) -> None:
        """zone : ZONE LBRACE RBRACE"""
        p[0] = []

    # --- Scalars ---

    def p_value_typed_integer(self, p: yacc.YaccProduction) -> None:
        """value : INT_TYPE LPAREN INTEGER RPAREN"""
        p[0] = _INTEGER_CLASSES[p[1]](p[3])

    def p_value_integer(self, p: yacc.YaccProduction) -> None:
        """value : INTEGER"""
        p[0] = Int(p[1])

    def p_value_float(self, p: yacc.YaccProduction) -> None:
        """value : FLOAT
                 | FLOAT_TYPE LPAREN number RPAREN"""
        p[0] = Float(p[1] if len(p) == 2 else p[3])

    def p_value_text(self, p: yacc.YaccProduction) -> None:
        """value : STRING"""
        p[0] = Text(p[1])

    def p_value_bool(self, p: yacc.YaccProduction) -> None:
        """value : TRUE
                 | FALSE"""
        p[0] = Bool(p[1] == "true")

    def p_value_empty(self, p: yacc.YaccProduction) -> None:
        """value : EMPTY"""
        p[0] = Empty()

    def p_value_null(self, p: yacc.YaccProduction) -> None:
        """value : NULL"""
        p[0] = Optional(None)

    def p_value_some(self, p: yacc.YaccProduction) -> None:
        """value : SOME LPAREN value RPAREN"""
        p[0] = Optional(p[3])

    def p_value_blob(self, p: yacc.YaccProduction) -> None:
        """value : BLOB LPAREN HEX RPAREN"""
        p[0] = Blob(p[3])

    def p_value_opaque_text(self, p: yacc.YaccProduction) -> None:
        """value : OPAQUE LPAREN STRING RPAREN"""
        p[0] = OpaqueId.from_text(p[3])

    def p_value_opaque_raw(self, p: yacc.YaccProduction) -> None:
        """value : OPAQUE LPAREN HEX RPAREN"""
        p[0] = OpaqueId(p[3])

    def p_number(self, p: yacc.YaccProduction) -> None:
        """number : INTEGER
                  | FLOAT"""
        p[0] = p[1]

    # --- Tagged collections ---

    def p_value_collection(self, p: yacc.YaccProduction) -> None:
        """value : collection"""
        cls, items = p[1]
        p[0] = cls(items, Mutability.FROZEN)

    def p_value_tagged_collection(self, p: yacc.YaccProduction) -> None:
        """value : THAWED collection
                 | FROZEN collection"""
        cls, items = p[2]
        p[0] = cls(items, Mutability(p[1]))

    def p_collection_array(self, p: yacc.YaccProduction) -> None:
        """collection : LBRACKET value_list RBRACKET
                      | LBRACKET value_list COMMA RBRACKET"""
        p[0] = (Array, p[2])

    def p_collection_array_empty(self, p: yacc.YaccProduction) -> None:
        """collection : LBRACKET RBRACKET"""
        p[0] = (Array, [])

    def p_collection_bytes(self, p: yacc.YaccProduction) -> None:
        """collection : BYTES LPAREN HEX RPAREN"""
        p[0] = (Bytes, p[3])

    def p_collection_nats(self, p: yacc.YaccProduction) -> None:
        """collection : NATS LBRACKET number_list RBRACKET"""
        for number in p[3]:
            if not isinstance(number, int):
                raise SyntaxError(f"nats[] expects integers, got {number!r} (line {p.lineno(1)})")
        p[0] = (Nats, p[3])

    def p_collection_floats(self, p: yacc.YaccProduction) -> None:
        """collection : FLOATS LBRACKET number_list RBRACKET"""
        p[0] = (Floats, p[3])

    def p_collection_nats_empty(self, p: yacc.YaccProduction) -> None:
        """collection : NATS LBRACKET RBRACKET
                      | FLOATS LBRACKET RBRACKET"""
        p[0] = (Nats if p[1] == "nats" else Floats, [])

    def p_number_list_single(self, p: yacc.YaccProduction) -> None:
        """number_list : number"""
        p[0] = [p[1]]

    def p_number_list_multiple(self, p: yacc.YaccProduction) -> None:
        """number_list : number_list COMMA number"""
        p[0] = p[1] + [p[3]]

    def p_value_list_single(self, p: yacc.YaccProduction) -> None:
        """value_list : value"""
        p[0] = [p[1]]

    def p_value_list_multiple(self, p: yacc.YaccProduction) -> None:
        """value_list : value_list COMMA value"""
        p[0] = p[1] + [p[3]]

    # --- Records ---

    def p_value_record(self, p: yacc.YaccProduction) -> None:
        """value : LBRACE field_list RBRACE
                 | LBRACE field_list COMMA RBRACE"""
        p[0] = Record(tuple(p[2]))

    def p_value_record_empty(self, p: yacc.YaccProduction) -> None:
        """value : LBRACE RBRACE"""
        p[0] = Record(())

    def p_field_list_single(self, p: yacc.YaccProduction) -> None:
        """field_list : field"""
        p[0] = [p[1]]

    def p_field_list_multiple(self, p: yacc.YaccProduction) -> None:
        """field_list : field_list COMMA field"""
        p[0] = p[1] + [p[3]]

    def p_field(self, p: yacc.YaccProduction) -> None:
        """field : field_name COLON value"""
        p[0] = Field(p[1], p[3])

    def p_field_locked(self, p: yacc.YaccProduction) -> None:
        """field : LOCK field_name COLON value"""
        p[0] = Field(p[2], p[4], immutable=True)

    def p_field_name(self, p: yacc.YaccProduction) -> None:
        """field_name : IDENTIFIER
                      | STRING"""
        p[0] = p[1]

    # --- Maps and sets ---

    def p_value_map(self, p: yacc.YaccProduction) -> None:
        """value : MAP LBRACE entry_list RBRACE
                 | MAP LBRACE entry_list COMMA RBRACE"""
        p[0] = Map(p[3])

    def p_value_map_empty(self, p: yacc.YaccProduction) -> None:
        """value : MAP LBRACE RBRACE"""
        p[0] = Map(())

    def p_entry_list_single(self, p: yacc.YaccProduction) -> None:
        """entry_list : entry"""
        p[0] = [p[1]]

    def p_entry_list_multiple(self, p: yacc.YaccProduction) -> None:
        """entry_list : entry_list COMMA entry"""
        p[0] = p[1] + [p[3]]

    def p_entry(self, p: yacc.YaccProduction) -> None:
        """entry : value ARROW value"""
        p[0] = (p[1], p[3])

    def p_value_set(self, p: yacc.YaccProduction) -> None:
        """value : SET LBRACE value_list RBRACE
                 | SET LBRACE value_list COMMA RBRACE"""
        p[0] = Set(p[3])

    def p_value_set_empty(self, p: yacc.YaccProduction) -> None:
        """value : SET LBRACE RBRACE"""
        p[0] = Set(())

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno}, position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def _parse(self, data: str) -> Any:
        if self.parser is None:
            self.build(debug=False, write_tables=False)
        self.lexer.lexer.lineno = 1
        return self.parser.parse(data, lexer=self.lexer.lexer)

    def parse(self, data: str) -> Value:
        """Parse a single value literal."""
        result = self._parse(data)
        if not isinstance(result, Value):
            raise SyntaxError("Expected a single value literal")
        return result

    def parse_workspace(self, data: str) -> Workspace:
        """Parse zone blocks into a workspace. Empty input is an empty workspace."""
        result = self._parse(data)
        if result is None:
            return []
        if not isinstance(result, list):
            raise SyntaxError("Expected zone blocks")
        return result


def parse_value(text: str) -> Value:
    """Parse a value literal such as 'nat16(2566)' or '{name: "x"}'."""
    return ValueParser().parse(text)


def parse_workspace(text: str) -> Workspace:
    """Parse 'zone { ... }; zone { ... }' text into a workspace."""
    return ValueParser().parse_workspace(text)
