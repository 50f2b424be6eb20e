"""Parsing module for the value literal notation."""

from candy_values.parsing.value_lexer import ValueLexer
from candy_values.parsing.value_parser import ValueParser, parse_value, parse_workspace

__all__ = [
    "ValueLexer",
    "ValueParser",
    "parse_value",
    "parse_workspace",
]
