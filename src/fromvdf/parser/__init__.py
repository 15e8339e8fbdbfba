"""
fromvdf.parser - VDF (KeyValues) Parser

Lexer and parser for Valve KeyValues text files.
Converts .vdf/.acf text into a tree of tables and scalars.
"""

from fromvdf.parser.errors import (
    VdfParseError,
    UnclosedStringError,
    MissingValueError,
    UnexpectedTokenError,
    NestingTooDeepError,
)
from fromvdf.parser.lexer import Lexer, Token
from fromvdf.parser.parser import (
    Parser,
    DEFAULT_MAX_DEPTH,
    parse,
    parse_source,
    parse_file,
    loads,
    # Tree node types
    VdfNode,
    NodeType,
    TableNode,
    ScalarNode,
)

__all__ = [
    # Errors
    "VdfParseError",
    "UnclosedStringError",
    "MissingValueError",
    "UnexpectedTokenError",
    "NestingTooDeepError",
    # Lexer
    "Lexer",
    "Token",
    # Parser
    "Parser",
    "DEFAULT_MAX_DEPTH",
    "parse",
    "parse_source",
    "parse_file",
    "loads",
    # Tree nodes
    "VdfNode",
    "NodeType",
    "TableNode",
    "ScalarNode",
]
