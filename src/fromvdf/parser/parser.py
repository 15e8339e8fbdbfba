"""
VDF (KeyValues) Parser

Builds a tree of tables and scalars from VDF text.
Handles nested blocks, duplicate keys (last one wins) and lossy reads of
truncated input.

Grammar:
    root   := (key value)*
    value  := string | table
    table  := '{' (key value)* '}'
    key    := string
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from fromvdf.parser.errors import (
    MissingValueError,
    NestingTooDeepError,
    UnexpectedTokenError,
)
from fromvdf.parser.lexer import Lexer

logger = logging.getLogger(__name__)

# Two Python frames per nesting level; keep under the default recursion limit.
DEFAULT_MAX_DEPTH = 256


class NodeType(Enum):
    """Types of tree nodes."""
    TABLE = auto()   # "key" { ... }
    SCALAR = auto()  # "key" "value"


@dataclass
class VdfNode:
    """Base class for tree nodes. Position is not part of equality."""
    node_type: Optional[NodeType] = field(default=None, compare=False)
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass
class ScalarNode(VdfNode):
    """A string value."""
    value: str = ""

    def __post_init__(self):
        self.node_type = NodeType.SCALAR

    def __repr__(self):
        return f"Scalar({self.value!r})"

    def to_python(self) -> str:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            '_type': 'scalar',
            'value': self.value,
            'line': self.line,
            'column': self.column,
        }


@dataclass
class TableNode(VdfNode):
    """
    A mapping of keys to nodes.

    Entries keep the order in which keys first appeared. Setting a key that
    already exists replaces its value in place.
    """
    entries: Dict[str, VdfNode] = field(default_factory=dict)

    def __post_init__(self):
        self.node_type = NodeType.TABLE

    def __repr__(self):
        return f"Table({len(self.entries)} entries)"

    def __getitem__(self, key: str) -> VdfNode:
        return self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str, default: Optional[VdfNode] = None) -> Optional[VdfNode]:
        return self.entries.get(key, default)

    def keys(self):
        return self.entries.keys()

    def items(self):
        return self.entries.items()

    def set(self, key: str, node: VdfNode) -> None:
        """Insert or overwrite an entry."""
        self.entries[key] = node

    def get_table(self, key: str) -> Optional["TableNode"]:
        """Get a nested table by key, or None if missing or a scalar."""
        node = self.entries.get(key)
        return node if isinstance(node, TableNode) else None

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a scalar's string by key, or default if missing or a table."""
        node = self.entries.get(key)
        return node.value if isinstance(node, ScalarNode) else default

    def to_python(self) -> Dict[str, Any]:
        """Convert to plain dicts and strings."""
        return {key: node.to_python() for key, node in self.entries.items()}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            '_type': 'table',
            'line': self.line,
            'column': self.column,
            'entries': {key: node.to_dict() for key, node in self.entries.items()},
        }


class Parser:
    """
    Recursive-descent parser for VDF text.

    Usage:
        parser = Parser(Lexer(source, lossy=True))
        tree = parser.parse()
    """

    OPEN_BRACE = '{'
    CLOSE_BRACE = '}'

    def __init__(self, lexer: Lexer, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {max_depth}")
        self.lexer = lexer
        self.max_depth = max_depth
        self._depth = 0

    @property
    def filename(self) -> Optional[str]:
        return self.lexer.filename

    def parse(self) -> TableNode:
        """Parse every top-level key/value pair into one root table."""
        root = TableNode(line=1, column=1)

        try:
            while True:
                key = self.lexer.read_string()
                if key is None:
                    break
                value = self._parse_value(depth=0)
                if value is None:
                    raise MissingValueError(key.value, self.lexer.line, self.lexer.column, self.filename)
                root.set(key.value, value)
        except RecursionError:
            # max_depth is above what the interpreter stack can hold
            raise NestingTooDeepError(
                self._depth, self.lexer.line, self.lexer.column, self.filename
            ) from None

        if not self.lexer.at_end():
            logger.debug(
                "Ignoring trailing input in %s at line %d, column %d",
                self.filename or "<string>", self.lexer.line, self.lexer.column,
            )
        return root

    def _parse_value(self, depth: int) -> Optional[VdfNode]:
        """Parse a scalar or table. Returns None if neither starts here."""
        self.lexer.skip_trivia()
        ch = self.lexer.current()

        if ch == self.OPEN_BRACE:
            return self._parse_table(depth + 1)

        if ch == Lexer.QUOTE:
            token = self.lexer.read_string()
            return ScalarNode(value=token.value, line=token.line, column=token.column)

        return None

    def _parse_table(self, depth: int) -> TableNode:
        """Parse a brace-delimited table. The cursor is on '{'."""
        line, column = self.lexer.line, self.lexer.column
        if depth > self.max_depth:
            raise NestingTooDeepError(self.max_depth, line, column, self.filename)
        self._depth = depth
        self.lexer.advance()

        table = TableNode(line=line, column=column)
        while True:
            self.lexer.skip_trivia()
            if self.lexer.current() == self.CLOSE_BRACE:
                self.lexer.advance()
                return table

            key = self.lexer.read_string()
            if key is None:
                raise UnexpectedTokenError(
                    self.lexer.current(), self.lexer.line, self.lexer.column, self.filename
                )
            value = self._parse_value(depth)
            if value is None:
                raise MissingValueError(key.value, self.lexer.line, self.lexer.column, self.filename)
            table.set(key.value, value)


def parse_source(
    source: str,
    filename: Optional[str] = None,
    lossy: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> TableNode:
    """
    Parse VDF text into a tree.

    Args:
        source: Text to parse
        filename: Name used in error messages
        lossy: Accept a string left open at end of input
        max_depth: Deepest table nesting allowed

    Returns:
        Root table holding every top-level pair

    Raises:
        VdfParseError: on the first malformed construct
    """
    parser = Parser(Lexer(source, filename, lossy=lossy), max_depth=max_depth)
    root = parser.parse()
    logger.debug("Parsed %s: %d top-level entries", filename or "<string>", len(root))
    return root


def parse(text: str, lossy: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> TableNode:
    """Parse VDF text into a tree."""
    return parse_source(text, lossy=lossy, max_depth=max_depth)


def loads(text: str, lossy: bool = False) -> Dict[str, Any]:
    """Parse VDF text into plain dicts and strings."""
    return parse(text, lossy=lossy).to_python()


def read_source(filepath: Union[str, Path]) -> str:
    """Read a file, trying UTF-8 with BOM, UTF-8, then latin-1 (which always succeeds)."""
    for encoding in ['utf-8-sig', 'utf-8']:
        try:
            with open(filepath, 'r', encoding=encoding) as f:
                return f.read()
        except UnicodeDecodeError:
            continue
    with open(filepath, 'r', encoding='latin-1') as f:
        return f.read()


def parse_file(
    filepath: Union[str, Path],
    lossy: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> TableNode:
    """Parse a file into a tree. Handles encoding fallback."""
    source = read_source(filepath)
    return parse_source(source, str(filepath), lossy=lossy, max_depth=max_depth)
