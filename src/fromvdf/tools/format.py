"""
VDF Writer / Formatter

Serializes trees back to VDF text in a consistent layout:
- Every key and scalar quoted, with '"' and '\\' escaped
- Tab indentation
- Braces on their own line (Valve style)
- Sorted keys (optional)

Parsing the output again yields an equal tree.

Usage:
    from fromvdf.tools.format import dumps, VdfFormatter
    text = dumps({"AppState": {"appid": "440"}})
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from ..parser import parse_file, parse_source
from ..parser.parser import ScalarNode, TableNode, read_source


@dataclass
class FormatOptions:
    """Configuration for the formatter."""
    indent_char: str = "\t"            # Tab or spaces
    indent_size: int = 1               # Number of indent chars per level
    separator: str = "\t\t"            # Between a key and its scalar value
    brace_on_same_line: bool = False   # "key" { vs "key"\n{
    sort_keys: bool = False            # Alphabetize keys within tables


def escape(text: str) -> str:
    """Escape a string for a quoted VDF literal."""
    return text.replace('\\', '\\\\').replace('"', '\\"')


def quote(text: str) -> str:
    return f'"{escape(text)}"'


class VdfFormatter:
    """
    Formats VDF trees (or plain nested mappings of strings) as text.

    The formatter works by:
    1. Parsing the input to a tree (when given text)
    2. Walking the tree and writing each entry with consistent layout
    """

    def __init__(self, options: FormatOptions = None):
        self.options = options or FormatOptions()

    def format_file(self, file_path: Path, lossy: bool = False) -> str:
        """Format a file and return the formatted content."""
        return self.format_tree(parse_file(file_path, lossy=lossy))

    def format_string(self, content: str, filename: Optional[str] = None, lossy: bool = False) -> str:
        """Format a string of VDF content."""
        return self.format_tree(parse_source(content, filename, lossy=lossy))

    def format_tree(self, root: Union[TableNode, Mapping[str, Any]]) -> str:
        """Format a root table to string."""
        lines: List[str] = []
        self._format_entries(root, 0, lines)
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def _indent(self, level: int) -> str:
        """Get indentation string for a level."""
        return self.options.indent_char * (self.options.indent_size * level)

    def _format_entries(self, table: Union[TableNode, Mapping[str, Any]], indent: int, lines: List[str]) -> None:
        keys = list(table.keys())
        if self.options.sort_keys:
            keys.sort()

        ind = self._indent(indent)
        for key in keys:
            value = table[key]
            if isinstance(value, ScalarNode):
                value = value.value

            if isinstance(value, str):
                lines.append(f"{ind}{quote(key)}{self.options.separator}{quote(value)}")
            elif isinstance(value, (TableNode, Mapping)):
                if self.options.brace_on_same_line:
                    lines.append(f"{ind}{quote(key)} {{")
                else:
                    lines.append(f"{ind}{quote(key)}")
                    lines.append(f"{ind}{{")
                self._format_entries(value, indent + 1, lines)
                lines.append(f"{ind}}}")
            else:
                raise TypeError(
                    f"Cannot write {type(value).__name__} for key {key!r}: "
                    "values must be strings or tables"
                )


def dumps(tree: Union[TableNode, Mapping[str, Any]], options: FormatOptions = None) -> str:
    """Serialize a tree or nested mapping of strings to VDF text."""
    return VdfFormatter(options).format_tree(tree)


def format_file(file_path: Path, options: FormatOptions = None, lossy: bool = False) -> str:
    """Convenience function to format a file."""
    formatter = VdfFormatter(options)
    return formatter.format_file(file_path, lossy=lossy)


def check_formatted(file_path: Path, options: FormatOptions = None, lossy: bool = False) -> bool:
    """Check if a file is already formatted. Returns True if formatted."""
    formatted = format_file(file_path, options, lossy=lossy)
    return formatted == read_source(file_path)
