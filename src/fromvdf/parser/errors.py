"""
VDF parse errors.

Every failure aborts the parse and surfaces as one of these exceptions.
They carry the position where the problem was detected so callers can
point the user at the offending input.
"""

from typing import Optional


class VdfParseError(ValueError):
    """Base class for all VDF parse failures."""

    def __init__(self, message: str, line: int = 0, column: int = 0, filename: Optional[str] = None):
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        super().__init__(self._format())

    def _format(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}: {self.message}"
        if self.line:
            return f"line {self.line}, column {self.column}: {self.message}"
        return self.message


class UnclosedStringError(VdfParseError):
    """A quoted string ran into end of input without its closing quote."""

    def __init__(self, line: int = 0, column: int = 0, filename: Optional[str] = None):
        super().__init__("unexpected end of input: unclosed string", line, column, filename)


class MissingValueError(VdfParseError):
    """A key was read but no scalar or table follows it."""

    def __init__(self, key: str, line: int = 0, column: int = 0, filename: Optional[str] = None):
        self.key = key
        super().__init__("unexpected end of input: missing value", line, column, filename)


class UnexpectedTokenError(VdfParseError):
    """Inside a table, the next character is neither a key nor '}'."""

    def __init__(self, found: Optional[str], line: int = 0, column: int = 0, filename: Optional[str] = None):
        self.found = found  # None at end of input
        super().__init__("unexpected token in table: expected key or '}'", line, column, filename)


class NestingTooDeepError(VdfParseError):
    """Tables are nested deeper than the parser allows."""

    def __init__(self, max_depth: int, line: int = 0, column: int = 0, filename: Optional[str] = None):
        self.max_depth = max_depth
        super().__init__(f"nesting too deep: exceeded maximum depth of {max_depth}", line, column, filename)
