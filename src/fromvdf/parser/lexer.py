"""
VDF Lexer

Character-level scanning for KeyValues text.
Handles: whitespace, // comments, quoted strings with backslash escapes.

The parser drives the lexer directly instead of consuming a token list:
VDF only ever needs one character of lookahead, and the string lexer's
"no string here" answer is how the parser finds the end of a table.
"""

from dataclasses import dataclass
from typing import Optional

from fromvdf.parser.errors import UnclosedStringError


@dataclass
class Token:
    """A quoted string read by the lexer."""
    value: str
    line: int
    column: int
    terminated: bool = True  # False only for a lossy read that hit end of input

    def __repr__(self):
        return f"Token({self.value!r}, L{self.line}:{self.column})"


class Lexer:
    """
    Cursor over VDF source text.

    Usage:
        lexer = Lexer(source_text)
        token = lexer.read_string()   # None when no string starts here
    """

    QUOTE = '"'
    ESCAPE = '\\'
    COMMENT_END = ('\n', '\r')

    def __init__(self, source: str, filename: Optional[str] = None, lossy: bool = False):
        self.source = source
        self.filename = filename
        self.lossy = lossy
        self.pos = 0
        self.line = 1
        self.column = 1
        self.length = len(source)

    def current(self) -> Optional[str]:
        """Get current character or None if at end."""
        if self.pos >= self.length:
            return None
        return self.source[self.pos]

    def peek(self, offset: int = 1) -> Optional[str]:
        """Peek ahead by offset characters."""
        pos = self.pos + offset
        if pos >= self.length:
            return None
        return self.source[pos]

    def advance(self) -> Optional[str]:
        """Advance one character and return it."""
        ch = self.current()
        if ch is not None:
            self.pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return ch

    def at_end(self) -> bool:
        return self.pos >= self.length

    def _at_comment(self) -> bool:
        return self.current() == '/' and self.peek() == '/'

    def skip_trivia(self) -> None:
        """
        Skip whitespace and // comments, in any interleaving.

        A lone '/' is left in place for the caller to reject.
        """
        while True:
            ch = self.current()
            if ch is None:
                return
            if ch.isspace():
                self.advance()
            elif self._at_comment():
                self._skip_comment()
            else:
                return

    def _skip_comment(self) -> None:
        """Skip from // up to (not including) the end of line."""
        self.advance()
        self.advance()
        while True:
            ch = self.current()
            if ch is None or ch in self.COMMENT_END:
                break
            self.advance()

    def read_string(self) -> Optional[Token]:
        """
        Read a quoted string after skipping trivia.

        Returns None when the next character is not a quote. A backslash is
        dropped and the character after it is kept literally, so \\n stays
        'n' and \\" stays '"'.

        Raises:
            UnclosedStringError: end of input before the closing quote,
                unless the lexer is lossy.
        """
        self.skip_trivia()
        if self.current() != self.QUOTE:
            return None

        start_line = self.line
        start_col = self.column
        self.advance()  # opening quote

        result = []
        escaped = False
        while True:
            ch = self.current()
            if ch is None:
                break
            if ch == self.QUOTE and not escaped:
                self.advance()
                return Token(''.join(result), start_line, start_col)
            if ch == self.ESCAPE and not escaped:
                escaped = True
            else:
                result.append(ch)
                escaped = False
            self.advance()

        if self.lossy:
            return Token(''.join(result), start_line, start_col, terminated=False)
        raise UnclosedStringError(start_line, start_col, self.filename)
