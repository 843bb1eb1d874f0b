"""
Hand-written lexical scanner for the tournament notation.

Single left-to-right pass with at most one character of lookahead.
Every character ends up in a token, in skipped whitespace or comments,
or in a diagnostic.
"""
import logging
from typing import List, Optional, Tuple

from ..exceptions import SourceTextError
from .diagnostics import Diagnostic, DiagnosticKind
from .tokens import RESERVED_WORDS, SYMBOLS, VERSUS_WORD, Token, TokenKind

logger = logging.getLogger(__name__)


WHITESPACE = frozenset(" \t\n\r\f\v")
ACCENTED_LETTERS = frozenset("ÁÉÍÓÚáéíóúÑñ")


def is_letter(ch: Optional[str]) -> bool:
    """ASCII letters, underscore and the Spanish accented letters."""
    if not ch:
        return False
    return ("A" <= ch <= "Z") or ("a" <= ch <= "z") or ch == "_" or ch in ACCENTED_LETTERS


def is_digit(ch: Optional[str]) -> bool:
    return bool(ch) and "0" <= ch <= "9"


class Scanner:
    """
    Converts raw notation text into tokens and lexical diagnostics.

    Usage:
        tokens, diagnostics = Scanner(text).scan()
    """

    def __init__(self, text: str):
        if not isinstance(text, str):
            raise SourceTextError(text)
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 0
        self.tokens: List[Token] = []
        self.diagnostics: List[Diagnostic] = []

    # Cursor primitives

    def _current(self) -> Optional[str]:
        return self.text[self.pos] if self.pos < len(self.text) else None

    def _lookahead(self, k: int = 1) -> Optional[str]:
        i = self.pos + k
        return self.text[i] if i < len(self.text) else None

    def _advance(self) -> str:
        ch = self.text[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        return ch

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _add_token(self, kind: TokenKind, lexeme: str, line: int, column: int):
        self.tokens.append(Token(kind, lexeme, line, column))

    def _add_error(self, lexeme: str, kind: DiagnosticKind, description: str, line: int, column: int):
        self.diagnostics.append(Diagnostic(lexeme, kind, description, line, column))

    # Main loop

    def scan(self) -> Tuple[List[Token], List[Diagnostic]]:
        while not self._at_end():
            ch = self._current()
            start_line, start_col = self.line, self.column + 1

            if ch in WHITESPACE:
                self._advance()
            elif ch == "/" and self._lookahead() == "/":
                self._skip_line_comment()
            elif ch == "/" and self._lookahead() == "*":
                self._skip_block_comment(start_line, start_col)
            elif ch == '"':
                self._scan_string(start_line, start_col)
            elif is_digit(ch):
                self._scan_number(start_line, start_col)
            elif is_letter(ch):
                self._scan_word(start_line, start_col)
            elif ch in SYMBOLS:
                self._advance()
                self._add_token(SYMBOLS[ch], ch, start_line, start_col)
            else:
                bad = self._advance()
                self._add_error(
                    bad, DiagnosticKind.INVALID_TOKEN,
                    f"Carácter no reconocido '{bad}'", start_line, start_col,
                )

        logger.debug(
            "Scanned %d characters into %d tokens (%d lexical errors)",
            len(self.text), len(self.tokens), len(self.diagnostics),
        )
        return self.tokens, self.diagnostics

    def _skip_line_comment(self):
        self._advance()
        self._advance()
        while not self._at_end() and self._current() != "\n":
            self._advance()

    def _skip_block_comment(self, line: int, column: int):
        self._advance()
        self._advance()
        while not self._at_end():
            if self._current() == "*" and self._lookahead() == "/":
                self._advance()
                self._advance()
                return
            self._advance()
        self._add_error(
            "/*", DiagnosticKind.UNCLOSED_COMMENT,
            "Comentario de bloque sin cerrar '*/'", line, column,
        )

    def _scan_string(self, line: int, column: int):
        self._advance()  # opening quote
        chars = []
        while not self._at_end():
            ch = self._current()
            if ch == '"':
                self._advance()
                self._add_token(TokenKind.STRING, "".join(chars), line, column)
                return
            if ch == "\n":
                # The newline is left for the whitespace branch
                break
            chars.append(self._advance())
        self._add_error(
            "".join(chars), DiagnosticKind.UNCLOSED_STRING,
            "Cadena sin comillas de cierre en la misma línea", line, column,
        )

    def _scan_number(self, line: int, column: int):
        chars = []
        while is_digit(self._current()):
            chars.append(self._advance())
        self._add_token(TokenKind.NUMBER, "".join(chars), line, column)

    def _scan_word(self, line: int, column: int):
        chars = []
        while True:
            ch = self._current()
            if not (is_letter(ch) or is_digit(ch)):
                break
            chars.append(self._advance())
        lexeme = "".join(chars)
        lowered = lexeme.lower()
        if lowered == VERSUS_WORD:
            self._add_token(TokenKind.VERSUS, lexeme, line, column)
        elif lowered in RESERVED_WORDS:
            self._add_token(TokenKind.RESERVED, lowered, line, column)
        else:
            self._add_token(TokenKind.IDENTIFIER, lexeme, line, column)


def scan(text: str) -> Tuple[List[Token], List[Diagnostic]]:
    """
    Tokenize notation text.

    Args:
        text: Raw source text

    Returns:
        Tuple of (tokens, lexical diagnostics), both in source order

    Raises:
        SourceTextError: if `text` is not a string
    """
    return Scanner(text).scan()
