"""
Token definitions for the tournament notation.

A token is an immutable (kind, lexeme, line, column) record produced by
the scanner in source order.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class TokenKind(str, Enum):
    """Lexical categories of the notation."""
    RESERVED = "RESERVED"
    IDENTIFIER = "IDENT"
    STRING = "STRING"
    NUMBER = "NUMBER"
    VERSUS = "VS"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    COLON = "COLON"
    COMMA = "COMMA"
    SEMICOLON = "SEMICOLON"


# Stored lowercase; lookups must lowercase the candidate first
RESERVED_WORDS = frozenset({
    "torneo", "equipos", "eliminacion",
    "equipo", "jugador", "partido", "resultado", "goleadores",
    "cuartos", "semifinal", "final", "nombre", "posicion", "numero",
    "edad", "vs", "goleador", "minuto", "sede",
})

VERSUS_WORD = "vs"

SYMBOLS = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
}

# Top-level block keywords
BLOCK_WORDS = frozenset({"torneo", "equipos", "eliminacion"})

# Elimination phases recognised inside an ELIMINACION block
PHASE_WORDS = frozenset({"cuartos", "semifinal", "final"})


@dataclass(frozen=True)
class Token:
    """A single lexical token with its 1-based source position."""
    kind: TokenKind
    lexeme: str
    line: int
    column: int

    def is_reserved(self, *words: str) -> bool:
        """True when this is a reserved token whose lexeme is one of `words`."""
        return self.kind == TokenKind.RESERVED and self.lexeme in words

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "lexeme": self.lexeme,
            "line": self.line,
            "column": self.column,
        }
