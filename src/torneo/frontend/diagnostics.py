"""
Diagnostics shared by the scanner and the model builder.

Both stages accumulate diagnostics as data and return them next to their
primary result; nothing in the front end raises on malformed input.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class DiagnosticStage(str, Enum):
    LEXICAL = "lexical"
    SYNTACTIC = "syntactic"


class DiagnosticKind(str, Enum):
    """Diagnostic categories, valued with the labels shown to users."""
    # Lexical
    UNCLOSED_COMMENT = "Comentario no cerrado"
    UNCLOSED_STRING = "Cadena no cerrada"
    INVALID_TOKEN = "Token inválido"
    # Syntactic
    MISSING_DELIMITER = "Falta delimitador"
    MISSING_VALUE = "Valor faltante"
    INVALID_VALUE = "Valor inválido"
    UNEXPECTED_TOKEN = "Token inesperado"
    UNKNOWN_ATTRIBUTE = "Atributo desconocido"
    REDECLARED_BLOCK = "Bloque redeclarado"

    @property
    def stage(self) -> DiagnosticStage:
        if self in _LEXICAL_KINDS:
            return DiagnosticStage.LEXICAL
        return DiagnosticStage.SYNTACTIC


_LEXICAL_KINDS = frozenset({
    DiagnosticKind.UNCLOSED_COMMENT,
    DiagnosticKind.UNCLOSED_STRING,
    DiagnosticKind.INVALID_TOKEN,
})


@dataclass(frozen=True)
class Diagnostic:
    """A lexical or syntax problem, renderable without the source text."""
    offending_text: str
    kind: DiagnosticKind
    description: str
    line: int
    column: int

    @property
    def stage(self) -> DiagnosticStage:
        return self.kind.stage

    def __str__(self) -> str:
        return f"{self.line}:{self.column} {self.kind.value}: {self.description}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offending_text": self.offending_text,
            "kind": self.kind.value,
            "stage": self.stage.value,
            "description": self.description,
            "line": self.line,
            "column": self.column,
        }
