"""
Front end for the tournament notation: scanner and model builder.
"""
from .tokens import Token, TokenKind, RESERVED_WORDS, PHASE_WORDS
from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticStage
from .scanner import Scanner, scan
from .parser import ModelBuilder, build_model

__all__ = [
    "Token",
    "TokenKind",
    "RESERVED_WORDS",
    "PHASE_WORDS",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticStage",
    "Scanner",
    "scan",
    "ModelBuilder",
    "build_model",
]
