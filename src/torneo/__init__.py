"""
Tournament notation analyzer.

Scans and parses the torneo/equipos/eliminacion notation into a
tournament model, then derives standings, scorer events and a bracket
graph description from it.
"""
from .frontend import Token, TokenKind, Diagnostic, DiagnosticKind, scan, build_model
from .model import TournamentModel, Team, Player, Match, Scorer
from .score import Score, parse_score
from .stats import ScoringSystem, Standing, ScorerEvent, compute_stats
from .bracket import BracketGraphGenerator, generate_bracket_graph
from .pipeline import AnalysisPipeline, AnalysisResult, analyze

__version__ = "0.1.0"

__all__ = [
    "Token",
    "TokenKind",
    "Diagnostic",
    "DiagnosticKind",
    "scan",
    "build_model",
    "TournamentModel",
    "Team",
    "Player",
    "Match",
    "Scorer",
    "Score",
    "parse_score",
    "ScoringSystem",
    "Standing",
    "ScorerEvent",
    "compute_stats",
    "BracketGraphGenerator",
    "generate_bracket_graph",
    "AnalysisPipeline",
    "AnalysisResult",
    "analyze",
]
