"""
Elimination bracket helpers: phase ordering and graph generation.
"""
from .phases import PHASE_ORDER, PHASE_SEQUENCE, phase_rank, next_phase, display_name
from .graph import BracketGraphGenerator, generate_bracket_graph

__all__ = [
    "PHASE_ORDER",
    "PHASE_SEQUENCE",
    "phase_rank",
    "next_phase",
    "display_name",
    "BracketGraphGenerator",
    "generate_bracket_graph",
]
