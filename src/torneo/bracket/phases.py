"""
Elimination phase ordering.
"""
from typing import Dict, List, Optional


# Phase name to rank (higher = later in tournament); unknown phases rank 0
PHASE_ORDER = {
    "cuartos": 1,
    "semifinal": 2,
    "final": 3,
}

PHASE_DISPLAY_NAMES = {
    "cuartos": "Cuartos de final",
    "semifinal": "Semifinal",
    "final": "Final",
}

PHASE_SEQUENCE: List[str] = sorted(PHASE_ORDER, key=PHASE_ORDER.get)


def phase_rank(phase: str) -> int:
    return PHASE_ORDER.get(phase, 0)


def display_name(phase: str) -> str:
    return PHASE_DISPLAY_NAMES.get(phase, phase.capitalize())


def label_for_rank(rank: int) -> str:
    """Display name of the phase with `rank`, or "" when none was reached."""
    for phase, value in PHASE_ORDER.items():
        if value == rank:
            return PHASE_DISPLAY_NAMES[phase]
    return ""


def next_phase(phase: str) -> Optional[str]:
    """The phase that follows `phase` in the fixed sequence, if any."""
    if phase not in PHASE_ORDER:
        return None
    index = PHASE_SEQUENCE.index(phase)
    if index + 1 < len(PHASE_SEQUENCE):
        return PHASE_SEQUENCE[index + 1]
    return None


def ordered_phases(bracket: Dict[str, list]) -> List[str]:
    """Phases of `bracket` present in the fixed sequence, in that order."""
    return [phase for phase in PHASE_SEQUENCE if phase in bracket]
