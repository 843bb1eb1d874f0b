"""
Standings and scorer events derived from a TournamentModel.

Both views are recomputed from scratch on every call; nothing here
mutates the model. Matches whose result does not parse as a score are
pending and only contribute to the phase each team reached.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .bracket.phases import label_for_rank, phase_rank
from .config.settings import ScoringSettings
from .exceptions import ConfigurationError
from .model import TournamentModel
from .score import parse_score

logger = logging.getLogger(__name__)


UNKNOWN_TEAM = "Desconocido"


@dataclass(frozen=True)
class ScoringSystem:
    """Points awarded per match outcome (3-1-0 by default)."""
    win_points: int = 3
    draw_points: int = 1
    loss_points: int = 0

    def __post_init__(self):
        if min(self.win_points, self.draw_points, self.loss_points) < 0:
            raise ConfigurationError(f"Points must be non-negative: {self}")
        if not self.win_points >= self.draw_points >= self.loss_points:
            raise ConfigurationError(f"Expected win >= draw >= loss points: {self}")

    def match_points(self, goals_for: int, goals_against: int) -> Tuple[int, int]:
        """
        Points for both sides given the final score.

        Returns:
            Tuple of (first_team_points, second_team_points)
        """
        if goals_for > goals_against:
            return (self.win_points, self.loss_points)
        elif goals_for < goals_against:
            return (self.loss_points, self.win_points)
        else:
            return (self.draw_points, self.draw_points)

    @classmethod
    def from_settings(cls, scoring: ScoringSettings) -> "ScoringSystem":
        return cls(
            win_points=scoring.win_points,
            draw_points=scoring.draw_points,
            loss_points=scoring.loss_points,
        )


STANDARD_SCORING = ScoringSystem()


@dataclass
class Standing:
    """One team's aggregated record."""
    team: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0
    phase_rank: int = 0

    @property
    def phase_reached(self) -> str:
        """Display name of the furthest phase, or "" if none."""
        return label_for_rank(self.phase_rank)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team": self.team,
            "played": self.played,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_difference": self.goal_difference,
            "points": self.points,
            "phase_reached": self.phase_reached,
        }


@dataclass(frozen=True)
class ScorerEvent:
    """A single goal credited to a player."""
    player_name: str
    team: str
    phase: str
    match: str
    minute: Optional[str] = None

    @property
    def minute_value(self) -> Optional[int]:
        """The minute as an int when it is a plain run of digits."""
        if self.minute is not None and self.minute.isascii() and self.minute.isdigit():
            return int(self.minute)
        return None

    def sort_key(self) -> Tuple[str, int, int]:
        value = self.minute_value
        if value is None:
            return (self.player_name, 1, 0)
        return (self.player_name, 0, value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "team": self.team,
            "phase": self.phase,
            "match": self.match,
            "minute": self.minute,
        }


def compute_standings(model: TournamentModel, scoring: ScoringSystem = STANDARD_SCORING) -> List[Standing]:
    """
    Aggregate per-team records.

    Rows are seeded from the declared teams, then created on first sight
    for teams that only appear in the bracket. Ordered by points, goal
    difference, then goals for (all descending); remaining ties keep row
    creation order.
    """
    rows: Dict[str, Standing] = {}

    def row(name: str) -> Standing:
        if name not in rows:
            rows[name] = Standing(team=name)
        return rows[name]

    for team in model.teams:
        row(team.name)

    for phase, matches in model.elimination_bracket.items():
        rank = phase_rank(phase)
        for match in matches:
            a, b = row(match.team_a), row(match.team_b)
            a.phase_rank = max(a.phase_rank, rank)
            b.phase_rank = max(b.phase_rank, rank)

            score = parse_score(match.result)
            if score is None:
                continue

            a.played += 1
            b.played += 1
            a.goals_for += score.home
            a.goals_against += score.away
            b.goals_for += score.away
            b.goals_against += score.home

            points_a, points_b = scoring.match_points(score.home, score.away)
            a.points += points_a
            b.points += points_b
            if score.is_draw:
                a.drawn += 1
                b.drawn += 1
            elif score.home > score.away:
                a.won += 1
                b.lost += 1
            else:
                b.won += 1
                a.lost += 1

    for standing in rows.values():
        standing.goal_difference = standing.goals_for - standing.goals_against

    # sorted() is stable, so equal keys keep creation order
    return sorted(
        rows.values(),
        key=lambda s: (-s.points, -s.goal_difference, -s.goals_for),
    )


def collect_scorer_events(model: TournamentModel) -> List[ScorerEvent]:
    """
    One event per scorer entry across every match.

    Each player's club is the first team whose roster lists them. Events
    are ordered by player name, then minute ascending with numeric
    minutes before missing ones.
    """
    events = []
    for phase, matches in model.elimination_bracket.items():
        for match in matches:
            for scorer in match.scorers:
                events.append(ScorerEvent(
                    player_name=scorer.player_name,
                    team=model.club_of(scorer.player_name) or UNKNOWN_TEAM,
                    phase=phase,
                    match=match.label,
                    minute=scorer.minute,
                ))
    events.sort(key=ScorerEvent.sort_key)
    return events


def compute_stats(
    model: Optional[TournamentModel],
    scoring: ScoringSystem = STANDARD_SCORING,
) -> Tuple[List[Standing], List[ScorerEvent]]:
    """
    Compute standings and the ordered scorer-event list.

    Never raises on model content; an empty or missing model gives two
    empty lists.
    """
    if model is None:
        return [], []
    standings = compute_standings(model, scoring)
    events = collect_scorer_events(model)
    logger.debug("Computed %d standings and %d scorer events", len(standings), len(events))
    return standings, events
