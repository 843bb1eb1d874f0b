"""
Tournament model built by the parser.

Holds metadata, team rosters and the elimination bracket exactly as they
were written. Results and minutes stay raw strings; numeric meaning is
assigned later by the score parser and the stats engine.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Player:
    """A roster entry with free-form attributes (posicion, numero, edad...)."""
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "attributes": dict(self.attributes)}


@dataclass
class Team:
    """A team and its players, in source order."""
    name: str
    players: List[Player] = field(default_factory=list)

    def has_player(self, player_name: str) -> bool:
        return any(p.name == player_name for p in self.players)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "players": [p.to_dict() for p in self.players]}


@dataclass
class Scorer:
    """
    A single goal event.

    Bare-name scorers from the legacy list form are normalized into this
    shape at parse time with `minute=None`.
    """
    player_name: str
    minute: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"player_name": self.player_name, "minute": self.minute}


@dataclass
class Match:
    """A bracket match between two named teams."""
    team_a: str
    team_b: str
    result: Optional[str] = None
    scorers: List[Scorer] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.team_a} vs {self.team_b}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_a": self.team_a,
            "team_b": self.team_b,
            "result": self.result,
            "scorers": [s.to_dict() for s in self.scorers],
        }


@dataclass
class TournamentModel:
    """
    Root aggregate for one analysis run.

    `elimination_bracket` maps lowercase phase names to their matches in
    declaration order.
    """
    metadata: Dict[str, str] = field(default_factory=dict)
    teams: List[Team] = field(default_factory=list)
    elimination_bracket: Dict[str, List[Match]] = field(default_factory=dict)

    def club_of(self, player_name: str) -> Optional[str]:
        """Name of the first team whose roster lists `player_name`."""
        for team in self.teams:
            if team.has_player(player_name):
                return team.name
        return None

    @property
    def is_empty(self) -> bool:
        return not (self.metadata or self.teams or self.elimination_bracket)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain JSON types."""
        return {
            "metadata": dict(self.metadata),
            "teams": [t.to_dict() for t in self.teams],
            "eliminacion": {
                phase: [m.to_dict() for m in matches]
                for phase, matches in self.elimination_bracket.items()
            },
        }
