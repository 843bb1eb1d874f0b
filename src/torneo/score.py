"""
Best-effort extraction of a "home-away" score from a raw result string.
"""
import re
from dataclasses import dataclass
from typing import Any, Optional


# Digits are ASCII only; whitespace is allowed around both numbers and the dash
SCORE_PATTERN = re.compile(r"\s*([0-9]+)\s*-\s*([0-9]+)\s*")


@dataclass(frozen=True)
class Score:
    home: int
    away: int

    @property
    def is_draw(self) -> bool:
        return self.home == self.away

    @property
    def winner_side(self) -> Optional[str]:
        """'a' for a home win, 'b' for an away win, None for a draw."""
        if self.home > self.away:
            return "a"
        if self.away > self.home:
            return "b"
        return None

    def __str__(self) -> str:
        return f"{self.home}-{self.away}"


def parse_score(result: Any) -> Optional[Score]:
    """
    Extract two integers from a result such as "3-1" or " 10 - 2 ".

    Anything else, including None and non-string values, yields None; a
    result that does not parse means the match is still pending.
    """
    if not isinstance(result, str):
        return None
    found = SCORE_PATTERN.fullmatch(result)
    if found is None:
        return None
    return Score(int(found.group(1)), int(found.group(2)))
