"""
Tabular views of analysis outputs for display and export.

Every frame has a fixed schema so empty inputs still produce frames with
the expected columns.
"""
import logging
from pathlib import Path
from typing import Iterable, Union

import polars as pl

from .exceptions import ExportError
from .frontend.diagnostics import Diagnostic
from .frontend.tokens import Token
from .stats import ScorerEvent, Standing

logger = logging.getLogger(__name__)


TOKEN_SCHEMA = {
    "kind": pl.Utf8,
    "lexeme": pl.Utf8,
    "line": pl.Int64,
    "column": pl.Int64,
}

DIAGNOSTIC_SCHEMA = {
    "offending_text": pl.Utf8,
    "kind": pl.Utf8,
    "stage": pl.Utf8,
    "description": pl.Utf8,
    "line": pl.Int64,
    "column": pl.Int64,
}

STANDING_SCHEMA = {
    "team": pl.Utf8,
    "played": pl.Int64,
    "won": pl.Int64,
    "drawn": pl.Int64,
    "lost": pl.Int64,
    "goals_for": pl.Int64,
    "goals_against": pl.Int64,
    "goal_difference": pl.Int64,
    "points": pl.Int64,
    "phase_reached": pl.Utf8,
}

SCORER_SCHEMA = {
    "player_name": pl.Utf8,
    "team": pl.Utf8,
    "phase": pl.Utf8,
    "match": pl.Utf8,
    "minute": pl.Utf8,
}


def tokens_frame(tokens: Iterable[Token]) -> pl.DataFrame:
    return pl.DataFrame([t.to_dict() for t in tokens], schema=TOKEN_SCHEMA)


def diagnostics_frame(diagnostics: Iterable[Diagnostic]) -> pl.DataFrame:
    return pl.DataFrame([d.to_dict() for d in diagnostics], schema=DIAGNOSTIC_SCHEMA)


def standings_frame(standings: Iterable[Standing]) -> pl.DataFrame:
    """Standings in ranking order, with a 1-based position column."""
    df = pl.DataFrame([s.to_dict() for s in standings], schema=STANDING_SCHEMA)
    return df.with_row_index("position", offset=1)


def scorers_frame(events: Iterable[ScorerEvent]) -> pl.DataFrame:
    return pl.DataFrame([e.to_dict() for e in events], schema=SCORER_SCHEMA)


def top_scorers_frame(events: Iterable[ScorerEvent]) -> pl.DataFrame:
    """
    Goal totals per (player, team).

    Sorted by goals descending, then player name.
    """
    return (
        scorers_frame(events)
        .group_by(["player_name", "team"], maintain_order=True)
        .agg(pl.len().cast(pl.Int64).alias("goals"))
        .sort(["goals", "player_name"], descending=[True, False])
    )


def write_frame(df: pl.DataFrame, path: Union[str, Path]) -> Path:
    """
    Write a frame, choosing the format from the file suffix.

    Supports .csv, .json (row-oriented) and .parquet.

    Raises:
        ExportError: for other suffixes or when the write fails
    """
    out_path = Path(path)
    suffix = out_path.suffix.lower()
    try:
        if suffix == '.csv':
            df.write_csv(out_path)
        elif suffix == '.json':
            df.write_json(out_path)
        elif suffix == '.parquet':
            df.write_parquet(out_path)
        else:
            raise ExportError(f"Unsupported export format '{suffix or out_path.name}' (use .csv, .json or .parquet)")
    except OSError as e:
        raise ExportError(f"Could not write {out_path}: {e}") from e

    logger.info("Saved %d rows to %s", len(df), out_path)
    return out_path
