# tests/unit/test_reporting.py
import polars as pl
import pytest

from torneo.exceptions import ExportError
from torneo.frontend import scan
from torneo.reporting import (
    diagnostics_frame,
    scorers_frame,
    standings_frame,
    tokens_frame,
    top_scorers_frame,
    write_frame,
)
from torneo.stats import compute_stats


@pytest.fixture
def full_stats(full_model):
    return compute_stats(full_model)


class TestFrames:

    def test_empty_inputs_keep_schema(self):
        assert tokens_frame([]).columns == ["kind", "lexeme", "line", "column"]
        assert diagnostics_frame([]).height == 0
        assert "phase_reached" in standings_frame([]).columns
        assert scorers_frame([]).schema["minute"] == pl.Utf8

    def test_tokens_frame(self):
        tokens, diagnostics = scan('equipo: "A" @')
        df = tokens_frame(tokens)
        assert df["kind"].to_list() == ["RESERVED", "COLON", "STRING"]
        assert df["column"].to_list() == [1, 7, 9]

        errors = diagnostics_frame(diagnostics)
        assert errors["stage"].to_list() == ["lexical"]
        assert errors["kind"].to_list() == ["Token inválido"]

    def test_standings_frame_has_positions(self, full_stats):
        standings, _ = full_stats
        df = standings_frame(standings)
        assert df.columns[0] == "position"
        assert df["position"].to_list() == list(range(1, 9))
        assert df["team"].to_list()[:3] == ["Leones", "Lobos", "Toros"]
        assert df.filter(pl.col("team") == "Leones")["points"].item() == 6

    def test_scorers_frame_allows_missing_minutes(self, full_stats):
        _, events = full_stats
        df = scorers_frame(events)
        assert df.height == 6
        assert df["minute"].null_count() == 2

    def test_top_scorers(self, full_stats):
        _, events = full_stats
        df = top_scorers_frame(events)
        assert df.row(0, named=True) == {"player_name": "Carlos Pérez", "team": "Leones", "goals": 2}
        assert df["player_name"].to_list()[1:] == [
            "José Núñez", "Luis Gómez", "Mario Ramírez", "Pedro Lobo",
        ]
        assert df["goals"].to_list()[1:] == [1, 1, 1, 1]

    def test_top_scorers_empty(self):
        df = top_scorers_frame([])
        assert df.height == 0
        assert df.columns == ["player_name", "team", "goals"]


class TestWriteFrame:

    @pytest.fixture
    def standings_df(self, full_stats):
        return standings_frame(full_stats[0])

    def test_csv(self, tmp_path, standings_df):
        path = write_frame(standings_df, tmp_path / "tabla.csv")
        assert pl.read_csv(path)["team"].to_list() == standings_df["team"].to_list()

    def test_json(self, tmp_path, standings_df):
        path = write_frame(standings_df, tmp_path / "tabla.json")
        assert pl.read_json(path).height == 8

    def test_parquet(self, tmp_path, standings_df):
        path = write_frame(standings_df, str(tmp_path / "tabla.PARQUET"))
        assert pl.read_parquet(path).equals(standings_df)

    @pytest.mark.parametrize("name", ["tabla.xlsx", "tabla"])
    def test_unsupported_suffix(self, tmp_path, standings_df, name):
        with pytest.raises(ExportError):
            write_frame(standings_df, tmp_path / name)
        assert not (tmp_path / name).exists()
