# tests/unit/test_settings.py
import pytest
from pydantic import ValidationError

from torneo.config import (
    GraphSettings,
    ObservabilitySettings,
    ParserSettings,
    RedeclarationPolicy,
    ScoringSettings,
    Settings,
    Strictness,
)
from torneo.stats import ScoringSystem


class TestParserSettings:

    def test_defaults(self):
        config = ParserSettings()
        assert config.strictness == Strictness.LENIENT
        assert config.redeclaration_policy == RedeclarationPolicy.LAST_WINS
        assert not config.is_strict

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PARSER_STRICTNESS", "strict")
        monkeypatch.setenv("PARSER_REDECLARATION_POLICY", "merge")
        config = ParserSettings()
        assert config.is_strict
        assert config.redeclaration_policy == RedeclarationPolicy.MERGE

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValidationError):
            ParserSettings(redeclaration_policy="first_wins")


class TestScoringSettings:

    def test_defaults_match_standard_scoring(self):
        assert ScoringSystem.from_settings(ScoringSettings()) == ScoringSystem(3, 1, 0)

    def test_draw_cannot_exceed_win(self):
        with pytest.raises(ValidationError, match="draw_points"):
            ScoringSettings(win_points=2, draw_points=3)

    def test_loss_cannot_exceed_draw(self):
        with pytest.raises(ValidationError, match="loss_points"):
            ScoringSettings(draw_points=0, loss_points=1)

    def test_negative_points_rejected(self):
        with pytest.raises(ValidationError):
            ScoringSettings(win_points=-1)


class TestGraphSettings:

    @pytest.mark.parametrize("rankdir", ["LR", "TB", "RL", "BT"])
    def test_valid_rankdir(self, rankdir):
        assert GraphSettings(rankdir=rankdir).rankdir == rankdir

    def test_invalid_rankdir(self):
        with pytest.raises(ValidationError):
            GraphSettings(rankdir="diagonal")

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("GRAPH_WINNER_COLOR", "red")
        assert GraphSettings().winner_color == "red"


def test_observability_defaults(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    config = ObservabilitySettings()
    assert config.environment == "development"
    assert config.log_level == "INFO"
    assert config.enable_metrics


def test_root_settings_aggregate_sections(monkeypatch):
    monkeypatch.setenv("SCORING_WIN_POINTS", "2")
    config = Settings()
    assert config.scoring.win_points == 2
    assert config.parser.strictness == Strictness.LENIENT
    assert config.graph.rankdir == "LR"


def test_dotenv_file_reaches_every_section(tmp_path, monkeypatch):
    for name in ("PARSER_STRICTNESS", "SCORING_WIN_POINTS", "GRAPH_RANKDIR", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    (tmp_path / ".env").write_text(
        "PARSER_STRICTNESS=strict\n"
        "SCORING_WIN_POINTS=2\n"
        "GRAPH_RANKDIR=TB\n"
        "LOG_LEVEL=DEBUG\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    config = Settings()
    assert config.parser.strictness == Strictness.STRICT
    assert config.scoring.win_points == 2
    assert config.graph.rankdir == "TB"
    assert config.observability.log_level == "DEBUG"


def test_environment_overrides_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("SCORING_WIN_POINTS=2\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SCORING_WIN_POINTS", "5")
    assert ScoringSettings().win_points == 5
