"""
Strongly typed configuration using pydantic-settings.

All settings are validated at startup and loaded from:
1. Default values defined here
2. .env file (if present)
3. Environment variables (highest priority)

Environment variable naming:
- ParserSettings: PARSER_STRICTNESS, PARSER_REDECLARATION_POLICY
- ScoringSettings: SCORING_WIN_POINTS, SCORING_DRAW_POINTS, SCORING_LOSS_POINTS
- GraphSettings: GRAPH_RANKDIR, GRAPH_WINNER_COLOR, etc.
- ObservabilitySettings: ENVIRONMENT, LOG_LEVEL (no prefix)
"""
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Strictness(str, Enum):
    LENIENT = "lenient"
    STRICT = "strict"


class RedeclarationPolicy(str, Enum):
    """What happens when a TORNEO block or a phase is declared twice."""
    LAST_WINS = "last_wins"
    KEEP_FIRST = "keep_first"
    MERGE = "merge"


class ParserSettings(BaseSettings):
    """Model builder behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="PARSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    strictness: Strictness = Field(
        default=Strictness.LENIENT,
        description="strict also reports ignored attributes and redeclared blocks",
    )
    redeclaration_policy: RedeclarationPolicy = Field(default=RedeclarationPolicy.LAST_WINS)

    @property
    def is_strict(self) -> bool:
        return self.strictness == Strictness.STRICT


class ScoringSettings(BaseSettings):
    """Points awarded per match outcome."""

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    win_points: int = Field(default=3, ge=0)
    draw_points: int = Field(default=1, ge=0)
    loss_points: int = Field(default=0, ge=0)

    @field_validator('draw_points')
    @classmethod
    def draw_lte_win(cls, v, info):
        if 'win_points' in info.data and v > info.data['win_points']:
            raise ValueError('draw_points must be <= win_points')
        return v

    @field_validator('loss_points')
    @classmethod
    def loss_lte_draw(cls, v, info):
        if 'draw_points' in info.data and v > info.data['draw_points']:
            raise ValueError('loss_points must be <= draw_points')
        return v


class GraphSettings(BaseSettings):
    """Bracket graph styling."""

    model_config = SettingsConfigDict(
        env_prefix="GRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    rankdir: str = Field(default="LR", pattern="^(LR|TB|RL|BT)$")
    winner_color: str = Field(default="#22c55e")
    draw_color: str = Field(default="#facc15")
    match_color: str = Field(default="#e5e7eb")
    node_shape: str = Field(default="box")
    font_name: str = Field(default="Helvetica")


class ObservabilitySettings(BaseSettings):
    """Logging and metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="",  # Direct: ENVIRONMENT, LOG_LEVEL
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = Field(default="console", pattern="^(console|json)$")
    enable_metrics: bool = Field(default=True)


class Settings(BaseSettings):
    """
    Root settings aggregating all subsections.

    Usage:
        from torneo.config import settings

        settings.parser.redeclaration_policy
        settings.scoring.win_points
        settings.graph.rankdir
        settings.observability.log_level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    parser: ParserSettings = Field(default_factory=ParserSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    graph: GraphSettings = Field(default_factory=GraphSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
