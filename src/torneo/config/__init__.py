"""
Configuration module with strongly typed settings.

Usage:
    from torneo.config import settings

    print(settings.parser.strictness)
    print(settings.scoring.win_points)
"""
from .settings import (
    Settings,
    ParserSettings,
    ScoringSettings,
    GraphSettings,
    ObservabilitySettings,
    Strictness,
    RedeclarationPolicy,
)

# Singleton instance - validates on import
settings = Settings()

__all__ = [
    "settings",
    "Settings",
    "ParserSettings",
    "ScoringSettings",
    "GraphSettings",
    "ObservabilitySettings",
    "Strictness",
    "RedeclarationPolicy",
]
