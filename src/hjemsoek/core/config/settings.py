"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Hjemsøk scoring configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    hjemsoek_log_level: str = "info"

    # Weight templates; empty means the bundled templates directory.
    hjemsoek_templates_dir: str = ""
    default_template_id: str = "normal_bosetting"

    # Synthetic municipality data
    mock_municipality_count: int = 50
    mock_seed: int = 1

    # Ranking
    ranking_limit: int = 10


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
