"""Scoring configuration loading.

The engine never reads configuration itself; callers load a ScoringConfig
here and pass it into every scoring call.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

from .schemas import ScoringConfig
from .utils import load_json

DEFAULT_CONFIG_PATH = Path('config') / 'scoring.json'


def load_scoring_config(path: Path | str | None = None) -> ScoringConfig:
    """
    Load scoring configuration from a JSON file.

    Missing sections fall back to documented defaults. When path is None
    and config/scoring.json doesn't exist, the defaults are returned.

    Raises:
        FileNotFoundError: If an explicit path doesn't exist
        ValueError: If the file has an invalid structure

    Example:
        from pickscore.config import load_scoring_config
        config = load_scoring_config('config/scoring.json')
        print(f"Scoring mode: {config.mode}")
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ScoringConfig()
        path = DEFAULT_CONFIG_PATH
    return load_json(path, schema=ScoringConfig)


@lru_cache(maxsize=8)
def get_config(path: str | None = None) -> ScoringConfig:
    """Cached load_scoring_config() for long-running callers."""
    return load_scoring_config(path)


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()


def coerce_config(config: ScoringConfig | dict[str, Any] | None) -> ScoringConfig:
    """Accept a ScoringConfig, a raw config mapping, or None (defaults)."""
    if config is None:
        return ScoringConfig()
    if isinstance(config, ScoringConfig):
        return config
    return ScoringConfig.model_validate(config)
