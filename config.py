"""
Central configuration for game rules, search and display tunables.
Pydantic models give type-safe settings with environment and file overrides.
"""
from __future__ import annotations

import json
import logging
import math
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class UISettings(BaseModel):
    """Text board display settings."""

    use_unicode: bool = Field(default=False, description="Use Unicode characters for pieces")
    show_indices: bool = Field(default=True, description="Show tile numbers on empty dark squares")

    @field_validator('use_unicode', 'show_indices', mode='before')
    @classmethod
    def validate_bool_fields(cls, v):
        return bool(v)


class GameRulesSettings(BaseModel):
    """Game rules and variant settings."""

    board_size: int = Field(default=8, ge=4, le=16, description="Board side length (even)")
    draw_after_king_moves: int = Field(default=25, ge=1,
                                       description="Consecutive king-only moves without capture before a draw")

    @field_validator('board_size')
    @classmethod
    def validate_board_size(cls, v):
        if v % 2:
            raise ValueError("board_size must be even")
        return v


class SearchSettings(BaseModel):
    """Monte-Carlo tree search configuration."""

    exploration_constant: float = Field(default=1 / math.sqrt(2), gt=0,
                                        description="UCT exploration constant")
    time_limit_ms: int = Field(default=1000, ge=1, description="Search budget per move in milliseconds")
    rollouts_per_leaf: int = Field(default=1, ge=1, description="Random playouts per expanded leaf")
    seed: Optional[int] = Field(default=None, description="Seed for the rollout random generator")

    @field_validator('time_limit_ms', 'rollouts_per_leaf', mode='before')
    @classmethod
    def validate_int_fields(cls, v):
        return int(v)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_to_file: bool = Field(default=False, description="Write logs to file")
    log_file_path: str = Field(default="draughts.log", description="Log file path")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        v_upper = v.upper() if isinstance(v, str) else str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper


class DraughtsConfig(BaseModel):
    """Main configuration model for the draughts engine."""

    ui: UISettings = Field(default_factory=UISettings)
    rules: GameRulesSettings = Field(default_factory=GameRulesSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    version: str = Field(default="1.0.0", description="Configuration version")
    config_file: Optional[str] = Field(default=None, description="Path to config file")

    @classmethod
    def from_env(cls) -> 'DraughtsConfig':
        """Create configuration from environment variables."""
        seed = os.getenv('DRAUGHTS_SEED', '')
        return cls(
            ui=UISettings(
                use_unicode=_env_flag('DRAUGHTS_UNICODE', 'false'),
                show_indices=_env_flag('DRAUGHTS_INDICES', 'true'),
            ),
            rules=GameRulesSettings(
                board_size=int(os.getenv('DRAUGHTS_BOARD_SIZE', '8')),
                draw_after_king_moves=int(os.getenv('DRAUGHTS_DRAW_KING_MOVES', '25')),
            ),
            search=SearchSettings(
                exploration_constant=float(os.getenv('DRAUGHTS_EXPLORATION', str(1 / math.sqrt(2)))),
                time_limit_ms=int(os.getenv('DRAUGHTS_TIME_LIMIT_MS', '1000')),
                rollouts_per_leaf=int(os.getenv('DRAUGHTS_ROLLOUTS', '1')),
                seed=int(seed) if seed else None,
            ),
            logging=LoggingSettings(
                log_level=os.getenv('DRAUGHTS_LOG_LEVEL', 'INFO'),
                log_to_file=_env_flag('DRAUGHTS_LOG_FILE', 'false'),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'ui': self.ui.model_dump(),
            'rules': self.rules.model_dump(),
            'search': self.search.model_dump(),
            'logging': self.logging.model_dump(),
            'version': self.version,
            'config_file': self.config_file,
        }

    def save_to_file(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        config_dict = self.to_dict()
        config_dict['config_file'] = filepath

        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: str) -> 'DraughtsConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)

        return cls(
            ui=UISettings(**data.get('ui', {})),
            rules=GameRulesSettings(**data.get('rules', {})),
            search=SearchSettings(**data.get('search', {})),
            logging=LoggingSettings(**data.get('logging', {})),
            version=data.get('version', '1.0.0'),
            config_file=filepath,
        )


# Global configuration instance
_config: Optional[DraughtsConfig] = None


def get_config() -> DraughtsConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = DraughtsConfig.from_env()
    return _config


def load_config_from_file(filepath: str) -> DraughtsConfig:
    """Load configuration from file and update global instance."""
    global _config
    _config = DraughtsConfig.load_from_file(filepath)
    return _config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _config
    _config = None


def get_ui_settings() -> UISettings:
    return get_config().ui


def get_game_rules() -> GameRulesSettings:
    return get_config().rules


def get_search_settings() -> SearchSettings:
    return get_config().search


def get_logging_settings() -> LoggingSettings:
    return get_config().logging


def setup_logging() -> None:
    """Configure root logging once, controlled by the logging settings."""
    if getattr(setup_logging, "_configured", False):
        return
    settings = get_logging_settings()
    level: int = getattr(logging, settings.log_level, logging.INFO)
    kwargs: Dict[str, Any] = {}
    if settings.log_to_file:
        kwargs['filename'] = settings.log_file_path
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        **kwargs,
    )
    setup_logging._configured = True  # type: ignore[attr-defined]
