import json
import math

import pytest
from pydantic import ValidationError

import config
from config import (
    DraughtsConfig, GameRulesSettings, LoggingSettings, SearchSettings,
    get_config, get_game_rules, get_search_settings, load_config_from_file, reset_config,
)


def test_defaults():
    cfg = DraughtsConfig()
    assert cfg.rules.board_size == 8
    assert cfg.rules.draw_after_king_moves == 25
    assert cfg.search.exploration_constant == pytest.approx(1 / math.sqrt(2))
    assert cfg.search.rollouts_per_leaf == 1
    assert cfg.search.seed is None
    assert cfg.logging.log_level == "INFO"


def test_from_env(monkeypatch):
    monkeypatch.setenv('DRAUGHTS_BOARD_SIZE', '10')
    monkeypatch.setenv('DRAUGHTS_TIME_LIMIT_MS', '250')
    monkeypatch.setenv('DRAUGHTS_SEED', '42')
    monkeypatch.setenv('DRAUGHTS_UNICODE', 'true')
    monkeypatch.setenv('DRAUGHTS_LOG_LEVEL', 'debug')
    reset_config()
    assert get_game_rules().board_size == 10
    assert get_search_settings().time_limit_ms == 250
    assert get_search_settings().seed == 42
    assert get_config().ui.use_unicode is True
    assert get_config().logging.log_level == "DEBUG"


def test_global_config_is_cached():
    assert get_config() is get_config()
    first = get_config()
    reset_config()
    assert get_config() is not first


@pytest.mark.parametrize("size", [7, 2, 18])
def test_invalid_board_size(size):
    with pytest.raises(ValidationError):
        GameRulesSettings(board_size=size)


def test_invalid_search_settings():
    with pytest.raises(ValidationError):
        SearchSettings(exploration_constant=0)
    with pytest.raises(ValidationError):
        SearchSettings(rollouts_per_leaf=0)


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        LoggingSettings(log_level="LOUD")


def test_save_and_load(tmp_path):
    cfg = DraughtsConfig(rules=GameRulesSettings(board_size=6),
                         search=SearchSettings(time_limit_ms=300, seed=7))
    path = str(tmp_path / "draughts.json")
    cfg.save_to_file(path)

    loaded = load_config_from_file(path)
    assert loaded.rules.board_size == 6
    assert loaded.search.time_limit_ms == 300
    assert loaded.search.seed == 7
    assert loaded.config_file == path
    assert get_config() is loaded


def test_load_rejects_invalid_values(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({'rules': {'board_size': 7}, 'search': {'time_limit_ms': -5}}))
    with pytest.raises(ValidationError):
        DraughtsConfig.load_from_file(str(path))


def test_setup_logging_runs_once(monkeypatch):
    calls = []
    monkeypatch.setattr(config.logging, 'basicConfig', lambda **kw: calls.append(kw))
    monkeypatch.delattr(config.setup_logging, '_configured', raising=False)
    config.setup_logging()
    config.setup_logging()
    assert len(calls) == 1
    assert calls[0]['level'] == config.logging.INFO
