import pytest

import config

_ENV_VARS = [
    'DRAUGHTS_BOARD_SIZE', 'DRAUGHTS_DRAW_KING_MOVES', 'DRAUGHTS_TIME_LIMIT_MS',
    'DRAUGHTS_EXPLORATION', 'DRAUGHTS_ROLLOUTS', 'DRAUGHTS_SEED', 'DRAUGHTS_UNICODE',
    'DRAUGHTS_INDICES', 'DRAUGHTS_LOG_LEVEL', 'DRAUGHTS_LOG_FILE',
]


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config.reset_config()
    yield
    config.reset_config()
