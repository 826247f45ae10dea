"""Unit tests for EngineSettings

Test coverage includes:
    1. Defaults and configuration parsing (unknown keys ignored)
    2. Validation of non-positive, non-integer and boolean values
"""

import pytest

from shortlinks.engine import EngineSettings
from shortlinks.exceptions import BadConfigurationError


# -------------------------------
# 1. Defaults and configuration parsing
# -------------------------------


def test_defaults():
    settings = EngineSettings()

    assert settings.code_length == 6
    assert settings.max_generation_attempts == 10
    assert settings.max_cas_retries == 100
    assert settings.top_links == 10
    assert settings.recent_clicks == 5
    assert settings.history_window_days == 30


def test_from_config():
    settings = EngineSettings.from_config({'code_length': 8, 'history_window_days': 7, 'unknown': 'ignored'})

    assert settings.code_length == 8
    assert settings.history_window_days == 7
    assert settings.top_links == 10


def test_from_empty_config():
    assert EngineSettings.from_config(None) == EngineSettings()
    assert EngineSettings.from_config({}) == EngineSettings()


# -------------------------------
# 2. Validation
# -------------------------------


@pytest.mark.parametrize('value', [0, -1, '6', 6.0, True])
def test_invalid_values(value):
    with pytest.raises(BadConfigurationError, match="Engine setting 'code_length' must be a positive integer"):
        EngineSettings(code_length=value)


def test_history_window_upper_bound():
    assert EngineSettings(history_window_days=3650).history_window_days == 3650
    with pytest.raises(BadConfigurationError, match="Engine setting 'history_window_days' must be at most 3650"):
        EngineSettings(history_window_days=3651)
