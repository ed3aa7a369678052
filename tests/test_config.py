# tests/test_config.py
"""
Settings validation tests.
"""

import pytest
from pydantic import ValidationError

from trl_engine.config import Settings, get_settings


class TestSettings:

    def test_defaults(self):
        config = Settings(_env_file=None)
        assert config.DEFAULT_CONSENSUS_METHOD == "weighted_average"
        assert config.DEFAULT_MINIMUM_REVIEWERS == 2
        assert config.SIGNIFICANT_DISAGREEMENT_LEVELS == 2.0
        assert config.DELPHI_OUTLIER_STD_DEVS == 1.5

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_hyphenated_method_normalized(self):
        config = Settings(_env_file=None, DEFAULT_CONSENSUS_METHOD="Weighted-Average")
        assert config.DEFAULT_CONSENSUS_METHOD == "weighted_average"

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError, match="DEFAULT_CONSENSUS_METHOD"):
            Settings(_env_file=None, DEFAULT_CONSENSUS_METHOD="mode")

    def test_significant_below_threshold_rejected(self):
        with pytest.raises(ValidationError):
            Settings(
                _env_file=None,
                DISAGREEMENT_THRESHOLD_LEVELS=2.0,
                SIGNIFICANT_DISAGREEMENT_LEVELS=1.0,
            )

    def test_debug_in_production_rejected(self):
        with pytest.raises(ValidationError, match="DEBUG"):
            Settings(_env_file=None, APP_ENV="production", DEBUG=True)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DELPHI_MAX_ROUNDS", "5")
        assert Settings(_env_file=None).DELPHI_MAX_ROUNDS == 5
