"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from threadchat.config import Settings


class TestSettings:
    """SUT: Settings"""

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "RUN_POLL_INTERVAL_MS", "RUN_MAX_WAIT_MS", "ASSISTANT_ID"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.port == 7788
        assert settings.run_poll_interval_ms == 1000
        assert settings.run_max_wait_ms == 120000
        assert settings.assistant_id is None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ASSISTANT_ID", "asst_env")
        monkeypatch.setenv("RUN_POLL_INTERVAL_MS", "250")
        settings = Settings(_env_file=None)
        assert settings.assistant_id == "asst_env"
        assert settings.run_poll_interval_ms == 250

    def test_get_run_config(self):
        settings = Settings(_env_file=None, run_poll_interval_ms=500, run_max_wait_ms=5000)
        assert settings.get_run_config() == {"poll_interval_ms": 500, "max_wait_ms": 5000}

    @pytest.mark.parametrize("field", ["run_poll_interval_ms", "run_max_wait_ms"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: 0})
