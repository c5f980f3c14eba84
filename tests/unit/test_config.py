"""ServerConfigのユニットテスト。"""

import pytest

from recruitbot.config import ServerConfig


class TestServerConfig:
    def test_defaults(self) -> None:
        config = ServerConfig()
        assert config.application_store == "local"
        assert config.port == 8000
        assert config.admin_timezone == "Asia/Tokyo"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RECRUITBOT_PORT", "9001")
        monkeypatch.setenv("RECRUITBOT_THINKING_DELAY", "0.2")
        config = ServerConfig()
        assert config.port == 9001
        assert config.timing().thinking_delay == 0.2

    def test_timing_defaults(self) -> None:
        timing = ServerConfig().timing()
        assert (timing.hearing_advance_delay, timing.preview_delay, timing.thinking_delay, timing.answer_delay) == (
            0.3,
            0.5,
            0.8,
            1.0,
        )
