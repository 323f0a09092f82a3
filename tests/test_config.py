"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from phonedir.config import DEFAULT_SOURCE, SOURCE_ENV_VAR, AppConfig


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should create config with default values."""
        monkeypatch.delenv(SOURCE_ENV_VAR, raising=False)
        config = AppConfig()

        assert config.source == DEFAULT_SOURCE == "data/internos.xlsx"
        assert config.http_timeout == 10.0
        assert config.host == "127.0.0.1"
        assert config.port == 8000

    def test_source_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SOURCE_ENV_VAR, "http://files.local/internos.xlsx")

        config = AppConfig()

        assert config.source == "http://files.local/internos.xlsx"
        assert config.is_remote

    def test_custom_config(self) -> None:
        config = AppConfig(source="/srv/internos.xlsx", http_timeout=3.0, port=9000)

        assert config.source == "/srv/internos.xlsx"
        assert config.http_timeout == 3.0
        assert config.port == 9000
        assert not config.is_remote

    def test_resolve_source_absolute(self) -> None:
        config = AppConfig(source="/absolute/internos.xlsx")

        assert config.resolve_source(Path("/base")) == "/absolute/internos.xlsx"

    def test_resolve_source_relative_with_base(self) -> None:
        config = AppConfig(source="data/internos.xlsx")

        assert config.resolve_source(Path("/project")) == str(Path("/project/data/internos.xlsx"))

    def test_resolve_source_relative_no_base(self) -> None:
        config = AppConfig(source="data/internos.xlsx")

        assert config.resolve_source() == "data/internos.xlsx"

    def test_resolve_source_url_untouched(self) -> None:
        config = AppConfig(source="https://files.local/internos.xlsx")

        assert config.resolve_source(Path("/project")) == "https://files.local/internos.xlsx"
