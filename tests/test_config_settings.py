"""Tests for runtime settings loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from app.config import AppSettings, SettingsLoadError, config_load_database_url, config_load_settings


@pytest.fixture(autouse=True)
def _isolate_dotenv(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run each test from an empty directory with no settings variables set."""

    monkeypatch.chdir(tmp_path)
    for field_name in AppSettings.model_fields:
        monkeypatch.delenv(field_name.upper(), raising=False)


def test_settings_defaults_cover_analytics_configuration() -> None:
    """Load defaults for label, freshness window, timezone and schedule.

    Returns:
        None: Assertions validate default values.

    Raises:
        AssertionError: Raised when defaults differ.
    """

    settings = config_load_settings()

    assert settings.analytics_default_label == "portfolio"
    assert settings.analytics_freshness_hours == 24.0
    assert settings.analytics_report_timezone == "UTC"
    assert settings.analytics_scheduler_enabled is False
    assert (settings.analytics_recalculate_hour, settings.analytics_recalculate_minute) == (2, 0)


def test_settings_read_environment_case_insensitively(monkeypatch: pytest.MonkeyPatch) -> None:
    """Read environment variables and normalize log level.

    Returns:
        None: Assertions validate environment overrides.

    Raises:
        AssertionError: Raised when overrides are ignored.
    """

    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ANALYTICS_REPORT_TIMEZONE", "America/New_York")
    monkeypatch.setenv("analytics_scheduler_enabled", "true")

    settings = config_load_settings()

    assert settings.log_level == "DEBUG"
    assert settings.analytics_report_timezone == "America/New_York"
    assert settings.analytics_scheduler_enabled is True


@pytest.mark.parametrize(
    ("variable_name", "variable_value"),
    [
        ("ANALYTICS_FRESHNESS_HOURS", "0"),
        ("ANALYTICS_REPORT_TIMEZONE", "Mars/Olympus_Mons"),
        ("LOG_LEVEL", "chatty"),
        ("ANALYTICS_RECALCULATE_HOUR", "24"),
        ("ANALYTICS_DEFAULT_LABEL", "   "),
    ],
)
def test_settings_invalid_values_raise_load_error(
    monkeypatch: pytest.MonkeyPatch,
    variable_name: str,
    variable_value: str,
) -> None:
    """Wrap validation failures in SettingsLoadError.

    Returns:
        None: Assertions validate error wrapping.

    Raises:
        AssertionError: Raised when invalid values are accepted.
    """

    monkeypatch.setenv(variable_name, variable_value)

    with pytest.raises(SettingsLoadError):
        config_load_settings()


def test_database_url_loader_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Return the configured database URL for migration tooling.

    Returns:
        None: Assertions validate database URL loading.

    Raises:
        AssertionError: Raised when URL differs.
    """

    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://journal:journal@db:5432/journal")

    assert config_load_database_url() == "postgresql+psycopg://journal:journal@db:5432/journal"
