"""Tests for TOML-backed settings."""

from pathlib import Path

import toml

from gratitude_cli import config
from gratitude_cli.config_manager import (
    Settings,
    load_full_config,
    load_settings,
    save_color_theme,
    save_records_endpoint,
)


def test_defaults_without_config_file():
    """Test defaults when no config file exists."""
    assert load_full_config() == {}
    assert load_settings() == Settings()


def test_timers_section_is_read(gratitude_home: Path):
    """Test reading timer settings."""
    gratitude_home.mkdir(parents=True)
    (gratitude_home / "config.toml").write_text(
        '[timers]\ninactivity_seconds = 90\ndismiss_seconds = "soon"\n'
    )

    settings = load_settings()

    assert settings.inactivity_seconds == 90.0
    assert settings.dismiss_seconds == config.DEFAULT_DISMISS_SECONDS


def test_unreadable_config_falls_back(gratitude_home: Path):
    """Test falling back to defaults on a broken config file."""
    gratitude_home.mkdir(parents=True)
    (gratitude_home / "config.toml").write_text("[records\nendpoint = ")

    assert load_settings() == Settings()


def test_save_preserves_other_sections(gratitude_home: Path):
    """Test saving one section keeps the others."""
    assert save_color_theme("Solarized Light")
    assert save_records_endpoint("https://example.com")

    data = toml.load(str(gratitude_home / "config.toml"))
    assert data == {"ui": {"color_theme": "Solarized Light"}, "records": {"endpoint": "https://example.com"}}


def test_empty_endpoint_resets_to_local_file():
    """Test clearing the endpoint."""
    save_records_endpoint("https://example.com")
    save_records_endpoint("")

    assert "records" not in load_full_config()
    assert load_settings().records_endpoint == ""
