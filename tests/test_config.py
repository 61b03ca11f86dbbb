"""
Tests for configuration loading.
"""

from pathlib import Path

import pendulum
import pytest
from pydantic import ValidationError

from launchplanner.config import AppConfig, DefaultsConfig


def test_defaults():
    config = AppConfig()

    assert config.locale == "en"
    assert config.defaults.business_days == 5
    assert config.load_holidays() == []


def test_business_days_must_be_positive():
    with pytest.raises(ValidationError):
        DefaultsConfig(business_days=0)


def test_unknown_locale_rejected():
    with pytest.raises(ValidationError, match="Unsupported locale"):
        AppConfig(locale="xx")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_yaml(tmp_path / "config.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("locale: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        AppConfig.load_from_yaml(path)


def test_root_must_be_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        AppConfig.load_from_yaml(path)


def test_relative_paths_resolve_against_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("holidays_file: data/holidays.yaml\nranges_file: /abs/launches.yaml\n", encoding="utf-8")

    config = AppConfig.load_from_yaml(path)

    assert config.holidays_file == tmp_path / "data" / "holidays.yaml"
    assert config.ranges_file == Path("/abs/launches.yaml")


def test_inline_and_file_holidays_merge(tmp_path):
    """Inline holidays win over file entries on the same day."""
    (tmp_path / "holidays.yaml").write_text(
        "- id: f1\n  name: From file\n  date: 2025-01-01\n"
        "- id: f2\n  name: Epiphany\n  date: 2025-01-06\n",
        encoding="utf-8",
    )
    path = tmp_path / "config.yaml"
    path.write_text(
        "holidays_file: holidays.yaml\n"
        "holidays:\n"
        "  - id: i1\n    name: New Year\n    date: 2025-01-01\n",
        encoding="utf-8",
    )

    holidays = AppConfig.load_from_yaml(path).load_holidays()

    assert [(h.name, h.date) for h in holidays] == [
        ("New Year", pendulum.date(2025, 1, 1)),
        ("Epiphany", pendulum.date(2025, 1, 6)),
    ]
