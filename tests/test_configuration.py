"""Mini README: Tests for environment-driven settings and logging levels."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from fuelcompliance.configuration import DEFAULT_TARGET_INTENSITY, ComplianceSettings
from fuelcompliance.logging_utils import resolve_level


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FUELEU_INTERFACE_PORT", "9100")
    monkeypatch.setenv("FUELEU_LOG_LEVEL", "debug")
    monkeypatch.setenv("FUELEU_SEED_DEMO_DATA", "false")

    settings = ComplianceSettings()

    assert settings.interface_port == 9100
    assert settings.log_level == "DEBUG"
    assert settings.seed_demo_data is False
    assert settings.target_intensity == pytest.approx(DEFAULT_TARGET_INTENSITY)


def test_settings_reject_bad_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FUELEU_LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        ComplianceSettings()


def test_resolve_level_accepts_names_and_numbers() -> None:
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR
    with pytest.raises(ValueError):
        resolve_level("loud")
