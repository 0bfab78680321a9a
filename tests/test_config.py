"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from studio_api.core.config import DAY_MS, RateLimitSettings, parse_csv


def test_parse_csv_trims_and_drops_empty_items() -> None:
    assert parse_csv(" a@example.com,, b@example.com ,") == ["a@example.com", "b@example.com"]
    assert parse_csv("") == []
    assert parse_csv(None) == []


def test_rate_limit_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RATE_LIMIT_ENABLED", raising=False)

    cfg = RateLimitSettings()

    assert cfg.enabled is False
    assert (cfg.email_limit, cfg.email_window_ms) == (5, DAY_MS)
    assert (cfg.ip_limit, cfg.ip_window_ms) == (7, DAY_MS)
    assert cfg.whitelisted_emails == frozenset()


def test_rate_limit_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
    monkeypatch.setenv("RATE_LIMIT_EMAIL_LIMIT", "3")
    monkeypatch.setenv("RATE_LIMIT_IP_WINDOW_MS", "60000")
    monkeypatch.setenv("RATE_LIMIT_WHITELIST", "Staff@Example.com, qa@example.com")

    cfg = RateLimitSettings()

    assert cfg.enabled is True
    assert cfg.email_limit == 3
    assert cfg.ip_window_ms == 60000
    assert cfg.whitelisted_emails == frozenset({"staff@example.com", "qa@example.com"})


@pytest.mark.parametrize("field", ["email_limit", "ip_limit", "email_window_ms", "ip_window_ms"])
def test_rate_limit_rejects_non_positive_values(field: str) -> None:
    with pytest.raises(ValidationError):
        RateLimitSettings(**{field: 0})
