from __future__ import annotations

import importlib

import pytest

from hr_portal.config import get_settings_module


@pytest.fixture
def development(monkeypatch):
    for name in ("AUTO_INIT_DB", "ADMIN_EMAIL", "ADMIN_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    module = importlib.import_module("hr_portal.config.development")
    yield importlib.reload(module)
    monkeypatch.undo()
    importlib.reload(module)


def test_development_does_not_bootstrap_or_seed_by_default(development):
    assert development.AUTO_INIT_DB is False
    assert development.ADMIN_EMAIL is None
    assert development.ADMIN_PASSWORD is None


@pytest.mark.parametrize(
    "env, expected",
    [
        ("prod", "hr_portal.config.production"),
        ("testing", "hr_portal.config.testing"),
        ("anything", "hr_portal.config.development"),
    ],
)
def test_settings_module_follows_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == expected
