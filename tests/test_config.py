from __future__ import annotations

from pathlib import Path

from crm.core import config as core_config


def test_settings_defaults(monkeypatch):
    for name in ("APP_ENV", "CRM_STORAGE_BACKEND", "CRM_DATA_FILE", "CRM_ACTIVITY_LIMIT", "CRM_SEED_DEMO_DATA", "CRM_TIMEZONE"):
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    settings = core_config.get_settings()
    core_config.get_settings.cache_clear()

    assert settings.app_env == "dev"
    assert settings.storage_backend == "json"
    assert settings.data_file == core_config.DEFAULT_DATA_FILE
    assert settings.activity_limit == 100
    assert settings.seed_demo_data is False
    assert settings.timezone == "UTC"


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("CRM_STORAGE_BACKEND", "carrier-pigeon")
    monkeypatch.setenv("CRM_DATA_FILE", str(tmp_path / "crm.json"))
    monkeypatch.setenv("CRM_ACTIVITY_LIMIT", "abc")
    monkeypatch.setenv("CRM_SEED_DEMO_DATA", "yes")
    core_config.get_settings.cache_clear()
    settings = core_config.get_settings()
    core_config.get_settings.cache_clear()

    assert settings.storage_backend == "json"
    assert settings.data_file == Path(tmp_path / "crm.json")
    assert settings.activity_limit == 100
    assert settings.seed_demo_data is True
