import pytest

from core import config as config_module


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    config_module.get_settings.cache_clear()
    yield
    config_module.get_settings.cache_clear()


def test_non_local_debug_mode_is_blocked(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("DEBUG", "true")

    with pytest.raises(ValueError, match="debug=true"):
        config_module.get_settings()


def test_non_positive_timeout_is_blocked(monkeypatch):
    monkeypatch.setenv("WORKFLOW_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValueError, match="timeout"):
        config_module.get_settings()


def test_blank_trigger_url_is_blocked(monkeypatch):
    monkeypatch.setenv("WORKFLOW_TRIGGER_URL", "   ")

    with pytest.raises(ValueError, match="trigger URL"):
        config_module.get_settings()


def test_local_allows_debug(monkeypatch):
    monkeypatch.setenv("APP_ENV", "local")
    monkeypatch.setenv("DEBUG", "true")

    settings = config_module.get_settings()
    assert settings.app_env == "local"
    assert settings.debug is True


def test_defaults(monkeypatch):
    for name in ("APP_ENV", "DEBUG", "PORT", "WORKFLOW_TRIGGER_URL", "WORKFLOW_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    settings = config_module.get_settings()
    assert settings.port == 3000
    assert settings.workflow_timeout_seconds == 30.0
    assert settings.workflow_trigger_url == config_module.DEFAULT_WORKFLOW_TRIGGER_URL
