from types import SimpleNamespace

from src.dids import conf


def test_settings_win_when_configured(settings):
    settings.DIDS_VALIDATE_TIMESTAMPS = False
    assert conf.validate_timestamps_enabled() is False


def test_settings_module_is_read_before_settings_are_loaded(monkeypatch):
    monkeypatch.setattr(conf, "settings", SimpleNamespace(configured=False, DIDS_VALIDATE_TIMESTAMPS=False))
    monkeypatch.setenv("DJANGO_SETTINGS_MODULE", "config.django.base")
    monkeypatch.setenv("DIDS_VALIDATE_TIMESTAMPS", "true")
    assert conf.validate_timestamps_enabled() is False


def test_environment_is_used_without_settings(monkeypatch):
    monkeypatch.setattr(conf, "settings", SimpleNamespace(configured=False))
    monkeypatch.delenv("DJANGO_SETTINGS_MODULE", raising=False)
    monkeypatch.setenv("DIDS_VALIDATE_TIMESTAMPS", "false")
    assert conf.validate_timestamps_enabled() is False


def test_default_without_settings_or_environment(monkeypatch):
    monkeypatch.setattr(conf, "settings", SimpleNamespace(configured=False))
    monkeypatch.delenv("DJANGO_SETTINGS_MODULE", raising=False)
    monkeypatch.delenv("DIDS_VALIDATE_TIMESTAMPS", raising=False)
    assert conf.validate_timestamps_enabled() is True
