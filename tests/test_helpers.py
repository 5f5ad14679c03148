import pytest

from dotsettings.helpers import configure_settings, get_settings_manager, settings


def test_accessor_requires_configuration():
    with pytest.raises(RuntimeError):
        settings("a")


def test_accessor_dispatches_to_manager(manager):
    configure_settings(manager)

    assert settings({"app": {"name": "Test"}, "debug": True}) is None
    assert settings("app.name") == "Test"
    assert settings("app.missing", None) is None
    assert settings("app.version", "2.0") == "2.0"
    assert settings() == {"app": {"name": "Test", "version": "2.0"}, "debug": True}
    assert get_settings_manager() is manager


def test_accessor_returns_none_for_missing_key_without_default(manager):
    configure_settings(manager)
    assert settings("nope") is None
