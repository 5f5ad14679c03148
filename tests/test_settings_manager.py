from types import MappingProxyType

import pytest

from dotsettings.dependencies import build_settings_manager
from dotsettings.modules.settings.models import Setting
from dotsettings.shared.exceptions import CacheUnavailableException, InvalidSettingKeyException


def _rows(db):
    return {s.key: (s.value, s.type) for s in db.query(Setting).all()}


def test_get_missing_key_returns_default(manager):
    assert manager.get("missing.key", "D") == "D"
    assert manager.get("missing.key") is None


def test_dot_path_isolation(manager):
    manager.set("a.b", 1)
    manager.set("a.c", 2)

    assert manager.get("a") == {"b": 1, "c": 2}
    assert manager.has("a")
    assert manager.has("a.b")
    assert not manager.has("a.d")


def test_batch_set_end_to_end(manager, db):
    assert manager.set({"app": {"name": "Test", "version": "1.0"}}) is True

    assert manager.get("app.name") == "Test"
    assert manager.get("app") == {"name": "Test", "version": "1.0"}
    assert manager.all()["app"] == {"name": "Test", "version": "1.0"}
    assert _rows(db) == {"app.name": ("Test", "string"), "app.version": ("1.0", "string")}


def test_set_structured_value_under_key_stores_leaves(manager, db):
    manager.set("mail", {"host": "smtp.local", "port": 25}, "Servidor de email")

    assert _rows(db) == {"mail.host": ("smtp.local", "string"), "mail.port": ("25", "integer")}
    assert {s.description for s in db.query(Setting).all()} == {"Servidor de email"}
    assert manager.get("mail.port") == 25


def test_set_is_idempotent(manager, db):
    manager.set("site.title", "Docs")
    manager.set("site.title", "Docs")

    assert db.query(Setting).filter(Setting.key == "site.title").count() == 1
    assert manager.get("site.title") == "Docs"


def test_description_is_kept_when_not_supplied(manager, db):
    manager.set("site.title", "Docs", "Titulo do site")
    manager.set("site.title", "Manual")

    setting = db.query(Setting).filter(Setting.key == "site.title").one()
    assert setting.value == "Manual"
    assert setting.description == "Titulo do site"


def test_types_survive_rebuild(manager):
    manager.set("t.int", 7)
    manager.set("t.float", 2.5)
    manager.set("t.bool", False)
    manager.set("t.str", "7")
    manager.set("t.list", ["a", 1])
    manager.flush_cache()

    values = manager.get("t")
    assert values == {"int": 7, "float": 2.5, "bool": False, "str": "7", "list": ["a", 1]}
    assert type(values["int"]) is int
    assert type(values["float"]) is float
    assert type(values["bool"]) is bool
    assert type(values["str"]) is str


def test_value_survives_cache_flush(manager, cache_store, config):
    manager.set("feature.enabled", True)
    assert cache_store.get(config.settings_cache_key) is not None

    manager.flush_cache()

    assert cache_store.get(config.settings_cache_key) is None
    assert manager.get("feature.enabled") is True
    assert cache_store.get(config.settings_cache_key) is not None


def test_write_repopulates_cache_eagerly(manager, cache_store, config):
    manager.set("a", 1)
    assert cache_store.get(config.settings_cache_key) == '{"a": 1}'


def test_forget_cascades_to_descendants(manager, db):
    manager.set("x.y", 1)
    manager.set("x.z", 2)
    manager.set("xy", 3)

    assert manager.forget("x") >= 2

    assert not manager.has("x.y")
    assert not manager.has("x.z")
    assert manager.get("xy") == 3
    assert set(_rows(db)) == {"xy"}


def test_forget_missing_key_returns_zero(manager):
    assert manager.forget("nothing.here") == 0


def test_forget_with_trailing_separator_only_deletes_exact_key(manager, db):
    manager.set("x.y", 1)
    assert manager.forget("x.") == 0
    assert manager.get("x.y") == 1


def test_get_many_preserves_order_and_defaults(manager):
    manager.set({"a": 1, "b": {"c": 2}})

    result = manager.get_many(["b.c", "missing", "a"], "D")

    assert list(result) == ["b.c", "missing", "a"]
    assert result == {"b.c": 2, "missing": "D", "a": 1}


def test_set_many_sets_each_entry(manager):
    manager.set_many({"a": 1, "b": {"c": True}})
    assert manager.all() == {"a": 1, "b": {"c": True}}


def test_get_returns_copy_of_tree(manager):
    manager.set("a.b", 1)
    tree = manager.get("a")
    tree["b"] = 99
    assert manager.get("a.b") == 1


def test_scalar_at_prefix_key_is_shadowed_by_descendants(manager):
    manager.set("a.b", 1)
    manager.set("a", "scalar")
    assert manager.get("a") == {"b": 1}


@pytest.mark.parametrize("key", ["", None])
def test_set_rejects_invalid_keys(manager, key):
    with pytest.raises(InvalidSettingKeyException):
        manager.set(key, "value")


def test_reads_degrade_to_empty_when_storage_fails(manager, repository, monkeypatch):
    def boom():
        raise RuntimeError("connection refused")

    monkeypatch.setattr(repository, "list_all", boom)

    assert manager.get("a", "D") == "D"
    assert manager.all() == {}
    assert not manager.has("a")


def test_write_errors_propagate(manager, repository, monkeypatch):
    def boom(**kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(repository, "upsert", boom)

    with pytest.raises(RuntimeError, match="disk full"):
        manager.set("a", 1)


def test_failed_invalidation_is_surfaced(db, config):
    class _DeleteFails:
        def __init__(self):
            self.values = {}

        def get(self, key):
            return self.values.get(key)

        def set(self, key, value, ttl):
            self.values[key] = value

        def delete(self, key):
            raise CacheUnavailableException("down")

    manager = build_settings_manager(db, config, cache_store=_DeleteFails())
    with pytest.raises(CacheUnavailableException):
        manager.set("a", 1)


def test_cache_disabled_still_works(db, config):
    config.settings_cache_enabled = False
    manager = build_settings_manager(db, config)

    manager.set("a.b", "c")
    manager.flush_cache()

    assert manager.get("a.b") == "c"


def test_managers_share_state_through_storage_and_cache(db, config, cache_store, manager):
    other = build_settings_manager(db, config, cache_store=cache_store)
    manager.set("shared.value", 10)

    assert other.get("shared.value") == 10


def test_invalid_leaf_key_aborts_batch_before_any_write(db, config, cache_store, manager):
    manager.set("existing.key", "kept")
    fresh = build_settings_manager(db, config, cache_store=cache_store)

    with pytest.raises(InvalidSettingKeyException):
        fresh.set({"ok": 1, "": 2})

    assert "ok" not in _rows(db)
    assert fresh.get("existing.key") == "kept"
    assert not fresh.has("ok")


def test_partial_batch_failure_resyncs_tree_and_cache(db, config, cache_store, manager, repository, monkeypatch):
    manager.set("existing.key", "kept")
    original_upsert = repository.upsert
    calls = []

    def fail_on_second(**kwargs):
        calls.append(kwargs["key"])
        if len(calls) == 2:
            raise RuntimeError("disk full")
        return original_upsert(**kwargs)

    monkeypatch.setattr(repository, "upsert", fail_on_second)

    with pytest.raises(RuntimeError, match="disk full"):
        manager.set({"a": 1, "b": 2})

    other = build_settings_manager(db, config, cache_store=cache_store)
    assert manager.get("a") == 1
    assert other.get("a") == 1
    assert not manager.has("b")
    assert manager.get("existing.key") == "kept"
    assert other.has("existing.key")


def test_overlong_key_is_rejected_and_reads_keep_working(manager, db):
    manager.set("app.name", "Test")

    with pytest.raises(InvalidSettingKeyException):
        manager.set("k" * 300, 1)

    assert "k" * 300 not in _rows(db)
    assert manager.get("app.name") == "Test"
    assert manager.all() == {"app": {"name": "Test"}}


def test_empty_mapping_proxy_is_stored_as_empty_object(manager, db):
    manager.set("x", MappingProxyType({}))

    assert _rows(db)["x"] == ("{}", "json")
    assert manager.get("x") == {}
