import pytest

from dotsettings.config import Config
from dotsettings.database import Base, init_db, make_engine, make_session_factory
from dotsettings.helpers import configure_settings
from dotsettings.modules.settings.cache_coordinator import SettingsCacheCoordinator
from dotsettings.modules.settings.repository import SettingRepository
from dotsettings.modules.settings.service import SettingsManager
from dotsettings.shared.cache import MemoryCacheStore, reset_cache_stores


class FakeRedisClient:
    """Cliente Redis minimo em memoria (get / setex / delete)."""

    def __init__(self):
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key):
        return self.values.get(key)

    def setex(self, key, ttl, value):
        self.values[key] = value
        self.ttls[key] = ttl
        return True

    def delete(self, *keys):
        deleted = 0
        for key in keys:
            if key in self.values:
                deleted += 1
                self.values.pop(key, None)
                self.ttls.pop(key, None)
        return deleted


@pytest.fixture
def engine():
    engine = make_engine('sqlite:///:memory:')
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = make_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repository(db):
    return SettingRepository(db)


@pytest.fixture
def config():
    return Config(
        settings_cache_enabled=True,
        settings_cache_store='memory',
        settings_cache_key='test-settings',
        settings_cache_ttl=60,
    )


@pytest.fixture
def cache_store():
    return MemoryCacheStore()


@pytest.fixture
def manager(repository, config, cache_store):
    # Compartilha o repositorio da fixture para que os testes possam substitui-lo
    coordinator = SettingsCacheCoordinator(repository, config, cache_store=cache_store)
    return SettingsManager(repository, coordinator)


@pytest.fixture(autouse=True)
def _reset_globals():
    yield
    configure_settings(None)
    reset_cache_stores()
