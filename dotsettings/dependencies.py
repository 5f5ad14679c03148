from sqlalchemy.orm import Session

from dotsettings.config import Config, config as default_config
from dotsettings.helpers import configure_settings
from dotsettings.modules.settings.cache_coordinator import SettingsCacheCoordinator
from dotsettings.modules.settings.models import Setting
from dotsettings.modules.settings.repository import SettingRepository
from dotsettings.modules.settings.service import SettingsManager
from dotsettings.shared.cache import CacheStore
from dotsettings.shared.exceptions import SettingsException
from dotsettings.shared.logging import setup_logging


def build_settings_manager(
    db: Session,
    config: Config | None = None,
    cache_store: CacheStore | None = None,
) -> SettingsManager:
    """
    Monta o gerenciador de configuracoes a partir de uma sessao do banco.

    Args:
        db: Sessao SQLAlchemy usada pelo repositorio.
        config: Configuracoes (usa a instancia global se None).
        cache_store: Backend de cache explicito; se None, resolvido pelo
            seletor SETTINGS_CACHE_STORE no primeiro uso.

    Returns:
        SettingsManager pronto para uso (arvore carregada sob demanda).

    Raises:
        SettingsException: Se config pedir uma tabela diferente da mapeada.
            O nome da tabela so e lido de SETTINGS_TABLE_NAME na importacao.
    """
    config = config or default_config
    if config.settings_table_name != Setting.__tablename__:
        raise SettingsException(
            f'Tabela "{config.settings_table_name}" nao corresponde a tabela mapeada '
            f'"{Setting.__tablename__}"; defina SETTINGS_TABLE_NAME no ambiente'
        )
    repository = SettingRepository(db)
    coordinator = SettingsCacheCoordinator(repository, config, cache_store=cache_store)
    return SettingsManager(repository, coordinator)


def bootstrap(db: Session, config: Config | None = None) -> SettingsManager:
    """
    Inicializacao de processo: configura logging e registra o gerenciador
    global usado pelo helper settings().
    """
    config = config or default_config
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_levels=config.log_levels,
    )
    manager = build_settings_manager(db, config)
    configure_settings(manager)
    return manager
