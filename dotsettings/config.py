from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Configuracoes da biblioteca carregadas de variaveis de ambiente."""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # -------------------------------------------------------------------------
    # Banco de dados
    # -------------------------------------------------------------------------
    database_url: str = 'sqlite:///./dotsettings.db'

    # -------------------------------------------------------------------------
    # Redis
    # -------------------------------------------------------------------------
    redis_url: str = 'redis://localhost:6379/0'

    # -------------------------------------------------------------------------
    # Settings (tabela e cache)
    # -------------------------------------------------------------------------
    settings_table_name: str = 'settings'
    settings_cache_enabled: bool = True
    settings_cache_store: str = 'default'
    settings_cache_key: str = 'dotsettings'
    settings_cache_ttl: int = Field(default=3600, gt=0)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: str = 'INFO'
    log_format: str = 'json'
    log_levels: str = ''


# Instancia global de configuracoes
config = Config()
