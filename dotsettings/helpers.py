"""
Acesso em estilo funcao ao gerenciador de configuracoes do processo.

O gerenciador e construido uma vez no startup e registrado com
configure_settings(); settings() apenas repassa as chamadas para ele.
"""

from collections.abc import Mapping
from typing import Any

from dotsettings.modules.settings.service import SettingsManager

_MISSING: Any = object()

_manager: SettingsManager | None = None


def configure_settings(manager: SettingsManager | None) -> None:
    """Registra (ou remove, com None) o gerenciador usado por settings()."""
    global _manager
    _manager = manager


def get_settings_manager() -> SettingsManager:
    """
    Retorna o gerenciador registrado.

    Raises:
        RuntimeError: Se configure_settings() ainda nao foi chamado.
    """
    if _manager is None:
        raise RuntimeError('Gerenciador de configuracoes nao configurado; chame configure_settings()')
    return _manager


def settings(key: str | Mapping[str, Any] | None = None, default: Any = _MISSING) -> Any:
    """
    Le ou grava configuracoes.

    - settings() retorna todas as configuracoes.
    - settings({'a': 1, 'b': {'c': 2}}) grava cada entrada e retorna None.
    - settings('a.b', valor) grava valor (quando nao for None) e o retorna.
    - settings('a.b') ou settings('a.b', None) le a configuracao.
    """
    manager = get_settings_manager()

    if key is None:
        return manager.all()

    if isinstance(key, Mapping):
        manager.set_many(key)
        return None

    if default is not _MISSING and default is not None:
        manager.set(key, default)
        return default

    return manager.get(key, None if default is _MISSING else default)
