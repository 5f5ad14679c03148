import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from dotsettings.modules.settings.cache_coordinator import SettingsCacheCoordinator
from dotsettings.modules.settings.codec import encode
from dotsettings.modules.settings.paths import SEPARATOR, SettingPath
from dotsettings.modules.settings.projector import flatten
from dotsettings.modules.settings.repository import SettingRepository
from dotsettings.shared.exceptions import InvalidSettingKeyException

logger = logging.getLogger(__name__)


class SettingsManager:
    """
    Servico de configuracoes em notacao de ponto.

    Expoe leitura e escrita sobre a arvore aninhada, gravando cada folha como
    uma linha plana no banco. Toda escrita invalida o cache e reconstroi a
    arvore antes de retornar; leituras carregam a arvore sob demanda.
    """

    def __init__(
        self,
        repository: SettingRepository,
        coordinator: SettingsCacheCoordinator,
    ) -> None:
        """Inicializa o servico com o repositorio e o coordenador de cache."""
        self._repository = repository
        self._coordinator = coordinator
        self._settings: dict[str, Any] = {}

    # -------------------------------------------------------------------------
    # Carga da arvore
    # -------------------------------------------------------------------------

    def load(self) -> dict[str, Any]:
        """Carrega (ou recarrega) a arvore pelo cache ou pelo banco."""
        self._settings = self._coordinator.ensure_loaded()
        return self._settings

    def _ensure_loaded(self) -> dict[str, Any]:
        if not self._settings:
            self.load()
        return self._settings

    # -------------------------------------------------------------------------
    # Leitura
    # -------------------------------------------------------------------------

    def get(self, key: str | None = None, default: Any = None) -> Any:
        """
        Obtem uma configuracao pela chave em notacao de ponto.

        Args:
            key: Chave (ex: app.database.host). None retorna a arvore inteira.
            default: Valor retornado quando algum segmento do caminho nao existe.

        Returns:
            Valor encontrado (copia), arvore completa ou default.
        """
        tree = self._ensure_loaded()
        if key is None:
            return copy.deepcopy(tree)
        try:
            path = SettingPath.parse(key)
        except InvalidSettingKeyException:
            return default
        return copy.deepcopy(path.lookup(tree, default))

    def has(self, key: str) -> bool:
        """Verifica se o caminho existe na arvore de configuracoes."""
        tree = self._ensure_loaded()
        try:
            return SettingPath.parse(key).exists(tree)
        except InvalidSettingKeyException:
            return False

    def all(self) -> dict[str, Any]:
        """Retorna a arvore completa de configuracoes."""
        return self.get(None)

    def get_many(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Obtem varias configuracoes, preservando a ordem das chaves."""
        return {key: self.get(key, default) for key in keys}

    # -------------------------------------------------------------------------
    # Escrita
    # -------------------------------------------------------------------------

    def set(
        self,
        key: str | Mapping[str, Any],
        value: Any = None,
        description: str | None = None,
    ) -> bool:
        """
        Grava uma ou varias configuracoes.

        - Mapeamento como key: achata o mapeamento inteiro e grava cada folha.
        - key com valor mapeamento: achata usando key como prefixo.
        - key com valor escalar (ou lista): grava direto.

        Todas as chaves sao validadas antes da primeira gravacao. Depois das
        gravacoes (mesmo se alguma falhar) invalida o cache e reconstroi a arvore.

        Returns:
            True quando todas as folhas foram gravadas.

        Raises:
            InvalidSettingKeyException: Se a chave for vazia ou nao for string.
        """
        if isinstance(key, Mapping):
            leaves = flatten('', key)
            description = None
        else:
            SettingPath.parse(key)
            leaves = flatten(key, value)

        paths = [(SettingPath.parse(leaf_key), leaf_value) for leaf_key, leaf_value in leaves]
        try:
            for path, leaf_value in paths:
                self._store(path, leaf_value, description)
        finally:
            self._refresh()
        return True

    def set_many(self, settings: Mapping[str, Any]) -> None:
        """Grava varias configuracoes, uma chamada de set por entrada."""
        for key, value in settings.items():
            self.set(key, value)

    def forget(self, key: str) -> int:
        """
        Exclui uma configuracao e todos os seus descendentes.

        Args:
            key: Chave em notacao de ponto.

        Returns:
            Numero de linhas excluidas no banco.
        """
        path = SettingPath.parse(key)
        path.remove(self._settings)

        try:
            deleted = self._repository.delete_by_key(key)
            if not key.endswith(SEPARATOR):
                deleted += self._repository.delete_by_prefix(path.descendant_prefix)
        finally:
            self._refresh()

        logger.info('Configuracao "%s" removida (%d linhas)', key, deleted)
        return deleted

    def flush_cache(self) -> None:
        """Invalida o cache e descarta a arvore local sem reconstruir."""
        self._coordinator.invalidate()
        self._settings = {}

    # -------------------------------------------------------------------------
    # Internos
    # -------------------------------------------------------------------------

    def _store(self, path: SettingPath, value: Any, description: str | None = None) -> None:
        raw, setting_type = encode(value)
        self._repository.upsert(
            key=path.key,
            value=raw,
            type=setting_type.value,
            description=description,
        )
        logger.info('Configuracao "%s" gravada (%s)', path.key, setting_type.value)

    def _refresh(self) -> None:
        self.flush_cache()
        self.load()
