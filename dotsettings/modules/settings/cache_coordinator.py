import json
import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from dotsettings.config import Config
from dotsettings.modules.settings.models import Setting
from dotsettings.modules.settings.projector import project
from dotsettings.modules.settings.repository import SettingRepository
from dotsettings.modules.settings.schemas import SettingRecord
from dotsettings.shared.cache import CacheStore, get_cache_store
from dotsettings.shared.exceptions import CacheUnavailableException, StorageUnavailableException

logger = logging.getLogger(__name__)


class SettingsCacheCoordinator:
    """
    Decide entre ler o snapshot do cache ou reconstruir a arvore do banco.

    O cache e apenas otimizacao: o banco e sempre a fonte da verdade.
    Falhas na leitura viram uma arvore vazia; falhas na invalidacao sao propagadas.
    """

    def __init__(
        self,
        repository: SettingRepository,
        config: Config,
        cache_store: CacheStore | None = None,
        store_factory: Callable[[str, str | None], CacheStore] = get_cache_store,
    ) -> None:
        self._repository = repository
        self._config = config
        self._cache_store = cache_store
        self._store_factory = store_factory

    @property
    def cache_enabled(self) -> bool:
        return self._config.settings_cache_enabled

    def _get_store(self) -> CacheStore:
        if self._cache_store is None:
            self._cache_store = self._store_factory(
                self._config.settings_cache_store,
                self._config.redis_url,
            )
        return self._cache_store

    def load_from_database(self) -> dict[str, Any]:
        """
        Le todas as linhas e monta a arvore.

        Tabela inexistente resulta em arvore vazia; linhas invalidas sao
        ignoradas individualmente.

        Raises:
            StorageUnavailableException: Se o banco falhar.
        """
        try:
            if not self._repository.table_exists():
                logger.warning('Tabela de configuracoes "%s" nao existe', Setting.__tablename__)
                return {}
            rows = self._repository.list_all()
        except SQLAlchemyError as exc:
            raise StorageUnavailableException(
                f'Falha ao ler a tabela "{Setting.__tablename__}": {exc}'
            ) from exc

        records: list[SettingRecord] = []
        for row in rows:
            try:
                records.append(SettingRecord.model_validate(row))
            except ValidationError:
                logger.warning('Linha de configuracao invalida ignorada: %r', getattr(row, 'key', None))
        return project(records)

    def ensure_loaded(self) -> dict[str, Any]:
        """
        Retorna a arvore de configuracoes (read-through no cache).

        Com cache desabilitado, le direto do banco. Com cache habilitado,
        devolve o snapshot em caso de hit; em caso de miss, reconstroi do banco
        e grava o snapshot com o TTL configurado.

        Qualquer falha de configuracao, cache ou banco resulta em arvore vazia.
        """
        try:
            if not self.cache_enabled:
                return self.load_from_database()
            return self._remember()
        except Exception:
            logger.warning(
                'Falha ao carregar configuracoes, iniciando com arvore vazia',
                exc_info=True,
            )
            return {}

    def _remember(self) -> dict[str, Any]:
        store = self._get_store()
        cache_key = self._config.settings_cache_key

        cached = store.get(cache_key)
        if cached is not None:
            try:
                tree = json.loads(cached)
            except ValueError:
                logger.debug('Snapshot invalido no cache "%s", reconstruindo', cache_key)
            else:
                if isinstance(tree, dict):
                    logger.debug('Cache hit para "%s"', cache_key)
                    return tree

        logger.debug('Cache miss para "%s"', cache_key)
        tree = self.load_from_database()
        store.set(
            cache_key,
            json.dumps(tree, ensure_ascii=False),
            self._config.settings_cache_ttl,
        )
        return tree

    def invalidate(self) -> None:
        """
        Remove o snapshot do cache (no-op com cache desabilitado).

        Raises:
            CacheUnavailableException: Se o backend de cache falhar.
        """
        if not self.cache_enabled:
            return
        try:
            self._get_store().delete(self._config.settings_cache_key)
        except CacheUnavailableException:
            raise
        except Exception as exc:
            raise CacheUnavailableException(
                f'Falha ao invalidar o cache de configuracoes: {exc}'
            ) from exc
