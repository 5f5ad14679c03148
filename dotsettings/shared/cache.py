"""
Backends de cache para o snapshot das configuracoes.

Cada backend guarda strings (o snapshot ja serializado) com expiracao em
segundos. O seletor SETTINGS_CACHE_STORE escolhe o backend:
'default' ou 'redis' usam Redis, 'memory' usa um cache em processo.
"""

import logging
import threading
import time
from typing import Protocol

from redis import Redis
from redis.exceptions import RedisError

from dotsettings.shared.exceptions import CacheUnavailableException
from dotsettings.shared.redis_client import get_redis_client

logger = logging.getLogger(__name__)

# Prefixo global para todas as chaves de cache
_CACHE_PREFIX = 'cache:'


class CacheStore(Protocol):
    """Contrato minimo de um backend de cache (get / set com TTL / delete)."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl: int) -> None: ...

    def delete(self, key: str) -> bool: ...


class RedisCacheStore:
    """Backend de cache no Redis, com prefixo de chave."""

    def __init__(self, client: Redis | None = None, url: str | None = None) -> None:
        self._client = client
        self._url = url

    def _get_client(self) -> Redis:
        if self._client is None:
            self._client = get_redis_client(self._url)
        return self._client

    @staticmethod
    def _k(key: str) -> str:
        return f'{_CACHE_PREFIX}{key}'

    def get(self, key: str) -> str | None:
        try:
            return self._get_client().get(self._k(key))
        except RedisError as exc:
            raise CacheUnavailableException(f'Falha ao ler cache "{key}": {exc}') from exc

    def set(self, key: str, value: str, ttl: int) -> None:
        try:
            self._get_client().setex(self._k(key), ttl, value)
        except RedisError as exc:
            raise CacheUnavailableException(f'Falha ao gravar cache "{key}": {exc}') from exc

    def delete(self, key: str) -> bool:
        try:
            deleted = self._get_client().delete(self._k(key))
        except RedisError as exc:
            raise CacheUnavailableException(f'Falha ao invalidar cache "{key}": {exc}') from exc
        logger.debug('Cache invalidado: "%s" (%d chaves)', key, deleted)
        return bool(deleted)


class MemoryCacheStore:
    """Cache em processo, thread-safe, com TTL por entrada."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if time.monotonic() < expires_at:
                return value
            # expirado
            del self._entries[key]
            return None

    def set(self, key: str, value: str, ttl: int) -> None:
        with self._lock:
            self._entries[key] = (value, time.monotonic() + ttl)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None


# Instancias compartilhadas por seletor
_stores: dict[str, CacheStore] = {}
_stores_lock = threading.Lock()


def get_cache_store(selector: str = 'default', redis_url: str | None = None) -> CacheStore:
    """
    Retorna o backend de cache para o seletor configurado.

    Args:
        selector: 'default', 'redis' ou 'memory'.
        redis_url: URL do Redis (usa REDIS_URL se None).

    Returns:
        Backend de cache, reutilizado entre chamadas com o mesmo seletor.

    Raises:
        CacheUnavailableException: Se o seletor nao for reconhecido.
    """
    name = (selector or 'default').strip().lower()
    with _stores_lock:
        store = _stores.get(name)
        if store is not None:
            return store
        if name in ('default', 'redis'):
            store = RedisCacheStore(url=redis_url)
        elif name == 'memory':
            store = MemoryCacheStore()
        else:
            raise CacheUnavailableException(f'Backend de cache desconhecido: "{selector}"')
        _stores[name] = store
        return store


def reset_cache_stores() -> None:
    """Descarta os backends registrados (usado em testes)."""
    with _stores_lock:
        _stores.clear()
