from redis import Redis

from dotsettings.config import config


def get_redis_client(url: str | None = None) -> Redis:
    """Retorna uma instancia do cliente Redis usando a URL das configuracoes."""
    return Redis.from_url(url or config.redis_url, decode_responses=True)
