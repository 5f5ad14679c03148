"""
Logging estruturado do dotsettings.

O pacote so emite logs via logging.getLogger(__name__); setup_logging e
opcional e pensado para o processo que hospeda o gerenciador. Ele liga o
structlog ao logging stdlib para que esses registros saiam em JSON (ou em
formato legivel no terminal) com o nome do servico e o nivel por modulo.
"""

import logging
import logging.config

import structlog

SERVICE_NAME = 'dotsettings'

_VALID_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# Bibliotecas usadas pelo repositorio e pelo cache
_NOISY_LOGGERS = {
    'sqlalchemy.engine': 'WARNING',
    'sqlalchemy.pool': 'WARNING',
    'redis': 'WARNING',
}


def add_service_name(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict,
) -> dict:
    """Marca o evento com o nome do servico."""
    event_dict.setdefault('service', SERVICE_NAME)
    return event_dict


def parse_log_levels(log_levels_str: str) -> dict[str, str]:
    """
    Parseia a string de niveis por modulo.

    Formato: "dotsettings.modules.settings:DEBUG,dotsettings.shared.cache:INFO".
    Pares sem ':' ou com nivel desconhecido sao descartados.
    """
    levels: dict[str, str] = {}
    if not log_levels_str or not log_levels_str.strip():
        return levels
    for pair in log_levels_str.split(','):
        module, sep, level = pair.strip().rpartition(':')
        if not sep or not module.strip():
            continue
        level = level.strip().upper()
        if level in _VALID_LEVELS:
            levels[module.strip()] = level
    return levels


def set_module_log_levels(levels: dict[str, str]) -> None:
    for module_name, level_str in levels.items():
        logging.getLogger(module_name).setLevel(getattr(logging, level_str))


def _normalize_level(log_level: str) -> str:
    level = (log_level or 'INFO').strip().upper()
    return level if level in _VALID_LEVELS else 'INFO'


def _build_renderer(log_format: str):
    """Renderer final: ConsoleRenderer para 'console', JSON para o resto."""
    if (log_format or '').strip().lower() == 'console':
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer(ensure_ascii=False)


def _shared_processors() -> list:
    # Usados tanto pelo structlog quanto pelos registros vindos do stdlib
    return [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


_configured = False


def setup_logging(
    log_level: str = 'INFO',
    log_format: str = 'json',
    log_levels: str = '',
) -> None:
    """
    Configura o logging do processo uma unica vez; chamadas seguintes sao ignoradas.

    Args:
        log_level: Nivel global. Valores desconhecidos caem para INFO.
        log_format: 'json' ou 'console'.
        log_levels: Overrides por modulo (ex: "dotsettings.shared.cache:DEBUG").
    """
    global _configured
    if _configured:
        return
    _configured = True

    processors = _shared_processors()

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'structlog': {
                '()': structlog.stdlib.ProcessorFormatter,
                'processors': [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    _build_renderer(log_format),
                ],
                'foreign_pre_chain': processors,
            },
        },
        'handlers': {
            'default': {
                'class': 'logging.StreamHandler',
                'formatter': 'structlog',
                'stream': 'ext://sys.stdout',
            },
        },
        'root': {
            'handlers': ['default'],
            'level': _normalize_level(log_level),
        },
        'loggers': {name: {'level': level} for name, level in _NOISY_LOGGERS.items()},
    })

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    set_module_log_levels(parse_log_levels(log_levels))
