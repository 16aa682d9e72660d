"""
Структурированное логирование

structlog подключен к LOGGING джанги через structlog.stdlib.ProcessorFormatter:
записи самой джанги и события structlog.get_logger(__name__) уходят в один
хэндлер с одинаковым рендерингом - JSON для сборщика логов, обычный вывод в
консоль для локальной разработки.
"""

import structlog
from structlog.types import EventDict, WrappedLogger

SERVICE_NAME = 'prreview'


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault('service', SERVICE_NAME)
    return event_dict


SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt='iso'),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
    add_service_context,
]


def build_logging_config(level: str = 'INFO', json_logs: bool = False) -> dict:
    """
    Собирает настройку LOGGING

    Args:
        level: Уровень корневого логгера
        json_logs: Писать JSON вместо консольного формата

    Returns:
        dict: Конфигурация для dictConfig
    """
    if json_logs:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'structured': {
                '()': structlog.stdlib.ProcessorFormatter,
                'processors': [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    *renderers,
                ],
                'foreign_pre_chain': SHARED_PROCESSORS,
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'stream': 'ext://sys.stdout',
                'formatter': 'structured',
            },
        },
        'root': {
            'handlers': ['console'],
            'level': level,
        },
        'loggers': {
            'django.db.backends': {'level': 'WARNING'},
            'django.request': {'level': 'ERROR'},
        },
    }


def configure_structlog() -> None:
    """Направляет события structlog в стандартные хэндлеры из LOGGING"""
    structlog.configure(
        processors=SHARED_PROCESSORS + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
