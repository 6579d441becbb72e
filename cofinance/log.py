# cofinance/log.py
"""Configuración de structlog sobre el logging estándar."""
import logging
import sys

import structlog

from cofinance import config

# todos los módulos cuelgan de este logger: cofinance.store, cofinance.notifier...
LOGGER_NAME = "cofinance"


def configure_logging(level: str | None = None, json: bool | None = None) -> None:
    """
    Configura structlog. Sin argumentos usa LOG_LEVEL y LOG_JSON del entorno.
    Se puede llamar varias veces (p.ej. desde la CLI con --verbose).
    """
    if level is None:
        level = config.get_log_level()
    if json is None:
        json = config.get_log_json()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.handlers[:] = [handler]
    app_logger.setLevel(getattr(logging, level, logging.INFO))
    app_logger.propagate = False

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        # ConsoleRenderer ya formatea las excepciones
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def ensure_logging() -> None:
    """Configura con los valores del entorno si nadie lo ha hecho antes."""
    if not structlog.is_configured():
        configure_logging()
