"""
Logging configuration for mdprompt

Compiler components log through structlog. ``setup_logging`` routes those
events into the standard library root logger, shown with rich on stderr and
optionally mirrored to ``settings.log_file``.
"""

import logging
from typing import Any, cast

import structlog
from rich.console import Console
from rich.logging import RichHandler

from mdprompt.config import Settings, get_settings

SHARED_PROCESSORS: list[Any] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _build_handlers(settings: Settings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
    ]
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))
    return handlers


def _renderer(settings: Settings) -> Any:
    if settings.log_format == "json":
        return structlog.processors.JSONRenderer()
    # File output must stay free of ANSI escapes
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(settings: Settings | None = None) -> None:
    """Set up structured logging with rich formatting"""
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=_build_handlers(settings),
        force=True,
    )

    structlog.configure(
        processors=[*SHARED_PROCESSORS, _renderer(settings)],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return cast("structlog.stdlib.BoundLogger", structlog.get_logger(name))


def preview_text(content: str, max_length: int = 50) -> str:
    """Shorten text for log output, flattening newlines"""
    flattened = " ".join(content.split())
    if len(flattened) > max_length:
        return flattened[:max_length] + "..."
    return flattened
