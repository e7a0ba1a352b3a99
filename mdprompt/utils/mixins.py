import structlog

from mdprompt.utils.logger import get_logger


class LoggerMixin:
    """Give a class a structlog logger named after its component"""

    # Overrides the class name in log records when set
    log_component: str | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Get logger instance for this class"""
        return get_logger(self.log_component or self.__class__.__name__)
