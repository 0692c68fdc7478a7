# exchange_indexer/core/logging.py
"""
Logging for the exchange indexer.

Every logger lives under the ``exchange_indexer`` namespace. Keyword context
passed to log_with_context (tx_hash, block_number, pair, ...) is attached to
the record and rendered by IndexerFormatter as ``key=value`` pairs.
"""

import logging
import sys
from logging import DEBUG, INFO, WARNING, ERROR
from pathlib import Path
from typing import Optional
from datetime import datetime


ROOT_LOGGER_NAME = 'exchange_indexer'


class IndexerFormatter(logging.Formatter):
    CONTEXT_ATTRS = ('tx_hash', 'block_number', 'log_index', 'pair', 'token',
                     'event_type', 'entity_type', 'entity_id', 'error')

    def __init__(self, include_context: bool = False):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        message = f"{timestamp} - {record.name} - {record.levelname} - {record.getMessage()}"
        if not self.include_context:
            return message

        context = [f"{attr}={getattr(record, attr)}"
                   for attr in self.CONTEXT_ATTRS if hasattr(record, attr)]
        if context:
            message = f"{message} | {' '.join(context)}"
        return message


class IndexerLogger:
    """Process-wide logging setup for the exchange_indexer namespace"""

    _configured = False

    @classmethod
    def configure(cls,
                  log_dir: Optional[Path] = None,
                  log_level: str = "INFO",
                  console_enabled: bool = True,
                  file_enabled: bool = False,
                  structured_format: bool = True,
                  force: bool = False) -> None:
        """
        Install handlers on the namespace logger.

        A second call is a no-op unless force is set, in which case the
        previous handlers are replaced.
        """
        if cls._configured and not force:
            return

        level = getattr(logging, log_level.upper())
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        formatter = IndexerFormatter(include_context=structured_format)

        if console_enabled:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        if file_enabled and log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_dir / 'indexer.log')
            file_handler.setLevel(level)
            file_handler.setFormatter(IndexerFormatter(include_context=True))
            root_logger.addHandler(file_handler)

        cls._configured = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not name.startswith(ROOT_LOGGER_NAME):
            name = f'{ROOT_LOGGER_NAME}.{name}'
        return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    if logger.isEnabledFor(level):
        record = logger.makeRecord(logger.name, level, "", 0, message, (), None)
        for key, value in context.items():
            setattr(record, key, value)
        logger.handle(record)


class LoggingMixin:
    """
    Gives a class a logger named after its module and class, plus
    log_<level> helpers that take keyword context.
    """

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            module = self.__class__.__module__
            prefix = f'{ROOT_LOGGER_NAME}.'
            if module.startswith(prefix):
                module = module[len(prefix):]
            self._logger = IndexerLogger.get_logger(f"{module}.{self.__class__.__name__}")
        return self._logger

    def log_debug(self, message: str, **context) -> None:
        log_with_context(self.logger, DEBUG, message, **context)

    def log_info(self, message: str, **context) -> None:
        log_with_context(self.logger, INFO, message, **context)

    def log_warning(self, message: str, **context) -> None:
        log_with_context(self.logger, WARNING, message, **context)

    def log_error(self, message: str, **context) -> None:
        log_with_context(self.logger, ERROR, message, **context)


__all__ = [
    "IndexerFormatter",
    "IndexerLogger",
    "LoggingMixin",
    "log_with_context",
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
]
