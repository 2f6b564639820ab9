"""Prompt catalog server package initialization and logging configuration."""

from __future__ import annotations

import logging
import os
from logging.config import dictConfig
from typing import Optional

from ._version import __version__


FORMATTER = {
    'format': '%(asctime)s (v%(__version__)s) - %(levelname)-8s - (%(name)s): %(message)s',
    'datefmt': '%Y-%b-%d %H:%M:%S',
}


class _VersionFilter(logging.Filter):
    """Stamp each record with the package version."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, '__version__'):
            record.__version__ = __version__
        return True


def _logger_levels(level: Optional[str] = None) -> dict[str, str]:
    """Loggers routed only to the console handler, with their levels."""

    level = (level or os.getenv('PROMPTS_LOG_LEVEL', os.getenv('LOG_LEVEL', 'INFO'))).upper()
    return {
        'uvicorn': level,
        'uvicorn.error': level,
        'uvicorn.access': os.getenv('UVICORN_ACCESS_LOG_LEVEL', 'INFO').upper(),
        # one line per sheet import request is noise
        'httpx': 'WARNING',
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Send every server log line through one version-stamped console handler.

    ``level`` overrides PROMPTS_LOG_LEVEL, which is read at import time.
    """

    levels = _logger_levels(level)
    dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'standard': dict(FORMATTER)},
            'filters': {'inject_version': {'()': _VersionFilter}},
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'standard',
                    'filters': ['inject_version'],
                },
            },
            'root': {'handlers': ['console'], 'level': levels['uvicorn']},
            'loggers': {
                name: {'handlers': ['console'], 'level': level, 'propagate': False}
                for name, level in levels.items()
            },
        }
    )


configure_logging()

__all__ = ('FORMATTER', 'configure_logging')
