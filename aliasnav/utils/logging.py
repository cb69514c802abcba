"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once in the embedding application's
entry point before any other logging is done. The library itself only creates
module loggers and never configures handlers on import.

Logging format:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "aliasnav.core.namespace",
    "message": "Shortcut created.",
    "shortcutId": "k3XbQ9aZpT",
    "fullAlias": "work/meet"
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from aliasnav.utils.constants import LOG_LEVEL_ENV


# Attributes every LogRecord carries; anything else arrived through `extra`.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime', 'taskName'}


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object per line, `extra` fields included"""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        log = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in vars(record).items() if key not in _RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Configure the root logger with a JSON stdout handler

    Args:
        level (str | None):
            Explicit log level. Falls back to `LOG_LEVEL`, then 'INFO'.
    """
    log_level = (level or os.getenv(LOG_LEVEL_ENV, 'INFO')).upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
