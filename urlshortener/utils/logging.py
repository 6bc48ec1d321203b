"""Structured (one JSON object per line) logging on stdout

`initialize_logging()` runs when `urlshortener.app` is imported. The level
comes from the LOG_LEVEL environment variable (INFO when unset).

Every line carries timestamp, level, logger and message, followed by the
`extra` fields given at the call site:
    {"timestamp": "2026-10-17T12:00:00.000Z", "level": "INFO",
     "logger": "urlshortener.usecases.shorten_url", "message": "Shortened target URL.",
     "shortcode": "q7FemOj2", "target": "https://example.com", "event": "SHORTEN_SUCCESS"}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from urlshortener.constants import ENV


# Attributes every LogRecord has; anything else on a record came from `extra`
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime'}


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': _utc_timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        extras = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}
        for key, value in extras.items():
            log.setdefault(key, value)

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {'level': os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper(), 'handlers': ['stdout']},
        }
    )
