"""JSON logs on stderr for the redirect server

Every record is one JSON object per line on stderr, so stdout stays free for
whatever supervises the process. `initialize_logging()` runs once from
`python -m hotlinks`; the level comes from --log-level, then $LOG_LEVEL,
then INFO.

Context travels in `extra=` and is flattened into the object. Fields in use:
    version, previousVersion   snapshot versions around a swap
    entries                    number of short codes in the new snapshot
    reasons                    coalesced reload requests, e.g. ["SIGHUP", "file-change"]
    error, errorCode, reason   exception class, its error_code, and its message
    path                       configuration file or request path
    fsEvent                    watchdog event type that triggered a reload

A failed reload looks like:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "ERROR",
    "logger": "hotlinks.reload",
    "message": "Rejected invalid configuration; keeping the current one.",
    "path": "/etc/hotlinks/config.toml",
    "reasons": ["SIGHUP"],
    "error": "DuplicateCodeError",
    "errorCode": "config:duplicate_code",
    "reason": "..."
}

Uncaught exceptions logged with `logger.exception()` add an "exception" field
holding the formatted traceback.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from hotlinks.constants import ENV, Defaults


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'module',
            'msecs',
            'msg',
            'message',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Attach `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS:
                log[key] = value

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    log_level = (level or os.getenv(ENV.App.LOG_LEVEL, Defaults.LOG_LEVEL)).upper()
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
                'stderr': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stderr',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stderr'],
            },
        }
    )
