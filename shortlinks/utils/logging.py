"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Every log line is a single JSON object written to stdout (picked up by CloudWatch):
{
    "timestamp": "2026-10-19T12:00:00.000Z",
    "level": "INFO",
    "logger": "shortlinks.lambdas.shorten_url.app",
    "message": "Shortened URL. Responding with 201.",
    "function": "shorten-url",
    "event": "SHORTEN_SUCCESS",
    "shortcode": "promo",
    "linkId": "4f2a9c..."
}

- function: AWS Lambda function name, omitted outside Lambda
- event: event/error code of the lambda's constants module (handlers only)
- any other key comes from the call's `extra` (linkId, shortcode, operation, key, ...)
- exception / stack: formatted traceback when logged with exc_info / stack_info
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from shortlinks.constants import ENV


# Attributes every LogRecord carries; anything else was passed through `extra`
RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}

# Third-party loggers that flood DEBUG output with request dumps
NOISY_LOGGERS = ('botocore', 'boto3', 'urllib3')


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.function_name = os.getenv(ENV.App.AWS_LAMBDA_FUNCTION_NAME)

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if self.function_name:
            log['function'] = self.function_name

        log.update({key: value for key, value in vars(record).items() if key not in RESERVED_ATTRS})

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    """Route the root logger to stdout as JSON at LOG_LEVEL (default INFO)."""
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
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
            'loggers': {name: {'level': 'WARNING'} for name in NOISY_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
