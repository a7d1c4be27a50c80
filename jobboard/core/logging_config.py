"""
Logging setup for the job board.

JSON logs (``JSON_LOGS=true``) are meant for log shippers; each record carries
the HTTP method and path of the request being served, if any. The plain format
is for local development.
"""

import logging
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pythonjsonlogger import jsonlogger

JSON_LOG_FORMAT = '%(timestamp)s %(level)s %(logger)s %(module)s %(funcName)s %(message)s'
PLAIN_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_current_request: ContextVar[Optional[Tuple[str, str]]] = ContextVar("current_request", default=None)


def bind_request(method: str, path: str) -> Token:
    """Attach a request to records logged from the current context."""
    return _current_request.set((method, path))


def unbind_request(token: Token) -> None:
    _current_request.reset(token)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter adding level, logger, source and request fields.
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z')
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['module'] = record.module
        log_record['function'] = record.funcName

        request = _current_request.get()
        if request is not None:
            log_record['http_method'], log_record['http_path'] = request

        if record.levelno >= logging.WARNING:
            log_record['line'] = record.lineno
            log_record['pathname'] = record.pathname


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Send all logging to stdout with a single handler.

    Args:
        log_level: Level name, case-insensitive (LOG_LEVEL setting)
        json_logs: JSON records when True, plain text otherwise (JSON_LOGS setting)
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        console_handler.setFormatter(CustomJsonFormatter(JSON_LOG_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(PLAIN_LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))

    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(console_handler)

    # SQL echo only when something goes wrong
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
