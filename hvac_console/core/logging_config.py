"""
Structured logging configuration for the console.

Every record is tagged with the console request it was logged under (method,
path and signed-in account) so a failed backend call can be traced back to
the page and user that triggered it. JSON output is meant for production,
the plain format for local development.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from hvac_console.core.security import USER_KEY

# "-" outside of a request (startup, shutdown, tests calling helpers directly)
request_method_var: ContextVar[str] = ContextVar("request_method", default="-")
request_path_var: ContextVar[str] = ContextVar("request_path", default="-")
user_id_var: ContextVar[Optional[int]] = ContextVar("user_id", default=None)


class RequestContextFilter(logging.Filter):
    """Copy the current request context onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_method = request_method_var.get()
        record.request_path = request_path_var.get()
        record.user_id = user_id_var.get()
        return True


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Bind method, path and the session's user id for the duration of a request.

    Must sit inside SessionMiddleware so request.session is populated.
    """

    async def dispatch(self, request: Request, call_next):
        user = request.session.get(USER_KEY) or {}
        tokens = (
            request_method_var.set(request.method),
            request_path_var.set(request.url.path),
            user_id_var.set(user.get("id")),
        )
        try:
            return await call_next(request)
        finally:
            request_method_var.reset(tokens[0])
            request_path_var.reset(tokens[1])
            user_id_var.reset(tokens[2])


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with the console's standard fields.
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        # Re-added below in the console's own shape
        for key in ('request_method', 'request_path', 'user_id'):
            log_record.pop(key, None)

        log_record['timestamp'] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace('+00:00', 'Z')
        log_record['level'] = record.levelname
        log_record['logger'] = record.name

        path = getattr(record, 'request_path', '-')
        if path != '-':
            log_record['request'] = f"{getattr(record, 'request_method', '-')} {path}"
        user_id = getattr(record, 'user_id', None)
        if user_id is not None:
            log_record['user_id'] = user_id

        # Source location only for problems
        if record.levelno >= logging.WARNING:
            log_record['function'] = record.funcName
            log_record['line'] = record.lineno


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON output for production, plain text for development
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.addFilter(RequestContextFilter())

    if json_logs:
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s')
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(request_method)s %(request_path)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler.setFormatter(formatter)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.addHandler(console_handler)

    # Request lines from the backend client are noisy at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
