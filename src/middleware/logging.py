"""
JSON logging for the LinguaQuest API.

Every record leaves as one JSON line (python-json-logger) on stdout and, when
LOG_DIR is writable, in rotating app.log / error.log files. Records emitted
inside a request carry its request id, user id and endpoint.
"""

import logging
import sys
import json
import time
import os
import uuid
from logging.handlers import RotatingFileHandler

from flask import request, g, current_app, has_request_context
from pythonjsonlogger.json import JsonFormatter

LOG_DIR = os.getenv('LOG_DIR', '/app/logs')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# Request bodies above this size are not logged
MAX_LOGGED_BODY_BYTES = 10000

# Body fields replaced with *** before logging
MASKED_FIELDS = ('password',)


def _request_context():
    """Request-scoped fields shared by every record logged during a request."""
    if not has_request_context():
        return {}

    context = {
        'request_id': g.get('request_id'),
        'user_id': g.get('user_id'),
    }
    if request.endpoint:
        context.update(endpoint=request.endpoint, method=request.method, path=request.path)
    return {key: value for key, value in context.items() if value is not None}


class LinguaQuestJsonFormatter(JsonFormatter):
    """Adds service labels and request context to each JSON record."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record.update(
            app='linguaquest',
            service='api',
            level=record.levelname,
            logger=record.name,
            line=record.lineno,
        )
        for key, value in _request_context().items():
            log_record.setdefault(key, value)


def setup_logging(app):
    """Route the root logger (and so every module logger) through the JSON formatter."""
    formatter = LinguaQuestJsonFormatter('%(asctime)s %(name)s %(levelname)s %(message)s')
    level = getattr(logging, LOG_LEVEL, logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    file_error = None
    try:
        os.makedirs(LOG_DIR, exist_ok=True)
        handlers.append(RotatingFileHandler(
            os.path.join(LOG_DIR, 'app.log'), maxBytes=50 * 1024 * 1024, backupCount=10
        ))
        error_handler = RotatingFileHandler(
            os.path.join(LOG_DIR, 'error.log'), maxBytes=20 * 1024 * 1024, backupCount=10
        )
        error_handler.setLevel(logging.ERROR)
        handlers.append(error_handler)
    except OSError as e:
        file_error = e

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # app.logger has no handlers of its own and propagates to root
    app.logger.handlers.clear()
    app.logger.setLevel(level)
    app.logger.propagate = True

    if file_error is None:
        app.logger.info(f"Logging to stdout and {LOG_DIR} at {LOG_LEVEL}")
    else:
        app.logger.warning(f"Logging to stdout only, cannot write to {LOG_DIR}: {file_error}")


def _loggable_body():
    if request.method == 'GET' or not request.content_length or request.content_length >= MAX_LOGGED_BODY_BYTES:
        return None

    body = request.get_json(silent=True)
    if isinstance(body, dict):
        body = {key: ('***' if key in MASKED_FIELDS else value) for key, value in body.items()}
    return body


def log_request_info():
    """before_request hook: assign a request id and log the request."""
    g.start_time = time.time()
    # A client-supplied id keeps traces joined across services
    g.request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())

    body = _loggable_body()
    user_id = request.args.get('user_id') or (body.get('user_id') if isinstance(body, dict) else None)
    if user_id:
        g.user_id = user_id

    summary = {
        'method': request.method,
        'url': request.url,
        'remote_addr': request.remote_addr,
        'user_agent': request.headers.get('User-Agent', ''),
        'args': request.args.to_dict(),
    }
    if body is not None:
        summary['json_body'] = body

    current_app.logger.info(f"REQUEST: {json.dumps(summary, default=str, ensure_ascii=False)}")


def log_response_info(response):
    """after_request hook: log status and duration, echo X-Request-ID."""
    started = g.get('start_time', time.time())
    request_id = g.get('request_id', 'unknown')

    current_app.logger.info(
        f"RESPONSE: {response.status_code} {response.content_type} "
        f"{response.content_length or 0}B in {(time.time() - started) * 1000:.1f}ms"
    )
    response.headers['X-Request-ID'] = request_id
    return response


def log_error(logger, message, **context):
    """
    Log an error with the active exception and request context attached.

    Usage:
        log_error(logger, "Sentence generation failed", source_language='de')
    """
    extra = {**_request_context(), **context}

    exc_type, exc_value, _ = sys.exc_info()
    if exc_type is not None:
        extra['error_type'] = exc_type.__name__
        extra['error_message'] = str(exc_value)

    logger.error(message, extra=extra, exc_info=exc_type is not None)
