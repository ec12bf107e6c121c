"""
Flask error handlers.

LinguaQuestError subclasses carry their own status code and error type and
are rendered as {error, message, details?}. Werkzeug HTTP errors (unknown
route, wrong method, oversized body) get the same JSON shape. Anything else is
a bug: it is logged with its traceback and answered with a generic 500.
"""
import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from middleware.logging import log_error
from services.errors import LinguaQuestError

logger = logging.getLogger(__name__)


def _endpoint():
    return f"{request.method} {request.path}"


def register_error_handlers(app):
    """Attach the JSON error handlers to `app`."""

    @app.errorhandler(LinguaQuestError)
    def handle_linguaquest_error(e):
        if e.status_code >= 500:
            log_error(logger, f"{e.error_type} on {_endpoint()}: {e.message}", **e.details)
        else:
            logger.warning(f"{e.status_code} {e.error_type} on {_endpoint()}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        logger.warning(f"{e.code} {e.name} on {_endpoint()} from {request.remote_addr}")
        return jsonify({
            "error": e.name.lower().replace(' ', '_'),
            "message": e.description
        }), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_exception(e):
        log_error(logger, f"Unhandled exception on {_endpoint()}", query_args=request.args.to_dict())
        return jsonify({
            "error": "internal_error",
            "message": str(e) if app.debug else "An unexpected error occurred"
        }), 500
