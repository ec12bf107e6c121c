"""
LinguaQuest API

Flask application serving the vocabulary drilling API: due-item batches,
answer recording with spaced repetition, session completion with streaks and
experience, plus the catalog and user endpoints around them.

Production:  gunicorn -c gunicorn.conf.py "app:create_app()"
Development: python app.py
"""

import os

from dotenv import load_dotenv
from flask import Flask

# .env must be loaded before config modules read os.environ
load_dotenv()


def _install_hooks(app):
    from middleware.logging import log_request_info, log_response_info
    from middleware.metrics_middleware import track_request_start, track_request_end

    # Request logging runs first so metrics and handlers see g.request_id
    for before in (log_request_info, track_request_start):
        app.before_request(before)
    for after in (track_request_end, log_response_info):
        app.after_request(after)


def _register_routes(app):
    from app_api import api
    from middleware.metrics import metrics_endpoint

    app.register_blueprint(api)
    app.add_url_rule('/metrics', 'metrics', metrics_endpoint, methods=['GET'])

    routes = sorted(rule.rule for rule in app.url_map.iter_rules() if rule.endpoint != 'static')
    app.logger.info(f"Registered {len(routes)} routes: {', '.join(routes)}")


def create_app(config=None):
    """
    Build the Flask application.

    Args:
        config: Optional mapping applied on top of the defaults (tests pass
            {'TESTING': True})
    """
    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = 64 * 1024  # JSON bodies are a few fields
    app.json.sort_keys = False
    if config:
        app.config.update(config)

    from middleware.logging import setup_logging
    from middleware.error_handler import register_error_handlers

    setup_logging(app)
    register_error_handlers(app)
    _install_hooks(app)
    _register_routes(app)

    app.logger.info("LinguaQuest API ready")
    return app


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    dev_app = create_app()
    dev_app.logger.warning(f"Flask development server on port {port}; use gunicorn in production")
    dev_app.run(host='0.0.0.0', port=port, debug=True)
