"""
Notify API stub

A local stand-in for the Notify REST API, used as a test double and for
trying the client without a real service:

    NOTIFY_API_KEY=<key> python server/notify_stub.py
    notify-cli init <key> --base-url http://localhost:6011

Blueprints:
- auth blueprint verifies tokens, records requests, replays forced responses
- templates and notifications blueprints serve the v2 endpoints
"""

import logging
import os
import sys
import threading

from flask import Flask, jsonify
from werkzeug.serving import make_server

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from blueprints.auth import auth_bp  # noqa: E402
from blueprints.notifications import notifications_bp  # noqa: E402
from blueprints.templates import templates_bp  # noqa: E402
from notify_client.logging_config import PACKAGE_LOGGER, setup_logging  # noqa: E402
from src.stub_state import StubState  # noqa: E402

logger = logging.getLogger(__name__)


def create_app(api_key, templates=None):
    """Create and configure the Flask application"""
    logger.info("Creating Notify stub application")

    app = Flask(__name__)
    app.config["NOTIFY_STATE"] = StubState(api_key, templates)

    app.register_blueprint(auth_bp)
    app.register_blueprint(templates_bp)
    app.register_blueprint(notifications_bp)

    @app.route('/health')
    def health_check():
        return jsonify({"status": "healthy"})

    logger.info(f"Notify stub created for service {app.config['NOTIFY_STATE'].credential.service_id}")
    return app


class StubServer:
    """Stub app served on a local port from a background thread"""

    def __init__(self, app, host="127.0.0.1", port=0):
        self.app = app
        self._server = make_server(host, port, app, threaded=True)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def state(self):
        return self.app.config["NOTIFY_STATE"]

    @property
    def url(self):
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def start(self):
        self._thread.start()
        logger.debug(f"Notify stub listening on {self.url}")
        return self

    def stop(self):
        self._server.shutdown()
        self._server.server_close()
        self._thread.join(timeout=5)

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()


def start_stub_server(app, host="127.0.0.1", port=0):
    return StubServer(app, host, port).start()


if __name__ == '__main__':
    setup_logging(os.environ.get('LOG_LEVEL', 'INFO'), names=(__name__, 'blueprints', 'src', PACKAGE_LOGGER))

    api_key = os.environ.get('NOTIFY_API_KEY')
    if not api_key:
        logger.error("NOTIFY_API_KEY must be set")
        raise SystemExit(1)

    app = create_app(api_key)

    host = os.environ.get('HOST', '127.0.0.1')
    port = int(os.environ.get('PORT', 6011))
    debug = os.environ.get('DEBUG', 'false').lower() == 'true'

    logger.info(f"Starting Notify stub on {host}:{port} (debug={debug})")
    app.run(host=host, port=port, debug=debug)
