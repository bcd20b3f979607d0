# Folder: issuewatch/app/main.py
#
# Small demo Flask app wired with issuewatch.
# /boom raises on purpose - with GITHUB_TOKEN / GITHUB_REPO set and
# APP_ENV=production it opens (or comments on) a GitHub issue.
#
# Run with: python -m app.main

import logging

from flask import Flask, jsonify

from actions.guard_config import GuardConfig, configure
from app.middleware import register_middleware
import config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


def create_app() -> Flask:
    configure(**GuardConfig.from_env().model_dump())

    app = Flask(__name__)

    # This is all you need - every unhandled exception is now reported
    register_middleware(app)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/boom")
    def boom():
        raise RuntimeError("boom")

    return app


app = create_app()


if __name__ == "__main__":
    logger.info(f"Demo app starting on port {config.APP_PORT}")
    app.run(host="127.0.0.1", port=config.APP_PORT, debug=False)
