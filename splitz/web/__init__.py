"""Flask application factory for the Splitz web API."""

from flask import Flask, jsonify

from splitz.errors import SplitzError
from splitz.ffutil import FFmpegTools, MediaToolRunner


def create_app(tools: MediaToolRunner | None = None) -> Flask:
    app = Flask(__name__)
    app.config["TOOLS"] = tools or FFmpegTools()

    from splitz.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(SplitzError)
    def splitz_error(error: SplitzError):
        return jsonify({"error": str(error), "code": error.code}), error.status

    return app
