# FILE: ecopilot-backend/main.py

from flask import Flask, jsonify
from logging_config import setup_logging
from config import Settings
from dependencies import EXTENSION_KEY, build_services
from extensions import limiter
from api.error_utils import register_error_handlers


def create_app(services=None):
    """
    Flask app for the manual and administrative triggers.
    Run with: gunicorn 'main:create_app()'
    """
    # --- SETUP & CONFIG ---
    settings = services.settings if services else Settings.from_env()
    setup_logging(settings.log_file_path, settings.log_level)
    services = services or build_services(settings)

    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = services

    # --- Initialize Extensions ---
    app.config["RATELIMIT_STORAGE_URI"] = settings.ratelimit_storage_uri
    limiter.init_app(app)

    # --- Import and Register Blueprints ---
    from api.content import content_bp
    from api.notifications import notifications_bp

    app.register_blueprint(content_bp, url_prefix='/')
    app.register_blueprint(notifications_bp, url_prefix='/notifications')

    @app.route('/health', methods=['GET'])
    @limiter.exempt
    def health():
        return jsonify({"status": "OK"}), 200

    # --- Global Error Handlers ---
    register_error_handlers(app)

    return app


if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=8080)
