"""Flask application factory."""
from flask import Flask, jsonify
from erplite.database import init_db
import os


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Initialize Sentry for error tracking in production
    if os.getenv('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            environment=os.getenv('FLASK_ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Setup Prometheus metrics instrumentation
    from erplite.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: Enable ProxyFix for HTTPS behind Nginx reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_for=1,      # Trust X-Forwarded-For with 1 proxy
            x_proto=1,    # Trust X-Forwarded-Proto
            x_host=1,     # Trust X-Forwarded-Host
            x_port=1,     # Trust X-Forwarded-Port
            x_prefix=0    # No prefix (not behind a URL prefix)
        )

    # Initialize database
    init_db(app)

    # Error Handlers
    from erplite.exceptions import ErpError, PersistenceError
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(ErpError)
    def handle_erp_error(error):
        """Handle custom application exceptions."""
        if isinstance(error, PersistenceError):
            app.logger.error(f"ErpError [{error.status_code}] {error.step}: {error.message}: {error.details}")
        else:
            app.logger.warning(f"ErpError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        import traceback
        app.logger.error(f"Unhandled Exception: {error}")
        app.logger.error(f"Traceback: {traceback.format_exc()}")
        return jsonify({'error': str(error) or 'Unknown error occurred'}), 500

    # Register blueprints
    from erplite.blueprints.functions import functions_bp
    from erplite.blueprints.metrics import metrics_bp

    app.register_blueprint(functions_bp)
    app.register_blueprint(metrics_bp)

    # Register CLI commands
    from erplite.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
