from flask import Flask
from flasgger import Swagger
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import get_config
from .errors import register_error_handlers
from .rate_limit import limiter
from .request_logger import init_request_logging
from models import DBStorage
from utils.csrf import init_csrf
from utils.refresh_tokens import RefreshTokenManager
from utils.security import build_password_hasher, check_secret

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Storefront API",
        "version": "1.0.0",
        "description": "Admin and customer authentication for the storefront: "
                       "cookie sessions, rotating refresh tokens and CSRF protection.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None, storage: DBStorage | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    The credential store is injected (tests pass their own); otherwise one is
    built from DATABASE_URL.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))

    # Fail fast on a weak signing secret
    check_secret(app.config.get("JWT_SECRET"))

    # Behind N reverse proxies, take the client address and scheme from X-Forwarded-*
    hops = app.config.get("TRUST_PROXY_HOPS", 0)
    if hops > 0:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops)

    if storage is None:
        storage = DBStorage(
            app.config["DATABASE_URL"],
            echo=app.config.get("SQL_ECHO", False),
            timeout=app.config["DB_TIMEOUT_SECONDS"],
        )
        storage.reload()
    app.extensions["storage"] = storage
    app.extensions["password_hasher"] = build_password_hasher(app.config)
    app.extensions["refresh_tokens"] = RefreshTokenManager(storage, ttl=app.config["REFRESH_TOKEN_EXPIRES"])

    # Cookie-bearing cross-origin calls from the allowed origins only
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["ALLOWED_ORIGINS"]}},
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization", "X-CSRF-Token", "X-Requested-With"],
        methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        max_age=600,
    )

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Request id + access log first, then rate limits, then CSRF
    init_request_logging(app)
    limiter.init_app(app)
    init_csrf(app)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    from .health import bp as health_bp
    from .admin import bp as admin_bp
    from .auth import bp as auth_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(admin_bp, url_prefix="/api/v1/admin")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to the Storefront API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
