from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv
import os
from app.extensions import db, migrate, jwt, limiter
from datetime import timedelta
import logging

# Load environment variables
load_dotenv()


def _env_flag(name, default="true"):
    return os.getenv(name, default).lower() in ["true", "1", "t"]


def create_app(config=None):
    app = Flask(__name__)

    app.config["TESTING"] = os.getenv("FLASK_ENV") == "testing"

    # Configure logging
    logging.basicConfig(level=logging.INFO)
    app.logger.setLevel(logging.INFO)

    # Configure database
    app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv(
        "DATABASE_URL", "postgresql://localhost/esports_events"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # Configure JWT
    app.config["JWT_SECRET_KEY"] = os.getenv("JWT_SECRET_KEY", "your-secret-key")
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(days=1)
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_HEADER_NAME"] = "Authorization"
    app.config["JWT_HEADER_TYPE"] = "Bearer"

    # Rate limiting
    app.config["RATELIMIT_ENABLED"] = _env_flag("RATELIMIT_ENABLED")
    app.config["RATELIMIT_STORAGE_URI"] = os.getenv("LIMITER_DATABASE_URL", "memory://")
    app.config["RATELIMIT_STRATEGY"] = "fixed-window"
    app.config["RATELIMIT_DEFAULT"] = "150 per minute; 10000 per hour; 100000 per day"

    app.config["CORS_ORIGINS"] = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5001",
    )

    if config:
        app.config.update(config)

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Register blueprints
    from app.routes.user_routes import user_bp
    from app.routes.organizer_event_routes import organizer_event_bp
    from app.routes.player_event_routes import player_event_bp
    from app.routes.registration_routes import registration_bp
    from app.routes.error_handlers import register_error_handlers

    app.register_blueprint(user_bp, url_prefix="/api/auth")
    app.register_blueprint(organizer_event_bp, url_prefix="/api/events/organizer")
    app.register_blueprint(player_event_bp, url_prefix="/api/events/player")
    app.register_blueprint(registration_bp, url_prefix="/api/events/registrations")

    register_error_handlers(app)

    # Set up CORS
    cors_origins = app.config["CORS_ORIGINS"]
    if isinstance(cors_origins, str):
        cors_origins = cors_origins.split(",")
    app.logger.info(f"Initializing CORS with origins: {cors_origins}")

    CORS(
        app,
        resources={
            r"/api/*": {"origins": cors_origins},
        },
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
        expose_headers=["Content-Type"],
    )

    return app
