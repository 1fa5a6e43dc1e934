"""Configuration module for the ERP-lite Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')
    TESTING = False

    # Bearer tokens (HS256). Falls back to SECRET_KEY when not set.
    JWT_SECRET = os.getenv('JWT_SECRET') or SECRET_KEY
    JWT_ALGORITHM = 'HS256'
    JWT_DEFAULT_HOURS = int(os.getenv('JWT_DEFAULT_HOURS', '24'))

    # Database - Support multiple environment variable naming conventions
    # Priority: DATABASE_URL > DB_* > POSTGRES_*
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        # Try DB_* variables (Docker style)
        DB_HOST = os.getenv('DB_HOST') or os.getenv('POSTGRES_HOST', 'localhost')
        DB_PORT = os.getenv('DB_PORT') or os.getenv('POSTGRES_PORT', '5432')
        DB_NAME = os.getenv('DB_NAME') or os.getenv('POSTGRES_DB', 'erplite')
        DB_USER = os.getenv('DB_USER') or os.getenv('POSTGRES_USER', 'erplite')
        DB_PASSWORD = os.getenv('DB_PASSWORD') or os.getenv('POSTGRES_PASSWORD', 'erplite')

        DATABASE_URL = (
            f"postgresql://{DB_USER}:{DB_PASSWORD}"
            f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        )

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'

    # Sales report
    REPORT_DEFAULT_LIMIT = int(os.getenv('REPORT_DEFAULT_LIMIT', '50'))
    REPORT_MAX_LIMIT = int(os.getenv('REPORT_MAX_LIMIT', '500'))
    REPORT_TOP_PRODUCTS = int(os.getenv('REPORT_TOP_PRODUCTS', '10'))

    # CORS for the request handlers (browser clients call them directly)
    CORS_ALLOW_ORIGIN = os.getenv('CORS_ALLOW_ORIGIN', '*')
    CORS_ALLOW_HEADERS = 'authorization, x-client-info, apikey, content-type'


class TestingConfig(Config):
    """Configuration used by the test suite (in-memory SQLite)."""

    TESTING = True
    DEBUG = False
    ENV = 'testing'
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET = 'test-jwt-secret-with-at-least-32-bytes'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
