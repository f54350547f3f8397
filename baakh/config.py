"""
Configuration for the Baakh API.

Values come from the environment (a local ``.env`` file is loaded first).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def engine_options(database_url):
    """Pool settings only apply to server databases; SQLite manages its own."""
    if database_url and database_url.startswith('postgresql'):
        return {
            'pool_size': 10,
            'max_overflow': 20,
            'pool_timeout': 30,
            'pool_recycle': 1800,
        }
    return {}


class Config:
    DEBUG = False
    TESTING = False

    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', f"sqlite:///{PROJECT_ROOT / 'baakh.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(SQLALCHEMY_DATABASE_URI)
    AUTO_CREATE_TABLES = _env_bool('AUTO_CREATE_TABLES', True)

    ALLOWED_ORIGINS = os.getenv('ALLOWED_ORIGINS', '*').split(',')

    # Caching
    CACHE_ENABLED = _env_bool('CACHE_ENABLED', True)
    CACHE_EXPIRATION = int(os.getenv('CACHE_EXPIRATION', 3600))
    REDIS_URL = os.getenv('REDIS_URL')

    # Rate limiting
    RATELIMIT_ENABLED = _env_bool('RATELIMIT_ENABLED', True)
    RATELIMIT_DEFAULT = os.getenv('RATELIMIT_DEFAULT', '1000 per hour')
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    TEXT_TOOLS_RATE_LIMIT = os.getenv('TEXT_TOOLS_RATE_LIMIT', '120 per minute')

    # Lexicon artifacts (romanizer.txt / hesudhar.txt)
    LEXICON_DIR = os.getenv('LEXICON_DIR', str(PROJECT_ROOT / 'lexicon'))
    LEXICON_CACHE_SECONDS = int(os.getenv('LEXICON_CACHE_SECONDS', 300))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FORMAT = os.getenv('LOG_FORMAT', 'console')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    AUTO_CREATE_TABLES = True
    CACHE_ENABLED = False
    REDIS_URL = None
    RATELIMIT_ENABLED = False
    LEXICON_CACHE_SECONDS = 0


# Client-side settings for the couplet workflow
API_URL = os.getenv('BAAKH_API_URL', 'http://localhost:10000')
HTTP_TIMEOUT = float(os.getenv('BAAKH_HTTP_TIMEOUT', 10))
