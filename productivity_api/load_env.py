import logging
import os
import pathlib

import decouple

ENVIRONMENT = os.getenv("ENVIRONMENT", default="DEVELOPMENT")

logger = logging.getLogger(__name__)


def get_env_config() -> decouple.Config:
    """
    Creates and returns a Config object based on the environment setting.
    It uses .env.dev for development and .env for production.
    Without an env file only process environment variables are used.
    """
    env_files = {
        "DEVELOPMENT": ".env.dev",
        "PRODUCTION": ".env",
    }

    app_dir_path = pathlib.Path(__file__).resolve().parent.parent
    env_file_name = env_files.get(ENVIRONMENT, ".env.dev")
    file_path = app_dir_path / env_file_name

    if not file_path.is_file():
        logger.debug(f"Файл окружения {file_path} не найден, используются только переменные окружения")
        return decouple.Config(decouple.RepositoryEmpty())

    return decouple.Config(decouple.RepositoryEnv(file_path))


env_config = get_env_config()
LOGGER_LEVEL = env_config.get('LOGGER_LEVEL', default='INFO')


def load_app_config() -> dict:
    """Собрать настройки Flask-приложения из окружения"""
    return {
        'ENVIRONMENT': ENVIRONMENT,
        'SECRET_KEY': env_config.get('SECRET_KEY', default='dev-secret-key'),
        'STORAGE_BACKEND': env_config.get('STORAGE_BACKEND', default='memory'),
        'DATABASE_URL': env_config.get('DATABASE_URL', default='sqlite+aiosqlite:///./productivity.db'),
        'MONGO_URL': env_config.get('MONGO_URL', default='mongodb://localhost:27017'),
        'MONGO_DATABASE': env_config.get('MONGO_DATABASE', default='productivity'),
        'FRONTEND_URL': env_config.get('FRONTEND_URL', default='http://localhost:3000'),
        'SESSION_COOKIE_SECURE': env_config.get('SESSION_COOKIE_SECURE', default=False, cast=bool),
        'SESSION_COOKIE_SAMESITE': 'Lax',
    }
