import logging.config
import pathlib

from flask import Flask
from flask_cors import CORS

from productivity_api.blueprints.errors import register_error_handlers
from productivity_api.blueprints.wrapper import run_async
from productivity_api.load_env import ENVIRONMENT, LOGGER_LEVEL, load_app_config
from productivity_api.storage import Storage, build_storage

logger = logging.getLogger(__name__)


def configure_logging():
    logging.config.fileConfig(fname=pathlib.Path(__file__).resolve().parent.parent / 'logging.ini',
                              disable_existing_loggers=False)
    logging.getLogger().setLevel(LOGGER_LEVEL)
    logging.getLogger('aiosqlite').propagate = False
    logging.getLogger('pymongo').setLevel(logging.WARNING)


def create_app(config: dict = None, storage: Storage = None):
    """Create and configure an instance of the Flask application."""
    app_config = load_app_config()
    app_config.update(config or {})

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(app_config)
    app.url_map.strict_slashes = False

    # Настройка CORS: сессионная cookie требует credentials
    origins = ["http://localhost:3000"]
    if app_config.get('FRONTEND_URL') and app_config['FRONTEND_URL'] not in origins:
        origins.append(app_config['FRONTEND_URL'])
    CORS(app,
         resources={
             r"/api/*": {
                 "origins": origins,
                 "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
                 "allow_headers": ["Content-Type"],
                 "supports_credentials": True,
             }
         },
         supports_credentials=True
    )

    # Хранилище создается один раз на процесс
    if storage is None:
        storage = build_storage(app_config)
    run_async(storage.init())
    app.extensions['storage'] = storage

    # apply the blueprints to the app
    from productivity_api.blueprints import (
        activity_bp, analytics_bp, auth_bp, health_bp, planner_bp, teams_bp,
    )
    app.register_blueprint(planner_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(teams_bp)
    app.register_blueprint(activity_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(health_bp)

    register_error_handlers(app)
    return app


def run_flask(app):
    app.run(host='0.0.0.0', port=5000, debug=ENVIRONMENT == "DEVELOPMENT", use_reloader=False)


def main():
    configure_logging()
    app = create_app()
    try:
        run_flask(app)
    except KeyboardInterrupt:
        logger.info('Клавиатурное прерывание')
    finally:
        run_async(app.extensions['storage'].close())
        logger.info('Приложение остановлено')


if __name__ == '__main__':
    main()
