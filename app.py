"""
Главный Flask application
"""
import logging
import os
import sys

# Добавляем текущую директорию в Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from config import LOGGING_CONFIG, SECRET_KEY, MAX_CONTENT_LENGTH

# Настройка логирования ПЕРЕД импортом Flask
logging.basicConfig(**LOGGING_CONFIG)
logger = logging.getLogger(__name__)


def create_app(testing: bool = False):
    """Создание Flask приложения"""
    from flask import Flask, jsonify
    from imposer.exceptions import ImpositionError
    from web.routes import configure_routes
    from web.utils import cleanup_old_sessions

    app = Flask(__name__)
    app.secret_key = SECRET_KEY
    app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH
    app.config['TESTING'] = testing

    configure_routes(app)

    @app.errorhandler(ImpositionError)
    def handle_imposition_error(error):
        logger.error(f"Ошибка импозиции: {error}")
        return jsonify({'error': str(error)}), 400

    @app.errorhandler(413)
    def handle_too_large(error):
        return jsonify({'error': 'Файл слишком большой (>100MB)'}), 413

    if not testing:
        # Очистка старых сессий при старте
        cleanup_old_sessions()

    logger.info("✅ Imposer application initialized")

    return app
