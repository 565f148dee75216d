"""
Точка входа для запуска web-сервиса
"""
import os
import sys

# Добавляем корневую директорию в Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

if __name__ == '__main__':
    from app import create_app

    app = create_app()

    # Получаем хост и порт из переменных окружения
    host = os.getenv('FLASK_HOST', '0.0.0.0')
    port = int(os.getenv('FLASK_PORT', 5000))
    debug = os.getenv('FLASK_DEBUG', '0') == '1'

    print(f"🚀 Запуск Imposer на {host}:{port}")
    print(f"📁 Каталог загрузок: {os.getenv('IMPOSER_UPLOAD_FOLDER', 'uploads')}")

    app.run(host=host, port=port, debug=debug)
