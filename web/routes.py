"""
Flask routes для web-интерфейса
"""
import logging
from datetime import datetime
from io import BytesIO

from flask import request, send_file, jsonify

from config import OUTPUT_FOLDER
from imposer.exceptions import ImpositionError
from imposer.imposition_app import compute_statistics
from imposer.models import SheetSide
from imposer.preview import render_sheet_preview, preview_to_png
from imposer.source_document import open_sources
from services.imposition_service import ImpositionService
from web.utils import (
    save_uploaded_sources, session_source_paths, cleanup_session,
    progress_store, config_from_request
)
from web.background_tasks import start_background_processing

logger = logging.getLogger(__name__)

imposition_service = ImpositionService()


def configure_routes(app):
    """Настройка маршрутов Flask"""

    @app.route('/')
    def index():
        """Описание сервиса"""
        return jsonify({
            'service': 'imposer',
            'endpoints': ['/upload', '/stats', '/layout', '/preview', '/process',
                          '/progress', '/download', '/cleanup']
        })

    @app.route('/upload', methods=['POST'])
    def upload_source():
        """Загрузка исходных PDF; несколько файлов склеиваются в порядке загрузки"""
        files = [f for f in request.files.getlist('source') if f.filename]
        if not files:
            return jsonify({'error': 'Не загружен исходный PDF'}), 400

        session_id = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        try:
            source_paths = save_uploaded_sources(session_id, files)
            page_count = open_sources(source_paths).page_count()
        except ValueError as e:
            cleanup_session(session_id)
            return jsonify({'error': str(e)}), 400
        except RuntimeError as e:
            logger.error(f"Ошибка чтения PDF: {e}")
            cleanup_session(session_id)
            return jsonify({'error': f'Ошибка чтения PDF: {e}'}), 400

        logger.info(f"Загружено файлов для сессии {session_id}: {len(source_paths)}, {page_count} стр.")
        return jsonify({'session_id': session_id, 'page_count': page_count,
                        'files': len(source_paths)}), 200

    @app.route('/stats', methods=['POST'])
    def stats():
        """Статистика без сборки документа"""
        data = request.get_json(silent=True) or {}
        session_id = data.get('session_id')
        try:
            if session_id:
                source_paths = session_source_paths(session_id)
                if not source_paths:
                    return jsonify({'error': 'Сессия не найдена'}), 404
                page_count = open_sources(source_paths).page_count()
            elif 'page_count' in data:
                page_count = int(data['page_count'])
            else:
                return jsonify({'error': 'Не указан session_id или page_count'}), 400

            report = compute_statistics(config_from_request(data), page_count)
        except ImpositionError as e:
            return jsonify({'error': str(e)}), 400
        except ValueError as e:
            return jsonify({'error': f'Некорректное значение: {e}'}), 400

        return jsonify(report.to_dict()), 200

    @app.route('/layout', methods=['POST'])
    def layout():
        """Запуск расчёта раскладки; новый запрос заменяет предыдущий"""
        data = request.get_json(silent=True) or {}
        session_id = data.get('session_id')
        if not session_id:
            return jsonify({'error': 'Не указан session_id'}), 400

        source_paths = session_source_paths(session_id)
        if not source_paths:
            return jsonify({'error': 'Сессия не найдена'}), 404

        try:
            config = config_from_request(data)
            source = open_sources(source_paths)
        except ImpositionError as e:
            return jsonify({'error': str(e)}), 400

        job = imposition_service.submit(session_id, config, source)
        return jsonify({'session_id': session_id, 'generation': job.generation}), 202

    @app.route('/layout/<session_id>')
    def layout_status(session_id):
        """Последний завершённый расчёт раскладки"""
        job = imposition_service.latest(session_id)
        if job is None:
            return jsonify({'ready': False}), 200
        if job.error is not None:
            return jsonify({'ready': True, 'generation': job.generation,
                            'error': str(job.error)}), 200
        return jsonify({
            'ready': True,
            'generation': job.generation,
            'statistics': job.result.statistics.to_dict(),
            'sheets': len(job.result.sheets)
        }), 200

    @app.route('/preview/<session_id>/<int:sheet_index>/<side>')
    def preview(session_id, sheet_index, side):
        """PNG-схема стороны листа из последнего расчёта"""
        job = imposition_service.latest(session_id)
        if job is None or job.result is None:
            return jsonify({'error': 'Раскладка ещё не рассчитана'}), 404
        if not 0 <= sheet_index < len(job.result.sheets):
            return jsonify({'error': 'Лист не найден'}), 404
        try:
            image = render_sheet_preview(job.result.sheets[sheet_index], SheetSide(side))
        except ValueError as e:
            return jsonify({'error': str(e)}), 404

        return send_file(BytesIO(preview_to_png(image)), mimetype='image/png')

    @app.route('/process', methods=['POST'])
    def process_imposition():
        """Запуск обработки в фоновом режиме"""
        data = request.get_json(silent=True) or {}
        session_id = data.get('session_id')

        if not session_id:
            return jsonify({'error': 'Не указан session_id'}), 400

        source_paths = session_source_paths(session_id)
        if not source_paths:
            return jsonify({'error': 'Сессия не найдена'}), 404

        start_background_processing(session_id, source_paths, data)

        return jsonify({
            'success': True,
            'message': 'Обработка запущена в фоновом режиме'
        }), 200

    @app.route('/progress/<session_id>')
    def get_progress(session_id):
        """Получение прогресса обработки"""
        return jsonify(progress_store.get(session_id, {}))

    @app.route('/download/<filename>')
    def download_file(filename):
        """Скачивание готового файла"""
        file_path = OUTPUT_FOLDER / filename
        if file_path.exists() and file_path.parent == OUTPUT_FOLDER:
            logger.info(f"Скачивание файла: {filename}")
            return send_file(file_path, as_attachment=True)
        return jsonify({'error': 'Файл не найден'}), 404

    @app.route('/cleanup', methods=['POST'])
    def cleanup():
        """Очистка временных файлов"""
        data = request.get_json(silent=True) or {}
        session_id = data.get('session_id')

        if session_id:
            imposition_service.forget(session_id)
            cleanup_session(session_id)

        return jsonify({'success': True}), 200
