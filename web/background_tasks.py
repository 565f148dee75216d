"""
Фоновые задачи обработки
"""
import logging
from threading import Thread

from web.utils import progress_store, update_progress, output_filename

logger = logging.getLogger(__name__)


def background_processing(session_id, source_paths, settings_data):
    """Фоновая импозиция и сборка PDF"""
    from config import OUTPUT_FOLDER
    from imposer.exceptions import ImpositionError
    from imposer.imposition_app import ImpositionApp
    from services.validation_service import ValidationService
    from utils.helpers import format_file_size
    from web.utils import config_from_request

    try:
        update_progress(session_id, "initializing", 5, "Инициализация обработки...")
        imposition = ImpositionApp(config_from_request(settings_data))
        imposition.config.validate()

        update_progress(session_id, "validating", 30, "Проверка файлов...")
        validation = ValidationService().validate_sources(source_paths, imposition.config)
        if not validation.is_valid:
            _handle_error(session_id, validation.get_report())
            return

        update_progress(session_id, "generating", 60, "Создание PDF...")
        output_file = OUTPUT_FOLDER / output_filename(session_id)
        written = imposition.process(source_paths, str(output_file))

        size = sum(path.stat().st_size for path in written)
        update_progress(session_id, "complete", 100, f"Готово! ({format_file_size(size)})")
        progress_store[session_id].update({
            'download_urls': [f'/download/{path.name}' for path in written],
            'validation_report': validation.get_report(),
            'success': True
        })

    except ImpositionError as e:
        logger.error(f"Ошибка импозиции для сессии {session_id}: {e}")
        _handle_error(session_id, str(e))
    except Exception as e:
        logger.exception(f"Ошибка фоновой обработки: {e}")
        _handle_error(session_id, str(e))


def _handle_error(session_id, message):
    """Обработка ошибки обработки"""
    update_progress(session_id, "error", 100, "Ошибка обработки")
    progress_store[session_id].update({
        'error': message,
        'success': False
    })


def start_background_processing(session_id, source_paths, settings_data):
    """Запуск фоновой обработки"""
    thread = Thread(
        target=background_processing,
        args=(session_id, source_paths, settings_data)
    )
    thread.daemon = True
    thread.start()
    return thread
