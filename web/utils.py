"""
Вспомогательные функции для web-интерфейса
"""
import logging
import shutil
from datetime import datetime, timedelta

from werkzeug.utils import secure_filename

from config import ALLOWED_EXTENSIONS, UPLOAD_FOLDER, OUTPUT_FOLDER
from imposer.config import ImpositionConfig

logger = logging.getLogger(__name__)

# Хранилище прогресса
progress_store = {}

SOURCE_PATTERN = 'source_*.pdf'


def allowed_file(filename):
    """Проверка разрешенных расширений файлов"""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def validate_uploaded_file(file) -> tuple[bool, str]:
    """Валидация загружаемого файла"""
    if not allowed_file(file.filename):
        return False, f"Неподдерживаемый формат файла: {file.filename}"

    file.seek(0, 2)
    file_size = file.tell()
    file.seek(0)

    if file_size > 100 * 1024 * 1024:
        return False, f"Файл слишком большой: {file.filename} ({file_size/1024/1024:.1f}MB)"

    if file_size == 0:
        return False, f"Файл пустой: {file.filename}"

    return True, "OK"


def update_progress(session_id, stage, progress, message=""):
    """Обновление прогресса обработки"""
    progress_store[session_id] = {
        'stage': stage,
        'progress': progress,
        'message': message,
        'timestamp': datetime.now().isoformat()
    }

    cleanup_old_progress()


def cleanup_old_progress():
    """Очистка старых записей прогресса"""
    cutoff_time = datetime.now() - timedelta(hours=1)
    to_remove = [session_id for session_id, data in progress_store.items()
                 if datetime.fromisoformat(data['timestamp']) < cutoff_time]

    for session_id in to_remove:
        del progress_store[session_id]


def session_dir(session_id):
    return UPLOAD_FOLDER / secure_filename(session_id)


def session_source_paths(session_id):
    """Исходные PDF сессии в порядке загрузки (пустой список, если сессии нет)"""
    directory = session_dir(session_id)
    if not directory.is_dir():
        return []
    return sorted(directory.glob(SOURCE_PATTERN))


def output_filename(session_id):
    return f"{secure_filename(session_id)}_imposition.pdf"


def save_uploaded_sources(session_id, files):
    """Сохранение загруженных PDF в каталог сессии; порядок файлов сохраняется"""
    for file in files:
        is_valid, message = validate_uploaded_file(file)
        if not is_valid:
            raise ValueError(message)

    directory = session_dir(session_id)
    directory.mkdir(parents=True, exist_ok=True)
    paths = []
    for number, file in enumerate(files, start=1):
        source_path = directory / f"source_{number:03d}.pdf"
        file.save(source_path)
        paths.append(source_path)
        logger.info(f"Сохранён исходный файл {secure_filename(file.filename)} для сессии {session_id}")
    return paths


def config_from_request(data) -> ImpositionConfig:
    """Настройки импозиции из JSON запроса"""
    settings = data.get('settings', data) if data else {}
    return ImpositionConfig.from_dict(settings)


def cleanup_session(session_id):
    """Очистка файлов сессии"""
    directory = session_dir(session_id)
    if directory.exists():
        shutil.rmtree(directory)
        logger.info(f"Очищена сессия: {session_id}")

    stem = output_filename(session_id)[:-len('.pdf')]
    for output_file in OUTPUT_FOLDER.glob(f"{stem}*.pdf"):
        output_file.unlink()

    progress_store.pop(session_id, None)


def cleanup_old_sessions():
    """Периодическая очистка старых сессий"""
    cutoff_time = datetime.now() - timedelta(hours=1)

    for session_dir in UPLOAD_FOLDER.iterdir():
        if session_dir.is_dir():
            dir_time = datetime.fromtimestamp(session_dir.stat().st_mtime)
            if dir_time < cutoff_time:
                shutil.rmtree(session_dir, ignore_errors=True)
                logger.info(f"Автоочистка сессии: {session_dir.name}")

    for output_file in OUTPUT_FOLDER.iterdir():
        if output_file.is_file():
            file_time = datetime.fromtimestamp(output_file.stat().st_mtime)
            if file_time < cutoff_time:
                output_file.unlink()
