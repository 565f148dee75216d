# utils/helpers.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def default_output_path(source_file: str, suffix: str = "_imposed") -> Path:
    """Путь результата рядом с исходным файлом"""
    source = Path(source_file)
    return source.with_name(f"{sanitize_filename(source.stem)}{suffix}.pdf")


def sanitize_filename(filename: str) -> str:
    """Очистка имени файла от недопустимых символов"""
    invalid_chars = '<>:"/\\|?*'
    for char in invalid_chars:
        filename = filename.replace(char, '_')
    return filename


def format_file_size(bytes_size: int) -> str:
    """Форматирование размера файла"""
    if bytes_size == 0:
        return '0 B'
    for unit in ['B', 'KB', 'MB', 'GB']:
        if bytes_size < 1024.0:
            return f"{bytes_size:.2f} {unit}"
        bytes_size /= 1024.0
    return f"{bytes_size:.2f} TB"
