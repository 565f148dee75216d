# -*- coding: utf-8 -*-
# services/validation_service.py
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import fitz  # PyMuPDF

from imposer.config import ImpositionConfig
from imposer.models import ValidationResult
from imposer.source_document import as_path_list

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 100 * 1024 * 1024


class ValidationService:
    def validate_source(self, file_path: Path, config: ImpositionConfig) -> ValidationResult:
        """Проверка исходного PDF перед импозицией"""
        return self.validate_sources([file_path], config)

    def validate_sources(self, file_paths, config: ImpositionConfig) -> ValidationResult:
        """Проверка одного или нескольких PDF, которые будут склеены по порядку"""
        result = ValidationResult()
        paths = as_path_list(file_paths)
        if not paths:
            result.add_error("Не указан исходный PDF")
            return result

        sizes = []
        for file_path in paths:
            file_sizes = self._page_sizes(file_path, result)
            if file_sizes is not None:
                sizes.extend(file_sizes)
        if not result.is_valid:
            return result

        if not sizes:
            result.add_error("PDF не содержит страниц")
            return result

        distinct = set()
        for number, (width, height) in enumerate(sizes):
            if width <= 0 or height <= 0:
                result.add_error(f"Страница {number + 1} имеет недопустимый размер {width}x{height}")
            else:
                distinct.add((round(width, 1), round(height, 1)))

        if len(distinct) > 1:
            result.add_warning(f"Страницы разного размера: {len(distinct)} вариантов")

        n = config.arrangement.pages_per_signature
        if n > 0 and len(sizes) % n:
            blanks = n - len(sizes) % n
            result.add_warning(f"Будет добавлено пустых страниц: {blanks}")

        logger.info(f"Проверка {', '.join(p.name for p in paths)}: {len(sizes)} стр., "
                    f"ошибок {len(result.errors)}, предупреждений {len(result.warnings)}")
        return result

    @staticmethod
    def _page_sizes(file_path: Path, result: ValidationResult) -> Optional[List[Tuple[float, float]]]:
        if not file_path.exists():
            result.add_error(f"Файл не существует: {file_path.name}")
            return None

        file_size = file_path.stat().st_size
        if file_size == 0:
            result.add_error(f"Файл пустой: {file_path.name}")
            return None
        if file_size > MAX_FILE_SIZE:
            result.add_error(f"Файл слишком большой (>100MB): {file_path.name}")
            return None

        try:
            with fitz.open(str(file_path)) as doc:
                return [(page.rect.width, page.rect.height) for page in doc]
        except RuntimeError as e:
            result.add_error(f"Ошибка чтения PDF {file_path.name}: {e}")
            return None
