# -*- coding: utf-8 -*-
# imposer/exceptions.py
from typing import Optional


class ImpositionError(Exception):
    """Базовое исключение движка импозиции"""

    def __init__(self, message: str, page_index: Optional[int] = None,
                 sheet_index: Optional[int] = None, slot_index: Optional[int] = None):
        self.message = message
        self.page_index = page_index
        self.sheet_index = sheet_index
        self.slot_index = slot_index
        super().__init__(self._format())

    def _format(self) -> str:
        context = []
        if self.page_index is not None:
            context.append(f"page={self.page_index}")
        if self.sheet_index is not None:
            context.append(f"sheet={self.sheet_index}")
        if self.slot_index is not None:
            context.append(f"slot={self.slot_index}")
        if context:
            return f"{self.message} ({', '.join(context)})"
        return self.message


class InvalidConfiguration(ImpositionError):
    """Ошибка конфигурации импозиции"""
    pass


class InvalidGeometry(ImpositionError):
    """Недопустимые размеры страницы или слота"""
    pass


class AssemblyFailure(ImpositionError):
    """Ошибка сборки выходного документа"""
    pass
