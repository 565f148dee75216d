"""
Вспомогательные утилиты: логирование, пути, размеры файлов
"""
