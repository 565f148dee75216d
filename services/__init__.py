"""
Сервисы фоновой импозиции и проверки исходных файлов
"""
