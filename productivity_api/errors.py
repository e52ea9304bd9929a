class ProductivityError(Exception):
    """Базовая ошибка приложения"""


class DuplicateEntityError(ProductivityError):
    """Запись с таким уникальным значением уже существует"""
