"""
Базовые исключения шаблонизатора.

Все ожидаемые ошибки, которые должны показываться пользователю
чистым сообщением (без трассировки), наследуются от StacheError.

Ошибки программирования и баги НЕ наследуются от StacheError —
они пробрасываются с полной трассировкой.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tokens import Token


class StacheError(Exception):
    """
    Базовый класс для всех пользовательских ошибок stache.

    Сигнализирует о проблемах, которые пользователь может исправить:
    некорректный шаблон, неподходящие данные, битый конфиг.
    """
    pass


class LexerError(StacheError):
    """Ошибка лексического анализа: тег неизвестного вида."""

    def __init__(self, message: str, line: int, column: int, position: int):
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column
        self.position = position


class ParserError(StacheError):
    """Ошибка синтаксического анализа (только в строгом режиме)."""

    def __init__(self, message: str, token: Token):
        super().__init__(f"{message} at {token.line}:{token.column} (token: {token.type.name})")
        self.token = token
        self.line = token.line
        self.column = token.column


class SectionTypeError(StacheError):
    """Имя секции связано со значением, которое не является ни bool, ни массивом."""

    def __init__(self, name: str, kind: str):
        super().__init__(f"Section '{name}' is bound to {kind}; expected a bool or an array")
        self.name = name
        self.kind = kind


class InputShapeError(StacheError):
    """Переданные данные не являются корректным документом."""
    pass


class ConfigLoadError(StacheError, ValueError):
    """Ошибка загрузки конфигурации с указанием поля."""
    pass


__all__ = [
    "StacheError",
    "LexerError",
    "ParserError",
    "SectionTypeError",
    "InputShapeError",
    "ConfigLoadError",
]
