"""
Лексические типы.

Определяет типы токенов шаблона и сам токен с позиционной информацией.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""

    # Текстовый контент между тегами
    CONTENT = "CONTENT"

    # {{! ... }}
    COMMENT = "COMMENT"

    # {{# ... }} / {{/ ... }}
    SECTION_OPEN = "SECTION_OPEN"
    SECTION_CLOSE = "SECTION_CLOSE"

    # {{^ ... }} — распознаётся, но не рендерится
    INVERTED_SECTION = "INVERTED_SECTION"

    # {{ ... }} / {{{ ... }}} и {{& ... }}
    ESCAPED_VAR = "ESCAPED_VAR"
    UNESCAPED_VAR = "UNESCAPED_VAR"


# Канонические формы тегов для восстановления исходника без raw
_CANONICAL_FORMS = {
    TokenType.COMMENT: "{{{{!{}}}}}",
    TokenType.SECTION_OPEN: "{{{{#{}}}}}",
    TokenType.SECTION_CLOSE: "{{{{/{}}}}}",
    TokenType.INVERTED_SECTION: "{{{{^{}}}}}",
    TokenType.UNESCAPED_VAR: "{{{{{{{}}}}}}}",
    TokenType.ESCAPED_VAR: "{{{{{}}}}}",
}


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.

    raw хранит точный срез исходного текста, из которого получен токен;
    по нему шаблон восстанавливается без потерь.
    """
    type: TokenType
    value: str
    position: int = 0    # Позиция в исходном тексте
    line: int = 1        # Номер строки (начиная с 1)
    column: int = 1      # Номер колонки (начиная с 1)
    raw: str = ""

    def source(self) -> str:
        """
        Возвращает исходную форму токена.

        Для токенов без raw собирает каноническую форму тега
        (пробелы внутри тега и маркер '&' при этом не сохраняются).
        """
        if self.raw:
            return self.raw
        if self.type == TokenType.CONTENT:
            return self.value
        return _CANONICAL_FORMS[self.type].format(self.value)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


__all__ = ["TokenType", "Token"]
