"""
Лексический анализатор шаблонов.

Один проход слева направо: находит теги {{ ... }} и {{{ ... }}},
а весь текст между ними отдаёт как CONTENT. Конкатенация исходных
форм токенов в точности воспроизводит шаблон.
"""

from __future__ import annotations

import re
from typing import List

from .errors import LexerError
from .tokens import Token, TokenType


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Теги ищутся нежадно и без перекрытий, самое левое совпадение побеждает.
    Тип тега определяется по сигилу сразу после открывающих скобок.
    """

    # Двойная или тройная форма; внутри тега фигурные скобки запрещены
    _TAG_PATTERN = re.compile(r"([{]{2}[^{}]+?[}]{2})|([{]{3}[^{}]+?[}]{3})")

    # Сигил → тип токена (только для двойной формы)
    _SIGILS = {
        "#": TokenType.SECTION_OPEN,
        "/": TokenType.SECTION_CLOSE,
        "^": TokenType.INVERTED_SECTION,
        "&": TokenType.UNESCAPED_VAR,
        "!": TokenType.COMMENT,
    }

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.

        Raises:
            LexerError: Если найденный тег не удалось классифицировать
        """
        tokens: List[Token] = []

        for match in self._TAG_PATTERN.finditer(self.text):
            # Текст перед тегом
            if match.start() > self.position:
                tokens.append(self._make_content(self.text[self.position:match.start()]))

            tokens.append(self._make_tag(match.group(0)))

        # Хвост после последнего тега
        if self.position < self.length:
            tokens.append(self._make_content(self.text[self.position:]))

        return tokens

    def _make_content(self, raw: str) -> Token:
        token = Token(TokenType.CONTENT, raw, self.position, self.line, self.column, raw)
        self._advance(raw)
        return token

    def _make_tag(self, raw: str) -> Token:
        """
        Классифицирует найденный тег и создаёт для него токен.

        Тройная форма всегда даёт неэкранируемую переменную. В двойной
        форме смотрим на первый символ внутри скобок.
        """
        if raw.startswith("{{{") and raw.endswith("}}}"):
            token_type = TokenType.UNESCAPED_VAR
            interior = raw[3:-3]
            # {{{&name}}} равносилен {{{name}}}
            value = (interior[1:] if interior.startswith("&") else interior).strip()
        elif raw.startswith("{{") and raw.endswith("}}"):
            interior = raw[2:-2]
            token_type = self._SIGILS.get(interior[:1], TokenType.ESCAPED_VAR)
            if token_type == TokenType.COMMENT:
                # Комментарий сохраняет внутренние пробелы
                value = interior[1:]
            elif token_type == TokenType.ESCAPED_VAR:
                value = interior.strip()
            else:
                value = interior[1:].strip()
        else:
            raise LexerError(
                f"Unknown mustache tag: {raw!r}",
                self.line, self.column, self.position
            )

        token = Token(token_type, value, self.position, self.line, self.column, raw)
        self._advance(raw)
        return token

    def _advance(self, consumed: str) -> None:
        """
        Перемещает позицию за поглощённый фрагмент,
        обновляя номера строк и колонок.
        """
        newlines = consumed.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(consumed) - consumed.rfind("\n")
        else:
            self.column += len(consumed)
        self.position += len(consumed)


def tokenize_template(text: str) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список токенов в порядке следования в документе

    Raises:
        LexerError: При ошибке лексического анализа
    """
    lexer = TemplateLexer(text)
    return lexer.tokenize()


__all__ = ["TemplateLexer", "tokenize_template"]
