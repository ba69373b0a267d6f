"""
Парсер шаблонов.

Преобразует последовательность токенов в дерево секций за один проход.
Рекурсия моделирует вложенность секций, позиция в потоке хранится
в явном курсоре, который передаётся во все рекурсивные вызовы.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .errors import ParserError
from .lexer import tokenize_template
from .nodes import (
    TemplateNode, ContentNode, EscapedVariableNode, UnescapedVariableNode, SectionNode
)
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)


@dataclass
class ParserOptions:
    """Настройки парсера."""
    # Несовпадающий закрывающий тег: False — молча отбросить, True — ParserError
    strict_closing_tags: bool = False


@dataclass
class TokenCursor:
    """Курсор по потоку токенов; только продвигается вперёд."""
    tokens: Sequence[Token]
    position: int = 0

    def is_at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def advance(self) -> Token:
        """Возвращает текущий токен и сдвигается к следующему."""
        token = self.tokens[self.position]
        self.position += 1
        return token


@dataclass
class _SectionBuilder:
    """Изменяемая заготовка секции; замораживается в SectionNode."""
    name: str
    children: List[TemplateNode] = field(default_factory=list)

    def freeze(self) -> SectionNode:
        return SectionNode(name=self.name, children=tuple(self.children))


class TemplateParser:
    """
    Рекурсивный парсер для шаблонов.

    Обрабатывает последовательность токенов и строит дерево, корректно
    обрабатывая вложенные секции. Незакрытые секции закрываются неявно
    в конце ввода, инвертированные секции отбрасываются.
    """

    def __init__(self, tokens: Sequence[Token], options: Optional[ParserOptions] = None):
        self.tokens = tokens
        self.options = options or ParserOptions()

    def parse(self) -> SectionNode:
        """
        Парсит всю последовательность токенов.

        Returns:
            Корневая секция с пустым именем

        Raises:
            ParserError: При несовпадающем закрывающем теге в строгом режиме
        """
        cursor = TokenCursor(self.tokens)
        return self._parse_section("", cursor)

    def _parse_section(self, name: str, cursor: TokenCursor) -> SectionNode:
        """
        Собирает секцию name до её закрывающего тега или конца ввода.
        """
        builder = _SectionBuilder(name)

        while not cursor.is_at_end():
            token = cursor.advance()

            if token.type == TokenType.CONTENT:
                builder.children.append(ContentNode(text=token.value))
            elif token.type == TokenType.ESCAPED_VAR:
                builder.children.append(EscapedVariableNode(name=token.value))
            elif token.type == TokenType.UNESCAPED_VAR:
                builder.children.append(UnescapedVariableNode(name=token.value))
            elif token.type == TokenType.COMMENT:
                continue
            elif token.type == TokenType.SECTION_OPEN:
                builder.children.append(self._parse_section(token.value, cursor))
            elif token.type == TokenType.SECTION_CLOSE:
                if token.value == name:
                    return builder.freeze()
                self._handle_mismatched_close(token, name)
            elif token.type == TokenType.INVERTED_SECTION:
                logger.debug("Inverted section '%s' at %d:%d is not supported, dropped",
                             token.value, token.line, token.column)
            else:
                raise ParserError(f"Unexpected token {token.type.name}", token)

        if name:
            logger.debug("Section '%s' closed implicitly at end of input", name)
        return builder.freeze()

    def _handle_mismatched_close(self, token: Token, current: str) -> None:
        if self.options.strict_closing_tags:
            expected = f"'{{{{/{current}}}}}'" if current else "no closing tag"
            raise ParserError(
                f"Closing tag '{token.value}' does not match, expected {expected}", token
            )
        logger.debug("Discarding mismatched closing tag '%s' at %d:%d (open section: '%s')",
                     token.value, token.line, token.column, current)


def parse_tokens(tokens: Iterable[Token], options: Optional[ParserOptions] = None) -> SectionNode:
    """
    Строит дерево шаблона из готовой последовательности токенов.

    Raises:
        ParserError: При ошибке синтаксического анализа (строгий режим)
    """
    if tokens is None:
        raise TypeError("tokens must not be None")
    return TemplateParser(list(tokens), options).parse()


def parse_template(text: str, options: Optional[ParserOptions] = None) -> SectionNode:
    """
    Удобная функция для парсинга шаблона из текста.

    Args:
        text: Исходный текст шаблона
        options: Настройки парсера

    Returns:
        Корневая секция шаблона

    Raises:
        LexerError: При ошибке лексического анализа
        ParserError: При ошибке синтаксического анализа
    """
    return parse_tokens(tokenize_template(text), options)


__all__ = [
    "ParserOptions",
    "TokenCursor",
    "TemplateParser",
    "parse_tokens",
    "parse_template",
]
