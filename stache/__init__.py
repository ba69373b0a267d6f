"""
stache — шаблонизатор без логики (подмножество Mustache).

Конвейер: tokenize → parse → render. Разобранное дерево неизменяемо
и может рендериться сколько угодно раз против разных данных.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from .config import StacheConfig, load_config
from .document import DocumentValue, ValueKind, load_document, load_document_file
from .errors import (
    StacheError, LexerError, ParserError, SectionTypeError, InputShapeError, ConfigLoadError
)
from .escape import escape_html
from .lexer import tokenize_template
from .nodes import (
    TemplateNode, ContentNode, EscapedVariableNode, UnescapedVariableNode, SectionNode
)
from .parser import ParserOptions, parse_tokens
from .processor import TemplateProcessor
from .renderer import render_tree
from .tokens import Token, TokenType


def tokenize(template: str) -> List[Token]:
    """Разбивает шаблон на токены."""
    return tokenize_template(template)


def parse(tokens: Iterable[Token], options: Optional[ParserOptions] = None) -> SectionNode:
    """Строит неизменяемое дерево шаблона из токенов."""
    return parse_tokens(tokens, options)


def render(tree: SectionNode, data: Any) -> str:
    """Рендерит дерево против данных (DocumentValue или Python-значение)."""
    return render_tree(tree, data)


def render_template(template: str, data: Any) -> str:
    """
    tokenize → parse → render одной функцией.

    Если data — строка, она разбирается как JSON-документ.
    """
    if isinstance(data, str):
        data = load_document(data)
    return render(parse(tokenize(template)), data)


__all__ = [
    "tokenize",
    "parse",
    "render",
    "render_template",
    "Token",
    "TokenType",
    "TemplateNode",
    "ContentNode",
    "EscapedVariableNode",
    "UnescapedVariableNode",
    "SectionNode",
    "ParserOptions",
    "DocumentValue",
    "ValueKind",
    "load_document",
    "load_document_file",
    "escape_html",
    "TemplateProcessor",
    "StacheConfig",
    "load_config",
    "StacheError",
    "LexerError",
    "ParserError",
    "SectionTypeError",
    "InputShapeError",
    "ConfigLoadError",
]
