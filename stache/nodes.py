"""
AST-узлы шаблона.

Неизменяемая иерархия узлов: текст, переменные и вложенные секции.
Корень дерева — секция с пустым именем.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""
    pass


@dataclass(frozen=True)
class ContentNode(TemplateNode):
    """
    Обычный текстовый контент в шаблоне.

    Выводится в результат как есть.
    """
    text: str


@dataclass(frozen=True)
class EscapedVariableNode(TemplateNode):
    """Переменная {{name}}; значение проходит через HTML-экранирование."""
    name: str


@dataclass(frozen=True)
class UnescapedVariableNode(TemplateNode):
    """Переменная {{{name}}} или {{&name}}; значение выводится без изменений."""
    name: str


@dataclass(frozen=True)
class SectionNode(TemplateNode):
    """
    Именованный блок {{#name}} ... {{/name}}.

    Показывает дочерние узлы один раз (true) или по разу на каждый
    элемент массива. Дочерние узлы хранятся кортежем, поэтому дерево
    можно безопасно разделять между параллельными рендерами.
    """
    name: str
    children: Tuple[TemplateNode, ...] = ()


def node_to_dict(node: TemplateNode) -> Dict[str, Any]:
    """Сериализует узел (и поддерево) в JSON-совместимый словарь."""
    if isinstance(node, ContentNode):
        return {"type": "content", "text": node.text}
    if isinstance(node, EscapedVariableNode):
        return {"type": "escaped", "name": node.name}
    if isinstance(node, UnescapedVariableNode):
        return {"type": "unescaped", "name": node.name}
    if isinstance(node, SectionNode):
        return {
            "type": "section",
            "name": node.name,
            "children": [node_to_dict(child) for child in node.children],
        }
    raise TypeError(f"Unknown node type: {type(node).__name__}")


__all__ = [
    "TemplateNode",
    "ContentNode",
    "EscapedVariableNode",
    "UnescapedVariableNode",
    "SectionNode",
    "node_to_dict",
]
