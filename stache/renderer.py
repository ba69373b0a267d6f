"""
Рендерер шаблонов.

Обходит дерево в глубину и дописывает результат в один буфер,
разрешая имена через стек контекстов. Секции показывают тело
один раз (true) или по разу на каждый элемент массива.
"""

from __future__ import annotations

import logging
from typing import Any, List

from .context import ContextStack
from .document import DocumentValue, ValueKind
from .errors import SectionTypeError
from .escape import escape_html
from .nodes import (
    TemplateNode, ContentNode, EscapedVariableNode, UnescapedVariableNode, SectionNode
)

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Рендерер дерева шаблона.

    Не хранит состояния между вызовами: буфер и стек контекстов
    создаются заново на каждый render, поэтому один экземпляр
    (и одно дерево) можно использовать из нескольких потоков.
    """

    def render(self, tree: SectionNode, data: Any) -> str:
        """
        Рендерит дерево против данных.

        Args:
            tree: Корневая секция, полученная от парсера
            data: DocumentValue или Python-значение в модели данных JSON

        Returns:
            Отрендеренный текст

        Raises:
            InputShapeError: Если data не является корректным документом
            SectionTypeError: Если секция связана не с bool и не с массивом
        """
        if tree is None:
            raise TypeError("tree must not be None")

        document = DocumentValue.wrap(data)
        buffer: List[str] = []
        stack = ContextStack(document)

        # Корень рендерится напрямую, без поиска пустого имени
        self._render_children(tree, buffer, stack)
        return "".join(buffer)

    def _render_children(self, section: SectionNode, buffer: List[str], stack: ContextStack) -> None:
        for child in section.children:
            self._render_node(child, buffer, stack)

    def _render_node(self, node: TemplateNode, buffer: List[str], stack: ContextStack) -> None:
        if isinstance(node, ContentNode):
            buffer.append(node.text)
        elif isinstance(node, EscapedVariableNode):
            buffer.append(escape_html(self._resolve_text(node.name, stack)))
        elif isinstance(node, UnescapedVariableNode):
            buffer.append(self._resolve_text(node.name, stack))
        elif isinstance(node, SectionNode):
            self._render_section(node, buffer, stack)
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")

    @staticmethod
    def _resolve_text(name: str, stack: ContextStack) -> str:
        value = stack.lookup(name)
        return value.to_text() if value is not None else ""

    def _render_section(self, section: SectionNode, buffer: List[str], stack: ContextStack) -> None:
        """
        Рендерит секцию.

        Имя ищется только в текущем кадре. Отсутствующее значение, false
        и пустой массив пропускают секцию целиком; true рендерит тело один
        раз; массив — по разу на элемент, каждый раз с элементом на вершине.
        """
        value = stack.lookup_top(section.name)

        if value is None:
            logger.debug("Section '%s' is not bound, skipped", section.name)
            return

        if value.kind == ValueKind.BOOL:
            if not value.raw:
                return
            with stack.scope(value):
                self._render_children(section, buffer, stack)
            return

        if value.kind == ValueKind.ARRAY:
            for element in value.elements():
                with stack.scope(element):
                    self._render_children(section, buffer, stack)
            return

        raise SectionTypeError(section.name, value.kind.value)


def render_tree(tree: SectionNode, data: Any) -> str:
    """Удобная функция: рендерит дерево новым TemplateRenderer."""
    return TemplateRenderer().render(tree, data)


__all__ = ["TemplateRenderer", "render_tree"]
