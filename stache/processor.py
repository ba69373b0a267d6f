"""
Процессор шаблонов.

Публичный фасад, объединяющий лексер, парсер и рендерер: принимает
текст шаблона и данные в любом поддерживаемом виде, кэширует
разобранные деревья в пределах экземпляра.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .config import StacheConfig
from .document import DocumentValue, load_document, load_document_file
from .nodes import SectionNode
from .parser import ParserOptions, parse_template
from .renderer import TemplateRenderer

logger = logging.getLogger(__name__)


class TemplateProcessor:
    """
    Основной процессор шаблонов.

    Ошибки лексера, парсера и рендерера пробрасываются без обёртки,
    чтобы вызывающий код мог их различать.
    """

    def __init__(self, config: Optional[StacheConfig] = None):
        """
        Args:
            config: Конфигурация; по умолчанию — дефолты StacheConfig
        """
        self.config = config or StacheConfig()
        self.parser_options = ParserOptions(strict_closing_tags=self.config.strict_closing_tags)
        self.renderer = TemplateRenderer()

        # Кэш деревьев по тексту шаблона
        self._template_cache: Dict[str, SectionNode] = {}

    def compile(self, template: str) -> SectionNode:
        """
        Возвращает дерево шаблона, разбирая его только при первом обращении.

        Raises:
            LexerError: При ошибке лексического анализа
            ParserError: При ошибке синтаксического анализа
        """
        cached = self._template_cache.get(template)
        if cached is not None:
            logger.debug("Template cache hit (%d chars)", len(template))
            return cached

        tree = parse_template(template, self.parser_options)
        self._template_cache[template] = tree
        return tree

    def render_text(self, template: str, data: Any) -> str:
        """
        Рендерит текст шаблона против данных.

        data может быть DocumentValue, Python-значением в модели JSON
        или текстом документа (разбирается в формате из конфигурации).
        """
        return self.renderer.render(self.compile(template), self._as_document(data))

    def render_file(self, template_path: Path, data_path: Path) -> str:
        """Рендерит шаблон из файла против документа из файла."""
        template = template_path.read_text(encoding="utf-8")
        document = load_document_file(data_path, self.config.data_format)
        return self.renderer.render(self.compile(template), document)

    def clear_cache(self) -> None:
        self._template_cache.clear()

    def _as_document(self, data: Any) -> DocumentValue:
        if isinstance(data, str):
            return load_document(data, self.config.data_format)
        return DocumentValue.wrap(data)


__all__ = ["TemplateProcessor"]
