"""HTML-экранирование значений экранируемых переменных."""

from __future__ import annotations

import html


def escape_html(text: str) -> str:
    """Заменяет &, <, >, " и ' на HTML-сущности."""
    return html.escape(text, quote=True)


__all__ = ["escape_html"]
