"""
Стек контекстов рендеринга.

Кадры — значения документа, текущий (самый внутренний) — последний.
Стек живёт только в пределах одного вызова render.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

from .document import DocumentValue


class ContextStack:
    """
    Упорядоченный стек значений документа.

    Переменные ищутся от вершины к основанию; секции смотрят
    только на вершину.
    """

    def __init__(self, root: DocumentValue):
        self._frames: List[DocumentValue] = [root]

    @property
    def top(self) -> DocumentValue:
        return self._frames[-1]

    def push(self, value: DocumentValue) -> None:
        self._frames.append(value)

    def pop(self) -> DocumentValue:
        if len(self._frames) == 1:
            raise RuntimeError("Cannot pop the root frame of a context stack")
        return self._frames.pop()

    @contextmanager
    def scope(self, value: DocumentValue) -> Iterator[ContextStack]:
        """Кладёт value на вершину на время блока with."""
        self.push(value)
        try:
            yield self
        finally:
            self.pop()

    def lookup(self, name: str) -> Optional[DocumentValue]:
        """
        Ищет свойство name от самого внутреннего кадра к внешним.

        Побеждает первый кадр-объект, у которого есть такое свойство.
        Кадры, не являющиеся объектами, пропускаются.
        """
        for frame in reversed(self._frames):
            found = frame.get_property(name)
            if found is not None:
                return found
        return None

    def lookup_top(self, name: str) -> Optional[DocumentValue]:
        """Ищет свойство name только в текущем кадре."""
        return self.top.get_property(name)


__all__ = ["ContextStack"]
