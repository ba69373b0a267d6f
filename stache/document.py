"""
Документ с данными для рендеринга.

Рендерер работает с данными только через DocumentValue: проверка вида,
доступ к свойству объекта, обход массива и каноническая текстовая форма.
Конкретный формат (JSON, YAML, готовые Python-объекты) скрыт за обёрткой.
"""

from __future__ import annotations

import datetime as _dt
import enum
import json
import math
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import InputShapeError


class ValueKind(enum.Enum):
    """Виды значений документа."""
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"


class JsonInt(int):
    """Целое из JSON-текста; помнит исходную запись."""

    def __new__(cls, literal: str):
        obj = super().__new__(cls, literal)
        obj.literal = literal
        return obj


class JsonFloat(float):
    """Дробное из JSON-текста; помнит исходную запись (1.10, 1e3)."""

    def __new__(cls, literal: str):
        obj = super().__new__(cls, literal)
        obj.literal = literal
        return obj


def _kind_of(raw: Any) -> Optional[ValueKind]:
    # bool проверяется раньше чисел: bool — подкласс int
    if raw is None:
        return ValueKind.NULL
    if isinstance(raw, bool):
        return ValueKind.BOOL
    if isinstance(raw, (int, float)):
        return ValueKind.NUMBER
    if isinstance(raw, str):
        return ValueKind.STRING
    if isinstance(raw, Mapping):
        return ValueKind.OBJECT
    if isinstance(raw, (list, tuple)):
        return ValueKind.ARRAY
    return None


def _validate(raw: Any, path: str) -> None:
    """Проверяет, что значение укладывается в модель данных JSON."""
    kind = _kind_of(raw)
    if kind is None:
        raise InputShapeError(f"{path}: unsupported value of type {type(raw).__name__}")
    if kind == ValueKind.NUMBER and isinstance(raw, float) and not math.isfinite(raw):
        raise InputShapeError(f"{path}: non-finite number {raw!r}")
    if kind == ValueKind.OBJECT:
        for key, value in raw.items():
            if not isinstance(key, str):
                raise InputShapeError(f"{path}: object key {key!r} is not a string")
            _validate(value, f"{path}.{key}")
    elif kind == ValueKind.ARRAY:
        for index, value in enumerate(raw):
            _validate(value, f"{path}[{index}]")


def _to_json(raw: Any) -> str:
    """Компактный JSON; числа с исходной записью сохраняют её."""
    literal = getattr(raw, "literal", None)
    if literal is not None:
        return literal
    if isinstance(raw, Mapping):
        items = (f"{json.dumps(key, ensure_ascii=False)}:{_to_json(value)}" for key, value in raw.items())
        return "{" + ",".join(items) + "}"
    if isinstance(raw, (list, tuple)):
        return "[" + ",".join(_to_json(value) for value in raw) + "]"
    return json.dumps(raw, ensure_ascii=False)


class DocumentValue:
    """
    Неизменяемое представление узла документа.

    Создаётся через DocumentValue.wrap (с проверкой всего дерева)
    или через load_document. Дочерние значения оборачиваются лениво
    и повторно не проверяются.
    """

    __slots__ = ("_raw", "_kind")

    def __init__(self, raw: Any, kind: ValueKind):
        self._raw = raw
        self._kind = kind

    @classmethod
    def wrap(cls, raw: Any) -> DocumentValue:
        """
        Оборачивает Python-значение в модели данных JSON.

        Raises:
            InputShapeError: Если значение (или вложенное) не из модели JSON
        """
        if isinstance(raw, DocumentValue):
            return raw
        _validate(raw, "$")
        return cls._child(raw)

    @classmethod
    def _child(cls, raw: Any) -> DocumentValue:
        return cls(raw, _kind_of(raw))  # type: ignore[arg-type]

    @property
    def kind(self) -> ValueKind:
        return self._kind

    @property
    def raw(self) -> Any:
        return self._raw

    def is_object(self) -> bool:
        return self._kind == ValueKind.OBJECT

    def is_array(self) -> bool:
        return self._kind == ValueKind.ARRAY

    def get_property(self, name: str) -> Optional[DocumentValue]:
        """
        Возвращает свойство объекта или None, если его нет.

        Для значений, не являющихся объектом, свойство всегда отсутствует.
        """
        if self._kind != ValueKind.OBJECT or name not in self._raw:
            return None
        return self._child(self._raw[name])

    def elements(self) -> Iterator[DocumentValue]:
        """Элементы массива в исходном порядке."""
        if self._kind != ValueKind.ARRAY:
            raise TypeError(f"Cannot iterate a {self._kind.value} value")
        for item in self._raw:
            yield self._child(item)

    def __iter__(self) -> Iterator[DocumentValue]:
        return self.elements()

    def __len__(self) -> int:
        if self._kind != ValueKind.ARRAY:
            raise TypeError(f"A {self._kind.value} value has no length")
        return len(self._raw)

    def to_text(self) -> str:
        """
        Каноническая текстовая форма значения.

        Строки — как есть, null — пустая строка, остальное — так,
        как значение записал бы JSON (true, 10000, 1.5, {"a":1}).
        Числа, прочитанные из JSON-текста, выводятся в исходной записи.
        """
        if self._kind == ValueKind.STRING:
            return self._raw
        if self._kind == ValueKind.NULL:
            return ""
        return _to_json(self._raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DocumentValue):
            return NotImplemented
        return self._kind == other._kind and self._raw == other._raw

    def __repr__(self) -> str:
        return f"DocumentValue({self._kind.name}, {self.to_text()!r})"


# --------------------------------------------------------------------------- #
# Загрузка из текста
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")

DATA_FORMATS = ("json", "yaml", "auto")

_SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def _normalize_yaml(raw: Any) -> Any:
    """Приводит типы YAML, которых нет в JSON (даты), к строкам."""
    if isinstance(raw, (_dt.date, _dt.datetime)):
        return raw.isoformat()
    if isinstance(raw, dict):
        return {key: _normalize_yaml(value) for key, value in raw.items()}
    if isinstance(raw, list):
        return [_normalize_yaml(value) for value in raw]
    return raw


def _reject_constant(name: str) -> Any:
    raise InputShapeError(f"Invalid JSON constant: {name}")


def _load_json(text: str) -> Any:
    try:
        return json.loads(
            text, parse_float=JsonFloat, parse_int=JsonInt, parse_constant=_reject_constant
        )
    except json.JSONDecodeError as e:
        raise InputShapeError(f"Invalid JSON document: {e}") from e


def _load_yaml(text: str) -> Any:
    try:
        raw = _yaml.load(text)
    except YAMLError as e:
        raise InputShapeError(f"Invalid YAML document: {e}") from e
    return _normalize_yaml(raw)


def load_document(text: str, fmt: str = "json") -> DocumentValue:
    """
    Разбирает текст документа и оборачивает корень в DocumentValue.

    Args:
        text: Текст документа
        fmt: "json", "yaml" или "auto" (сначала JSON, затем YAML)

    Raises:
        InputShapeError: Если текст не является корректным документом
        ValueError: Для неизвестного формата
    """
    if fmt not in DATA_FORMATS:
        raise ValueError(f"Unknown data format '{fmt}'. Expected one of: {', '.join(DATA_FORMATS)}")

    if fmt == "json":
        raw = _load_json(text)
    elif fmt == "yaml":
        raw = _load_yaml(text)
    else:
        try:
            raw = _load_json(text)
        except InputShapeError:
            # JSON — подмножество YAML, так что YAML даст итоговый диагноз
            raw = _load_yaml(text)

    return DocumentValue.wrap(raw)


def detect_format(path: Path, default: str = "auto") -> str:
    """Определяет формат данных по расширению файла."""
    return _SUFFIX_FORMATS.get(path.suffix.lower(), default)


def load_document_file(path: Path, fmt: str = "auto") -> DocumentValue:
    """
    Загружает документ из файла.

    При fmt="auto" формат определяется по расширению (.json, .yaml, .yml).
    """
    if fmt == "auto":
        fmt = detect_format(path)
    text = path.read_text(encoding="utf-8")
    return load_document(text, fmt)


__all__ = [
    "ValueKind",
    "DocumentValue",
    "JsonInt",
    "JsonFloat",
    "DATA_FORMATS",
    "load_document",
    "load_document_file",
    "detect_format",
]
