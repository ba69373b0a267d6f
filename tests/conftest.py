from pathlib import Path

import pytest


def write(p: Path, text: str) -> Path:
    """Записывает текст в файл, создавая родительские директории при необходимости."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


@pytest.fixture
def tmpproj(tmp_path: Path, monkeypatch):
    """Минимальный проект: шаблон, данные в JSON и YAML, рабочая директория — корень."""
    root = tmp_path
    write(root / "hello.mustache", "Hello {{name}}!{{#items}} [{{x}}]{{/items}}\n")
    write(root / "data.json", '{"name": "<World>", "items": [{"x": 1}, {"x": 2}]}')
    write(root / "data.yaml", "name: YAML\nitems:\n  - x: a\n")
    monkeypatch.chdir(root)
    return root
