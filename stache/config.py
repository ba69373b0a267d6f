from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .document import DATA_FORMATS
from .errors import ConfigLoadError

SCHEMA_VERSION = 1
DEFAULT_CFG_FILE = "stache.yaml"

# --------------------------------------------------------------------------- #
# ДЕФОЛТЫ
# --------------------------------------------------------------------------- #
_DEFAULT_CFG: Dict[str, Any] = {
    "schema_version": SCHEMA_VERSION,
    # несовпадающий {{/name}}: false — молча отбросить, true — ошибка парсинга
    "strict_closing_tags": False,
    "data_format": "auto",
    "template_suffix": ".mustache",
}

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class StacheConfig:
    """Итоговая конфигурация шаблонизатора."""
    schema_version: int = SCHEMA_VERSION
    strict_closing_tags: bool = False
    data_format: str = "auto"
    template_suffix: str = ".mustache"


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Накладываем значения пользователя поверх дефолтов."""
    cfg = _DEFAULT_CFG.copy()
    cfg.update(raw)                      # пользовательские ключи перекрывают
    return cfg


def _check_types(cfg: Dict[str, Any], path: Path) -> None:
    known = {f.name: f for f in fields(StacheConfig)}
    for key, value in cfg.items():
        if key not in known:
            raise ConfigLoadError(f"{path}: unknown key '{key}'")
        expected = type(_DEFAULT_CFG[key])
        # bool — подкласс int, поэтому сравниваем типы строго
        if type(value) is not expected:
            raise ConfigLoadError(
                f"{path}: '{key}' must be {expected.__name__}, got {type(value).__name__}"
            )
    if cfg["data_format"] not in DATA_FORMATS:
        raise ConfigLoadError(
            f"{path}: 'data_format' must be one of {', '.join(DATA_FORMATS)}, got '{cfg['data_format']}'"
        )


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(path: Path) -> StacheConfig:
    """
    Загрузить stache.yaml.

    • Если файла нет — вернуть дефолты.
    • Если schema_version отсутствует — считаем, что это актуальная версия.
    • Неизвестные ключи и значения не того типа — ConfigLoadError.
    """
    if not path.exists():
        return StacheConfig()

    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigLoadError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigLoadError(f"{path}: top level must be a mapping")

    if raw.get("schema_version", SCHEMA_VERSION) != SCHEMA_VERSION:
        raise ConfigLoadError(
            f"Unsupported config schema {raw.get('schema_version')} "
            f"(tool expects {SCHEMA_VERSION})"
        )

    cfg = _merge_defaults(raw)
    _check_types(cfg, path)
    return StacheConfig(**cfg)


__all__ = ["SCHEMA_VERSION", "DEFAULT_CFG_FILE", "StacheConfig", "load_config"]
