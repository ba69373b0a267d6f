from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, List

from .config import DEFAULT_CFG_FILE, StacheConfig, load_config
from .document import DATA_FORMATS, load_document
from .errors import StacheError
from .lexer import tokenize_template
from .nodes import node_to_dict
from .processor import TemplateProcessor
from .version import tool_version

# -------------------- Logging setup --------------------

_LOG = logging.getLogger("stache")

def _setup_logging_once() -> None:
    if getattr(_setup_logging_once, "_inited", False):
        return
    _setup_logging_once._inited = True  # type: ignore[attr-defined]
    level = logging.DEBUG if os.environ.get("STACHE_DEBUG") else logging.WARNING
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(message)s")
        h.setFormatter(fmt)
        _LOG.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stache",
        description="Logic-less template engine (Mustache subset)",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument(
        "--config",
        metavar="PATH",
        help=f"файл конфигурации (по умолчанию ./{DEFAULT_CFG_FILE}, если есть)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Отрендерить шаблон против данных")
    sp_render.add_argument("template", help="путь к файлу шаблона")
    sp_render.add_argument("data", help="путь к файлу данных (JSON/YAML) или - для stdin")
    sp_render.add_argument(
        "--format",
        choices=DATA_FORMATS,
        help="формат данных (по умолчанию — из конфига / по расширению)",
    )
    sp_render.add_argument(
        "--strict",
        action="store_true",
        help="считать несовпадающий закрывающий тег ошибкой",
    )

    sp_tokens = sub.add_parser("tokens", help="Поток токенов шаблона (JSON)")
    sp_tokens.add_argument("template", help="путь к файлу шаблона")

    sp_tree = sub.add_parser("tree", help="Дерево разбора шаблона (JSON)")
    sp_tree.add_argument("template", help="путь к файлу шаблона")
    sp_tree.add_argument("--strict", action="store_true", help="строгие закрывающие теги")

    return p


def _load_cli_config(ns: argparse.Namespace) -> StacheConfig:
    if ns.config:
        path = Path(ns.config)
        if not path.exists():
            raise ValueError(f"Config file not found: {path}")
        cfg = load_config(path)
    else:
        cfg = load_config(Path.cwd() / DEFAULT_CFG_FILE)

    if getattr(ns, "strict", False):
        cfg = replace(cfg, strict_closing_tags=True)
    fmt = getattr(ns, "format", None)
    if fmt:
        cfg = replace(cfg, data_format=fmt)
    return cfg


def _template_path(arg: str, cfg: StacheConfig) -> Path:
    """Путь к шаблону; имя без расширения дополняется template_suffix."""
    path = Path(arg)
    if path.exists():
        return path
    suffixed = path.with_name(path.name + cfg.template_suffix)
    if cfg.template_suffix and suffixed.exists():
        return suffixed
    raise ValueError(f"Template file not found: {path}")


def _read_template(arg: str, cfg: StacheConfig) -> str:
    return _template_path(arg, cfg).read_text(encoding="utf-8")


def _render(ns: argparse.Namespace, cfg: StacheConfig) -> str:
    processor = TemplateProcessor(cfg)

    # Данные из stdin
    if ns.data == "-":
        template = _read_template(ns.template, cfg)
        return processor.render_text(template, load_document(sys.stdin.read(), cfg.data_format))

    data_path = Path(ns.data)
    if not data_path.exists():
        raise ValueError(f"Data file not found: {data_path}")
    return processor.render_file(_template_path(ns.template, cfg), data_path)


def _jdumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def main(argv: List[str] | None = None) -> int:
    _setup_logging_once()
    ns = _build_parser().parse_args(argv)

    try:
        cfg = _load_cli_config(ns)

        if ns.cmd == "render":
            sys.stdout.write(_render(ns, cfg))
            return 0

        if ns.cmd == "tokens":
            tokens = tokenize_template(_read_template(ns.template, cfg))
            data = [
                {"type": t.type.value, "value": t.value, "line": t.line, "column": t.column}
                for t in tokens
            ]
            sys.stdout.write(_jdumps(data))
            return 0

        if ns.cmd == "tree":
            tree = TemplateProcessor(cfg).compile(_read_template(ns.template, cfg))
            sys.stdout.write(_jdumps(node_to_dict(tree)))
            return 0

    except StacheError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
