"""Тесты для парсера шаблонов TemplateParser."""
import dataclasses
import logging
from typing import List

import pytest

from stache.errors import ParserError
from stache.lexer import tokenize_template
from stache.nodes import (
    ContentNode, EscapedVariableNode, UnescapedVariableNode, SectionNode
)
from stache.parser import (
    ParserOptions, TemplateParser, TokenCursor, parse_template, parse_tokens
)
from stache.tokens import Token, TokenType


class TestTemplateParser:
    """Основные тесты для TemplateParser."""

    def test_parse_empty_template(self):
        """Пустой поток токенов даёт пустой корень."""
        tokens: List[Token] = []
        parser = TemplateParser(tokens)

        tree = parser.parse()

        assert tree == SectionNode(name="", children=())

    def test_parse_simple_text(self):
        """Парсинг простого текста."""
        tree = parse_template("Hello, world!")

        assert tree.name == ""
        assert tree.children == (ContentNode(text="Hello, world!"),)

    def test_parse_variables(self):
        """Экранируемые и неэкранируемые переменные."""
        tree = parse_template("{{a}} {{{b}}} {{&c}}")

        assert tree.children == (
            EscapedVariableNode(name="a"),
            ContentNode(text=" "),
            UnescapedVariableNode(name="b"),
            ContentNode(text=" "),
            UnescapedVariableNode(name="c"),
        )

    def test_comments_are_discarded(self):
        """Комментарий не оставляет ни узла, ни текста."""
        tree = parse_template("a{{! note }}b")

        assert tree.children == (ContentNode(text="a"), ContentNode(text="b"))

    def test_parse_section(self):
        """Секция собирает всё до своего закрывающего тега."""
        tree = parse_template("x{{#items}}<{{name}}>{{/items}}y")

        assert tree.children == (
            ContentNode(text="x"),
            SectionNode(name="items", children=(
                ContentNode(text="<"),
                EscapedVariableNode(name="name"),
                ContentNode(text=">"),
            )),
            ContentNode(text="y"),
        )

    def test_nested_sections(self):
        """Вложенные секции строят вложенные узлы."""
        tree = parse_template("{{#a}}1{{#b}}2{{/b}}3{{/a}}")

        outer = tree.children[0]
        assert isinstance(outer, SectionNode)
        assert outer.name == "a"
        assert outer.children == (
            ContentNode(text="1"),
            SectionNode(name="b", children=(ContentNode(text="2"),)),
            ContentNode(text="3"),
        )

    @pytest.mark.parametrize("template, top_nodes", [
        ("afdfadfa{{name}}fdafdafa", 3),
        ("{{lastName}}afdfadfa{{naame}}fdafdafa", 4),
        ("{{#section}}afdfadfa{{/section}}fdafdafa", 2),
        ("bbbbbb {{#section}} afdfadfa {{/section}} fdafdafa", 3),
        ("bbbbbb {{#section}} afd{{#Second}} fafad {{/Second}} fadfa {{/section}} fdafdafa", 3),
    ])
    def test_top_level_node_count(self, template, top_nodes):
        """Количество узлов верхнего уровня."""
        assert len(parse_template(template).children) == top_nodes

    def test_unclosed_section_closes_at_end(self):
        """Незакрытая секция закрывается неявно в конце ввода."""
        tree = parse_template("{{#a}}x{{#b}}y")

        assert tree.children == (
            SectionNode(name="a", children=(
                ContentNode(text="x"),
                SectionNode(name="b", children=(ContentNode(text="y"),)),
            )),
        )


class TestLenientParsing:
    """Отбрасывание инвертированных секций и несовпадающих закрывающих тегов."""

    def test_inverted_section_is_dropped(self, caplog):
        """Инвертированная секция не создаёт узла; её тело остаётся на уровне выше."""
        with caplog.at_level(logging.DEBUG, logger="stache.parser"):
            tree = parse_template("{{^x}}a{{/x}}b")

        assert tree.children == (ContentNode(text="a"), ContentNode(text="b"))
        assert "Inverted section 'x'" in caplog.text

    def test_mismatched_close_is_discarded(self):
        """Чужой закрывающий тег молча отбрасывается."""
        tree = parse_template("{{#a}}x{{/b}}y{{/a}}z")

        assert tree.children == (
            SectionNode(name="a", children=(ContentNode(text="x"), ContentNode(text="y"))),
            ContentNode(text="z"),
        )

    def test_stray_close_at_top_level(self):
        """Закрывающий тег без открывающего на верхнем уровне игнорируется."""
        tree = parse_template("a{{/nothing}}b")

        assert tree.children == (ContentNode(text="a"), ContentNode(text="b"))

    def test_strict_mode_rejects_mismatched_close(self):
        """В строгом режиме несовпадающий закрывающий тег — ошибка."""
        options = ParserOptions(strict_closing_tags=True)

        with pytest.raises(ParserError, match="Closing tag 'b' does not match") as exc_info:
            parse_template("{{#a}}\n  {{/b}}", options)

        assert (exc_info.value.line, exc_info.value.column) == (2, 3)

    def test_strict_mode_accepts_balanced_template(self):
        """Сбалансированный шаблон парсится в строгом режиме так же."""
        template = "{{#a}}{{#b}}x{{/b}}{{/a}}"
        options = ParserOptions(strict_closing_tags=True)

        assert parse_template(template, options) == parse_template(template)


class TestParseResult:
    """Свойства результата парсинга."""

    def test_parse_is_deterministic(self):
        """Повторный разбор даёт структурно идентичное дерево."""
        template = "{{#a}}{{x}}{{#b}}{{{y}}}{{/b}}{{/a}}tail"

        first = parse_tokens(tokenize_template(template))
        second = parse_tokens(tokenize_template(template))

        assert first == second
        assert hash(first) == hash(second)

    def test_tree_is_frozen(self):
        """Дерево неизменяемо после парсинга."""
        tree = parse_template("{{#a}}x{{/a}}")

        assert isinstance(tree.children, tuple)
        with pytest.raises(dataclasses.FrozenInstanceError):
            tree.name = "changed"
        with pytest.raises(dataclasses.FrozenInstanceError):
            tree.children[0].children = ()

    def test_accepts_any_iterable_of_tokens(self):
        """parse_tokens принимает генератор токенов."""
        tokens = tokenize_template("a{{b}}")

        tree = parse_tokens(iter(tokens))

        assert tree.children == (ContentNode(text="a"), EscapedVariableNode(name="b"))

    def test_none_tokens_rejected(self):
        with pytest.raises(TypeError):
            parse_tokens(None)


class TestTokenCursor:

    def test_cursor_moves_forward_only(self):
        tokens = tokenize_template("a{{b}}")
        cursor = TokenCursor(tokens)

        assert cursor.advance().type == TokenType.CONTENT
        assert not cursor.is_at_end()
        assert cursor.advance().type == TokenType.ESCAPED_VAR
        assert cursor.is_at_end()
        assert cursor.position == 2
