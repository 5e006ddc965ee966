"""Unit tests for the SQL tokenizer."""

from __future__ import annotations

import pytest

from row_cursor.core.exceptions import SQLParseError
from row_cursor.core.tokenizer import (
    CODE,
    COMMENT,
    IDENTIFIER,
    STRING,
    strip_comments,
    tokenize,
    unquote,
)


class TestTokenize:
    def test_plain_code_is_one_token(self) -> None:
        assert tokenize("SELECT id FROM users") == [(CODE, "SELECT id FROM users")]

    def test_string_literal(self) -> None:
        tokens = tokenize("SELECT 'a, b' AS x")
        assert tokens == [(CODE, "SELECT "), (STRING, "'a, b'"), (CODE, " AS x")]

    def test_doubled_quote_stays_inside_literal(self) -> None:
        tokens = tokenize("SELECT 'it''s' FROM t")
        assert (STRING, "'it''s'") in tokens

    def test_quoted_identifiers(self) -> None:
        tokens = tokenize('SELECT "user id", `name` FROM t')
        kinds = [kind for kind, _ in tokens]
        assert kinds.count(IDENTIFIER) == 2

    def test_line_comment_ends_at_newline(self) -> None:
        tokens = tokenize("SELECT id -- the id\nFROM t")
        assert (COMMENT, "-- the id") in tokens
        assert tokens[-1] == (CODE, "\nFROM t")

    def test_block_comment(self) -> None:
        tokens = tokenize("SELECT /* a, b */ id")
        assert (COMMENT, "/* a, b */") in tokens

    def test_comment_markers_inside_literal_are_text(self) -> None:
        tokens = tokenize("SELECT '-- not a comment' AS x")
        assert not any(kind == COMMENT for kind, _ in tokens)

    def test_concatenation_reproduces_input(self) -> None:
        sql = "SELECT 'x' AS \"y\", `z` /* c */ FROM t -- end"
        assert "".join(text for _, text in tokenize(sql)) == sql

    @pytest.mark.parametrize(
        "sql",
        ["SELECT 'open", 'SELECT "open', "SELECT `open", "SELECT /* open"],
    )
    def test_unterminated_raises(self, sql: str) -> None:
        with pytest.raises(SQLParseError, match="Unterminated"):
            tokenize(sql)


class TestUnquote:
    def test_strips_matching_quotes(self) -> None:
        assert unquote("'total'") == "total"
        assert unquote('"user id"') == "user id"
        assert unquote("`name`") == "name"

    def test_undoes_doubled_quotes(self) -> None:
        assert unquote("'it''s'") == "it's"

    def test_bare_text_unchanged(self) -> None:
        assert unquote("total") == "total"


class TestStripComments:
    def test_replaces_comments_with_space(self) -> None:
        assert strip_comments("SELECT id/* x */FROM t") == "SELECT id FROM t"

    def test_keeps_literals(self) -> None:
        sql = "SELECT '/* kept */' AS x"
        assert strip_comments(sql) == sql
