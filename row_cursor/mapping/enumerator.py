"""Top-level SELECT expression enumerator.

Walks only as much SQL as is needed to list the output expressions of the
outermost ``SELECT`` clause: it does not understand joins, subqueries, or
``WHERE`` semantics. Each expression is tagged with its kind and, where
present, its alias and qualification.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import NamedTuple

from row_cursor.core.enums import ExpressionKind
from row_cursor.core.exceptions import SQLParseError
from row_cursor.core.tokenizer import CODE, IDENTIFIER, STRING, tokenize, unquote

# Lexeme kinds; the names match the regex groups below
_WORD = "word"
_NUMBER = "number"
_PARAM = "param"
_PUNCT = "punct"

_CODE_LEXEME = re.compile(
    r"(?P<space>\s+)"
    r"|(?P<word>[A-Za-z_][\w$]*)"
    r"|(?P<number>\d+(?:\.\d*)?(?:[eE][+-]?\d+)?|\.\d+)"
    r"|(?P<param>[:@][A-Za-z_]\w*|\?)"
    r"|(?P<punct>::|<=|>=|<>|!=|\|\||\S)"
)

# Words that end the expression list when met at depth 0
_TERMINATORS = frozenset(
    {
        "FROM",
        "INTO",
        "WHERE",
        "GROUP",
        "HAVING",
        "ORDER",
        "LIMIT",
        "OFFSET",
        "FETCH",
        "UNION",
        "INTERSECT",
        "EXCEPT",
        "WINDOW",
        "FOR",
    }
)

_MODIFIERS = frozenset(
    {
        "ALL",
        "DISTINCT",
        "DISTINCTROW",
        "HIGH_PRIORITY",
        "STRAIGHT_JOIN",
        "SQL_SMALL_RESULT",
        "SQL_BIG_RESULT",
        "SQL_BUFFER_RESULT",
        "SQL_NO_CACHE",
        "SQL_CALC_FOUND_ROWS",
    }
)

# A trailing word that is one of these is never an alias
_NOT_ALIAS = frozenset({"AS", "END", "NULL", "TRUE", "FALSE", "UNKNOWN", "ASC", "DESC"})

# A word that, when it precedes the trailing lexeme, makes it an operand
_OPERAND_PREFIX = frozenset(
    {
        "AND",
        "OR",
        "NOT",
        "IS",
        "IN",
        "LIKE",
        "ILIKE",
        "BETWEEN",
        "CASE",
        "WHEN",
        "THEN",
        "ELSE",
        "AS",
        "DISTINCT",
        "ALL",
        "ANY",
        "SOME",
        "EXISTS",
        "COLLATE",
    }
)

# Typed-literal keywords; they prefix an operand only when a string follows
_TYPED_LITERALS = frozenset({"DATE", "TIME", "TIMESTAMP", "INTERVAL", "BINARY"})

_LITERAL_WORDS = frozenset({"NULL", "TRUE", "FALSE", "UNKNOWN"})

_CALL_TRAILERS = frozenset({"OVER", "FILTER", "WITHIN"})


class _Lexeme(NamedTuple):
    kind: str
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class SelectExpression:
    """One top-level output expression of a SELECT clause.

    Attributes:
        kind: Function call, column reference, or any other expression.
        text: The expression source text, without its alias.
        alias: The alias with quoting removed, or ``None``.
        alias_quote: The quote character that wrapped the alias, if any.
        explicit_alias: ``True`` when the alias was introduced with ``AS``.
        parts: Unquoted name segments of a column reference
            (``("u", "first_name")`` for ``u.first_name``); empty otherwise.
    """

    kind: ExpressionKind
    text: str
    alias: str | None = None
    alias_quote: str | None = None
    explicit_alias: bool = False
    parts: tuple[str, ...] = ()

    @property
    def is_qualified(self) -> bool:
        return len(self.parts) > 1

    @property
    def is_wildcard(self) -> bool:
        return bool(self.parts) and self.parts[-1] == "*"


def _lex(sql: str) -> list[_Lexeme]:
    """Flatten *sql* into lexemes, dropping whitespace and comments."""
    lexemes: list[_Lexeme] = []
    offset = 0
    for kind, text in tokenize(sql):
        if kind == STRING:
            lexemes.append(_Lexeme(STRING, text, offset, offset + len(text)))
        elif kind == IDENTIFIER:
            lexemes.append(_Lexeme(IDENTIFIER, text, offset, offset + len(text)))
        elif kind == CODE:
            for m in _CODE_LEXEME.finditer(text):
                if m.lastgroup == "space":
                    continue
                lexemes.append(
                    _Lexeme(m.lastgroup, m.group(), offset + m.start(), offset + m.end())
                )
        offset += len(text)
    return lexemes


def _is_word(lexeme: _Lexeme, *words: str) -> bool:
    return lexeme.kind == _WORD and lexeme.text.upper() in words


def _skip_group(lexemes: list[_Lexeme], i: int) -> int:
    """Return the index just past the parenthesized group opening at *i*."""
    depth = 0
    for j in range(i, len(lexemes)):
        if lexemes[j].text == "(":
            depth += 1
        elif lexemes[j].text == ")":
            depth -= 1
            if depth == 0:
                return j + 1
    raise SQLParseError("Unbalanced parentheses")


def _select_list(lexemes: list[_Lexeme]) -> list[list[_Lexeme]]:
    """Return the lexemes of each top-level SELECT expression, in order."""
    depth = 0
    start = None
    for i, lexeme in enumerate(lexemes):
        if lexeme.text == "(":
            depth += 1
        elif lexeme.text == ")":
            depth -= 1
        elif depth == 0 and _is_word(lexeme, "SELECT"):
            start = i + 1
            break
    if start is None:
        return []

    i = start
    while i < len(lexemes) and lexemes[i].kind == _WORD:
        word = lexemes[i].text.upper()
        if word not in _MODIFIERS:
            break
        i += 1
        # PostgreSQL DISTINCT ON (...)
        if word == "DISTINCT" and i < len(lexemes) and _is_word(lexemes[i], "ON"):
            if i + 1 < len(lexemes) and lexemes[i + 1].text == "(":
                i = _skip_group(lexemes, i + 1)

    expressions: list[list[_Lexeme]] = []
    current: list[_Lexeme] = []
    depth = 0
    for lexeme in lexemes[i:]:
        if depth == 0:
            if lexeme.text == ";" or (
                lexeme.kind == _WORD and lexeme.text.upper() in _TERMINATORS
            ):
                break
            if lexeme.text == ",":
                expressions.append(current)
                current = []
                continue
        if lexeme.text == "(":
            depth += 1
        elif lexeme.text == ")":
            depth -= 1
            if depth < 0:
                break
        current.append(lexeme)

    if depth > 0:
        raise SQLParseError("Unbalanced parentheses")
    if current or expressions:
        expressions.append(current)
    for expr in expressions:
        if not expr:
            raise SQLParseError("Empty expression in SELECT list")
    return expressions


def _is_name(lexeme: _Lexeme) -> bool:
    return lexeme.kind == IDENTIFIER or (
        lexeme.kind == _WORD and lexeme.text.upper() not in _LITERAL_WORDS
    )


def _ends_operand(expr: list[_Lexeme], index: int) -> bool:
    """True if ``expr[index]`` can close an operand, so the next lexeme is an alias."""
    lexeme = expr[index]
    if lexeme.kind == _WORD:
        # a segment of a qualified name is never a keyword
        if index > 0 and expr[index - 1].text == ".":
            return True
        word = lexeme.text.upper()
        if word in _TYPED_LITERALS:
            return index + 1 < len(expr) and expr[index + 1].kind != STRING
        return word not in _OPERAND_PREFIX
    if lexeme.kind in (IDENTIFIER, STRING, _NUMBER, _PARAM):
        return True
    return lexeme.text == ")"


def _split_alias(
    expr: list[_Lexeme],
) -> tuple[list[_Lexeme], _Lexeme | None, bool]:
    """Split *expr* into ``(body, alias_lexeme, explicit)``."""
    last = expr[-1]
    if last.kind not in (_WORD, IDENTIFIER, STRING):
        return expr, None, False
    if last.kind == _WORD and last.text.upper() in _NOT_ALIAS:
        return expr, None, False
    if len(expr) >= 3 and _is_word(expr[-2], "AS"):
        return expr[:-2], last, True
    if len(expr) >= 2 and _ends_operand(expr, len(expr) - 2):
        return expr[:-1], last, False
    return expr, None, False


def _column_parts(body: list[_Lexeme]) -> tuple[str, ...] | None:
    """Return name segments if *body* is ``name(.name)*(.*)?`` or ``*``."""
    if len(body) == 1 and body[0].text == "*":
        return ("*",)
    if len(body) % 2 == 0:
        return None
    parts: list[str] = []
    for index, lexeme in enumerate(body):
        if index % 2 == 1:
            if lexeme.text != ".":
                return None
            continue
        is_last = index == len(body) - 1
        if is_last and lexeme.text == "*" and index > 0:
            parts.append("*")
        elif _is_name(lexeme):
            parts.append(unquote(lexeme.text))
        else:
            return None
    return tuple(parts)


def _is_call(body: list[_Lexeme]) -> bool:
    """True if *body* is ``name(.name)*( ... )`` optionally followed by OVER/FILTER."""
    i = 0
    if not body or not _is_name(body[0]):
        return False
    while i + 2 < len(body) and body[i + 1].text == "." and _is_name(body[i + 2]):
        i += 2
    i += 1
    if i >= len(body) or body[i].text != "(":
        return False
    end = _skip_group(body, i)
    return end == len(body) or (
        body[end].kind == _WORD and body[end].text.upper() in _CALL_TRAILERS
    )


def _classify(sql: str, expr: list[_Lexeme]) -> SelectExpression:
    body, alias_lexeme, explicit = _split_alias(expr)
    alias = alias_quote = None
    if alias_lexeme is not None:
        alias = unquote(alias_lexeme.text)
        if alias_lexeme.kind != _WORD:
            alias_quote = alias_lexeme.text[0]

    text = sql[body[0].start : body[-1].end]
    parts = _column_parts(body)
    if parts is not None:
        kind = ExpressionKind.COLUMN
    elif _is_call(body):
        kind = ExpressionKind.FUNCTION
        parts = ()
    else:
        kind = ExpressionKind.EXPRESSION
        parts = ()

    return SelectExpression(
        kind=kind,
        text=text,
        alias=alias,
        alias_quote=alias_quote,
        explicit_alias=explicit,
        parts=parts,
    )


class SelectClauseEnumerator:
    """Default ``SelectEnumerator``: a top-level-comma-aware scanner."""

    def enumerate(self, sql: str) -> list[SelectExpression]:
        """Return the outermost SELECT clause's expressions, left to right.

        Returns an empty list when *sql* has no top-level ``SELECT``.

        Raises:
            SQLParseError: On unterminated quotes or unbalanced parentheses.
        """
        return list(_enumerate_cached(sql))


@lru_cache(maxsize=256)
def _enumerate_cached(sql: str) -> tuple[SelectExpression, ...]:
    lexemes = _lex(sql)
    return tuple(_classify(sql, expr) for expr in _select_list(lexemes))


def enumerate_select(sql: str) -> list[SelectExpression]:
    """Module-level shortcut for ``SelectClauseEnumerator().enumerate(sql)``."""
    return SelectClauseEnumerator().enumerate(sql)
