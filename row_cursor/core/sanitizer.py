"""Query text sanitizer.

Optional checks applied to a cursor's SQL before it reaches the driver.
Cursors only read, so by default the statement must start with ``SELECT``
(or ``WITH`` for a CTE), and a paginated base query must not carry its own
``LIMIT``; the paginated cursor appends one per page.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from row_cursor.core.exceptions import SQLParseError, SQLSanitizationError
from row_cursor.core.tokenizer import CODE, COMMENT, strip_comments, tokenize

# Matches the first SQL keyword (used for verb allow-listing)
_FIRST_KEYWORD = re.compile(r"^\s*(\w+)")

# Words and parentheses; a word right after : or @ is a placeholder name
_WORD = re.compile(r"(?<![:@\w])[A-Za-z_]\w*|[()]")

_LIMIT_WORDS = frozenset({"LIMIT", "FETCH"})


def _code_tokens(sql: str) -> list[tuple[str, str]]:
    try:
        return tokenize(sql)
    except SQLParseError as e:
        raise SQLSanitizationError(str(e)) from e


def _check_single_statement(sql: str) -> None:
    """Raise if *sql* contains a semicolon followed by non-whitespace content."""
    tokens = _code_tokens(sql)
    for index, (kind, content) in enumerate(tokens):
        if kind != CODE:
            continue
        for i, ch in enumerate(content):
            if ch != ";":
                continue
            rest = content[i + 1 :] + "".join(
                text for k, text in tokens[index + 1 :] if k != COMMENT
            )
            if rest.strip():
                raise SQLSanitizationError(
                    "Multiple SQL statements are not permitted"
                )


def _check_verb(sql: str, allowed: frozenset[str]) -> None:
    """Raise if the leading SQL keyword is not in *allowed*."""
    m = _FIRST_KEYWORD.match(sql)
    verb = m.group(1).upper() if m else ""
    if verb not in allowed:
        raise SQLSanitizationError(
            f"SQL verb '{verb}' is not permitted; allowed: {sorted(allowed)}"
        )


def _check_no_limit(sql: str) -> None:
    """Raise if a top-level ``LIMIT`` or ``FETCH`` clause is present."""
    depth = 0
    for kind, content in _code_tokens(sql):
        if kind != CODE:
            continue
        for m in _WORD.finditer(content):
            word = m.group()
            if word == "(":
                depth += 1
            elif word == ")":
                depth -= 1
            elif depth == 0 and word.upper() in _LIMIT_WORDS:
                raise SQLSanitizationError(
                    f"Paginated queries must not contain a {word.upper()} clause; "
                    "the page size limit is appended automatically"
                )


@dataclass
class SQLSanitizer:
    """Configurable checks for cursor SQL.

    Attributes:
        strip_comments: Strip ``--`` and ``/* */`` comments before execution.
        block_multiple_statements: Reject SQL that contains a statement-
            terminating ``;`` followed by additional content.
        allowed_verbs: Leading keywords that are permitted. ``None`` means no
            restriction.
        reject_limit: For paginated queries, reject a base query that already
            has a top-level ``LIMIT``/``FETCH`` clause.
    """

    strip_comments: bool = True
    block_multiple_statements: bool = True
    allowed_verbs: frozenset[str] | None = field(
        default_factory=lambda: frozenset({"SELECT", "WITH"})
    )
    reject_limit: bool = True

    def sanitize(self, sql: str, *, paginated: bool = False) -> str:
        """Apply all configured checks to *sql* and return the (cleaned) SQL.

        Raises:
            SQLSanitizationError: If any enabled check fails.
        """
        if self.strip_comments:
            try:
                sql = strip_comments(sql)
            except SQLParseError as e:
                raise SQLSanitizationError(str(e)) from e
        if self.block_multiple_statements:
            _check_single_statement(sql)
        if self.allowed_verbs is not None:
            _check_verb(sql, self.allowed_verbs)
        if paginated and self.reject_limit:
            _check_no_limit(sql)
        return sql
