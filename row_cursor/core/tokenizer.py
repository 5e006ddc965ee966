"""Quote- and comment-aware SQL tokenizer.

Splits SQL text into ``(kind, text)`` tokens so that callers can scan the
``'code'`` parts without tripping over quotes, parentheses, or keywords
that appear inside literals, quoted identifiers, or comments.
"""

from __future__ import annotations

from row_cursor.core.exceptions import SQLParseError

CODE = "code"
STRING = "string"
IDENTIFIER = "identifier"
COMMENT = "comment"

# quote character -> token kind
_QUOTES = {"'": STRING, '"': IDENTIFIER, "`": IDENTIFIER}

_QUOTE_NAMES = {
    "'": "string literal",
    '"': "double-quoted identifier",
    "`": "backtick-quoted identifier",
}


def _scan_quoted(sql: str, start: int, quote: str) -> int:
    """Return the index just past the quoted run opening at *start*.

    A doubled quote character is an escape and does not end the run.

    Raises:
        SQLParseError: If the run is never closed.
    """
    n = len(sql)
    j = start + 1
    while j < n:
        if sql[j] == quote:
            if j + 1 < n and sql[j + 1] == quote:
                j += 2
                continue
            return j + 1
        j += 1
    raise SQLParseError(f"Unterminated {_QUOTE_NAMES[quote]} at offset {start}")


def tokenize(sql: str) -> list[tuple[str, str]]:
    """Split *sql* into code, string, identifier, and comment tokens.

    Single-quoted literals become ``'string'`` tokens; double-quoted and
    backtick-quoted names become ``'identifier'`` tokens; ``--`` line comments
    and ``/* */`` block comments become ``'comment'`` tokens. Everything else
    is ``'code'``. Concatenating the token texts reproduces *sql* exactly.

    Raises:
        SQLParseError: If a literal, identifier, or block comment is unterminated.
    """
    tokens: list[tuple[str, str]] = []
    i = 0
    n = len(sql)
    last = 0

    while i < n:
        ch = sql[i]
        if ch in _QUOTES:
            end = _scan_quoted(sql, i, ch)
            kind = _QUOTES[ch]
        elif sql.startswith("--", i):
            newline = sql.find("\n", i)
            end = n if newline == -1 else newline
            kind = COMMENT
        elif sql.startswith("/*", i):
            close = sql.find("*/", i + 2)
            if close == -1:
                raise SQLParseError(f"Unterminated block comment at offset {i}")
            end = close + 2
            kind = COMMENT
        else:
            i += 1
            continue

        if i > last:
            tokens.append((CODE, sql[last:i]))
        tokens.append((kind, sql[i:end]))
        last = i = end

    if last < n:
        tokens.append((CODE, sql[last:]))

    return tokens


def unquote(text: str) -> str:
    """Strip one level of SQL quoting from *text*, undoing doubled quotes."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        quote = text[0]
        return text[1:-1].replace(quote * 2, quote)
    return text


def strip_comments(sql: str) -> str:
    """Remove comments while preserving literals and quoted identifiers."""
    parts: list[str] = []
    for kind, text in tokenize(sql):
        if kind == COMMENT:
            parts.append(" ")
        else:
            parts.append(text)
    return "".join(parts)
