"""Query definitions.

A ``QueryDefinition`` is the immutable description of what a cursor runs:
SQL text, parameters, and, for keyset pagination, the page size and the
identifier column. It is validated on construction so that configuration
mistakes surface before any I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from row_cursor.core.exceptions import ConfigurationError
from row_cursor.core.params import coerce_params
from row_cursor.core.tokenizer import CODE, COMMENT, tokenize


def _statement_body(sql: str) -> str:
    """Return *sql* with trailing comments and semicolons removed."""
    tokens = tokenize(sql)
    while tokens:
        kind, text = tokens[-1]
        if kind == COMMENT:
            tokens.pop()
            continue
        if kind == CODE:
            text = text.rstrip(" \t\r\n\f\v;")
            if not text:
                tokens.pop()
                continue
            tokens[-1] = (kind, text)
        break
    return "".join(text for _, text in tokens)


@dataclass(frozen=True)
class QueryDefinition:
    """Validated SQL text and parameters for one cursor.

    Args:
        sql: The SELECT statement. For pagination it must not have a
            ``LIMIT``, must compare the identifier column against the
            identifier parameter, and must ``ORDER BY`` that column.
        params: Named parameters (mapping), positional parameters
            (sequence), or ``None``.
        page_size: Rows per page; setting it requests pagination.
        identifier_column: Field holding each row's monotonic identifier.
        identifier_param: Name of the bound parameter compared against the
            identifier. Defaults to ``identifier_column``.
        initial_identifier: Value bound before the first page, meaning
            "before the first row".

    Raises:
        ConfigurationError: On empty SQL or incomplete pagination settings.
    """

    sql: str
    params: dict[str, Any] | tuple[Any, ...] | None = None
    page_size: int | None = None
    identifier_column: str | None = None
    identifier_param: str | None = None
    initial_identifier: Any = 0

    def __post_init__(self) -> None:
        if not isinstance(self.sql, str) or not self.sql.strip():
            raise ConfigurationError("SQL text must be a non-empty string")
        object.__setattr__(self, "params", coerce_params(self.params))

        if self.page_size is None and self.identifier_column is None:
            return

        if not self.identifier_column:
            raise ConfigurationError("Pagination requires a non-empty identifier column")
        if (
            isinstance(self.page_size, bool)
            or not isinstance(self.page_size, int)
            or self.page_size <= 0
        ):
            raise ConfigurationError(
                f"Pagination requires a positive integer page size, got {self.page_size!r}"
            )
        if self.params is not None and not isinstance(self.params, Mapping):
            raise ConfigurationError(
                "Pagination rebinds the identifier by name; params must be a mapping"
            )
        param = (self.identifier_param or self.identifier_column).lstrip(":")
        if not param:
            raise ConfigurationError("Identifier parameter name must be non-empty")
        object.__setattr__(self, "identifier_param", param)

    @property
    def paginated(self) -> bool:
        return self.page_size is not None

    def page(self, limit_clause: str, identifier: Any) -> QueryDefinition:
        """Return the single-page query that starts after *identifier*."""
        if not self.paginated:
            raise ConfigurationError("Query is not paginated")
        base = _statement_body(self.sql)
        params = dict(self.params or {})
        params[self.identifier_param] = identifier  # type: ignore[index]
        return QueryDefinition(sql=f"{base}\n{limit_clause}", params=params)
