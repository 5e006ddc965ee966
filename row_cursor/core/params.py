"""SQL parameter normalization.

Queries are written with ``:name`` placeholders; for drivers whose
paramstyle is ``pyformat`` they are rewritten to ``%(name)s``. Literals,
quoted identifiers, comments, and PostgreSQL ``::typecast`` are left alone.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from row_cursor.core.tokenizer import CODE, tokenize

# Matches :name but not ::typecast and not inside words
# Negative lookbehind for : (handles ::), \w (handles mid-word colons)
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    return _convert_to_pyformat(sql)


@lru_cache(maxsize=256)
def _convert_to_pyformat(sql: str) -> str:
    """Convert :name params to %(name)s outside literals and comments."""
    parts: list[str] = []
    for kind, text in tokenize(sql):
        if kind == CODE:
            text = _PARAM_PATTERN.sub(r"%(\1)s", text)
        parts.append(text)
    return "".join(parts)


def coerce_params(
    params: Mapping[str, Any] | tuple[Any, ...] | list[Any] | Any,
) -> dict[str, Any] | tuple[Any, ...] | None:
    """Normalize *params* to a dict, tuple, or None.

    * ``None`` -> returned as-is.
    * mapping -> ``dict`` with any leading ``:`` stripped from the keys, so
      ``{":username": ...}`` and ``{"username": ...}`` bind the same way.
    * ``tuple`` / ``list`` -> ``tuple`` (positional binding).
    * Any other scalar -> wrapped in a single-element tuple.
    """
    if params is None:
        return None
    if isinstance(params, Mapping):
        return {str(key).lstrip(":"): value for key, value in params.items()}
    if isinstance(params, (tuple, list)):
        return tuple(params)
    return (params,)
