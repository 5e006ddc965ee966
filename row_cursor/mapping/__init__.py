"""Mapping layer - SELECT expressions to record fields."""

from __future__ import annotations

from row_cursor.mapping.binder import BoundRow, RowBinder
from row_cursor.mapping.columns import ColumnBinding, ColumnMapper, binding_key
from row_cursor.mapping.enumerator import (
    SelectClauseEnumerator,
    SelectExpression,
    enumerate_select,
)
from row_cursor.mapping.fields import FieldTable, field_table
from row_cursor.mapping.protocol import SelectEnumerator

__all__ = [
    "ColumnMapper",
    "ColumnBinding",
    "binding_key",
    "RowBinder",
    "BoundRow",
    "FieldTable",
    "field_table",
    "SelectEnumerator",
    "SelectClauseEnumerator",
    "SelectExpression",
    "enumerate_select",
]
