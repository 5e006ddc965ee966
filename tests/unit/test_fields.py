"""Unit tests for static record field tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

import pytest
from pydantic import BaseModel, ConfigDict

from row_cursor.core.exceptions import RecordTypeError
from row_cursor.mapping.fields import field_table


@dataclass
class DataclassRecord:
    id: int = 0
    name: str = ""


class PydanticRecord(BaseModel):
    id: int = 0
    name: str = ""


class FrozenPydanticRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = 0


@dataclass(frozen=True)
class FrozenDataclassRecord:
    id: int = 0


class SlotsRecord:
    __slots__ = ("id", "name")


class AnnotatedRecord:
    id: int
    name: str
    _hidden: int


class PlainRecord:
    def __init__(self, id=0, name=""):
        self.id = id
        self.name = name


class PointRow(NamedTuple):
    x: int
    y: int


class Empty:
    pass


class TestFieldTable:
    @pytest.mark.parametrize(
        "record_type",
        [DataclassRecord, PydanticRecord, SlotsRecord, AnnotatedRecord, PlainRecord],
    )
    def test_declared_names(self, record_type: type) -> None:
        assert field_table(record_type).names == ("id", "name")

    def test_is_cached_per_type(self) -> None:
        assert field_table(DataclassRecord) is field_table(DataclassRecord)

    def test_contains_and_type_name(self) -> None:
        table = field_table(DataclassRecord)
        assert "id" in table
        assert "missing" not in table
        assert table.type_name == "DataclassRecord"

    def test_inherited_slots(self) -> None:
        class Child(SlotsRecord):
            __slots__ = ("email",)

        assert field_table(Child).names == ("id", "name", "email")

    @pytest.mark.parametrize(
        "record_type",
        [FrozenDataclassRecord, FrozenPydanticRecord, PointRow],
    )
    def test_immutable_types_rejected(self, record_type: type) -> None:
        with pytest.raises(RecordTypeError, match="immutable"):
            field_table(record_type)

    def test_type_without_fields_rejected(self) -> None:
        with pytest.raises(RecordTypeError, match="no declared fields") as exc_info:
            field_table(Empty)
        assert exc_info.value.record_type == "Empty"
