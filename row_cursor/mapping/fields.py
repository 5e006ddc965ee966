"""Static field tables for target record types.

A record type's assignable field names are read once from its declaration
(dataclass fields, Pydantic ``model_fields``, ``__slots__``, or class
annotations) and cached; binding never reflects on instances.
"""

from __future__ import annotations

import dataclasses
import inspect
from dataclasses import dataclass
from functools import lru_cache

from row_cursor.core.exceptions import RecordTypeError


@dataclass(frozen=True)
class FieldTable:
    """Assignable field names declared by one record type, in order."""

    record_type: type
    names: tuple[str, ...]

    def __contains__(self, name: object) -> bool:
        return name in self.names

    @property
    def type_name(self) -> str:
        return self.record_type.__name__


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    try:
        from pydantic import BaseModel

        return issubclass(cls, BaseModel)
    except ImportError:
        return False


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot not in ("__dict__", "__weakref__") and slot not in names:
                names.append(slot)
    return names


def _annotated_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for name in inspect.get_annotations(klass):
            if not name.startswith("_") and name not in names:
                names.append(name)
    return names


def _init_names(cls: type) -> list[str]:
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
    except (ValueError, TypeError):
        return []
    return [
        name
        for name, param in sig.parameters.items()
        if name != "self" and param.kind is param.POSITIONAL_OR_KEYWORD
    ]


def _declared_names(cls: type) -> list[str]:
    if _is_pydantic_model(cls):
        if cls.model_config.get("frozen"):  # type: ignore[attr-defined]
            raise RecordTypeError(cls.__name__, "frozen Pydantic models are immutable")
        return list(cls.model_fields.keys())  # type: ignore[attr-defined]

    if dataclasses.is_dataclass(cls):
        if cls.__dataclass_params__.frozen:  # type: ignore[attr-defined]
            raise RecordTypeError(cls.__name__, "frozen dataclasses are immutable")
        return [f.name for f in dataclasses.fields(cls)]

    if issubclass(cls, tuple):
        raise RecordTypeError(cls.__name__, "tuple types are immutable")

    return _slot_names(cls) or _annotated_names(cls) or _init_names(cls)


@lru_cache(maxsize=None)
def field_table(record_type: type) -> FieldTable:
    """Return the cached ``FieldTable`` for *record_type*.

    Raises:
        RecordTypeError: If the type is immutable or declares no fields.
    """
    names = _declared_names(record_type)
    if not names:
        raise RecordTypeError(record_type.__name__, "no declared fields")
    return FieldTable(record_type=record_type, names=tuple(names))
