"""Recognition of the top-level JSON shapes sensor producers emit."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence


class PayloadShape:
    """A top-level layout that may carry the record list."""

    name = "unknown"

    def match(self, payload: Any) -> Optional[List[Any]]:
        raise NotImplementedError


class ArrayShape(PayloadShape):
    name = "array"

    def match(self, payload: Any) -> Optional[List[Any]]:
        return payload if isinstance(payload, list) else None


class FieldShape(PayloadShape):
    """A mapping holding the records under a fixed key."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        self.name = f"{field_name}-field"

    def match(self, payload: Any) -> Optional[List[Any]]:
        if not isinstance(payload, dict):
            return None
        value = payload.get(self.field_name)
        return value if isinstance(value, list) else None


class DataFieldShape(FieldShape):
    def __init__(self) -> None:
        super().__init__("data")


class ReadingsFieldShape(FieldShape):
    def __init__(self) -> None:
        super().__init__("readings")


class FirstArrayFieldShape(PayloadShape):
    """Any mapping: the first list-valued field in key order."""

    name = "first-array-field"

    def match(self, payload: Any) -> Optional[List[Any]]:
        if not isinstance(payload, dict):
            return None
        for value in payload.values():
            if isinstance(value, list):
                return value
        return None


DEFAULT_SHAPES: Sequence[PayloadShape] = (
    ArrayShape(),
    DataFieldShape(),
    ReadingsFieldShape(),
    FirstArrayFieldShape(),
)


def detect_shape(payload: Any, shapes: Sequence[PayloadShape] = DEFAULT_SHAPES) -> Optional[PayloadShape]:
    if not payload:
        return None
    for shape in shapes:
        if shape.match(payload) is not None:
            return shape
    return None


def normalize(payload: Any, shapes: Sequence[PayloadShape] = DEFAULT_SHAPES) -> List[Any]:
    """Return the record list carried by ``payload``; ``[]`` when none is found.

    A list payload is returned as the same object.
    """
    if not payload:
        return []
    for shape in shapes:
        records = shape.match(payload)
        if records is not None:
            return records
    return []
