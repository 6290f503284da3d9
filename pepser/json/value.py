# pepser/json/value.py
"""JSON value tree produced by the grammar.

Each node is a frozen dataclass; containers own their children outright,
so a decoded document is a plain tree with no back references.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple, Union


@dataclass(frozen=True)
class Null:
    def to_python(self) -> None:
        return None

@dataclass(frozen=True)
class Boolean:
    value: bool

    def to_python(self) -> bool:
        return self.value

@dataclass(frozen=True)
class Number:
    value: float

    def to_python(self) -> float:
        return self.value

@dataclass(frozen=True)
class String:
    value: str

    def to_python(self) -> str:
        return self.value

@dataclass(frozen=True)
class Array:
    items: Tuple["JsonValue", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, i: int) -> "JsonValue":
        return self.items[i]

    def to_python(self) -> list:
        return [item.to_python() for item in self.items]

@dataclass(frozen=True)
class Object:
    """Key order follows the input but carries no meaning; duplicates keep the last value."""
    members: Dict[str, "JsonValue"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", dict(self.members))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, "JsonValue"]]) -> "Object":
        members: Dict[str, JsonValue] = {}
        for key, val in pairs:
            members[key] = val
        return cls(members)

    def __len__(self) -> int:
        return len(self.members)

    def __getitem__(self, key: str) -> "JsonValue":
        return self.members[key]

    def __contains__(self, key: object) -> bool:
        return key in self.members

    def to_python(self) -> Dict[str, Any]:
        return {k: v.to_python() for k, v in self.members.items()}


JsonValue = Union[Null, Boolean, Number, String, Array, Object]


def from_python(obj: Any) -> JsonValue:
    """Build a tree from plain Python data (the inverse of `to_python`)."""
    if obj is None:
        return Null()
    if isinstance(obj, bool):
        return Boolean(obj)
    if isinstance(obj, (int, float)):
        return Number(float(obj))
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (list, tuple)):
        return Array(tuple(from_python(x) for x in obj))
    if isinstance(obj, Mapping):
        return Object({str(k): from_python(v) for k, v in obj.items()})
    raise TypeError(f"cannot convert {type(obj).__name__} to a JSON value")
