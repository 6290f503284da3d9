# pepser/span.py
"""Input abstraction for the combinators.

A parser only needs a handful of capabilities from its subject:
length, prefix/suffix narrowing, splitting, and a printable form for
diagnostics. `Input` names that contract; `TextSpan` is the concrete
read-only view over a text buffer used everywhere in pepser.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, Tuple, Union


class Input:
    """Minimal interface a parseable subject has to offer."""
    def __len__(self) -> int:
        raise NotImplementedError
    def drop_first(self, n: int) -> "Input":
        raise NotImplementedError
    def take_first(self, n: int) -> "Input":
        raise NotImplementedError
    def split_at(self, n: int) -> Tuple["Input", "Input"]:
        raise NotImplementedError
    def diagnostic_text(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class TextSpan(Input):
    """Immutable window `[start, end)` over `text`.

    Narrowing never copies the buffer: every operation returns a new
    span sharing the same `text`, and the original stays valid.
    """
    text: str
    start: int = 0
    end: int = field(default=-1)

    def __post_init__(self) -> None:
        end = len(self.text) if self.end < 0 else self.end
        if not (0 <= self.start <= end <= len(self.text)):
            raise ValueError(
                f"invalid span [{self.start}, {self.end}) over text of length {len(self.text)}"
            )
        object.__setattr__(self, "end", end)

    @classmethod
    def of(cls, subject: Union[str, "TextSpan"]) -> "TextSpan":
        if isinstance(subject, TextSpan):
            return subject
        if isinstance(subject, str):
            return cls(subject)
        raise TypeError(f"cannot parse from {type(subject).__name__}; expected str or TextSpan")

    # ---- Input contract ----
    def __len__(self) -> int:
        return self.end - self.start

    def _check(self, n: int) -> None:
        if n < 0 or n > len(self):
            raise ValueError(f"cannot narrow span of length {len(self)} by {n}")

    def drop_first(self, n: int) -> "TextSpan":
        self._check(n)
        return TextSpan(self.text, self.start + n, self.end)

    def take_first(self, n: int) -> "TextSpan":
        self._check(n)
        return TextSpan(self.text, self.start, self.start + n)

    def split_at(self, n: int) -> Tuple["TextSpan", "TextSpan"]:
        self._check(n)
        mid = self.start + n
        return TextSpan(self.text, self.start, mid), TextSpan(self.text, mid, self.end)

    def diagnostic_text(self) -> str:
        return self.text[self.start:self.end]

    # ---- Helpers ----
    @property
    def offset(self) -> int:
        """Absolute position of this view inside the full buffer."""
        return self.start

    def char_at(self, i: int) -> str:
        if not 0 <= i < len(self):
            raise IndexError(f"index {i} out of span of length {len(self)}")
        return self.text[self.start + i]

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.start, self.end)

    def __iter__(self) -> Iterator[str]:
        for i in range(self.start, self.end):
            yield self.text[i]

    def __str__(self) -> str:
        return self.diagnostic_text()

    def __repr__(self) -> str:
        return f"TextSpan({self.diagnostic_text()!r}, offset={self.start})"
