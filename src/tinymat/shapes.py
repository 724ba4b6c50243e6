"""
Shape tracking
"""

from __future__ import annotations

import dataclasses
from typing import Iterator, Sequence


@dataclasses.dataclass(slots=True, frozen=True)
class Shape:
    rows: int
    columns: int

    def __post_init__(self) -> None:
        assert all(isinstance(d, int) and not isinstance(d, bool) for d in self), f"{self!r} contains non-ints"
        assert all(d >= 0 for d in self), f"{self!r} contains negative dims"

    def __repr__(self) -> str:
        return str(self)

    def __str__(self) -> str:
        return f"Shape({self.rows}, {self.columns})"

    def __iter__(self) -> Iterator[int]:
        return iter((self.rows, self.columns))

    def transpose(self) -> Shape:
        return Shape(self.columns, self.rows)

    @property
    def T(self) -> Shape:
        return self.transpose()

    @property
    def elements(self) -> int:
        return self.rows * self.columns

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]], /) -> Shape:
        assert isinstance(rows, Sequence) and len(rows) > 0, f"Unknown {rows=}"
        return cls(len(rows), len(rows[0]))
