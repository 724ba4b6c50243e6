"""
Matrices with shape-aware arithmetic & broadcasting
"""

from __future__ import annotations

import dataclasses
import enum
import itertools
import numbers
from typing import Any, Iterable, Self, Sequence, overload

from tinymat import config, exceptions, shapes
from tinymat.kernels import Kernels

Scalar = numbers.Real
PyRowsRepr = Sequence[Sequence[float]]


class SumDirection(enum.Enum):
    """Controls whether `Matrix.sum` reduces each row or each column"""

    ROWS = "rows"
    COLUMNS = "columns"


@dataclasses.dataclass(slots=True, frozen=True)
class Matrix:
    """
    Immutable 2-dimensional matrix.
    values: Flat, row-major values; `(r, c)` lives at `r * shape.columns + c`.
    shape:  The shape of the matrix, `len(values) == shape.elements`.
    """

    values: tuple[float, ...]
    shape: shapes.Shape

    __array_ufunc__ = None  # numpy scalars defer to the reflected operators

    def __post_init__(self) -> None:
        if not isinstance(self.shape, shapes.Shape):
            object.__setattr__(self, "shape", shapes.Shape(*self.shape))
        object.__setattr__(self, "values", tuple(map(float, self.values)))
        if len(self.values) != self.shape.elements:
            raise exceptions.IncompatibleShapesError(f"{len(self.values)} values do not fit {self.shape}")
        config.Configuration.on_matrix_creation(self)

    def __repr__(self) -> str:
        return f"Matrix({self.to_rows()!r}, shape={self.shape})"

    def __getitem__(self, loc: tuple[int, int]) -> float:
        row, column = loc
        rows, columns = self.shape
        if not (-rows <= row < rows and -columns <= column < columns):
            raise IndexError(f"{loc=} out of bounds for {self.shape}")
        return self.values[(row % rows) * columns + column % columns]

    ### constructors ###
    @classmethod
    def from_flat(cls, values: Iterable[float], shape: shapes.Shape) -> Self:
        return cls(tuple(values), shape)

    @classmethod
    def from_rows(cls, rows: PyRowsRepr) -> Self:
        if len(rows) == 0:
            raise exceptions.RaggedRowsError("cannot infer a shape from zero rows")
        if ragged := [i for i, row in enumerate(rows) if len(row) != len(rows[0])]:
            raise exceptions.RaggedRowsError(f"rows {ragged} differ in length from row 0 ({len(rows[0])})")
        return cls(tuple(itertools.chain.from_iterable(rows)), shapes.Shape.from_rows(rows))

    @classmethod
    def zeros(cls, shape: shapes.Shape) -> Self:
        shape = shapes.Shape(*shape)
        return cls((0.0,) * shape.elements, shape)

    @classmethod
    def random(cls, shape: shapes.Shape, multiplier: float = 1.0) -> Self:
        """Uniform values in `[0, multiplier)`, seeded through the backend's random source"""
        shape = shapes.Shape(*shape)
        uniform = _run(Kernels.UNIFORM_RANDOM, shape.elements)
        return cls(_run(Kernels.SCALAR_MULTIPLY, uniform, float(multiplier)), shape)

    def to_rows(self) -> list[list[float]]:
        columns = self.shape.columns
        return [list(self.values[r * columns : (r + 1) * columns]) for r in range(self.shape.rows)]

    ### arithmetic ###
    def __add__(self, other: Matrix | Scalar) -> Matrix:
        if isinstance(other, Matrix):
            return broadcast_binary(Kernels.VECTOR_ADD, self, other)
        if is_scalar(other):
            return Matrix(_run(Kernels.SCALAR_ADD, self.values, float(other)), self.shape)
        return NotImplemented

    def __sub__(self, other: Matrix | Scalar) -> Matrix:
        if isinstance(other, Matrix):
            return self + other.invert_sign()
        if is_scalar(other):
            return self + (-other)
        return NotImplemented

    def __rsub__(self, other: Scalar) -> Matrix:
        if is_scalar(other):
            return self.invert_sign() + other
        return NotImplemented

    def __mul__(self, other: Matrix | Scalar) -> Matrix:
        if isinstance(other, Matrix):
            return broadcast_binary(Kernels.VECTOR_MULTIPLY, self, other)
        if is_scalar(other):
            return Matrix(_run(Kernels.SCALAR_MULTIPLY, self.values, float(other)), self.shape)
        return NotImplemented

    def __truediv__(self, other: Matrix) -> Matrix:
        if isinstance(other, Matrix):
            return broadcast_binary(Kernels.VECTOR_DIVIDE, self, other)
        return NotImplemented

    def __matmul__(self, other: Matrix) -> Matrix:
        if isinstance(other, Matrix):
            return self.dot(other)
        return NotImplemented

    __radd__ = __add__
    __rmul__ = __mul__

    def __neg__(self) -> Matrix:
        return self.invert_sign()

    def dot(self, other: Matrix) -> Matrix:
        if self.shape.columns != other.shape.rows:
            raise exceptions.IncompatibleShapesError(f"cannot dot {self.shape} with {other.shape}")
        (rows, inner), columns = self.shape, other.shape.columns
        buffer = _run(Kernels.MATRIX_MULTIPLY, self.values, rows, inner, other.values, columns)
        return Matrix(buffer, shapes.Shape(rows, columns))

    ### shaping ###
    def broadcast(self, shape: shapes.Shape) -> Matrix | None:
        """
        Repeat values until the matrix fills `shape`, inspired by numpy.
        Equal rows: every value is repeated in place, `[[1, 2]] -> [[1, 1, 2, 2]]`.
        Equal columns: the whole matrix is stacked, `[[1, 2]] -> [[1, 2], [1, 2]]`.
        Returns None when neither applies.
        """
        shape = shapes.Shape(*shape)
        if shape.rows == self.shape.rows and (repeats := repeat_factor(shape.columns, self.shape.columns)) is not None:
            return Matrix(tuple(v for v in self.values for _ in range(repeats)), shape)
        if shape.columns == self.shape.columns and (repeats := repeat_factor(shape.rows, self.shape.rows)) is not None:
            return Matrix(self.values * repeats, shape)
        return None

    def transpose(self) -> Matrix:
        return Matrix(_run(Kernels.MATRIX_TRANSPOSE, self.values, *self.shape), self.shape.T)

    @property
    def T(self) -> Matrix:
        return self.transpose()

    ### reductions & transforms ###
    @overload
    def sum(self) -> float: ...
    @overload
    def sum(self, direction: SumDirection | str) -> Matrix: ...
    def sum(self, direction: SumDirection | str | None = None) -> float | Matrix:
        if direction is None:
            return float(_run(Kernels.VECTOR_SUM, self.values))
        rows, columns = self.shape
        match SumDirection(direction):
            case SumDirection.ROWS:
                if columns == 1:  # NOTE: single column matrices are returned as is
                    return self
                sums = [_run(Kernels.VECTOR_SUM, self.values[r * columns : (r + 1) * columns]) for r in range(rows)]
                return Matrix(tuple(sums), shapes.Shape(rows, 1))
            case SumDirection.COLUMNS:
                sums = [_run(Kernels.VECTOR_SUM, self.values[c::columns]) for c in range(columns)]
                return Matrix(tuple(sums), shapes.Shape(1, columns))

    def log(self) -> Matrix:
        return Matrix(_run(Kernels.VECTOR_LOG, self.values), self.shape)

    def invert_sign(self) -> Matrix:
        return Matrix(_run(Kernels.VECTOR_NEGATE, self.values), self.shape)


### Dispatch ###
def broadcast_binary(kernel: Kernels, lhs: Matrix, rhs: Matrix) -> Matrix:
    """
    Apply an elementwise `kernel` to `lhs` and `rhs`.
    Shapes must match, or one side must broadcast to the other (lhs is tried first).
    """
    if lhs.shape == rhs.shape:
        return elementwise(kernel, lhs, rhs)
    if (broadcasted := lhs.broadcast(rhs.shape)) is not None:
        return elementwise(kernel, broadcasted, rhs)
    if (broadcasted := rhs.broadcast(lhs.shape)) is not None:
        return elementwise(kernel, lhs, broadcasted)
    raise exceptions.IncompatibleShapesError(f"{kernel} cannot combine {lhs.shape} with {rhs.shape}")


def elementwise(kernel: Kernels, lhs: Matrix, rhs: Matrix) -> Matrix:
    assert lhs.shape == rhs.shape, f"{lhs.shape=} <> {rhs.shape=} do not match"
    return Matrix(_run(kernel, lhs.values, rhs.values), lhs.shape)


### Helpers ###
def repeat_factor(target: int, source: int) -> int | None:
    if target == source:
        return 1
    if source > 0 and target % source == 0:
        return target // source
    return None


def is_scalar(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _run(kernel: Kernels, *args: Any) -> Any:
    return config.Configuration.backend.run(kernel, *args)
