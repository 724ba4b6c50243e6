"""
A backend is the runtime that executes the numeric kernels
on flat, row-major buffers on behalf of `Matrix`
"""

from __future__ import annotations

import abc
import functools
import math
import operator
import random
from typing import Any, Callable, ClassVar, Generic, Iterable, Sequence, TypeVar

from tinymat import config, exceptions
from tinymat.kernels import Kernels

try:
    import numpy as np
except ImportError as exc:
    raise exceptions.BackendNotFoundError("numpy not installed... run `pip install numpy`") from exc

BufferType = TypeVar("BufferType")


class Backend(abc.ABC, Generic[BufferType]):
    """The runtime that executes the numeric kernels"""

    @abc.abstractmethod
    def execute(self, kernel: Kernels, *args: Any) -> BufferType | float:
        """Execute the kernel on the given buffers and arguments"""

    @abc.abstractmethod
    def to_python(self, buffer: BufferType) -> list[float]:
        """Return a flat python list of the buffer values"""

    def run(self, kernel: Kernels, *args: Any) -> BufferType | float:
        result = self.execute(kernel, *args)
        config.Configuration.on_kernel_execution(kernel, args, result)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class MappedBackend(Backend[BufferType], abc.ABC):
    """Executes kernels by looking them up in `__OPS_MAP__`"""

    __OPS_MAP__: ClassVar[dict[Kernels, Callable[..., Any]]]

    def execute(self, kernel: Kernels, *args: Any) -> BufferType | float:
        return self.__OPS_MAP__[kernel](*args)

    @classmethod
    def missing_kernels(cls) -> list[Kernels]:
        return [kernel for kernel in Kernels if kernel not in cls.__OPS_MAP__]


### Numpy as default backend implementation ###
def _numpy_gemm(a: np.ndarray, rows_a: int, cols_a: int, b: np.ndarray, cols_b: int) -> np.ndarray:
    return np.matmul(np.reshape(a, (rows_a, cols_a)), np.reshape(b, (cols_a, cols_b))).ravel()


class NumPyBackend(MappedBackend[np.ndarray]):
    __OPS_MAP__ = {
        Kernels.VECTOR_SUM: lambda a: float(np.sum(a, dtype=np.float64)),
        Kernels.VECTOR_ADD: np.add,
        Kernels.VECTOR_MULTIPLY: np.multiply,
        Kernels.VECTOR_DIVIDE: np.divide,
        Kernels.VECTOR_NEGATE: np.negative,
        Kernels.VECTOR_LOG: np.log,
        Kernels.SCALAR_ADD: np.add,
        Kernels.SCALAR_MULTIPLY: np.multiply,
        Kernels.MATRIX_MULTIPLY: _numpy_gemm,
        Kernels.MATRIX_TRANSPOSE: lambda a, rows, cols: np.transpose(np.reshape(a, (rows, cols))).ravel(),
        Kernels.UNIFORM_RANDOM: lambda count: np.random.uniform(0.0, 1.0, count),
    }

    def execute(self, kernel: Kernels, *args: Any) -> np.ndarray | float:
        args = tuple(np.asarray(a, dtype=np.float64) if isinstance(a, Sequence) else a for a in args)
        with np.errstate(all="ignore"):  # inf & nan propagate silently
            return super().execute(kernel, *args)

    def to_python(self, buffer: np.ndarray) -> list[float]:
        return np.asarray(buffer, dtype=np.float64).tolist()


### Plain python reference backend ###
def _python_divide(numerator: float, denominator: float) -> float:
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _python_log(x: float) -> float:
    if x > 0 or math.isnan(x):
        return math.log(x)
    return -math.inf if x == 0 else math.nan


def _python_sum(values: Iterable[float]) -> float:
    return functools.reduce(operator.add, values, 0.0)


def _python_gemm(a: Sequence[float], rows_a: int, cols_a: int, b: Sequence[float], cols_b: int) -> list[float]:
    return [
        _python_sum(a[i * cols_a + k] * b[k * cols_b + j] for k in range(cols_a))
        for i in range(rows_a)
        for j in range(cols_b)
    ]


def _python_transpose(a: Sequence[float], rows: int, cols: int) -> list[float]:
    return [a[r * cols + c] for c in range(cols) for r in range(rows)]


class PythonBackend(MappedBackend[list[float]]):
    """Loop based backend without third party dependencies, meant as a reference"""

    __OPS_MAP__ = {
        Kernels.VECTOR_SUM: _python_sum,
        Kernels.VECTOR_ADD: lambda a, b: list(map(operator.add, a, b)),
        Kernels.VECTOR_MULTIPLY: lambda a, b: list(map(operator.mul, a, b)),
        Kernels.VECTOR_DIVIDE: lambda a, b: list(map(_python_divide, a, b)),
        Kernels.VECTOR_NEGATE: lambda a: list(map(operator.neg, a)),
        Kernels.VECTOR_LOG: lambda a: list(map(_python_log, a)),
        Kernels.SCALAR_ADD: lambda a, s: [x + s for x in a],
        Kernels.SCALAR_MULTIPLY: lambda a, s: [x * s for x in a],
        Kernels.MATRIX_MULTIPLY: _python_gemm,
        Kernels.MATRIX_TRANSPOSE: _python_transpose,
        Kernels.UNIFORM_RANDOM: lambda count: [random.random() for _ in range(count)],
    }

    def to_python(self, buffer: Sequence[float]) -> list[float]:
        return list(map(float, buffer))


missing = {backend.__name__: backend.missing_kernels() for backend in (NumPyBackend, PythonBackend)}
assert not any(missing.values()), f"Missing kernels: {missing}"
