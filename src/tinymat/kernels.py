"""
Kernels that a numeric backend must provide.
Buffers are flat, row-major sequences of floats.
"""

from __future__ import annotations

import enum


class Kernels(enum.Enum):
    ### reduce ###
    VECTOR_SUM = enum.auto()  # (buffer) -> float
    ### elementwise ###
    VECTOR_ADD = enum.auto()  # (a, b) -> buffer
    VECTOR_MULTIPLY = enum.auto()  # (a, b) -> buffer
    VECTOR_DIVIDE = enum.auto()  # (numerator, denominator) -> buffer
    VECTOR_NEGATE = enum.auto()  # (buffer) -> buffer
    VECTOR_LOG = enum.auto()  # (buffer) -> buffer
    ### scalar ###
    SCALAR_ADD = enum.auto()  # (buffer, scalar) -> buffer
    SCALAR_MULTIPLY = enum.auto()  # (buffer, scalar) -> buffer
    ### matrix ###
    MATRIX_MULTIPLY = enum.auto()  # (a, rows_a, cols_a, b, cols_b) -> buffer
    MATRIX_TRANSPOSE = enum.auto()  # (buffer, rows, cols) -> buffer
    ### init ###
    UNIFORM_RANDOM = enum.auto()  # (count) -> buffer in [0, 1)

    def __str__(self) -> str:
        return self.name
