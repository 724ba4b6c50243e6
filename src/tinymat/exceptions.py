"""
Errors raised by tinymat.
A failed broadcast is not an error: `Matrix.broadcast` returns None.
"""


class TinyMatError(Exception):
    """Base class for tinymat errors"""


class IncompatibleShapesError(TinyMatError, ValueError):
    """Operand shapes violate the contract of the operation"""


class RaggedRowsError(IncompatibleShapesError):
    """Nested rows are empty or do not share a common length"""


class BackendNotFoundError(TinyMatError, ImportError):
    """The library behind a backend is not installed"""
