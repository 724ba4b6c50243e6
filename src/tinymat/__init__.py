import os

from tinymat import callbacks, logger
from tinymat.config import Configuration
from tinymat.exceptions import BackendNotFoundError, IncompatibleShapesError, RaggedRowsError, TinyMatError
from tinymat.kernels import Kernels
from tinymat.matrices import Matrix, SumDirection
from tinymat.runtime import Backend, MappedBackend, NumPyBackend, PythonBackend
from tinymat.shapes import Shape

### Default configuration ###
Configuration(backend=NumPyBackend())

## log kernels & matrix creation when a level is requested ##
if os.getenv(logger.LOG_LEVEL_ENV_SETTER):
    Configuration(matrix_logger := logger.MatrixLogger())
    logger.default_logger.info("%s set as logger for tinymat", str(matrix_logger))


__all__ = [
    "Backend",
    "BackendNotFoundError",
    "Configuration",
    "IncompatibleShapesError",
    "Kernels",
    "MappedBackend",
    "Matrix",
    "NumPyBackend",
    "PythonBackend",
    "RaggedRowsError",
    "Shape",
    "SumDirection",
    "TinyMatError",
    "callbacks",
]
