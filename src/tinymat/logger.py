"""
Logging through callbacks, verbosity is set with the `TINYMAT_LOGLEVEL` env var
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Sequence

from tinymat import callbacks

if TYPE_CHECKING:
    from tinymat import kernels, matrices

LOG_LEVEL_ENV_SETTER = "TINYMAT_LOGLEVEL"


def setup_logger() -> logging.Logger:
    logger = logging.getLogger(__name__)
    logger.setLevel(logging._nameToLevel[os.environ.get(LOG_LEVEL_ENV_SETTER, "INFO").upper()])
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-10s%(funcName)s: - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(console_handler)
    return logger


default_logger = setup_logger()


class MatrixLogger(callbacks.OnMatrixCreationCallBack, callbacks.OnKernelExecutionCallBack):
    def __init__(self, logger: logging.Logger = default_logger) -> None:
        super().__init__()
        self._logger = logger

    def on_matrix_creation(self, matrix: matrices.Matrix) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.log(logging.DEBUG, "created Matrix(%s)", matrix.shape)

    def on_kernel_execution(self, kernel: kernels.Kernels, args: Sequence[Any], result: Any) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.log(
                logging.DEBUG,
                "%(kernel)-16s(%(in sizes)-20s) → %(out size)s",
                {
                    "kernel": kernel.name,
                    "in sizes": ", ".join(map(_describe, args)),
                    "out size": _describe(result),
                },
            )

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(verbosity={logging.getLevelName(self._logger.level)})"


def _describe(arg: Any) -> str:
    return f"[{len(arg)}]" if hasattr(arg, "__len__") else repr(arg)
