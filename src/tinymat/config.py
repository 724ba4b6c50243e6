"""
# Global configuration for the tinymat package.

User can modify this configuration in 2 ways:

## Permanent change
```python
from tinymat import config
config.Configuration(backend=backend)
```

## Temporary change
```python
from tinymat import config
with config.Configuration(backend=backend):
    ...
```
"""

from __future__ import annotations

import collections
import types
from typing import TYPE_CHECKING, Any, ClassVar, Sequence, Type

from tinymat import callbacks

if TYPE_CHECKING:
    from tinymat import kernels, matrices, runtime

CALLBACKS_KEY = "__callbacks__"


class _StackedConfigMeta(type):
    __singletons__: ClassVar[dict[Type, Any]] = {}
    __regular_attrs__: set[str]  # attrs that are not accessed through context stack
    __context_stack__: collections.ChainMap[str, Any]  # stack of contexts that hold all attrs
    __callback_stack__: callbacks.CallbackStack  # stack of callbacks

    def __call__(cls, *callback: callbacks.Callback, **config_dict: Any) -> type[Configuration]:
        assert not (kwargs := {k: v for k, v in config_dict.items() if v is None}), f"{kwargs=}"
        config_dict[CALLBACKS_KEY] = callback
        if cls not in cls.__singletons__:  # initialize:=set class vars for the first time
            cls.__context_stack__ = collections.ChainMap(config_dict)
            cls.__callback_stack__ = callbacks.CallbackStack(callback)
            cls.__regular_attrs__ = set(dir(cls)) - set(dir(_StackedConfigMeta))
            cls.__singletons__[cls] = cls
        else:  # update the stacks with new contexts
            cls.__callback_stack__.insert_callbacks(*callback)
            cls.__context_stack__.maps.insert(0, config_dict)
        return cls.__singletons__[cls]

    def __getattr__(cls: type[_StackedConfigMeta], key: str):
        if key.startswith("__") or cls not in cls.__singletons__:
            raise AttributeError(f"{cls.__name__} has no attribute {key!r}")
        if key in cls.__regular_attrs__:
            return super().__getattribute__(key)
        try:
            return cls.__context_stack__[key]
        except KeyError as exc:
            raise AttributeError(f"{cls.__name__} has no {key!r} configured") from exc

    def __enter__(cls) -> None:
        for enter_callback in cls.__callback_stack__[callbacks.OnCtxEnterCallBack]:
            enter_callback.on_ctx_enter()

    def __exit__(cls, exc_type: type[Exception], exc_value: Exception, traceback: types.TracebackType) -> None:
        for exit_callback in cls.__callback_stack__[callbacks.OnCtxExitCallBack]:
            exit_callback.on_ctx_exit(exc_type, exc_value, traceback)
        dropped_context = cls.__context_stack__.maps.pop(0)
        cls.__callback_stack__.drop_callbacks(*dropped_context[CALLBACKS_KEY])


class Configuration(metaclass=_StackedConfigMeta):
    """Configuration for the tinymat package."""

    backend: runtime.Backend

    def __init__(
        self,
        *callback: callbacks.Callback,
        backend: runtime.Backend | None = None,
        **context: Any,
    ) -> None: ...

    @classmethod
    def on_matrix_creation(cls, matrix: matrices.Matrix) -> None:
        for callback in cls.__callback_stack__[callbacks.OnMatrixCreationCallBack]:
            callback.on_matrix_creation(matrix)

    @classmethod
    def on_kernel_execution(cls, kernel: kernels.Kernels, args: Sequence[Any], result: Any) -> None:
        for callback in cls.__callback_stack__[callbacks.OnKernelExecutionCallBack]:
            callback.on_kernel_execution(kernel, args, result)
