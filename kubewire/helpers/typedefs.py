"""
Type aliases for the loggers, usable both at runtime and for mypy.

`logging.LoggerAdapter` is generic in the type-sheds, but not at runtime
in the older Pythons, so it cannot be subscripted in the class definitions.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# Whatever the users can pass where a logger is expected: a plain logger or a resource logger.
Logger = Union[logging.Logger, LoggerAdapter]
