"""
Type aliases shared across the library.

Some standard library classes are generics for the type-checkers only,
while the runtime does not allow subscripting them (``logging.LoggerAdapter``
is one of them on the supported Pythons, ``asyncio.Task`` on the oldest ones).
"""
import asyncio
import logging
from typing import TYPE_CHECKING, Any, Mapping, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
    Task = asyncio.Task[Any]
else:
    LoggerAdapter = logging.LoggerAdapter
    Task = asyncio.Task

# Anything the callers can pass for logging; the library logs via the standard methods only.
Logger = Union[logging.Logger, LoggerAdapter]

# Query parameters of the API URLs; e.g. ``labelSelector``.
Params = Mapping[str, str]
