"""
Rudimentary type [re-]definitions shared across the codebase.

Some stdlib classes are generics only in the type-sheds, not at runtime
(e.g. ``logging.LoggerAdapter``), so they are defined here once.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# Anything loggable: either a plain logger, or a per-pod adapter (see `ObjectLogger`).
Logger = Union[logging.Logger, LoggerAdapter]
