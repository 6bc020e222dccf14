"""Utility helpers for routing log messages and exceptions through the ViewModel.

These helpers centralize how we surface log output to the GUI. They emit
messages via a viewmodel's ``log_message`` signal when available and fall
back to the module logger so logs are never lost silently (headless use and
tests have no viewmodel).
"""
from __future__ import annotations

import logging
import sys
import traceback
from typing import Optional

logger = logging.getLogger(__name__)


def log_message(message: str, vm: Optional[object] = None, level: int = logging.INFO) -> None:
    """Emit *message* through ``vm.log_message`` when possible, else log it."""
    text = str(message)
    if vm is not None:
        signal = getattr(vm, "log_message", None)
        if signal is not None:
            try:
                signal.emit(text)
                return
            except Exception:
                # fall through to the module logger below
                pass
    logger.log(level, text)


def log_exception(context: str, exc: Optional[BaseException] = None, vm: Optional[object] = None) -> None:
    """Format *exc* with traceback and delegate to :func:`log_message`."""
    if exc is None:
        exc = sys.exc_info()[1]
    if exc is None:
        payload = f"{context}: (no exception details available)"
    else:
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        payload = f"{context}: {exc}\n{tb}"
    log_message(payload, vm=vm, level=logging.ERROR)


def safe_call(func, *args, default=None, context: str = "operation", vm: Optional[object] = None, **kwargs):
    """Safely call a function, logging exceptions and returning default on failure.

    Used at GUI boundaries where an exception must not escape into the Qt
    event loop.

    Args:
        func: Callable to execute
        *args: Positional arguments for func
        default: Value to return on exception (default: None)
        context: Description for error logging
        vm: ViewModel instance for logging
        **kwargs: Keyword arguments for func

    Returns:
        Result of func(*args, **kwargs) or default on exception
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        log_exception(f"Failed during {context}", e, vm=vm)
        return default
