"""Helpers shared by the resolver and its observers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any


def safe_call(
    fn: Callable[[], object],
    call_logger: logging.Logger,
    message: str,
    *message_args: Any,
) -> bool:
    """Run a side channel (metrics, audit) that must not affect a resolution.

    An exception from *fn* is logged on *call_logger* at WARNING with its
    traceback and then dropped.

    Returns:
        Whether *fn* completed without raising.
    """
    try:
        fn()
    except Exception:
        call_logger.warning(message, *message_args, exc_info=True)
        return False
    return True
