# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/utils/retry.py

import time
import functools
from typing import Callable, Optional


def retry(
    *,
    attempts: Callable[..., int] | int,
    delay: Callable[..., float] | float = 0,
    retry_on: tuple[type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable[[int, Exception], None]] = None,
):
    """
    Retry decorator for network collaborators.

    attempts / delay: plain values, or callables receiving the bound
        instance (``self``) so per-object settings can drive the policy
    retry_on: exception types to retry
    on_retry: callback(attempt, exception) before sleeping

    The last exception is re-raised unchanged once attempts run out.
    """

    def _resolve(value, args):
        return value(args[0]) if callable(value) else value

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            total = max(1, int(_resolve(attempts, args)))
            pause = float(_resolve(delay, args))
            for attempt in range(1, total + 1):
                try:
                    return fn(*args, **kwargs)
                except retry_on as exc:
                    if attempt == total:
                        raise
                    if on_retry:
                        on_retry(attempt, exc)
                    time.sleep(pause)
        return wrapper
    return decorator
