"""
Helpers shared across schema-forms.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it."""
    if inspect.isawaitable(value):
        return await value
    return value


async def call_with_timeout(
    func: Callable[..., Any],
    *args: Any,
    timeout: float | None = None,
) -> Any:
    """
    Call a sync or async capability, bounded by ``timeout`` seconds.

    A ``timeout`` of None, 0 or less waits without a bound.

    Raises:
        asyncio.TimeoutError: If the call does not finish in time.
    """
    awaitable: Awaitable[Any] = maybe_await(func(*args))
    if timeout is None or timeout <= 0:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout)
