"""Blocking join point for startup-time async work.

Configuration building is synchronous, but secret reads are coroutines. This
module is the one place where the library waits on a coroutine from
synchronous code. It is used during startup (and by the reload thread), never
on a request path.

The coroutine always runs on a short-lived helper thread with its own event
loop, so a caller that already runs a loop (e.g. an async framework's startup
hook) is never re-entered. The caller waits on that thread for at most
``timeout`` seconds. Work the coroutine handed to an executor (a blocking
hvac call) cannot be cancelled, so on timeout the helper thread is abandoned
rather than joined; the HTTP timeout configured on the hvac client bounds how
long it lingers.
"""

import asyncio
from collections.abc import Awaitable, Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from vault_config.core.enums import ErrorCode
from vault_config.core.errors import SecretStoreError

T = TypeVar("T")


async def _with_timeout(
    factory: Callable[[], Awaitable[T]], timeout: float | None
) -> T:
    return await asyncio.wait_for(factory(), timeout=timeout)


def run_blocking(
    factory: Callable[[], Awaitable[T]],
    *,
    timeout: float | None = None,
    operation: str = "vault operation",
) -> T:
    """Run a coroutine to completion from synchronous code.

    Args:
        factory: Zero-argument callable returning the awaitable to run. A
            factory (rather than a coroutine object) lets the awaitable be
            created inside the loop that runs it.
        timeout: Seconds to wait before giving up (None waits forever).
        operation: Short description used in the timeout message.

    Returns:
        The coroutine's result.

    Raises:
        SecretStoreError: If the timeout elapses (code STARTUP_TIMEOUT), even
            when the underlying call is still blocked in a worker thread.
        Exception: Anything raised by the coroutine propagates unchanged.
    """
    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="vault-startup")
    future = pool.submit(asyncio.run, _with_timeout(factory, timeout))
    try:
        return future.result(timeout=timeout)
    except TimeoutError as e:
        raise SecretStoreError(
            f"Timed out after {timeout} seconds waiting for {operation}",
            code=ErrorCode.STARTUP_TIMEOUT,
            details={"operation": operation, "timeout_seconds": timeout},
        ) from e
    finally:
        # never join: a timed-out call may still be blocked on the network
        pool.shutdown(wait=False)
