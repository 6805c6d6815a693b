# site_deploy/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import functools
import inspect
import threading
from typing import Any, Callable, Coroutine, List, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    loop = None
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        pass

    if loop and loop.is_running():
        # Already in async context, run on a fresh loop in another thread
        result = None
        exception = None

        def run_in_thread():
            nonlocal result, exception
            try:
                result = asyncio.run(coro)
            except BaseException as e:
                exception = e

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception:
            raise exception
        return result
    else:
        # No running loop, use asyncio.run
        return asyncio.run(coro)


async def run_blocking(func: Callable[..., T], *args, **kwargs) -> T:
    """
    Run a blocking call in the default executor

    Args:
        func: Blocking callable
        *args: Positional arguments
        **kwargs: Keyword arguments

    Returns:
        Call result
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it"""
    if inspect.isawaitable(value):
        return await value
    return value


class AsyncPool:
    """Simple async task pool"""

    def __init__(self, max_workers: int = 10):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self.semaphore = asyncio.Semaphore(max_workers)
        self.tasks = []

    async def submit(self, coro: Coroutine) -> asyncio.Task:
        """Submit task to pool"""

        async def wrapped():
            async with self.semaphore:
                return await coro

        task = asyncio.create_task(wrapped())
        self.tasks.append(task)
        return task

    async def wait_all(self) -> List[Any]:
        """Wait for all tasks to complete"""
        results = await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks.clear()
        return results

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.wait_all()
