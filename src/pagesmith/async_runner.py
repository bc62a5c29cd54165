"""Helpers to run independent blocking jobs concurrently from sync code."""

from __future__ import annotations

import asyncio
import threading
from queue import Queue
from typing import TYPE_CHECKING, Any

from pagesmith.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Sequence


def _run_in_background_thread[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine in a dedicated thread with its own event loop.

    Args:
        coro: The coroutine to run.

    Raises:
        AsyncExecutionError: If the coroutine raises an exception.

    Returns:
        The result of the coroutine.
    """
    output: Queue[T | BaseException] = Queue(maxsize=1)

    def _runner() -> None:
        try:
            output.put(asyncio.run(coro))
        except BaseException as exc:
            output.put(exc)

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()

    result = output.get()
    if isinstance(result, BaseException):
        raise AsyncExecutionError(result=result) from result
    return result


def run_async[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine from both sync and async contexts.

    Outside of an event loop the coroutine runs with `asyncio.run`; inside a
    running loop it runs on a dedicated thread with its own loop.

    Args:
        coro: The coroutine to run.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    return _run_in_background_thread(coro)


async def _gather_bounded[T](jobs: Sequence[Callable[[], T]], concurrency: int) -> list[T]:
    semaphore = asyncio.Semaphore(max(concurrency, 1))

    async def _run_one(job: Callable[[], T]) -> T:
        async with semaphore:
            return await asyncio.to_thread(job)

    return list(await asyncio.gather(*[_run_one(job) for job in jobs]))


def run_jobs[T](jobs: Sequence[Callable[[], T]], *, concurrency: int) -> list[T]:
    """Run blocking jobs on worker threads, at most `concurrency` at once.

    Results keep the order of `jobs` and the first failing job's exception
    propagates. When called from inside a running event loop, failures are
    wrapped in `AsyncExecutionError`.

    Args:
        jobs: Zero-argument callables.
        concurrency: Maximum number of jobs running at the same time.

    Returns:
        list[T]: Job results in input order.
    """
    if not jobs:
        return []
    if concurrency <= 1 or len(jobs) == 1:
        return [job() for job in jobs]
    return run_async(_gather_bounded(jobs, concurrency))
