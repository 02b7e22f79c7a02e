"""Concurrency management for per-image work."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from blurry.config.constants import DEFAULT_IMAGE_WORKERS
from blurry.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class TaskResult(Generic[T]):
    """Result of a concurrent task."""

    item: T
    success: bool
    result: Any | None = None
    error: str | None = None


class ConcurrencyManager:
    """Runs independent image tasks concurrently with a configurable limit.

    Tasks are isolated from each other: a failing task is logged and
    reported as an unsuccessful TaskResult, its siblings keep running.
    """

    def __init__(self, image_workers: int = DEFAULT_IMAGE_WORKERS) -> None:
        """Initialize the concurrency manager.

        Args:
            image_workers: Maximum concurrent image operations
        """
        self.image_workers = image_workers
        self._image_semaphore: asyncio.Semaphore | None = None
        self._semaphore_loop: asyncio.AbstractEventLoop | None = None

    def _get_image_semaphore(self) -> asyncio.Semaphore:
        """Get or create the image semaphore for the running event loop.

        An asyncio.Semaphore only works in the loop it was first used in, so a
        manager reused across event loops gets a fresh one per loop.
        """
        loop = asyncio.get_running_loop()
        if self._image_semaphore is None or self._semaphore_loop is not loop:
            self._image_semaphore = asyncio.Semaphore(self.image_workers)
            self._semaphore_loop = loop
        return self._image_semaphore

    async def run_image_task(self, coro: Awaitable[R]) -> R:
        """Run an image task with semaphore protection.

        Args:
            coro: Coroutine to execute

        Returns:
            Result of the coroutine
        """
        async with self._get_image_semaphore():
            return await coro

    async def map_image_tasks(
        self,
        items: list[T],
        func: Callable[[T], Awaitable[R]],
        task_name: str = "image task",
        on_progress: Callable[[T, R | None, Exception | None], None] | None = None,
    ) -> list[TaskResult[T]]:
        """Process items concurrently with image concurrency limits.

        Returns only once every item has settled. Results keep the order of
        ``items`` regardless of completion order.

        Args:
            items: Items to process
            func: Async function to apply to each item
            task_name: Name reported in failure logs
            on_progress: Optional callback for progress updates

        Returns:
            List of TaskResult objects
        """
        semaphore = self._get_image_semaphore()

        async def process_item(item: T) -> TaskResult[T]:
            try:
                async with semaphore:
                    result = await func(item)
            except Exception as e:
                log.error(
                    f"[{task_name}] {e}",
                    task=task_name,
                    item=str(item),
                    error=str(e),
                )
                if on_progress:
                    on_progress(item, None, e)
                return TaskResult(item=item, success=False, error=str(e))

            if on_progress:
                on_progress(item, result, None)
            return TaskResult(item=item, success=True, result=result)

        return list(await asyncio.gather(*(process_item(item) for item in items)))
