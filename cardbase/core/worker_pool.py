"""
Bounded worker pool for blocking calls.

Blocking client calls (FAISS, boto3) are offloaded here so they never stall
the event loop. The pool size caps how many such calls run at once; extra
calls queue inside the executor.

Dependencies: asyncio, concurrent.futures
System role: The single contended resource for blocking backend I/O
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorkerPool:
    """Thread pool wrapper awaiting blocking callables from async code."""

    def __init__(self, max_workers: int = 8) -> None:
        """
        Initialize the pool.

        Args:
            max_workers: Maximum concurrent blocking calls
        """
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="cardbase-worker",
        )

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Run a blocking callable on the pool and await its result.

        Args:
            func: Blocking callable
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            The callable's return value (exceptions propagate)
        """
        loop = asyncio.get_running_loop()
        call = functools.partial(func, *args, **kwargs)
        return await loop.run_in_executor(self._executor, call)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and release threads."""
        logger.info("Shutting down worker pool", extra={"max_workers": self.max_workers})
        self._executor.shutdown(wait=wait)
