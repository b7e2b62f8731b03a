"""
Tests for the bounded worker pool.

System role: Verification of blocking call offload
"""

import threading
import time

import pytest

from cardbase.core.worker_pool import WorkerPool


@pytest.fixture
def pool():
    worker_pool = WorkerPool(max_workers=2)
    yield worker_pool
    worker_pool.shutdown(wait=True)


@pytest.mark.asyncio
async def test_run_returns_result_with_kwargs(pool: WorkerPool) -> None:
    result = await pool.run(lambda a, b=0: a + b, 2, b=3)
    assert result == 5


@pytest.mark.asyncio
async def test_run_executes_off_the_event_loop_thread(pool: WorkerPool) -> None:
    caller = threading.get_ident()
    worker = await pool.run(threading.get_ident)
    assert worker != caller


@pytest.mark.asyncio
async def test_exceptions_propagate(pool: WorkerPool) -> None:
    def boom() -> None:
        raise RuntimeError("blocked call failed")

    with pytest.raises(RuntimeError, match="blocked call failed"):
        await pool.run(boom)


@pytest.mark.asyncio
async def test_concurrency_is_bounded(pool: WorkerPool) -> None:
    import asyncio

    active = 0
    peak = 0
    lock = threading.Lock()

    def work() -> None:
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.05)
        with lock:
            active -= 1

    await asyncio.gather(*(pool.run(work) for _ in range(6)))
    assert peak <= 2
