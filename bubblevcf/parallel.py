"""
Worker pools for per-bubble processing.

Tasks are split into chunks and handed to a process or thread pool; results
are yielded as they complete so the caller can merge them in one place.
"""
import logging
import os
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from typing import Any, Callable, Iterator, List, Optional

logger = logging.getLogger(__name__)

POOL_TYPES = ("process", "thread")


class TaskChunker:
    """Utility class to divide a list of tasks into chunks for parallel processing."""

    @staticmethod
    def chunk_tasks(tasks: List[Any], num_chunks: int) -> List[List[Any]]:
        """
        Divide tasks into a specified number of chunks.

        Args:
            tasks: List of tasks to divide
            num_chunks: Number of chunks to divide into

        Returns:
            List of task chunks, in task order
        """
        if not tasks:
            return []
        if num_chunks <= 0:
            num_chunks = 1

        num_chunks = min(num_chunks, len(tasks))
        chunk_size, remainder = divmod(len(tasks), num_chunks)

        chunks = []
        start = 0
        for i in range(num_chunks):
            # the first 'remainder' chunks take one extra task
            end = start + chunk_size + (1 if i < remainder else 0)
            chunks.append(tasks[start:end])
            start = end
        return chunks


def resolve_workers(num_workers: Optional[int]) -> int:
    if not isinstance(num_workers, int) or num_workers <= 0:
        return os.cpu_count() or 4
    return num_workers


def _create_executor(pool_type: str, num_workers: int) -> Executor:
    pool_type = pool_type.lower()
    if pool_type == "process":
        return ProcessPoolExecutor(max_workers=num_workers)
    if pool_type == "thread":
        return ThreadPoolExecutor(max_workers=num_workers)
    raise ValueError(f"Unknown pool type: {pool_type}. Use 'process' or 'thread'.")


def iter_parallel(func: Callable, tasks: List[Any],
                  num_workers: Optional[int] = None,
                  pool_type: str = "process") -> Iterator[Any]:
    """
    Apply func to every task in a worker pool, yielding results as they finish.

    Args:
        func: Function to apply to each task. Must be picklable for 'process' pools.
        tasks: List of tasks
        num_workers: Number of workers. Defaults to CPU count.
        pool_type: 'process' or 'thread'

    Raises:
        Exception: Re-raises the first exception raised by a task
        ValueError: If pool_type is not recognized
    """
    if not tasks:
        return

    workers = resolve_workers(num_workers)
    logger.info(f"Executing {len(tasks)} tasks using a {pool_type} pool of {workers} workers")
    start_time = time.monotonic()

    with _create_executor(pool_type, workers) as executor:
        futures = [executor.submit(func, task) for task in tasks]
        try:
            for future in as_completed(futures):
                yield future.result()
        except Exception as e:
            logger.error(f"Parallel execution failed: {e}")
            for future in futures:
                future.cancel()
            raise

    logger.info(f"Parallel execution finished in {time.monotonic() - start_time:.2f} seconds")
