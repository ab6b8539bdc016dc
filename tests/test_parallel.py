"""
Unit tests for chunking and worker pools.
"""

import unittest

from bubblevcf.parallel import TaskChunker, iter_parallel, resolve_workers


def square(x):
    return x * x


def sometimes_fails(x):
    if x % 5 == 0:
        raise ValueError(f"Value not allowed: {x}")
    return x * 2


class TestTaskChunker(unittest.TestCase):
    """Tests for TaskChunker class."""

    def test_chunk_tasks_empty(self):
        self.assertEqual(TaskChunker.chunk_tasks([], 4), [])

    def test_chunk_tasks_fewer_than_chunks(self):
        self.assertEqual(TaskChunker.chunk_tasks([1, 2], 4), [[1], [2]])

    def test_chunk_tasks_keeps_order_and_balances(self):
        chunks = TaskChunker.chunk_tasks(list(range(10)), 3)
        self.assertEqual(chunks, [[0, 1, 2, 3], [4, 5, 6], [7, 8, 9]])

    def test_chunk_tasks_non_positive(self):
        self.assertEqual(TaskChunker.chunk_tasks([1, 2, 3], 0), [[1, 2, 3]])


class TestIterParallel(unittest.TestCase):
    """Tests for iter_parallel."""

    def test_thread_pool(self):
        results = sorted(iter_parallel(square, list(range(20)), 4, "thread"))
        self.assertEqual(results, [x * x for x in range(20)])

    def test_process_pool(self):
        results = sorted(iter_parallel(abs, [-1, -2, -3], 2, "process"))
        self.assertEqual(results, [1, 2, 3])

    def test_empty_tasks(self):
        self.assertEqual(list(iter_parallel(square, [], 2, "thread")), [])

    def test_errors_propagate(self):
        with self.assertLogs("bubblevcf.parallel", level="ERROR"):
            with self.assertRaises(ValueError):
                list(iter_parallel(sometimes_fails, [1, 5], 2, "thread"))

    def test_unknown_pool_type(self):
        with self.assertRaises(ValueError):
            list(iter_parallel(square, [1], 1, "fiber"))

    def test_resolve_workers(self):
        self.assertEqual(resolve_workers(3), 3)
        self.assertGreater(resolve_workers(None), 0)
        self.assertGreater(resolve_workers(0), 0)


if __name__ == '__main__':
    unittest.main()
