"""Contract tests for IdGenerator implementations which ensure monotonicity."""

import concurrent.futures as cf

import pytest


@pytest.mark.parametrize("count", [2_000, 10_000])
def test_monotonic_order_single_thread(monotonic_id_generators, count):
    """IDs are lexicographically non-decreasing when generated in a single thread."""
    ids = [monotonic_id_generators.new_id() for _ in range(count)]
    assert ids == sorted(ids), "IDs must be lexicographically non-decreasing"


def test_threaded_uniqueness_single_instance(monotonic_id_generators):
    """new_id() returns unique IDs when called from multiple threads."""

    def _next(_: int) -> str:
        return monotonic_id_generators.new_id()

    n = 8000
    with cf.ThreadPoolExecutor(max_workers=16) as ex:
        ids = list(ex.map(_next, range(n)))

    assert len(ids) == len(set(ids))
