"""Shared test fixtures."""

import numpy as np
import pytest

from cache import Cache
from primitives import Addr, Int

def assert_consistent(cache):
    """Index and queue must describe the same set of entries."""
    queue = list(cache.iter())
    index = list(cache.inorder_iter())
    assert len(queue) == len(index) == len(cache) <= cache.capacity
    assert {id(e) for e in queue} == {id(e) for e in index}

    addrs = [e.addr for e in index]
    assert addrs == sorted(addrs)
    assert len(set(addrs)) == len(addrs)
    for entry in queue:
        assert cache.read(entry.addr) is entry.data

@pytest.fixture
def rng():
    return np.random.default_rng(1234)

@pytest.fixture
def small_cache():
    """Capacity-3 cache holding addresses 1, 2, 3 inserted in that order."""
    cache = Cache(3)
    for a in (1, 2, 3):
        cache.put(Addr(a), Int(a * 10))
    return cache
