# cache.py
import collections
import itertools
import logging

from bst import BinarySearchTree
from primitives import Entry

logger = logging.getLogger(__name__)

class Cache:
    """
    Fixed-capacity cache of memory lines.

    Entries live in an arena keyed by integer handles. The address index
    (a BST) and the eviction queue (a deque, leftmost = oldest) only hold
    handles, so every entry has exactly one owner and both structures are
    always updated together.

    When the cache is full and a new address arrives, the parity of the
    incoming address picks the victim: even addresses evict the front of
    the queue (oldest line), odd addresses evict the back (youngest line).
    """

    def __init__(self, capacity):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._entries = {}
        self._index = BinarySearchTree()
        self._queue = collections.deque()
        self._handles = itertools.count()

    @property
    def capacity(self):
        return self._capacity

    def __len__(self):
        return len(self._queue)

    def __contains__(self, addr):
        return addr in self._index

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.clear()
        return False

    def _store(self, entry):
        handle = next(self._handles)
        self._entries[handle] = entry
        return handle

    def read(self, addr):
        """Return the data held for addr, or None on a miss."""
        handle = self._index.get(addr)
        if handle is None:
            return None
        return self._entries[handle].data

    def put(self, addr, data):
        """
        Store data at addr.

        Returns the entry that left the cache, if any: the previous entry
        for addr when it was already resident, or the evicted victim when
        a new address arrived at a full cache. Ownership of the returned
        entry passes to the caller.
        """
        old_handle = self._index.get(addr)
        if old_handle is not None:
            # same address: keep its place in the queue
            new_handle = self._store(Entry(addr, data))
            self._index.set(addr, new_handle)
            pos = self._queue.index(old_handle)
            self._queue[pos] = new_handle
            return self._entries.pop(old_handle)

        # the victim leaves the index before the newcomer goes in
        victim = None
        if len(self._queue) >= self._capacity:
            victim = self._evict(from_front=addr.is_even)
        new_handle = self._store(Entry(addr, data))
        self._queue.append(new_handle)
        self._index.set(addr, new_handle)
        return victim

    def write(self, addr, data):
        """Like put, but leaves the resident entry marked as out of sync."""
        displaced = self.put(addr, data)
        self._entries[self._index.get(addr)].desync()
        return displaced

    def _evict(self, from_front):
        handle = self._queue.popleft() if from_front else self._queue.pop()
        victim = self._entries.pop(handle)
        self._index.delete(victim.addr)
        logger.debug(
            "evicted %s from the %s of the queue (dirty=%s)",
            victim.addr, "front" if from_front else "back", not victim.in_sync,
        )
        return victim

    def iter(self):
        """Yield resident entries from youngest to eldest."""
        for handle in reversed(self._queue):
            yield self._entries[handle]

    def __iter__(self):
        return self.iter()

    def inorder_iter(self):
        """Yield resident entries in ascending address order."""
        for _, handle in self._index.inorder_iter():
            yield self._entries[handle]

    def preorder_iter(self):
        """Yield resident entries in index pre-order."""
        for _, handle in self._index.preorder_iter():
            yield self._entries[handle]

    def height(self):
        return self._index.height()

    def clear(self):
        """
        Release every resident entry exactly once and return them,
        oldest first.
        """
        released = [self._entries.pop(handle) for handle in self._queue]
        self._queue.clear()
        self._index = BinarySearchTree()
        return released

    def stats(self):
        dirty = sum(1 for entry in self._entries.values() if not entry.in_sync)
        return {
            "capacity": self._capacity,
            "used_lines": len(self._queue),
            "dirty_lines": dirty,
            "tree_height": self._index.height(),
        }
