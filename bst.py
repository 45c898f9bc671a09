# bst.py
"""
Unbalanced binary search tree used as the cache's ordered index.

Nothing rebalances the tree, so inserting keys in ascending order gives a
linked-list shaped tree. Every walk below is iterative so that depth is
bounded only by memory, never by the interpreter's recursion limit.
"""

class _Node:
    __slots__ = ("key", "value", "left", "right")

    def __init__(self, key, value):
        self.key = key
        self.value = value
        self.left = None
        self.right = None

class BinarySearchTree:
    """
    Ordered mapping key -> value with unique keys.
    Keys only need == and <.
    """

    def __init__(self):
        self._root = None
        self._size = 0

    def __len__(self):
        return self._size

    def __contains__(self, key):
        return self._find(key)[1] is not None

    def _find(self, key):
        # returns (parent, node); node is None when the key is absent
        parent, node = None, self._root
        while node is not None and key != node.key:
            parent = node
            node = node.left if key < node.key else node.right
        return parent, node

    def get(self, key):
        """Return the value stored under key, or None."""
        node = self._find(key)[1]
        return None if node is None else node.value

    def set(self, key, value):
        """
        Insert or replace. Returns the previous value when key was already
        present, None for a fresh insert.
        """
        parent, node = self._find(key)
        if node is not None:
            old = node.value
            node.value = value
            return old

        leaf = _Node(key, value)
        if parent is None:
            self._root = leaf
        elif key < parent.key:
            parent.left = leaf
        else:
            parent.right = leaf
        self._size += 1
        return None

    def delete(self, key):
        """
        Remove key and return its value, or None if absent.

        The node is replaced by its in-order successor (minimum of the
        right subtree). Without a right subtree, the left subtree moves up.
        """
        parent, node = self._find(key)
        if node is None:
            return None

        successor = self._extract_min(node, "right")
        if successor is None:
            replacement = node.left
        else:
            successor.left = node.left
            successor.right = node.right
            replacement = successor

        if parent is None:
            self._root = replacement
        elif parent.left is node:
            parent.left = replacement
        else:
            parent.right = replacement

        node.left = node.right = None
        self._size -= 1
        return node.value

    @staticmethod
    def _extract_min(owner, side):
        """
        Detach the leftmost node below owner.<side>, promoting that node's
        right child into its place. Returns the detached node or None.
        """
        node = getattr(owner, side)
        if node is None:
            return None
        while node.left is not None:
            owner, side, node = node, "left", node.left
        setattr(owner, side, node.right)
        node.right = None
        return node

    def height(self):
        """Number of nodes on the longest root-to-leaf path (0 when empty)."""
        best = 0
        stack = [(self._root, 1)] if self._root is not None else []
        while stack:
            node, depth = stack.pop()
            best = max(best, depth)
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, depth + 1))
        return best

    def inorder_iter(self):
        """Yield (key, value) pairs in ascending key order."""
        stack = []
        current = self._root
        while True:
            if current is not None:
                stack.append(current)
                current = current.left
            elif stack:
                node = stack.pop()
                yield node.key, node.value
                current = node.right
            else:
                return

    def preorder_iter(self):
        """Yield (key, value) pairs, each node before its children."""
        stack = []
        current = self._root
        while True:
            if current is not None:
                yield current.key, current.value
                stack.append(current)
                current = current.left
            elif stack:
                current = stack.pop().right
            else:
                return
