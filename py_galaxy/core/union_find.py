"""Disjoint-set forest over integer indexes."""

from typing import List


class UnionFind:
    """Union-find with path compression and union by rank.

    Elements are the integers ``0..size-1``; callers map their own ids onto
    indexes.
    """

    def __init__(self, size: int):
        self.parent: List[int] = list(range(size))
        self.rank: List[int] = [0] * size
        self.components = size

    def __len__(self) -> int:
        return len(self.parent)

    def find(self, x: int) -> int:
        """Return the representative of x's set."""
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        # Path compression
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: int, y: int) -> bool:
        """Merge the sets holding x and y.

        Returns:
            True if two distinct sets were merged, False if already joined
        """
        px = self.find(x)
        py = self.find(y)
        if px == py:
            return False

        if self.rank[px] < self.rank[py]:
            self.parent[px] = py
        elif self.rank[px] > self.rank[py]:
            self.parent[py] = px
        else:
            self.parent[py] = px
            self.rank[px] += 1

        self.components -= 1
        return True

    def connected(self, x: int, y: int) -> bool:
        return self.find(x) == self.find(y)

    def labels(self) -> List[int]:
        """Representative of every element, in index order."""
        return [self.find(i) for i in range(len(self.parent))]
