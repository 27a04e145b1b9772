from typing import Dict, Iterator, List, Optional

from .node import GraphNode


class LevelTable:
    """Nodes grouped by display rank.

    Levels are stored densely and re-based so that ``levels[0]`` holds the
    nodes of ``min_rank``. A rank outside the current bounds opens a new
    level at the matching end; otherwise the node joins its existing bucket.
    """

    def __init__(self) -> None:
        self._levels: List[List[GraphNode]] = []
        self._ranks: Dict[str, int] = {}
        self.min_rank: Optional[int] = None
        self.max_rank: Optional[int] = None

    def place(self, node: GraphNode, rank: int) -> None:
        if node.id in self._ranks:
            raise ValueError(f"{node!r} is already placed at rank {self._ranks[node.id]}.")

        if self.min_rank is None or self.max_rank is None:
            self.min_rank = self.max_rank = rank
            self._levels.append([node])
        elif rank < self.min_rank:
            for _ in range(self.min_rank - rank - 1):
                self._levels.insert(0, [])
            self._levels.insert(0, [node])
            self.min_rank = rank
        elif rank > self.max_rank:
            for _ in range(rank - self.max_rank - 1):
                self._levels.append([])
            self._levels.append([node])
            self.max_rank = rank
        else:
            self._levels[rank - self.min_rank].append(node)
        self._ranks[node.id] = rank

    def rank_of(self, node: GraphNode) -> int:
        return self._ranks[node.id]

    def level(self, rank: int) -> List[GraphNode]:
        if self.min_rank is None or not self.min_rank <= rank <= self.max_rank:
            return []
        return list(self._levels[rank - self.min_rank])

    def nodes(self) -> Iterator[GraphNode]:
        for level in self._levels:
            yield from level

    def __iter__(self) -> Iterator[List[GraphNode]]:
        return iter([list(level) for level in self._levels])

    def __len__(self) -> int:
        return len(self._levels)
