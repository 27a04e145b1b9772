from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .levels import LevelTable
from .node import GraphNode


@dataclass(frozen=True)
class Snapshot:
    nodes: Dict[int, GraphNode] = field(default_factory=dict)
    levels: LevelTable = field(default_factory=LevelTable)
    head: Optional[GraphNode] = None
    tail: Optional[GraphNode] = None
    head_raw: Optional[Any] = None
    tail_raw: Optional[Any] = None

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls()

    def lookup(self, raw: Any) -> Optional[GraphNode]:
        if raw is None:
            return None
        node = self.nodes.get(id(raw))
        if node is not None and node.base_node is raw:
            return node
        return None

    def __contains__(self, raw: Any) -> bool:
        return self.lookup(raw) is not None

    def __len__(self) -> int:
        return len(self.nodes)


class SnapshotStore:
    """Holds the snapshot of the last successful render.

    The store is replaced wholesale by :meth:`commit`; it is never merged
    and never touched while a render is still in progress.
    """

    def __init__(self) -> None:
        self._previous = Snapshot.empty()
        self.generation = 0

    @property
    def previous(self) -> Snapshot:
        return self._previous

    def commit(self, snapshot: Snapshot) -> None:
        self._previous = snapshot
        self.generation += 1

    def reset(self) -> None:
        self._previous = Snapshot.empty()
        self.generation = 0
