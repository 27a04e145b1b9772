import logging
from typing import Any, Dict, List, Optional, Tuple

from .levels import LevelTable
from .node import GraphNode
from .store import Snapshot
from ..accessor import StructureAccessor

logger = logging.getLogger(__name__)


class SnapshotBuilder:
    """Walks a linked structure from its header (and trailer) into a Snapshot.

    Every raw node is visited at most once; a node reached again through a
    different path keeps the rank of its first visit. Neighbours are explored
    ``next`` first at ``rank + 1``, then ``prev`` at ``rank - 1``.
    """

    def __init__(self, accessor: StructureAccessor) -> None:
        self.accessor = accessor

    def build(self) -> Snapshot:
        nodes: Dict[int, GraphNode] = {}
        levels = LevelTable()

        head_raw = self.accessor.get_head()
        head = self._visit(head_raw, 0, nodes, levels)

        tail_raw: Optional[Any] = None
        tail: Optional[GraphNode] = None
        if self.accessor.has_tail:
            tail_raw = self.accessor.get_tail()
            start_rank = levels.max_rank if levels.max_rank is not None else 0
            tail = self._visit(tail_raw, start_rank, nodes, levels)

        logger.debug(
            "Built snapshot: %d nodes across %d levels", len(nodes), len(levels)
        )
        return Snapshot(
            nodes=nodes,
            levels=levels,
            head=head,
            tail=tail,
            head_raw=head_raw,
            tail_raw=tail_raw,
        )

    def _visit(
        self,
        start: Optional[Any],
        rank: int,
        nodes: Dict[int, GraphNode],
        levels: LevelTable,
    ) -> Optional[GraphNode]:
        if start is None:
            return None
        existing = nodes.get(id(start))
        if existing is not None:
            return existing

        first: Optional[GraphNode] = None
        # Pushing prev before next keeps the order of a recursive pre-order walk.
        stack: List[Tuple[Any, int]] = [(start, rank)]
        while stack:
            raw, current_rank = stack.pop()
            if raw is None or id(raw) in nodes:
                continue
            node = GraphNode(raw, self.accessor)
            nodes[id(raw)] = node
            levels.place(node, current_rank)
            if first is None:
                first = node
            stack.append((node.prev_raw, current_rank - 1))
            stack.append((node.next_raw, current_rank + 1))
        return first
