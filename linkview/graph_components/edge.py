from dataclasses import dataclass
from typing import List, Optional

from .core import Change
from .diff import DiffResult
from .node import GraphNode
from .store import Snapshot


@dataclass
class Edge:
    source: GraphNode
    target: GraphNode
    kind: str
    change: Change = Change.UNCHANGED
    constrained: bool = True


def collect_edges(snapshot: Snapshot, result: DiffResult) -> List[Edge]:
    """Return the ``next`` and ``prev`` edges of every node, next first.

    Edges touching the current header node are left unconstrained so that a
    circular back reference does not pull the header out of its level.
    """
    edges: List[Edge] = []
    header = snapshot.head_raw
    for node in snapshot.levels.nodes():
        change = result.for_node(node)
        for kind, raw in (("next", node.next_raw), ("prev", node.prev_raw)):
            if raw is None:
                continue
            target: Optional[GraphNode] = snapshot.lookup(raw)
            if target is None:
                continue
            touches_header = header is not None and (node.base_node is header or raw is header)
            edges.append(
                Edge(
                    source=node,
                    target=target,
                    kind=kind,
                    change=change.edge(kind) or Change.UNCHANGED,
                    constrained=not touches_header,
                )
            )
    return edges
