from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .core import Change
from .node import GraphNode
from .store import Snapshot


@dataclass(frozen=True)
class NodeChange:
    node: Change
    data: Change
    next_edge: Optional[Change] = None
    prev_edge: Optional[Change] = None

    def edge(self, kind: str) -> Optional[Change]:
        if kind == "next":
            return self.next_edge
        if kind == "prev":
            return self.prev_edge
        raise ValueError(f"Unknown edge kind: {kind}")


@dataclass
class DiffResult:
    nodes: Dict[str, NodeChange] = field(default_factory=dict)
    head_edge: Change = Change.UNCHANGED
    tail_edge: Optional[Change] = None

    def for_node(self, node: GraphNode) -> NodeChange:
        return self.nodes[node.id]

    def new_nodes(self) -> List[str]:
        return [node_id for node_id, change in self.nodes.items() if change.node is Change.NEW]

    def modified_nodes(self) -> List[str]:
        return [
            node_id
            for node_id, change in self.nodes.items()
            if change.data is Change.MODIFIED
        ]

    def edge_changes(self) -> Iterator[Tuple[str, str, Change]]:
        for node_id, change in self.nodes.items():
            for kind in ("next", "prev"):
                edge_change = change.edge(kind)
                if edge_change is not None:
                    yield node_id, kind, edge_change

    def count(self, change: Change) -> int:
        nodes = sum(1 for item in self.nodes.values() if item.node is change)
        edges = sum(1 for _, _, edge_change in self.edge_changes() if edge_change is change)
        return nodes + edges

    def has_changes(self) -> bool:
        return any(
            [
                self.new_nodes(),
                self.modified_nodes(),
                any(item is not Change.UNCHANGED for _, _, item in self.edge_changes()),
                self.head_edge is not Change.UNCHANGED,
                self.tail_edge not in (None, Change.UNCHANGED),
            ]
        )


def _data_differs(before: GraphNode, node: GraphNode) -> bool:
    previous, current = before.data, node.data
    if previous is None and current is None:
        return False
    if previous is None or current is None:
        return True
    # Copies of identity-compared payloads never equal each other.
    if before.data_ref is node.data_ref and type(current).__eq__ is object.__eq__:
        return False
    return previous != current


def _edge_change(previous_target: Any, current_target: Any) -> Optional[Change]:
    if current_target is None:
        return None
    if previous_target is current_target:
        return Change.UNCHANGED
    return Change.MODIFIED


def _reference_change(previous_raw: Any, current_raw: Any) -> Change:
    return Change.UNCHANGED if previous_raw is current_raw else Change.MODIFIED


def classify(node: GraphNode, previous: Snapshot) -> NodeChange:
    before = previous.lookup(node.base_node)
    if before is None:
        return NodeChange(
            node=Change.NEW,
            data=Change.NEW,
            next_edge=Change.NEW if node.next_raw is not None else None,
            prev_edge=Change.NEW if node.prev_raw is not None else None,
        )

    return NodeChange(
        node=Change.UNCHANGED,
        data=Change.MODIFIED if _data_differs(before, node) else Change.UNCHANGED,
        next_edge=_edge_change(before.next_raw, node.next_raw),
        prev_edge=_edge_change(before.prev_raw, node.prev_raw),
    )


def diff(current: Snapshot, previous: Snapshot, *, has_tail: bool = False) -> DiffResult:
    result = DiffResult(
        head_edge=_reference_change(previous.head_raw, current.head_raw),
        tail_edge=_reference_change(previous.tail_raw, current.tail_raw) if has_tail else None,
    )
    for node in current.levels.nodes():
        result.nodes[node.id] = classify(node, previous)
    return result
