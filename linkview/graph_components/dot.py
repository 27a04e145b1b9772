from typing import List, Optional, Tuple

from .core import Change, Palette
from .diff import DiffResult
from .edge import Edge, collect_edges
from .node import GraphNode
from .store import Snapshot


HEADER_NAME = "__HEADER_NAME"
TAIL_NAME = "__TAIL_NAME"
ANCHOR_PREFIX = "__DUMMY_"
NULL_SUFFIX = "_NULL"
PLACEHOLDER_LABEL = "None"

_GRAPH_DEFAULTS = (
    "  node[shape=record,penwidth=1.5];",
    "  edge[penwidth=2];",
    "  rankdir=LR;",
    "  bgcolor=transparent;",
    "  splines=true;",
    "  ordering=out;",
)

_RECORD_SPECIALS = {
    "\\": "\\\\",
    '"': '\\"',
    "{": "\\{",
    "}": "\\}",
    "|": "\\|",
    "<": "\\<",
    ">": "\\>",
    "\n": "\\n",
    "\r": "",
}


def escape_record(text: str) -> str:
    return "".join(_RECORD_SPECIALS.get(char, char) for char in text)


def escape_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_attrs(attrs: List[Tuple[str, str]]) -> str:
    return "[" + ",".join(f"{key}={value}" for key, value in attrs) + "]"


class DotRenderer:
    """Turns a snapshot and its diff into Graphviz ``strict digraph`` text.

    Nodes are grouped into one ``rank=same`` block per level. Each block owns
    an invisible anchor node; chaining the anchors keeps the levels in rank
    order whatever layout heuristics the dot engine applies.
    """

    def __init__(self, palette: Optional[Palette] = None, *, rank_guides: bool = True) -> None:
        self.palette = palette if palette is not None else Palette()
        self.rank_guides = rank_guides

    def render(
        self,
        snapshot: Snapshot,
        result: DiffResult,
        head_label: str,
        tail_label: Optional[str] = None,
    ) -> str:
        lines: List[str] = ["strict digraph {"]
        lines.extend(_GRAPH_DEFAULTS)

        lines.append(self._sentinel(HEADER_NAME, head_label))
        if tail_label is not None:
            lines.append(self._sentinel(TAIL_NAME, tail_label))

        lines.extend(self._levels(snapshot, result))

        lines.extend(self._head_edge(snapshot.head, result.head_edge))
        if tail_label is not None:
            lines.extend(self._tail_edge(snapshot.tail, result.tail_edge or Change.UNCHANGED))

        lines.append("  edge[tailclip=false,arrowtail=dot,dir=both];")
        for edge in collect_edges(snapshot, result):
            lines.append(self._edge(edge))

        if self.rank_guides and len(snapshot.levels) > 1:
            chain = " -> ".join(f"{ANCHOR_PREFIX}{index}" for index in range(len(snapshot.levels)))
            lines.append(f"  {chain} [style=invis];")

        lines.append("}")
        return "\n".join(lines) + "\n"

    def _colour(self, attrs: List[Tuple[str, str]], name: str, change: Optional[Change]) -> None:
        colour = self.palette.colour_for(change)
        if colour:
            attrs.append((name, colour))

    def _sentinel(self, name: str, label: str) -> str:
        attrs = [
            ("style", "filled"),
            ("fillcolor", "black"),
            ("fontcolor", "white"),
            ("fontname", "monospace"),
            ("shape", "ellipse"),
            ("label", f'"{escape_string(label)}"'),
        ]
        return f"  {name}{format_attrs(attrs)};"

    def _levels(self, snapshot: Snapshot, result: DiffResult) -> List[str]:
        lines: List[str] = []
        for index, level in enumerate(snapshot.levels):
            lines.append(
                f'  {{rank=same; {ANCHOR_PREFIX}{index}[shape=none,label="",height=0,width=0];'
            )
            for node in level:
                lines.append("    " + self._node(node, result))
            lines.append("  }")
        return lines

    def _node(self, node: GraphNode, result: DiffResult) -> str:
        if node.is_placeholder:
            label = PLACEHOLDER_LABEL
        else:
            data = PLACEHOLDER_LABEL if node.data is None else str(node.data)
            label = "{<prev>|<data> " + escape_record(data) + "|<next>}"

        change = result.for_node(node)
        attrs = [("label", f'"{label}"')]
        self._colour(attrs, "color", change.node)
        self._colour(attrs, "fontcolor", change.node if change.node is Change.NEW else change.data)
        return f"{node.dot_name}{format_attrs(attrs)};"

    def _null_target(self, sentinel: str, change: Change) -> List[str]:
        attrs: List[Tuple[str, str]] = []
        self._colour(attrs, "color", change)
        return [
            f"  {sentinel}{NULL_SUFFIX} [shape=circle,label=<<B>∅</B>>];",
            f"  {sentinel} -> {sentinel}{NULL_SUFFIX} {format_attrs(attrs)};",
        ]

    def _head_edge(self, head: Optional[GraphNode], change: Change) -> List[str]:
        if head is None:
            return self._null_target(HEADER_NAME, change)
        attrs: List[Tuple[str, str]] = []
        self._colour(attrs, "color", change)
        return [f"  {HEADER_NAME} -> {head.dot_name} {format_attrs(attrs)};"]

    def _tail_edge(self, tail: Optional[GraphNode], change: Change) -> List[str]:
        if tail is None:
            return self._null_target(TAIL_NAME, change)
        attrs = [("dir", "back")]
        self._colour(attrs, "color", change)
        return [f"  {tail.dot_name} -> {TAIL_NAME} {format_attrs(attrs)};"]

    def _edge(self, edge: Edge) -> str:
        if edge.kind == "next":
            endpoints = f"{edge.source.dot_name}:next:c -> {edge.target.dot_name}:nw"
        else:
            endpoints = f"{edge.source.dot_name}:prev:c -> {edge.target.dot_name}:se"
        attrs: List[Tuple[str, str]] = []
        self._colour(attrs, "color", edge.change)
        if not edge.constrained:
            attrs.append(("constraint", "false"))
        return f"  {endpoints} {format_attrs(attrs)};"
