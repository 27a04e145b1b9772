from rich import print
from rich.markup import escape

from linkview import AttributeAccessor, SnapshotEngine, render_preview


class Node:
    def __init__(self, value):
        self.previous = self
        self.value = value
        self.next = self


class Ring:
    def __init__(self, *values):
        self.first = None
        for value in values:
            node = Node(value)
            if self.first is not None:
                last = self.first.previous
                node.previous, node.next = last, self.first
                last.next = node
                self.first.previous = node
            else:
                self.first = node


ring = Ring("north", "east", "south", "west")
engine = SnapshotEngine(AttributeAccessor(ring, head="first", prev="previous", data="value"))

print(render_preview(engine.render(), include_markup=True))

ring.first.next.value = "EAST"
ring.first = ring.first.next
rendering = engine.render()
print(render_preview(rendering, include_markup=True))
print(escape(rendering.dot))
