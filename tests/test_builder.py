from linked_lists import CircularList, LinkedList, Node

from linkview.accessor import AttributeAccessor, StructureAccessor
from linkview.graph_components.builder import SnapshotBuilder


class CountingAccessor(AttributeAccessor):
    def __init__(self, structure, **kwargs) -> None:
        super().__init__(structure, **kwargs)
        self.data_reads = {}

    def get_data(self, node):
        self.data_reads[id(node)] = self.data_reads.get(id(node), 0) + 1
        return super().get_data(node)


class DetachedTailAccessor(StructureAccessor):
    def __init__(self, head, tail, tail_label=None) -> None:
        self.head = head
        self.tail = tail
        self.tail_label = tail_label

    def get_head(self):
        return self.head

    def get_tail(self):
        return self.tail

    def get_prev(self, node):
        return node.prev

    def get_data(self, node):
        return node.data

    def get_next(self, node):
        return node.next


def _ranks(snapshot, nodes):
    return [snapshot.levels.rank_of(snapshot.lookup(node)) for node in nodes]


def test_next_hops_increase_rank_by_one() -> None:
    lst = LinkedList(["A", "B", "C", "D"])
    snapshot = SnapshotBuilder(AttributeAccessor(lst, tail="tail")).build()

    assert _ranks(snapshot, lst.nodes()) == [0, 1, 2, 3]
    assert snapshot.levels.min_rank == 0
    assert snapshot.levels.max_rank == 3
    assert [len(level) for level in snapshot.levels] == [1, 1, 1, 1]


def test_prev_hops_decrease_rank_by_one() -> None:
    lst = LinkedList(["A", "B", "C"])
    middle = lst.node_at(1)

    class MiddleHead:
        head = middle

    snapshot = SnapshotBuilder(AttributeAccessor(MiddleHead())).build()

    assert _ranks(snapshot, lst.nodes()) == [-1, 0, 1]
    assert snapshot.levels.min_rank == -1
    assert [level[0].data for level in snapshot.levels] == ["A", "B", "C"]


def test_circular_list_visits_each_node_once() -> None:
    lst = CircularList(["A", "B", "C", "D"])
    accessor = CountingAccessor(lst, head="first")

    snapshot = SnapshotBuilder(accessor).build()

    assert len(snapshot) == 4
    assert sorted(accessor.data_reads.values()) == [1, 1, 1, 1]
    assert _ranks(snapshot, lst.nodes()) == [0, 1, 2, 3]


def test_single_node_cycle_terminates() -> None:
    lst = CircularList(["only"])

    snapshot = SnapshotBuilder(AttributeAccessor(lst, head="first")).build()

    assert len(snapshot) == 1
    assert snapshot.head.next_raw is lst.first


def test_absent_head_and_tail_yield_empty_snapshot() -> None:
    lst = LinkedList()

    snapshot = SnapshotBuilder(AttributeAccessor(lst, tail="tail")).build()

    assert snapshot.head is None
    assert snapshot.tail is None
    assert len(snapshot.levels) == 0
    assert len(snapshot) == 0


def test_tail_reached_through_head_keeps_first_rank() -> None:
    lst = LinkedList(["A", "B", "C"])

    snapshot = SnapshotBuilder(AttributeAccessor(lst, tail="tail")).build()

    assert snapshot.tail is snapshot.lookup(lst.tail)
    assert snapshot.levels.rank_of(snapshot.tail) == 2


def test_detached_tail_is_seeded_at_maximum_rank() -> None:
    lst = LinkedList(["A", "B"])
    stray = Node("Z")
    lst.tail = stray

    snapshot = SnapshotBuilder(AttributeAccessor(lst, tail="tail")).build()

    assert snapshot.levels.rank_of(snapshot.lookup(stray)) == 1
    assert [node.data for node in snapshot.levels.level(1)] == ["B", "Z"]


def test_equal_data_in_distinct_nodes_is_not_merged() -> None:
    lst = LinkedList(["same", "same", "same"])

    snapshot = SnapshotBuilder(AttributeAccessor(lst)).build()

    assert len(snapshot) == 3
    assert len({node.id for node in snapshot.levels.nodes()}) == 3


def test_data_is_copied_at_visit_time() -> None:
    payload = ["x"]
    lst = LinkedList([payload])

    snapshot = SnapshotBuilder(AttributeAccessor(lst)).build()
    payload.append("y")

    assert snapshot.head.data == ["x"]


def test_long_list_does_not_hit_recursion_limit() -> None:
    lst = LinkedList(range(5000))

    snapshot = SnapshotBuilder(AttributeAccessor(lst, tail="tail")).build()

    assert len(snapshot.levels) == 5000
    assert snapshot.levels.rank_of(snapshot.tail) == 4999


def test_custom_accessor_tail_requires_tail_label() -> None:
    head, tail = Node("A"), Node("Z")

    without_label = SnapshotBuilder(DetachedTailAccessor(head, tail)).build()
    with_label = SnapshotBuilder(DetachedTailAccessor(head, tail, tail_label="last")).build()

    assert without_label.tail is None
    assert without_label.lookup(tail) is None
    assert with_label.tail is with_label.lookup(tail)
    assert with_label.tail_raw is tail
