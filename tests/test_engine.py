import pytest
from linked_lists import LinkedList

from linkview.accessor import AttributeAccessor, StructureAccessor
from linkview.engine import SnapshotEngine
from linkview.errors import AccessorError, ConfigurationError, SinkError
from linkview.graph_components.core import Change, Palette


class ExplodingAccessor(StructureAccessor):
    def get_head(self):
        return object()

    def get_prev(self, node):
        raise PermissionError("field is not readable")

    def get_data(self, node):
        return None

    def get_next(self, node):
        return None


def _engine(lst, **kwargs) -> SnapshotEngine:
    return SnapshotEngine(AttributeAccessor(lst, tail="tail"), **kwargs)


def test_scenario_add_three_then_remove_middle() -> None:
    lst = LinkedList(["A", "B", "C"])
    engine = _engine(lst)
    a, b, c = lst.nodes()

    first = engine.render()

    assert len(first.diff.new_nodes()) == 3
    assert first.snapshot.head is first.snapshot.lookup(a)
    assert f"__HEADER_NAME -> {first.snapshot.head.dot_name}" in first.dot

    lst.remove(1)
    second = engine.render()
    node_a = second.diff.for_node(second.snapshot.lookup(a))
    node_c = second.diff.for_node(second.snapshot.lookup(c))

    assert second.snapshot.lookup(b) is None
    assert second.diff.new_nodes() == []
    assert (node_a.node, node_a.data, node_a.next_edge) == (Change.UNCHANGED, Change.UNCHANGED, Change.MODIFIED)
    assert (node_c.node, node_c.data, node_c.prev_edge) == (Change.UNCHANGED, Change.UNCHANGED, Change.MODIFIED)


def test_render_twice_is_idempotent() -> None:
    lst = LinkedList(["A", "B"])
    engine = _engine(lst)

    engine.render()
    second = engine.render()

    assert not second.diff.has_changes()
    assert engine.store.generation == 2


def test_emit_receives_dot_text() -> None:
    lst = LinkedList(["A"])
    written = []

    rendering = _engine(lst).render(written.append)

    assert written == [rendering.dot]


def test_failed_emit_keeps_previous_snapshot() -> None:
    lst = LinkedList(["A"])
    engine = _engine(lst)

    def broken(text):
        raise OSError("disk full")

    with pytest.raises(SinkError, match="disk full"):
        engine.render(broken)

    assert engine.store.generation == 0
    assert len(engine.store.previous) == 0
    assert len(engine.render().diff.new_nodes()) == 1


def test_accessor_error_propagates_without_commit() -> None:
    engine = SnapshotEngine(AttributeAccessor(LinkedList(["A"]), head="missing"))

    with pytest.raises(AccessorError):
        engine.render()

    assert engine.store.generation == 0


def test_foreign_accessor_failure_is_wrapped() -> None:
    engine = SnapshotEngine(ExplodingAccessor())

    with pytest.raises(AccessorError, match="not readable") as info:
        engine.render()

    assert isinstance(info.value.__cause__, PermissionError)


def test_engines_do_not_share_snapshots() -> None:
    lst = LinkedList(["A"])
    first = _engine(lst)
    second = _engine(lst)

    first.render()

    assert len(second.render().diff.new_nodes()) == 1


def test_reset_forgets_previous_snapshot() -> None:
    lst = LinkedList(["A"])
    engine = _engine(lst)
    engine.render()

    engine.reset()

    assert len(engine.render().diff.new_nodes()) == 1


def test_highlighting_disabled_drops_colours() -> None:
    engine = _engine(LinkedList(["A", "B"]), highlight_modifications=False)

    rendering = engine.render()

    assert engine.palette == Palette(new=None, modified=None)
    assert "color=blue" not in rendering.dot


def test_palette_by_name() -> None:
    engine = _engine(LinkedList(["A"]), palette="mono")

    assert engine.palette == Palette.for_style("mono")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"palette": "rainbow"},
        {"palette": 3},
        {"palette": 0},
        {"palette": ""},
        {"highlight_modifications": "yes"},
        {"rank_guides": None},
    ],
)
def test_invalid_configuration_is_rejected(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        _engine(LinkedList(), **kwargs)


def test_accessor_type_is_checked() -> None:
    with pytest.raises(ConfigurationError):
        SnapshotEngine(LinkedList())
