from linked_lists import CircularList, LinkedList

from linkview.accessor import AttributeAccessor
from linkview.graph_components.builder import SnapshotBuilder
from linkview.graph_components.core import Palette
from linkview.graph_components.diff import diff
from linkview.graph_components.dot import DotRenderer, escape_record
from linkview.graph_components.store import Snapshot


def _render(lst, previous=None, *, tail="tail", head="head", palette=None, rank_guides=True):
    accessor = AttributeAccessor(lst, head=head, tail=tail)
    snapshot = SnapshotBuilder(accessor).build()
    result = diff(snapshot, previous or Snapshot.empty(), has_tail=accessor.has_tail)
    text = DotRenderer(palette, rank_guides=rank_guides).render(
        snapshot, result, accessor.head_label, accessor.tail_label
    )
    return text, snapshot


def _line_with(text, fragment):
    return next(line for line in text.splitlines() if fragment in line)


def test_output_is_a_strict_digraph_with_sentinels() -> None:
    text, _ = _render(LinkedList(["A"]))

    lines = text.splitlines()
    assert lines[0] == "strict digraph {"
    assert lines[-1] == "}"
    assert 'label="head"' in _line_with(text, "__HEADER_NAME[")
    assert 'label="tail"' in _line_with(text, "__TAIL_NAME[")


def test_sections_are_emitted_in_order() -> None:
    text, _ = _render(LinkedList(["A", "B"]))

    header = text.index("__HEADER_NAME[")
    group = text.index("{rank=same;")
    head_edge = text.index("__HEADER_NAME -> ")
    node_edge = text.index(":next:c ->")
    guides = text.index("__DUMMY_0 -> __DUMMY_1")
    assert header < group < head_edge < node_edge < guides


def test_no_trailer_sentinel_without_tail_field() -> None:
    text, _ = _render(CircularList(["A", "B"]), head="first", tail=None)

    assert "__TAIL_NAME" not in text
    assert 'label="first"' in text


def test_one_rank_group_per_level() -> None:
    text, snapshot = _render(LinkedList(["A", "B", "C"]))

    assert text.count("{rank=same;") == 3
    for index, level in enumerate(snapshot.levels):
        assert f"__DUMMY_{index}[shape=none" in text
        for node in level:
            assert node.dot_name in text


def test_first_render_colours_new_nodes_and_edges() -> None:
    lst = LinkedList(["A", "B"])
    text, snapshot = _render(lst)

    node_line = _line_with(text, f"{snapshot.head.dot_name}[label=")
    assert "color=blue" in node_line
    assert "fontcolor=blue" in node_line
    assert "color=blue" in _line_with(text, ":next:c ->")
    assert "color=red" in _line_with(text, "__HEADER_NAME -> ")


def test_unchanged_render_has_no_colour() -> None:
    lst = LinkedList(["A", "B"])
    _, first = _render(lst)

    text, _ = _render(lst, first)

    drawn = [line for line in text.splitlines() if "__NODE_" in line or "->" in line]
    assert drawn
    assert not any("color=" in line for line in drawn)


def test_modified_data_uses_modified_font_colour() -> None:
    lst = LinkedList(["A", "B"])
    _, first = _render(lst)
    lst.set(1, "Z")

    text, snapshot = _render(lst, first)

    node_line = _line_with(text, f"{snapshot.tail.dot_name}[label=")
    assert "fontcolor=red" in node_line
    assert ",color=" not in node_line


def test_absent_head_points_at_null_marker() -> None:
    text, _ = _render(LinkedList())

    assert "__HEADER_NAME_NULL [shape=circle,label=<<B>∅</B>>];" in text
    assert "__HEADER_NAME -> __HEADER_NAME_NULL []" in text
    assert "__TAIL_NAME -> __TAIL_NAME_NULL []" in text


def test_head_becoming_absent_is_highlighted() -> None:
    lst = LinkedList(["A"])
    _, first = _render(lst)
    lst.make_empty()

    text, _ = _render(lst, first)

    assert "__HEADER_NAME -> __HEADER_NAME_NULL [color=red];" in text


def test_tail_edge_points_back_from_node() -> None:
    text, snapshot = _render(LinkedList(["A", "B"]))

    assert f"{snapshot.tail.dot_name} -> __TAIL_NAME [dir=back,color=red];" in text


def test_edges_touching_header_are_unconstrained() -> None:
    lst = CircularList(["A", "B", "C"])
    text, snapshot = _render(lst, head="first", tail=None)
    a, b, c = (snapshot.lookup(node) for node in lst.nodes())

    assert "constraint=false" in _line_with(text, f"{c.dot_name}:next:c -> {a.dot_name}:nw")
    assert "constraint=false" in _line_with(text, f"{a.dot_name}:prev:c -> {c.dot_name}:se")
    assert "constraint=false" not in _line_with(text, f"{b.dot_name}:next:c -> {c.dot_name}:nw")


def test_placeholder_node_is_labelled_none() -> None:
    text, snapshot = _render(LinkedList([None]))

    assert f'{snapshot.head.dot_name}[label="None"' in text


def test_record_label_escapes_special_characters() -> None:
    text, _ = _render(LinkedList(['say "hi" | <b>']))

    assert r'{<prev>|<data> say \"hi\" \| \<b\>|<next>}' in text
    assert escape_record("{x}\n") == "\\{x\\}\\n"


def test_highlighting_can_be_disabled() -> None:
    text, _ = _render(LinkedList(["A", "B"]), palette=Palette.for_style("none"))

    assert "color=blue" not in text
    assert "color=red" not in text


def test_rank_guides_can_be_disabled() -> None:
    text, _ = _render(LinkedList(["A", "B"]), rank_guides=False)

    assert "style=invis" not in text
