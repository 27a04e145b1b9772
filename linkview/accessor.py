"""Read access to a caller-owned linked structure.

The engine never touches list nodes directly. Everything it needs goes
through a :class:`StructureAccessor`: the header and optional trailer
references of the list object, and the ``prev``/``data``/``next`` fields of
each node. :class:`AttributeAccessor` maps those onto plain attribute names;
:func:`discover_accessor` guesses the names from the objects themselves so
that an unmodified list class can be viewed.
"""

import dataclasses
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Sequence

from .errors import AccessorError, ConfigurationError

logger = logging.getLogger(__name__)


HEAD_NAMES = ("begin", "first", "front", "head", "init")
TAIL_NAMES = ("end", "final", "last", "tail", "trail")
PREV_NAMES = ("prev",)
DATA_NAMES = ("data", "value", "val", "item", "elem")
NEXT_NAMES = ("next",)


class StructureAccessor(ABC):
    """Read-only view of a linked list for the snapshot builder.

    Subclasses that expose a trailer must set ``tail_label`` as well as
    override :meth:`get_tail`; ``get_tail`` is only consulted when
    ``has_tail`` is true.
    """

    head_label: str = "head"
    tail_label: Optional[str] = None

    @property
    def has_tail(self) -> bool:
        return self.tail_label is not None

    @abstractmethod
    def get_head(self) -> Optional[Any]:
        ...

    def get_tail(self) -> Optional[Any]:
        return None

    @abstractmethod
    def get_prev(self, node: Any) -> Optional[Any]:
        ...

    @abstractmethod
    def get_data(self, node: Any) -> Optional[Any]:
        ...

    @abstractmethod
    def get_next(self, node: Any) -> Optional[Any]:
        ...


class AttributeAccessor(StructureAccessor):
    """Accessor over explicitly named attributes.

    ``tail`` may be ``None`` for lists without a trailer reference; such
    lists are drawn without a tail sentinel and may be circular.
    """

    def __init__(
        self,
        structure: Any,
        *,
        head: str = "head",
        tail: Optional[str] = None,
        prev: str = "prev",
        data: str = "data",
        next: str = "next",
    ) -> None:
        for name, value in (("head", head), ("prev", prev), ("data", data), ("next", next)):
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"{name} must be a non-empty attribute name.")
        if tail is not None and (not isinstance(tail, str) or not tail):
            raise ConfigurationError("tail must be a non-empty attribute name when provided.")

        self.structure = structure
        self.head_field = head
        self.tail_field = tail
        self.prev_field = prev
        self.data_field = data
        self.next_field = next
        self.head_label = head
        self.tail_label = tail

    def _read(self, owner: Any, field: str) -> Optional[Any]:
        try:
            return getattr(owner, field)
        except AttributeError as exc:
            raise AccessorError(
                f"Cannot read field {field!r} from {type(owner).__name__}: {exc}"
            ) from exc

    def get_head(self) -> Optional[Any]:
        return self._read(self.structure, self.head_field)

    def get_tail(self) -> Optional[Any]:
        if self.tail_field is None:
            return None
        return self._read(self.structure, self.tail_field)

    def get_prev(self, node: Any) -> Optional[Any]:
        return self._read(node, self.prev_field)

    def get_data(self, node: Any) -> Optional[Any]:
        return self._read(node, self.data_field)

    def get_next(self, node: Any) -> Optional[Any]:
        return self._read(node, self.next_field)

    def __repr__(self) -> str:
        return (
            f"AttributeAccessor(head={self.head_field!r}, tail={self.tail_field!r}, "
            f"prev={self.prev_field!r}, data={self.data_field!r}, next={self.next_field!r})"
        )


def _instance_fields(obj: Any) -> List[str]:
    names: List[str] = []
    for klass in type(obj).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(slot for slot in slots if hasattr(obj, slot))
    if hasattr(obj, "__dict__"):
        names.extend(vars(obj))
    return list(dict.fromkeys(names))


def _type_fields(node_type: type) -> List[str]:
    names: List[str] = []
    if dataclasses.is_dataclass(node_type):
        names.extend(item.name for item in dataclasses.fields(node_type))
    for klass in reversed(node_type.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(slots)
        names.extend(klass.__dict__.get("__annotations__", {}))
    try:
        parameters = inspect.signature(node_type).parameters
    except (TypeError, ValueError):
        parameters = {}
    names.extend(
        name
        for name, parameter in parameters.items()
        if parameter.kind not in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD)
    )
    return list(dict.fromkeys(names))


def find_field(names: Iterable[str], candidates: Sequence[str]) -> Optional[str]:
    """Return the first name that contains any candidate, ignoring case."""
    for name in names:
        lowered = name.lower()
        for candidate in candidates:
            if candidate in lowered:
                return name
    return None


def _resolve_node_field(fields: List[str], role: str, candidates: Sequence[str]) -> str:
    name = find_field(fields, candidates)
    if name is None:
        raise ConfigurationError(f"Unable to resolve list node field with name {role!r}.")
    logger.info('List node field "%s" declared name: "%s"', role, name)
    return name


def discover_accessor(structure: Any, node_type: Optional[type] = None) -> AttributeAccessor:
    """Build an :class:`AttributeAccessor` by matching attribute names.

    Node fields are read from ``node_type`` when given, otherwise from the
    live head or tail node. An empty list without ``node_type`` cannot be
    inspected and is rejected.
    """
    structure_fields = _instance_fields(structure)

    head = find_field(structure_fields, HEAD_NAMES)
    if head is None:
        raise ConfigurationError("Unable to find list header node.")
    logger.info('Header node name: "%s"', head)

    tail = find_field([name for name in structure_fields if name != head], TAIL_NAMES)
    if tail is None:
        logger.info("No tail node found; assuming list to be circular.")
    else:
        logger.info('Tail node name: "%s"', tail)

    head_value = getattr(structure, head)
    tail_value = getattr(structure, tail) if tail is not None else None
    if head_value is not None and tail_value is not None and type(head_value) is not type(tail_value):
        raise ConfigurationError("Head and tail nodes must have the same type.")

    if node_type is not None:
        node_fields = _type_fields(node_type)
    else:
        sample = head_value if head_value is not None else tail_value
        if sample is None:
            raise ConfigurationError(
                "Cannot inspect the nodes of an empty list; pass node_type explicitly."
            )
        node_fields = _instance_fields(sample)

    return AttributeAccessor(
        structure,
        head=head,
        tail=tail,
        prev=_resolve_node_field(node_fields, "prev", PREV_NAMES),
        data=_resolve_node_field(node_fields, "data", DATA_NAMES),
        next=_resolve_node_field(node_fields, "next", NEXT_NAMES),
    )
