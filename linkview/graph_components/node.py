import copy
import logging
import uuid
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..accessor import StructureAccessor

logger = logging.getLogger(__name__)


DOT_PREFIX = "__NODE_"


def _snapshot_data(data: Any) -> Any:
    try:
        return copy.copy(data)
    except (TypeError, copy.Error) as exc:
        logger.debug("Keeping payload %s by reference: %s", type(data).__name__, exc)
        return data


class GraphNode:
    """Per-render copy of one list node's prev, data and next fields.

    ``base_node`` is borrowed from the caller and only used as an identity
    key. ``data`` is a shallow copy taken when the node is first visited, so
    a later mutation of the caller's payload does not leak into a diagram
    that has already been produced. ``data_ref`` keeps the borrowed payload
    itself; payloads that refuse to be copied are held by reference only.
    """

    def __init__(self, base_node: Any, accessor: "StructureAccessor") -> None:
        self.id = uuid.uuid4().hex
        self.base_node = base_node
        self.prev_raw: Optional[Any] = accessor.get_prev(base_node)
        self.data_ref: Optional[Any] = accessor.get_data(base_node)
        self.data: Optional[Any] = _snapshot_data(self.data_ref)
        self.next_raw: Optional[Any] = accessor.get_next(base_node)

    @property
    def dot_name(self) -> str:
        return DOT_PREFIX + self.id

    @property
    def is_placeholder(self) -> bool:
        return self.prev_raw is None and self.data is None and self.next_raw is None

    def __repr__(self) -> str:
        return f"GraphNode(id={self.id[:8]}, data={self.data!r})"
