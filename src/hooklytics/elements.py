"""Element handles attached to events."""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import Any, Callable

ElementPathResolver = Callable[[Any], "str | None"]

# Guard against cyclic parent chains
MAX_PATH_DEPTH = 64


@dataclass(frozen=True, slots=True)
class ElementInfo:
    """
    Optional binding between an event and a UI element.

    The element is held through a weak reference when the handle
    supports one, so a queued event never keeps a widget alive. Handles
    that cannot be weakly referenced (strings, ints) are stored as-is.
    """
    _ref: Any = field(default=None, repr=False)
    _weak: bool = field(default=False, repr=False)
    element_id: str | None = None
    element_path: str | None = None

    @classmethod
    def bind(
        cls,
        handle: Any,
        element_id: str | None = None,
        element_path: str | None = None,
    ) -> ElementInfo:
        try:
            return cls(weakref.ref(handle), True, element_id, element_path)
        except TypeError:
            return cls(handle, False, element_id, element_path)

    @property
    def element_ref(self) -> Any:
        """The bound element, or None if it was never set or is gone."""
        if self._weak:
            return self._ref()
        return self._ref

    @property
    def is_bound(self) -> bool:
        return self._ref is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_id": self.element_id,
            "element_path": self.element_path,
        }


def _segment(node: Any) -> str:
    tag = getattr(node, "tag", None) or getattr(node, "name", None) or type(node).__name__
    node_id = getattr(node, "id", None)
    if isinstance(node_id, str) and node_id:
        return f"{tag}#{node_id}"
    return str(tag)


def resolve_element_path(handle: Any) -> str | None:
    """
    Build a "root > ... > leaf" locator by walking `.parent` links.

    Each segment is the node's `tag` (or `name`, or class name) with
    `#id` appended when the node has a string id.
    """
    if handle is None:
        return None

    segments = []
    node = handle
    seen: set[int] = set()
    while node is not None and len(segments) < MAX_PATH_DEPTH:
        if id(node) in seen:
            break
        seen.add(id(node))
        segments.append(_segment(node))
        node = getattr(node, "parent", None)

    return " > ".join(reversed(segments))
