"""Structural merge primitives over parsed JSON documents.

Every function mutates ``doc`` in place and reports whether anything changed,
so callers can skip the write when a document is already compliant. Existing
keys and values are never replaced, except that a null container on the
path is treated as absent and replaced by an empty one.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence


class StructureError(ValueError):
    """An existing node has the wrong JSON type for the requested path."""

    def __init__(self, path: Sequence[str], expected: str, found: Any):
        self.path = tuple(path)
        self.expected = expected
        self.found = found
        dotted = ".".join(self.path) or "<root>"
        super().__init__(f"Expected {expected} at '{dotted}', found {_type_name(found)}")


def _type_name(value: Any) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if value is None:
        return "null"
    return type(value).__name__


def lookup(doc: Any, path: Sequence[str], default: Any = None) -> Any:
    """Value at ``path`` (a sequence of object keys), or ``default`` if absent."""
    node = doc
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def _ensure(doc: dict, path: Sequence[str], kind: type, factory: Callable[[], Any]) -> tuple[Any, bool]:
    if not isinstance(doc, dict):
        raise StructureError((), "object", doc)
    node: Any = doc
    changed = False
    for depth, key in enumerate(path):
        last = depth == len(path) - 1
        want = kind if last else dict
        child = node.get(key)
        # null counts as absent
        if child is None:
            child = factory() if last else {}
            node[key] = child
            changed = True
        elif not isinstance(child, want):
            raise StructureError(path[: depth + 1], "array" if want is list else "object", child)
        node = child
    return node, changed


def ensure_object(doc: dict, path: Sequence[str]) -> tuple[dict, bool]:
    """Make sure an object exists at ``path``; return it and whether it was created."""
    return _ensure(doc, path, dict, dict)


def ensure_array(doc: dict, path: Sequence[str]) -> tuple[list, bool]:
    """Make sure an array exists at ``path``; return it and whether it was created."""
    return _ensure(doc, path, list, list)


def append_if_absent(items: list, item: Any, predicate: Callable[[Any], bool]) -> bool:
    """Append ``item`` unless some existing element satisfies ``predicate``."""
    if any(predicate(existing) for existing in items):
        return False
    items.append(item)
    return True


def set_default(doc: dict, path: Sequence[str], key: str, value: Any) -> bool:
    """Set ``key`` in the object at ``path`` only if the key is absent."""
    obj, changed = ensure_object(doc, path)
    if key in obj:
        return changed
    obj[key] = value
    return True


def has_key_matching(field: str, value: Any) -> Callable[[Any], bool]:
    """Predicate: element is an object whose ``field`` equals ``value``."""
    return lambda item: isinstance(item, dict) and item.get(field) == value
