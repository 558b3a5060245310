"""
Path addressing shared by the schema tree, the value tree and the field tree.

A path is a tuple of segments. Integer segments are array indices. String
segments are either property names or keyword markers; a property name
always follows a ``properties`` marker in a schema path, so the two never
clash even when a property is itself called ``items`` or ``properties``.

Schema paths (produced by the validator) carry keyword markers. Field paths
(used by the field tree and the error tree) and value paths only carry
property names and indices, so they coincide.
"""

from __future__ import annotations

from typing import Any, Iterable, Union

from headless_form.values import MISSING, is_array, is_object

Segment = Union[str, int]
Path = tuple[Segment, ...]

PROPERTIES = "properties"
ITEMS = "items"

COMPOSITION_KEYWORDS = frozenset({"allOf", "anyOf", "oneOf"})
CONDITIONAL_KEYWORDS = frozenset({"then", "else"})
KEYWORD_MARKERS = COMPOSITION_KEYWORDS | CONDITIONAL_KEYWORDS | {PROPERTIES, ITEMS, "not", "contains"}


def is_index(segment: Segment) -> bool:
    return isinstance(segment, int) and not isinstance(segment, bool)


def child_property(path: Path, name: str) -> Path:
    """Schema path of property ``name`` below ``path``."""
    return (*path, PROPERTIES, name)


def child_item(path: Path, index: int) -> Path:
    """Schema path of array element ``index`` below ``path``."""
    return (*path, ITEMS, index)


def composition_member(path: Path, keyword: str, index: int) -> Path:
    return (*path, keyword, index)


def schema_path_to_field_path(path: Iterable[Segment]) -> Path:
    """
    Rewrite a schema path into field-tree addressing.

    Composition keywords are dropped together with their member index,
    ``then``/``else`` markers are dropped, and ``properties``/``items``
    markers collapse into the property name or index that follows them.

    >>> schema_path_to_field_path(("properties", "address", "allOf", 0, "properties", "zip"))
    ('address', 'zip')
    >>> schema_path_to_field_path(("properties", "items", "items", 2, "properties", "email"))
    ('items', 2, 'email')
    """
    segments = list(path)
    result: list[Segment] = []
    i = 0
    while i < len(segments):
        segment = segments[i]
        following = segments[i + 1] if i + 1 < len(segments) else None
        if segment in COMPOSITION_KEYWORDS:
            i += 2 if is_index(following) else 1
            continue
        if segment in CONDITIONAL_KEYWORDS:
            i += 1
            continue
        if segment == PROPERTIES and isinstance(following, str):
            result.append(following)
            i += 2
            continue
        if segment == ITEMS and is_index(following):
            result.append(following)
            i += 2
            continue
        result.append(segment)
        i += 1
    return tuple(result)


def get_value_at(data: Any, path: Iterable[Segment]) -> Any:
    """Read the value at a field/value path, returning ``MISSING`` when absent."""
    current = data
    for segment in path:
        if is_index(segment) and is_array(current):
            if 0 <= segment < len(current):
                current = current[segment]
                continue
            return MISSING
        if is_object(current) and segment in current:
            current = current[segment]
            continue
        return MISSING
    return current


def escape_segment(segment: Segment) -> str:
    """Escape a property name so dots and brackets survive ``format_path``."""
    text = str(segment)
    return text.replace("\\", "\\\\").replace(".", "\\.").replace("[", "\\[")


def format_path(path: Iterable[Segment]) -> str:
    """Render a field path as ``address.lines[2].street``."""
    out = ""
    for segment in path:
        if is_index(segment):
            out += f"[{segment}]"
        else:
            out += ("." if out else "") + escape_segment(segment)
    return out


def split_path(text: str) -> Path:
    """Parse the output of ``format_path`` back into a path."""
    if not text:
        return ()
    segments: list[Segment] = []
    buf: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            buf.append(text[i + 1])
            i += 2
            continue
        if ch == ".":
            if buf:
                segments.append("".join(buf))
                buf = []
            i += 1
            continue
        if ch == "[":
            if buf:
                segments.append("".join(buf))
                buf = []
            end = text.index("]", i)
            segments.append(int(text[i + 1:end]))
            i = end + 1
            continue
        buf.append(ch)
        i += 1
    if buf:
        segments.append("".join(buf))
    return tuple(segments)
