"""
Layout hints (``x-jsf-layout``).

The form core passes layout hints through untouched; these helpers let a UI
layer check and normalise them. Turning hints into CSS is the job of a
``LayoutStyleGenerator``, which lives outside the core.
"""

from typing import Any

from headless_form.models.collaborators import LayoutStyleGenerator
from headless_form.models.field import FormField

DEFAULT_LAYOUT_CONFIG: dict[str, Any] = {
    "type": "columns",
    "columns": 1,
    "gap": "16px",
}

BREAKPOINTS = ("sm", "md", "lg", "xl")
COLUMN_PLACEMENT_KEYS = ("colSpan", "colStart", "colEnd")


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def _valid_breakpoints(value: dict[str, Any]) -> bool:
    return all(value.get(key) is None or _is_positive_int(value[key]) for key in BREAKPOINTS)


def is_valid_layout_config(layout: Any) -> bool:
    """
    Check a layout hint object.

    ``type`` must be ``columns``, column counts and placements positive
    integers (or per-breakpoint dicts of them), ``gap`` a CSS length string.
    """
    if not isinstance(layout, dict) or not layout:
        return False
    if layout.get("type") is not None and layout["type"] != "columns":
        return False
    if "columns" in layout and not _is_positive_int(layout["columns"]):
        return False
    if layout.get("gap") is not None and not isinstance(layout["gap"], str):
        return False
    responsive = layout.get("responsive")
    if responsive is not None and not (isinstance(responsive, dict) and _valid_breakpoints(responsive)):
        return False

    for key in COLUMN_PLACEMENT_KEYS:
        value = layout.get(key)
        if value is None or _is_positive_int(value):
            continue
        if isinstance(value, dict) and _valid_breakpoints(value):
            continue
        return False
    return True


def normalize_layout_config(layout: Any = None) -> dict[str, Any]:
    """Fill in defaults; invalid or missing hints give the default layout."""
    if not is_valid_layout_config(layout):
        return dict(DEFAULT_LAYOUT_CONFIG)
    return {**DEFAULT_LAYOUT_CONFIG, **layout}


def get_field_layout_info(field: FormField) -> dict[str, Any] | None:
    return field.layout or None


def generate_styles(layout: Any, generator: LayoutStyleGenerator) -> dict[str, str]:
    """Hand normalised hints to a style generator."""
    return generator(normalize_layout_config(layout))
