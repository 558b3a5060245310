"""
Field tree construction for headless-form.

This module contains:
- Input type classification
- Option extraction and async option configuration
- The recursive field builder
"""

from headless_form.fields.builder import FieldBuilder, build_fields, object_view, order_names
from headless_form.fields.input_type import FORMAT_INPUT_TYPES, get_input_type, infer_input_type
from headless_form.fields.options import build_async_options, extract_options

__all__ = [
    "FieldBuilder",
    "build_fields",
    "object_view",
    "order_names",
    "get_input_type",
    "infer_input_type",
    "FORMAT_INPUT_TYPES",
    "build_async_options",
    "extract_options",
]
