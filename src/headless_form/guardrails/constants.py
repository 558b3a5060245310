"""
Constants for the schema-setup guardrails.
"""

# JSON Schema primitive types accepted in ``type``
VALID_TYPES = frozenset({"string", "number", "integer", "boolean", "array", "object", "null"})

# SchemaNode fields holding a single sub-schema
SINGLE_SUBSCHEMA_FIELDS = ("items", "additional_properties", "contains", "not_", "if_", "then", "else_")

# SchemaNode fields holding a list of sub-schemas
LIST_SUBSCHEMA_FIELDS = ("prefix_items", "all_of", "any_of", "one_of")

# SchemaNode fields holding a name -> sub-schema mapping
MAP_SUBSCHEMA_FIELDS = ("properties", "pattern_properties")
