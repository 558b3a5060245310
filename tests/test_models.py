"""Tests for headless-form data models."""

import pytest
from headless_form.models.schema import (
    LogicDefinitions,
    SchemaNode,
    parse_schema,
    replace_node,
)
from headless_form.models.field import (
    AsyncOptions,
    FieldOption,
    FormField,
    find_field,
)
from headless_form.models.form_options import (
    CreateHeadlessFormOptions,
    ValidationOptions,
)
from headless_form.models.collaborators import (
    AsyncOptionsLoaderContext,
    AsyncOptionsLoaderResult,
    ModifyResult,
)
from headless_form.models.validation_result import (
    ValidationError,
    ValidationResult,
)


class TestSchemaNode:
    """Tests for SchemaNode model."""

    def test_keyword_aliases(self):
        """Test that JSON keywords map onto Python field names."""
        node = SchemaNode.model_validate({
            "type": "string",
            "minLength": 2,
            "if": {"const": "a"},
            "else": {"maxLength": 4},
            "not": {"const": "b"},
        })
        assert node.min_length == 2
        assert isinstance(node.if_, SchemaNode)
        assert node.else_.max_length == 4
        assert node.not_.const == "b"

    def test_extension_keywords(self):
        """Test x-jsf-* keywords."""
        node = SchemaNode.model_validate({
            "x-jsf-presentation": {"inputType": "textarea"},
            "x-jsf-order": ["b", "a"],
            "x-jsf-errorMessage": {"required": "Fill this in"},
            "x-jsf-logic-validations": ["adult"],
        })
        assert node.input_type == "textarea"
        assert node.order == ["b", "a"]
        assert node.error_message == {"required": "Fill this in"}
        assert node.logic_validations == ["adult"]

    def test_unknown_keywords_kept(self):
        """Test that unrecognised keys stay in the extension bag."""
        node = SchemaNode.model_validate({"type": "string", "x-custom": {"a": 1}})
        assert node.model_extra["x-custom"] == {"a": 1}
        assert node.to_schema() == {"type": "string", "x-custom": {"a": 1}}

    def test_to_schema_round_trip(self):
        """Test dumping back to the original keyword names."""
        raw = {
            "type": "object",
            "properties": {"a": {"type": "string", "maxLength": 3}, "b": False},
            "required": ["a"],
        }
        assert parse_schema(raw).to_schema() == raw

    def test_boolean_schemas(self):
        """Test boolean schemas in sub-schema positions."""
        node = SchemaNode.model_validate({"properties": {"a": True, "b": False}})
        assert node.properties["a"] is True
        assert node.properties["b"] is False
        assert parse_schema(False) is False

    def test_explicit_null_const(self):
        """Test that const null counts as declared."""
        assert SchemaNode.model_validate({"const": None}).has("const")
        assert not SchemaNode.model_validate({"type": "null"}).has("const")

    def test_kind(self):
        """Test the tagged node variant."""
        assert SchemaNode.model_validate({"properties": {}}).kind == "object"
        assert SchemaNode.model_validate({"type": "array"}).kind == "array"
        assert SchemaNode.model_validate({"type": "string"}).kind == "scalar"
        assert SchemaNode.model_validate({"anyOf": [{"type": "string"}]}).kind == "composition"
        assert SchemaNode.model_validate({"if": {"const": 1}}).kind == "conditional"

    def test_replace_node_keeps_original(self):
        """Test that replace_node derives a copy."""
        node = SchemaNode.model_validate({"type": "string", "if": {"const": "a"}, "then": {"minLength": 2}})
        copied = replace_node(node, remove=("if_", "then"), max_length=5)
        assert copied.max_length == 5
        assert copied.to_schema() == {"type": "string", "maxLength": 5}
        assert node.to_schema() == {"type": "string", "if": {"const": "a"}, "then": {"minLength": 2}}


class TestLogicDefinitions:
    """Tests for LogicDefinitions model."""

    def test_rules(self):
        """Test named validations and computed values."""
        logic = LogicDefinitions.model_validate({
            "validations": {"adult": {"rule": {">=": [{"var": "age"}, 18]}, "errorMessage": "Too young"}},
            "computedValues": {"min_age": {"rule": 18}},
        })
        assert logic.validations["adult"].error_message == "Too young"
        assert logic.computed_values["min_age"].rule == 18
        assert logic.conditionals() == []

    def test_conditionals(self):
        """Test collecting rule-keyed conditionals."""
        logic = LogicDefinitions.model_validate({
            "if": {"==": [{"var": "a"}, 1]},
            "then": {"required": ["b"]},
            "allOf": [{"if": {"var": "c"}, "else": {"required": ["d"]}}],
        })
        conditionals = logic.conditionals()
        assert len(conditionals) == 2
        assert conditionals[0].then.required == ["b"]
        assert conditionals[1].else_.required == ["d"]

    def test_without_conditionals(self):
        """Test stripping conditionals keeps the rules."""
        logic = LogicDefinitions.model_validate({
            "validations": {"ok": {"rule": True}},
            "if": {"var": "a"},
            "then": {"required": ["b"]},
        })
        stripped = logic.without_conditionals()
        assert stripped.conditionals() == []
        assert "ok" in stripped.validations
        assert logic.has_condition


class TestFormField:
    """Tests for FormField model."""

    def test_to_dict_uses_camel_case(self):
        """Test the exported keys."""
        field = FormField(
            name="email",
            input_type="email",
            type="email",
            is_visible=True,
            max_length=50,
        )
        exported = field.to_dict()
        assert exported["inputType"] == "email"
        assert exported["isVisible"] is True
        assert exported["maxLength"] == 50
        assert "options" not in exported

    def test_extra_presentation_keys(self):
        """Test that unknown attributes are kept."""
        field = FormField(name="a", input_type="text", type="text", placeholder="Type here")
        assert field.to_dict()["placeholder"] == "Type here"

    def test_get_field(self):
        """Test child lookup."""
        child = FormField(name="zip", input_type="text", type="text")
        parent = FormField(name="address", input_type="fieldset", type="fieldset", fields=[child])
        assert parent.get_field("zip") is child
        assert parent.get_field("city") is None

    def test_find_field_through_group_array(self):
        """Test that indices pass through group-array rows."""
        email = FormField(name="email", input_type="email", type="email")
        rows = FormField(name="items", input_type="group-array", type="group-array", fields=[email])
        assert find_field([rows], ("items", 2, "email")) is email
        assert find_field([rows], ("items", "email")) is email
        assert find_field([email], ("email", 0)) is None

    def test_find_field_in_row(self):
        """Test that indices of existing rows address that row's fields."""
        template = FormField(name="email", input_type="email", type="email")
        second = FormField(name="email", input_type="email", type="email", required=True)
        rows = FormField(
            name="items",
            input_type="group-array",
            type="group-array",
            fields=[template],
            row_fields=[[template], [second]],
        )
        assert find_field([rows], ("items", 1, "email")) is second
        assert find_field([rows], ("items", 5, "email")) is template


class TestOptionModels:
    """Tests for option models."""

    def test_field_option_extra(self):
        """Test that options keep extra attributes."""
        option = FieldOption(label="Yes", value=True, description="Agree")
        assert option.model_dump() == {"label": "Yes", "value": True, "description": "Agree"}

    def test_async_options_defaults(self):
        """Test async option defaults and camelCase input."""
        options = AsyncOptions.model_validate({"id": "countries", "searchable": True})
        assert options.debounce_ms == 300
        assert options.paginated is False
        assert AsyncOptions.model_validate({"id": "x", "debounceMs": 50}).debounce_ms == 50

    def test_async_loader_not_exported(self):
        """Test that the loader never appears in dumps."""
        options = AsyncOptions(id="countries", loader=lambda context: None)
        assert options.loader is not None
        assert "loader" not in options.model_dump()

    def test_create_options_camel_case(self):
        """Test the camelCase option names."""
        options = CreateHeadlessFormOptions.model_validate({
            "initialValues": {"a": 1},
            "legacyOptions": {"treatNullAsUndefined": True},
            "strictInputType": True,
        })
        assert options.initial_values == {"a": 1}
        assert options.legacy_options.treat_null_as_undefined is True
        assert options.legacy_options.allow_forbidden_values is None
        assert options.strict_input_type is True

    def test_validation_options_frozen(self):
        """Test that validator options cannot change."""
        options = ValidationOptions()
        with pytest.raises(Exception):
            options.allow_forbidden_values = True


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_valid_result(self):
        """Test a result without errors."""
        result = ValidationResult()
        assert result.is_valid is True
        assert result.error_count == 0

    def test_invalid_result(self):
        """Test a result with errors."""
        errors = [
            ValidationError(keyword="required", path=("properties", "a"), message="Required field"),
            ValidationError(keyword="minLength", path=("properties", "b"), message="Too short"),
        ]
        result = ValidationResult(form_errors={"a": "Required field", "b": "Too short"}, errors=errors)
        assert result.is_valid is False
        assert result.error_count == 2
        assert len(result.get_errors_for("required")) == 1
        assert "errors" not in result.model_dump()


class TestCollaboratorModels:
    """Tests for collaborator interface models."""

    def test_loader_context(self):
        """Test the context handed to async option loaders."""
        context = AsyncOptionsLoaderContext.model_validate({
            "search": "por",
            "pagination": {"page": 2, "hasMore": True},
            "formValues": {"region": "eu"},
        })
        assert context.pagination.has_more is True
        assert context.form_values == {"region": "eu"}
        assert context.signal is None

    def test_loader_result(self):
        """Test loader results."""
        result = AsyncOptionsLoaderResult(options=[{"label": "Portugal", "value": "PT"}])
        assert result.model_dump(by_alias=True) == {
            "options": [{"label": "Portugal", "value": "PT"}],
            "pagination": None,
        }

    def test_modify_result(self):
        """Test the schema modifier result alias."""
        result = ModifyResult.model_validate({
            "schema": {"type": "object"},
            "warnings": [{"type": "FIELD_NOT_FOUND", "message": "No field named x"}],
        })
        assert result.schema_ == {"type": "object"}
        assert result.warnings[0].meta is None
        assert result.model_dump(by_alias=True)["schema"] == {"type": "object"}
