"""Tests for the headless form orchestrator."""

import pytest
from headless_form import (
    CreateHeadlessFormOptions,
    HeadlessForm,
    SchemaSetupError,
    create_headless_form,
)
from headless_form.models.field import find_field
from headless_form.paths import split_path


@pytest.fixture
def company_schema():
    return {
        "type": "object",
        "properties": {
            "kind": {"type": "string", "title": "Kind", "oneOf": [{"const": "biz", "title": "Business"}, {"const": "personal", "title": "Personal"}]},
            "company": {"type": "string", "title": "Company", "maxLength": 20},
        },
        "required": ["kind"],
        "if": {"properties": {"kind": {"const": "biz"}}, "required": ["kind"]},
        "then": {"required": ["company"]},
        "else": {"properties": {"company": False}},
    }


@pytest.fixture
def age_schema():
    return {
        "type": "object",
        "properties": {
            "age": {"type": "integer", "x-jsf-logic-validations": ["adult"]},
        },
        "x-jsf-logic": {
            "validations": {
                "adult": {"rule": {">=": [{"var": "age"}, 18]}, "errorMessage": "You must be 18 or older"},
            }
        },
    }


def field_map(form):
    return {field.name: field for field in form.fields}


class TestCreateForm:
    """Tests for creating forms."""

    def test_fields(self, company_schema):
        """Test the initial field list."""
        form = create_headless_form(company_schema)
        assert isinstance(form, HeadlessForm)
        assert form.is_error is False
        assert form.error is None
        fields = field_map(form)
        assert fields["kind"].input_type == "radio"
        assert [option.label for option in fields["kind"].options] == ["Business", "Personal"]
        assert fields["company"].is_visible is False

    def test_initial_values(self, company_schema):
        """Test that initial values drive the first resolution."""
        form = create_headless_form(company_schema, {"initialValues": {"kind": "biz"}})
        company = field_map(form)["company"]
        assert company.is_visible is True
        assert company.required is True

    def test_keyword_overrides(self, company_schema):
        """Test snake_case keyword options."""
        form = create_headless_form(company_schema, initial_values={"kind": "biz"})
        assert field_map(form)["company"].is_visible is True

    def test_options_model(self, company_schema):
        """Test passing an options model."""
        options = CreateHeadlessFormOptions(initial_values={"kind": "biz"})
        form = create_headless_form(company_schema, options)
        assert field_map(form)["company"].required is True

    def test_layout(self):
        """Test that the root layout hint is passed through."""
        form = create_headless_form({"type": "object", "properties": {}, "x-jsf-layout": {"columns": 2}})
        assert form.layout == {"columns": 2}


class TestHandleValidation:
    """Tests for handle_validation."""

    def test_valid(self, company_schema):
        """Test valid values."""
        form = create_headless_form(company_schema)
        result = form.handle_validation({"kind": "biz", "company": "ACME"})
        assert result.form_errors is None
        assert result.is_valid

    def test_conditional_required(self, company_schema):
        """Test required fields added by a branch."""
        form = create_headless_form(company_schema)
        result = form.handle_validation({"kind": "biz"})
        assert result.form_errors == {"company": "Required field"}
        assert field_map(form)["company"].is_visible is True

    def test_fields_follow_values(self, company_schema):
        """Test that validation refreshes the field list."""
        form = create_headless_form(company_schema, {"initialValues": {"kind": "biz"}})
        form.handle_validation({"kind": "personal"})
        assert field_map(form)["company"].is_visible is False

    def test_forbidden_value(self, company_schema):
        """Test values for hidden fields."""
        form = create_headless_form(company_schema)
        result = form.handle_validation({"kind": "personal", "company": "ACME"})
        assert result.form_errors == {"company": "Not allowed"}

    def test_allow_forbidden_values(self, company_schema):
        """Test the legacy switch for hidden field values."""
        form = create_headless_form(company_schema, {"legacyOptions": {"allowForbiddenValues": True}})
        assert form.handle_validation({"kind": "personal", "company": "ACME"}).form_errors is None

    def test_treat_null_as_undefined(self, company_schema):
        """Test the legacy switch for null values."""
        form = create_headless_form(company_schema, {"legacyOptions": {"treatNullAsUndefined": True}})
        result = form.handle_validation({"kind": "biz", "company": None})
        assert result.form_errors == {"company": "Required field"}

    def test_none_values(self, company_schema):
        """Test that None means an empty form."""
        form = create_headless_form(company_schema)
        assert form.handle_validation(None).form_errors == {"kind": "Required field"}

    def test_rule_validation(self, age_schema):
        """Test named rule validations."""
        form = create_headless_form(age_schema)
        assert form.handle_validation({"age": 16}).form_errors == {"age": "You must be 18 or older"}
        assert form.handle_validation({"age": 18}).form_errors is None

    def test_custom_operator(self):
        """Test rules with a registered operator."""
        schema = {
            "type": "object",
            "properties": {"n": {"type": "integer", "x-jsf-logic-validations": ["even"]}},
            "x-jsf-logic": {"validations": {"even": {"rule": {"is_even": [{"var": "n"}]}}}},
        }
        form = create_headless_form(schema, {"customJsonLogicOps": {"is_even": lambda n: n % 2 == 0}})
        assert form.is_error is False
        assert form.handle_validation({"n": 4}).form_errors is None
        assert form.handle_validation({"n": 3}).form_errors == {"n": "The value is not valid"}

    def test_errors_match_field_shape(self):
        """Test that every error path addresses a field."""
        schema = {
            "type": "object",
            "properties": {
                "address": {
                    "type": "object",
                    "properties": {"zip": {"type": "string", "pattern": "^[0-9]{4}$"}},
                    "required": ["zip"],
                },
                "people": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"email": {"type": "string", "format": "email"}},
                    },
                },
            },
        }
        form = create_headless_form(schema)
        result = form.handle_validation({"address": {}, "people": [{"email": "ok@x.pt"}, {"email": "nope"}]})
        assert result.form_errors == {
            "address": {"zip": "Required field"},
            "people": [None, {"email": "Please enter a valid email address"}],
        }
        for path in ("address.zip", "people[1].email"):
            assert find_field(form.fields, split_path(path)) is not None

    def test_root_errors_use_empty_key(self):
        """Test that errors about the root value have no field and use the "" key."""
        schema = {"type": "object", "properties": {"a": {"type": "string"}}, "additionalProperties": False}
        form = create_headless_form(schema)
        result = form.handle_validation({"a": "x", "zz": 1})
        assert result.form_errors == {"": 'Property "zz" is not allowed'}
        assert find_field(form.fields, ("zz",)) is None
        assert [field.name for field in form.fields] == ["a"]

    def test_deterministic(self, company_schema):
        """Test repeated validation gives identical output."""
        form = create_headless_form(company_schema)
        first = form.handle_validation({"kind": "biz", "company": "x" * 30})
        fields_first = [field.to_dict() for field in form.fields]
        second = form.handle_validation({"kind": "biz", "company": "x" * 30})
        assert first.form_errors == second.form_errors
        assert [field.to_dict() for field in form.fields] == fields_first

    def test_result_dump(self, company_schema):
        """Test the camelCase result export."""
        result = create_headless_form(company_schema).handle_validation({"kind": "biz"})
        assert result.model_dump(by_alias=True) == {"formErrors": {"company": "Required field"}}
        assert result.get_errors_for("required")[0].path == ("properties", "company")


class TestSetupErrors:
    """Tests for schema setup failures."""

    def test_unknown_operator(self):
        """Test rules with unregistered operators."""
        schema = {
            "type": "object",
            "properties": {"a": {"type": "string", "x-jsf-logic-validations": ["check"]}},
            "x-jsf-logic": {"validations": {"check": {"rule": {"frobnicate": [{"var": "a"}]}}}},
        }
        form = create_headless_form(schema)
        assert form.is_error is True
        assert 'Unrecognized operation "frobnicate"' in form.error
        assert form.fields == []
        with pytest.raises(SchemaSetupError):
            form.handle_validation({})

    def test_unknown_rule_reference(self):
        """Test references to undeclared validations."""
        schema = {"type": "object", "properties": {"a": {"type": "string", "x-jsf-logic-validations": ["nope"]}}}
        form = create_headless_form(schema)
        assert form.is_error is True
        assert 'Unknown validation rule "nope"' in form.error

    def test_unknown_computed_value(self):
        """Test computed attributes naming undeclared values."""
        schema = {
            "type": "object",
            "properties": {"a": {"type": "number", "x-jsf-logic-computedAttrs": {"minimum": "{{ base }}"}}},
        }
        form = create_headless_form(schema)
        assert 'Unknown computed value rule "base"' in form.error

    def test_operator_collision(self):
        """Test custom operators shadowing built-ins."""
        form = create_headless_form({"type": "object"}, {"customJsonLogicOps": {"var": lambda x: x}})
        assert form.is_error is True
        assert "shadows a built-in operation" in form.error

    def test_strict_input_type(self):
        """Test strict input types."""
        schema = {"type": "object", "properties": {"a": {"type": "string"}}}
        form = create_headless_form(schema, {"strictInputType": True})
        assert form.is_error is True
        assert "inputType" in form.error

    def test_invalid_keyword_value(self):
        """Test keywords with values of the wrong type."""
        form = create_headless_form({"type": "object", "properties": {"a": {"minLength": "three"}}})
        assert form.is_error is True
        assert form.error.startswith("Invalid schema")

    def test_metaschema_violation(self):
        """Test schemas the draft 2020-12 metaschema rejects."""
        form = create_headless_form({"type": "object", "properties": {"a": {"minLength": -1}}})
        assert form.is_error is True
        assert form.error.startswith("Invalid JSON Schema")

    def test_invalid_type_name(self):
        """Test unknown type names."""
        form = create_headless_form({"type": "object", "properties": {"a": {"type": "text"}}})
        assert form.is_error is True

    def test_invalid_options(self):
        """Test options of the wrong shape."""
        form = create_headless_form({"type": "object"}, {"customJsonLogicOps": {"x": 1}})
        assert form.is_error is True
        assert form.error.startswith("Invalid options")
