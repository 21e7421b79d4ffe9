"""
Schema System (schema/)

Tests SchemaValidator (pass-through, defaults, bounds, coercion, filtering,
shorthand definitions, error collection) and the Pagination schema.
"""

import pytest

from restmap import RestConfig
from restmap.faults import InvalidParamsFault, SchemaDefinitionFault
from restmap.schema import Pagination, SchemaValidator, normalize_schema, pagination_schema


ITEM_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "integer", "minimum": 1},
        "limit": {"type": "number", "default": 20, "minimum": 1, "maximum": 100},
        "active": {"type": "boolean", "default": True},
    },
    "required": ["id"],
}


# ============================================================================
# Pass-through
# ============================================================================

class TestPassThrough:

    @pytest.mark.parametrize("definition", [None, {}])
    def test_empty_schema_returns_input(self, definition):
        validator = SchemaValidator(definition)
        params = {"anything": [1, 2], "goes": None}
        assert validator.is_empty
        assert validator.validate(params) is params

    def test_empty_schema_accepts_non_mappings(self):
        assert SchemaValidator().validate("raw") == "raw"


# ============================================================================
# Constraints
# ============================================================================

class TestConstraints:

    def test_valid_input_with_defaults(self):
        validator = SchemaValidator(ITEM_SCHEMA)
        assert validator.validate({"id": 3}) == {"id": 3, "limit": 20, "active": True}

    def test_explicit_values_kept(self):
        validator = SchemaValidator(ITEM_SCHEMA)
        assert validator.validate({"id": 3, "limit": 100, "active": False}) == {
            "id": 3,
            "limit": 100,
            "active": False,
        }

    @pytest.mark.parametrize("params", [{"id": 0}, {"id": 1, "limit": 0}, {"id": 1, "limit": 101}])
    def test_out_of_range(self, params):
        with pytest.raises(InvalidParamsFault):
            SchemaValidator(ITEM_SCHEMA).validate(params)

    def test_input_not_mutated(self):
        params = {"id": 3}
        SchemaValidator(ITEM_SCHEMA).validate(params)
        assert params == {"id": 3}

    def test_default_is_copied(self):
        validator = SchemaValidator({"tags": {"type": "array", "default": []}})
        first = validator.validate({})
        first["tags"].append("x")
        assert validator.validate({}) == {"tags": []}

    def test_all_violations_collected(self):
        with pytest.raises(InvalidParamsFault) as exc:
            SchemaValidator(ITEM_SCHEMA).validate({"id": 0, "limit": 500})
        fault = exc.value
        assert len(fault.errors) == 2
        assert fault.errors[0].startswith("id:")
        assert fault.errors[1].startswith("limit:")
        assert fault.message == fault.errors[0]
        assert fault.metadata["errors"] == fault.errors

    def test_action_recorded(self):
        with pytest.raises(InvalidParamsFault) as exc:
            SchemaValidator(ITEM_SCHEMA).validate({}, action="fetch")
        assert exc.value.metadata["action"] == "fetch"

    def test_non_mapping_input_rejected(self):
        with pytest.raises(InvalidParamsFault):
            SchemaValidator(ITEM_SCHEMA).validate(["id", 1])

    def test_is_valid(self):
        validator = SchemaValidator(ITEM_SCHEMA)
        assert validator.is_valid({"id": 1})
        assert not validator.is_valid({"id": -1})

    def test_nested_defaults(self):
        validator = SchemaValidator({
            "type": "object",
            "properties": {
                "filter": {
                    "type": "object",
                    "properties": {"status": {"type": "string", "default": "open"}},
                },
            },
        })
        assert validator.validate({"filter": {}}) == {"filter": {"status": "open"}}

    def test_array_items_prepared(self):
        validator = SchemaValidator({"ids": {"type": "array", "items": {"type": "integer"}}})
        assert validator.validate({"ids": ["1", "2"]}) == {"ids": [1, 2]}


# ============================================================================
# Coercion & filtering
# ============================================================================

class TestCoercion:

    @pytest.mark.parametrize("raw,expected", [("true", True), ("0", False), ("Yes", True)])
    def test_boolean(self, raw, expected):
        validator = SchemaValidator({"flag": {"type": "boolean"}})
        assert validator.validate({"flag": raw}) == {"flag": expected}

    def test_number(self):
        validator = SchemaValidator({"price": {"type": "number"}})
        assert validator.validate({"price": "2.5"}) == {"price": 2.5}
        assert validator.validate({"price": "2"}) == {"price": 2}

    def test_uncoercible_string_rejected(self):
        with pytest.raises(InvalidParamsFault) as exc:
            SchemaValidator({"count": {"type": "integer"}}).validate({"count": "many"})
        assert "is not of type 'integer'" in exc.value.message

    def test_non_finite_number_not_coerced(self):
        with pytest.raises(InvalidParamsFault):
            SchemaValidator({"price": {"type": "number"}}).validate({"price": "nan"})

    def test_string_type_left_alone(self):
        validator = SchemaValidator({"code": {"type": ["string", "integer"]}})
        assert validator.validate({"code": "007"}) == {"code": "007"}

    def test_coercion_disabled(self):
        validator = SchemaValidator({"count": {"type": "integer"}}, coerce=False)
        with pytest.raises(InvalidParamsFault):
            validator.validate({"count": "3"})

    def test_unknown_keys_dropped(self):
        validator = SchemaValidator({"q": {"type": "string"}})
        assert validator.validate({"q": "x", "extra": 1}) == {"q": "x"}

    def test_unknown_keys_kept_when_not_stripping(self):
        validator = SchemaValidator({"q": {"type": "string"}}, strip_unknown=False)
        assert validator.validate({"q": "x", "extra": 1}) == {"q": "x", "extra": 1}

    def test_additional_properties_false_rejects(self):
        validator = SchemaValidator({
            "type": "object",
            "properties": {"q": {"type": "string"}},
            "additionalProperties": False,
        })
        with pytest.raises(InvalidParamsFault) as exc:
            validator.validate({"q": "x", "extra": 1})
        assert "extra" in exc.value.message

    def test_free_form_object_keeps_keys(self):
        validator = SchemaValidator({"type": "object"})
        assert validator.validate({"a": 1}) == {"a": 1}

    def test_bind_fills_unset_options(self):
        validator = SchemaValidator({"count": {"type": "integer"}})
        bound = validator.bind(RestConfig(coerce_params=False, strip_unknown_params=False))
        assert (bound.coerce, bound.strip_unknown) == (False, False)
        assert (validator.coerce, validator.strip_unknown) == (True, True)
        with pytest.raises(InvalidParamsFault):
            bound.validate({"count": "3"})

    def test_bind_keeps_explicit_options(self):
        validator = SchemaValidator({"count": {"type": "integer"}}, coerce=True, strip_unknown=True)
        assert validator.bind(RestConfig(coerce_params=False)) is validator


# ============================================================================
# Definitions
# ============================================================================

class TestDefinitions:

    def test_shorthand_expanded(self):
        schema = normalize_schema({
            "id": {"type": "number", "min": 1, "max": 9, "required": True},
            "name": {"type": "string", "description": "Display name"},
        })
        assert schema == {
            "type": "object",
            "properties": {
                "id": {"type": "number", "minimum": 1, "maximum": 9},
                "name": {"type": "string", "description": "Display name"},
            },
            "required": ["id"],
        }

    def test_bound_aliases_in_full_schema(self):
        validator = SchemaValidator({
            "type": "object",
            "properties": {"id": {"type": "number", "min": 1, "max": 9}},
        })
        assert validator.schema["properties"]["id"] == {"type": "number", "minimum": 1, "maximum": 9}
        with pytest.raises(InvalidParamsFault) as exc:
            validator.validate({"id": 0})
        assert "minimum" in exc.value.message
        with pytest.raises(InvalidParamsFault):
            validator.validate({"id": 10})

    def test_bound_aliases_in_nested_properties(self):
        validator = SchemaValidator({
            "filter": {
                "type": "object",
                "properties": {"n": {"type": "integer", "min": 1, "required": True}},
            },
        })
        assert validator.schema["properties"]["filter"]["required"] == ["n"]
        with pytest.raises(InvalidParamsFault) as exc:
            validator.validate({"filter": {"n": 0}})
        assert exc.value.message.startswith("filter.n:")
        with pytest.raises(InvalidParamsFault):
            validator.validate({"filter": {}})
        assert validator.validate({"filter": {"n": "2"}}) == {"filter": {"n": 2}}

    def test_bound_aliases_in_array_items(self):
        validator = SchemaValidator({
            "scores": {"type": "array", "items": {"type": "number", "max": 10}},
        })
        with pytest.raises(InvalidParamsFault) as exc:
            validator.validate({"scores": [3, 11]})
        assert exc.value.message.startswith("scores.1:")

    def test_full_schema_kept(self):
        assert normalize_schema(ITEM_SCHEMA) == ITEM_SCHEMA
        assert normalize_schema(ITEM_SCHEMA) is not ITEM_SCHEMA

    def test_invalid_schema(self):
        with pytest.raises(SchemaDefinitionFault) as exc:
            SchemaValidator({"type": "object", "properties": {"a": {"type": "nonsense"}}})
        assert exc.value.code == "SCHEMA_INVALID"

    def test_non_mapping_definition(self):
        with pytest.raises(SchemaDefinitionFault):
            SchemaValidator(["id"])

    def test_describe_returns_copy(self):
        validator = SchemaValidator(ITEM_SCHEMA)
        described = validator.describe()
        described["properties"].clear()
        assert validator.schema["properties"]


# ============================================================================
# Pagination
# ============================================================================

class TestPagination:

    def test_defaults(self):
        assert Pagination().validate({}) == {
            "limit": 20,
            "offset": 0,
            "page_number": 1,
            "page_size": 100,
        }

    def test_size_caps_limit(self):
        paginator = Pagination(size=10)
        assert paginator.validate({"limit": "10"})["limit"] == 10
        with pytest.raises(InvalidParamsFault):
            paginator.validate({"limit": 11})

    def test_fractional_limit_rejected(self):
        with pytest.raises(InvalidParamsFault) as exc:
            Pagination().validate({"limit": 2.5})
        assert "integer" in exc.value.message

    def test_unsized_follows_config(self):
        paginator = Pagination().bind(RestConfig(pagination_size=10))
        assert paginator.size == 10
        assert paginator.validate({})["page_size"] == 10
        with pytest.raises(InvalidParamsFault):
            paginator.validate({"limit": 11})

    def test_explicit_size_wins_over_config(self):
        paginator = Pagination(size=50).bind(RestConfig(pagination_size=10))
        assert paginator.size == 50
        assert paginator.validate({"limit": 50})["limit"] == 50

    def test_negative_offset(self):
        with pytest.raises(InvalidParamsFault):
            Pagination().validate({"offset": -1})

    def test_schema_description(self):
        assert pagination_schema()["description"] == "Request a slice of the final data set."

    def test_window_from_offset(self):
        paginator = Pagination(size=50)
        assert paginator.window(paginator.validate({"offset": 40, "limit": 10})) == (40, 10)

    def test_window_from_page(self):
        paginator = Pagination(size=50)
        assert paginator.window(paginator.validate({"page_number": 3, "page_size": 25})) == (50, 25)
