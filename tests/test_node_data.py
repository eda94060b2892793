"""Tests for per-type node data models and the palette."""

import pytest

from conftest import add_palette_node
from marketflow.errors import ValidationError
from marketflow.graph import (
    NODE_DATA_MODELS,
    NODE_DEFINITIONS,
    definitions_by_category,
    editable_fields,
    get_definition,
    validate_node_data,
)
from marketflow.graph.palette import CATEGORIES, node_color


class TestValidateNodeData:
    """Tests for validate_node_data."""

    def test_keeps_only_given_keys(self):
        data = validate_node_data("gpt4", {"label": "GPT", "temperature": 0.5})
        assert data == {"label": "GPT", "temperature": 0.5}

    def test_camel_case_names(self):
        data = validate_node_data("gpt4", {"systemPrompt": "Hi", "maxTokens": 100})
        assert data == {"systemPrompt": "Hi", "maxTokens": 100}

    def test_snake_case_names_keep_their_spelling(self):
        data = validate_node_data("gpt4", {"system_prompt": "Hi", "maxTokens": "100"})
        assert data == {"system_prompt": "Hi", "maxTokens": 100}

    def test_update_stores_caller_keys(self, store):
        node = add_palette_node(store, "claude")
        store.update_node_data(node.id, {"system_prompt": "Be brief"})
        assert store.get_node(node.id).data == {"system_prompt": "Be brief"}

    def test_extra_keys_survive(self):
        data = validate_node_data("crm", {"entity": "Leads", "legacyField": 1})
        assert data["legacyField"] == 1

    def test_out_of_range_temperature(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_node_data("gpt4", {"temperature": 5})
        assert exc_info.value.errors
        assert exc_info.value.errors[0]["field"] == "temperature"

    def test_bad_method(self):
        with pytest.raises(ValidationError):
            validate_node_data("webhook", {"method": "FETCH"})

    def test_unknown_type_accepts_anything(self):
        assert validate_node_data("mystery", {"foo": "bar"}) == {"foo": "bar"}


def test_editable_fields_use_wire_names():
    fields = editable_fields("gpt4")
    assert "systemPrompt" in fields
    assert "label" in fields
    assert "system_prompt" not in fields


class TestPalette:
    """Tests for the built-in palette."""

    def test_every_definition_has_a_data_model(self):
        for definition in NODE_DEFINITIONS:
            assert definition.type in NODE_DATA_MODELS

    def test_default_data_validates(self):
        for definition in NODE_DEFINITIONS:
            validate_node_data(definition.type, definition.default_data)

    def test_types_are_unique(self):
        types = [d.type for d in NODE_DEFINITIONS]
        assert len(types) == len(set(types))

    def test_grouped_by_category(self):
        grouped = definitions_by_category()
        assert list(grouped) == list(CATEGORIES)
        assert [d.type for d in grouped["processing"]] == ["filter", "transform", "merge"]

    def test_get_definition(self):
        assert get_definition("claude").label == "Claude Agent"
        assert get_definition("nope") is None

    def test_node_color(self):
        assert node_color("gpt4") == "nodeBlue"
        assert node_color("unknown") == "primary"
