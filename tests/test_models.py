"""
Tests for request model configuration.
"""
import pytest

from wardrobe_api.models.quota import UserIdRequest
from wardrobe_api.models.wardrobe import ClothingAnalysis, OutfitSuggestionRequest


@pytest.mark.parametrize("model", [UserIdRequest, ClothingAnalysis, OutfitSuggestionRequest])
def test_schema_examples_use_model_config(model):
    """Should publish the OpenAPI example through model_config, not a nested Config class"""
    assert "Config" not in vars(model)
    assert "example" in model.model_config["json_schema_extra"]
    assert "example" in model.model_json_schema()


def test_user_id_request_example_is_valid():
    example = UserIdRequest.model_config["json_schema_extra"]["example"]
    assert UserIdRequest.model_validate(example).adapty_user_id == example["adapty_user_id"]
