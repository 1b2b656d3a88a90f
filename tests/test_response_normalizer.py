import json
from typing import List

import pytest

from app.models.lab import LabItem
from app.models.scheme import SchemeResponse
from app.services.response_normalizer import (
    ModelResponseParseError,
    extract_json_text,
    normalize,
    parse_model_json,
)

PAYLOAD = {"schemes": [{"name": "PM-Kisan", "benefits": ["cash"], "nested": {"a": [1, 2]}}]}


@pytest.mark.parametrize(
    "prefix,suffix",
    [
        ("", ""),
        ("Here is the result:\n", ""),
        ("", "\nHope this helps!"),
        ("Sure! {not json} [x]\n", "\nLet me know [if] you need {more}."),
    ],
)
def test_fenced_json_is_extracted_regardless_of_surrounding_text(prefix, suffix):
    text = prefix + "```json\n" + json.dumps(PAYLOAD, indent=2) + "\n```" + suffix
    assert parse_model_json(text) == PAYLOAD


def test_bare_fence_without_language_tag():
    text = "Result:\n```\n[1, 2, 3]\n```"
    assert parse_model_json(text) == [1, 2, 3]


def test_object_in_prose_without_fence():
    text = 'The answer is {"a": {"b": [1, 2]}} as requested.'
    assert parse_model_json(text) == {"a": {"b": [1, 2]}}


def test_array_in_prose_without_fence():
    text = 'Places found: [{"name": "Lab"}, {"name": "Kendra"}] end of list'
    assert parse_model_json(text) == [{"name": "Lab"}, {"name": "Kendra"}]


def test_array_wins_when_bracket_comes_first():
    text = '[{"x": 1}]'
    assert extract_json_text(text) == '[{"x": 1}]'


@pytest.mark.parametrize(
    "text",
    [
        '{"news": [{"title": "Rain"',
        '{"a": [1, 2}',
        "no json here at all",
        "",
        "```json\n{broken\n```",
        pytest.param('{"a":' + "[" * 200000 + "}", id="deeply-nested"),
    ],
)
def test_malformed_input_signals_failure(text):
    with pytest.raises(ModelResponseParseError):
        parse_model_json(text)


def test_non_text_reply_signals_failure():
    with pytest.raises(ModelResponseParseError):
        parse_model_json(None)


def test_brace_in_leading_prose_selects_wrong_span():
    # Known limitation of the first-bracket heuristic.
    text = 'Note {see below}: {"a": 1}'
    with pytest.raises(ModelResponseParseError):
        parse_model_json(text)


def test_normalize_into_model():
    text = "```json\n" + json.dumps(
        {
            "schemes": [
                {
                    "name": "PMFBY",
                    "description": "Crop insurance",
                    "benefits": ["cover"],
                    "stepsToClaim": ["register"],
                    "officialLink": "https://pmfby.gov.in",
                }
            ]
        }
    ) + "\n```"
    result = normalize(text, SchemeResponse)
    assert result.schemes[0].steps_to_claim == ["register"]
    assert result.schemes[0].official_link == "https://pmfby.gov.in"


def test_normalize_list_schema_coerces_numeric_rating():
    text = '[{"name": "Lab", "address": "Pune", "type": "Lab", "rating": 4.5}]'
    labs = normalize(text, List[LabItem])
    assert labs[0].rating == "4.5"


def test_normalize_rejects_schema_mismatch():
    text = '[{"name": "Lab", "address": "Pune", "type": "Warehouse"}]'
    with pytest.raises(ModelResponseParseError):
        normalize(text, List[LabItem])
