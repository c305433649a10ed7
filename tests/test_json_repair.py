"""
Tests for cleanup of model-produced JSON.
"""
import pytest

from pathwise.services.json_repair import JSONRepairError, parse_model_json, repair_json_syntax


def test_parses_fenced_json_with_commentary():
    response = 'Sure! Here is the analysis:\n```json\n{"overallScore": 80, "items": [1, 2]}\n```\nHope it helps.'

    assert parse_model_json(response) == {"overallScore": 80, "items": [1, 2]}


def test_repairs_trailing_commas_and_unquoted_keys():
    response = "{overallScore: 72, tone: 'Professional',}"

    data = parse_model_json(response)

    assert data["overallScore"] == 72
    assert data["tone"] == "Professional"


def test_valid_json_is_not_rewritten():
    # a value containing "key:" patterns must survive untouched
    response = '{"summary": "Focus: APIs, then {scale: high}"}'

    assert parse_model_json(response) == {"summary": "Focus: APIs, then {scale: high}"}


def test_parses_arrays():
    assert parse_model_json('Resources:\n[{"title": "A"}, {"title": "B"},]', expect=list) == [
        {"title": "A"},
        {"title": "B"},
    ]


def test_raises_without_json():
    with pytest.raises(JSONRepairError):
        parse_model_json("I cannot help with that.")


def test_raises_on_unrepairable_json():
    with pytest.raises(JSONRepairError):
        parse_model_json('{"a": [1, 2}')


def test_repair_json_syntax_collapses_newlines():
    assert repair_json_syntax('{"a":\n  1,\n}') == '{"a": 1 }'
