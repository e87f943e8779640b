"""Tests for JSON extraction and result validation."""

import json
import logging

import pytest

from vibe_check.core.normalizer import PLACEHOLDER_RESULT, extract_json_object, normalize_result
from vibe_check.models.schema import AnalysisResult


def test_fenced_json_with_preamble_is_parsed(model_text, valid_result):
    result = normalize_result(model_text)

    assert result.model_dump(by_alias=True) == valid_result


def test_no_json_object_yields_placeholder(caplog):
    with caplog.at_level(logging.WARNING, logger="vibe-check"):
        result = normalize_result("Sorry, I can't analyze this brand.")

    assert result == PLACEHOLDER_RESULT
    assert "no JSON object found" in caplog.text


def test_undecodable_json_yields_placeholder():
    assert normalize_result("{websiteAnalysis: nope}") == PLACEHOLDER_RESULT


def test_extraction_is_greedy_first_to_last_brace():
    text = 'a {"x": 1} b {"y": 2} c'

    assert extract_json_object(text) == '{"x": 1} b {"y": 2}'
    assert extract_json_object("no braces") is None
    # two separate objects do not decode as one
    assert normalize_result(text) == PLACEHOLDER_RESULT


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.update(cohesionScore=150),
        lambda d: d["websiteAnalysis"]["scores"].update(seriousWitty=-1),
        lambda d: d["socialAnalysis"]["scores"].update(directEmotive=True),
        lambda d: d.pop("verdict"),
        lambda d: d.update(brandPersona=None),
        lambda d: d["websiteAnalysis"].update(keyPhrases=["ok", 3]),
        lambda d: d["socialAnalysis"].pop("scores"),
    ],
)
def test_invalid_fields_fall_back_wholesale(valid_result, mutate):
    mutate(valid_result)

    assert normalize_result(json.dumps(valid_result)) == PLACEHOLDER_RESULT


def test_float_scores_are_rounded(valid_result):
    valid_result["cohesionScore"] = 72.6
    valid_result["websiteAnalysis"]["scores"]["professionalCasual"] = 10.0

    result = normalize_result(json.dumps(valid_result))

    assert result.cohesion_score == 73
    assert result.website_analysis.scores.professional_casual == 10


def test_placeholder_is_a_fresh_copy():
    result = normalize_result("")
    result.verdict = "changed"
    result.recommendations.append("extra")

    assert PLACEHOLDER_RESULT.verdict != "changed"
    assert "extra" not in PLACEHOLDER_RESULT.recommendations


def test_analysis_result_json_round_trip(valid_result):
    for result in (AnalysisResult.model_validate(valid_result), PLACEHOLDER_RESULT):
        again = AnalysisResult.model_validate_json(result.model_dump_json(by_alias=True))
        assert again == result
