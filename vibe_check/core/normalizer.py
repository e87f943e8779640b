import re
import json
import logging
from typing import Optional

from pydantic import ValidationError

from vibe_check.models.schema import AnalysisResult

log = logging.getLogger("vibe-check")

# greedy: first "{" to last "}", tolerates markdown fences and preambles
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.S)

PLACEHOLDER_RESULT = AnalysisResult.model_validate({
    "websiteAnalysis": {
        "scores": {
            "professionalCasual": 40,
            "seriousWitty": 30,
            "modernTraditional": 35,
            "directEmotive": 45,
        },
        "voiceSummary": "The website keeps a measured, professional register with a few warm moments in its calls to action.",
        "keyPhrases": ["built for teams", "trusted by thousands", "get started today"],
        "dominantTone": "Polished Professional",
    },
    "socialAnalysis": {
        "scores": {
            "professionalCasual": 65,
            "seriousWitty": 55,
            "modernTraditional": 30,
            "directEmotive": 60,
        },
        "voiceSummary": "Social posts loosen the tie: shorter sentences, more questions and a lot more exclamation points than the website.",
        "keyPhrases": ["big news", "tell us below", "our community"],
        "dominantTone": "Friendly Enthusiast",
    },
    "cohesionScore": 70,
    "verdict": "The website shows up to the meeting in a blazer while the social feed is already at happy hour. "
               "Neither voice is wrong, but they don't sound like the same company yet.",
    "recommendations": [
        "Bring a little of the social warmth into the website hero and CTAs",
        "Write a one-page voice guide both channels can follow",
        "Pick three signature phrases and use them everywhere",
    ],
    "brandPersona": "A dependable project lead who keeps meetings on schedule and then "
                    "sends the team chat a GIF the minute they end.",
})


def extract_json_object(text: str) -> Optional[str]:
    m = _JSON_OBJECT_RE.search(text or "")
    return m.group(0) if m else None


def placeholder_result() -> AnalysisResult:
    return PLACEHOLDER_RESULT.model_copy(deep=True)


def normalize_result(text: str) -> AnalysisResult:
    """
    Turn raw model text into a schema-valid AnalysisResult.

    Any failure (no JSON object, undecodable JSON, missing or out-of-range
    fields) yields the placeholder result as a whole; nothing is patched.
    """
    raw = extract_json_object(text)
    if raw is None:
        log.warning("Failed to parse AI response: no JSON object found (%d chars)", len(text or ""))
        return placeholder_result()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        log.warning("Failed to parse AI response: %s", e)
        return placeholder_result()

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        log.warning("AI response failed schema validation (%d errors): %s", e.error_count(), e.errors()[:3])
        return placeholder_result()
