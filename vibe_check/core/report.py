"""
View-model helpers for the report screen.

The front end renders the radar chart, cohesion ring and axis table from
these shapes; the scanning animation cycles through AnalysisPhase labels on
its own timers, independent of the real request.
"""
import enum
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from vibe_check.models.schema import (
    AnalysisResult,
    AxisComparison,
    ChartPoint,
    CohesionInterpretation,
    ReportResponse,
)

WEBSITE_COLOR = "#22d3ee"
SOCIAL_COLOR = "#e879f9"


class AnalysisPhase(str, enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    FETCHING_WEBSITE = "fetching_website"
    FETCHING_SOCIAL = "fetching_social"
    ANALYZING_VOICE = "analyzing_voice"
    DETECTING_TONE = "detecting_tone"
    CALCULATING_COHESION = "calculating_cohesion"
    GENERATING_VERDICT = "generating_verdict"
    COMPLETE = "complete"
    ERROR = "error"


PHASE_MESSAGES = {
    AnalysisPhase.IDLE: "Ready to analyze",
    AnalysisPhase.VALIDATING: "Validating inputs...",
    AnalysisPhase.FETCHING_WEBSITE: "Scanning website DNA...",
    AnalysisPhase.FETCHING_SOCIAL: "Intercepting social signals...",
    AnalysisPhase.ANALYZING_VOICE: "Decoding brand voice patterns...",
    AnalysisPhase.DETECTING_TONE: "Detecting sarcasm levels...",
    AnalysisPhase.CALCULATING_COHESION: "Computing cohesion matrix...",
    AnalysisPhase.GENERATING_VERDICT: "Generating personality verdict...",
    AnalysisPhase.COMPLETE: "Analysis complete!",
    AnalysisPhase.ERROR: "Analysis failed",
}

# keyed by AxisScores attribute name
AXIS_LABELS = {
    "professional_casual": {
        "low": "Professional",
        "high": "Casual",
        "description": "Formality level of communication",
    },
    "serious_witty": {
        "low": "Serious",
        "high": "Witty",
        "description": "Use of humor and playfulness",
    },
    "modern_traditional": {
        "low": "Modern",
        "high": "Traditional",
        "description": "Contemporary vs. classic positioning",
    },
    "direct_emotive": {
        "low": "Direct",
        "high": "Emotive",
        "description": "Factual vs. emotional appeal",
    },
}

# (minimum score, interpretation), highest band first
_COHESION_BANDS = [
    (90, CohesionInterpretation(
        label="Brand Soulmates", emoji="🔥", color="emerald",
        description="Your brand voice is remarkably consistent across platforms.",
    )),
    (75, CohesionInterpretation(
        label="Harmonious", emoji="✨", color="cyan",
        description="Strong alignment with minor variations. Your identity comes through.",
    )),
    (60, CohesionInterpretation(
        label="Mostly Aligned", emoji="👍", color="amber",
        description="Good foundation with room for tightening. Unify tone across channels.",
    )),
    (40, CohesionInterpretation(
        label="Split Personality", emoji="🎭", color="orange",
        description="Noticeable differences between platforms. Your audience might be confused.",
    )),
    (0, CohesionInterpretation(
        label="Identity Crisis", emoji="😵", color="red",
        description="Major disconnect between your website and social presence.",
    )),
]


def interpret_cohesion_score(score: int) -> CohesionInterpretation:
    for minimum, interpretation in _COHESION_BANDS:
        if score >= minimum:
            return interpretation
    return _COHESION_BANDS[-1][1]


def calculate_axis_difference(score1: int, score2: int) -> Tuple[int, str]:
    diff = abs(score1 - score2)
    if diff <= 15:
        return diff, "high"
    if diff <= 35:
        return diff, "medium"
    return diff, "low"


def axis_label(axis: str) -> str:
    labels = AXIS_LABELS[axis]
    return f"{labels['low']} / {labels['high']}"


def build_compass_points(result: AnalysisResult) -> List[ChartPoint]:
    points = []
    for series, analysis, color in (
        ("Website", result.website_analysis, WEBSITE_COLOR),
        ("Social", result.social_analysis, SOCIAL_COLOR),
    ):
        for axis in AXIS_LABELS:
            points.append(ChartPoint(
                axis_label=axis_label(axis),
                series_name=series,
                value=getattr(analysis.scores, axis),
                color=color,
            ))
    return points


def compare_axes(result: AnalysisResult) -> List[AxisComparison]:
    rows = []
    for axis, labels in AXIS_LABELS.items():
        website = getattr(result.website_analysis.scores, axis)
        social = getattr(result.social_analysis.scores, axis)
        difference, alignment = calculate_axis_difference(website, social)
        rows.append(AxisComparison(
            axis=axis, website=website, social=social,
            difference=difference, alignment=alignment, **labels,
        ))
    return rows


def build_report(result: AnalysisResult, website_url: Optional[str] = None,
                 social_handle: Optional[str] = None) -> ReportResponse:
    return ReportResponse(
        cohesion=interpret_cohesion_score(result.cohesion_score),
        compass=build_compass_points(result),
        axes=compare_axes(result),
        display_handle=format_handle(social_handle) if social_handle else None,
        display_url=truncate_url(website_url) if website_url else None,
    )


def format_handle(handle: str) -> str:
    return f"@{handle[1:] if handle.startswith('@') else handle}"


def get_profile_url(handle: str, platform: str) -> str:
    clean = handle[1:] if handle.startswith("@") else handle
    if platform == "twitter":
        return f"https://x.com/{clean}"
    return f"https://instagram.com/{clean}"


def truncate_url(url: str, max_length: int = 40) -> str:
    if len(url) <= max_length:
        return url
    domain = urlparse(url).hostname
    if not domain:
        return url[:max_length - 3] + "..."
    domain = domain.replace("www.", "")
    if len(domain) <= max_length - 5:
        return f"{domain}..."
    return domain[:max_length - 3] + "..."
