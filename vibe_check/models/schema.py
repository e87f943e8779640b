import math
import datetime
from typing import Annotated, Any, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from vibe_check.core.utils import check_social_platform, normalize_social_handle, normalize_website_url

SocialPlatform = Literal["twitter", "instagram"]

LIMITED_MARKER = "[Note:"
MIN_WEBSITE_TEXT = 200
MAX_WEBSITE_TEXT = 5000


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _coerce_score(value: Any) -> Any:
    # model output sometimes carries 72.0 or 72.5; bools are never scores
    if isinstance(value, bool):
        raise ValueError("score must be a number")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("score must be finite")
        return round(value)
    return value


Score = Annotated[int, BeforeValidator(_coerce_score), Field(ge=0, le=100)]


# ---------- request ----------
class AuditRequest(CamelModel):
    model_config = ConfigDict(frozen=True)

    website_url: str
    social_handle: str
    social_platform: SocialPlatform

    @field_validator("website_url", mode="before")
    @classmethod
    def _website_url(cls, v):
        return normalize_website_url(v)

    @field_validator("social_handle", mode="before")
    @classmethod
    def _social_handle(cls, v):
        return normalize_social_handle(v)

    @field_validator("social_platform", mode="before")
    @classmethod
    def _social_platform(cls, v):
        return check_social_platform(v)


# ---------- rate limiting ----------
class RateLimitDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed: bool
    remaining: int = Field(ge=0)
    reset_at: datetime.datetime


# ---------- content ----------
class ContentBundle(BaseModel):
    website_text: str = Field(max_length=MAX_WEBSITE_TEXT)
    social_text: str
    is_limited: bool

    @classmethod
    def from_texts(cls, website_text: str, social_text: str) -> "ContentBundle":
        is_limited = (
            LIMITED_MARKER in website_text
            or LIMITED_MARKER in social_text
            or len(website_text) < MIN_WEBSITE_TEXT
        )
        return cls(website_text=website_text, social_text=social_text, is_limited=is_limited)


# ---------- analysis result (LLM-facing) ----------
class AxisScores(CamelModel):
    professional_casual: Score  # 0 = Professional, 100 = Casual
    serious_witty: Score  # 0 = Serious, 100 = Witty
    modern_traditional: Score  # 0 = Modern, 100 = Traditional
    direct_emotive: Score  # 0 = Direct, 100 = Emotive


class ChannelAnalysis(CamelModel):
    scores: AxisScores
    voice_summary: str
    key_phrases: List[str]
    dominant_tone: str


class AnalysisResult(CamelModel):
    website_analysis: ChannelAnalysis
    social_analysis: ChannelAnalysis
    cohesion_score: Score
    verdict: str
    recommendations: List[str]
    brand_persona: str


# ---------- responses ----------
class AuditMetadata(CamelModel):
    analyzed_at: str
    rate_limit_remaining: int
    rate_limit_reset: str


class AuditResponse(CamelModel):
    success: bool = True
    data: AnalysisResult
    metadata: AuditMetadata


# ---------- report view-models ----------
class ChartPoint(CamelModel):
    axis_label: str
    series_name: str
    value: int
    color: str


class CohesionInterpretation(BaseModel):
    label: str
    emoji: str
    color: str
    description: str


class AxisComparison(BaseModel):
    axis: str
    low: str
    high: str
    description: str
    website: int
    social: int
    difference: int
    alignment: Literal["high", "medium", "low"]


class ReportResponse(CamelModel):
    cohesion: CohesionInterpretation
    compass: List[ChartPoint]
    axes: List[AxisComparison]
    # header labels; null when the audited handle / URL were not supplied
    display_handle: Optional[str] = None
    display_url: Optional[str] = None
