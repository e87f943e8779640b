"""Shared fixtures and fakes for the audit pipeline tests."""

import copy
import json
from types import SimpleNamespace

import httpx
import pytest

from vibe_check.core.audit import AnalysisInvoker
from vibe_check.rate_limit import InMemoryRateLimiter, RateLimitService
from vibe_check.services import AuditServices

START = 1_760_000_000.0

VALID_RESULT = {
    "websiteAnalysis": {
        "scores": {
            "professionalCasual": 22,
            "seriousWitty": 18,
            "modernTraditional": 40,
            "directEmotive": 35,
        },
        "voiceSummary": "Crisp and confident with short declarative headlines.",
        "keyPhrases": ["ship faster", "built for teams", "no surprises"],
        "dominantTone": "Corporate Warm",
    },
    "socialAnalysis": {
        "scores": {
            "professionalCasual": 70,
            "seriousWitty": 64,
            "modernTraditional": 25,
            "directEmotive": 58,
        },
        "voiceSummary": "Looser and funnier, heavy on memes.",
        "keyPhrases": ["lol", "new drop", "you asked"],
        "dominantTone": "Startup Bro",
    },
    "cohesionScore": 61,
    "verdict": "Two different companies sharing a logo.",
    "recommendations": ["Write a voice guide", "Loosen the hero copy", "Retire the memes"],
    "brandPersona": "Wears a blazer to brunch and posts about it.",
}

PAGE_HTML = """
<html>
  <head><title>Example</title><style>body { color: red; }</style></head>
  <body>
    <script>window.track = true;</script>
    <h1>Ship faster with Example</h1>
    <p>{body}</p>
  </body>
</html>
""".replace("{body}", "Example helps teams plan, build and release software without surprises. " * 5)


class FakeClock:
    def __init__(self, now: float = START):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeMessages:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self.text)])


class FakeAnthropic:
    """Stands in for anthropic.AsyncAnthropic; only messages.create is used."""

    def __init__(self, text="", error=None):
        self.messages = FakeMessages(text=text, error=error)

    async def close(self):
        return None


def html_transport(status_code=200, html=PAGE_HTML, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, text=html, headers={"content-type": "text/html"})

    return httpx.MockTransport(handler)


@pytest.fixture
def valid_result():
    return copy.deepcopy(VALID_RESULT)


@pytest.fixture
def model_text():
    return "Here's the analysis:\n```json\n" + json.dumps(VALID_RESULT, indent=2) + "\n```"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_services(clock):
    """Build AuditServices around fakes; never sweeps rate-limit records."""

    def _make(llm=None, transport=None, limiter=None, invoker=None):
        limiter = limiter or InMemoryRateLimiter(max_requests=3, window_seconds=3600, clock=clock, rng=lambda: 1.0)
        return AuditServices(
            rate_limiter=RateLimitService(limiter, max_requests=3, clock=clock),
            http_client=httpx.AsyncClient(transport=transport or html_transport()),
            invoker=invoker or AnalysisInvoker(llm or FakeAnthropic(text=json.dumps(VALID_RESULT))),
        )

    return _make
