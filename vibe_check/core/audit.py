import logging

import anthropic

from vibe_check.errors import AIServiceError
from vibe_check.models.schema import AuditRequest, ContentBundle
from vibe_check.prompts.brand_auditor import BRAND_AUDITOR_LIMITED_PROMPT, BRAND_AUDITOR_SYSTEM_PROMPT

log = logging.getLogger("vibe-check")

DEFAULT_MODEL = "claude-sonnet-4-20250514"
SECTION_RULE = "═" * 43
MISSING_KEY_MESSAGE = "ANTHROPIC_API_KEY is not configured"


def select_system_prompt(is_limited: bool) -> str:
    return BRAND_AUDITOR_LIMITED_PROMPT if is_limited else BRAND_AUDITOR_SYSTEM_PROMPT


def build_user_message(request: AuditRequest, bundle: ContentBundle) -> str:
    return (
        "Analyze this brand's voice and tone consistency.\n\n"
        f"{SECTION_RULE}\nWEBSITE\n{SECTION_RULE}\n"
        f"URL: {request.website_url}\n\n"
        f"CONTENT:\n{bundle.website_text}\n\n"
        f"{SECTION_RULE}\nSOCIAL MEDIA\n{SECTION_RULE}\n"
        f"Platform: {request.social_platform.upper()}\n"
        f"Handle: @{request.social_handle}\n\n"
        f"CONTENT:\n{bundle.social_text}\n\n"
        f"{SECTION_RULE}\n\n"
        "Now give me the JSON analysis. No preamble."
    )


class AnalysisInvoker:
    """Single, non-streaming Messages API call per audit."""

    def __init__(self, client: anthropic.AsyncAnthropic, model: str = DEFAULT_MODEL, max_tokens: int = 2048,
                 api_key_configured: bool = True):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.api_key_configured = api_key_configured

    async def analyze(self, request: AuditRequest, bundle: ContentBundle) -> str:
        """Return the model's raw text; API failures surface as AIServiceError."""
        if not self.api_key_configured:
            raise AIServiceError(MISSING_KEY_MESSAGE)
        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=select_system_prompt(bundle.is_limited),
                messages=[{"role": "user", "content": build_user_message(request, bundle)}],
            )
        except anthropic.APIError as e:
            log.error("Anthropic request failed: %s", e)
            raise AIServiceError(str(e)) from e

        for block in message.content:
            if block.type == "text":
                return block.text
        log.warning("Anthropic response had no text block")
        return ""
