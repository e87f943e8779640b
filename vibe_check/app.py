# app.py
import os
import logging
import datetime
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from vibe_check.config import Settings
from vibe_check.core.content import acquire_content
from vibe_check.core.normalizer import normalize_result
from vibe_check.core.report import PHASE_MESSAGES, build_report
from vibe_check.core.utils import to_iso
from vibe_check.core.validation import flatten_errors, sanitize_input, validate_audit_request
from vibe_check.errors import AIServiceError
from vibe_check.models.schema import AnalysisResult, AuditMetadata, AuditResponse
from vibe_check.rate_limit import get_client_ip
from vibe_check.services import AuditServices, build_services

# ---------- logging ----------
settings = Settings.from_env()
logging.basicConfig(level=settings.log_level.upper())
log = logging.getLogger("vibe-check")

router = APIRouter()


def get_services(request: Request) -> AuditServices:
    return request.app.state.services


def error_response(status_code: int, error: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message, **extra})


async def read_json_body(request: Request):
    try:
        return await request.json()
    except ValueError:
        # malformed JSON and undecodable bytes both land here
        return None


# ---------- main audit endpoint ----------
@router.post("/api/audit")
async def audit_brand(request: Request, services: AuditServices = Depends(get_services)):
    try:
        # 1) validate before spending quota or network
        audit_request, details = validate_audit_request(await read_json_body(request))
        if details is not None:
            return error_response(400, "validation_error", "Invalid request data", details=details)

        # 2) rate limit
        client_ip = get_client_ip(request.headers)
        decision = await services.rate_limiter.check(client_ip)
        if not decision.allowed:
            return error_response(
                429, "rate_limit_exceeded", services.rate_limiter.message(decision),
                resetTime=to_iso(decision.reset_at),
                remainingAttempts=decision.remaining,
            )

        # 3) sanitize again, independent of schema validation
        audit_request = audit_request.model_copy(update={
            "website_url": sanitize_input(audit_request.website_url),
            "social_handle": sanitize_input(audit_request.social_handle),
        })
        log.info("Audit requested for %s / @%s on %s (client=%s)",
                 audit_request.website_url, audit_request.social_handle,
                 audit_request.social_platform, client_ip)

        # 4) content
        bundle = await acquire_content(
            services.http_client,
            audit_request.website_url,
            audit_request.social_handle,
            audit_request.social_platform,
            fetch_timeout=services.fetch_timeout,
        )

        # 5) model call + normalization
        raw_text = await services.invoker.analyze(audit_request, bundle)
        result = normalize_result(raw_text)

        payload = AuditResponse(
            data=result,
            metadata=AuditMetadata(
                analyzed_at=to_iso(datetime.datetime.now(datetime.timezone.utc)),
                rate_limit_remaining=decision.remaining,
                rate_limit_reset=to_iso(decision.reset_at),
            ),
        )
        return JSONResponse(content=payload.model_dump(mode="json", by_alias=True))

    except AIServiceError as e:
        return error_response(
            503, "ai_service_error", "AI analysis service temporarily unavailable", details=e.message
        )
    except Exception:
        log.exception("Brand audit failed")
        return error_response(500, "internal_error", "An unexpected error occurred during brand analysis")


@router.get("/api/audit")
async def audit_method_not_allowed():
    return error_response(405, "method_not_allowed", "Use POST to submit a brand audit")


@router.get("/api/audit/phases")
async def audit_phases():
    return {"phases": [{"phase": phase.value, "message": message} for phase, message in PHASE_MESSAGES.items()]}


# ---------- report view-model ----------
@router.post("/api/report")
async def audit_report(
    request: Request,
    website_url: Optional[str] = Query(None, alias="websiteUrl"),
    social_handle: Optional[str] = Query(None, alias="socialHandle"),
):
    try:
        result = AnalysisResult.model_validate(await read_json_body(request))
    except ValidationError as e:
        return error_response(400, "validation_error", "Invalid analysis result", details=flatten_errors(e))
    report = build_report(result, website_url=website_url, social_handle=social_handle)
    return JSONResponse(content=report.model_dump(mode="json", by_alias=True))


# ---------- health endpoints ----------
@router.get("/health")
async def health_check(services: AuditServices = Depends(get_services)):
    return {"status": "ok", "rateLimitBackend": services.rate_limiter.backend}


@router.get("/")
async def read_root():
    return {"message": "Vibe Check brand audit API (ready)"}


# ---------- app ----------
def create_app(services: Optional[AuditServices] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the app; pre-built services are used as-is and left open on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if services is not None:
            app.state.services = services
            yield
            return
        app.state.services = await build_services(settings)
        try:
            yield
        finally:
            await app.state.services.aclose()

    app = FastAPI(title="Vibe Check Brand Audit API", version="1.0.0", lifespan=lifespan)
    app.include_router(router)
    return app


app = create_app(settings=settings)


def main():
    import uvicorn

    uvicorn.run("vibe_check.app:app", host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", 8000)))


if __name__ == "__main__":
    main()
