import re
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from vibe_check.core.utils import HANDLE_REQUIRED, PLATFORM_INVALID, URL_REQUIRED
from vibe_check.models.schema import AuditRequest

log = logging.getLogger("vibe-check")

MAX_INPUT_LENGTH = 500

_UNSAFE_RE = re.compile(r"[<>]|javascript:|data:", re.IGNORECASE)

_REQUIRED_MESSAGES = {
    "websiteUrl": URL_REQUIRED,
    "socialHandle": HANDLE_REQUIRED,
    "socialPlatform": PLATFORM_INVALID,
}

ValidationDetails = Dict[str, Any]


def _error_message(err: dict) -> str:
    field = err["loc"][0] if err["loc"] else None
    if err["type"] == "missing" and field in _REQUIRED_MESSAGES:
        return _REQUIRED_MESSAGES[field]
    if err["type"] == "value_error":
        return str(err["ctx"]["error"])
    return err["msg"]


def flatten_errors(exc: ValidationError) -> ValidationDetails:
    """Group pydantic errors by field path (camelCase, dotted for nested fields)."""
    form_errors: List[str] = []
    field_errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        message = _error_message(err)
        if err["loc"]:
            field_errors.setdefault(".".join(str(p) for p in err["loc"]), []).append(message)
        else:
            form_errors.append(message)
    return {"formErrors": form_errors, "fieldErrors": field_errors}


def validate_audit_request(raw: Any) -> Tuple[Optional[AuditRequest], Optional[ValidationDetails]]:
    """
    Validate a raw request body.
    Returns (request, None) on success or (None, details) listing every
    field-level problem; never raises.
    """
    if not isinstance(raw, dict):
        return None, {"formErrors": ["Expected a JSON object"], "fieldErrors": {}}
    try:
        return AuditRequest.model_validate(raw), None
    except ValidationError as e:
        details = flatten_errors(e)
        log.info("Audit request rejected: %s", details["fieldErrors"])
        return None, details


def sanitize_input(value: str) -> str:
    """Strip markup and script-ish schemes, bound the length. Idempotent."""
    cleaned = value
    while True:
        stripped = _UNSAFE_RE.sub("", cleaned)
        if stripped == cleaned:
            break
        cleaned = stripped
    return cleaned.strip()[:MAX_INPUT_LENGTH].strip()
