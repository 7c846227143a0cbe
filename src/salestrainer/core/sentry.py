"""Sentry error reporting, enabled only when a DSN is configured."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from salestrainer.core.logging import get_logger

logger = get_logger(__name__)

_sentry_initialized = False

# Keys whose values may carry trainee transcripts or credentials
_SENSITIVE_KEYS = ("transcript", "content", "text", "api_key", "authorization")
_SENSITIVE_HEADERS = ("authorization", "cookie", "api-key", "x-api-key")
FILTERED = "[filtered]"


def init_sentry(dsn: str | None = None, environment: str | None = None) -> bool:
    """Start Sentry when SENTRY_DSN looks like a URL. Returns whether it is active.

    Missing or placeholder DSNs (common in CI) leave reporting off.
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    dsn = (dsn if dsn is not None else os.getenv("SENTRY_DSN", "")).strip()
    if not dsn.startswith(("https://", "http://")):
        logger.info("sentry.disabled", reason="malformed dsn" if dsn else "no dsn")
        return False

    environment = environment or os.getenv("ENVIRONMENT", "development")

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),  # structlog owns logs
            ],
            before_send=scrub_event,
        )
    except BadDsn as exc:
        logger.warning("sentry.init_failed", error=str(exc))
        return False

    _sentry_initialized = True
    logger.info("sentry.initialized", environment=environment)
    return True


def _is_sensitive(key: object) -> bool:
    lowered = str(key).lower()
    return any(marker in lowered for marker in _SENSITIVE_KEYS)


def scrub_event(event: dict, hint: dict) -> dict:
    """Drop conversation text and credentials before an event leaves the process."""
    extra = event.get("extra")
    if isinstance(extra, dict):
        event["extra"] = {key: value for key, value in extra.items() if not _is_sensitive(key)}

    request = event.get("request")
    if isinstance(request, dict):
        if "data" in request:
            request["data"] = FILTERED
        headers = request.get("headers")
        if isinstance(headers, dict):
            request["headers"] = {
                key: FILTERED if str(key).lower() in _SENSITIVE_HEADERS else value
                for key, value in headers.items()
            }

    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict):
        for crumb in breadcrumbs.get("values", []):
            data = crumb.get("data") if isinstance(crumb, dict) else None
            if isinstance(data, dict):
                crumb["data"] = {key: value for key, value in data.items() if not _is_sensitive(key)}

    return event
