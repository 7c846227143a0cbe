"""Attach request and training-session context to Sentry error reports."""

import re

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from salestrainer.core.logging import get_request_id

_SESSION_PATH = re.compile(r"^/api/sessions/([0-9a-fA-F-]{32,36})(?:/|$)")


def session_id_from_path(path: str) -> str | None:
    match = _SESSION_PATH.match(path)
    return match.group(1) if match else None


class SentryContextMiddleware:
    """
    Tag Sentry events with the request id and, on session routes, the
    training session id.

    Runs inside RequestIDMiddleware so the request id is already set.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = get_request_id()
        path = scope.get("path", "")
        sentry_sdk.set_tag("request_id", request_id)

        session_id = session_id_from_path(path)
        if session_id:
            sentry_sdk.set_tag("training_session_id", session_id)

        sentry_sdk.set_context(
            "request",
            {"method": scope.get("method"), "path": path, "request_id": request_id},
        )

        await self.app(scope, receive, send)
