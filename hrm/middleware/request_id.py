"""Request ID middleware.

Forwards a well-formed X-Request-ID or mints a new one, echoes it on the
response and binds it to the logging context for the duration of the call.
Raw ASGI so streaming responses are not buffered.
"""

import uuid
from typing import Callable

from hrm.core.header_validation import is_valid_header_id
from hrm.shared.telemetry.logging import request_id_var


def _header_value(scope: dict, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1").strip()
    return None


def resolve_request_id(raw: str | None) -> str:
    """Return raw when it is a safe id; otherwise a fresh hex UUID."""
    if raw and is_valid_header_id(raw):
        return raw
    return uuid.uuid4().hex


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Wrap app so each HTTP request has a request id in state, logs and response."""
    header_key = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(_header_value(scope, header_key))
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_key, request_id.encode()),
                ]
            await send(message)

        try:
            await app(scope, receive, send_with_id)
        finally:
            request_id_var.reset(token)

    return asgi_app
