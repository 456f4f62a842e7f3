"""ASGI middleware."""

from hrm.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
