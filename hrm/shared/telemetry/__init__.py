"""Logging setup for the application."""

from hrm.shared.telemetry.logging import (
    RequestIdFilter,
    get_logger,
    request_id_var,
    setup_logging,
)

__all__ = ["RequestIdFilter", "get_logger", "request_id_var", "setup_logging"]
