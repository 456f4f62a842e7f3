"""Notification sink that logs lifecycle events instead of delivering them."""

from __future__ import annotations

import logging

from hrm.application.dtos.events import LifecycleEvent
from hrm.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LogOnlyNotificationSink:
    """INotificationSink implementation that logs each event.

    Use when no delivery channel is configured. Production can swap in an
    email or queue-based implementation; retries are that sink's concern.
    """

    async def publish(self, event: LifecycleEvent) -> None:
        """Log the event; nothing is delivered."""
        logger.info(
            "Lifecycle event %s for %s case %s (tenant=%s)",
            event.event.value,
            event.kind.value,
            event.case_id,
            event.tenant_id,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Lifecycle event payload: %s", event.to_payload())
