"""Shared utilities (datetime, id generation)."""

from hrm.shared.utils.datetime import utc_now
from hrm.shared.utils.generators import generate_cuid

__all__ = ["generate_cuid", "utc_now"]
