"""Format checks for identifiers taken from request headers (tenant id, actor id)."""

import re

HEADER_ID_MAX_LENGTH = 64
_HEADER_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1," + str(HEADER_ID_MAX_LENGTH) + r"}$")


def is_valid_header_id(value: str) -> bool:
    """Return True if value is a CUID/UUID-style id safe for logging and queries."""
    if not value or len(value) > HEADER_ID_MAX_LENGTH:
        return False
    return bool(_HEADER_ID_RE.fullmatch(value))
