"""Row id generation. Every lifecycle table keys on a CUID2 string."""

from cuid2 import Cuid

CUID_LENGTH = 24

_cuid = Cuid(length=CUID_LENGTH)


def generate_cuid() -> str:
    """Return a new CUID2 (24 lowercase alphanumeric characters, starts with a letter)."""
    return _cuid.generate()
