"""Application DTOs (no dependency on ORM or web framework)."""
