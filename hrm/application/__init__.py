"""Application layer: DTOs, ports and use cases."""
