"""Core wiring: settings, exception handlers, lifespan."""
