"""HRM employee lifecycle service (onboarding and offboarding cases)."""
