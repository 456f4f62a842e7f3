"""Domain layer: lifecycle entities, enums and exceptions."""
