"""Infrastructure adapters: SQLAlchemy persistence and sink/resolver services."""
