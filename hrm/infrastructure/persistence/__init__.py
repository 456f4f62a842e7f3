"""SQLAlchemy persistence layer."""
