"""Catalog service: connection-style pagination over SQLAlchemy with a Redis read-through cache."""

__version__ = "0.1.0"
