"""User registry: validated CRUD over a single relational ``users`` table."""

__version__ = "1.0.0"
