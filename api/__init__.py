"""
REST API for company records.

CRUD endpoints over a SQLite store, guarded by role-based bearer tokens,
with change events published to Kafka after each mutation.
"""

__version__ = "1.0.0"
