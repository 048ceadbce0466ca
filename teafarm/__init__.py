"""
Tea Farm Operations client library.

Provides the REST client, the state store with one slice per entity,
CSV export, and an in-memory reference backend.
"""

__version__ = "0.1.0"
