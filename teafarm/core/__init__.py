"""
Core configuration and utilities for Tea Farm Operations.
"""

from teafarm.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
