"""Configuration management for quiksearch."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
