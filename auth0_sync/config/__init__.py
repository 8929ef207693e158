"""Configuration module for auth0-sync."""
from .settings import ManagementSettings, load_settings

__all__ = ["ManagementSettings", "load_settings"]
