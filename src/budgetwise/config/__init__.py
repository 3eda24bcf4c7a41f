"""Configuration module."""
from .settings import AppSettings, get_settings
from .manager import ContextManager, InsightContext

__all__ = ["AppSettings", "get_settings", "ContextManager", "InsightContext"]
