"""Configuration module for shardkv."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
