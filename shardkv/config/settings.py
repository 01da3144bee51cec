"""
shardkv Configuration Settings

This module contains the configuration constants for the shardkv client.
Every value can be overridden from the environment.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _split_shards(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass
class Settings:
    """Client configuration settings."""

    # Default single store address
    HOST: str = os.environ.get("SHARDKV_HOST", "127.0.0.1")
    PORT: int = int(os.environ.get("SHARDKV_PORT", "8888"))

    # Comma-separated host:port list, one entry per shard
    SHARDS: List[str] = field(
        default_factory=lambda: _split_shards(os.environ.get("SHARDKV_SHARDS", ""))
    )

    # Connection settings
    TIMEOUT: float = float(os.environ.get("SHARDKV_TIMEOUT", "15"))  # Per write and per read
    MAX_ATTEMPTS: int = int(os.environ.get("SHARDKV_MAX_ATTEMPTS", "3"))
    READ_BUFFER_SIZE: int = 128 * 1024

    # Logging settings
    DEBUG: bool = os.environ.get("SHARDKV_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("SHARDKV_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
