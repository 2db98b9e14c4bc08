"""Repocache configuration."""

from pydantic_settings import BaseSettings

DEFAULT_LIFETIME = 30


class RepoCacheSettings(BaseSettings):
    """Settings loaded from REPOCACHE_* environment variables."""

    lifetime: int = DEFAULT_LIFETIME  # Seconds
    redis_url: str = 'redis://localhost:6379/0'
    key_prefix: str = 'repocache:'
    log_level: str = 'INFO'

    class Config:
        """Pydantic settings configuration."""

        env_prefix = 'REPOCACHE_'
        env_file_encoding = 'utf-8'
        case_sensitive = False
