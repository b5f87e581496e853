"""
Configuration management package for the Cognitive Memory Engine

Provides centralized configuration management with:
- Environment variable loading from .env files
- Runtime configuration validation
- Type-safe configuration classes
- Global configuration access patterns

Usage:
    from cognitive_memory.config import get_config

    config = get_config()
    print(f"Ranking top {config.scoring.default_top_k} memories")
"""

from .manager import (
    ConfigManager,
    ScoringConfig,
    RetentionConfig,
    LoggingConfig,
    get_config,
    init_config
)

__all__ = [
    "ConfigManager",
    "ScoringConfig",
    "RetentionConfig",
    "LoggingConfig",
    "get_config",
    "init_config"
]
