"""
Configuration Manager for the Cognitive Memory Engine
======================================================

Centralized configuration management with environment variable loading,
validation, and type safety for the tunable values of the scoring and
retention layers.
"""

import os
import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from ..core.models import LAYER_WEIGHT_TOLERANCE

logger = logging.getLogger(__name__)


@dataclass
class ScoringConfig:
    """Relevance scoring and ranking configuration"""
    default_top_k: int = 15
    default_half_life_days: float = 30.0

    # Cross-layer weights (must sum to 1.0)
    episodic_weight: float = 0.35
    semantic_weight: float = 0.30
    procedural_weight: float = 0.25
    working_weight: float = 0.10


@dataclass
class RetentionConfig:
    """Spaced repetition and decay configuration"""
    recall_boost_factor: float = 1.2
    review_queue_limit: int = 20
    min_strength: float = 0.05


@dataclass
class LoggingConfig:
    """Logging output configuration"""
    log_level: str = "INFO"
    debug_mode: bool = False
    log_file: Optional[str] = None


class ConfigManager:
    """
    Centralized configuration manager with environment variable loading
    and runtime validation for all engine settings.
    """

    def __init__(self, env_file_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file for loading environment variables
        """
        self._load_env_file(env_file_path)

        self.scoring = self._load_scoring_config()
        self.retention = self._load_retention_config()
        self.logging = self._load_logging_config()

        self._validate_configuration()

        logger.info("Configuration loaded and validated successfully")

    def _load_env_file(self, env_file_path: Optional[str]) -> None:
        """Load environment variables from .env file if it exists"""
        env_path = Path(env_file_path) if env_file_path else Path(".env")

        if env_path.exists():
            load_dotenv(env_path, override=True)
            logger.info(f"Loaded environment variables from {env_path}")

    def _get_env_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable with proper conversion"""
        value = os.getenv(key, str(default)).lower()
        return value in ('true', '1', 'yes', 'on')

    def _get_env_int(self, key: str, default: int) -> int:
        """Get integer environment variable with validation"""
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            logger.warning(f"Invalid integer value for {key}, using default: {default}")
            return default

    def _get_env_float(self, key: str, default: float) -> float:
        """Get float environment variable with validation"""
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            logger.warning(f"Invalid float value for {key}, using default: {default}")
            return default

    def _load_scoring_config(self) -> ScoringConfig:
        """Load scoring configuration from environment variables"""
        return ScoringConfig(
            default_top_k=self._get_env_int("MEMORY_DEFAULT_TOP_K", 15),
            default_half_life_days=self._get_env_float("MEMORY_DEFAULT_HALF_LIFE_DAYS", 30.0),
            episodic_weight=self._get_env_float("MEMORY_LAYER_WEIGHT_EPISODIC", 0.35),
            semantic_weight=self._get_env_float("MEMORY_LAYER_WEIGHT_SEMANTIC", 0.30),
            procedural_weight=self._get_env_float("MEMORY_LAYER_WEIGHT_PROCEDURAL", 0.25),
            working_weight=self._get_env_float("MEMORY_LAYER_WEIGHT_WORKING", 0.10)
        )

    def _load_retention_config(self) -> RetentionConfig:
        """Load retention configuration from environment variables"""
        return RetentionConfig(
            recall_boost_factor=self._get_env_float("MEMORY_RECALL_BOOST_FACTOR", 1.2),
            review_queue_limit=self._get_env_int("MEMORY_REVIEW_QUEUE_LIMIT", 20),
            min_strength=self._get_env_float("MEMORY_MIN_STRENGTH", 0.05)
        )

    def _load_logging_config(self) -> LoggingConfig:
        """Load logging configuration from environment variables"""
        return LoggingConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            debug_mode=self._get_env_bool("DEBUG_MODE", False),
            log_file=os.getenv("LOG_FILE") or None
        )

    def _validate_configuration(self) -> None:
        """Validate configuration values for consistency and ranges"""
        errors = []

        total_weights = (
            self.scoring.episodic_weight +
            self.scoring.semantic_weight +
            self.scoring.procedural_weight +
            self.scoring.working_weight
        )
        if abs(total_weights - 1.0) > LAYER_WEIGHT_TOLERANCE:
            errors.append(f"Layer weights sum to {total_weights:.3f}, should be 1.0")

        if any(w < 0 for w in (
            self.scoring.episodic_weight,
            self.scoring.semantic_weight,
            self.scoring.procedural_weight,
            self.scoring.working_weight
        )):
            errors.append("Layer weights must be non-negative")

        if self.scoring.default_top_k < 1:
            errors.append("Scoring default_top_k must be at least 1")

        if self.scoring.default_half_life_days <= 0:
            errors.append("Scoring default_half_life_days must be positive")

        if self.retention.recall_boost_factor <= 0:
            errors.append("Retention recall_boost_factor must be positive")

        if self.retention.review_queue_limit < 1:
            errors.append("Retention review_queue_limit must be at least 1")

        if not (0.0 <= self.retention.min_strength <= 1.0):
            errors.append("Retention min_strength must be between 0.0 and 1.0")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            logger.error(error_msg)
            raise ValueError(error_msg)

    def layer_weights(self) -> Dict[str, float]:
        """Configured cross-layer weights keyed by layer name"""
        return {
            "episodic": self.scoring.episodic_weight,
            "semantic": self.scoring.semantic_weight,
            "procedural": self.scoring.procedural_weight,
            "working": self.scoring.working_weight
        }

    def get_summary(self) -> Dict[str, Any]:
        """Get configuration summary for logging and debugging"""
        return {
            "scoring": {
                "default_top_k": self.scoring.default_top_k,
                "layer_weights": self.layer_weights()
            },
            "retention": {
                "recall_boost_factor": self.retention.recall_boost_factor,
                "review_queue_limit": self.retention.review_queue_limit
            },
            "logging": {
                "log_level": self.logging.log_level,
                "debug_mode": self.logging.debug_mode
            }
        }


# Global configuration instance (initialized on first use)
_config_instance: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        ConfigManager: The global configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = ConfigManager()
    return _config_instance


def init_config(env_file_path: Optional[str] = None) -> ConfigManager:
    """
    Initialize the global configuration instance with custom env file.

    Args:
        env_file_path: Optional path to .env file

    Returns:
        ConfigManager: The initialized configuration instance
    """
    global _config_instance
    _config_instance = ConfigManager(env_file_path)
    return _config_instance
