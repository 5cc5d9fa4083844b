"""Configuration service for managing report settings."""

import json
from dataclasses import asdict, fields
from pathlib import Path

import structlog

from ..models import ClimbConfig
from ..models.config import FALLBACK_POLICIES, USERS_RATED_FILTERS
from .errors import ConfigurationError

log = structlog.stdlib.get_logger()


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for managing report configuration."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or Path.home() / ".config" / "bgg-climb" / "config.json"
        log.debug("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> ClimbConfig:
        """Load configuration from file or return default configuration."""
        if not self.config_path.exists():
            log.debug("Configuration file not found, using defaults")
            return self._get_default_config()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data: dict[str, str | int | float] = json.load(f)

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)

            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return self._get_default_config()

            log.info("Configuration loaded successfully", config_path=str(self.config_path))
            return config

        except (OSError, json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return self._get_default_config()

    def save_config(self, config: ClimbConfig) -> None:
        """Save configuration to file."""
        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            raise ConfigurationError(
                f"Invalid configuration: {', '.join(validation_result.errors)}",
                expected="values within the documented ranges",
            )

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(asdict(config), f, indent=2, ensure_ascii=False)

            log.info("Configuration saved successfully", config_path=str(self.config_path))

        except OSError as e:
            log.error("Failed to save configuration", error=str(e))
            raise

    def validate_config(self, config: ClimbConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        for name in ("min_ratings_rank", "min_ratings_bayes"):
            value = getattr(config, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(f"{name} must be a non-negative integer")

        if not isinstance(config.period_days, int) or config.period_days < 1:
            errors.append("period_days must be a positive integer")

        if not isinstance(config.max_periods, int) or config.max_periods < 2:
            errors.append("max_periods must be an integer of at least 2")

        if not isinstance(config.min_new_rating_ratio, (int, float)) or not 0 <= config.min_new_rating_ratio <= 1:
            errors.append("min_new_rating_ratio must be between 0 and 1")

        if not isinstance(config.rating_scale_min, (int, float)) or not isinstance(config.rating_scale_max, (int, float)):
            errors.append("rating scale bounds must be numbers")
        elif config.rating_scale_min >= config.rating_scale_max:
            errors.append("rating_scale_min must be below rating_scale_max")

        if config.users_rated_filter not in USERS_RATED_FILTERS:
            errors.append(f"users_rated_filter must be one of: {', '.join(USERS_RATED_FILTERS)}")

        if config.fallback_policy not in FALLBACK_POLICIES:
            errors.append(f"fallback_policy must be one of: {', '.join(FALLBACK_POLICIES)}")

        return ValidationResult(len(errors) == 0, errors)

    def _get_default_config(self) -> ClimbConfig:
        """Get default configuration."""
        return ClimbConfig()

    def _dict_to_config(self, data: dict[str, str | int | float]) -> ClimbConfig:
        """Convert dictionary to ClimbConfig, ignoring unknown keys."""
        known = {f.name for f in fields(ClimbConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            log.warning("Ignoring unknown configuration keys", keys=unknown)
        return ClimbConfig(**{k: v for k, v in data.items() if k in known})
