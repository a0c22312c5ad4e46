"""
Configuration loader for the geo query parameter library.

This module provides the ConfigLoader class that loads and validates the
JSON configuration holding per-environment logging settings, cover tuning
and query defaults.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, List
from functools import lru_cache

from ..exceptions import GeoBaseException, GeoConfigurationError, GeoValidationError
from ..utils import get_logger


CONFIG_FILE_NAME = "environment_config.json"

# Sections merged key by key with the "shared" block
MERGED_SECTIONS = ("cover", "query", "logging")
REQUIRED_SECTIONS = ("logging", "cover", "query")


class ConfigLoader:
    """
    Configuration loader and validator for geo query parameters.
    
    This class loads environment-specific configuration from a JSON file,
    merges it with the shared block, validates that the required sections
    are present and hands out plain dictionaries. Turning those sections
    into parameter objects is left to the parameter models, which apply
    their own boundary validation.
    """
    
    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the configuration loader.
        
        Args:
            config_dir: Directory containing configuration files (defaults to 'config/')
        """
        self.logger = get_logger(__name__)
        self.config_dir = Path(config_dir) if config_dir else Path("config")
    
    @property
    def config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME
    
    @lru_cache(maxsize=1)
    def _load_raw_config(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            raise GeoConfigurationError(
                "Environment configuration file not found",
                {"path": str(self.config_path)}
            )
        
        try:
            with open(self.config_path, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise GeoConfigurationError(
                f"Invalid JSON in environment configuration: {str(e)}",
                {"path": str(self.config_path)}
            ) from e
        except OSError as e:
            raise GeoConfigurationError(
                f"Failed to read environment configuration: {str(e)}",
                {"path": str(self.config_path)}
            ) from e
        
        if not isinstance(config_data, dict):
            raise GeoValidationError("Environment configuration must be a JSON object")
        if "environments" not in config_data or not isinstance(config_data["environments"], dict):
            raise GeoValidationError("Missing 'environments' key in configuration")
        
        return config_data
    
    def available_environments(self) -> List[str]:
        """Return the environment names defined in the configuration file."""
        return sorted(self._load_raw_config()["environments"].keys())
    
    @lru_cache(maxsize=4)
    def load_environment_config(self, environment: str) -> Dict[str, Any]:
        """
        Load configuration for a specific environment.
        
        Args:
            environment: Environment name (development/production)
            
        Returns:
            Dictionary containing environment-specific configuration merged with shared config
            
        Raises:
            GeoConfigurationError: If configuration cannot be loaded
            GeoValidationError: If the merged configuration is structurally invalid
        """
        try:
            config_data = self._load_raw_config()
            
            if environment not in config_data["environments"]:
                raise GeoConfigurationError(
                    f"Environment '{environment}' not found",
                    {"available": self.available_environments()}
                )
            
            env_config = self._merge_shared(
                config_data.get("shared", {}),
                config_data["environments"][environment]
            )
            self._validate_environment_config(env_config, environment)
            
            self.logger.info(f"Loaded configuration for environment: {environment}")
            return env_config
            
        except GeoBaseException:
            raise
        except Exception as e:
            raise GeoConfigurationError(
                f"Failed to load environment configuration: {str(e)}",
                {"environment": environment}
            ) from e
    
    def get_cover_config(self, environment: str) -> Dict[str, Any]:
        """
        Get the standalone cover tuning section for an environment.
        
        Args:
            environment: Environment name
            
        Returns:
            Copy of the merged ``cover`` section
        """
        return dict(self.load_environment_config(environment)["cover"])
    
    def get_query_config(self, environment: str) -> Dict[str, Any]:
        """
        Get the query defaults section for an environment.
        
        Args:
            environment: Environment name
            
        Returns:
            Copy of the merged ``query`` section
        """
        return dict(self.load_environment_config(environment)["query"])
    
    def get_logging_config(self, environment: str) -> Dict[str, Any]:
        """Get the logging section for an environment."""
        return dict(self.load_environment_config(environment)["logging"])
    
    def _merge_shared(self, shared_config: Dict[str, Any],
                      env_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge the shared block into one environment's configuration.
        
        Mapping sections listed in MERGED_SECTIONS are merged key by key with
        environment values winning; any other shared key is only used when the
        environment does not define it.
        """
        if not isinstance(env_config, dict):
            raise GeoValidationError("Environment configuration must be a JSON object")
        
        merged = {key: value for key, value in env_config.items()}
        
        for key, value in shared_config.items():
            if key in MERGED_SECTIONS and isinstance(value, dict):
                section = dict(value)
                section.update(merged.get(key, {}))
                merged[key] = section
            elif key not in merged:
                merged[key] = value
        
        return merged
    
    def _validate_environment_config(self, env_config: Dict[str, Any], environment: str) -> None:
        """
        Validate the merged environment configuration structure.
        
        Args:
            env_config: Merged configuration to validate
            environment: Environment name, used in error context
            
        Raises:
            GeoValidationError: If configuration is invalid
        """
        missing = [key for key in REQUIRED_SECTIONS if key not in env_config]
        if missing:
            raise GeoValidationError(
                f"Missing required sections in {environment} configuration (including shared)",
                {"missing": missing}
            )
        
        for key in REQUIRED_SECTIONS:
            if not isinstance(env_config[key], dict):
                raise GeoValidationError(
                    f"Section '{key}' must be a JSON object",
                    {"environment": environment}
                )
    
    def clear_cache(self) -> None:
        """Clear the configuration cache."""
        self._load_raw_config.cache_clear()
        self.load_environment_config.cache_clear()
