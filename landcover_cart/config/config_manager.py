"""
Configuration manager for landcover_cart library.
"""

import copy
import json
import yaml
from pathlib import Path
from typing import Dict, Any, Union, Optional, List
import logging

from .default_config import DEFAULT_CONFIG
from ..exceptions import ConfigurationError
from ..utils.path_resolver import PathResolver

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Manages configuration for the land cover CART analysis.

    This class handles:
    - Loading configuration from files or dictionaries
    - Merging with default configuration
    - Validating configuration parameters
    - Providing easy access to configuration values
    """

    def __init__(self, config_source: Optional[Union[str, Path, Dict]] = None):
        """
        Initialize configuration manager.

        Args:
            config_source: Path to config file, config dict, or None for defaults.
                When None, the file named by LANDCOVER_CART_CONFIG is loaded if set.
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.path_resolver = PathResolver()

        # Start with default configuration
        self._config = copy.deepcopy(DEFAULT_CONFIG)

        if config_source is None:
            config_source = self.path_resolver.config_path_from_env()

        # Load additional configuration if provided
        if config_source is not None:
            self.load_config(config_source)

    def load_config(self, config_source: Union[str, Path, Dict]) -> None:
        """
        Load configuration from various sources.

        Args:
            config_source: Path to config file or configuration dictionary
        """
        if isinstance(config_source, dict):
            self._merge_config(config_source)
        else:
            # Assume it's a file path
            config_path = self.path_resolver.resolve_config_path(config_source)
            self._load_config_file(config_path)

    def _load_config_file(self, config_path: Path) -> None:
        """
        Load configuration from file.

        Args:
            config_path: Path to configuration file
        """
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                if config_path.suffix.lower() in ['.yaml', '.yml']:
                    file_config = yaml.safe_load(f)
                else:
                    file_config = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            self.logger.error(f"Failed to load configuration from {config_path}: {e}")
            raise ConfigurationError(f"Cannot read configuration {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Configuration file must hold a mapping: {config_path}")

        self._merge_config(file_config)
        self.logger.info(f"Configuration loaded from: {config_path}")

    def _merge_config(self, new_config: Dict[str, Any]) -> None:
        """
        Merge new configuration with existing configuration.

        Args:
            new_config: New configuration to merge
        """
        def deep_merge(base_dict: Dict, update_dict: Dict) -> Dict:
            """Recursively merge dictionaries."""
            for key, value in update_dict.items():
                if key in base_dict and isinstance(base_dict[key], dict) and isinstance(value, dict):
                    deep_merge(base_dict[key], value)
                else:
                    base_dict[key] = copy.deepcopy(value)
            return base_dict

        self._config = deep_merge(self._config, new_config)
        self.logger.debug("Configuration merged successfully")

    @property
    def config(self) -> Dict[str, Any]:
        """Get a copy of the current configuration."""
        return copy.deepcopy(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'split.seed' or 'ml.predictors')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self._config
        try:
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'data.year')
            value: Value to set
        """
        keys = key.split('.')
        config = self._config

        # Navigate to the parent of the target key
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        # Set the final value
        config[keys[-1]] = value
        self.logger.debug(f"Configuration set: {key} = {value}")

    def save_config(self, file_path: Union[str, Path], format: str = 'json') -> None:
        """
        Save current configuration to file.

        Args:
            file_path: Path to save configuration
            format: File format ('json' or 'yaml')
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w') as f:
            if format.lower() == 'yaml':
                yaml.safe_dump(self._config, f, default_flow_style=False, indent=2)
            else:
                json.dump(self._config, f, indent=2)

        self.logger.info(f"Configuration saved to: {file_path}")

    def validation_errors(self) -> List[str]:
        """
        Collect problems with the current configuration.

        Returns:
            List of human readable messages, empty when valid
        """
        errors = []

        required_fields = [
            'data.plot_id_column',
            'data.year_column',
            'data.label_column',
            'encoding.target_column',
            'ml.output_column',
        ]
        for field in required_fields:
            if not self.get(field):
                errors.append(f"Required configuration field missing: {field}")

        bounds = self.get('data.bounds')
        if bounds is not None:
            if len(bounds) != 4:
                errors.append("data.bounds must contain exactly 4 values")
            elif bounds[0] >= bounds[2] or bounds[1] >= bounds[3]:
                errors.append(f"data.bounds min must be below max: {bounds}")

        if self.get('data.missing_predictors') not in ('drop', 'error'):
            errors.append("data.missing_predictors must be 'drop' or 'error'")

        if self.get('encoding.order') not in ('first_seen', 'sorted'):
            errors.append("encoding.order must be 'first_seen' or 'sorted'")

        fraction = self.get('split.train_fraction')
        if not isinstance(fraction, (int, float)) or not 0 < fraction < 1:
            errors.append(f"split.train_fraction must be in (0, 1), got {fraction}")

        seed = self.get('split.seed')
        if not isinstance(seed, int) or isinstance(seed, bool):
            errors.append(f"split.seed must be an integer, got {seed!r}")

        if not self.get('ml.predictors'):
            errors.append("ml.predictors must name at least one column")

        if self.get('ml.cart.criterion') not in ('gini', 'entropy', 'log_loss'):
            errors.append(f"Unsupported CART criterion: {self.get('ml.cart.criterion')}")

        position = self.get('visualization.legend_position')
        if position not in ('bottom-left', 'bottom-right', 'top-left', 'top-right'):
            errors.append(f"Unknown visualization.legend_position: {position}")

        radius = self.get('visualization.query_radius_m')
        if not isinstance(radius, (int, float)) or radius <= 0:
            errors.append(f"visualization.query_radius_m must be positive, got {radius}")

        return errors

    def validate_config(self) -> bool:
        """
        Validate current configuration.

        Returns:
            True if configuration is valid, False otherwise
        """
        errors = self.validation_errors()
        for message in errors:
            self.logger.error(message)
        if not errors:
            self.logger.info("Configuration validation passed")
        return not errors

    def require_valid(self) -> None:
        """Raise ConfigurationError listing every validation problem."""
        errors = self.validation_errors()
        if errors:
            raise ConfigurationError("; ".join(errors))

    def get_data_config(self) -> Dict[str, Any]:
        """Get input table configuration."""
        return self.get('data', {})

    def get_ml_config(self) -> Dict[str, Any]:
        """Get ML-specific configuration."""
        return self.get('ml', {})

    def get_visualization_config(self) -> Dict[str, Any]:
        """Get map and legend configuration."""
        return self.get('visualization', {})

    def __repr__(self) -> str:
        return f"ConfigManager(project={self.get('project.name', 'unknown')})"
