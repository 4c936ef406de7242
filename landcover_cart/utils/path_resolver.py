"""
Path resolution utilities for landcover_cart library.
"""

import os
from pathlib import Path
from typing import Optional, Union
import logging

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LANDCOVER_CART_CONFIG"


class PathResolver:
    """
    Resolves paths to configuration files, input tables and output folders.

    Relative paths are searched in order: an explicit base path, the current
    working directory, the library directory and the user's home directory.
    """

    def __init__(self):
        """Initialize path resolver."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def config_path_from_env(self) -> Optional[Path]:
        """
        Get the configuration file named by LANDCOVER_CART_CONFIG.

        Returns:
            Resolved Path, or None when the variable is unset or empty
        """
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return None
        self.logger.info(f"Using configuration from {CONFIG_ENV_VAR}: {env_path}")
        return self.resolve_config_path(env_path)

    def resolve_config_path(self, config_path: Union[str, Path]) -> Path:
        """
        Resolve configuration file path.

        Args:
            config_path: Path to configuration file

        Returns:
            Resolved Path object
        """
        return self._resolve(Path(config_path))

    def resolve_data_path(self, data_path: Union[str, Path],
                          base_path: Optional[Path] = None) -> Path:
        """
        Resolve data file path.

        Args:
            data_path: Path to data file
            base_path: Base path to search from (optional)

        Returns:
            Resolved Path object
        """
        return self._resolve(Path(data_path), base_path)

    def _resolve(self, path: Path, base_path: Optional[Path] = None) -> Path:
        # If absolute path, return as is
        if path.is_absolute():
            return path

        search_paths = []
        if base_path:
            search_paths.append(Path(base_path))

        search_paths.extend([
            Path.cwd(),
            Path(__file__).parent.parent,
            Path.home()
        ])

        for base in search_paths:
            full_path = base / path
            if full_path.exists():
                return full_path

        # Return original path if none found (will raise error later)
        return path

    def ensure_output_dir(self, output_dir: Union[str, Path]) -> Path:
        """
        Create the output directory if needed.

        Args:
            output_dir: Directory for analysis outputs

        Returns:
            Path to the existing directory
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        self.logger.debug(f"Output directory ready: {output_dir}")
        return output_dir
