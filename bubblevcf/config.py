import os
from typing import Any, Dict, List, Optional

import yaml

from bubblevcf.parallel import POOL_TYPES
from bubblevcf.variation.enumerator import DEFAULT_MAX_EDGES

# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "reference_paths": None,        # None means every path in the graph
    "max_edges": DEFAULT_MAX_EDGES,
    "ignore_inverted_paths": False,
    "compare_paths": True,
    "workers": 1,
    "pool_type": "process",
    "all_occurrences": False,     # compare from every occurrence of the bubble entry
    "log_level": "INFO",
}

LOG_LEVELS: List[str] = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigurationError(Exception):
    """Custom exception for configuration errors."""
    pass


class Config:
    """
    Settings for a variant calling run.

    Values come from DEFAULT_CONFIG, then an optional YAML file, then
    explicit overrides (usually command-line options). Everything is
    validated after each load.
    """

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        self._settings: Dict[str, Any] = DEFAULT_CONFIG.copy()
        if settings:
            self.update(settings)

    def load_file(self, config_file: str) -> "Config":
        """
        Load settings from a YAML file.

        Raises:
            ConfigurationError: If the file is missing, unparsable or holds invalid values
        """
        if not os.path.exists(config_file):
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            with open(config_file, 'r') as f:
                file_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing config file {config_file}: {e}")

        if file_config is None:
            return self
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {config_file} must contain a mapping")
        return self.update(file_config)

    def update(self, overrides: Dict[str, Any]) -> "Config":
        """Apply overrides, ignoring keys whose value is None."""
        unknown = [key for key in overrides if key not in DEFAULT_CONFIG]
        if unknown:
            raise ConfigurationError(f"Unknown configuration parameters: {', '.join(sorted(unknown))}")
        self._settings.update({k: v for k, v in overrides.items() if v is not None})
        self._validate()
        return self

    def _validate(self):
        """Checks types and ranges of every setting."""
        max_edges = self._settings["max_edges"]
        if isinstance(max_edges, bool) or not isinstance(max_edges, int) or max_edges < 0:
            raise ConfigurationError(f"max_edges must be a non-negative integer, got {max_edges!r}")

        workers = self._settings["workers"]
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise ConfigurationError(f"workers must be a positive integer, got {workers!r}")

        if self._settings["pool_type"] not in POOL_TYPES:
            raise ConfigurationError(
                f"pool_type must be one of {', '.join(POOL_TYPES)}, got {self._settings['pool_type']!r}"
            )

        for flag in ("ignore_inverted_paths", "compare_paths", "all_occurrences"):
            if not isinstance(self._settings[flag], bool):
                raise ConfigurationError(f"{flag} must be true or false, got {self._settings[flag]!r}")

        refs = self._settings["reference_paths"]
        if refs is not None:
            if isinstance(refs, str):
                refs = [refs]
            if not isinstance(refs, (list, tuple)) or not all(isinstance(r, str) for r in refs):
                raise ConfigurationError(f"reference_paths must be a list of path names, got {refs!r}")
            self._settings["reference_paths"] = list(refs) or None

        level = str(self._settings["log_level"]).upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {level}")
        self._settings["log_level"] = level

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieves a configuration value."""
        return self._settings.get(key, default)

    def get_all(self) -> Dict[str, Any]:
        """Retrieves all configuration settings."""
        return self._settings.copy()
