"""
Configuration loading and management.

Runners can be built from a YAML file instead of keyword arguments. The file
is read once, and values are looked up with dot-notation keys:

.. code-block:: yaml

    runner:
      name: "thumbnails"
      batch_size: 25
      cancel_abandoned: true
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import yaml
import os

from .core.errors import InvalidArgumentError
from .core.partition import validate_batch_size

DEFAULT_BATCH_SIZE = 10
DEFAULT_RUNNER_NAME = "BatchRunner"


class Config:
    """
    A wrapper around a dictionary for managing configuration.

    It provides a `get` method that allows accessing nested values using
    dot-notation (e.g., 'runner.batch_size').
    """

    def __init__(self, config_data: Optional[Dict[str, Any]]):
        self._config = config_data or {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Access a config value using dot notation.

        Example:
            >>> config = Config({'runner': {'batch_size': 5}})
            >>> config.get('runner.batch_size')
            5
            >>> config.get('runner.name', 'BatchRunner')
            'BatchRunner'

        :param key: The dot-separated key for the desired value.
        :param default: The value to return if the key is not found.
        :return: The configuration value or the default.
        """
        value = self._config
        for k in key.split("."):
            if not isinstance(value, dict) or k not in value:
                return default
            value = value[k]
        return value

    def __repr__(self) -> str:
        return f"Config(config_data={self._config})"


def load_config(path: Optional[str]) -> Config:
    """
    Loads a YAML configuration file from the given path.

    If the path is None or does not exist, it returns an empty Config object.

    :param path: The path to the YAML configuration file.
    :return: A Config object with the loaded data.
    :raises yaml.YAMLError: If the file is not valid YAML.
    """
    if not path or not os.path.exists(path):
        return Config({})

    with open(path, "r") as f:
        config_data = yaml.safe_load(f)

    return Config(config_data)


@dataclass(frozen=True)
class RunnerSettings:
    """The validated `runner` section of a configuration."""

    batch_size: int = DEFAULT_BATCH_SIZE
    cancel_abandoned: bool = True
    name: str = DEFAULT_RUNNER_NAME


def runner_settings(config: Config) -> RunnerSettings:
    """
    Reads and validates the `runner` section of a configuration.

    Missing keys take their defaults. Values of the wrong type are rejected
    rather than coerced, so a quoted `"false"` is an error, not `True`.

    :param config: The configuration to read.
    :return: The runner settings.
    :raises InvalidArgumentError: If a `runner.*` value has the wrong type.
    """
    batch_size = config.get("runner.batch_size", DEFAULT_BATCH_SIZE)
    validate_batch_size(batch_size)

    cancel_abandoned = config.get("runner.cancel_abandoned", True)
    if not isinstance(cancel_abandoned, bool):
        raise InvalidArgumentError(
            f"runner.cancel_abandoned must be true or false, got {cancel_abandoned!r}."
        )

    name = config.get("runner.name", DEFAULT_RUNNER_NAME)
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError(f"runner.name must be a non-empty string, got {name!r}.")

    return RunnerSettings(batch_size=batch_size, cancel_abandoned=cancel_abandoned, name=name)
