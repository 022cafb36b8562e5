"""
Process list configuration loading.

Supported formats, picked by file suffix:
- .yaml / .yml (also the fallback for unknown suffixes)
- .toml
- .json

The file must hold a mapping with a ``processes`` list of command strings.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from .errors import setup_error
from .models import FileConfig

logger = logging.getLogger(__name__)

_FORMATS = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".json": "json",
}


def detect_format(path: Path) -> str:
    return _FORMATS.get(path.suffix.lower(), "yaml")


def parse_config_text(text: str, fmt: str) -> Any:
    if fmt == "toml":
        return tomllib.loads(text)
    if fmt == "json":
        return json.loads(text)
    return yaml.safe_load(text)


class ConfigurationLoader:
    """Loads and validates the process list file."""

    def __init__(self, config_path: Union[str, Path]):
        self.config_path = Path(config_path)
        self.format = detect_format(self.config_path)

    def _read_text(self) -> str:
        try:
            return self.config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise setup_error(f"Unable to open config file path at '{self.config_path}'") from e
        except UnicodeDecodeError as e:
            raise setup_error("Unable to read config file into string") from e

    def _parse(self, text: str) -> Dict[str, Any]:
        try:
            raw = parse_config_text(text, self.format)
        except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
            raise setup_error(
                f"Unable to parse config as required {self.format} format: {text}"
            ) from e
        if not isinstance(raw, dict):
            raise setup_error(
                f"Config file '{self.config_path}' must contain a mapping, got {type(raw).__name__}"
            )
        return raw

    def load_configuration(self) -> FileConfig:
        """Read, parse and validate the config file.

        Raises:
            BatchExecError: kind SETUP, chained to the underlying I/O, parse
                or validation error.
        """
        raw = self._parse(self._read_text())
        try:
            config = FileConfig.model_validate(raw)
        except ValidationError as e:
            raise setup_error(f"Invalid config in '{self.config_path}'") from e
        logger.debug(f"Loaded {len(config.processes)} processes from {self.config_path}")
        return config


def load_file_config(config_path: Union[str, Path]) -> FileConfig:
    return ConfigurationLoader(config_path).load_configuration()
