"""
Logging configuration for the batch launcher.

The logging setup is read from a file holding a ``logging.config.dictConfig``
schema (YAML by default, JSON for ``.json`` files) and applied once, before
any command runs.
"""

import json
import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from batchexec.core.errors import setup_error

LEVEL_ENV = "BATCHEXEC_LOG_LEVEL"


def _env_level(name: str):
    v = os.environ.get(name)
    if not v:
        return None
    level = logging.getLevelName(v.upper())
    return level if isinstance(level, int) else None


def _ensure_log_dirs(config: Dict[str, Any]) -> None:
    # FileHandler fails if the parent directory is missing
    for handler in (config.get("handlers") or {}).values():
        if isinstance(handler, dict) and handler.get("filename"):
            Path(handler["filename"]).parent.mkdir(parents=True, exist_ok=True)


def load_logging_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(config_path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError(f"logging config must be a mapping, got {type(data).__name__}")
    data.setdefault("version", 1)
    return data


def setup_logging_from_file(config_path: Union[str, Path]) -> logging.Logger:
    """
    Initialize process logging from a config file.

    Args:
        config_path: Path to a YAML/JSON dictConfig file

    Returns:
        The launcher's logger

    Raises:
        BatchExecError: kind SETUP when the file cannot be read, parsed or
            applied.
    """
    try:
        config = load_logging_config(config_path)
        _ensure_log_dirs(config)
        logging.config.dictConfig(config)
    except (OSError, ValueError, TypeError, AttributeError, ImportError, yaml.YAMLError) as e:
        raise setup_error(
            f"Unable to initialize logger with the given config file at '{config_path}'"
        ) from e

    level = _env_level(LEVEL_ENV)
    if level is not None:
        logging.getLogger().setLevel(level)

    return logging.getLogger("batchexec")
