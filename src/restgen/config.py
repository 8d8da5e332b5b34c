"""Configuration loading and precedence resolution.

restgen reads a single JSON config file deserialised into
:class:`~restgen.models.GeneratorConfig`.  The file is looked up in order:

1. The path given with ``--config``.
2. The path in the ``RESTGEN_CONFIG`` environment variable.
3. ``./restgen.json`` in the current working directory.

:func:`resolve_config` then layers command-line flags on top, so the
effective precedence is CLI flags > config file > model defaults.

Example ``restgen.json``::

    {
        "spec": "./spec",
        "output": "generated/requests.py",
        "target": "python",
        "policy": {
            "strategy": "push",
            "strategy_overrides": {"search": "format"},
            "derived": [{"source": "search", "target": "simple_search"}]
        }
    }
"""

from __future__ import annotations

import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from restgen.exceptions import ConfigError
from restgen.models import GeneratorConfig, Target, UrlStrategy

logger = logging.getLogger(__name__)

_APP_NAME = "restgen"
_PROJECT_CONFIG_FILENAME = "restgen.json"
_CONFIG_ENV_VAR = "RESTGEN_CONFIG"


# --- Data directory ---


def _is_xdg_platform() -> bool:
    """Return True on platforms that follow the XDG base directory spec."""
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/restgen/`` (default ``~/.local/share/restgen/``).
    On macOS/Windows: ``~/.restgen/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project config ---


def find_config_file(cli_path: Optional[str] = None) -> Optional[Path]:
    """Return the config file to load, or ``None`` when there is none.

    An explicitly requested file (``--config`` or ``RESTGEN_CONFIG``) must
    exist; the project file is optional.

    Raises:
        ConfigError: If an explicitly requested file does not exist.
    """
    explicit = cli_path or os.environ.get(_CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return path

    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    return path if path.is_file() else None


def load_project_config(path: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load the raw JSON of a config file.

    Args:
        path: File to read; defaults to ``./restgen.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or is not an object.
    """
    path = path or Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


def resolve_config(
    cli_config: Optional[str] = None,
    cli_spec: Optional[str] = None,
    cli_output: Optional[str] = None,
    cli_target: Optional[str] = None,
    cli_strategy: Optional[str] = None,
    cli_comment_markers: Optional[bool] = None,
) -> GeneratorConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_spec``, ``cli_output``, ...)
        2. Config file (``--config``, ``RESTGEN_CONFIG``, ``./restgen.json``)
        3. Defaults

    Raises:
        ConfigError: If the config file is unreadable or fails validation,
            or a CLI value is not a valid choice.
    """
    path = find_config_file(cli_config)
    data = load_project_config(path) if path is not None else None
    if path is not None:
        logger.debug("Using config file %s", path)

    try:
        config = GeneratorConfig.model_validate(data or {})
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    updates: dict[str, Any] = {}
    if cli_spec is not None:
        updates["spec"] = cli_spec
    if cli_output is not None:
        updates["output"] = cli_output
    if cli_comment_markers is not None:
        updates["comment_markers"] = cli_comment_markers
    if cli_target is not None:
        try:
            updates["target"] = Target(cli_target)
        except ValueError:
            raise ConfigError(f"Unknown target '{cli_target}'") from None
    if cli_strategy is not None:
        try:
            strategy = UrlStrategy(cli_strategy)
        except ValueError:
            raise ConfigError(f"Unknown URL strategy '{cli_strategy}'") from None
        updates["policy"] = config.policy.model_copy(update={"strategy": strategy})

    return config.model_copy(update=updates) if updates else config
