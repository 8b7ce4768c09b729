"""Engine configuration loaded from ``gridcalc.yaml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from gridcalc.formulas.evaluator import DEFAULT_MAX_ITERATIONS

CONFIG_FILENAME = "gridcalc.yaml"

DEFAULT_CONFIG = {
    "max_iterations": DEFAULT_MAX_ITERATIONS,
    "log_dir": None,  # event logging disabled unless set
    "logging_fsync": False,
    "logging_tail_bytes": 2_097_152,  # 2 MB
}


def _flatten_logging_block(user_config: dict[str, Any]) -> dict[str, Any]:
    """Flatten a nested ``logging:`` block into flat config keys.

    Supports::

        logging:
          dir: .gridcalc
          fsync: true
          tail_bytes: 65536

    Maps to ``log_dir``, ``logging_fsync`` and ``logging_tail_bytes``.
    """
    block = user_config.pop("logging", None)
    if not isinstance(block, dict):
        return user_config

    mapping = {
        "dir": "log_dir",
        "fsync": "logging_fsync",
        "tail_bytes": "logging_tail_bytes",
    }
    for short_key, flat_key in mapping.items():
        if short_key in block:
            user_config[flat_key] = block[short_key]
    return user_config


def load_config(directory: Path) -> dict[str, Any]:
    """Load configuration from ``gridcalc.yaml`` in *directory*, with defaults.

    Args:
        directory: Directory holding the config file.  A missing file
            yields the defaults.

    Returns:
        Merged configuration dict.  A relative ``log_dir`` is resolved
        against *directory*.

    Raises:
        ValueError: If the file is not a mapping or ``max_iterations`` is
            not a positive integer.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = Path(directory) / CONFIG_FILENAME
    if config_path.exists():
        user_config = yaml.safe_load(config_path.read_text()) or {}
        if not isinstance(user_config, dict):
            raise ValueError(f"{config_path}: expected a mapping at top level")
        config.update(_flatten_logging_block(user_config))

    try:
        config["max_iterations"] = int(config["max_iterations"])
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"max_iterations must be an integer, got {config['max_iterations']!r}"
        ) from exc
    if config["max_iterations"] < 1:
        raise ValueError(
            f"max_iterations must be at least 1, got {config['max_iterations']}"
        )

    if config["log_dir"] is not None:
        log_dir = Path(config["log_dir"])
        if not log_dir.is_absolute():
            log_dir = Path(directory) / log_dir
        config["log_dir"] = log_dir

    return config
