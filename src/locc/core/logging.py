"""
Logging configuration.

We use a YAML logging config (`src/locc/config/logging.yaml`) and then apply
runtime overrides from settings (e.g., `LOCC_LOG_LEVEL`) or the CLI `--log-level` flag.
Everything is written to stderr; stdout is reserved for command results.
"""

from __future__ import annotations

import copy
import logging.config

from locc.config.settings import get_logging_config, get_settings


def configure_logging(level: str | None = None) -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    settings = get_settings()
    # The cached dict is shared across calls; edit a copy.
    config = copy.deepcopy(get_logging_config())

    level = (level or settings.app.log_level).upper()
    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
