# utils.py
"""
Utility functions for the simulation framework.

This module provides helper functions, such as logging setup and
configuration loading, that are used across different parts of the
application but do not belong to a specific domain like physics or
rendering.
"""
import copy
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if needed. Sets up a console handler and, unless
#     "log_file" is null, a rotating file handler.
#
# load_config(path: str, defaults: Optional[Dict]) -> Dict[str, Any]:
#   - Outputs: The parsed JSON, with any missing sections or keys filled
#     in from `defaults`.
#   - Raises: FileNotFoundError, json.JSONDecodeError (after logging).

DEFAULT_CONFIG: Dict[str, Any] = {
    "simulation_parameters": {
        "seed": None,
        "particle_count": 100,
        "diameter": 8.0,
        "min_speed": 1.0,
        "max_speed": 5.0,
        "reference_temperature": 300.0,
        "initial_temperature": 300.0,
        "max_placement_attempts": 1000,
        "field_force_scale": 0.1,
        "gravity_force_scale": 0.01,
        "restitution": 1.0,
    },
    "run_control": {
        "max_steps": 0,
        "log_throttle_steps": 300,
    },
    "visualization": {
        "window_width": 800,
        "window_height": 600,
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(levelname)s - %(message)s",
        "log_file": "logs/simulation.log",
    },
}


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to the console and, if a log file is configured,
    to a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/simulation.log')

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # Rotates when the log reaches 1MB, keeps 5 backup logs.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")


def merge_defaults(config: Dict[str, Any], defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Returns a copy of `config` with missing keys taken from `defaults`."""
    merged = copy.deepcopy(defaults)
    for key, value in config.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_defaults(value, merged[key])
        else:
            merged[key] = value
    return merged


def load_config(path: str, defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Loads a JSON configuration file, filling gaps from the defaults."""
    if defaults is None:
        defaults = DEFAULT_CONFIG
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise
    return merge_defaults(config, defaults)
