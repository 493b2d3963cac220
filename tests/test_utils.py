import json
import os
import logging
import logging.handlers

import pytest

from utils import DEFAULT_CONFIG, load_config, merge_defaults, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_load_config_fills_missing_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"simulation_parameters": {"particle_count": 12}}))

    config = load_config(str(path))

    assert config["simulation_parameters"]["particle_count"] == 12
    assert config["simulation_parameters"]["diameter"] == 8.0
    assert config["logging"] == DEFAULT_CONFIG["logging"]


def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_load_config_bad_json_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_merge_defaults_does_not_modify_defaults():
    defaults = {"a": {"b": 1, "c": 2}}

    merged = merge_defaults({"a": {"b": 5}, "d": 3}, defaults)

    assert merged == {"a": {"b": 5, "c": 2}, "d": 3}
    assert defaults == {"a": {"b": 1, "c": 2}}


def test_shipped_config_is_complete():
    with open(os.path.join(os.path.dirname(__file__), "..", "config.json")) as f:
        config = json.load(f)

    for section, values in DEFAULT_CONFIG.items():
        assert set(values) <= set(config[section])


def test_setup_logging_adds_console_and_rotating_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "run.log"

    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    assert log_file.exists()


def test_setup_logging_without_file(restore_root_logger):
    setup_logging({"logging": {"level": "WARNING", "log_file": None}})

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
