"""Test logging setup.

Tests for cielab.utils.logging_config:
    - File output in JSON and human formats
    - Idempotency (repeated setup doesn't duplicate handlers)
    - Context push/pop
    - Config file → setup_logging → library DEBUG records

Run:
    pytest tests/test_logging_config.py -v
"""

import json
import logging
import logging.handlers

import pytest

from cielab.utils import color, logging_config, validators


@pytest.fixture(autouse=True)
def reset_logging():
    """Leave the root logger without our handlers after each test."""
    yield
    logging_config.setup_logging(log_level="WARNING", to_stderr=False, capture_warnings=False)
    logging_config.pop_context()
    logging.captureWarnings(False)


def _read_json_lines(path):
    return [json.loads(line) for line in path.read_text().strip().splitlines()]


def test_logging_idempotency(tmp_path):
    """Repeated setup replaces handlers instead of stacking them."""
    log_path = tmp_path / "test.log"

    logging_config.setup_logging(
        log_level="INFO",
        log_file=str(log_path),
        json=True,
        to_stderr=False,
        context={"app": "test"}
    )
    logger = logging_config.get_logger("cielab_test")
    logger.info("hello")

    handlers = logging_config.setup_logging(
        log_level="INFO",
        log_file=str(log_path),
        json=True,
        to_stderr=False,
        context={"app": "test"}
    )
    logger.info("world")

    assert len(handlers) == 1
    records = _read_json_lines(log_path)
    assert [r["msg"] for r in records] == ["hello", "world"]
    assert records[0]["app"] == "test"
    assert records[0]["lvl"] == "INFO"


def test_human_format_includes_context(tmp_path):
    log_path = tmp_path / "human.log"
    logging_config.setup_logging(log_file=str(log_path), to_stderr=False, context={"palette": "web216"})
    logging_config.get_logger("cielab_test").warning("matched")

    line = log_path.read_text().strip()
    assert "| WARNING  |" in line
    assert "palette=web216 |" in line
    assert line.endswith("matched")


def test_push_and_pop_context(tmp_path):
    log_path = tmp_path / "ctx.log"
    logging_config.setup_logging(log_file=str(log_path), json=True, to_stderr=False)
    logger = logging_config.get_logger("cielab_test")

    logging_config.push_context(app="cielab", batch=3)
    logger.info("first")
    logging_config.pop_context(keys=["batch"])
    logger.info("second")

    first, second = _read_json_lines(log_path)
    assert first["batch"] == 3 and first["app"] == "cielab"
    assert "batch" not in second and second["app"] == "cielab"


def test_size_rotation_handler(tmp_path):
    handlers = logging_config.setup_logging(
        log_file=str(tmp_path / "rot.log"),
        to_stderr=False,
        rotate={"mode": "size", "max_bytes": 1000, "backup_count": 2},
    )
    assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)


def test_unknown_rotation_mode(tmp_path):
    with pytest.raises(ValueError, match="Unknown rotation mode"):
        logging_config.setup_logging(
            log_file=str(tmp_path / "rot.log"),
            to_stderr=False,
            rotate={"mode": "weekly"},
        )


def test_config_file_enables_clamp_debug(tmp_path):
    """DEBUG config surfaces out-of-gamut clamping from the color engine."""
    log_path = tmp_path / "debug.log"
    cfg_path = tmp_path / "logging.yaml"
    cfg_path.write_text(f"log_level: DEBUG\nlog_file: {log_path}\njson: true\nto_stderr: false\n")

    cfg = validators.load_logging_config(cfg_path)
    logging_config.setup_logging(**cfg.to_setup_kwargs(), context={"app": "cielab"})
    color.lab_to_rgb(50.0, 200.0, 200.0)

    records = _read_json_lines(log_path)
    clamps = [r for r in records if r["name"] == "cielab.utils.color"]
    assert clamps
    assert all(r["lvl"] == "DEBUG" and r["app"] == "cielab" for r in clamps)
    assert "Clamping out-of-gamut channel" in clamps[0]["msg"]
