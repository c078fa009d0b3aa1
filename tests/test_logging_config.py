"""Tests for the package logging setup."""

import logging

from green_calculator.logging_config import setup_logging


def _cleanup(package_logger):
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


def test_repeated_setup_does_not_stack_handlers():
    package_logger = setup_logging()
    setup_logging()
    try:
        assert package_logger.name == "green_calculator"
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.INFO
    finally:
        _cleanup(package_logger)


def test_level_name_and_file(tmp_path):
    log_file = tmp_path / "calc.log"
    package_logger = setup_logging("debug", log_file)
    try:
        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 2
        logging.getLogger("green_calculator.engine").debug("integral done")
        for handler in package_logger.handlers:
            handler.flush()
        assert "green_calculator.engine - DEBUG - integral done" in log_file.read_text(encoding="utf-8")
    finally:
        _cleanup(package_logger)


def test_unknown_level_name_falls_back_to_info():
    package_logger = setup_logging("chatty")
    try:
        assert package_logger.level == logging.INFO
    finally:
        _cleanup(package_logger)
