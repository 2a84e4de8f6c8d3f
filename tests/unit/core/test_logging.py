#!/usr/bin/env python3
"""Tests for JSON logging setup."""

import json
import logging

import pytest

from annotation_schema.core.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    """Hand the root and package loggers back to pytest once the test is done."""
    root = logging.getLogger()
    root_handlers, root_level = list(root.handlers), root.level
    yield
    root.handlers[:] = root_handlers
    root.setLevel(root_level)
    logger = logging.getLogger("annotation_schema")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestSetupLogging:

    def test_package_logger_level(self):
        setup_logging("debug")
        assert logging.getLogger("annotation_schema").level == logging.DEBUG

        setup_logging("WARNING")
        assert logging.getLogger("annotation_schema").level == logging.WARNING

    def test_records_are_rendered_as_json(self, capsys):
        setup_logging("INFO")
        logger = logging.getLogger("annotation_schema.test")

        logger.info("hierarchy built", extra={"schema_uri": "http://example.com/schema/1"})

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["message"] == "hierarchy built"
        assert payload["levelname"] == "INFO"
        assert payload["schema_uri"] == "http://example.com/schema/1"
