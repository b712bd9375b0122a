"""Shared fixtures."""

import json
import logging

import pytest
from _pytest.logging import LogCaptureHandler

from gateway.logger import LOGGER_NAME


@pytest.fixture(autouse=True)
def _reset_gateway_logger():
    """Drop handlers a test attached to the gateway logger."""
    log = logging.getLogger(LOGGER_NAME)
    before = list(log.handlers)
    yield
    for h in list(log.handlers):
        if h not in before:
            log.removeHandler(h)
            h.close()


@pytest.fixture
def gateway_records():
    """Records emitted on the (non-propagating) gateway logger."""
    log = logging.getLogger(LOGGER_NAME)
    handler = LogCaptureHandler()
    log.addHandler(handler)
    yield handler.records
    log.removeHandler(handler)


@pytest.fixture
def write_config(tmp_path):
    """Write a config document (dict or raw text) and return its path."""

    def _write(doc, name="gateway.json"):
        path = tmp_path / name
        text = doc if isinstance(doc, str) else json.dumps(doc)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
