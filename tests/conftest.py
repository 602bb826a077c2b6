"""
Pytest configuration for the matching core tests.
"""
import logging
import os

import pytest

_ENV_PREFIX = "GIGMATCH_"


@pytest.fixture(autouse=True)
def isolate_config_env(monkeypatch):
    """Keep GIGMATCH_* overrides from the developer's shell out of config tests."""
    for name in list(os.environ):
        if name.startswith(_ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def quiet_scoring_logs(caplog):
    """Scoring logs every candidate at DEBUG; keep test output readable."""
    caplog.set_level(logging.INFO, logger="gigmatch")
    yield
