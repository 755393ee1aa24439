"""Shared test configuration for bernard.

Keeps library loggers at DEBUG during tests so ``caplog`` sees the
orchestrator's and loader's diagnostics.
"""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _debug_logging(caplog: pytest.LogCaptureFixture) -> None:
    """Capture bernard's debug logs in every test."""
    caplog.set_level(logging.DEBUG, logger="bernard")
