"""
Shared test fixtures and helpers for the restmap test suite.
"""

from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest

from sample_controllers import (
    GreetingController,
    ReportsController,
    SyncController,
    WidgetsController,
)


# ============================================================================
# Request / Response doubles
# ============================================================================


def make_request(params: Optional[Dict[str, Any]] = None, format: Optional[str] = "json"):
    """Request double exposing ``params()`` and ``format``."""
    request = MagicMock()
    request.params.return_value = params or {}
    request.format = format
    return request


def make_response():
    """Response double exposing ``body(content)``."""
    return MagicMock()


# ============================================================================
# Controllers
# ============================================================================


@pytest.fixture
def widgets():
    return WidgetsController.api()


@pytest.fixture
def raw_widgets():
    return WidgetsController.raw()


@pytest.fixture
def greeting():
    return GreetingController.raw()


@pytest.fixture
def reports():
    return ReportsController.api()


@pytest.fixture
def sync():
    return SyncController.api()


@pytest.fixture
def request_factory():
    return make_request


@pytest.fixture
def response_factory():
    return make_response
