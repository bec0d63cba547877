"""
Pytest configuration and shared fixtures for the Backgammon project.

This module provides fixtures for:
- API client setup
- Common positions in XGID form
"""
import pytest
from rest_framework.test import APIClient


OPENING_XGID = '-b----E-C---eE---c-e----B-:0:0:1:65:0:0:0:0:10'


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def opening_xgid():
    """Opening position, white to play 6-5."""
    return OPENING_XGID


@pytest.fixture
def bearoff_xgid():
    """White bearing off against black's closed board; white to play."""
    # White: 3 on each of points 1-5; black: 5 on each of 22-24
    return '-CCCCC----------------eee-:0:0:1:00:0:0:0:0:10'
