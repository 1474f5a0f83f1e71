"""Shared fixtures."""

from __future__ import annotations

import pytest

from .helpers import make_token


@pytest.fixture
def valid_token() -> str:
    return make_token()
