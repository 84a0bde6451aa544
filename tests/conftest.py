from __future__ import annotations

import pytest
import requests


@pytest.fixture
def connection_error() -> Exception:
    return requests.ConnectionError("connection refused")
