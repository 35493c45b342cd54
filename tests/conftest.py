"""Shared test fixtures for simple_rest_server."""

import pytest
from fastapi.testclient import TestClient

from simple_rest_server.main import create_app


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
