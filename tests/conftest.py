"""
Shared fixtures: an app over a temporary storage directory and a TestClient for it.
"""

import pytest
from fastapi.testclient import TestClient

from uploader.config import Settings
from uploader.main import create_app


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir):
    return Settings(upload_dir=upload_dir)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client

