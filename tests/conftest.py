"""
Shared fixtures for the machine learning client tests.
"""
import pytest

from ml_dispatch.core.config import Settings
from ml_dispatch.model_client import MachineLearningClient
from tests.fakes import FakeServers


@pytest.fixture
def servers():
    return FakeServers()


@pytest.fixture
def test_settings():
    return Settings(
        machine_learning_url="http://ml-1:3003",
        request_timeout=10.0,
        probe_timeout=1.0,
        health_path="",
        facial_recognition_model="buffalo_l",
        face_min_score=0.7,
        clip_model="ViT-B-32__openai",
    )


@pytest.fixture
async def ml_client(servers, test_settings):
    client = MachineLearningClient(settings=test_settings, transport=servers.transport())
    yield client
    await client.close()


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "img.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg-bytes")
    return str(path)
