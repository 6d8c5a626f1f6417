import pytest
from fastapi.testclient import TestClient

from splito.main import app
from splito.schemas.member import Member


@pytest.fixture
def members():
    return [
        Member(id="m1", name="Alice"),
        Member(id="m2", name="Bob"),
        Member(id="m3", name="Carol"),
    ]


@pytest.fixture
def client():
    return TestClient(app)
