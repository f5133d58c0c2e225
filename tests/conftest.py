import pytest
from fastapi.testclient import TestClient

from inventory.context import AppContext
from inventory.main import create_app
from inventory.seed import SeedService

from tests.fakes import FakeProductStore


@pytest.fixture
def store():
    return FakeProductStore()


@pytest.fixture
def seed_file(tmp_path):
    return tmp_path / "seeds" / "productos.json"


@pytest.fixture
def context(store, seed_file):
    return AppContext(store=store, seeder=SeedService(store, seed_file))


@pytest.fixture
def client(context, tmp_path):
    return TestClient(create_app(context=context, static_dir=tmp_path / "static"))
