from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from receipt_desk.core.config import Settings
from receipt_desk.db.storage import Storage
from receipt_desk.main import create_app


@pytest.fixture
def storage():
    return Storage.from_url("sqlite://")


@pytest.fixture
def client(storage):
    app = create_app(settings=Settings(SEED_SAMPLE_DATA=False), storage=storage)
    return TestClient(app)


@pytest.fixture
def receipt_data():
    """Factory for valid receipt payloads; keyword arguments override fields."""

    counter = {"n": 0}

    def make(**overrides):
        counter["n"] += 1
        data = {
            "receiptNumber": f"R-{counter['n']:04d}",
            "datetime": datetime(2025, 8, 20, 10, 30),
            "entity": "Ali Transport",
            "vehicle": "ABC-123",
            "staff": "Hamza Khan",
            "branch": "Main Branch",
            "paymentMethod": "cash",
            "totalAmount": "1000",
            "salesmanName": "Bilal Ahmed",
        }
        data.update(overrides)
        return data

    return make
