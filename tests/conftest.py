from __future__ import annotations

import os
import tempfile
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

# Ambiente de teste definido antes de qualquer import de pinee
_DB_DIR = tempfile.mkdtemp(prefix="pinee-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/pinee.db"
os.environ["STORE_BACKEND"] = "sql"
os.environ["AUTH_MODE"] = "local"
os.environ["SECRET_KEY"] = "test-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from pinee.core.security import create_access_token  # noqa: E402
from pinee.database import create_db_and_tables, engine  # noqa: E402
from pinee.main import app  # noqa: E402
from pinee.schemas.transaction import TransactionRecord  # noqa: E402
from pinee.services.dashboard import _service_for  # noqa: E402


def _top_level_tests_group(path: Path) -> str | None:
    parts = path.parts
    try:
        tests_index = parts.index("tests")
    except ValueError:
        return None
    if tests_index + 1 >= len(parts):
        return None
    return parts[tests_index + 1]


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: pure unit tests")
    config.addinivalue_line("markers", "integration: API tests over the SQL store")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    for item in items:
        group = _top_level_tests_group(Path(str(item.fspath)))
        if group == "unit":
            item.add_marker(pytest.mark.unit)
        elif group == "integration":
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def make_record():
    """Factory de TransactionRecord com valores padrão razoáveis."""
    counter = {"n": 0}

    def _make(**overrides) -> TransactionRecord:
        counter["n"] += 1
        data = {
            "id": f"tx{counter['n']}",
            "user_id": "user-1",
            "title": f"Transação {counter['n']}",
            "amount": Decimal("100"),
            "category": "food",
            "date": "2024-02-10",
            "type": "expense",
            "status": "paid",
            "created_at": datetime(2024, 2, 10, 12, 0, counter["n"] % 60, tzinfo=timezone.utc),
        }
        data.update(overrides)
        if isinstance(data["amount"], (int, str)):
            data["amount"] = Decimal(str(data["amount"]))
        return TransactionRecord(**data)

    return _make


@pytest.fixture
def client():
    SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    _service_for.cache_clear()
    with TestClient(app) as test_client:
        yield test_client
    _service_for.cache_clear()


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": "user-1"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers():
    token = create_access_token({"sub": "user-2"})
    return {"Authorization": f"Bearer {token}"}
