import os
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

# Point the app at a throwaway database before anything imports taskdesk.config
_DB_DIR = tempfile.mkdtemp(prefix="taskdesk-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_DB_DIR) / 'test.sqlite'}"
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from fastapi.testclient import TestClient  # noqa: E402

from taskdesk.main import app  # noqa: E402
from taskdesk.routers.ingest import get_now  # noqa: E402

# Friday
NOW = datetime(2026, 2, 20, 12, 0, 0)


@pytest.fixture(scope="session")
def client():
    app.dependency_overrides[get_now] = lambda: NOW
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def context_ids(client):
    r = client.get("/contexts")
    assert r.status_code == 200, r.text
    return {c["name"]: c["id"] for c in r.json()}
