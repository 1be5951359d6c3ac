import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Point the app at a throwaway SQLite file before anything imports it
_TEST_DIR = Path(tempfile.mkdtemp(prefix="svrx-tests-"))
_PUBLIC_DIR = _TEST_DIR / "public"
_PUBLIC_DIR.mkdir()
(_PUBLIC_DIR / "index.html").write_text("<h1>Send us a suggestion</h1>", encoding="utf-8")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR / 'app.db'}"
os.environ["PUBLIC_DIRECTORY"] = str(_PUBLIC_DIR)
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STRICT_EMAIL_VALIDATION"] = "false"
os.environ["ADMIN_USER"] = "admin"
os.environ["ADMIN_PASSWORD"] = "s3cret"

ADMIN_AUTH = ("admin", "s3cret")


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    from api.main import app
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def gateway(tmp_path) -> AsyncGenerator:
    from services.database import StorageGateway
    gw = StorageGateway(f"sqlite+aiosqlite:///{tmp_path / 'gateway.db'}")
    await gw.ensure_schema()
    yield gw
    await gw.close()
