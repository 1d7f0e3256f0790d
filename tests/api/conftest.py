"""HTTP fixtures: FastAPI app with repository dependencies bound to the fake database.

Invariants:
    - No PostgreSQL pool is created (lifespan is not run by ASGITransport)
    - Every request gets its own FakeConnection, like a pooled connection per request
"""

import pytest
from fastapi import Depends
from httpx import ASGITransport, AsyncClient

from app.api.v1 import deps
from app.core.security import create_access_token
from app.db.session import get_db_connection
from app.main import app
from tests.fakes import FakeCardRepository, FakeConnection, FakeTransferRepository, FakeUserRepository


@pytest.fixture
async def client(db):
    app.dependency_overrides[get_db_connection] = lambda: FakeConnection(db)
    app.dependency_overrides[deps.get_card_repo] = lambda conn=Depends(get_db_connection): FakeCardRepository(conn)
    app.dependency_overrides[deps.get_user_repo] = lambda conn=Depends(get_db_connection): FakeUserRepository(conn)
    app.dependency_overrides[deps.get_transfer_repo] = lambda conn=Depends(get_db_connection): FakeTransferRepository(conn)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


def auth_header(user: dict) -> dict:
    return {"Authorization": f"Bearer {create_access_token(str(user['id']))}"}
