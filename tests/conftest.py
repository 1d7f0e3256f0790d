"""Root conftest: environment first, then shared fake-storage fixtures."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_PORT", "5432")
os.environ.setdefault("DB_NAME", "bank_cards_test")
os.environ.setdefault("DB_USER", "bank")
os.environ.setdefault("DB_PASS", "bank")

from datetime import date, timedelta  # noqa: E402

import pytest  # noqa: E402

from app.db.models.card_model import CardStatus  # noqa: E402
from app.services.card_query_service import CardQueryService  # noqa: E402
from app.services.card_service import CardService  # noqa: E402
from app.services.transfer_service import TransferService  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeCardRepository,
    FakeConnection,
    FakeDatabase,
    FakeTransferRepository,
    FakeUserRepository,
)


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def owner(db):
    return db.add_user("Alice Owner")


@pytest.fixture
def stranger(db):
    return db.add_user("Mallory Stranger")


@pytest.fixture
def admin(db):
    return db.add_user("Root Admin", role="ADMIN")


@pytest.fixture
def make_card(db, owner):
    """Insert a card directly; defaults to an active card of `owner` valid for a year."""
    numbers = iter(f"4000{n:012d}" for n in range(1, 10_000))

    def _make(balance="0", status=CardStatus.ACTIVE, expiry_date=None, owner_id=None, number=None):
        return db.add_card(
            owner_id if owner_id is not None else owner["id"],
            number or next(numbers),
            balance=balance,
            status=status,
            expiry_date=expiry_date or date.today() + timedelta(days=365),
        )

    return _make


@pytest.fixture
def card_service(db):
    conn = FakeConnection(db)
    return CardService(FakeCardRepository(conn), FakeUserRepository(conn))


@pytest.fixture
def query_service(db):
    return CardQueryService(FakeCardRepository(FakeConnection(db)))


@pytest.fixture
def make_transfer_service(db):
    """One TransferService per simulated connection, as each request handler gets."""

    def _make():
        conn = FakeConnection(db)
        return TransferService(FakeCardRepository(conn), FakeTransferRepository(conn))

    return _make


@pytest.fixture
def transfer_service(make_transfer_service):
    return make_transfer_service()
