# app/db/seed.py
import asyncio
import logging
import random
from datetime import date, timedelta
from decimal import Decimal

from faker import Faker
from tqdm import tqdm

from app.db.session import connect_db_pool, get_pool, close_db_pool
from app.core.security import hash_password

logger = logging.getLogger(__name__)

fake = Faker()

NUM_USERS = 50
MIN_CARDS_PER_USER = 1
MAX_CARDS_PER_USER = 3
DEFAULT_PASSWORD = "bank123"
ADMIN_EMAIL = "admin@bank.local"


async def insert_user(conn, full_name: str, email: str, hashed_password: str, role: str = "USER"):
    sql = """
    INSERT INTO users (full_name, email, hashed_password, role, is_active)
    VALUES ($1, $2, $3, $4, $5)
    RETURNING id;
    """
    rec = await conn.fetchrow(sql, full_name, email, hashed_password, role, True)
    return rec["id"]


async def insert_card(conn, user_id: int, card_number: str, expiry_date: date, balance: Decimal, status: str):
    sql = """
    INSERT INTO cards (user_id, card_number, expiry_date, balance, status)
    VALUES ($1, $2, $3, $4, $5)
    ON CONFLICT (card_number) DO NOTHING
    RETURNING id;
    """
    rec = await conn.fetchrow(sql, user_id, card_number, expiry_date, balance, status)
    return rec["id"] if rec else None


def generate_card_number() -> str:
    prefix = random.choice(["4111", "5500", "2200", "4276"])
    length = random.choice([16, 16, 16, 18, 19])
    rest = "".join(str(random.randint(0, 9)) for _ in range(length - 4))
    return prefix + rest


def random_expiry_date() -> date:
    # mostly valid cards, a few already past their expiry date
    return date.today() + timedelta(days=random.randint(-60, 5 * 365))


async def seed():
    await connect_db_pool()
    pool = await get_pool()
    if pool is None:
        raise RuntimeError("Database pool could not be initialized")

    hashed_password = hash_password(DEFAULT_PASSWORD)

    async with pool.acquire() as conn:
        async with conn.transaction():
            logger.info("Creating users...")
            await insert_user(conn, "Administrator", ADMIN_EMAIL, hashed_password, role="ADMIN")
            user_ids = [
                await insert_user(conn, fake.name(), fake.unique.email(), hashed_password)
                for _ in range(NUM_USERS)
            ]

            created = 0
            for uid in tqdm(user_ids, desc="Generating cards"):
                for _ in range(random.randint(MIN_CARDS_PER_USER, MAX_CARDS_PER_USER)):
                    expiry = random_expiry_date()
                    status = "EXPIRED" if expiry < date.today() else random.choices(
                        ["ACTIVE", "BLOCKED"], weights=[0.9, 0.1]
                    )[0]
                    balance = Decimal(random.randint(0, 5_000_000)) / 100
                    if await insert_card(conn, uid, generate_card_number(), expiry, balance, status):
                        created += 1

            if not created:
                raise RuntimeError("No cards created, aborting seed")

    logger.info("Seed complete: %d users, %d cards.", len(user_ids) + 1, created)
    await close_db_pool()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
