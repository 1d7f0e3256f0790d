from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from asyncpg import UniqueViolationError

from app.core.exceptions import DuplicateCardNumber
from app.db.models.card_model import CardStatus
from app.repositories.base_repo import BaseRepository, translate_storage_errors

CARD_COLUMNS = """
    c.id,
    c.card_number AS number,
    c.expiry_date,
    c.status,
    c.balance,
    c.user_id AS owner_id,
    u.full_name AS owner_name
"""

SORT_COLUMNS = {
    "id": "c.id",
    "number": "c.card_number",
    "balance": "c.balance",
    "expiry_date": "c.expiry_date",
    "status": "c.status",
}


def _status_clause(status: CardStatus, args: list) -> str:
    """Filter on effective status: a card past its expiry date counts as EXPIRED."""
    if status is CardStatus.EXPIRED:
        args.append(date.today())
        return f"(c.status = 'EXPIRED' OR c.expiry_date < ${len(args)})"
    args.extend([status.value, date.today()])
    return f"(c.status = ${len(args) - 1} AND c.expiry_date >= ${len(args)})"


def _to_card(record: dict | None) -> dict | None:
    if record is None:
        return None
    record["status"] = CardStatus(record["status"])
    record["balance"] = Decimal(record["balance"])
    return record


class CardRepository(BaseRepository):
    """Repository for card rows, asyncpg + raw SQL."""

    # ------------------ Retrieval Methods ------------------ #

    async def get_by_id(self, card_id: int) -> dict | None:
        sql = f"SELECT {CARD_COLUMNS} FROM cards c JOIN users u ON u.id = c.user_id WHERE c.id = $1;"
        return _to_card(await self._fetchrow(sql, card_id))

    async def get_for_owner(self, card_id: int, owner_id: int) -> dict | None:
        sql = f"""
            SELECT {CARD_COLUMNS} FROM cards c JOIN users u ON u.id = c.user_id
            WHERE c.id = $1 AND c.user_id = $2;
        """
        return _to_card(await self._fetchrow(sql, card_id, owner_id))

    async def exists_by_number(self, card_number: str) -> bool:
        sql = "SELECT EXISTS(SELECT 1 FROM cards WHERE card_number = $1);"
        return bool(await self._fetchval(sql, card_number))

    async def list_all(self) -> list[dict]:
        sql = f"SELECT {CARD_COLUMNS} FROM cards c JOIN users u ON u.id = c.user_id ORDER BY c.id;"
        return [_to_card(r) for r in await self._fetch(sql)]

    async def list_by_status(self, status: CardStatus) -> list[dict]:
        args = []
        sql = f"""
            SELECT {CARD_COLUMNS} FROM cards c JOIN users u ON u.id = c.user_id
            WHERE {_status_clause(status, args)} ORDER BY c.id;
        """
        return [_to_card(r) for r in await self._fetch(sql, *args)]

    async def search(
        self,
        owner_id: Optional[int],
        status: Optional[CardStatus],
        fragment: Optional[str],
        limit: int,
        offset: int,
        sort_field: str = "id",
        descending: bool = True,
    ) -> tuple[list[dict], int]:
        clauses = []
        args = []

        if owner_id is not None:
            args.append(owner_id)
            clauses.append(f"c.user_id = ${len(args)}")
        if status is not None:
            clauses.append(_status_clause(status, args))
        if fragment:
            args.append(fragment)
            clauses.append(f"right(c.card_number, 4) LIKE '%' || ${len(args)} || '%'")

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        direction = "DESC" if descending else "ASC"
        order = f"{SORT_COLUMNS.get(sort_field, 'c.id')} {direction}, c.id {direction}"

        count_sql = f"SELECT COUNT(*) FROM cards c {where};"
        page_sql = f"""
            SELECT {CARD_COLUMNS} FROM cards c JOIN users u ON u.id = c.user_id
            {where}
            ORDER BY {order}
            LIMIT ${len(args) + 1} OFFSET ${len(args) + 2};
        """
        # one snapshot for both count and page
        async with self.transaction(isolation="repeatable_read", readonly=True):
            total = await self._fetchval(count_sql, *args)
            rows = await self._fetch(page_sql, *args, limit, offset)
        return [_to_card(r) for r in rows], int(total or 0)

    # ------------------ Creation ------------------ #

    async def create_card(self, user_id: int, card_number: str, expiry_date: date, balance: Decimal) -> dict:
        sql = """
            INSERT INTO cards (user_id, card_number, expiry_date, status, balance)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING id;
        """
        try:
            async with translate_storage_errors("create_card"):
                card_id = await self.conn.fetchval(
                    sql, user_id, card_number, expiry_date, CardStatus.ACTIVE.value, balance
                )
        except UniqueViolationError:
            raise DuplicateCardNumber("Card with this number already exists", field="number")
        return await self.get_by_id(card_id)

    # ------------------ Update / Lock Methods ------------------ #

    async def lock_by_id(self, card_id: int) -> dict | None:
        sql = f"""
            SELECT {CARD_COLUMNS} FROM cards c JOIN users u ON u.id = c.user_id
            WHERE c.id = $1 FOR UPDATE OF c;
        """
        return _to_card(await self._fetchrow(sql, card_id))

    async def lock_for_owner(self, card_ids: Sequence[int], owner_id: int) -> list[dict]:
        """Lock the owner's cards among `card_ids` in ascending id order."""
        sql = f"""
            SELECT {CARD_COLUMNS} FROM cards c JOIN users u ON u.id = c.user_id
            WHERE c.id = ANY($1::bigint[]) AND c.user_id = $2
            ORDER BY c.id
            FOR UPDATE OF c;
        """
        rows = await self._fetch(sql, sorted(set(card_ids)), owner_id)
        return [_to_card(r) for r in rows]

    async def save(self, card: dict) -> dict:
        sql = """
            UPDATE cards SET balance = $2, status = $3, updated_at = now()
            WHERE id = $1;
        """
        await self._execute(sql, card["id"], card["balance"], card["status"].value)
        return card

    async def save_pair(self, first: dict, second: dict) -> None:
        sql = "UPDATE cards SET balance = $2, updated_at = now() WHERE id = $1;"
        async with translate_storage_errors("save_pair"):
            await self.conn.executemany(
                sql, [(first["id"], first["balance"]), (second["id"], second["balance"])]
            )

    async def delete(self, card_id: int) -> None:
        await self._execute("DELETE FROM cards WHERE id = $1;", card_id)
