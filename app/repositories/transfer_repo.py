from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from app.repositories.base_repo import BaseRepository


class TransferRepository(BaseRepository):
    """Append-only transfer log. The bigserial id is the transaction id."""

    async def create_transfer(
        self,
        owner_id: int,
        from_card_id: int,
        to_card_id: int,
        from_masked: str,
        to_masked: str,
        amount: Decimal,
        description: Optional[str] = None,
        status: str = "COMPLETED",
        created_at: Optional[datetime] = None,
    ) -> dict:
        sql = """
            INSERT INTO card_transfers
            (owner_id, from_card_id, to_card_id, from_masked, to_masked, amount, description, status, created_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            RETURNING *;
        """
        created_at = created_at or datetime.now(timezone.utc)
        rec = await self._fetchrow(
            sql, owner_id, from_card_id, to_card_id, from_masked, to_masked,
            amount, description, status, created_at,
        )
        if not rec:
            raise RuntimeError("Failed to insert transfer record.")
        return rec

    async def list_for_owner(self, owner_id: int, limit: int, offset: int) -> tuple[list[dict], int]:
        count_sql = "SELECT COUNT(*) FROM card_transfers WHERE owner_id = $1;"
        page_sql = """
            SELECT * FROM card_transfers
            WHERE owner_id = $1
            ORDER BY id DESC
            LIMIT $2 OFFSET $3;
        """
        async with self.transaction(isolation="repeatable_read", readonly=True):
            total = await self._fetchval(count_sql, owner_id)
            rows = await self._fetch(page_sql, owner_id, limit, offset)
        return rows, int(total or 0)
