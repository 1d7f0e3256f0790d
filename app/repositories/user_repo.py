from typing import Optional

from app.repositories.base_repo import BaseRepository


class UserRepository(BaseRepository):
    """Read-only view of users; accounts are managed elsewhere."""

    async def get_by_id(self, user_id: int) -> Optional[dict]:
        sql = "SELECT id, full_name, email, role, is_active FROM users WHERE id = $1;"
        return await self._fetchrow(sql, user_id)

    async def exists(self, user_id: int) -> bool:
        sql = "SELECT EXISTS(SELECT 1 FROM users WHERE id = $1);"
        return bool(await self._fetchval(sql, user_id))
