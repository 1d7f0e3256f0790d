from typing import Optional

from app.core.card_rules import normalize_number_fragment, with_effective_status
from app.db.models.card_model import CardStatus
from app.repositories.card_repo import SORT_COLUMNS, CardRepository
from app.services.paging import build_page, normalize_paging


class CardQueryService:
    """Read-only card listings. No locks; reads see committed rows only.

    Status filters and reported statuses are effective ones: a card past its
    expiry date is listed as EXPIRED whatever its stored status says.
    """

    def __init__(self, card_repo: CardRepository):
        self.card_repo = card_repo

    async def list_cards(
        self,
        owner_id: Optional[int] = None,
        status: Optional[CardStatus] = None,
        number_fragment: Optional[str] = None,
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort_field: Optional[str] = None,
        sort_direction: Optional[str] = None,
    ) -> dict:
        page, size = normalize_paging(page, size)
        fragment = normalize_number_fragment(number_fragment)
        sort_field = sort_field if sort_field in SORT_COLUMNS else "id"
        descending = (sort_direction or "desc").lower() != "asc"

        cards, total = await self.card_repo.search(
            owner_id=owner_id,
            status=status,
            fragment=fragment,
            limit=size,
            offset=page * size,
            sort_field=sort_field,
            descending=descending,
        )
        return build_page([with_effective_status(c) for c in cards], total, page, size)

    async def list_active_cards(self, owner_id: int, page: Optional[int] = None,
                                size: Optional[int] = None) -> dict:
        return await self.list_cards(owner_id=owner_id, status=CardStatus.ACTIVE, page=page, size=size)
