from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.v1.deps import get_card_query_service, get_card_service, require_admin
from app.db.models.card_model import CardStatus
from app.schemas.card_schema import CardCreateIn, CardOut, CardUpdateIn, PageOut
from app.services.card_query_service import CardQueryService
from app.services.card_service import CardService

router = APIRouter(
    prefix="/api/v1/admin/cards",
    tags=["admin-cards"],
    dependencies=[Depends(require_admin)],
)


@router.post("/", response_model=CardOut, status_code=status.HTTP_201_CREATED)
async def create_card(body: CardCreateIn, card_service: CardService = Depends(get_card_service)):
    return await card_service.create_card(
        number=body.number,
        expiry_date=body.expiry_date,
        owner_id=body.owner_id,
        initial_balance=body.initial_balance,
    )


@router.get("/", response_model=PageOut[CardOut])
async def list_cards(
        owner_id: Optional[int] = Query(None),
        card_status: Optional[CardStatus] = Query(None, alias="status"),
        search: Optional[str] = Query(None, max_length=32),
        page: int = Query(0),
        size: int = Query(10),
        sort_by: str = Query("id"),
        sort_direction: str = Query("desc"),
        query_service: CardQueryService = Depends(get_card_query_service),
):
    return await query_service.list_cards(
        owner_id=owner_id,
        status=card_status,
        number_fragment=search,
        page=page,
        size=size,
        sort_field=sort_by,
        sort_direction=sort_direction,
    )


@router.get("/all", response_model=List[CardOut])
async def list_all_cards(card_service: CardService = Depends(get_card_service)):
    return await card_service.list_all_cards()


@router.get("/status/{card_status}", response_model=List[CardOut])
async def list_cards_by_status(card_status: str, card_service: CardService = Depends(get_card_service)):
    return await card_service.list_cards_by_status(card_status)


@router.get("/{card_id}", response_model=CardOut)
async def get_card(card_id: int, card_service: CardService = Depends(get_card_service)):
    return await card_service.get_card(card_id)


@router.put("/{card_id}", response_model=CardOut)
async def update_card(card_id: int, body: CardUpdateIn, card_service: CardService = Depends(get_card_service)):
    return await card_service.update_card(card_id, new_balance=body.balance, new_status=body.status)


@router.post("/{card_id}/block", response_model=CardOut)
async def block_card(card_id: int, card_service: CardService = Depends(get_card_service)):
    return await card_service.block_card(card_id)


@router.post("/{card_id}/activate", response_model=CardOut)
async def activate_card(card_id: int, card_service: CardService = Depends(get_card_service)):
    return await card_service.activate_card(card_id)


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(card_id: int, card_service: CardService = Depends(get_card_service)):
    await card_service.delete_card(card_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
