from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from app.api.v1.deps import get_card_query_service, get_card_service, get_current_user, get_transfer_service
from app.db.models.card_model import CardStatus
from app.schemas.card_schema import BlockRequestIn, BlockRequestOut, CardBalanceOut, CardOut, PageOut
from app.schemas.transfer_schema import TransferIn, TransferOut
from app.services.card_query_service import CardQueryService
from app.services.card_service import CardService
from app.services.transfer_service import TransferService

router = APIRouter(prefix="/api/v1/cards", tags=["cards"])


@router.get("/", response_model=PageOut[CardOut])
async def list_user_cards(
        card_status: Optional[CardStatus] = Query(None, alias="status"),
        search: Optional[str] = Query(None, max_length=32),
        page: int = Query(0),
        size: int = Query(10),
        sort_by: str = Query("id"),
        sort_direction: str = Query("desc"),
        current_user: Dict[str, Any] = Depends(get_current_user),
        query_service: CardQueryService = Depends(get_card_query_service),
):
    return await query_service.list_cards(
        owner_id=current_user["id"],
        status=card_status,
        number_fragment=search,
        page=page,
        size=size,
        sort_field=sort_by,
        sort_direction=sort_direction,
    )


@router.get("/active", response_model=PageOut[CardOut])
async def list_active_cards(
        page: int = Query(0),
        size: int = Query(10),
        current_user: Dict[str, Any] = Depends(get_current_user),
        query_service: CardQueryService = Depends(get_card_query_service),
):
    return await query_service.list_active_cards(current_user["id"], page=page, size=size)


@router.post("/transfer", response_model=TransferOut)
async def transfer(
        body: TransferIn,
        current_user: Dict[str, Any] = Depends(get_current_user),
        transfer_service: TransferService = Depends(get_transfer_service),
):
    return await transfer_service.transfer(
        body.from_card_id,
        body.to_card_id,
        body.amount,
        owner_id=current_user["id"],
        description=body.description,
    )


@router.get("/transfers", response_model=PageOut[TransferOut])
async def transfer_history(
        page: int = Query(0),
        size: int = Query(10),
        current_user: Dict[str, Any] = Depends(get_current_user),
        transfer_service: TransferService = Depends(get_transfer_service),
):
    return await transfer_service.get_transfer_history(current_user["id"], page=page, size=size)


@router.get("/{card_id}", response_model=CardOut)
async def get_user_card(
        card_id: int,
        current_user: Dict[str, Any] = Depends(get_current_user),
        card_service: CardService = Depends(get_card_service),
):
    return await card_service.get_card_for_owner(card_id, current_user["id"])


@router.get("/{card_id}/balance", response_model=CardBalanceOut)
async def get_card_balance(
        card_id: int,
        current_user: Dict[str, Any] = Depends(get_current_user),
        card_service: CardService = Depends(get_card_service),
):
    balance = await card_service.get_card_balance(card_id, current_user["id"])
    return CardBalanceOut(card_id=card_id, balance=balance)


@router.post("/{card_id}/block-request", response_model=BlockRequestOut)
async def request_card_block(
        card_id: int,
        body: BlockRequestIn,
        current_user: Dict[str, Any] = Depends(get_current_user),
        card_service: CardService = Depends(get_card_service),
):
    return await card_service.request_card_block(card_id, current_user["id"], body.reason)
