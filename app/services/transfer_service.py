# app/services/transfer_service.py

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from app.core.card_rules import (
    MAX_BALANCE,
    MAX_TRANSFER_AMOUNT,
    has_cent_precision,
    is_expired,
    mask_card_number,
    to_amount,
)
from app.core.exceptions import (
    AmountTooLarge,
    CardExpired,
    CardNotFound,
    DestinationNotActive,
    InsufficientFunds,
    InvalidAmount,
    SameCardTransfer,
    SourceNotActive,
)
from app.db.models.card_model import CardStatus
from app.db.models.transfer_model import TransferStatus
from app.repositories.card_repo import CardRepository
from app.repositories.transfer_repo import TransferRepository
from app.services.paging import build_page, normalize_paging

logger = logging.getLogger(__name__)


class TransferService:
    def __init__(self, card_repo: CardRepository, transfer_repo: TransferRepository):
        self.card_repo = card_repo
        self.transfer_repo = transfer_repo

    async def transfer(
        self,
        from_card_id: int,
        to_card_id: int,
        amount,
        owner_id: int,
        description: Optional[str] = None,
    ) -> dict:
        """Move `amount` between two cards of the same owner.

        Both rows are locked in ascending id order inside one transaction;
        the two balance writes and the log insert commit together or not at all.
        Checks run in a fixed order: ownership, same card, card status,
        amount bounds, balance.
        """
        amount = to_amount(amount)

        async with self.card_repo.transaction():
            locked = await self.card_repo.lock_for_owner([from_card_id, to_card_id], owner_id)
            cards = {card["id"]: card for card in locked}

            from_card = cards.get(from_card_id)
            if from_card is None:
                raise CardNotFound("Source card not found or access denied", card_id=from_card_id)
            to_card = cards.get(to_card_id)
            if to_card is None:
                raise CardNotFound("Destination card not found or access denied", card_id=to_card_id)

            if from_card_id == to_card_id:
                raise SameCardTransfer("Cannot transfer to the same card", card_id=from_card_id)

            self._validate_status(from_card, to_card, date.today())
            self._validate_amount(amount)

            if from_card["balance"] < amount:
                raise InsufficientFunds(
                    f"Insufficient funds. Available: {from_card['balance']}",
                    available=from_card["balance"],
                    requested=amount,
                )
            if to_card["balance"] + amount > MAX_BALANCE:
                raise InvalidAmount(
                    "Transfer would push the destination balance past the storable maximum",
                    field="amount", value=amount, card_id=to_card_id, limit=MAX_BALANCE,
                )

            from_card["balance"] -= amount
            to_card["balance"] += amount
            await self.card_repo.save_pair(from_card, to_card)

            record = await self.transfer_repo.create_transfer(
                owner_id=owner_id,
                from_card_id=from_card_id,
                to_card_id=to_card_id,
                from_masked=mask_card_number(from_card["number"]),
                to_masked=mask_card_number(to_card["number"]),
                amount=amount,
                description=description,
                status=TransferStatus.COMPLETED.value,
            )

        logger.info(
            "Transfer %s completed: %s -> %s, amount=%s",
            record["id"], record["from_masked"], record["to_masked"], amount,
        )
        return self._to_result(record)

    async def get_transfer_history(self, owner_id: int, page: Optional[int] = None,
                                   size: Optional[int] = None) -> dict:
        page, size = normalize_paging(page, size)
        rows, total = await self.transfer_repo.list_for_owner(owner_id, limit=size, offset=page * size)
        return build_page([self._to_result(r) for r in rows], total, page, size)

    # ------------------ Validation ------------------ #

    @staticmethod
    def _validate_amount(amount: Decimal) -> None:
        if amount <= 0:
            raise InvalidAmount("Transfer amount must be positive", field="amount", value=amount)
        if amount > MAX_TRANSFER_AMOUNT:
            raise AmountTooLarge(
                f"Transfer amount cannot exceed {MAX_TRANSFER_AMOUNT:,}",
                field="amount", value=amount, limit=MAX_TRANSFER_AMOUNT,
            )
        if not has_cent_precision(amount):
            raise InvalidAmount("Transfer amount must have at most two decimal places", field="amount", value=amount)

    @staticmethod
    def _validate_status(from_card: dict, to_card: dict, today: date) -> None:
        if from_card["status"] is not CardStatus.ACTIVE:
            raise SourceNotActive(
                f"Source card is not active. Current status: {from_card['status'].value}",
                card_id=from_card["id"], status=from_card["status"],
            )
        if to_card["status"] is not CardStatus.ACTIVE:
            raise DestinationNotActive(
                f"Destination card is not active. Current status: {to_card['status'].value}",
                card_id=to_card["id"], status=to_card["status"],
            )
        if is_expired(from_card["expiry_date"], today):
            raise CardExpired("Source card is expired", card_id=from_card["id"], side="source")
        if is_expired(to_card["expiry_date"], today):
            raise CardExpired("Destination card is expired", card_id=to_card["id"], side="destination")

    @staticmethod
    def _to_result(record: dict) -> dict:
        return {
            "transaction_id": record["id"],
            "from_masked": record["from_masked"],
            "to_masked": record["to_masked"],
            "amount": record["amount"],
            "description": record["description"],
            "timestamp": record["created_at"],
            "status": record["status"],
        }
