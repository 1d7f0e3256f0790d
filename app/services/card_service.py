# app/services/card_service.py

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from app.core.card_rules import (
    CARD_NUMBER_PATTERN,
    MAX_BALANCE,
    has_cent_precision,
    is_expired,
    mask_card_number,
    parse_status,
    to_amount,
    with_effective_status,
)
from app.core.exceptions import (
    CardNotFound,
    DuplicateCardNumber,
    InvalidBalance,
    InvalidCardNumber,
    InvalidExpiry,
    InvalidStateTransition,
    OwnerNotFound,
)
from app.db.models.card_model import CardStatus
from app.repositories.card_repo import CardRepository
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class CardService:
    """Card lifecycle: creation, the ACTIVE/BLOCKED/EXPIRED state machine, deletion.

    Every mutation locks the single card row it touches for the length of
    one storage transaction, so it never applies on top of a stale balance
    written by a concurrent transfer.
    """

    def __init__(self, card_repo: CardRepository, user_repo: UserRepository):
        self.card_repo = card_repo
        self.user_repo = user_repo

    # ------------------ Creation ------------------ #

    async def create_card(
        self,
        number: str,
        expiry_date: date,
        owner_id: int,
        initial_balance: Optional[Decimal] = None,
    ) -> dict:
        if not CARD_NUMBER_PATTERN.match(number or ""):
            raise InvalidCardNumber("Card number must be 16 to 19 digits", field="number")

        if await self.card_repo.exists_by_number(number):
            raise DuplicateCardNumber(
                f"Card with this number already exists: {mask_card_number(number)}", field="number"
            )

        if is_expired(expiry_date):
            raise InvalidExpiry(
                f"Expiry date cannot be in the past: {expiry_date}", field="expiry_date", value=expiry_date
            )

        if not await self.user_repo.exists(owner_id):
            raise OwnerNotFound(f"User not found with id: {owner_id}", owner_id=owner_id)

        balance = Decimal("0") if initial_balance is None else to_amount(
            initial_balance, field="initial_balance", error=InvalidBalance
        )
        self._validate_balance(balance, field="initial_balance")

        card = await self.card_repo.create_card(owner_id, number, expiry_date, balance)
        logger.info("Card %s created for user %s (%s)", card["id"], owner_id, mask_card_number(number))
        return with_effective_status(card)

    # ------------------ Retrieval ------------------ #

    async def get_card(self, card_id: int) -> dict:
        card = await self.card_repo.get_by_id(card_id)
        if card is None:
            raise CardNotFound(f"Card not found with id: {card_id}", card_id=card_id)
        return with_effective_status(card)

    async def get_card_for_owner(self, card_id: int, owner_id: int) -> dict:
        # a foreign card is reported exactly like a missing one
        card = await self.card_repo.get_for_owner(card_id, owner_id)
        if card is None:
            raise CardNotFound("Card not found or access denied", card_id=card_id)
        return with_effective_status(card)

    async def get_card_balance(self, card_id: int, owner_id: int) -> Decimal:
        card = await self.get_card_for_owner(card_id, owner_id)
        return card["balance"]

    async def list_all_cards(self) -> list[dict]:
        return [with_effective_status(c) for c in await self.card_repo.list_all()]

    async def list_cards_by_status(self, status: str) -> list[dict]:
        cards = await self.card_repo.list_by_status(parse_status(status))
        return [with_effective_status(c) for c in cards]

    # ------------------ State Machine ------------------ #

    async def update_card(
        self,
        card_id: int,
        new_balance: Optional[Decimal] = None,
        new_status: Optional[str] = None,
    ) -> dict:
        async with self.card_repo.transaction():
            card = await self._lock(card_id)

            if new_balance is not None:
                balance = to_amount(new_balance, field="balance", error=InvalidBalance)
                self._validate_balance(balance, field="balance")
                card["balance"] = balance

            if new_status is not None:
                target = new_status if isinstance(new_status, CardStatus) else parse_status(new_status)
                self._check_transition(card, target)
                card["status"] = target

            await self.card_repo.save(card)

        logger.info("Card %s updated: status=%s", card_id, card["status"].value)
        return with_effective_status(card)

    async def block_card(self, card_id: int) -> dict:
        async with self.card_repo.transaction():
            card = await self._lock(card_id)
            self._check_transition(card, CardStatus.BLOCKED)
            card["status"] = CardStatus.BLOCKED
            await self.card_repo.save(card)

        logger.info("Card %s blocked", card_id)
        return with_effective_status(card)

    async def activate_card(self, card_id: int) -> dict:
        async with self.card_repo.transaction():
            card = await self._lock(card_id)
            self._check_transition(card, CardStatus.ACTIVE)
            card["status"] = CardStatus.ACTIVE
            await self.card_repo.save(card)

        logger.info("Card %s activated", card_id)
        return with_effective_status(card)

    async def delete_card(self, card_id: int) -> None:
        async with self.card_repo.transaction():
            await self._lock(card_id)
            await self.card_repo.delete(card_id)

        logger.info("Card %s deleted", card_id)

    async def request_card_block(self, card_id: int, owner_id: int, reason: Optional[str] = None) -> dict:
        """Record a holder's request; the block itself is an administrator action."""
        card = await self.get_card_for_owner(card_id, owner_id)
        logger.warning(
            "Block requested by user %s for card %s (%s): %s",
            owner_id, card_id, mask_card_number(card["number"]), reason or "no reason given",
        )
        return {
            "card_id": card_id,
            "masked_number": mask_card_number(card["number"]),
            "message": "Block request submitted",
        }

    # ------------------ Helpers ------------------ #

    async def _lock(self, card_id: int) -> dict:
        card = await self.card_repo.lock_by_id(card_id)
        if card is None:
            raise CardNotFound(f"Card not found with id: {card_id}", card_id=card_id)
        return card

    @staticmethod
    def _validate_balance(balance: Decimal, field: str) -> None:
        if balance < 0:
            raise InvalidBalance(f"Balance cannot be negative: {balance}", field=field, value=balance)
        if balance > MAX_BALANCE:
            raise InvalidBalance(
                f"Balance cannot exceed {MAX_BALANCE:,}", field=field, value=balance, limit=MAX_BALANCE
            )
        if not has_cent_precision(balance):
            raise InvalidBalance(f"Balance must have at most two decimal places: {balance}", field=field)

    @staticmethod
    def _check_transition(card: dict, target: CardStatus) -> None:
        current = card["status"]
        if current is CardStatus.EXPIRED and target is not CardStatus.EXPIRED:
            raise InvalidStateTransition(
                f"Card {card['id']} is expired and cannot become {target.value}",
                current=current, target=target,
            )
        if target is CardStatus.ACTIVE and is_expired(card["expiry_date"]):
            raise InvalidStateTransition(
                f"Cannot activate expired card. Expiry date: {card['expiry_date']}",
                current=current, target=target, expiry_date=card["expiry_date"],
            )
