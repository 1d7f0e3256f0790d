# app/core/card_rules.py

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from app.core.exceptions import InvalidAmount, InvalidStatus
from app.db.models.card_model import CardStatus

MASK_PREFIX = "**** **** **** "
CARD_NUMBER_PATTERN = re.compile(r"^[0-9]{16,19}$")
MAX_TRANSFER_AMOUNT = Decimal("1000000")
# largest value a numeric(19,2) column holds
MAX_BALANCE = Decimal("99999999999999999.99")
CENT = Decimal("0.01")


def mask_card_number(number: str) -> str:
    return MASK_PREFIX + number[-4:]


def is_expired(expiry_date: date, today: Optional[date] = None) -> bool:
    """A card is expired once the current date is past its expiry date."""
    return expiry_date < (today or date.today())


def effective_status(card: dict, today: Optional[date] = None) -> CardStatus:
    """Stored status, downgraded to EXPIRED when the expiry date has passed."""
    stored = card["status"]
    if stored is CardStatus.EXPIRED or is_expired(card["expiry_date"], today):
        return CardStatus.EXPIRED
    return stored


def with_effective_status(card: dict, today: Optional[date] = None) -> dict:
    return {**card, "status": effective_status(card, today)}


def parse_status(token: str) -> CardStatus:
    # case-sensitive on purpose: "active" is not a valid token
    for member in CardStatus:
        if member.value == token:
            return member
    valid = ", ".join(m.value for m in CardStatus)
    raise InvalidStatus(f"Invalid card status: {token}. Valid values: {valid}", field="status", value=token)


def normalize_number_fragment(fragment: Optional[str]) -> Optional[str]:
    """Keep digits only, at most the last four. Empty means no filter."""
    if fragment is None:
        return None
    digits = re.sub(r"[^0-9]", "", fragment)
    if len(digits) > 4:
        digits = digits[-4:]
    return digits or None


def to_amount(value, field: str = "amount", error=InvalidAmount) -> Decimal:
    """Floats go through str so 10.1 stays 10.1."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise error(f"Invalid {field} format", field=field, value=str(value))
    if not amount.is_finite():
        raise error(f"Invalid {field} format", field=field, value=str(value))
    return amount


def has_cent_precision(amount: Decimal) -> bool:
    """Balances are stored with two decimal places; finer amounts would be rounded away."""
    try:
        return amount == amount.quantize(CENT)
    except InvalidOperation:
        return False
