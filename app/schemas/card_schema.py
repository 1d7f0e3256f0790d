# app/schemas/card_schema.py

from datetime import date
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, Field, computed_field, constr, condecimal

from app.core.card_rules import mask_card_number
from app.db.models.card_model import CardStatus

T = TypeVar("T")

NonNegativeDecimal = condecimal(ge=0, decimal_places=2)


class CardCreateIn(BaseModel):
    number: constr(pattern=r"^[0-9]{16,19}$") = Field(...)
    expiry_date: date
    owner_id: int
    initial_balance: Optional[NonNegativeDecimal] = None


class CardUpdateIn(BaseModel):
    balance: Optional[Decimal] = None
    # plain string: unknown tokens are reported as invalid_status by the service
    status: Optional[str] = None


class CardOut(BaseModel):
    id: int
    number: str
    expiry_date: date
    status: CardStatus
    balance: Decimal
    owner_id: int
    owner_display_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("owner_name", "owner_display_name")
    )

    @computed_field
    @property
    def masked_number(self) -> str:
        return mask_card_number(self.number)

    model_config = {
        "from_attributes": True
    }


class CardBalanceOut(BaseModel):
    card_id: int
    balance: Decimal


class BlockRequestIn(BaseModel):
    reason: Optional[str] = Field(None, max_length=255)


class BlockRequestOut(BaseModel):
    card_id: int
    masked_number: str
    message: str


class PageOut(BaseModel, Generic[T]):
    content: List[T]
    current_page: int
    total_pages: int
    total_elements: int
    page_size: int
    is_first: bool
    is_last: bool
