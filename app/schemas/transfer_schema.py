from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class TransferIn(BaseModel):
    from_card_id: int
    to_card_id: int
    # bounds and precision are enforced by the transfer engine
    amount: Decimal = Field(...)
    description: Optional[str] = Field(None, max_length=255)


class TransferOut(BaseModel):
    transaction_id: int
    from_masked: str
    to_masked: str
    amount: Decimal
    description: Optional[str]
    timestamp: datetime
    status: str

    model_config = {
        "from_attributes": True
    }
