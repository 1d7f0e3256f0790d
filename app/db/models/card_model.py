import enum

from sqlalchemy import (
    BigInteger, CheckConstraint, Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, func,
)
from sqlalchemy.orm import relationship

from app.db.base import Base


class CardStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"
    EXPIRED = "EXPIRED"


class Card(Base):
    __tablename__ = "cards"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_cards_balance_non_negative"),
    )

    id = Column(BigInteger, primary_key=True, index=True)
    card_number = Column(String(19), unique=True, nullable=False, index=True)
    expiry_date = Column(Date, nullable=False)
    status = Column(
        Enum(CardStatus, name="cardstatus", create_type=True),
        default=CardStatus.ACTIVE,
        nullable=False,
    )
    balance = Column(Numeric(19, 2), default=0, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="cards")

    def __repr__(self):
        return f"<Card(id={self.id}, status={self.status}, balance={self.balance})>"
