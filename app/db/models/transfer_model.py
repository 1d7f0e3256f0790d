import enum

from sqlalchemy import BigInteger, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, func

from app.db.base import Base


class TransferStatus(str, enum.Enum):
    COMPLETED = "COMPLETED"


class CardTransfer(Base):
    """Append-only log of completed transfers; rows are never updated."""

    __tablename__ = "card_transfers"

    id = Column(BigInteger, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    from_card_id = Column(BigInteger, ForeignKey("cards.id", ondelete="SET NULL"), nullable=True)
    to_card_id = Column(BigInteger, ForeignKey("cards.id", ondelete="SET NULL"), nullable=True)
    from_masked = Column(String(19), nullable=False)
    to_masked = Column(String(19), nullable=False)
    amount = Column(Numeric(19, 2), nullable=False)
    description = Column(String(255), nullable=True)
    status = Column(
        Enum(TransferStatus, name="transferstatus", create_type=True),
        default=TransferStatus.COMPLETED,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
