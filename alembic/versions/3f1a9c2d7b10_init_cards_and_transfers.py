"""init users, cards and card transfers

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-19 10:12:41.508214
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role_enum = sa.Enum('USER', 'ADMIN', name='userrole')
card_status_enum = sa.Enum('ACTIVE', 'BLOCKED', 'EXPIRED', name='cardstatus')
transfer_status_enum = sa.Enum('COMPLETED', name='transferstatus')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False, unique=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', user_role_enum, nullable=False, server_default='USER'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'])

    op.create_table(
        'cards',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('card_number', sa.String(length=19), nullable=False),
        sa.Column('expiry_date', sa.Date(), nullable=False),
        sa.Column('status', card_status_enum, nullable=False, server_default='ACTIVE'),
        sa.Column('balance', sa.Numeric(precision=19, scale=2), nullable=False, server_default='0'),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('balance >= 0', name='ck_cards_balance_non_negative'),
    )
    op.create_index(op.f('ix_cards_id'), 'cards', ['id'])
    op.create_index(op.f('ix_cards_card_number'), 'cards', ['card_number'], unique=True)
    op.create_index(op.f('ix_cards_user_id'), 'cards', ['user_id'])

    op.create_table(
        'card_transfers',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('from_card_id', sa.BigInteger(), sa.ForeignKey('cards.id', ondelete='SET NULL'), nullable=True),
        sa.Column('to_card_id', sa.BigInteger(), sa.ForeignKey('cards.id', ondelete='SET NULL'), nullable=True),
        sa.Column('from_masked', sa.String(length=19), nullable=False),
        sa.Column('to_masked', sa.String(length=19), nullable=False),
        sa.Column('amount', sa.Numeric(precision=19, scale=2), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('status', transfer_status_enum, nullable=False, server_default='COMPLETED'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(op.f('ix_card_transfers_id'), 'card_transfers', ['id'])
    op.create_index(op.f('ix_card_transfers_owner_id'), 'card_transfers', ['owner_id'])


def downgrade() -> None:
    op.drop_index(op.f('ix_card_transfers_owner_id'), table_name='card_transfers')
    op.drop_index(op.f('ix_card_transfers_id'), table_name='card_transfers')
    op.drop_table('card_transfers')

    op.drop_index(op.f('ix_cards_user_id'), table_name='cards')
    op.drop_index(op.f('ix_cards_card_number'), table_name='cards')
    op.drop_index(op.f('ix_cards_id'), table_name='cards')
    op.drop_table('cards')

    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')

    transfer_status_enum.drop(op.get_bind(), checkfirst=True)
    card_status_enum.drop(op.get_bind(), checkfirst=True)
    user_role_enum.drop(op.get_bind(), checkfirst=True)
