"""create users, shifts and shift_overlaps

Revision ID: 5a1e7c3d9b20
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '5a1e7c3d9b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('color', sa.String(length=16), nullable=False, server_default='#9ca3af'),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='USER'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'shifts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('selected_device', sa.String(length=32), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('start_time < end_time', name='ck_shifts_start_before_end'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_shifts_user_id'), 'shifts', ['user_id'], unique=False)
    op.create_index(op.f('ix_shifts_start_time'), 'shifts', ['start_time'], unique=False)
    op.create_index(op.f('ix_shifts_end_time'), 'shifts', ['end_time'], unique=False)
    op.create_index('ix_shifts_device_start', 'shifts', ['selected_device', 'start_time'], unique=False)

    op.create_table(
        'shift_overlaps',
        sa.Column('shift_id', sa.Integer(), nullable=False),
        sa.Column('peer_shift_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['shift_id'], ['shifts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['peer_shift_id'], ['shifts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('shift_id', 'peer_shift_id'),
    )
    op.create_index(op.f('ix_shift_overlaps_peer_shift_id'), 'shift_overlaps', ['peer_shift_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_shift_overlaps_peer_shift_id'), table_name='shift_overlaps')
    op.drop_table('shift_overlaps')

    op.drop_index('ix_shifts_device_start', table_name='shifts')
    op.drop_index(op.f('ix_shifts_end_time'), table_name='shifts')
    op.drop_index(op.f('ix_shifts_start_time'), table_name='shifts')
    op.drop_index(op.f('ix_shifts_user_id'), table_name='shifts')
    op.drop_table('shifts')

    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
