"""create_marketplace_schema

Revision ID: s1a2b3c4d5e6
Revises:
Create Date: 2026-10-17 12:00:00.000000

사용자(users), 서비스 요청(service_requests), 결제(payments) 테이블 생성.
요청당 성공 결제는 최대 1건 — 부분 유니크 인덱스로 보장.
Create users, service_requests and payments tables.
At most one succeeded payment per request, enforced by a partial unique index.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = 's1a2b3c4d5e6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # users — 고객/기술자 계정 (Client and technician accounts)
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('role', sa.String(20), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('profile_image_url', sa.Text(), nullable=True),
        sa.Column('skills', JSONB(), server_default='[]', nullable=False),
        sa.Column('is_available', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # service_requests — 서비스 요청 라이프사이클 (Request lifecycle rows)
    op.create_table(
        'service_requests',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('client_id', UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('technician_id', UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('service_type', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('quoted_price', sa.Integer(), nullable=True),
        sa.Column('technician_notes', sa.Text(), nullable=True),
        sa.Column('images', JSONB(), server_default='[]', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_service_requests_client_id', 'service_requests', ['client_id'])
    op.create_index('ix_service_requests_technician_id', 'service_requests', ['technician_id'])
    # 매칭 쿼리용 — Supports the availability query (pending, newest first)
    op.create_index('ix_service_requests_status_created', 'service_requests', ['status', 'created_at'])

    # payments — 결제 시도 (Payment attempts, amount in whole dollars)
    op.create_table(
        'payments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('service_request_id', UUID(as_uuid=True), sa.ForeignKey('service_requests.id'), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('external_ref', sa.String(255), nullable=False),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_payments_service_request_id', 'payments', ['service_request_id'])
    op.create_index(
        'uq_payments_one_succeeded',
        'payments',
        ['service_request_id'],
        unique=True,
        postgresql_where=sa.text("status = 'succeeded'"),
    )


def downgrade() -> None:
    op.drop_index('uq_payments_one_succeeded', table_name='payments')
    op.drop_index('ix_payments_service_request_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_service_requests_status_created', table_name='service_requests')
    op.drop_index('ix_service_requests_technician_id', table_name='service_requests')
    op.drop_index('ix_service_requests_client_id', table_name='service_requests')
    op.drop_table('service_requests')
    op.drop_table('users')
