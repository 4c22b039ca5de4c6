"""create scheduling tables

Revision ID: a1c4e9d2b7f3
Revises:
Create Date: 2026-10-18 10:12:41.503217

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a1c4e9d2b7f3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. businesses
    op.create_table(
        'businesses',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('timezone', sa.String(50), nullable=True),
        sa.Column('opening_hours', sa.JSON, nullable=True),
        sa.Column('auto_confirm_appointments', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )

    # 2. business_special_hours (date overrides)
    op.create_table(
        'business_special_hours',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('business_id', sa.Uuid(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('is_closed', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('open_time', sa.String(5), nullable=True),
        sa.Column('close_time', sa.String(5), nullable=True),
        sa.Column('breaks', sa.JSON, nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('business_id', 'date', name='uq_special_hours_business_date')
    )
    op.create_index('ix_business_special_hours_business_id', 'business_special_hours', ['business_id'])

    # 3. services
    op.create_table(
        'services',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('business_id', sa.Uuid(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('duration_minutes', sa.Integer, nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean, nullable=True, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('duration_minutes > 0', name='ck_services_duration_positive'),
        sa.CheckConstraint('price >= 0', name='ck_services_price_non_negative')
    )
    op.create_index('ix_services_business_id', 'services', ['business_id'])
    op.create_index('ix_services_is_active', 'services', ['is_active'])

    # 4. appointments
    op.create_table(
        'appointments',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('business_id', sa.Uuid(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('client_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('service_id', sa.Uuid(as_uuid=True), sa.ForeignKey('services.id'), nullable=True),
        sa.Column('appointment_date', sa.Date, nullable=False),
        sa.Column('start_time', sa.Time, nullable=False),
        sa.Column('end_time', sa.Time, nullable=False),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('used_loyalty_redemption', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancellation_reason', sa.Text, nullable=True)
    )
    op.create_index('idx_appointments_business_date_status', 'appointments', ['business_id', 'appointment_date', 'status'])
    op.create_index('ix_appointments_client_id', 'appointments', ['client_id'])

    # 5. appointment_services (multi-service bookings)
    op.create_table(
        'appointment_services',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('appointment_id', sa.Uuid(as_uuid=True), sa.ForeignKey('appointments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_id', sa.Uuid(as_uuid=True), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('position', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('appointment_id', 'service_id', name='uq_appointment_services_pair')
    )
    op.create_index('ix_appointment_services_appointment_id', 'appointment_services', ['appointment_id'])

    # 6. booking_day_locks (per business/day write serialization)
    op.create_table(
        'booking_day_locks',
        sa.Column('business_id', sa.Uuid(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('lock_date', sa.Date, nullable=False),
        sa.Column('version', sa.Integer, nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('business_id', 'lock_date', name='pk_booking_day_locks')
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('booking_day_locks')
    op.drop_index('ix_appointment_services_appointment_id', table_name='appointment_services')
    op.drop_table('appointment_services')
    op.drop_index('ix_appointments_client_id', table_name='appointments')
    op.drop_index('idx_appointments_business_date_status', table_name='appointments')
    op.drop_table('appointments')
    op.drop_index('ix_services_is_active', table_name='services')
    op.drop_index('ix_services_business_id', table_name='services')
    op.drop_table('services')
    op.drop_index('ix_business_special_hours_business_id', table_name='business_special_hours')
    op.drop_table('business_special_hours')
    op.drop_table('businesses')
