"""Initial schema: companies, users, customers, appointments, inbox

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001_initial_schema'
down_revision = None

subscription_plan = sa.Enum('STARTER', 'PRO', 'ENTERPRISE', name='subscriptionplan')
subscription_status = sa.Enum('TRIAL', 'ACTIVE', 'PAST_DUE', 'CANCELLED', name='subscriptionstatus')
role = sa.Enum('ADMIN', 'SECRETARY', name='role')
appointment_status = sa.Enum('SCHEDULED', 'COMPLETED', 'CANCELLED', 'NO_SHOW', name='appointmentstatus')
channel = sa.Enum('WHATSAPP', 'SMS', 'EMAIL', name='channel')
conversation_status = sa.Enum('OPEN', 'PENDING', 'CLOSED', name='conversationstatus')
message_direction = sa.Enum('INBOUND', 'OUTBOUND', name='messagedirection')
message_status = sa.Enum('RECEIVED', 'SENDING', 'SENT', 'FAILED', name='messagestatus')


def _company_fk():
    return sa.Column('company_id', sa.Uuid(), sa.ForeignKey('companies.id'), nullable=False, index=True)


def upgrade():
    # Tenants
    op.create_table(
        'companies',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, index=True),
        sa.Column('vat_number', sa.String(50), nullable=True),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('industry', sa.String(100), nullable=True),
        sa.Column('subscription_plan', subscription_plan, nullable=False),
        sa.Column('subscription_status', subscription_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    # Users; email is unique across every company
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _company_fk(),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('role', role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, index=True),
        sa.Column('email_verified', sa.Boolean(), nullable=False),
        sa.Column('email_verify_token', sa.String(64), nullable=True, unique=True, index=True),
        sa.Column('email_verify_expires', sa.DateTime(), nullable=True),
        sa.Column('last_verification_email_sent_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'customers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _company_fk(),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone_e164', sa.String(32), nullable=False, index=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('internal_notes', sa.String(), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(32), nullable=True),
        sa.Column('fiscal_code', sa.String(32), nullable=True),
        sa.Column('vat_number', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, index=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'appointments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _company_fk(),
        sa.Column('customer_id', sa.Uuid(), sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('start_time', sa.DateTime(), nullable=False, index=True),
        sa.Column('end_time', sa.DateTime(), nullable=False, index=True),
        sa.Column('service_type', sa.String(255), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('status', appointment_status, nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    # Inbox
    op.create_table(
        'conversations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _company_fk(),
        sa.Column('customer_id', sa.Uuid(), sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('assignee_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('channel', channel, nullable=False),
        sa.Column('status', conversation_status, nullable=False, index=True),
        sa.Column('last_message_at', sa.DateTime(), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'messages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _company_fk(),
        sa.Column('conversation_id', sa.Uuid(), sa.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('customer_id', sa.Uuid(), sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('direction', message_direction, nullable=False),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('status', message_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, index=True),
    )


def downgrade():
    op.drop_table('messages')
    op.drop_table('conversations')
    op.drop_table('appointments')
    op.drop_table('customers')
    op.drop_table('users')
    op.drop_table('companies')

    bind = op.get_bind()
    for enum_type in (
        message_status, message_direction, conversation_status, channel,
        appointment_status, role, subscription_status, subscription_plan,
    ):
        enum_type.drop(bind, checkfirst=True)
