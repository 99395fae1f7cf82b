"""initial marketplace schema

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '20261019_01'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def _catalog_refs(ondelete: str = 'CASCADE') -> list:
    return [
        sa.Column('service_id', sa.String(length=36), sa.ForeignKey('services.id', ondelete=ondelete), nullable=True),
        sa.Column('sub_service_id', sa.String(length=36), sa.ForeignKey('sub_services.id', ondelete=ondelete), nullable=True),
        sa.Column('specialty_id', sa.String(length=36), sa.ForeignKey('specialties.id', ondelete=ondelete), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('role', sa.Enum('client', 'provider', 'admin', name='userrole', native_enum=False), nullable=False),
        sa.Column('avatar_url', sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)

    op.create_table(
        'provider_settings',
        sa.Column('provider_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('service_radius_km', sa.Float(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('neighborhood', sa.String(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'services',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_services_name', 'services', ['name'])
    op.create_table(
        'sub_services',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('service_id', sa.String(length=36), sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_sub_services_service_id', 'sub_services', ['service_id'])
    op.create_table(
        'specialties',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('sub_service_id', sa.String(length=36), sa.ForeignKey('sub_services.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_specialties_sub_service_id', 'specialties', ['sub_service_id'])

    op.create_table(
        'service_questions',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('question', sa.Text(), nullable=False),
        *_catalog_refs(),
        *_timestamps(),
    )
    op.create_table(
        'question_options',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('question_id', sa.String(length=36), sa.ForeignKey('service_questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('option_text', sa.String(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_question_options_question_id', 'question_options', ['question_id'])
    op.create_table(
        'service_items',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column(
            'type',
            sa.Enum('quantity', 'square_meter', 'linear_meter', name='serviceitemtype', native_enum=False),
            nullable=False,
        ),
        *_catalog_refs(),
        *_timestamps(),
    )

    op.create_table(
        'provider_services',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('provider_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        *_catalog_refs(),
        sa.Column('base_price', sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_provider_services_provider_id', 'provider_services', ['provider_id'])
    op.create_index('ix_provider_services_specialty_id', 'provider_services', ['specialty_id'])
    op.create_index('ix_provider_services_sub_service_id', 'provider_services', ['sub_service_id'])
    op.create_index('ix_provider_services_service_id', 'provider_services', ['service_id'])
    op.create_table(
        'provider_item_prices',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('provider_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('item_id', sa.String(length=36), sa.ForeignKey('service_items.id', ondelete='CASCADE'), nullable=False),
        sa.Column('price_per_unit', sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('provider_id', 'item_id', name='uq_provider_item_price'),
    )
    op.create_table(
        'provider_portfolio',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('provider_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('image_url', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_provider_portfolio_provider_id', 'provider_portfolio', ['provider_id'])

    op.create_table(
        'quotes',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('client_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('provider_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        *_catalog_refs(ondelete='SET NULL'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('street', sa.String(), nullable=True),
        sa.Column('number', sa.String(), nullable=True),
        sa.Column('complement', sa.String(), nullable=True),
        sa.Column('neighborhood', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('zip_code', sa.String(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'accepted', 'completed', 'cancelled', name='quotestatus', native_enum=False),
            nullable=False,
        ),
        sa.Column('total_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_quotes_provider_id', 'quotes', ['provider_id'])
    op.create_index('ix_quotes_client_id', 'quotes', ['client_id'])
    op.create_table(
        'quote_providers',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('quote_id', sa.String(length=36), sa.ForeignKey('quotes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('provider_id', sa.String(length=36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'status',
            sa.Enum('pending', 'accepted', 'rejected', name='quoteproviderstatus', native_enum=False),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint('quote_id', 'provider_id', name='uq_quote_provider'),
    )


def downgrade() -> None:
    for table in (
        'quote_providers',
        'quotes',
        'provider_portfolio',
        'provider_item_prices',
        'provider_services',
        'service_items',
        'question_options',
        'service_questions',
        'specialties',
        'sub_services',
        'services',
        'provider_settings',
        'profiles',
    ):
        op.drop_table(table)
