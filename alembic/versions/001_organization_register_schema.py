"""Organization register schema: organization, organization_text, organization_web_page, organization_address

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the organization tables with their indexes."""

    # Native UUID on PostgreSQL, CHAR(32) elsewhere
    uuid_type = sa.Uuid()

    # Create organization table
    op.create_table(
        'organization',
        sa.Column('organization_id', uuid_type, primary_key=True),
        sa.Column('parent_organization_id', uuid_type, nullable=True),
        sa.Column('business_id', sa.Text(), nullable=False),
        sa.Column('oid', sa.Text(), nullable=True),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('municipality_code', sa.Text(), nullable=True),
        sa.Column('valid_from', sa.DateTime(timezone=True), nullable=True),
        sa.Column('valid_to', sa.DateTime(timezone=True), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('can_be_transferred_to_fsc', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('can_be_responsible_dept_for_service', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('phone_number', sa.Text(), nullable=True),
        sa.Column('call_charge_type', sa.Text(), nullable=True),
        sa.Column('email_address', sa.Text(), nullable=True),
        sa.Column('use_visiting_address_as_postal_address', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['parent_organization_id'], ['organization.organization_id']),
    )
    op.create_index('idx_organization_parent', 'organization', ['parent_organization_id'])
    op.create_index('idx_organization_business_id', 'organization', ['business_id'])

    # Create organization_text table
    op.create_table(
        'organization_text',
        sa.Column('text_id', uuid_type, primary_key=True),
        sa.Column('organization_id', uuid_type, nullable=False),
        sa.Column('kind', sa.Text(), nullable=False),
        sa.Column('language_code', sa.Text(), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['organization_id'], ['organization.organization_id'], ondelete='CASCADE'),
    )
    op.create_index('idx_organization_text_org', 'organization_text', ['organization_id', 'kind'])

    # Create organization_web_page table
    op.create_table(
        'organization_web_page',
        sa.Column('web_page_id', uuid_type, primary_key=True),
        sa.Column('organization_id', uuid_type, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['organization_id'], ['organization.organization_id'], ondelete='CASCADE'),
    )

    # Create organization_address table
    op.create_table(
        'organization_address',
        sa.Column('address_id', uuid_type, primary_key=True),
        sa.Column('organization_id', uuid_type, nullable=False),
        sa.Column('kind', sa.Text(), nullable=False),
        sa.Column('postal_code', sa.Text(), nullable=True),
        sa.Column('post_office_box', sa.Text(), nullable=True),
        sa.Column('street_addresses', sa.JSON(), nullable=False),
        sa.Column('postal_districts', sa.JSON(), nullable=False),
        sa.Column('qualifiers', sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(['organization_id'], ['organization.organization_id'], ondelete='CASCADE'),
    )
    op.create_index('idx_organization_address_org', 'organization_address', ['organization_id', 'kind'])


def downgrade() -> None:
    """Drop all tables in reverse order."""
    op.drop_index('idx_organization_address_org', table_name='organization_address')
    op.drop_table('organization_address')

    op.drop_table('organization_web_page')

    op.drop_index('idx_organization_text_org', table_name='organization_text')
    op.drop_table('organization_text')

    op.drop_index('idx_organization_business_id', table_name='organization')
    op.drop_index('idx_organization_parent', table_name='organization')
    op.drop_table('organization')
