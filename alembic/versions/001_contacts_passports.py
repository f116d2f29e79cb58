"""Contacts and passports tables

Revision ID: 001_contacts_passports
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001_contacts_passports'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create contacts and the one-to-one passports table."""
    op.create_table('contacts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('first_name', sa.Text(), nullable=True),
        sa.Column('last_name', sa.Text(), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    # contact_id is both primary key and foreign key: one passport per contact
    op.create_table('passports',
        sa.Column('contact_id', sa.Integer(), nullable=False),
        sa.Column('passport_number', sa.Text(), nullable=True),
        sa.Column('surname', sa.Text(), nullable=True),
        sa.Column('given_names', sa.Text(), nullable=True),
        sa.Column('sex', sa.Text(), nullable=True),
        sa.Column('date_of_birth', sa.Text(), nullable=True),
        sa.Column('place_of_birth', sa.Text(), nullable=True),
        sa.Column('nationality', sa.Text(), nullable=True),
        sa.Column('date_of_issue', sa.Text(), nullable=True),
        sa.Column('date_of_expiration', sa.Text(), nullable=True),
        sa.Column('type', sa.Text(), nullable=True),
        sa.Column('issuing_country', sa.Text(), nullable=True),
        sa.Column('authority', sa.Text(), nullable=True),
        sa.Column('photo', sa.LargeBinary(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('contact_id'),
        sa.ForeignKeyConstraint(
            ['contact_id'], ['contacts.id'],
            name='fk_passport_contact',
            ondelete='CASCADE',
        ),
    )


def downgrade() -> None:
    """Drop passports, then contacts."""
    op.drop_table('passports')
    op.drop_table('contacts')
