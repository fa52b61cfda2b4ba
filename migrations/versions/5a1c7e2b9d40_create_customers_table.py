"""create_customers_table

Revision ID: 5a1c7e2b9d40
Revises:
Create Date: 2025-11-10 14:02:11.418236

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5a1c7e2b9d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


gender_enum = sa.Enum('MALE', 'FEMALE', name='gender')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('gender', gender_enum, nullable=False),
        sa.Column('roles', sa.JSON(), nullable=False),
        sa.Column('profile_image_id', sa.String(length=36), nullable=True),
        sa.CheckConstraint('age >= 0', name='customer_age_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('profile_image_id', name='customers_profile_image_id_unique'),
    )
    # Email uniqueness backs the service's check-then-insert
    op.create_index('ix_customers_email', 'customers', ['email'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_customers_email', table_name='customers')
    op.drop_table('customers')
    gender_enum.drop(op.get_bind(), checkfirst=True)
